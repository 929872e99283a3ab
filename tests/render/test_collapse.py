"""Tests for depth- and focus-aware tree collapsing."""

from __future__ import annotations

import pytest

from archmap.config import ConfigError
from archmap.render.collapse import collapse_tree, focus_chain, normalize_focus
from archmap.render.tree import format_stub
from archmap.tree import DirNode, StubNode, SubtreeStats, build_tree, find_node


def _dir(root: DirNode, path: str) -> DirNode:
    node = find_node(root, path)
    assert isinstance(node, DirNode)
    return node


def test_directory_at_depth_limit_collapses_to_stub() -> None:
    collapsed, _ = collapse_tree(build_tree(["a/b/c/file1.ts"]), depth=2)

    b = _dir(collapsed, "a/b")
    assert len(b.children) == 1
    stub = b.children[0]
    assert isinstance(stub, StubNode)
    assert format_stub(stub.stats) == "… (1 file, 1 subdir)"


def test_stub_reports_hidden_risk() -> None:
    tree = build_tree(["src/feature/a.ts", "src/feature/b.ts", "README.md"])

    collapsed, totals = collapse_tree(tree, risky_files={"src/feature/a.ts"}, depth=1)

    src = _dir(collapsed, "src")
    stub = src.children[0]
    assert isinstance(stub, StubNode)
    assert format_stub(stub.stats) == "… (2 files, 1 subdir, (!) 1 signal hidden)"
    assert totals == SubtreeStats(files=3, subdirs=2, risky=1)


def test_focus_keeps_the_path_expanded() -> None:
    tree = build_tree(["src/feature/a.ts", "src/other/b.ts"])

    collapsed, _ = collapse_tree(tree, depth=1, focus_paths=["./src/feature/a.ts"])

    src = _dir(collapsed, "src")
    assert [child.name for child in src.children] == ["feature", "other"]
    feature = _dir(collapsed, "src/feature")
    assert [child.name for child in feature.children] == ["a.ts"]
    other = _dir(collapsed, "src/other")
    assert isinstance(other.children[0], StubNode)


def test_depth_zero_collapses_every_top_level_directory() -> None:
    collapsed, _ = collapse_tree(build_tree(["lib/x.py", "setup.py"]), depth=0)

    lib = _dir(collapsed, "lib")
    assert isinstance(lib.children[0], StubNode)
    assert collapsed.children[1].name == "setup.py"


def test_no_depth_keeps_the_full_tree() -> None:
    tree = build_tree(["a/b/c/d/e.py"])

    collapsed, _ = collapse_tree(tree)

    assert collapsed == tree


def test_unknown_focus_is_rejected() -> None:
    with pytest.raises(ConfigError, match="Focus target not found"):
        collapse_tree(build_tree(["src/a.ts"]), depth=1, focus_paths=["src/missing.ts"])


def test_negative_depth_is_rejected() -> None:
    with pytest.raises(ConfigError, match="non-negative"):
        collapse_tree(build_tree(["src/a.ts"]), depth=-1)


def test_focus_chain_for_directory_includes_itself() -> None:
    tree = build_tree(["src/feature/a.ts"])

    assert focus_chain(tree, ["src/feature/"]) == frozenset({"", "src", "src/feature"})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("./src/app/", "src/app"), ("src\\app\\main.ts", "src/app/main.ts"), (".", ""), ("/", "")],
)
def test_normalize_focus(raw: str, expected: str) -> None:
    assert normalize_focus(raw) == expected
