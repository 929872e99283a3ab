"""Depth- and focus-aware collapsing of the project tree."""

from __future__ import annotations

from typing import AbstractSet, FrozenSet, Iterable, List, Optional, Set, Tuple

from ..config import ConfigError
from ..tree import DirNode, FileNode, StubNode, SubtreeStats, TreeNode, find_node


def normalize_focus(path: str) -> str:
    """Canonical form of a user-supplied focus path."""
    cleaned = path.strip().replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    cleaned = cleaned.strip("/")
    return "" if cleaned == "." else cleaned


def focus_chain(root: DirNode, focus_paths: Iterable[str]) -> FrozenSet[str]:
    """Directories that must stay expanded so every focus target stays visible."""
    chain: Set[str] = {""}
    for raw in focus_paths:
        focus = normalize_focus(raw)
        if not focus:
            continue
        node = find_node(root, focus)
        if node is None:
            raise ConfigError(f"Focus target not found in the file set: {raw}")
        parts = focus.split("/")
        if isinstance(node, FileNode):
            parts = parts[:-1]
        for index in range(1, len(parts) + 1):
            chain.add("/".join(parts[:index]))
    return frozenset(chain)


def collapse_tree(
    root: DirNode,
    *,
    risky_files: AbstractSet[str] = frozenset(),
    depth: Optional[int] = None,
    focus_paths: Iterable[str] = (),
) -> Tuple[DirNode, SubtreeStats]:
    """Replace the contents of directories at or beyond ``depth`` with stubs.

    The root sits at level 0. A directory at level ``depth`` or deeper keeps its
    own line, but its children collapse into one stub carrying the file,
    subdirectory and risky-file totals beneath it. Directories on the path to a
    focus target are never collapsed.
    """
    if depth is not None and depth < 0:
        raise ConfigError(f"Depth must be a non-negative integer, got {depth}")
    expanded = focus_chain(root, focus_paths)
    return _fold(root, 0, depth, expanded, risky_files)


def _fold(
    node: DirNode,
    level: int,
    depth: Optional[int],
    expanded: FrozenSet[str],
    risky_files: AbstractSet[str],
) -> Tuple[DirNode, SubtreeStats]:
    children: List[TreeNode] = []
    files = subdirs = risky = 0
    for child in node.children:
        if isinstance(child, DirNode):
            folded, stats = _fold(child, level + 1, depth, expanded, risky_files)
            children.append(folded)
            files += stats.files
            subdirs += 1 + stats.subdirs
            risky += stats.risky
        elif isinstance(child, FileNode):
            children.append(child)
            files += 1
            if child.rel_path in risky_files:
                risky += 1

    stats = SubtreeStats(files=files, subdirs=subdirs, risky=risky)
    collapse = (
        depth is not None
        and level >= depth
        and node.rel_path not in expanded
        and bool(children)
    )
    if collapse:
        return DirNode(name=node.name, rel_path=node.rel_path, children=(StubNode(stats),)), stats
    return DirNode(name=node.name, rel_path=node.rel_path, children=tuple(children)), stats


__all__ = ["collapse_tree", "focus_chain", "normalize_focus"]
