"""Tests for the assembled architecture report."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import pytest

from archmap.budgets import HUB_TRUNCATION_HINT, SignalBudgets
from archmap.config import ConfigError
from archmap.render.report import RenderInput, RenderOptions, render_report
from archmap.signals.compute import compute_signals
from archmap.tree import build_tree
from tests._fixtures.graphs import make_graph

SECTION_ORDER = [
    "## How to Use This Map",
    "## Generation Metadata",
    "## Warnings",
    "## Entrypoints & Public Surface",
    "## Graph Hubs (Fan-in / Fan-out)",
    "## Contract Coverage",
    "## Local Dependencies",
    "## Project Tree",
]


def _render(
    edges: Mapping[str, Sequence[str]],
    *,
    extra_files: Sequence[str] = (),
    budgets: Optional[SignalBudgets] = None,
    **options: object,
):
    graph = make_graph(edges, extra_files=extra_files)
    signals = compute_signals(graph, budgets=budgets)
    data = RenderInput(tree=build_tree(sorted(graph.nodes)), signals=signals, graph=graph)
    return render_report(data, RenderOptions(**options))  # type: ignore[arg-type]


def _fan_out_repo() -> dict:
    return {f"src/cmd/c{index}.ts": ["src/lib/core.ts"] for index in range(1, 8)}


def test_sections_appear_in_fixed_order() -> None:
    output = _render({"src/index.ts": ["src/lib/a.ts"]}, project_name="demo")

    assert output.content.startswith("# Architecture Map: demo\n\n## How to Use This Map")
    positions = [output.content.index(heading) for heading in SECTION_ORDER]
    assert positions == sorted(positions)
    assert "## Focused Deep-Dive" not in output.content
    assert output.content.endswith("```\n")


def test_summary_lists_show_truncation_notice() -> None:
    output = _render(_fan_out_repo())

    assert "- Truncated by budget; rerun with --full-signals (+2 more)." in output.content
    assert "- `src/cmd/c1.ts` [PROD] [HUB] – no importers, imports 1; matches src/**" in (
        output.content
    )


def test_full_signals_renders_everything() -> None:
    output = _render(_fan_out_repo(), full_signals=True)

    assert "Truncated by budget" not in output.content
    assert "`src/cmd/c7.ts` [PROD]" in output.content
    assert "- Mode: full-signals (all budgets unbounded)" in output.content


def test_hidden_hub_adds_blast_radius_hint() -> None:
    output = _render(_fan_out_repo(), budgets=SignalBudgets(hubs_top_n=1))

    assert HUB_TRUNCATION_HINT in output.content
    assert "- Truncated by budget; rerun with --full-signals (+6 more)." in output.content


def test_empty_repository_uses_canonical_empty_states() -> None:
    output = _render({})

    assert "(empty tree)" in output.content
    assert "No repo-local dependencies detected." in output.content
    assert "No boundary contracts configured." in output.content
    assert "No warnings." in output.content
    assert "### Entrypoints\n\n- none" in output.content
    assert output.warnings == ()


def test_rendering_is_deterministic() -> None:
    edges = {
        "src/index.ts": ["src/a.ts", "src/b.ts"],
        "src/a.ts": ["src/b.ts"],
        "src/b.ts": ["src/a.ts"],
    }

    first = _render(edges, depth=1, focus_file="src/a.ts")
    second = _render(dict(reversed(list(edges.items()))), depth=1, focus_file="src/a.ts")

    assert first.content == second.content


def test_collapsed_risk_is_surfaced_in_stub() -> None:
    output = _render(
        {"src/feature/a.ts": ["src/feature/b.ts"], "src/feature/b.ts": ["src/feature/a.ts"]},
        depth=1,
    )

    assert "└── … (2 files, 1 subdir, (!) 2 signals hidden)" in output.content
    assert "*Depth limit:* 1" in output.content


def test_focus_file_adds_deep_dive_and_impact_path() -> None:
    output = _render(
        {
            "src/feature/f.ts": ["src/lib/x.ts", "ext:zod"],
            "src/lib/x.ts": ["src/index.ts"],
        },
        focus_file="./src/feature/f.ts",
        depth=1,
    )

    assert "## Focused Deep-Dive" in output.content
    assert "- File: `src/feature/f.ts` (←0 →1)" in output.content
    assert "- `→` Imports (repo-local): `src/lib/x.ts`" in output.content
    assert "- External imports: `zod`" in output.content
    assert "- `src/feature/f.ts` → `src/lib/x.ts` → `src/index.ts` (→ PUBLIC-API)" in (
        output.content
    )
    assert "*Focused on:* `src/feature/f.ts`" in output.content
    assert "f.ts" in output.content.split("## Project Tree")[1]


def test_unreachable_public_api_is_reported() -> None:
    output = _render({"lib/a.ts": ["lib/b.ts"]}, focus_file="lib/a.ts")

    impact = output.content.split("## Impact Path")[1].split("## ")[0]
    assert impact.strip() == "No PUBLIC-API reachable from lib/a.ts."
    assert output.warnings == ("No PUBLIC-API reachable from lib/a.ts.",)
    assert "- No PUBLIC-API reachable from lib/a.ts." in output.content


def test_public_focus_file_is_its_own_impact_path() -> None:
    output = _render({"src/api/users.ts": ["src/lib/db.ts"]}, focus_file="src/api/users.ts")

    impact = output.content.split("## Impact Path")[1].split("## ")[0]
    assert impact.strip() == "- `src/api/users.ts` (→ PUBLIC-API)"
    assert "No PUBLIC-API reachable" not in output.content
    assert output.warnings == ()


def test_local_dependency_lists_are_truncated_to_list_budget() -> None:
    output = _render(_fan_out_repo())

    local = output.content.split("## Local Dependencies")[1].split("## Project Tree")[0]
    lines = local.splitlines()
    importers = lines.index(
        "  - `←` `src/cmd/c1.ts`, `src/cmd/c2.ts`, `src/cmd/c3.ts`"
    )
    assert lines[importers + 1] == (
        "    - Truncated by budget; rerun with --full-signals (+4 more)."
    )
    assert lines[importers + 2] == f"    - {HUB_TRUNCATION_HINT}"

    full = _render(_fan_out_repo(), full_signals=True)
    full_local = full.content.split("## Local Dependencies")[1].split("## Project Tree")[0]
    assert "`src/cmd/c7.ts`" in full_local
    assert "Truncated by budget" not in full_local
    assert HUB_TRUNCATION_HINT not in full_local


def test_orphans_on_noise_files_are_filtered_unless_requested() -> None:
    edges = {"src/index.ts": ["src/a.ts"]}

    hidden = _render(edges, extra_files=["README.md"])
    shown = _render(edges, extra_files=["README.md"], show_orphans=True)

    assert "README.md (←0 →0)" in hidden.content
    assert "README.md (i ORPHAN) (←0 →0)" in shown.content


def test_test_files_are_moved_to_the_bottom_of_lists() -> None:
    output = _render(
        {
            "tests/a.test.ts": ["src/x.ts", "src/y.ts"],
            "src/z.ts": ["src/x.ts"],
        }
    )

    fan_out = output.content.split("### Fan-out Hubs")[1]
    assert fan_out.index("`src/z.ts`") < fan_out.index("- (tests: 1 moved to bottom)")
    assert fan_out.index("- (tests: 1 moved to bottom)") < fan_out.index("`tests/a.test.ts`")


def test_unknown_focus_file_is_rejected() -> None:
    with pytest.raises(ConfigError, match="--focus-file not found"):
        _render({"src/a.ts": []}, focus_file="src/missing.ts")


def test_unknown_budget_profile_is_rejected() -> None:
    with pytest.raises(ConfigError, match="Unknown budget profile"):
        _render({"src/a.ts": []}, budget_profile="huge")
