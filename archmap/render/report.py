"""Assemble the architecture map from the graph, signals and tree."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader

from ..budgets import (
    DEFAULT_PROFILE,
    UNBOUNDED_SIGNAL_BUDGETS,
    describe_budgets,
    view_budgets_for,
)
from ..config import ConfigError
from ..logging import get_logger
from ..models import DependencyGraph, Signal, SignalsResult
from ..signals.filter import visible_signals
from ..tree import DirNode
from .collapse import collapse_tree, normalize_focus
from .impact import find_impact_paths
from .sections import (
    Section,
    contract_section,
    deep_dive_section,
    hubs_section,
    impact_section,
    local_dependencies_section,
    surface_section,
    warnings_section,
)
from .tree import render_tree_lines

_TEMPLATES_DIR = Path(__file__).with_name("templates")

_logger = get_logger("render")


@dataclass(frozen=True)
class RenderInput:
    tree: DirNode
    signals: SignalsResult
    graph: DependencyGraph


@dataclass(frozen=True)
class RenderOptions:
    """Caller choices for one render; ``depth`` of ``None`` disables collapsing."""

    depth: Optional[int] = None
    focus: Optional[str] = None
    focus_file: Optional[str] = None
    budget_profile: str = DEFAULT_PROFILE
    full_signals: bool = False
    show_orphans: bool = False
    project_name: Optional[str] = None


@dataclass(frozen=True)
class RenderOutput:
    content: str
    warnings: Tuple[str, ...] = ()


def _create_env() -> Environment:
    loader = FileSystemLoader(str(_TEMPLATES_DIR))
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_report(data: RenderInput, options: RenderOptions = RenderOptions()) -> RenderOutput:
    """Render the full report text.

    Raises ``ConfigError`` for an unknown budget profile or a focus target
    that is not part of the file set. Nothing-to-show conditions render their
    canonical empty-state lines instead.
    """
    graph, signals = data.graph, data.signals
    view = view_budgets_for(options.budget_profile, full_signals=options.full_signals)
    signal_budgets = UNBOUNDED_SIGNAL_BUDGETS if options.full_signals else signals.budgets
    bounded = not options.full_signals

    focus_file = normalize_focus(options.focus_file) if options.focus_file else None
    if focus_file is not None and focus_file not in graph.nodes:
        raise ConfigError(f"--focus-file not found: {options.focus_file}")
    requested = [normalize_focus(path) for path in (options.focus, focus_file) if path]
    focus_paths = _dedupe([path for path in requested if path])
    collapsed, _ = collapse_tree(
        data.tree,
        risky_files=signals.risky_files(),
        depth=options.depth,
        focus_paths=focus_paths,
    )

    def signals_for(file_id: str) -> Sequence[Signal]:
        return visible_signals(
            signals.for_file(file_id),
            signals.orphan_patterns,
            show_orphans=options.show_orphans,
            limit=signal_budgets.inline_per_file_max,
        )

    hubs = signals.hub_ids(view.hubs_top_m)
    warnings: List[str] = list(signals.warnings)

    focus_sections: List[Section] = []
    if focus_file is not None:
        focus_sections.append(
            deep_dive_section(
                graph,
                signals,
                focus_file,
                limit=view.deep_dive_budget,
                hubs=hubs,
                signals_for=signals_for,
            )
        )
        paths = find_impact_paths(graph, focus_file, signals.public_api_ids())
        if not paths:
            warnings.append(f"No PUBLIC-API reachable from {focus_file}.")
        focus_sections.append(impact_section(paths, focus_file, limit=view.impact_path_budget))

    warnings = _dedupe(warnings)
    sections: List[Section] = [
        _metadata_section(graph, options, describe_budgets(signal_budgets, view)),
        warnings_section(warnings),
        surface_section(signals, hubs, bounded=bounded),
        hubs_section(signals, hubs, bounded=bounded),
        contract_section(signals.contract_signals),
        *focus_sections,
        local_dependencies_section(
            graph, signals, top_m=view.hubs_top_m, limit=view.list_budget, hubs=hubs
        ),
        _tree_section(
            render_tree_lines(
                collapsed,
                graph,
                signals_for=signals_for,
                hubs=hubs,
                contracts=signals.contract_signals,
            ),
            options,
            focus_paths,
        ),
    ]

    preamble = _create_env().get_template("preamble.md.j2").render(
        project_name=options.project_name,
        focus_file=focus_file,
        full_signals=options.full_signals,
        budget_profile=options.budget_profile,
    )
    body = "\n\n".join(section.render() for section in sections)
    content = f"{preamble.rstrip()}\n\n{body}\n"
    _logger.debug("Rendered %d sections, %d warnings", len(sections) + 1, len(warnings))
    return RenderOutput(content=content, warnings=tuple(warnings))


def _metadata_section(graph: DependencyGraph, options: RenderOptions, budgets: str) -> Section:
    if options.full_signals:
        mode = "full-signals (all budgets unbounded)"
    else:
        mode = "budgeted"
    orphans = (
        "all shown"
        if options.show_orphans
        else "noise files filtered (rerun with --show-orphans to show all)"
    )
    lines = [
        f"- Mode: {mode}",
        f"- Budget profile: {options.budget_profile}",
        f"- Budgets: {budgets}",
        f"- Files: {len(graph.nodes)}; internal edges: {graph.edge_count()}; "
        f"cycles: {len(graph.cycles)}",
        f"- Orphans: {orphans}",
    ]
    return Section("Generation Metadata", lines)


def _tree_section(tree_lines: List[str], options: RenderOptions, focus_paths: List[str]) -> Section:
    lines: List[str] = []
    if focus_paths:
        focused = ", ".join(f"`{path}`" for path in focus_paths)
        lines.append(f"*Focused on:* {focused}")
    if options.depth is not None:
        lines.append(f"*Depth limit:* {options.depth}")
    if lines:
        lines.append("")
    lines.append("```text")
    lines.extend(tree_lines)
    lines.append("```")
    return Section("Project Tree", lines)


def _dedupe(items: Sequence[str]) -> List[str]:
    seen = set()
    unique: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


__all__ = ["RenderInput", "RenderOptions", "RenderOutput", "render_report"]
