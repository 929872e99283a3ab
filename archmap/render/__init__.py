"""Report rendering: collapsing, sections and the final document."""

from __future__ import annotations

from .collapse import collapse_tree, focus_chain, normalize_focus
from .impact import ImpactPath, find_impact_paths
from .report import RenderInput, RenderOptions, RenderOutput, render_report
from .tree import format_stub, render_tree_lines

__all__ = [
    "ImpactPath",
    "RenderInput",
    "RenderOptions",
    "RenderOutput",
    "collapse_tree",
    "find_impact_paths",
    "focus_chain",
    "format_stub",
    "normalize_focus",
    "render_report",
    "render_tree_lines",
]
