"""Line rendering for the (collapsed) project tree."""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Sequence, Set

from ..models import CONTEXT, HINT, NAV, RISK, ContractSignal, DependencyGraph, Signal
from ..tree import DirNode, StubNode, SubtreeStats, TreeNode

EMPTY_TREE = "(empty tree)"

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "

SIGNAL_PREFIXES: Dict[str, str] = {
    RISK: "!",
    HINT: "?",
    NAV: "→",
    CONTEXT: "i",
}

SignalLookup = Callable[[str], Sequence[Signal]]


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_signal(signal: Signal) -> str:
    return f"({SIGNAL_PREFIXES[signal.kind]} {signal.code})"


def format_stub(stats: SubtreeStats) -> str:
    """Stub text, e.g. ``… (2 files, 1 subdir, (!) 1 signal hidden)``."""
    parts = [plural(stats.files, "file"), plural(stats.subdirs, "subdir")]
    if stats.risky:
        parts.append(f"(!) {plural(stats.risky, 'signal')} hidden")
    return f"… ({', '.join(parts)})"


def format_fan(graph: DependencyGraph, file_id: str) -> str:
    node = graph.nodes.get(file_id)
    if node is None:
        return "(←0 →0)"
    return f"(←{len(node.incoming)} →{len(node.outgoing)})"


def render_tree_lines(
    root: DirNode,
    graph: DependencyGraph,
    *,
    signals_for: SignalLookup,
    hubs: Set[str],
    contracts: Mapping[str, ContractSignal],
) -> List[str]:
    """Render every node beneath ``root``; the root itself has no line."""
    if not root.children:
        return [EMPTY_TREE]
    lines: List[str] = []
    _render_children(root, "", lines, graph, signals_for, hubs, contracts)
    return lines


def _render_children(
    node: DirNode,
    prefix: str,
    lines: List[str],
    graph: DependencyGraph,
    signals_for: SignalLookup,
    hubs: Set[str],
    contracts: Mapping[str, ContractSignal],
) -> None:
    count = len(node.children)
    for index, child in enumerate(node.children):
        last = index == count - 1
        glyph = LAST_BRANCH if last else BRANCH
        lines.append(prefix + glyph + _label(child, graph, signals_for, hubs, contracts))
        if isinstance(child, DirNode):
            child_prefix = prefix + (SPACE if last else PIPE)
            _render_children(child, child_prefix, lines, graph, signals_for, hubs, contracts)


def _label(
    node: TreeNode,
    graph: DependencyGraph,
    signals_for: SignalLookup,
    hubs: Set[str],
    contracts: Mapping[str, ContractSignal],
) -> str:
    if isinstance(node, StubNode):
        return format_stub(node.stats)
    if isinstance(node, DirNode):
        return f"{node.name}/"
    parts = [node.name]
    if node.rel_path in hubs:
        parts.append("[HUB]")
    parts.extend(format_signal(signal) for signal in signals_for(node.rel_path))
    contract = contracts.get(node.rel_path)
    if contract is not None:
        parts.append(f"[{contract.status}]")
    parts.append(format_fan(graph, node.rel_path))
    return " ".join(parts)


__all__ = [
    "EMPTY_TREE",
    "SIGNAL_PREFIXES",
    "format_fan",
    "format_signal",
    "format_stub",
    "plural",
    "render_tree_lines",
]
