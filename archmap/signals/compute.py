"""Derive inline signals and ranked summary lists from a dependency graph."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Set, Tuple

from ..budgets import SignalBudgets
from ..logging import get_logger
from ..models import (
    CONTEXT,
    HINT,
    NAV,
    RISK,
    SIGNAL_KIND_ORDER,
    DependencyGraph,
    FileSignals,
    ParsedFile,
    Signal,
    SignalsResult,
    SummaryItem,
)
from ..patterns import first_match, matches_any
from .contracts import evaluate_boundaries
from .policies import DEFAULT_SIGNAL_CONFIG, SignalConfig

CYCLE = "CYCLE"
ORPHAN = "ORPHAN"
ENTRYPOINT = "ENTRYPOINT"
PUBLIC_API = "PUBLIC-API"
DYNAMIC_IMPORT = "DYNAMIC-IMPORT"
PARSE_ERROR = "PARSE-ERROR"
GOD_MODULE = "GOD-MODULE"
DEEP_PATH = "DEEP-PATH"
BIG = "BIG"

_KIND_RANK = {kind: index for index, kind in enumerate(SIGNAL_KIND_ORDER)}

_logger = get_logger("signals")


def compute_signals(
    graph: DependencyGraph,
    config: SignalConfig = DEFAULT_SIGNAL_CONFIG,
    budgets: Optional[SignalBudgets] = None,
    parse_results: Optional[Mapping[str, ParsedFile]] = None,
) -> SignalsResult:
    """Compute every per-file signal and the four ranked lists.

    The result is a pure function of its arguments: all rankings break ties on
    the file path and nothing depends on mapping iteration order.
    """
    parse_results = parse_results or {}
    boundaries = evaluate_boundaries(graph, config.boundary_rules)

    entrypoints = _rank_entrypoints(graph, config)
    public_api = sorted(
        (
            SummaryItem(
                file=node_id,
                reason=f"boundary {rule}; fan-in {graph.fan_in(node_id)}",
                score=graph.fan_in(node_id),
            )
            for node_id, rule in boundaries.public_surface.items()
        ),
        key=lambda item: (-item.score, item.file),
    )
    hubs_fan_in = _rank_hubs(graph, direction="in")
    hubs_fan_out = _rank_hubs(graph, direction="out")

    entrypoint_ids = {item.file for item in entrypoints}
    public_ids = {item.file for item in public_api}
    cycle_members = graph.cycle_members()

    files: List[FileSignals] = []
    parse_warnings: List[str] = []
    for node_id in graph.sorted_ids():
        parsed = parse_results.get(node_id)
        if parsed is not None:
            parse_warnings.extend(f"{node_id}: {warning}" for warning in parsed.warnings)
        inline = _inline_signals(
            graph, node_id, config, parsed, cycle_members, entrypoint_ids, public_ids
        )
        files.append(FileSignals(file=node_id, inline=inline))

    warnings = list(boundaries.warnings) + parse_warnings
    _logger.debug(
        "Signals: %d entrypoints, %d public API, %d cycle members, %d warnings",
        len(entrypoints),
        len(public_api),
        len(cycle_members),
        len(warnings),
    )
    return SignalsResult(
        files=files,
        entrypoints=entrypoints,
        public_api=public_api,
        hubs_fan_in=hubs_fan_in,
        hubs_fan_out=hubs_fan_out,
        warnings=warnings,
        contract_signals={key: boundaries.contracts[key] for key in sorted(boundaries.contracts)},
        budgets=budgets or SignalBudgets(),
        orphan_patterns=tuple(config.orphan_patterns),
    )


def _inline_signals(
    graph: DependencyGraph,
    node_id: str,
    config: SignalConfig,
    parsed: Optional[ParsedFile],
    cycle_members: Set[str],
    entrypoint_ids: Set[str],
    public_ids: Set[str],
) -> Tuple[Signal, ...]:
    node = graph.nodes[node_id]
    thresholds = config.thresholds
    signals: List[Signal] = []

    if node_id in cycle_members:
        signals.append(Signal(RISK, CYCLE))

    if parsed is not None and parsed.has_parse_error:
        signals.append(Signal(HINT, PARSE_ERROR))
    if parsed is not None and parsed.dynamic:
        signals.append(Signal(HINT, DYNAMIC_IMPORT))
    if len(node.incoming) > thresholds.god_module_fan_in:
        signals.append(Signal(HINT, GOD_MODULE))
    if node_id.count("/") > thresholds.deep_path:
        signals.append(Signal(HINT, DEEP_PATH))
    line_count = parsed.line_count if parsed is not None else None
    if line_count is not None and line_count >= thresholds.big_loc:
        signals.append(Signal(HINT, BIG))

    if not node.incoming:
        signals.append(Signal(CONTEXT, ORPHAN))

    if node_id in entrypoint_ids:
        signals.append(Signal(NAV, ENTRYPOINT))
    if node_id in public_ids:
        signals.append(Signal(NAV, PUBLIC_API))

    return tuple(sorted(signals, key=lambda signal: _KIND_RANK[signal.kind]))


def _rank_entrypoints(graph: DependencyGraph, config: SignalConfig) -> List[SummaryItem]:
    patterns = config.entrypoint_patterns
    items: List[SummaryItem] = []
    for node_id in graph.sorted_ids():
        node = graph.nodes[node_id]
        if node.incoming or not node.outgoing:
            continue
        if matches_any(node_id, config.entrypoint_exclude_patterns):
            continue
        index = first_match(node_id, patterns)
        if index is None:
            continue
        items.append(
            SummaryItem(
                file=node_id,
                reason=f"no importers, imports {len(node.outgoing)}; matches {patterns[index]}",
                score=len(patterns) - index,
            )
        )
    items.sort(key=lambda item: (-item.score, item.file))
    return items


def _rank_hubs(graph: DependencyGraph, *, direction: str) -> List[SummaryItem]:
    counts: Dict[str, int] = {}
    for node_id in graph.sorted_ids():
        count = graph.fan_in(node_id) if direction == "in" else graph.fan_out(node_id)
        if count > 0:
            counts[node_id] = count
    label = "fan-in" if direction == "in" else "fan-out"
    ranked = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
    return [
        SummaryItem(file=node_id, reason=f"{label} {count}", score=count)
        for node_id, count in ranked
    ]


__all__ = [
    "BIG",
    "CYCLE",
    "DEEP_PATH",
    "DYNAMIC_IMPORT",
    "ENTRYPOINT",
    "GOD_MODULE",
    "ORPHAN",
    "PARSE_ERROR",
    "PUBLIC_API",
    "compute_signals",
]
