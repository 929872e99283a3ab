"""Builders for the individual report sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set

from ..budgets import HUB_TRUNCATION_HINT, take, truncation_notice
from ..models import ContractSignal, DependencyGraph, Signal, SignalsResult, SummaryItem
from ..patterns import PROD, classify_path_kind
from ..signals.contracts import (
    CONFIRMED,
    CONTRACT_LEGEND,
    HIGH_RISK_STATUSES,
    NONE,
    PARTIAL,
    UNCERTAIN,
)
from .impact import NO_PUBLIC_API, ImpactPath
from .tree import format_fan, format_signal

NONE_LINE = "- none"
NO_LOCAL_DEPENDENCIES = "No repo-local dependencies detected."
NO_CONTRACTS = "No boundary contracts configured."
NO_WARNINGS = "No warnings."

HIGH_RISK_CAP = 5

_CONTRACT_LABELS = (
    (CONFIRMED, "confirmed"),
    (PARTIAL, "partial"),
    (NONE, "no evidence"),
    (UNCERTAIN, "ambiguous"),
)


@dataclass
class Section:
    heading: str
    lines: List[str] = field(default_factory=list)

    def render(self) -> str:
        body = "\n".join(self.lines).rstrip()
        return f"## {self.heading}\n\n{body}"


def budget_notes(hidden: Sequence[str], hubs: Set[str], *, indent: str = "") -> List[str]:
    """Truncation notice plus the hub hint when a hidden entry is a hub."""
    if not hidden:
        return []
    lines = [f"{indent}- {truncation_notice(len(hidden))}"]
    if any(item in hubs for item in hidden):
        lines.append(f"{indent}- {HUB_TRUNCATION_HINT}")
    return lines


def ranked_list_lines(
    items: Sequence[SummaryItem], limit: Optional[int], hubs: Set[str]
) -> List[str]:
    """Top-N entries, production files first, then the budget notes."""
    if not items:
        return [NONE_LINE]
    shown, _ = take(items, limit)
    hidden = [item.file for item in items[len(shown) :]]

    prod = [item for item in shown if classify_path_kind(item.file) == PROD]
    tests = [item for item in shown if classify_path_kind(item.file) != PROD]
    lines = [_summary_line(item, hubs) for item in prod]
    if tests:
        lines.append(f"- (tests: {len(tests)} moved to bottom)")
        lines.extend(_summary_line(item, hubs) for item in tests)
    lines.extend(budget_notes(hidden, hubs))
    return lines


def _summary_line(item: SummaryItem, hubs: Set[str]) -> str:
    hub = " [HUB]" if item.file in hubs else ""
    return f"- `{item.file}` [{classify_path_kind(item.file)}]{hub} – {item.reason}"


def surface_section(signals: SignalsResult, hubs: Set[str], *, bounded: bool) -> Section:
    budgets = signals.budgets
    lines = ["### Entrypoints", ""]
    lines.extend(
        ranked_list_lines(
            signals.entrypoints, budgets.entrypoints_top_n if bounded else None, hubs
        )
    )
    lines.extend(["", "### Public API", ""])
    lines.extend(
        ranked_list_lines(signals.public_api, budgets.public_api_top_n if bounded else None, hubs)
    )
    return Section("Entrypoints & Public Surface", lines)


def hubs_section(signals: SignalsResult, hubs: Set[str], *, bounded: bool) -> Section:
    limit = signals.budgets.hubs_top_n if bounded else None
    lines = ["### Fan-in Hubs", ""]
    lines.extend(ranked_list_lines(signals.hubs_fan_in, limit, hubs))
    lines.extend(["", "### Fan-out Hubs", ""])
    lines.extend(ranked_list_lines(signals.hubs_fan_out, limit, hubs))
    return Section("Graph Hubs (Fan-in / Fan-out)", lines)


def contract_section(contracts: Dict[str, ContractSignal]) -> Section:
    if not contracts:
        return Section("Contract Coverage", [NO_CONTRACTS])

    counts = {status: 0 for status, _ in _CONTRACT_LABELS}
    for contract in contracts.values():
        counts[contract.status] += 1
    lines = [f"- {status} {label}: {counts[status]}" for status, label in _CONTRACT_LABELS]

    high_risk = [
        (file_id, contracts[file_id])
        for file_id in sorted(contracts)
        if contracts[file_id].status in HIGH_RISK_STATUSES
    ]
    lines.extend(["", "### High-risk", ""])
    if not high_risk:
        lines.append(NONE_LINE)
    for file_id, contract in high_risk[:HIGH_RISK_CAP]:
        lines.append(f"- `{file_id}` [{contract.status}] – {describe_contract(contract)}")
    if len(high_risk) > HIGH_RISK_CAP:
        lines.append(f"- +{len(high_risk) - HIGH_RISK_CAP} more")
    lines.extend(["", CONTRACT_LEGEND])
    return Section("Contract Coverage", lines)


def describe_contract(contract: ContractSignal) -> str:
    evidence = contract.evidence
    parts = [f"rule {evidence.rule}"]
    if evidence.excluded_by:
        parts.append(f"included by {evidence.included_by}, excluded by {evidence.excluded_by}")
        return "; ".join(parts)
    if evidence.expected_anchor_count == 0:
        parts.append("no anchors expected")
    for label, values in (
        ("inbound found", evidence.inbound_found),
        ("inbound missing", evidence.inbound_missing),
        ("outbound found", evidence.outbound_found),
        ("outbound missing", evidence.outbound_missing),
    ):
        if values:
            parts.append(f"{label}: {', '.join(values)}")
    return "; ".join(parts)


def deep_dive_section(
    graph: DependencyGraph,
    signals: SignalsResult,
    focus_file: str,
    *,
    limit: Optional[int],
    hubs: Set[str],
    signals_for: Callable[[str], Sequence[Signal]],
) -> Section:
    node = graph.nodes[focus_file]
    lines = [f"- File: `{focus_file}` {format_fan(graph, focus_file)}"]
    lines.extend(
        _neighbour_lines("- `←` Importers (repo-local): ", sorted(node.incoming), limit, hubs)
    )
    lines.extend(
        _neighbour_lines("- `→` Imports (repo-local): ", sorted(node.outgoing), limit, hubs)
    )
    externals = ", ".join(f"`{name}`" for name in sorted(node.externals)) or "none"
    lines.append(f"- External imports: {externals}")
    inline = " ".join(format_signal(signal) for signal in signals_for(focus_file)) or "none"
    lines.append(f"- Signals: {inline}")

    lines.extend(["", "### Contract Telemetry", ""])
    contract = signals.contract_signals.get(focus_file)
    if contract is None:
        lines.append("- No boundary contract covers this file.")
    else:
        lines.append(f"- Status: [{contract.status}] – {describe_contract(contract)}")
    return Section("Focused Deep-Dive", lines)


def _neighbour_lines(
    label: str,
    neighbours: Sequence[str],
    limit: Optional[int],
    hubs: Set[str],
    *,
    indent: str = "  ",
) -> List[str]:
    shown, _ = take(neighbours, limit)
    text = ", ".join(f"`{item}`" for item in shown) or "none"
    return [label + text] + budget_notes(neighbours[len(shown) :], hubs, indent=indent)


def impact_section(
    paths: Sequence[ImpactPath], focus_file: str, *, limit: Optional[int]
) -> Section:
    if not paths:
        return Section("Impact Path", [NO_PUBLIC_API.format(focus=focus_file)])
    shown, hidden = take(paths, limit)
    lines = [f"- {path.render()}" for path in shown]
    if hidden:
        lines.append(f"- {truncation_notice(hidden)}")
    return Section("Impact Path", lines)


def local_dependencies_section(
    graph: DependencyGraph,
    signals: SignalsResult,
    *,
    top_m: Optional[int],
    limit: Optional[int],
    hubs: Set[str],
) -> Section:
    ordered: List[str] = []
    for ranking in (signals.hubs_fan_in, signals.hubs_fan_out):
        selected = ranking if top_m is None else ranking[:top_m]
        for item in selected:
            if item.file not in ordered:
                ordered.append(item.file)
    if not ordered:
        return Section("Local Dependencies", [NO_LOCAL_DEPENDENCIES])

    lines: List[str] = []
    for file_id in ordered:
        node = graph.nodes[file_id]
        hub = " [HUB]" if file_id in hubs else ""
        lines.append(f"- `{file_id}`{hub} {format_fan(graph, file_id)}")
        lines.extend(
            _neighbour_lines("  - `←` ", sorted(node.incoming), limit, hubs, indent="    ")
        )
        lines.extend(
            _neighbour_lines("  - `→` ", sorted(node.outgoing), limit, hubs, indent="    ")
        )
    return Section("Local Dependencies", lines)


def warnings_section(warnings: Sequence[str]) -> Section:
    if not warnings:
        return Section("Warnings", [NO_WARNINGS])
    return Section("Warnings", [f"- {warning}" for warning in warnings])


__all__ = [
    "NONE_LINE",
    "NO_CONTRACTS",
    "NO_LOCAL_DEPENDENCIES",
    "NO_WARNINGS",
    "Section",
    "budget_notes",
    "contract_section",
    "deep_dive_section",
    "describe_contract",
    "hubs_section",
    "impact_section",
    "local_dependencies_section",
    "ranked_list_lines",
    "surface_section",
    "warnings_section",
]
