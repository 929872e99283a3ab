"""Boundary matching: public surface detection and contract evidence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Tuple

from ..models import ContractEvidence, ContractSignal, DependencyGraph
from ..patterns import first_match, matches_any
from .policies import BoundaryRule

CONFIRMED = "C+"
PARTIAL = "C~"
NONE = "C0"
UNCERTAIN = "C?"

HIGH_RISK_STATUSES: Tuple[str, ...] = (NONE, UNCERTAIN)

CONTRACT_LEGEND = (
    "Legend: C+ all expected anchors observed, C~ some anchors observed, "
    "C0 no anchor evidence, C? rule both includes and excludes the file."
)


@dataclass
class BoundaryMatches:
    """Per-file outcome of applying the boundary rules to a graph."""

    public_surface: Dict[str, str] = field(default_factory=dict)
    contracts: Dict[str, ContractSignal] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


def evaluate_boundaries(
    graph: DependencyGraph, rules: Sequence[BoundaryRule]
) -> BoundaryMatches:
    """Apply ``rules`` to every node; the first rule whose include matches wins."""
    result = BoundaryMatches()
    matched_rules: Set[str] = set()

    for node_id in graph.sorted_ids():
        node = graph.nodes[node_id]
        for rule in rules:
            include_index = first_match(node_id, rule.include)
            if include_index is None:
                continue
            matched_rules.add(rule.name)
            included_by = rule.include[include_index]
            exclude_index = first_match(node_id, rule.exclude)

            if exclude_index is not None:
                excluded_by = rule.exclude[exclude_index]
                if rule.contract:
                    result.contracts[node_id] = ContractSignal(
                        status=UNCERTAIN,
                        evidence=ContractEvidence(
                            rule=rule.name, included_by=included_by, excluded_by=excluded_by
                        ),
                    )
                    result.warnings.append(
                        f"Boundary rule '{rule.name}' both includes ({included_by}) and "
                        f"excludes ({excluded_by}) {node_id}; contract marked {UNCERTAIN}."
                    )
                break

            result.public_surface[node_id] = rule.name
            if rule.contract:
                evidence = _collect_evidence(
                    rule, included_by, sorted(node.incoming), sorted(node.outgoing)
                )
                result.contracts[node_id] = ContractSignal(
                    status=_status_for(evidence), evidence=evidence
                )
            break

    for rule in rules:
        if rule.contract and rule.name not in matched_rules:
            result.warnings.append(f"Boundary rule '{rule.name}' matched no files.")

    return result


def _collect_evidence(
    rule: BoundaryRule,
    included_by: str,
    importers: Sequence[str],
    imports: Sequence[str],
) -> ContractEvidence:
    inbound_found, inbound_missing = _split_anchors(rule.anchors_inbound, importers)
    outbound_found, outbound_missing = _split_anchors(rule.anchors_outbound, imports)
    return ContractEvidence(
        rule=rule.name,
        included_by=included_by,
        inbound_found=inbound_found,
        inbound_missing=inbound_missing,
        outbound_found=outbound_found,
        outbound_missing=outbound_missing,
    )


def _split_anchors(
    anchors: Sequence[str], neighbours: Sequence[str]
) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    found: List[str] = []
    missing: List[str] = []
    for anchor in anchors:
        if any(matches_any(neighbour, (anchor,)) for neighbour in neighbours):
            found.append(anchor)
        else:
            missing.append(anchor)
    return tuple(found), tuple(missing)


def _status_for(evidence: ContractEvidence) -> str:
    expected = evidence.expected_anchor_count
    found = evidence.found_anchor_count
    if expected == 0 or found == 0:
        return NONE
    if found == expected:
        return CONFIRMED
    return PARTIAL


__all__ = [
    "BoundaryMatches",
    "CONFIRMED",
    "CONTRACT_LEGEND",
    "HIGH_RISK_STATUSES",
    "NONE",
    "PARTIAL",
    "UNCERTAIN",
    "evaluate_boundaries",
]
