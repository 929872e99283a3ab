"""Shortest import paths from a focus file to the public surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Dict, List, Tuple

from ..config import ConfigError
from ..models import DependencyGraph

ARROW = " → "
NO_PUBLIC_API = "No PUBLIC-API reachable from {focus}."


@dataclass(frozen=True)
class ImpactPath:
    nodes: Tuple[str, ...]

    def plain(self) -> str:
        return ARROW.join(self.nodes)

    def render(self) -> str:
        return ARROW.join(f"`{node}`" for node in self.nodes) + " (→ PUBLIC-API)"


def find_impact_paths(
    graph: DependencyGraph, focus: str, targets: AbstractSet[str]
) -> List[ImpactPath]:
    """One shortest path per reachable target, ordered by length then text.

    A focus file that is itself a target yields the one-node path.

    Among equal-length paths to the same target the one whose rendered text
    (ids joined by the arrow) sorts first wins. Breadth-first layers keep,
    per node, the smallest such prefix; every path in a layer has the same
    length, so extending the smallest prefix keeps the result smallest.
    """
    if focus not in graph.nodes:
        raise ConfigError(f"--focus-file not found: {focus}")

    best: Dict[str, Tuple[str, ...]] = {focus: (focus,)}
    frontier = [focus]
    while frontier:
        layer: Dict[str, Tuple[str, ...]] = {}
        for node_id in frontier:
            prefix = best[node_id]
            for neighbour in sorted(graph.nodes[node_id].outgoing):
                if neighbour in best:
                    continue
                candidate = prefix + (neighbour,)
                current = layer.get(neighbour)
                if current is None or ARROW.join(candidate) < ARROW.join(current):
                    layer[neighbour] = candidate
        best.update(layer)
        frontier = sorted(layer)

    paths = [ImpactPath(best[target]) for target in sorted(targets) if target in best]
    paths.sort(key=lambda path: (len(path.nodes), path.plain()))
    return paths


__all__ = ["ARROW", "ImpactPath", "NO_PUBLIC_API", "find_impact_paths"]
