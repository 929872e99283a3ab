"""Dependency graph construction and canonical cycle detection."""

from __future__ import annotations

from collections import deque
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from .config import ConfigError
from .logging import get_logger
from .models import EXTERNAL, INTERNAL, DependencyGraph, GraphNode, ResolvedTarget

Resolver = Callable[[str, str], ResolvedTarget]

_logger = get_logger("graph")


def build_dependency_graph(
    files: Sequence[str],
    parsed: Mapping[str, Sequence[str]],
    resolve: Resolver,
) -> DependencyGraph:
    """Build the import graph for ``files``.

    Every file gets exactly one node, edges are recorded on both endpoints and
    repeated specifiers collapse into a single edge. External targets land in
    the importer's ``externals``; unresolved targets are dropped.
    """
    nodes: Dict[str, GraphNode] = {}
    for file_id in files:
        if file_id in nodes:
            raise ConfigError(f"Duplicate file id: {file_id}")
        nodes[file_id] = GraphNode(id=file_id)

    for file_id in sorted(nodes):
        source = nodes[file_id]
        for specifier in parsed.get(file_id, ()):
            resolved = resolve(file_id, specifier)
            if resolved.kind == INTERNAL and resolved.target in nodes:
                target = nodes[resolved.target]
                source.outgoing.add(target.id)
                target.incoming.add(source.id)
            elif resolved.kind == EXTERNAL and resolved.target:
                source.externals.add(resolved.target)

    cycles = find_cycles(nodes)
    _logger.debug("Graph built: %d nodes, %d cycles", len(nodes), len(cycles))
    return DependencyGraph(nodes=nodes, cycles=cycles)


def find_cycles(nodes: Mapping[str, GraphNode]) -> List[Tuple[str, ...]]:
    """Return one canonical closed walk per cyclic component, sorted by start id."""
    cycles: List[Tuple[str, ...]] = []
    for component in strongly_connected_components(nodes):
        if len(component) == 1:
            only = component[0]
            if only in nodes[only].outgoing:
                cycles.append((only,))
            continue
        cycles.append(canonical_cycle(component, nodes))
    cycles.sort(key=lambda cycle: cycle[0])
    return cycles


def strongly_connected_components(nodes: Mapping[str, GraphNode]) -> List[List[str]]:
    """Tarjan's algorithm, iterative so deep import chains cannot hit the recursion limit."""
    index_of: Dict[str, int] = {}
    lowlink: Dict[str, int] = {}
    stack: List[str] = []
    on_stack: Set[str] = set()
    components: List[List[str]] = []
    counter = 0

    for root in sorted(nodes):
        if root in index_of:
            continue
        index_of[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work: List[Tuple[str, Iterator[str]]] = [(root, iter(sorted(nodes[root].outgoing)))]

        while work:
            node, neighbours = work[-1]
            descended = False
            for neighbour in neighbours:
                if neighbour not in index_of:
                    index_of[neighbour] = lowlink[neighbour] = counter
                    counter += 1
                    stack.append(neighbour)
                    on_stack.add(neighbour)
                    work.append((neighbour, iter(sorted(nodes[neighbour].outgoing))))
                    descended = True
                    break
                if neighbour in on_stack:
                    lowlink[node] = min(lowlink[node], index_of[neighbour])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])
            if lowlink[node] == index_of[node]:
                component: List[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(sorted(component))

    return components


def canonical_cycle(component: Sequence[str], nodes: Mapping[str, GraphNode]) -> Tuple[str, ...]:
    """Walk a strongly connected component in a structure-determined order.

    Starts at the smallest id and repeatedly travels, by the shortest
    in-component route, to the smallest member not yet visited, then returns
    to the start. For a simple cycle this is the plain cycle read from its
    smallest member. The start is not repeated at the end of the tuple.
    """
    members = set(component)
    start = min(members)
    walk = [start]
    visited = {start}
    current = start

    while len(visited) < len(members):
        target = min(members - visited)
        route = _shortest_route(current, target, members, nodes)
        walk.extend(route)
        visited.update(route)
        current = target

    if start not in nodes[current].outgoing:
        walk.extend(_shortest_route(current, start, members, nodes)[:-1])
    return tuple(walk)


def _shortest_route(
    source: str, target: str, members: Set[str], nodes: Mapping[str, GraphNode]
) -> List[str]:
    # BFS over sorted neighbours; the route excludes the source and ends with the target.
    parents: Dict[str, Optional[str]] = {source: None}
    queue = deque([source])
    while queue and target not in parents:
        node = queue.popleft()
        for neighbour in sorted(nodes[node].outgoing):
            if neighbour in members and neighbour not in parents:
                parents[neighbour] = node
                queue.append(neighbour)

    route: List[str] = []
    step: Optional[str] = target
    while step is not None and step != source:
        route.append(step)
        step = parents[step]
    route.reverse()
    return route


__all__ = [
    "Resolver",
    "build_dependency_graph",
    "canonical_cycle",
    "find_cycles",
    "strongly_connected_components",
]
