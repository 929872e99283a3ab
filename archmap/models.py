"""Core data models shared across archmap components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .budgets import SignalBudgets

# Signal kinds, in the order they are rendered inline.
RISK = "risk"
HINT = "hint"
CONTEXT = "context"
NAV = "nav"

SIGNAL_KIND_ORDER: Tuple[str, ...] = (RISK, HINT, CONTEXT, NAV)

# Resolution outcomes for a single import specifier.
INTERNAL = "internal"
EXTERNAL = "external"
UNRESOLVED = "unresolved"


@dataclass
class FileMeta:
    """Metadata for an individual repository file."""

    path: str
    size: int
    language: Optional[str]


@dataclass
class RepoManifest:
    """Normalized view of the repository files, sorted by path."""

    root: str
    files: List[FileMeta]

    def paths(self) -> List[str]:
        return [meta.path for meta in self.files]


@dataclass(frozen=True)
class ParsedFile:
    """Import specifiers extracted from one source file."""

    file: str
    specifiers: Tuple[str, ...] = ()
    dynamic: bool = False
    warnings: Tuple[str, ...] = ()
    line_count: Optional[int] = None

    @property
    def has_parse_error(self) -> bool:
        return any(warning.startswith("PARSE-ERROR") for warning in self.warnings)


@dataclass(frozen=True)
class ResolvedTarget:
    """Outcome of resolving one specifier from one importing file."""

    kind: str
    target: Optional[str] = None


@dataclass
class GraphNode:
    """A repository file and its direct import relationships."""

    id: str
    outgoing: Set[str] = field(default_factory=set)
    incoming: Set[str] = field(default_factory=set)
    externals: Set[str] = field(default_factory=set)


@dataclass
class DependencyGraph:
    """Directed import graph over repository files plus its detected cycles."""

    nodes: Dict[str, GraphNode]
    cycles: List[Tuple[str, ...]] = field(default_factory=list)

    def sorted_ids(self) -> List[str]:
        return sorted(self.nodes)

    def fan_in(self, node_id: str) -> int:
        return len(self.nodes[node_id].incoming)

    def fan_out(self, node_id: str) -> int:
        return len(self.nodes[node_id].outgoing)

    def edge_count(self) -> int:
        return sum(len(node.outgoing) for node in self.nodes.values())

    def cycle_members(self) -> Set[str]:
        return {member for cycle in self.cycles for member in cycle}


@dataclass(frozen=True)
class Signal:
    """A tag attached inline to one file, e.g. ``risk:CYCLE``."""

    kind: str
    code: str


@dataclass(frozen=True)
class FileSignals:
    file: str
    inline: Tuple[Signal, ...] = ()

    def codes(self) -> Tuple[str, ...]:
        return tuple(signal.code for signal in self.inline)

    def has_risk(self) -> bool:
        return any(signal.kind == RISK for signal in self.inline)


@dataclass(frozen=True)
class SummaryItem:
    """An entry in one of the ranked summary lists."""

    file: str
    reason: str
    score: int


@dataclass(frozen=True)
class ContractEvidence:
    """Which boundary rule matched a file and which anchor edges were observed."""

    rule: str
    included_by: Optional[str] = None
    excluded_by: Optional[str] = None
    inbound_found: Tuple[str, ...] = ()
    inbound_missing: Tuple[str, ...] = ()
    outbound_found: Tuple[str, ...] = ()
    outbound_missing: Tuple[str, ...] = ()

    @property
    def expected_anchor_count(self) -> int:
        return (
            len(self.inbound_found)
            + len(self.inbound_missing)
            + len(self.outbound_found)
            + len(self.outbound_missing)
        )

    @property
    def found_anchor_count(self) -> int:
        return len(self.inbound_found) + len(self.outbound_found)


@dataclass(frozen=True)
class ContractSignal:
    status: str
    evidence: ContractEvidence


@dataclass
class SignalsResult:
    """Everything the signal stage derives from a dependency graph.

    Ranked lists are kept complete; truncation to the budgets recorded here is
    applied when the report is rendered.
    """

    files: List[FileSignals]
    entrypoints: List[SummaryItem] = field(default_factory=list)
    public_api: List[SummaryItem] = field(default_factory=list)
    hubs_fan_in: List[SummaryItem] = field(default_factory=list)
    hubs_fan_out: List[SummaryItem] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    contract_signals: Dict[str, ContractSignal] = field(default_factory=dict)
    budgets: SignalBudgets = field(default_factory=SignalBudgets)
    orphan_patterns: Tuple[str, ...] = ()
    _index: Optional[Dict[str, FileSignals]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def for_file(self, file: str) -> FileSignals:
        if self._index is None:
            self._index = {entry.file: entry for entry in self.files}
        entry = self._index.get(file)
        return entry if entry is not None else FileSignals(file=file)

    def risky_files(self) -> Set[str]:
        return {entry.file for entry in self.files if entry.has_risk()}

    def public_api_ids(self) -> Set[str]:
        return {item.file for item in self.public_api}

    def hub_ids(self, top_m: Optional[int]) -> Set[str]:
        """Return the union of the top-M prefixes of both hub rankings."""
        fan_in = self.hubs_fan_in if top_m is None else self.hubs_fan_in[:top_m]
        fan_out = self.hubs_fan_out if top_m is None else self.hubs_fan_out[:top_m]
        return {item.file for item in fan_in} | {item.file for item in fan_out}


__all__ = [
    "CONTEXT",
    "ContractEvidence",
    "ContractSignal",
    "DependencyGraph",
    "EXTERNAL",
    "FileMeta",
    "FileSignals",
    "GraphNode",
    "HINT",
    "INTERNAL",
    "NAV",
    "ParsedFile",
    "RISK",
    "RepoManifest",
    "ResolvedTarget",
    "SIGNAL_KIND_ORDER",
    "Signal",
    "SignalsResult",
    "SummaryItem",
    "UNRESOLVED",
]
