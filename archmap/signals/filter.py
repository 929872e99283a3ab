"""Render-time visibility rules for inline signals."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..models import FileSignals, Signal
from ..patterns import matches_any
from .compute import ENTRYPOINT, ORPHAN


def filter_orphan_signals(
    entry: FileSignals, patterns: Sequence[str], *, show_orphans: bool = False
) -> Tuple[Signal, ...]:
    """Drop ORPHAN from noise files and from entrypoints unless orphans are requested."""
    if show_orphans:
        return entry.inline
    codes = entry.codes()
    if ORPHAN not in codes:
        return entry.inline
    if ENTRYPOINT in codes or matches_any(entry.file, patterns):
        return tuple(signal for signal in entry.inline if signal.code != ORPHAN)
    return entry.inline


def visible_signals(
    entry: FileSignals,
    patterns: Sequence[str],
    *,
    show_orphans: bool = False,
    limit: Optional[int] = None,
) -> Tuple[Signal, ...]:
    """Inline signals as rendered: orphan filter first, then the per-file budget.

    Signals are already ordered risk-first, so the budget never drops a risk
    while a lower-priority signal survives.
    """
    inline = filter_orphan_signals(entry, patterns, show_orphans=show_orphans)
    if limit is None:
        return inline
    return inline[:limit]


__all__ = ["filter_orphan_signals", "visible_signals"]
