"""Tests for render-time signal visibility."""

from __future__ import annotations

from archmap.models import CONTEXT, HINT, NAV, RISK, FileSignals, Signal
from archmap.signals.compute import CYCLE, DEEP_PATH, ENTRYPOINT, ORPHAN
from archmap.signals.filter import filter_orphan_signals, visible_signals
from archmap.signals.policies import ORPHAN_FILTER_PATTERNS

ORPHAN_SIGNAL = Signal(CONTEXT, ORPHAN)


def test_orphans_on_noise_files_are_hidden() -> None:
    entry = FileSignals(file="tests/app.test.ts", inline=(ORPHAN_SIGNAL,))

    assert filter_orphan_signals(entry, ORPHAN_FILTER_PATTERNS) == ()
    assert filter_orphan_signals(entry, ORPHAN_FILTER_PATTERNS, show_orphans=True) == (
        ORPHAN_SIGNAL,
    )


def test_entrypoints_never_show_orphan() -> None:
    entry = FileSignals(file="src/cli.ts", inline=(ORPHAN_SIGNAL, Signal(NAV, ENTRYPOINT)))

    assert filter_orphan_signals(entry, ORPHAN_FILTER_PATTERNS) == (Signal(NAV, ENTRYPOINT),)


def test_orphans_on_source_files_stay_visible() -> None:
    entry = FileSignals(file="src/lonely.ts", inline=(ORPHAN_SIGNAL,))

    assert filter_orphan_signals(entry, ORPHAN_FILTER_PATTERNS) == (ORPHAN_SIGNAL,)


def test_per_file_limit_keeps_risk_signals() -> None:
    entry = FileSignals(
        file="src/a/b/c/d.ts",
        inline=(Signal(RISK, CYCLE), Signal(HINT, DEEP_PATH), ORPHAN_SIGNAL),
    )

    assert visible_signals(entry, ORPHAN_FILTER_PATTERNS, limit=1) == (Signal(RISK, CYCLE),)
    assert len(visible_signals(entry, ORPHAN_FILTER_PATTERNS)) == 3
