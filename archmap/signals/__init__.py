"""Signal computation: per-file tags, ranked lists and contract evidence."""

from __future__ import annotations

from .compute import (
    BIG,
    CYCLE,
    DEEP_PATH,
    DYNAMIC_IMPORT,
    ENTRYPOINT,
    GOD_MODULE,
    ORPHAN,
    PARSE_ERROR,
    PUBLIC_API,
    compute_signals,
)
from .contracts import evaluate_boundaries
from .filter import filter_orphan_signals, visible_signals
from .policies import (
    DEFAULT_SIGNAL_CONFIG,
    BoundaryRule,
    SignalConfig,
    Thresholds,
    signal_config_from,
)

__all__ = [
    "BIG",
    "BoundaryRule",
    "CYCLE",
    "DEEP_PATH",
    "DEFAULT_SIGNAL_CONFIG",
    "DYNAMIC_IMPORT",
    "ENTRYPOINT",
    "GOD_MODULE",
    "ORPHAN",
    "PARSE_ERROR",
    "PUBLIC_API",
    "SignalConfig",
    "Thresholds",
    "compute_signals",
    "evaluate_boundaries",
    "filter_orphan_signals",
    "signal_config_from",
    "visible_signals",
]
