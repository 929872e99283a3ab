"""Budget profiles that bound how much of each list a report shows."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .config import ConfigError

T = TypeVar("T")

TRUNCATION_NOTICE = "Truncated by budget; rerun with --full-signals (+{count} more)."
HUB_TRUNCATION_HINT = (
    "Note: this [HUB] list is truncated by budget; "
    "rerun with --full-signals to inspect full blast radius."
)

DEFAULT_PROFILE = "default"


@dataclass(frozen=True)
class SignalBudgets:
    """Top-N limits for the summary lists and the inline signals per file.

    ``None`` means unbounded.
    """

    entrypoints_top_n: Optional[int] = 5
    public_api_top_n: Optional[int] = 5
    hubs_top_n: Optional[int] = 5
    inline_per_file_max: Optional[int] = 5


@dataclass(frozen=True)
class ViewBudgets:
    """Limits for the tree, local dependency, deep-dive and impact sections."""

    hubs_top_m: Optional[int] = 5
    list_budget: Optional[int] = 3
    deep_dive_budget: Optional[int] = 10
    impact_path_budget: Optional[int] = 3


BUDGET_PROFILES: Dict[str, ViewBudgets] = {
    "small": ViewBudgets(hubs_top_m=3, list_budget=2, deep_dive_budget=5, impact_path_budget=3),
    "default": ViewBudgets(hubs_top_m=5, list_budget=3, deep_dive_budget=10, impact_path_budget=3),
    "large": ViewBudgets(hubs_top_m=10, list_budget=10, deep_dive_budget=25, impact_path_budget=5),
}

UNBOUNDED_SIGNAL_BUDGETS = SignalBudgets(
    entrypoints_top_n=None,
    public_api_top_n=None,
    hubs_top_n=None,
    inline_per_file_max=None,
)
UNBOUNDED_VIEW_BUDGETS = ViewBudgets(
    hubs_top_m=None,
    list_budget=None,
    deep_dive_budget=None,
    impact_path_budget=None,
)


def view_budgets_for(profile: str, *, full_signals: bool = False) -> ViewBudgets:
    """Return the view budgets of a named profile, or unbounded ones in full mode."""
    if profile not in BUDGET_PROFILES:
        choices = ", ".join(sorted(BUDGET_PROFILES))
        raise ConfigError(f"Unknown budget profile '{profile}' (expected one of: {choices})")
    if full_signals:
        return UNBOUNDED_VIEW_BUDGETS
    return BUDGET_PROFILES[profile]


def signal_budgets_with(
    overrides: Mapping[str, Optional[int]] | None = None, *, full_signals: bool = False
) -> SignalBudgets:
    """Apply per-field overrides on top of the default signal budgets."""
    if full_signals:
        return UNBOUNDED_SIGNAL_BUDGETS
    budgets = SignalBudgets()
    if not overrides:
        return budgets
    known = {item.name for item in fields(SignalBudgets)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"Unknown signal budget(s): {', '.join(unknown)}")
    for name, value in overrides.items():
        validate_budget(name, value)
    return replace(budgets, **dict(overrides))


def validate_budget(name: str, value: object) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"Budget '{name}' must be a non-negative integer, got {value!r}")


def take(items: Sequence[T], limit: Optional[int]) -> Tuple[List[T], int]:
    """Return the first ``limit`` items and how many were left out."""
    if limit is None or len(items) <= limit:
        return list(items), 0
    return list(items[:limit]), len(items) - limit


def truncation_notice(hidden: int) -> str:
    return TRUNCATION_NOTICE.format(count=hidden)


def describe_budgets(signal: SignalBudgets, view: ViewBudgets) -> str:
    def _fmt(value: Optional[int]) -> str:
        return "unbounded" if value is None else str(value)

    parts = [
        f"entrypoints {_fmt(signal.entrypoints_top_n)}",
        f"public API {_fmt(signal.public_api_top_n)}",
        f"hubs {_fmt(signal.hubs_top_n)}",
        f"inline per file {_fmt(signal.inline_per_file_max)}",
        f"hub top-M {_fmt(view.hubs_top_m)}",
        f"list {_fmt(view.list_budget)}",
        f"deep-dive {_fmt(view.deep_dive_budget)}",
        f"impact paths {_fmt(view.impact_path_budget)}",
    ]
    return ", ".join(parts)


__all__ = [
    "BUDGET_PROFILES",
    "DEFAULT_PROFILE",
    "HUB_TRUNCATION_HINT",
    "SignalBudgets",
    "TRUNCATION_NOTICE",
    "UNBOUNDED_SIGNAL_BUDGETS",
    "UNBOUNDED_VIEW_BUDGETS",
    "ViewBudgets",
    "describe_budgets",
    "signal_budgets_with",
    "take",
    "truncation_notice",
    "validate_budget",
    "view_budgets_for",
]
