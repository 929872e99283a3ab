"""Immutable pattern configuration consumed by the signal stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..config import ArchmapConfig, BoundaryConfig

ORPHAN_FILTER_PATTERNS: Tuple[str, ...] = (
    "test/**",
    "tests/**",
    "**/tests/**",
    "**/__tests__/**",
    "**/*.test.*",
    "**/*.spec.*",
    "**/test_*.py",
    "**/*_test.py",
    "**/conftest.py",
    "docs/**",
    "**/*.md",
    "**/*.rst",
    "package.json",
    "tsconfig.json",
    "pyproject.toml",
    "setup.cfg",
    "*-lock.json",
    "*.lock",
    "dist/**",
    "build/**",
    "tmp*/**",
    "node_modules/**",
    ".venv/**",
)

# Earlier patterns rank higher.
ENTRYPOINT_PRIORITY_PATTERNS: Tuple[str, ...] = (
    "src/**",
    "packages/*/src/**",
    "lib/**",
    "*",
    "**",
)

ENTRYPOINT_EXCLUDE_PATTERNS: Tuple[str, ...] = (
    "test/**",
    "tests/**",
    "**/tests/**",
    "**/__tests__/**",
    "docs/**",
    "**/*.test.*",
    "**/*.spec.*",
    "**/test_*.py",
    "**/conftest.py",
    "examples/**",
    "tmp/**",
    "dist/**",
    "build/**",
)

_PUBLIC_SURFACE_TEST_EXCLUDES: Tuple[str, ...] = (
    "**/*.test.*",
    "**/*.spec.*",
    "**/tests/**",
    "**/__tests__/**",
)


@dataclass(frozen=True)
class BoundaryRule:
    """Include/exclude globs plus the anchor edges a boundary file is expected to have.

    ``anchors_inbound`` are globs for expected importers of a matching file and
    ``anchors_outbound`` globs for files it is expected to import. Rules with
    ``contract`` unset only mark the public surface.
    """

    name: str
    include: Tuple[str, ...]
    exclude: Tuple[str, ...] = ()
    anchors_inbound: Tuple[str, ...] = ()
    anchors_outbound: Tuple[str, ...] = ()
    contract: bool = True


DEFAULT_BOUNDARY_RULES: Tuple[BoundaryRule, ...] = (
    BoundaryRule(
        name="public-surface",
        include=(
            "src/main.*",
            "src/index.*",
            "src/server.*",
            "src/app.*",
            "src/api/**",
            "src/routes/**",
            "src/controllers/**",
            "src/handlers/**",
            "services/*/src/main.*",
            "services/*/src/index.*",
            "services/*/src/server.*",
            "services/*/src/app.*",
            "services/*/src/api/**",
            "services/*/src/routes/**",
            "services/*/src/controllers/**",
            "services/*/src/handlers/**",
            "*/__init__.py",
            "src/*/__init__.py",
            "*/api/**",
        ),
        exclude=_PUBLIC_SURFACE_TEST_EXCLUDES,
        contract=False,
    ),
)


@dataclass(frozen=True)
class Thresholds:
    god_module_fan_in: int = 15
    deep_path: int = 3
    big_loc: int = 300


@dataclass(frozen=True)
class SignalConfig:
    """Pattern lists, boundary rules and thresholds for signal computation."""

    orphan_patterns: Tuple[str, ...] = ORPHAN_FILTER_PATTERNS
    entrypoint_patterns: Tuple[str, ...] = ENTRYPOINT_PRIORITY_PATTERNS
    entrypoint_exclude_patterns: Tuple[str, ...] = ENTRYPOINT_EXCLUDE_PATTERNS
    boundary_rules: Tuple[BoundaryRule, ...] = DEFAULT_BOUNDARY_RULES
    thresholds: Thresholds = field(default_factory=Thresholds)


DEFAULT_SIGNAL_CONFIG = SignalConfig()


def boundary_rule_from(config: BoundaryConfig) -> BoundaryRule:
    return BoundaryRule(
        name=config.name,
        include=tuple(config.include),
        exclude=tuple(config.exclude),
        anchors_inbound=tuple(config.anchors_inbound),
        anchors_outbound=tuple(config.anchors_outbound),
    )


def signal_config_from(config: Optional[ArchmapConfig]) -> SignalConfig:
    """Merge .archmap.yml overrides into the default signal configuration."""
    if config is None:
        return DEFAULT_SIGNAL_CONFIG

    signals = config.signals
    rules = tuple(boundary_rule_from(rule) for rule in config.boundaries)
    return SignalConfig(
        orphan_patterns=_pick(signals.orphan_patterns, ORPHAN_FILTER_PATTERNS),
        entrypoint_patterns=_pick(signals.entrypoint_patterns, ENTRYPOINT_PRIORITY_PATTERNS),
        entrypoint_exclude_patterns=_pick(
            signals.entrypoint_exclude_patterns, ENTRYPOINT_EXCLUDE_PATTERNS
        ),
        boundary_rules=rules or DEFAULT_BOUNDARY_RULES,
        thresholds=Thresholds(**signals.thresholds),
    )


def _pick(override: Optional[list], default: Tuple[str, ...]) -> Tuple[str, ...]:
    return default if override is None else tuple(override)


__all__ = [
    "BoundaryRule",
    "DEFAULT_BOUNDARY_RULES",
    "DEFAULT_SIGNAL_CONFIG",
    "ENTRYPOINT_EXCLUDE_PATTERNS",
    "ENTRYPOINT_PRIORITY_PATTERNS",
    "ORPHAN_FILTER_PATTERNS",
    "SignalConfig",
    "Thresholds",
    "boundary_rule_from",
    "signal_config_from",
]
