"""Configuration loading for archmap (.archmap.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".archmap.yml"

_THRESHOLD_KEYS = ("god_module_fan_in", "deep_path", "big_loc")


class ConfigError(RuntimeError):
    """Raised when configuration or run inputs are invalid."""


@dataclass
class BoundaryConfig:
    """A named boundary rule with optional expected anchor edges."""

    name: str
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    anchors_inbound: List[str] = field(default_factory=list)
    anchors_outbound: List[str] = field(default_factory=list)


@dataclass
class SignalsConfig:
    """Pattern and threshold overrides for signal computation.

    ``None`` pattern lists keep the built-in defaults.
    """

    orphan_patterns: Optional[List[str]] = None
    entrypoint_patterns: Optional[List[str]] = None
    entrypoint_exclude_patterns: Optional[List[str]] = None
    thresholds: Dict[str, int] = field(default_factory=dict)
    budgets: Dict[str, Optional[int]] = field(default_factory=dict)


@dataclass
class ArchmapConfig:
    """Represents the settings defined in .archmap.yml."""

    root: Path
    budget_profile: Optional[str] = None
    output: Optional[str] = None
    exclude_paths: List[str] = field(default_factory=list)
    signals: SignalsConfig = field(default_factory=SignalsConfig)
    boundaries: List[BoundaryConfig] = field(default_factory=list)


def load_config(config_path: Path) -> ArchmapConfig:
    """Load configuration from a repository directory or an explicit file."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ArchmapConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    signals_data = _as_dict(data.get("signals"))
    signals = SignalsConfig()
    if signals_data:
        signals.orphan_patterns = _as_optional_str_list(signals_data.get("orphan_patterns"))
        signals.entrypoint_patterns = _as_optional_str_list(
            signals_data.get("entrypoint_patterns")
        )
        signals.entrypoint_exclude_patterns = _as_optional_str_list(
            signals_data.get("entrypoint_exclude_patterns")
        )
        signals.thresholds = _parse_thresholds(_as_dict(signals_data.get("thresholds")))
        signals.budgets = _parse_budgets(_as_dict(signals_data.get("budgets")))

    return ArchmapConfig(
        root=root,
        budget_profile=_as_str(data.get("budget")),
        output=_as_str(data.get("output")),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        signals=signals,
        boundaries=_parse_boundaries(data.get("boundaries")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _parse_thresholds(data: Dict[str, Any]) -> Dict[str, int]:
    thresholds: Dict[str, int] = {}
    for key, value in data.items():
        if key not in _THRESHOLD_KEYS:
            raise ConfigError(f"Unknown signal threshold '{key}'")
        number = _as_int(value)
        if number is None or number < 0:
            raise ConfigError(f"Threshold '{key}' must be a non-negative integer")
        thresholds[key] = number
    return thresholds


def _parse_budgets(data: Dict[str, Any]) -> Dict[str, Optional[int]]:
    budgets: Dict[str, Optional[int]] = {}
    for key, value in data.items():
        if value is None or (isinstance(value, str) and value.strip().lower() == "unbounded"):
            budgets[str(key)] = None
            continue
        number = _as_int(value)
        if number is None or isinstance(value, bool) or number < 0:
            raise ConfigError(f"Budget '{key}' must be a non-negative integer or 'unbounded'")
        budgets[str(key)] = number
    return budgets


def _parse_boundaries(value: Any) -> List[BoundaryConfig]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("'boundaries' must be a list of rules")

    rules: List[BoundaryConfig] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ConfigError(f"Boundary rule #{index + 1} must be a mapping")
        include = _as_str_list(entry.get("include"))
        if not include:
            raise ConfigError(f"Boundary rule #{index + 1} needs at least one include pattern")
        anchors = _as_dict(entry.get("anchors"))
        rules.append(
            BoundaryConfig(
                name=_as_str(entry.get("name")) or f"boundary-{index + 1}",
                include=include,
                exclude=_as_str_list(entry.get("exclude")),
                anchors_inbound=_as_str_list(anchors.get("inbound")),
                anchors_outbound=_as_str_list(anchors.get("outbound")),
            )
        )
    return rules


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_optional_str_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    return _as_str_list(value)


__all__ = [
    "ArchmapConfig",
    "BoundaryConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "SignalsConfig",
    "load_config",
]
