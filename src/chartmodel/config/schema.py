"""Structured engine configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Union

from chartmodel.errors import ConfigError
from chartmodel.io_utils import read_payload
from chartmodel.numeric import is_finite_number

MAX_DIAGNOSTIC_WARNINGS = 25
BOUNDS_EPSILON = 1e-6
MAX_A11Y_ITEMS = 24
DEFAULT_EASING = "linear"


@dataclass(frozen=True)
class EngineConfig:
    """Per-call knobs for compute and interpolation.

    Args:
        max_warnings: Diagnostic warning budget for a single compute call.
        bounds_epsilon: Tolerance applied to viewport bounds checks.
        max_a11y_items: Cap on inferred accessibility items.
        default_easing: Easing for ``chartmodel interpolate`` when --easing is omitted.
    """

    max_warnings: int = MAX_DIAGNOSTIC_WARNINGS
    bounds_epsilon: float = BOUNDS_EPSILON
    max_a11y_items: int = MAX_A11Y_ITEMS
    default_easing: str = DEFAULT_EASING


DEFAULT_ENGINE_CONFIG = EngineConfig()


def _require_int(value: Any, key: str, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"engine.{key} must be an integer.")
    if value < minimum:
        raise ConfigError(f"engine.{key} must be >= {minimum}.")
    return value


def _require_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"engine.{key} must be a number.")
    if not is_finite_number(value) or value < 0:
        raise ConfigError(f"engine.{key} must be a finite non-negative number.")
    return float(value)


def engine_config_from_mapping(payload: Mapping[str, Any]) -> EngineConfig:
    if not isinstance(payload, Mapping):
        raise ConfigError("engine config must be a mapping.")
    section = payload.get("engine", payload)
    if section is None:
        return EngineConfig()
    if not isinstance(section, Mapping):
        raise ConfigError("engine config section must be a mapping.")

    allowed = {item.name for item in fields(EngineConfig)}
    unknown = sorted(set(section) - allowed)
    if unknown:
        raise ConfigError(f"Unknown engine config keys: {unknown}.")

    values: dict[str, Any] = {}
    if "max_warnings" in section:
        values["max_warnings"] = _require_int(section["max_warnings"], "max_warnings", minimum=0)
    if "max_a11y_items" in section:
        values["max_a11y_items"] = _require_int(
            section["max_a11y_items"], "max_a11y_items", minimum=0
        )
    if "bounds_epsilon" in section:
        values["bounds_epsilon"] = _require_float(section["bounds_epsilon"], "bounds_epsilon")
    if "default_easing" in section:
        # Imported lazily: transition depends on this module for its defaults.
        from chartmodel.transition.interpolation import EASINGS

        easing = section["default_easing"]
        if not isinstance(easing, str) or easing not in EASINGS:
            available = ", ".join(sorted(EASINGS))
            raise ConfigError(
                f"engine.default_easing must be one of: {available}; got {easing!r}."
            )
        values["default_easing"] = easing
    return EngineConfig(**values)


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")
    try:
        payload = read_payload(path)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to load config from {path}: {exc}") from exc
    if payload is None:
        return EngineConfig()
    return engine_config_from_mapping(payload)


__all__ = [
    "BOUNDS_EPSILON",
    "DEFAULT_EASING",
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "MAX_A11Y_ITEMS",
    "MAX_DIAGNOSTIC_WARNINGS",
    "engine_config_from_mapping",
    "load_engine_config",
]
