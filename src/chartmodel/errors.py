"""Error hierarchy for chartmodel.

Malformed chart input never raises; it becomes a diagnostic warning on the
model. These exceptions cover programmer and environment failures only.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


class ChartModelError(Exception):
    """Base exception for chartmodel failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigError(ChartModelError):
    """Engine configuration loading or validation error."""


class ChartContractError(ChartModelError):
    """A chart definition returned something outside its contract."""


class RegistryError(ChartModelError):
    """Chart registration error (duplicate type, frozen registry)."""


class InputError(ChartModelError):
    """CLI input file could not be read or decoded."""


__all__ = [
    "ChartModelError",
    "ConfigError",
    "ChartContractError",
    "RegistryError",
    "InputError",
]
