"""Registry of chart definitions keyed by chart type."""

from __future__ import annotations

import builtins
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from chartmodel.errors import RegistryError

if TYPE_CHECKING:
    from chartmodel.charts.base import ChartDefinition


def _validate_key(label: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{label} must be a non-empty string.")
    return value


def _format_options(options: Iterable[str]) -> str:
    values = builtins.list(options)
    if not values:
        return "<none>"
    return ", ".join(sorted(values))


@dataclass(frozen=True)
class ChartMeta:
    """Display metadata for a registered chart type."""

    type: str
    display_name: str
    category: str
    preferred_aspect_ratio: Optional[str]
    default_pad: float

    def to_dict(self) -> dict:
        payload = {
            "type": self.type,
            "displayName": self.display_name,
            "category": self.category,
            "defaultPad": self.default_pad,
        }
        if self.preferred_aspect_ratio is not None:
            payload["preferredAspectRatio"] = self.preferred_aspect_ratio
        return payload


class ChartRegistry:
    """Chart definitions by type; read-only once frozen."""

    def __init__(self, definitions: Iterable["ChartDefinition"] = ()) -> None:
        self._entries: dict[str, "ChartDefinition"] = {}
        self._frozen = False
        for definition in definitions:
            self.register(definition)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, definition: "ChartDefinition", *, overwrite: bool = False) -> None:
        if self._frozen:
            raise RegistryError(
                f"Chart registry is frozen; cannot register {getattr(definition, 'type', definition)!r}."
            )
        chart_type = _validate_key("chart type", getattr(definition, "type", None))
        if chart_type in self._entries and not overwrite:
            raise RegistryError(
                f"Chart type {chart_type!r} is already registered; use overwrite=True to replace."
            )
        self._entries[chart_type] = definition

    def get(self, chart_type: str) -> "ChartDefinition":
        chart_type = _validate_key("chart type", chart_type)
        if chart_type not in self._entries:
            available = _format_options(self._entries.keys())
            raise KeyError(
                f"Chart type {chart_type!r} is not registered. Available: {available}."
            )
        return self._entries[chart_type]

    def find(self, chart_type: object) -> Optional["ChartDefinition"]:
        if not isinstance(chart_type, str):
            return None
        return self._entries.get(chart_type)

    def list(self) -> list[str]:
        return builtins.list(self._entries.keys())

    def __contains__(self, chart_type: object) -> bool:
        return isinstance(chart_type, str) and chart_type in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def freeze(self) -> "ChartRegistry":
        self._frozen = True
        return self

    def verify(self) -> list[str]:
        """Return contract problems found across registered definitions."""
        from chartmodel.charts.base import ChartDefinition

        problems: list[str] = []
        for key, definition in self._entries.items():
            if definition.type != key:
                problems.append(f"{key}: registered under a different type ({definition.type!r}).")
            if not isinstance(definition, ChartDefinition):
                problems.append(f"{key}: not a ChartDefinition instance.")
                continue
            for method in ("normalize", "marks", "a11y"):
                if getattr(type(definition), method) is getattr(ChartDefinition, method):
                    problems.append(f"{key}: missing {method} implementation.")
        return problems

    def get_chart_meta(self, chart_type: str) -> ChartMeta:
        definition = self.get(chart_type)
        return ChartMeta(
            type=definition.type,
            display_name=definition.display_name or definition.type,
            category=definition.category,
            preferred_aspect_ratio=definition.preferred_aspect_ratio,
            default_pad=definition.default_pad,
        )

    def all_chart_meta(self) -> list[ChartMeta]:
        return [self.get_chart_meta(chart_type) for chart_type in sorted(self._entries)]


__all__ = ["ChartMeta", "ChartRegistry"]
