"""Chart definition contract and the runtime types it consumes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

from chartmodel.diagnostics import WarningSink
from chartmodel.model import A11yTree, Def, Mark

ChartSpec = Mapping[str, Any]

CATEGORIES = ("lines", "bars", "grids", "dots")
ASPECT_RATIOS = ("square", "wide", "tall")


@dataclass(frozen=True)
class Layout:
    """Resolved pixel geometry; always finite and non-negative."""

    width: float
    height: float
    pad: float

    @property
    def usable_width(self) -> float:
        return max(0.0, self.width - self.pad * 2)

    @property
    def usable_height(self) -> float:
        return max(0.0, self.height - self.pad * 2)


@dataclass(frozen=True)
class InteractionState:
    hovered_mark_id: Optional[str] = None
    selected_mark_ids: tuple[str, ...] = ()
    focused_mark_id: Optional[str] = None


@dataclass(frozen=True)
class ThemeTokens:
    # Built-in charts style through renderer defaults; tokens are pass-through.
    series1: Optional[str] = None


@dataclass(frozen=True)
class Segment:
    pct: float
    color: str
    name: Optional[str] = None


@dataclass(frozen=True)
class NormalizedSeries:
    type: str
    series: tuple[float, ...] = ()

    @property
    def min(self) -> float:
        return min(self.series) if self.series else 0.0

    @property
    def max(self) -> float:
        return max(self.series) if self.series else 1.0


@dataclass(frozen=True)
class NormalizedSegments:
    type: str
    segments: tuple[Segment, ...] = ()


@dataclass(frozen=True)
class NormalizedBar:
    type: str
    value: float
    max: float


@dataclass(frozen=True)
class NormalizedRange:
    """Two positions on a shared ``[0, max]`` track.

    ``reference`` is the target for dumbbell charts and the previous value
    for bullet-delta charts.
    """

    type: str
    current: float
    reference: float
    max: float


@dataclass(frozen=True)
class NormalizedHistogram:
    type: str
    series: tuple[float, ...] = ()
    opacities: Optional[tuple[float, ...]] = None


Normalized = Union[
    NormalizedSeries,
    NormalizedSegments,
    NormalizedBar,
    NormalizedRange,
    NormalizedHistogram,
]


class ChartDefinition:
    """Base class for chart plug-ins.

    Subclasses set the class attributes and override ``normalize``, ``marks``
    and ``a11y``; ``defs`` and ``is_empty`` have usable defaults. ``normalize``
    must be total: malformed data is coerced, never raised.
    """

    type: str = ""
    default_pad: float = 0.0
    empty_data_warning_message: Optional[str] = None
    empty_data_hint: Optional[str] = None
    display_name: Optional[str] = None
    category: str = "bars"
    preferred_aspect_ratio: Optional[str] = None

    def normalize(self, spec: ChartSpec, data: Any) -> Normalized:
        raise NotImplementedError(f"{type(self).__name__}.normalize is not implemented.")

    def is_empty(self, normalized: Normalized) -> bool:
        return False

    def marks(
        self,
        spec: ChartSpec,
        normalized: Normalized,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> Sequence[Mark]:
        raise NotImplementedError(f"{type(self).__name__}.marks is not implemented.")

    def defs(
        self,
        spec: ChartSpec,
        normalized: Normalized,
        layout: Layout,
        warnings: Optional[WarningSink] = None,
    ) -> Sequence[Def]:
        return []

    def a11y(self, spec: ChartSpec, normalized: Normalized, layout: Layout) -> A11yTree:
        raise NotImplementedError(f"{type(self).__name__}.a11y is not implemented.")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r})"


__all__ = [
    "ASPECT_RATIOS",
    "CATEGORIES",
    "ChartDefinition",
    "ChartSpec",
    "InteractionState",
    "Layout",
    "Normalized",
    "NormalizedBar",
    "NormalizedHistogram",
    "NormalizedRange",
    "NormalizedSegments",
    "NormalizedSeries",
    "Segment",
    "ThemeTokens",
]
