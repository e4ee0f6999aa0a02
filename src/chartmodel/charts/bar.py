"""Single horizontal progress bar."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from chartmodel.charts.base import (
    ChartDefinition,
    ChartSpec,
    InteractionState,
    Layout,
    NormalizedBar,
    ThemeTokens,
)
from chartmodel.charts.shared import class_name
from chartmodel.diagnostics import WarningSink
from chartmodel.model import A11yItem, A11yTree, RectMark
from chartmodel.numeric import as_finite, clamp, round_half_up


def _pct(value: float, maximum: float) -> int:
    return 0 if maximum == 0 else round_half_up(value / maximum * 100)


class BarChart(ChartDefinition):
    type = "bar"
    default_pad = 3
    display_name = "Bar"
    category = "bars"
    preferred_aspect_ratio = "wide"

    def normalize(self, spec: ChartSpec, data: Any) -> NormalizedBar:
        record = data if isinstance(data, Mapping) else {}
        value = as_finite(record.get("value"))
        value = 0.0 if value is None else value
        raw_max = record.get("max")
        maximum = value if raw_max is None else as_finite(raw_max)
        maximum = value if maximum is None else maximum
        return NormalizedBar(type=self.type, value=max(value, 0.0), max=max(maximum, 0.0))

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedBar,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[RectMark]:
        ratio = 0.0 if normalized.max == 0 else clamp(normalized.value / normalized.max, 0.0, 1.0)
        return [
            RectMark(
                id="bar-fill",
                x=layout.pad,
                y=layout.pad,
                w=layout.usable_width * ratio,
                h=layout.usable_height,
                class_name=class_name("mv-bar", spec),
            )
        ]

    def a11y(self, spec: ChartSpec, normalized: NormalizedBar, layout: Layout) -> A11yTree:
        pct = _pct(normalized.value, normalized.max)
        return A11yTree(
            role="img",
            label=f"Bar chart ({pct}%)",
            items=[
                A11yItem(id="bar-fill", label="Value", value=normalized.value, value_text=f"{pct}%")
            ],
        )


__all__ = ["BarChart"]
