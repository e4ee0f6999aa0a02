"""Mini histogram: sampled series values drawn as percentage-height bars."""

from __future__ import annotations

from collections.abc import Mapping
import math
from typing import Any, Optional

from chartmodel.a11y import a11y_items_for_series, a11y_label_with_series_summary
from chartmodel.charts.base import (
    ChartDefinition,
    ChartSpec,
    InteractionState,
    Layout,
    NormalizedHistogram,
    ThemeTokens,
)
from chartmodel.charts.series import SERIES_COLOR
from chartmodel.charts.shared import (
    class_name,
    coerce_finite_int,
    finite_series,
    normalized_pct,
    option,
    spec_option_number,
)
from chartmodel.diagnostics import WarningSink
from chartmodel.model import A11yTree, Def, GradientStop, LinearGradientDef, Mark, RectMark

GRADIENT_ID = "mv-histogram-gradient"
DEFAULT_OPACITY = 0.85


class HistogramChart(ChartDefinition):
    type = "histogram"
    default_pad = 3
    display_name = "Mini histogram"
    category = "bars"
    empty_data_warning_message = "No series data."

    def normalize(self, spec: ChartSpec, data: Any) -> NormalizedHistogram:
        record = data if isinstance(data, Mapping) else {}
        series = finite_series(record.get("series"))
        opacities = record.get("opacities")
        return NormalizedHistogram(
            type=self.type,
            series=series,
            opacities=finite_series(opacities) if opacities is not None else None,
        )

    def is_empty(self, normalized: NormalizedHistogram) -> bool:
        return not normalized.series

    def _sample(
        self,
        spec: ChartSpec,
        normalized: NormalizedHistogram,
        warnings: Optional[WarningSink],
    ) -> list[tuple[int, float]]:
        bins = coerce_finite_int(
            option(spec, "bins", 18), 18, 1, warnings, "Non-finite histogram bins; defaulted to 18."
        )
        stride = max(1, math.floor(len(normalized.series) / bins))
        return [
            (index, normalized_pct(normalized.series[index]))
            for index in range(0, len(normalized.series), stride)
        ]

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedHistogram,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        width, height, pad = layout.width, layout.height, layout.pad
        sampled = self._sample(spec, normalized, warnings)
        count = len(sampled)
        if count == 0:
            return []

        radius = None
        if option(spec, "bar_radius") is not None:
            radius = spec_option_number(
                spec, "bar_radius", 0, warnings, "Non-finite histogram bar radius; defaulted to 0."
            )
        fill = f"url(#{GRADIENT_ID})" if option(spec, "gradient") else None
        css = class_name("mv-histogram-bar", spec)

        def _opacity(source_index: int) -> float:
            if normalized.opacities is None:
                return DEFAULT_OPACITY
            if source_index < len(normalized.opacities):
                return normalized.opacities[source_index]
            return 1.0

        def _bar(source_index: int, value: float, x: float, w: float) -> RectMark:
            bar_h = value / 100 * (height - pad * 2)
            return RectMark(
                id=f"histogram-bar-{source_index}",
                x=x,
                y=height - pad - bar_h,
                w=w,
                h=bar_h,
                rx=radius,
                ry=radius,
                fill=fill,
                fill_opacity=_opacity(source_index),
                class_name=css,
            )

        if option(spec, "gap") is None:
            # Without an explicit gap, bars are inset by 0.4px on each side.
            bin_w = (width - pad * 2) / count
            return [
                _bar(source_index, value, pad + i * bin_w + 0.4, max(1.0, bin_w - 0.8))
                for i, (source_index, value) in enumerate(sampled)
            ]

        gap = spec_option_number(spec, "gap", 0, warnings, "Non-finite histogram gap; defaulted to 0.")
        usable_w = layout.usable_width
        available_w = max(0.0, usable_w - gap * max(0, count - 1))
        bar_w = available_w / count
        x_end = pad + usable_w
        marks: list[Mark] = []
        for i, (source_index, value) in enumerate(sampled):
            x = pad + i * (bar_w + gap)
            w = max(0.0, x_end - x) if i == count - 1 else bar_w
            marks.append(_bar(source_index, value, x, w))
        return marks

    def defs(
        self,
        spec: ChartSpec,
        normalized: NormalizedHistogram,
        layout: Layout,
        warnings: Optional[WarningSink] = None,
    ) -> list[Def]:
        if not option(spec, "gradient") or not normalized.series:
            return []
        top_opacity = spec_option_number(
            spec,
            "gradient_top_opacity",
            0.35,
            warnings,
            "Non-finite histogram gradientTopOpacity; defaulted to 0.35.",
        )
        return [
            LinearGradientDef(
                id=GRADIENT_ID,
                x1=0,
                y1=1,
                x2=0,
                y2=0,
                stops=[
                    GradientStop(offset=0, color=SERIES_COLOR, opacity=1),
                    GradientStop(offset=1, color=SERIES_COLOR, opacity=top_opacity),
                ],
            )
        ]

    def a11y(self, spec: ChartSpec, normalized: NormalizedHistogram, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_series_summary("Histogram chart", normalized.series),
            items=a11y_items_for_series(normalized.series, id_prefix="histogram-bin", label_prefix="Bin"),
        )


__all__ = ["GRADIENT_ID", "HistogramChart"]
