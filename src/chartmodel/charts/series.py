"""Charts fed a flat number series: sparkline, spark area and sparkline bars."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional

from chartmodel.a11y import a11y_items_for_series, a11y_label_with_series_summary
from chartmodel.charts.base import (
    ChartDefinition,
    ChartSpec,
    InteractionState,
    Layout,
    NormalizedSeries,
    ThemeTokens,
)
from chartmodel.charts.shared import (
    class_name,
    coerce_finite_non_negative,
    finite_series,
    normalized_pct,
    option,
    polyline_d,
    spark_area_gradient_id,
    sparkline_path,
    spec_opacity,
    spec_option_number,
)
from chartmodel.diagnostics import WarningSink
from chartmodel.model import (
    A11yTree,
    CircleMark,
    Def,
    GradientStop,
    LinearGradientDef,
    Mark,
    PathMark,
    RectMark,
)
from chartmodel.numeric import fixed2

SERIES_COLOR = "var(--mv-series-1, currentColor)"


class SeriesChart(ChartDefinition):
    """Base for charts fed ``[number, ...]`` data; non-finite values are dropped."""

    empty_data_warning_message = "No series data."
    category = "lines"

    def normalize(self, spec: ChartSpec, data: Any) -> NormalizedSeries:
        return NormalizedSeries(type=self.type, series=finite_series(data))

    def is_empty(self, normalized: NormalizedSeries) -> bool:
        return not normalized.series


class SparklineChart(SeriesChart):
    type = "sparkline"
    default_pad = 3
    display_name = "Sparkline"

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedSeries,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        d, last = sparkline_path(normalized.series, layout.width, layout.height, layout.pad)
        marks: list[Mark] = [
            PathMark(
                id="sparkline-line",
                d=d,
                stroke_linecap="round",
                stroke_linejoin="round",
                class_name=class_name("mv-line", spec),
            )
        ]
        if option(spec, "show_dot", True) and last is not None:
            radius = coerce_finite_non_negative(
                option(spec, "dot_radius", 2.4),
                2.4,
                warnings,
                "Non-finite dot radius; defaulted to 2.4.",
            )
            marks.append(
                CircleMark(
                    id="sparkline-dot",
                    cx=last[0],
                    cy=last[1],
                    r=radius,
                    class_name="mv-sparkline-dot",
                )
            )
        return marks

    def a11y(self, spec: ChartSpec, normalized: NormalizedSeries, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_series_summary("Sparkline chart", normalized.series),
        )


class SparkAreaChart(SeriesChart):
    """Line over a gradient-filled area; values are read as percentages."""

    type = "spark-area"
    default_pad = 3
    display_name = "Spark Area"

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedSeries,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        series = normalized.series
        if not series:
            return []
        stroke_width = spec_option_number(
            spec, "stroke_width", 2, warnings, "Non-finite spark-area stroke width; defaulted to 2."
        )
        dot_radius = spec_option_number(
            spec, "dot_radius", 2.2, warnings, "Non-finite spark-area dot radius; defaulted to 2.2."
        )

        x0, x1 = layout.pad, layout.width - layout.pad
        y0, y1 = layout.pad, layout.height - layout.pad
        dx = (x1 - x0) / (len(series) - 1) if len(series) > 1 else x1 - x0
        y_span = (y1 - y0) or 1
        points = [
            (x0 + dx * index, y1 - normalized_pct(value) / 100 * y_span)
            for index, value in enumerate(series)
        ]
        line_d = polyline_d(points)
        last_x, last_y = points[-1]
        area_d = (
            f"{line_d} L {fixed2(last_x)} {fixed2(y1)} L {fixed2(points[0][0])} {fixed2(y1)} Z"
        )
        gradient_id = spark_area_gradient_id(series)

        return [
            PathMark(
                id="spark-area-area",
                d=area_d,
                fill=f"url(#{gradient_id})",
                stroke="none",
                class_name=class_name("mv-spark-area-area", spec),
            ),
            PathMark(
                id="spark-area-line",
                d=line_d,
                fill="none",
                stroke_linecap="round",
                stroke_linejoin="round",
                stroke_width=stroke_width,
                class_name=class_name("mv-spark-area-line", spec),
            ),
            CircleMark(
                id="spark-area-dot",
                cx=last_x,
                cy=last_y,
                r=dot_radius,
                class_name=class_name("mv-spark-area-dot", spec),
            ),
        ]

    def defs(
        self,
        spec: ChartSpec,
        normalized: NormalizedSeries,
        layout: Layout,
        warnings: Optional[WarningSink] = None,
    ) -> list[Def]:
        top_opacity = spec_opacity(
            spec,
            "gradient_top_opacity",
            0.45,
            warnings,
            "Non-finite spark-area gradient top opacity; defaulted to 0.45.",
        )
        return [
            LinearGradientDef(
                id=spark_area_gradient_id(normalized.series),
                x1=0,
                y1=0,
                x2=0,
                y2=1,
                stops=[
                    GradientStop(offset=0, color=SERIES_COLOR, opacity=top_opacity),
                    GradientStop(offset=1, color=SERIES_COLOR, opacity=0),
                ],
            )
        ]

    def a11y(self, spec: ChartSpec, normalized: NormalizedSeries, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_series_summary("Spark area chart", normalized.series),
            items=a11y_items_for_series(
                normalized.series, id_prefix="spark-area-point", label_prefix="Point"
            ),
        )


class SparklineBarsChart(SeriesChart):
    """One min/max scaled vertical bar per value, at least 2px tall."""

    type = "sparkline-bars"
    default_pad = 2
    display_name = "Sparkline bars"
    category = "bars"

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedSeries,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        series = normalized.series
        if not series:
            return []
        usable_w, usable_h = layout.usable_width, layout.usable_height
        gap = spec_option_number(spec, "gap", 1, warnings, "Non-finite sparkline-bars gap; defaulted to 1.")

        count = len(series)
        bar_w = (usable_w - gap * max(0, count - 1)) / count
        if bar_w <= 0:
            return []

        lo, hi = normalized.min, normalized.max
        denom = (hi - lo) or 1
        colors = option(spec, "colors")
        colors = list(colors) if isinstance(colors, Sequence) and not isinstance(colors, str) else None
        fallback_color = colors[-1] if colors else None

        radius = None
        if option(spec, "bar_radius") is not None:
            radius = spec_option_number(
                spec, "bar_radius", 0, warnings, "Non-finite sparkline-bars barRadius; defaulted to 0."
            )

        marks: list[Mark] = []
        for index, value in enumerate(series):
            bar_h = max(2.0, (value - lo) / denom * usable_h)
            fill = None
            if colors is not None:
                fill = colors[index] if index < len(colors) else fallback_color
                fill = fill if isinstance(fill, str) else None
            marks.append(
                RectMark(
                    id=f"sparkline-bars-bar-{index}",
                    x=layout.pad + index * (bar_w + gap),
                    y=layout.pad + usable_h - bar_h,
                    w=bar_w,
                    h=bar_h,
                    rx=radius,
                    ry=radius,
                    fill=fill,
                    class_name=class_name("mv-sparkline-bars-bar", spec),
                )
            )
        return marks

    def a11y(self, spec: ChartSpec, normalized: NormalizedSeries, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_series_summary("Sparkline bars chart", normalized.series),
        )


__all__ = [
    "SERIES_COLOR",
    "SeriesChart",
    "SparkAreaChart",
    "SparklineBarsChart",
    "SparklineChart",
]
