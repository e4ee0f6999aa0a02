"""Pareto and split-Pareto segment charts."""

from __future__ import annotations

from itertools import accumulate
from typing import Optional

from chartmodel.a11y import a11y_items_for_segments, a11y_label_with_segments_summary
from chartmodel.charts.base import (
    ChartSpec,
    InteractionState,
    Layout,
    NormalizedSegments,
    ThemeTokens,
)
from chartmodel.charts.segments import SegmentsChart
from chartmodel.charts.shared import (
    class_name,
    coerce_finite_non_negative,
    layout_segments_by_pct,
    option,
    spec_option_number,
)
from chartmodel.diagnostics import WarningSink
from chartmodel.model import A11yTree, LineMark, Mark, RectMark
from chartmodel.numeric import as_finite, clamp


class ParetoChart(SegmentsChart):
    """Faded full-height segments under bottom-aligned cumulative bars."""

    type = "pareto"
    default_pad = 0
    display_name = "Pareto"

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedSegments,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        segments = normalized.segments
        if not segments:
            return []
        usable_w, usable_h = layout.usable_width, layout.usable_height
        x0 = y0 = layout.pad

        gap = spec_option_number(spec, "gap", 0, warnings, "Non-finite pareto gap; defaulted to 0.")
        bg_opacity = as_finite(option(spec, "bg_opacity", 0.25))
        bg_opacity = 0.25 if bg_opacity is None else bg_opacity
        runs = layout_segments_by_pct(segments, usable_w, gap)
        cumulative = list(accumulate(segment.pct for segment in segments))

        marks: list[Mark] = []
        for index, run in enumerate(runs):
            marks.append(
                RectMark(
                    id=f"pareto-bg-{index}",
                    x=x0 + run.x,
                    y=y0,
                    w=run.w,
                    h=usable_h,
                    rx=0,
                    ry=0,
                    fill=run.color,
                    fill_opacity=bg_opacity,
                    class_name=class_name("mv-pareto-bg", spec),
                )
            )
        for index, run in enumerate(runs):
            h = cumulative[index] / 100 * usable_h
            marks.append(
                RectMark(
                    id=f"pareto-seg-{index}",
                    x=x0 + run.x,
                    y=y0 + usable_h - h,
                    w=run.w,
                    h=h,
                    rx=0,
                    ry=0,
                    fill=run.color,
                    class_name=class_name("mv-pareto-seg", spec),
                )
            )
        return marks

    def a11y(self, spec: ChartSpec, normalized: NormalizedSegments, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_segments_summary("Pareto chart", normalized.segments),
            items=a11y_items_for_segments(normalized.segments, id_prefix="pareto-seg"),
        )


class SplitParetoChart(SegmentsChart):
    """Full-height segments split by a divider where the cumulative share crosses a threshold."""

    type = "split-pareto"
    default_pad = 0
    display_name = "Split Pareto"

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedSegments,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        segments = normalized.segments
        if not segments:
            return []
        usable_w, usable_h = layout.usable_width, layout.usable_height
        x0 = y0 = layout.pad

        gap = coerce_finite_non_negative(
            option(spec, "gap", 0), 0, warnings, "Non-finite split-pareto gap; defaulted to 0."
        )
        threshold = as_finite(option(spec, "threshold", 80))
        threshold = 80.0 if threshold is None else threshold
        divider_opacity = as_finite(option(spec, "divider_opacity", 0.6))
        divider_width = as_finite(option(spec, "divider_width", 2))

        runs = layout_segments_by_pct(segments, usable_w, gap)

        # The divider sits after the segment that first reaches the threshold.
        cumulative = 0.0
        divider_pct = 0.0
        for segment in segments:
            if cumulative < threshold:
                divider_pct = cumulative + segment.pct
            cumulative += segment.pct
        divider_pct = clamp(divider_pct, 0.0, 100.0)

        marks: list[Mark] = [
            RectMark(
                id=f"split-pareto-seg-{index}",
                x=x0 + run.x,
                y=y0,
                w=run.w,
                h=usable_h,
                rx=0,
                ry=0,
                fill=run.color,
                class_name=class_name("mv-split-pareto-seg", spec),
            )
            for index, run in enumerate(runs)
        ]
        divider_x = x0 + divider_pct / 100 * usable_w
        marks.append(
            LineMark(
                id="split-pareto-divider",
                x1=divider_x,
                y1=y0,
                x2=divider_x,
                y2=y0 + usable_h,
                stroke="#ffffff",
                stroke_opacity=0.6 if divider_opacity is None else divider_opacity,
                stroke_width=2 if divider_width is None else divider_width,
                class_name=class_name("mv-split-pareto-divider", spec),
            )
        )
        return marks

    def a11y(self, spec: ChartSpec, normalized: NormalizedSegments, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_segments_summary("Split Pareto chart", normalized.segments),
            items=a11y_items_for_segments(normalized.segments, id_prefix="split-pareto-seg"),
        )


__all__ = ["ParetoChart", "SplitParetoChart"]
