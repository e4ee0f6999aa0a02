"""Donut chart: one arc wedge per segment around a center hole."""

from __future__ import annotations

import math
from typing import Optional

from chartmodel.a11y import a11y_label_with_segments_summary
from chartmodel.charts.base import ChartSpec, InteractionState, Layout, NormalizedSegments, ThemeTokens
from chartmodel.charts.segments import SegmentsChart
from chartmodel.charts.shared import class_name, spec_option_number
from chartmodel.diagnostics import WarningSink
from chartmodel.model import A11yTree, Mark, PathMark
from chartmodel.numeric import fixed2

_FULL_TURN = math.pi * 2


def _polar(cx: float, cy: float, radius: float, angle: float) -> tuple[float, float]:
    return cx + radius * math.cos(angle), cy + radius * math.sin(angle)


def _wedge(
    cx: float,
    cy: float,
    outer_r: float,
    inner_r: float,
    start: float,
    end: float,
    large_arc: int,
) -> str:
    ox0, oy0 = _polar(cx, cy, outer_r, start)
    ox1, oy1 = _polar(cx, cy, outer_r, end)
    ix0, iy0 = _polar(cx, cy, inner_r, start)
    ix1, iy1 = _polar(cx, cy, inner_r, end)
    return " ".join(
        [
            f"M {fixed2(ox0)} {fixed2(oy0)}",
            f"A {fixed2(outer_r)} {fixed2(outer_r)} 0 {large_arc} 1 {fixed2(ox1)} {fixed2(oy1)}",
            f"L {fixed2(ix1)} {fixed2(iy1)}",
            f"A {fixed2(inner_r)} {fixed2(inner_r)} 0 {large_arc} 0 {fixed2(ix0)} {fixed2(iy0)}",
            "Z",
        ]
    )


def arc_path(
    cx: float,
    cy: float,
    outer_r: float,
    inner_r: float,
    start: float,
    end: float,
) -> str:
    """SVG path for an annular wedge between two angles (radians)."""
    if abs(end - start) >= _FULL_TURN - 0.001:
        # A single arc cannot close a full circle; draw two halves.
        mid = start + math.pi
        return (
            _wedge(cx, cy, outer_r, inner_r, start, mid, 0)
            + " "
            + _wedge(cx, cy, outer_r, inner_r, mid, end, 0)
        )
    large_arc = 1 if end - start > math.pi else 0
    return _wedge(cx, cy, outer_r, inner_r, start, end, large_arc)


class DonutChart(SegmentsChart):
    type = "donut"
    default_pad = 2
    display_name = "Donut"
    category = "lines"
    preferred_aspect_ratio = "square"

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
        cx = layout.pad + usable_w / 2
        cy = layout.pad + usable_h / 2
        outer_r = min(usable_w, usable_h) / 2

        inner_pct = spec_option_number(
            spec, "inner_radius", 0.5, warnings, "Non-finite donut inner radius; defaulted to 0.5."
        )
        inner_r = outer_r * max(0.0, min(0.95, inner_pct))
        if outer_r <= 0:
            return []

        total = sum(segment.pct for segment in segments)
        if total <= 0:
            return []

        marks: list[Mark] = []
        start = -math.pi / 2
        for index, segment in enumerate(segments):
            end = start + segment.pct / total * _FULL_TURN
            marks.append(
                PathMark(
                    id=f"donut-segment-{index}",
                    d=arc_path(cx, cy, outer_r, inner_r, start, end),
                    fill=segment.color or "currentColor",
                    class_name=class_name("mv-donut-segment", spec),
                )
            )
            start = end
        return marks

    def a11y(self, spec: ChartSpec, normalized: NormalizedSegments, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_segments_summary("Donut chart", normalized.segments),
        )


__all__ = ["DonutChart", "arc_path"]
