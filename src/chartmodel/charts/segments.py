"""Segment-share charts: the shared base plus segmented bar and bitfield."""

from __future__ import annotations

import math
from typing import Any, Optional

from chartmodel.a11y import a11y_label_with_segments_summary
from chartmodel.charts.base import (
    ChartDefinition,
    ChartSpec,
    InteractionState,
    Layout,
    NormalizedSegments,
    ThemeTokens,
)
from chartmodel.charts.shared import (
    allocate_units_by_pct,
    class_name,
    coerce_finite_int,
    layout_segments_by_pct,
    normalize_segments,
    option,
    spec_option_number,
)
from chartmodel.diagnostics import WarningSink
from chartmodel.model import A11yTree, Def, Mark, MaskDef, PatternCircle, RectMark

BITFIELD_MASK_ID = "mv-bitfield-mask"


class SegmentsChart(ChartDefinition):
    """Base for charts fed ``[{pct, color, name?}]`` data."""

    category = "bars"
    empty_data_warning_message = "No segments data."
    preferred_aspect_ratio = "wide"

    def normalize(self, spec: ChartSpec, data: Any) -> NormalizedSegments:
        return NormalizedSegments(type=self.type, segments=normalize_segments(data))

    def is_empty(self, normalized: NormalizedSegments) -> bool:
        return not normalized.segments


class SegmentedBarChart(SegmentsChart):
    type = "segmented-bar"
    default_pad = 0
    display_name = "Segmented bar"
    preferred_aspect_ratio = None

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedSegments,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        if not normalized.segments:
            return []
        usable_w, usable_h = layout.usable_width, layout.usable_height
        gap = spec_option_number(
            spec, "gap", 2, warnings, "Non-finite segmented-bar gap; defaulted to 2."
        )
        runs = layout_segments_by_pct(normalized.segments, usable_w, gap)
        marks: list[Mark] = []
        for index, run in enumerate(runs):
            radius = min(usable_h / 2, 2, run.w / 2)
            marks.append(
                RectMark(
                    id=f"segmented-bar-seg-{index}",
                    x=layout.pad + run.x,
                    y=layout.pad,
                    w=run.w,
                    h=usable_h,
                    rx=radius,
                    ry=radius,
                    fill=run.color,
                    class_name=class_name("mv-segmented-bar-seg", spec),
                )
            )
        return marks

    def a11y(self, spec: ChartSpec, normalized: NormalizedSegments, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_segments_summary("Segmented bar chart", normalized.segments),
        )


class BitfieldChart(SegmentsChart):
    """Segment runs drawn through a dot-grid mask."""

    type = "bitfield"
    default_pad = 0
    display_name = "Bitfield"
    category = "dots"

    def _grid(
        self,
        spec: ChartSpec,
        layout: Layout,
        warnings: Optional[WarningSink],
    ) -> tuple[int, int, int]:
        cell_size = coerce_finite_int(
            option(spec, "cell_size", 4),
            4,
            1,
            warnings,
            "Non-finite bitfield cell size; defaulted to 4.",
        )
        cols = max(1, math.floor(layout.usable_width / cell_size))
        rows = max(1, math.floor(layout.usable_height / cell_size))
        return cell_size, cols, rows

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedSegments,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        cell_size, cols, rows = self._grid(spec, layout, warnings)
        segments = normalized.segments
        if not segments:
            return []

        grid_w = cols * cell_size
        grid_h = rows * cell_size
        x0 = y0 = layout.pad
        counts = allocate_units_by_pct(segments, cols)

        marks: list[Mark] = []
        x = x0
        last_index = len(segments) - 1
        for index, segment in enumerate(segments):
            count = counts[index]
            if count <= 0:
                continue
            w = max(0.0, grid_w - (x - x0)) if index == last_index else count * cell_size
            marks.append(
                RectMark(
                    id=f"bitfield-seg-{index}",
                    x=x,
                    y=y0,
                    w=w,
                    h=grid_h,
                    fill=segment.color,
                    mask=BITFIELD_MASK_ID,
                    class_name=class_name("mv-bitfield-seg", spec),
                )
            )
            x += w
        return marks

    def defs(
        self,
        spec: ChartSpec,
        normalized: NormalizedSegments,
        layout: Layout,
        warnings: Optional[WarningSink] = None,
    ) -> list[Def]:
        if not normalized.segments:
            return []
        # Cell size problems are already reported by marks().
        cell_size, cols, rows = self._grid(spec, layout, None)
        dot_radius = spec_option_number(
            spec, "dot_radius", 1.6, warnings, "Non-finite bitfield dot radius; defaulted to 1.6."
        )
        dots = [
            PatternCircle(
                cx=layout.pad + (col + 0.5) * cell_size,
                cy=layout.pad + (row + 0.5) * cell_size,
                r=dot_radius,
                fill="white",
                class_name="mv-bitfield-mask-dot",
            )
            for row in range(rows)
            for col in range(cols)
        ]
        return [
            MaskDef(
                id=BITFIELD_MASK_ID,
                x=0,
                y=0,
                width=layout.width,
                height=layout.height,
                mask_units="userSpaceOnUse",
                mask_content_units="userSpaceOnUse",
                marks=dots,
            )
        ]

    def a11y(self, spec: ChartSpec, normalized: NormalizedSegments, layout: Layout) -> A11yTree:
        return A11yTree(
            role="img",
            label=a11y_label_with_segments_summary("Bitfield chart", normalized.segments),
        )


__all__ = ["BITFIELD_MASK_ID", "BitfieldChart", "SegmentedBarChart", "SegmentsChart"]
