"""Two-point track charts: dumbbell (current vs target) and bullet delta."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from chartmodel.charts.base import (
    ChartDefinition,
    ChartSpec,
    InteractionState,
    Layout,
    NormalizedRange,
    ThemeTokens,
)
from chartmodel.charts.shared import class_name, spec_opacity, spec_option_number
from chartmodel.diagnostics import WarningSink
from chartmodel.model import A11yTree, CircleMark, LineMark, Mark, PathMark
from chartmodel.numeric import as_finite, clamp, fixed2, round_half_up


class RangeChart(ChartDefinition):
    """Base for ``{current, <reference>, max?}`` records on a ``[0, max]`` track."""

    reference_field = "target"
    category = "lines"

    def normalize(self, spec: ChartSpec, data: Any) -> NormalizedRange:
        record = data if isinstance(data, Mapping) else {}
        raw_max = record.get("max")
        maximum = 100.0 if raw_max is None else as_finite(raw_max)
        if maximum is None or maximum <= 0:
            maximum = 100.0
        current = as_finite(record.get("current")) or 0.0
        reference = as_finite(record.get(self.reference_field)) or 0.0
        return NormalizedRange(
            type=self.type,
            current=clamp(current, 0.0, maximum),
            reference=clamp(reference, 0.0, maximum),
            max=maximum,
        )

    def _percent(self, value: float, maximum: float) -> int:
        return 0 if maximum == 0 else round_half_up(value / maximum * 100)

    def _to_x(self, value: float, normalized: NormalizedRange, layout: Layout) -> float:
        x0, x1 = layout.pad, layout.width - layout.pad
        return x0 + clamp(value, 0.0, normalized.max) / normalized.max * (x1 - x0)


class DumbbellChart(RangeChart):
    type = "dumbbell"
    default_pad = 6
    display_name = "Dumbbell"
    reference_field = "target"

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedRange,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        x0, x1 = layout.pad, layout.width - layout.pad
        y = layout.height / 2

        def number(key: str, default: float) -> float:
            label = key.replace("_", " ")
            return spec_option_number(
                spec, key, default, warnings, f"Non-finite dumbbell {label}; defaulted to {default:g}."
            )

        dot_radius = number("dot_radius", 4)
        track_width = number("track_stroke_width", 3)
        range_width = number("range_stroke_width", 3.5)
        track_opacity = number("track_stroke_opacity", 0.15)
        range_opacity = number("range_stroke_opacity", 0.7)
        target_fill_opacity = number("target_fill_opacity", 0.25)
        target_stroke_opacity = number("target_stroke_opacity", 0.65)
        target_stroke_width = number("target_stroke_width", 1.4)

        cx = self._to_x(normalized.current, normalized, layout)
        tx = self._to_x(normalized.reference, normalized, layout)

        return [
            LineMark(
                id="dumbbell-track",
                x1=x0,
                y1=y,
                x2=x1,
                y2=y,
                opacity=1,
                stroke_linecap="round",
                stroke_opacity=track_opacity,
                stroke_width=track_width,
                class_name=class_name("mv-dumbbell-track", spec),
            ),
            LineMark(
                id="dumbbell-range",
                x1=min(cx, tx),
                y1=y,
                x2=max(cx, tx),
                y2=y,
                opacity=1,
                stroke_linecap="round",
                stroke_opacity=range_opacity,
                stroke_width=range_width,
                class_name=class_name("mv-dumbbell-range", spec),
            ),
            CircleMark(
                id="dumbbell-current",
                cx=cx,
                cy=y,
                r=dot_radius,
                class_name=class_name("mv-dumbbell-current", spec),
            ),
            CircleMark(
                id="dumbbell-target",
                cx=tx,
                cy=y,
                r=dot_radius,
                fill_opacity=target_fill_opacity,
                stroke_opacity=target_stroke_opacity,
                stroke_width=target_stroke_width,
                class_name=class_name("mv-dumbbell-target", spec),
            ),
        ]

    def a11y(self, spec: ChartSpec, normalized: NormalizedRange, layout: Layout) -> A11yTree:
        current = self._percent(normalized.current, normalized.max)
        target = self._percent(normalized.reference, normalized.max)
        return A11yTree(role="img", label=f"Dumbbell chart (current {current}%, target {target}%)")


class BulletDeltaChart(RangeChart):
    """Track with previous and current dots and an arrow showing direction."""

    type = "bullet-delta"
    default_pad = 4
    display_name = "Bullet delta"
    reference_field = "previous"

    def marks(
        self,
        spec: ChartSpec,
        normalized: NormalizedRange,
        layout: Layout,
        state: Optional[InteractionState] = None,
        theme: Optional[ThemeTokens] = None,
        warnings: Optional[WarningSink] = None,
    ) -> list[Mark]:
        x0, x1 = layout.pad, layout.width - layout.pad
        y = layout.height / 2

        def number(key: str, default: float) -> float:
            label = key.replace("_", " ")
            return spec_option_number(
                spec, key, default, warnings, f"Non-finite bullet-delta {label}; defaulted to {default:g}."
            )

        def opacity(key: str, default: float) -> float:
            label = key.replace("_", " ")
            return spec_opacity(
                spec, key, default, warnings, f"Non-finite bullet-delta {label}; defaulted to {default:g}."
            )

        track_width = number("track_stroke_width", 5)
        track_opacity = opacity("track_stroke_opacity", 0.18)
        delta_width = number("delta_stroke_width", 5)
        delta_opacity = opacity("delta_stroke_opacity", 0.7)
        previous_radius = number("previous_dot_radius", 3.4)
        previous_opacity = opacity("previous_dot_opacity", 0.35)
        current_radius = number("current_dot_radius", 4.2)
        arrow_opacity = opacity("arrow_opacity", 0.75)

        cx = self._to_x(normalized.current, normalized, layout)
        px = self._to_x(normalized.reference, normalized, layout)

        up = normalized.current >= normalized.reference
        if up:
            max_tip = max(0.0, y - layout.pad)
        else:
            max_tip = max(0.0, layout.height - layout.pad - y)
        tip_offset = min(number("arrow_tip_offset", 10), max_tip)
        base_offset = min(number("arrow_base_offset", 4), tip_offset)
        half_width = number("arrow_half_width", 6)

        tip_y = y - tip_offset if up else y + tip_offset
        base_y = y - base_offset if up else y + base_offset
        arrow_d = (
            f"M {fixed2(cx)} {fixed2(tip_y)} "
            f"L {fixed2(cx + half_width)} {fixed2(base_y)} "
            f"L {fixed2(cx - half_width)} {fixed2(base_y)} Z"
        )

        return [
            LineMark(
                id="bullet-delta-track",
                x1=x0,
                y1=y,
                x2=x1,
                y2=y,
                opacity=1,
                stroke_linecap="round",
                stroke_opacity=track_opacity,
                stroke_width=track_width,
                class_name=class_name("mv-bullet-delta-track", spec),
            ),
            LineMark(
                id="bullet-delta-delta",
                x1=min(px, cx),
                y1=y,
                x2=max(px, cx),
                y2=y,
                opacity=1,
                stroke_linecap="round",
                stroke_opacity=delta_opacity,
                stroke_width=delta_width,
                class_name=class_name("mv-bullet-delta-delta", spec),
            ),
            CircleMark(
                id="bullet-delta-previous",
                cx=px,
                cy=y,
                r=previous_radius,
                fill_opacity=previous_opacity,
                class_name=class_name("mv-bullet-delta-previous", spec),
            ),
            CircleMark(
                id="bullet-delta-current",
                cx=cx,
                cy=y,
                r=current_radius,
                class_name=class_name("mv-bullet-delta-current", spec),
            ),
            PathMark(
                id="bullet-delta-arrow",
                d=arrow_d,
                fill_opacity=arrow_opacity,
                class_name=class_name("mv-bullet-delta-arrow", spec),
            ),
        ]

    def a11y(self, spec: ChartSpec, normalized: NormalizedRange, layout: Layout) -> A11yTree:
        current = self._percent(normalized.current, normalized.max)
        previous = self._percent(normalized.reference, normalized.max)
        return A11yTree(
            role="img",
            label=f"Bullet delta chart (current {current}%, previous {previous}%)",
        )


__all__ = ["BulletDeltaChart", "DumbbellChart", "RangeChart"]
