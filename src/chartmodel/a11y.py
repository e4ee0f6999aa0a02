"""Accessibility labels, summaries and items inferred from normalized data."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import math
from typing import Any, Optional

from chartmodel.config.schema import MAX_A11Y_ITEMS
from chartmodel.model import (
    A11yItem,
    A11ySegmentsSummary,
    A11ySeriesSummary,
    A11ySummary,
    A11yTree,
    RenderModel,
)
from chartmodel.numeric import is_finite_number, round_half_up

ValueText = Callable[[float, int], Optional[str]]


def format_a11y_number(value: float) -> str:
    if not is_finite_number(value):
        return "0"
    rounded = round_half_up(value)
    if abs(value - rounded) < 1e-6:
        return str(rounded)
    return str(round_half_up(value * 100) / 100)


def summarize_series(series: Sequence[Any]) -> A11ySeriesSummary:
    if not series:
        return A11ySeriesSummary(count=0)

    finite = [float(value) for value in series if is_finite_number(value)]
    if not finite:
        return A11ySeriesSummary(count=len(series))

    first, last = finite[0], finite[-1]
    if last > first:
        trend = "up"
    elif last < first:
        trend = "down"
    else:
        trend = "flat"
    return A11ySeriesSummary(
        count=len(series),
        min=min(finite),
        max=max(finite),
        last=last,
        trend=trend,
    )


def _segment_fields(segment: Any) -> tuple[Any, Optional[str]]:
    if isinstance(segment, dict):
        return segment.get("pct"), segment.get("name")
    return getattr(segment, "pct", None), getattr(segment, "name", None)


def summarize_segments(segments: Sequence[Any]) -> A11ySegmentsSummary:
    largest_pct = -math.inf
    largest_name: Optional[str] = None
    count = 0
    for segment in segments:
        pct, name = _segment_fields(segment)
        if not is_finite_number(pct):
            continue
        count += 1
        if pct > largest_pct:
            largest_pct = float(pct)
            largest_name = name
    if count == 0:
        return A11ySegmentsSummary(count=0)
    return A11ySegmentsSummary(count=count, largest_pct=largest_pct, largest_name=largest_name)


def a11y_label_with_series_summary(base_label: str, series: Sequence[Any]) -> str:
    summary = summarize_series(series)
    if summary.count == 0:
        return f"{base_label} (empty)"
    if summary.min is None or summary.max is None or summary.last is None:
        return base_label
    return (
        f"{base_label} (min {format_a11y_number(summary.min)}, "
        f"max {format_a11y_number(summary.max)}, last {format_a11y_number(summary.last)})"
    )


def a11y_label_with_segments_summary(base_label: str, segments: Sequence[Any]) -> str:
    summary = summarize_segments(segments)
    if summary.count == 0:
        return f"{base_label} (empty)"
    largest_pct = round_half_up(summary.largest_pct or 0)
    largest_name = (summary.largest_name or "").strip()
    largest = f"{largest_name} {largest_pct}%" if largest_name else f"{largest_pct}%"
    return f"{base_label} ({summary.count} segments, largest {largest})"


def compute_a11y_summary(model: RenderModel, label: str = "Chart") -> A11yTree:
    text_count = sum(1 for mark in model.marks if mark.type == "text")
    return A11yTree(label=f"{label} ({len(model.marks)} marks, {text_count} text)", role="img")


def a11y_items_for_series(
    series: Sequence[Any],
    *,
    id_prefix: str = "series",
    label_prefix: str = "Value",
    max_items: int = MAX_A11Y_ITEMS,
    value_text: Optional[ValueText] = None,
) -> list[A11yItem]:
    items: list[A11yItem] = []
    for index, value in enumerate(series):
        if len(items) >= max_items:
            break
        if not is_finite_number(value):
            continue
        items.append(
            A11yItem(
                id=f"{id_prefix}-{index}",
                label=f"{label_prefix} {index + 1}",
                rank=index + 1,
                value=float(value),
                value_text=value_text(float(value), index) if value_text else None,
            )
        )
    return items


def a11y_items_for_segments(
    segments: Sequence[Any],
    *,
    id_prefix: str = "segment",
    label_fallback: str = "Segment",
    max_items: int = MAX_A11Y_ITEMS,
    value_text: Optional[ValueText] = None,
) -> list[A11yItem]:
    items: list[A11yItem] = []
    for index, segment in enumerate(segments):
        if len(items) >= max_items:
            break
        pct, name = _segment_fields(segment)
        if not is_finite_number(pct):
            continue
        pct = float(pct)
        label = (name or "").strip() or f"{label_fallback} {index + 1}"
        text = value_text(pct, index) if value_text else None
        items.append(
            A11yItem(
                id=f"{id_prefix}-{index}",
                label=label,
                rank=index + 1,
                value=pct,
                value_text=text if text is not None else f"{round_half_up(pct)}%",
            )
        )
    return items


def infer_a11y_summary(normalized: Any) -> Optional[A11ySummary]:
    series = getattr(normalized, "series", None)
    if isinstance(series, (list, tuple)):
        return summarize_series(series)
    segments = getattr(normalized, "segments", None)
    if isinstance(segments, (list, tuple)):
        return summarize_segments(segments)
    return None


def infer_a11y_items(normalized: Any, *, max_items: int = MAX_A11Y_ITEMS) -> Optional[list[A11yItem]]:
    series = getattr(normalized, "series", None)
    if isinstance(series, (list, tuple)):
        return a11y_items_for_series(series, max_items=max_items) or None
    segments = getattr(normalized, "segments", None)
    if isinstance(segments, (list, tuple)):
        return a11y_items_for_segments(segments, max_items=max_items) or None
    return None


__all__ = [
    "a11y_items_for_segments",
    "a11y_items_for_series",
    "a11y_label_with_segments_summary",
    "a11y_label_with_series_summary",
    "compute_a11y_summary",
    "format_a11y_number",
    "infer_a11y_items",
    "infer_a11y_summary",
    "summarize_segments",
    "summarize_series",
]
