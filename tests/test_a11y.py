import math

import pytest

from chartmodel.a11y import (
    a11y_items_for_segments,
    a11y_items_for_series,
    a11y_label_with_segments_summary,
    a11y_label_with_series_summary,
    compute_a11y_summary,
    format_a11y_number,
    infer_a11y_items,
    infer_a11y_summary,
    summarize_series,
)
from chartmodel.charts.base import NormalizedBar, NormalizedSegments, NormalizedSeries, Segment
from chartmodel.compute import compute_model


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, "3"), (2.0000001, "2"), (1.234, "1.23"), (1.236, "1.24"), (math.nan, "0"), (None, "0")],
)
def test_format_a11y_number(value, expected) -> None:
    assert format_a11y_number(value) == expected


def test_series_summary_trend_and_extent() -> None:
    summary = summarize_series([3, math.nan, 1, 5])

    assert summary.count == 4
    assert (summary.min, summary.max, summary.last) == (1, 5, 5)
    assert summary.trend == "up"
    assert summarize_series([2, 1]).trend == "down"
    assert summarize_series([math.nan]).min is None


def test_series_label() -> None:
    assert a11y_label_with_series_summary("Sparkline chart", [1, 2, 3]) == (
        "Sparkline chart (min 1, max 3, last 3)"
    )
    assert a11y_label_with_series_summary("Sparkline chart", []) == "Sparkline chart (empty)"
    assert a11y_label_with_series_summary("Sparkline chart", [math.nan]) == "Sparkline chart"


def test_segments_label_names_largest_segment() -> None:
    segments = [{"pct": 20, "name": "A"}, {"pct": 55.5, "name": " Beta "}, {"pct": math.nan}]

    assert a11y_label_with_segments_summary("Donut chart", segments) == (
        "Donut chart (2 segments, largest Beta 56%)"
    )
    assert a11y_label_with_segments_summary("Donut chart", [Segment(pct=40, color="#f00")]) == (
        "Donut chart (1 segments, largest 40%)"
    )
    assert a11y_label_with_segments_summary("Donut chart", []) == "Donut chart (empty)"


def test_series_items_skip_non_finite_and_cap() -> None:
    items = a11y_items_for_series([1, math.inf, 3, 4], max_items=2)

    assert [(item.id, item.label, item.rank, item.value) for item in items] == [
        ("series-0", "Value 1", 1, 1.0),
        ("series-2", "Value 3", 3, 3.0),
    ]


def test_segment_items_default_value_text() -> None:
    items = a11y_items_for_segments(
        [Segment(pct=33.4, color="#f00", name="Red"), Segment(pct=66.6, color="#0f0")],
        id_prefix="donut-segment",
    )

    assert [item.id for item in items] == ["donut-segment-0", "donut-segment-1"]
    assert [item.label for item in items] == ["Red", "Segment 2"]
    assert [item.value_text for item in items] == ["33%", "67%"]


def test_custom_value_text_wins() -> None:
    items = a11y_items_for_series([5], value_text=lambda value, index: f"{value:g} units")

    assert items[0].value_text == "5 units"


def test_infer_from_normalized_payloads() -> None:
    series = NormalizedSeries(type="sparkline", series=(1.0, 2.0))
    segments = NormalizedSegments(type="donut", segments=(Segment(pct=100, color="#000"),))

    assert infer_a11y_summary(series).trend == "up"
    assert infer_a11y_summary(segments).largest_pct == 100
    assert infer_a11y_summary(NormalizedBar(type="bar", value=1, max=2)) is None
    assert [item.id for item in infer_a11y_items(series)] == ["series-0", "series-1"]
    assert infer_a11y_items(NormalizedSeries(type="sparkline")) is None


def test_compute_a11y_summary_counts_marks() -> None:
    model = compute_model({"type": "bar"}, {"value": 5, "max": 10}, {"width": 100, "height": 10})

    text_count = sum(1 for mark in model.marks if mark.type == "text")
    summary = compute_a11y_summary(model)

    assert summary.label == f"Chart ({len(model.marks)} marks, {text_count} text)"
    assert summary.role == "img"
