import datetime as dt

import numpy as np
import pytest

from chartmodel.infer import (
    coerce_number,
    infer_series_type,
    infer_spec,
    infer_value_type,
)


def test_number_array_becomes_sparkline() -> None:
    inferred = infer_spec([1, "2.5", np.float64(3)])

    assert inferred.spec == {"type": "sparkline"}
    assert inferred.data == [1.0, 2.5, 3.0]
    assert inferred.reason == "number-array"


def test_numpy_array_is_accepted() -> None:
    inferred = infer_spec(np.array([4, 5, 6]))

    assert inferred.reason == "number-array"
    assert inferred.data == [4.0, 5.0, 6.0]


def test_segment_array_becomes_donut() -> None:
    inferred = infer_spec([{"pct": "60", "color": "#f00", "name": "A"}, {"pct": 40, "color": "#0f0"}])

    assert inferred.spec == {"type": "donut"}
    assert inferred.reason == "segment-array"
    assert inferred.data == [
        {"pct": 60.0, "color": "#f00", "name": "A"},
        {"pct": 40.0, "color": "#0f0"},
    ]


def test_segments_field_is_unwrapped() -> None:
    inferred = infer_spec({"segments": [{"pct": 100, "color": "red"}], "title": "x"})

    assert inferred.reason == "segments-field"
    assert inferred.data == [{"pct": 100.0, "color": "red"}]


@pytest.mark.parametrize(
    ("value", "chart_type", "reason", "data"),
    [
        ({"current": 5, "previous": 3}, "bullet-delta", "bullet-delta", {"current": 5.0, "previous": 3.0}),
        (
            {"current": 5, "previous": 3, "target": 9, "max": "10"},
            "bullet-delta",
            "bullet-delta",
            {"current": 5.0, "previous": 3.0, "max": 10.0},
        ),
        ({"current": 5, "target": 9}, "dumbbell", "dumbbell", {"current": 5.0, "target": 9.0}),
        ({"value": "42", "max": None}, "bar", "bar", {"value": 42.0}),
        (
            {"series": [1, 2], "opacities": [0.5, 1]},
            "histogram",
            "series-object",
            {"series": [1.0, 2.0], "opacities": [0.5, 1.0]},
        ),
    ],
)
def test_record_recognizers_run_in_order(value, chart_type, reason, data) -> None:
    inferred = infer_spec(value)

    assert inferred.spec == {"type": chart_type}
    assert inferred.reason == reason
    assert inferred.data == data


def test_first_match_wins_over_later_recognizers() -> None:
    inferred = infer_spec({"segments": [], "value": 3})

    assert inferred.reason == "segments-field"
    assert inferred.data == []


def test_fallback_wraps_raw_input() -> None:
    raw = {"foo": "bar"}

    assert infer_spec(raw) is None
    inferred = infer_spec(raw, fallback_type="bar")
    assert inferred.reason == "fallback"
    assert inferred.data is raw
    assert inferred.to_dict() == {"spec": {"type": "bar"}, "data": raw, "reason": "fallback"}


def test_mixed_array_is_not_inferred() -> None:
    assert infer_spec([1, "two", 3]) is None
    assert infer_spec([1, 10**400, 3]) is None
    assert infer_spec({"current": 10**400, "target": 5}) is None
    assert infer_spec("1, 2, 3") is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3, 3.0),
        (" -1.5e2 ", -150.0),
        ("abc", None),
        ("", None),
        (True, None),
        ("1e999", None),
        (10**400, None),
    ],
)
def test_coerce_number(value, expected) -> None:
    assert coerce_number(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (4.2, "quantitative"),
        ("12", "quantitative"),
        ("2024-03-01", "temporal"),
        ("2024-03-01T10:30:00", "temporal"),
        (dt.date(2024, 1, 1), "temporal"),
        (np.datetime64("2024-01-01"), "temporal"),
        (np.datetime64("NaT"), "unknown"),
        ("apples", "nominal"),
        (True, "nominal"),
        ("   ", "unknown"),
        (None, "unknown"),
        (10**400, "unknown"),
    ],
)
def test_infer_value_type(value, expected) -> None:
    assert infer_value_type(value) == expected


def test_infer_series_type_votes_over_sample() -> None:
    result = infer_series_type(["2024-01-01", "2024-01-02", "x", 3])

    assert result.kind == "temporal"
    assert result.sample_count == 4
    assert result.temporal_count == 2
    assert result.nominal_count == 1
    assert result.numeric_count == 1


def test_infer_series_type_respects_sample_limit() -> None:
    values = [1] * 5 + ["a"] * 10

    result = infer_series_type(values, sample_limit=5)

    assert result.kind == "quantitative"
    assert result.sample_count == 5
    assert infer_series_type([]).kind == "unknown"
