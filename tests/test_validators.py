import math

import pytest

from chartmodel.validators import (
    RECORD_SHAPES,
    ValidationIssue,
    format_issue,
    format_issues,
    format_issues_inline,
    format_path,
    prepend_path,
    stringify,
    validate_array,
    validate_chart_data,
    validate_number,
    validate_number_in_range,
    validate_record_data,
    validate_segment_data,
    validate_string,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "null"),
        (True, "true"),
        ("a", '"a"'),
        (math.nan, "NaN"),
        (-math.inf, "-Infinity"),
        (10**400, "Infinity"),
        (-(10**400), "-Infinity"),
        (3.0, "3"),
        (2.5, "2.5"),
        ([1, 2], "[1, 2]"),
        (len, "[Function]"),
    ],
)
def test_stringify(value, expected) -> None:
    assert stringify(value) == expected


def test_stringify_truncates_long_values() -> None:
    text = stringify(list(range(500)))

    assert len(text) == 203
    assert text.endswith("...")


def test_validate_number_codes() -> None:
    assert validate_number(2).data == 2.0
    assert validate_number(None).errors[0].code == "MISSING_VALUE"
    assert validate_number(True).errors[0].code == "INVALID_TYPE"
    quoted = validate_number("5").errors[0]
    assert quoted.code == "INVALID_TYPE"
    assert quoted.hint == "Remove quotes if this should be a number"
    assert validate_number(math.nan).errors[0].message == "Expected finite number, got NaN"
    assert validate_number(math.inf).errors[0].received == "Infinity"
    huge = validate_number(10**400).errors[0]
    assert (huge.code, huge.received) == ("INVALID_VALUE", "Infinity")


def test_validate_string_and_range() -> None:
    assert validate_string("x").success
    assert validate_string(3).errors[0].code == "INVALID_TYPE"
    issue = validate_number_in_range(120, 0, 100, field_name="Percentage").errors[0]
    assert issue.code == "OUT_OF_RANGE"
    assert issue.message == "Percentage out of range: 120"
    assert issue.expected == "number between 0 and 100"


def test_validate_array_collects_every_issue() -> None:
    result = validate_array([1, "x", None, 4], validate_number)

    assert not result.success
    assert [issue.path for issue in result.errors] == [(1,), (2,)]
    assert [issue.code for issue in result.errors] == ["INVALID_TYPE", "MISSING_VALUE"]


def test_prepend_path_leaves_success_alone() -> None:
    ok = validate_number(1)

    assert prepend_path(ok, "value") is ok
    assert prepend_path(validate_number(None), "value").errors[0].path == ("value",)


def test_segment_data_reports_paths_per_field() -> None:
    result = validate_segment_data(
        [
            {"pct": 50, "color": "#f00"},
            {"color": "#0f0"},
            {"pct": 150, "color": 3},
            "nope",
        ]
    )

    assert [(issue.code, issue.path) for issue in result.errors] == [
        ("MISSING_FIELD", (1, "pct")),
        ("OUT_OF_RANGE", (2, "pct")),
        ("INVALID_TYPE", (2, "color")),
        ("INVALID_TYPE", (3,)),
    ]


def test_record_data_checks_required_and_optional_fields() -> None:
    shape = RECORD_SHAPES["dumbbell"]

    result = validate_record_data({"current": "1", "max": math.nan}, shape, "Dumbbell")

    assert [(issue.code, issue.path) for issue in result.errors] == [
        ("INVALID_TYPE", ("current",)),
        ("MISSING_FIELD", ("target",)),
        ("INVALID_VALUE", ("max",)),
    ]


def test_histogram_series_field_is_validated() -> None:
    result = validate_record_data({"series": [1, "2"]}, RECORD_SHAPES["histogram"], "Histogram")

    assert result.errors[0].path == ("series", 1)


def test_chart_data_routing() -> None:
    assert validate_chart_data({"type": "sparkline"}, [1, 2]).success
    assert validate_chart_data({"type": "mystery"}, object()).success
    missing = validate_chart_data({"type": "donut"}, None).errors[0]
    assert missing.code == "MISSING_DATA"
    assert missing.message == "Donut chart requires data"
    shape = validate_chart_data({"type": "pareto"}, [1, 2, 3]).errors[0]
    assert shape.code == "INVALID_DATA_SHAPE"
    bar = validate_chart_data({"type": "bar"}, [1]).errors[0]
    assert bar.code == "INVALID_TYPE"
    assert bar.example == '{"value": 75, "max": 100}'


def test_format_path() -> None:
    assert format_path(()) == "root"
    assert format_path((0,)) == "[0]"
    assert format_path((2, "pct")) == "[2].pct"
    assert format_path(("series", 1)) == "series[1]"
    assert format_path(("a", "b")) == "a.b"


def test_format_issue_lines() -> None:
    issue = ValidationIssue(
        code="INVALID_TYPE",
        message="Expected number, got string",
        path=(0,),
        expected="number",
        received='"x"',
        hint="Use a number",
    )

    assert format_issue(issue).splitlines() == [
        "Error: Expected number, got string",
        "   Path: [0]",
        "   Expected: number",
        '   Received: "x"',
        "   Hint: Use a number",
    ]
    assert format_issues([]) == "No errors"
    assert format_issues_inline([issue]) == "Error at [0]: Expected number, got string. Fix: Use a number"
