"""Soft validation of caller-supplied chart data.

Validators never raise for bad input. They return a ``ValidationResult``
that carries every issue found, so the orchestrator can surface all of them
as warnings in one pass.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
import json
import math
import numbers
from typing import Any, Generic, Optional, TypeVar, Union

from chartmodel.numeric import to_float

PathSegment = Union[str, int]

_T = TypeVar("_T")

NUMBER_ARRAY_CHART_TYPES = frozenset({"sparkline", "spark-area", "sparkline-bars"})
SEGMENT_CHART_TYPES = frozenset(
    {"donut", "bitfield", "pareto", "split-pareto", "segmented-bar"}
)

SEGMENT_SHAPE = "array of segments [{pct, color, name?}]"
SEGMENT_EXAMPLE = "data='[{\"pct\":50,\"color\":\"#6366f1\"}]'"
NUMBER_ARRAY_EXAMPLE = 'data="[10, 20, 30]"'


@dataclass(frozen=True)
class RecordShape:
    """Required and optional numeric fields of a record-shaped payload."""

    required: tuple[str, ...]
    optional: tuple[str, ...] = ()
    series_field: Optional[str] = None
    example: str = ""


RECORD_SHAPES: dict[str, RecordShape] = {
    "bar": RecordShape(required=("value",), optional=("max",), example='{"value": 75, "max": 100}'),
    "dumbbell": RecordShape(
        required=("current", "target"),
        optional=("max",),
        example='{"current": 40, "target": 70}',
    ),
    "bullet-delta": RecordShape(
        required=("current", "previous"),
        optional=("max",),
        example='{"current": 60, "previous": 45}',
    ),
    "histogram": RecordShape(
        required=(),
        series_field="series",
        example='{"series": [10, 20, 30]}',
    ),
}


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    path: tuple[PathSegment, ...] = ()
    expected: str = ""
    received: str = ""
    hint: str = ""
    example: Optional[str] = None

    def with_prefix(self, *segments: PathSegment) -> "ValidationIssue":
        return replace(self, path=tuple(segments) + self.path)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "path": list(self.path),
            "expected": self.expected,
            "received": self.received,
            "hint": self.hint,
        }
        if self.example is not None:
            payload["example"] = self.example
        return payload


@dataclass(frozen=True)
class ValidationResult(Generic[_T]):
    success: bool
    data: Optional[_T] = None
    errors: tuple[ValidationIssue, ...] = field(default_factory=tuple)


Validator = Callable[[Any], ValidationResult[Any]]


def success(data: _T) -> ValidationResult[_T]:
    return ValidationResult(success=True, data=data)


def failure(errors: Sequence[ValidationIssue]) -> ValidationResult[Any]:
    return ValidationResult(success=False, errors=tuple(errors))


def fail(issue: ValidationIssue) -> ValidationResult[Any]:
    return failure([issue])


def prepend_path(result: ValidationResult[_T], segment: PathSegment) -> ValidationResult[_T]:
    if result.success:
        return result
    return failure([issue.with_prefix(segment) for issue in result.errors])


def stringify(value: Any, max_length: int = 200) -> str:
    """Best-effort display string for a received value; never raises."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, numbers.Real):
        number = to_float(value)
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        if isinstance(value, numbers.Integral) or number.is_integer():
            return str(int(number))
        return repr(number)
    if callable(value):
        return "[Function]"
    try:
        text = json.dumps(value, allow_nan=True, default=str)
    except (TypeError, ValueError):
        try:
            text = str(value)
        except Exception:  # noqa: BLE001 - display only
            return "[Unserializable]"
    if len(text) > max_length:
        return f"{text[:max_length]}..."
    return text


def _type_name(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def validate_number(value: Any) -> ValidationResult[float]:
    if value is None:
        return fail(
            ValidationIssue(
                code="MISSING_VALUE",
                message="Expected number, got null",
                expected="number",
                received="null",
                hint="Provide a numeric value",
            )
        )
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        hint = (
            "Remove quotes if this should be a number"
            if isinstance(value, str)
            else "Use a numeric value"
        )
        return fail(
            ValidationIssue(
                code="INVALID_TYPE",
                message=f"Expected number, got {_type_name(value)}",
                expected="number",
                received=stringify(value),
                hint=hint,
            )
        )
    number = to_float(value)
    if math.isnan(number):
        return fail(
            ValidationIssue(
                code="INVALID_VALUE",
                message="Expected finite number, got NaN",
                expected="finite number",
                received="NaN",
                hint="Check for division by zero or invalid math operations",
            )
        )
    if math.isinf(number):
        label = "Infinity" if number > 0 else "-Infinity"
        return fail(
            ValidationIssue(
                code="INVALID_VALUE",
                message=f"Expected finite number, got {label}",
                expected="finite number",
                received=label,
                hint="Check for overflow or division by very small numbers",
            )
        )
    return success(number)


def validate_string(value: Any) -> ValidationResult[str]:
    if value is None:
        return fail(
            ValidationIssue(
                code="MISSING_VALUE",
                message="Expected string, got null",
                expected="string",
                received="null",
                hint="Provide a string value",
            )
        )
    if not isinstance(value, str):
        return fail(
            ValidationIssue(
                code="INVALID_TYPE",
                message=f"Expected string, got {_type_name(value)}",
                expected="string",
                received=stringify(value),
                hint="Wrap value in quotes",
            )
        )
    return success(value)


def validate_number_in_range(
    value: Any,
    minimum: float,
    maximum: float,
    *,
    field_name: Optional[str] = None,
    hint: Optional[str] = None,
) -> ValidationResult[float]:
    result = validate_number(value)
    if not result.success:
        return result
    number = result.data
    if number < minimum or number > maximum:
        prefix = f"{field_name} out of range" if field_name else "Value out of range"
        return fail(
            ValidationIssue(
                code="OUT_OF_RANGE",
                message=f"{prefix}: {stringify(number)}",
                expected=f"number between {stringify(minimum)} and {stringify(maximum)}",
                received=stringify(number),
                hint=hint or f"Value must be between {stringify(minimum)} and {stringify(maximum)}",
            )
        )
    return result


def validate_array(value: Any, item_validator: Validator) -> ValidationResult[list[Any]]:
    """Validate every element, collecting all issues with index paths."""
    if not _is_array(value):
        return fail(
            ValidationIssue(
                code="INVALID_TYPE",
                message=f"Expected array, got {_type_name(value)}",
                expected="array",
                received=stringify(value),
                hint="Use JSON array syntax: [1, 2, 3]",
            )
        )
    items: list[Any] = []
    errors: list[ValidationIssue] = []
    for index, item in enumerate(value):
        result = item_validator(item)
        if result.success:
            items.append(result.data)
        else:
            errors.extend(prepend_path(result, index).errors)
    if errors:
        return failure(errors)
    return success(items)


def validate_sparkline_data(value: Any) -> ValidationResult[list[float]]:
    if not _is_array(value):
        return fail(
            ValidationIssue(
                code="INVALID_TYPE",
                message="Sparkline requires an array of numbers",
                expected="array of numbers",
                received=stringify(value),
                hint='Try: data="[10, 20, 30]" or data="10, 20, 30"',
            )
        )
    return validate_array(value, validate_number)


def _validate_segment(value: Any, index: int) -> ValidationResult[dict[str, Any]]:
    if not isinstance(value, Mapping):
        return fail(
            ValidationIssue(
                code="INVALID_TYPE",
                message="Segment must be an object",
                path=(index,),
                expected="object with {pct, color, name?}",
                received=stringify(value),
                hint='Use: {pct: 50, color: "#6366f1"}',
            )
        )

    errors: list[ValidationIssue] = []
    if "pct" not in value:
        errors.append(
            ValidationIssue(
                code="MISSING_FIELD",
                message="Segment missing required field: pct",
                path=(index, "pct"),
                expected="number (0-100)",
                received="undefined",
                hint="Add pct: 50",
            )
        )
    else:
        pct = validate_number_in_range(
            value["pct"], 0, 100, field_name="Percentage", hint="Percentages must be 0-100"
        )
        if not pct.success:
            issue = pct.errors[0]
            if issue.code == "INVALID_TYPE":
                issue = replace(issue, expected="number (0-100)", hint="Use a number like pct: 50")
            errors.append(replace(issue, path=(index, "pct")))

    if "color" not in value:
        errors.append(
            ValidationIssue(
                code="MISSING_FIELD",
                message="Segment missing required field: color",
                path=(index, "color"),
                expected="string (hex color like #f00 or #ff0000)",
                received="undefined",
                hint='Add color: "#6366f1"',
            )
        )
    elif not validate_string(value["color"]).success:
        errors.append(
            ValidationIssue(
                code="INVALID_TYPE",
                message=f"Expected string, got {_type_name(value['color'])}",
                path=(index, "color"),
                expected="string (hex color)",
                received=stringify(value["color"]),
                hint='Use a color string like color: "#6366f1"',
            )
        )

    if value.get("name") is not None:
        name = validate_string(value["name"])
        if not name.success:
            errors.extend(issue.with_prefix(index, "name") for issue in name.errors)

    if errors:
        return failure(errors)
    return success({"pct": value["pct"], "color": value["color"], "name": value.get("name")})


def validate_segment_data(value: Any) -> ValidationResult[list[dict[str, Any]]]:
    if not _is_array(value):
        return fail(
            ValidationIssue(
                code="INVALID_TYPE",
                message="Segment data must be an array",
                expected=SEGMENT_SHAPE,
                received=stringify(value),
                hint=f"Try: {SEGMENT_EXAMPLE}",
            )
        )
    items: list[dict[str, Any]] = []
    errors: list[ValidationIssue] = []
    for index, item in enumerate(value):
        result = _validate_segment(item, index)
        if result.success:
            items.append(result.data)
        else:
            errors.extend(result.errors)
    if errors:
        return failure(errors)
    return success(items)


def validate_record_data(value: Any, shape: RecordShape, chart_name: str) -> ValidationResult[Any]:
    """Validate a record payload such as ``{value, max?}``."""
    if not isinstance(value, Mapping):
        return fail(
            ValidationIssue(
                code="INVALID_TYPE",
                message=f"{chart_name} chart expects an object",
                expected="object",
                received=stringify(value),
                hint=f"Try: {shape.example}",
                example=shape.example,
            )
        )

    errors: list[ValidationIssue] = []
    for key in shape.required:
        if key not in value:
            errors.append(
                ValidationIssue(
                    code="MISSING_FIELD",
                    message=f"{chart_name} data missing required field: {key}",
                    path=(key,),
                    expected="number",
                    received="undefined",
                    hint=f"Try: {shape.example}",
                )
            )
            continue
        errors.extend(prepend_path(validate_number(value[key]), key).errors)

    for key in shape.optional:
        if value.get(key) is not None:
            errors.extend(prepend_path(validate_number(value[key]), key).errors)

    if shape.series_field is not None:
        series_key = shape.series_field
        if series_key not in value:
            errors.append(
                ValidationIssue(
                    code="MISSING_FIELD",
                    message=f"{chart_name} data missing required field: {series_key}",
                    path=(series_key,),
                    expected="array of numbers",
                    received="undefined",
                    hint=f"Try: {shape.example}",
                )
            )
        else:
            errors.extend(
                prepend_path(validate_array(value[series_key], validate_number), series_key).errors
            )

    if errors:
        return failure(errors)
    return success(value)


def _chart_name(chart_type: str) -> str:
    return chart_type[:1].upper() + chart_type[1:]


def _looks_like_number_array(value: Any) -> bool:
    return (
        _is_array(value)
        and len(value) > 0
        and isinstance(value[0], numbers.Real)
        and not isinstance(value[0], bool)
    )


def validate_chart_data(spec: Mapping[str, Any], data: Any) -> ValidationResult[Any]:
    """Route ``data`` to the validator for ``spec["type"]``.

    Types without a registered data shape pass through; the registry reports
    unknown chart types separately.
    """
    chart_type = spec.get("type")
    if not isinstance(chart_type, str):
        return success(data)
    chart_name = _chart_name(chart_type)

    if chart_type in NUMBER_ARRAY_CHART_TYPES or chart_type in SEGMENT_CHART_TYPES:
        segments = chart_type in SEGMENT_CHART_TYPES
        if data is None:
            example = SEGMENT_EXAMPLE if segments else NUMBER_ARRAY_EXAMPLE
            return fail(
                ValidationIssue(
                    code="MISSING_DATA",
                    message=f"{chart_name} chart requires data",
                    expected=SEGMENT_SHAPE if segments else "array of numbers",
                    received="null",
                    hint=f"Try: {example}",
                    example=example,
                )
            )
        if not segments:
            return validate_sparkline_data(data)
        if _looks_like_number_array(data):
            return fail(
                ValidationIssue(
                    code="INVALID_DATA_SHAPE",
                    message=f"{chart_name} chart expects segment objects, got number array",
                    expected=SEGMENT_SHAPE,
                    received=stringify(data),
                    hint=(
                        f"{chart_name} needs segment objects, not plain numbers. "
                        'Try: [{pct: 50, color: "#6366f1"}]'
                    ),
                )
            )
        return validate_segment_data(data)

    shape = RECORD_SHAPES.get(chart_type)
    if shape is None:
        return success(data)
    if data is None:
        return fail(
            ValidationIssue(
                code="MISSING_DATA",
                message=f"{chart_name} chart requires data",
                expected="object",
                received="null",
                hint=f"Try: {shape.example}",
                example=shape.example,
            )
        )
    return validate_record_data(data, shape, chart_name)


def format_path(path: Sequence[PathSegment]) -> str:
    if not path:
        return "root"
    parts: list[str] = []
    for index, segment in enumerate(path):
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif index == 0:
            parts.append(segment)
        else:
            parts.append(f".{segment}")
    return "".join(parts)


def format_issue(issue: ValidationIssue) -> str:
    lines = [
        f"Error: {issue.message}",
        f"   Path: {format_path(issue.path)}",
        f"   Expected: {issue.expected}",
        f"   Received: {issue.received}",
    ]
    if issue.hint:
        lines.append(f"   Hint: {issue.hint}")
    return "\n".join(lines)


def format_issues(issues: Sequence[ValidationIssue]) -> str:
    if not issues:
        return "No errors"
    return "\n\n".join(format_issue(issue) for issue in issues)


def format_issues_inline(issues: Sequence[ValidationIssue]) -> str:
    """One line per issue: location, message and the suggested fix."""
    lines = []
    for issue in issues:
        path = format_path(issue.path)
        location = f" at {path}" if path != "root" else ""
        lines.append(f"Error{location}: {issue.message}. Fix: {issue.hint}")
    return "\n".join(lines)


__all__ = [
    "NUMBER_ARRAY_CHART_TYPES",
    "RECORD_SHAPES",
    "RecordShape",
    "SEGMENT_CHART_TYPES",
    "ValidationIssue",
    "ValidationResult",
    "Validator",
    "fail",
    "failure",
    "format_issue",
    "format_issues",
    "format_issues_inline",
    "format_path",
    "prepend_path",
    "stringify",
    "success",
    "validate_array",
    "validate_chart_data",
    "validate_number",
    "validate_number_in_range",
    "validate_record_data",
    "validate_segment_data",
    "validate_sparkline_data",
    "validate_string",
]
