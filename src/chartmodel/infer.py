"""Guess a chart spec from loosely typed input.

Recognizers run in a fixed order and the first match wins. Numbers may be
ints, floats, numpy scalars or numeric strings; arrays may be lists, tuples or
numpy arrays, or anything exposing ``__array__`` such as a pandas Series.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass
import datetime as dt
import logging
import re
from typing import Any, Literal, Optional

import numpy as np

from chartmodel.numeric import is_finite_number

logger = logging.getLogger(__name__)

InferenceReason = Literal[
    "number-array",
    "segment-array",
    "segments-field",
    "bullet-delta",
    "dumbbell",
    "bar",
    "series-object",
    "fallback",
]
ValueType = Literal["quantitative", "temporal", "nominal", "unknown"]

NUMERIC_RE = re.compile(r"^[-+]?(\d+(\.\d*)?|\.\d+)(e[-+]?\d+)?$", re.IGNORECASE)
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
TIME_RE = re.compile(r"\d{2}:\d{2}")


@dataclass(frozen=True)
class InferredSpec:
    spec: dict[str, Any]
    data: Any
    reason: InferenceReason

    def to_dict(self) -> dict[str, Any]:
        return {"spec": dict(self.spec), "data": self.data, "reason": self.reason}


@dataclass(frozen=True)
class InferredSeriesType:
    kind: ValueType
    sample_count: int = 0
    numeric_count: int = 0
    temporal_count: int = 0
    nominal_count: int = 0
    unknown_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_list(value: Any) -> Optional[list]:
    if not isinstance(value, (np.ndarray, Mapping)) and hasattr(value, "__array__"):
        value = np.asarray(value)
    if isinstance(value, np.ndarray):
        return value.tolist() if value.ndim == 1 else None
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return None
    return list(value)


def coerce_number(value: Any) -> Optional[float]:
    """Finite number from a real or a numeric string, else None."""
    if is_finite_number(value):
        return float(value)
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed or not NUMERIC_RE.match(trimmed):
        return None
    parsed = float(trimmed)
    return parsed if np.isfinite(parsed) else None


def coerce_number_array(value: Any) -> Optional[list[float]]:
    items = _as_list(value)
    if items is None:
        return None
    series = []
    for item in items:
        number = coerce_number(item)
        if number is None:
            return None
        series.append(number)
    return series


def coerce_segment_array(value: Any) -> Optional[list[dict[str, Any]]]:
    items = _as_list(value)
    if items is None:
        return None
    segments = []
    for item in items:
        if not isinstance(item, Mapping):
            return None
        pct = coerce_number(item.get("pct"))
        color = item.get("color")
        if pct is None or not isinstance(color, str) or not color:
            return None
        segment = {"pct": pct, "color": color}
        if isinstance(item.get("name"), str):
            segment["name"] = item["name"]
        segments.append(segment)
    return segments


def _with_max(record: Mapping[str, Any], **values: float) -> dict[str, float]:
    maximum = coerce_number(record.get("max"))
    if maximum is not None:
        values["max"] = maximum
    return values


def _infer_record(record: Mapping[str, Any]) -> Optional[InferredSpec]:
    if "segments" in record:
        segments = coerce_segment_array(record["segments"])
        if segments is not None:
            return InferredSpec({"type": "donut"}, segments, "segments-field")

    current = coerce_number(record.get("current"))
    previous = coerce_number(record.get("previous"))
    if current is not None and previous is not None:
        data = _with_max(record, current=current, previous=previous)
        return InferredSpec({"type": "bullet-delta"}, data, "bullet-delta")

    target = coerce_number(record.get("target"))
    if current is not None and target is not None:
        data = _with_max(record, current=current, target=target)
        return InferredSpec({"type": "dumbbell"}, data, "dumbbell")

    value = coerce_number(record.get("value"))
    if value is not None:
        return InferredSpec({"type": "bar"}, _with_max(record, value=value), "bar")

    series = coerce_number_array(record.get("series"))
    if series is not None:
        data: dict[str, Any] = {"series": series}
        opacities = coerce_number_array(record.get("opacities"))
        if opacities is not None:
            data["opacities"] = opacities
        return InferredSpec({"type": "histogram"}, data, "series-object")
    return None


def infer_spec(value: Any, *, fallback_type: Optional[str] = None) -> Optional[InferredSpec]:
    """Spec, normalized data and the matching recognizer; None when nothing fits."""
    inferred = None
    series = coerce_number_array(value)
    if series is not None:
        inferred = InferredSpec({"type": "sparkline"}, series, "number-array")
    else:
        segments = coerce_segment_array(value)
        if segments is not None:
            inferred = InferredSpec({"type": "donut"}, segments, "segment-array")
        elif isinstance(value, Mapping):
            inferred = _infer_record(value)

    if inferred is None and fallback_type:
        inferred = InferredSpec({"type": fallback_type}, value, "fallback")
    if inferred is None:
        logger.debug("No chart inference for %s input.", type(value).__name__)
    else:
        logger.debug("Inferred %s (%s).", inferred.spec["type"], inferred.reason)
    return inferred


def _looks_temporal(text: str) -> bool:
    if not ISO_DATE_RE.match(text) and not TIME_RE.search(text):
        return False
    try:
        dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            np.datetime64(text)
        except ValueError:
            return False
    return True


def infer_value_type(value: Any) -> ValueType:
    if is_finite_number(value):
        return "quantitative"
    if isinstance(value, (dt.date, dt.datetime)):
        return "temporal"
    if isinstance(value, np.datetime64):
        return "unknown" if np.isnat(value) else "temporal"
    if isinstance(value, (bool, np.bool_)):
        return "nominal"
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return "unknown"
        if NUMERIC_RE.match(trimmed):
            return "quantitative"
        if _looks_temporal(trimmed):
            return "temporal"
        return "nominal"
    return "unknown"


def infer_series_type(values: Any, sample_limit: int = 200) -> InferredSeriesType:
    """Classify a column by majority vote over its first ``sample_limit`` values."""
    items = _as_list(values) or []
    sample = items[: max(0, sample_limit)]
    counts = {"quantitative": 0, "temporal": 0, "nominal": 0, "unknown": 0}
    for item in sample:
        counts[infer_value_type(item)] += 1

    numeric, temporal, nominal = counts["quantitative"], counts["temporal"], counts["nominal"]
    kind: ValueType = "unknown"
    if numeric > 0:
        kind = "quantitative"
    if temporal > numeric and temporal >= nominal:
        kind = "temporal"
    if nominal > numeric and nominal > temporal:
        kind = "nominal"
    return InferredSeriesType(
        kind=kind,
        sample_count=len(sample),
        numeric_count=numeric,
        temporal_count=temporal,
        nominal_count=nominal,
        unknown_count=counts["unknown"],
    )


__all__ = [
    "InferenceReason",
    "InferredSeriesType",
    "InferredSpec",
    "ValueType",
    "coerce_number",
    "coerce_number_array",
    "coerce_segment_array",
    "infer_series_type",
    "infer_spec",
    "infer_value_type",
]
