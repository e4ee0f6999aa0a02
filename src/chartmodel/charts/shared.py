"""Helpers shared by the built-in chart definitions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import math
from typing import Any, Optional

from pydantic.alias_generators import to_camel

from chartmodel.charts.base import ChartSpec, Segment
from chartmodel.diagnostics import WarningSink
from chartmodel.numeric import as_finite, clamp, fixed2, is_finite_number, round_half_up

_MISSING = object()


def option(spec: ChartSpec, key: str, default: Any = None) -> Any:
    """Read a spec option by snake_case name, falling back to camelCase.

    ``None`` counts as absent so callers get the default.
    """
    value = spec.get(key, _MISSING)
    if value is _MISSING or value is None:
        value = spec.get(to_camel(key), _MISSING)
    if value is _MISSING or value is None:
        return default
    return value


def coerce_finite(
    value: Any,
    fallback: float,
    warnings: Optional[WarningSink],
    message: str,
) -> float:
    finite = as_finite(value)
    if finite is not None:
        return finite
    if warnings is not None:
        warnings.warn("NAN_COORDINATE", message, phase="compute")
    return fallback


def coerce_finite_non_negative(
    value: Any,
    fallback: float,
    warnings: Optional[WarningSink],
    message: str,
) -> float:
    return max(0.0, coerce_finite(value, fallback, warnings, message))


def coerce_finite_int(
    value: Any,
    fallback: int,
    minimum: int,
    warnings: Optional[WarningSink],
    message: str,
) -> int:
    coerced = coerce_finite(value, fallback, warnings, message)
    return max(minimum, int(math.floor(coerced)))


def spec_option_number(
    spec: ChartSpec,
    key: str,
    default: float,
    warnings: Optional[WarningSink],
    message: str,
) -> float:
    return coerce_finite_non_negative(option(spec, key, default), default, warnings, message)


def spec_opacity(
    spec: ChartSpec,
    key: str,
    default: float,
    warnings: Optional[WarningSink],
    message: str,
) -> float:
    return clamp(spec_option_number(spec, key, default, warnings, message), 0.0, 1.0)


def class_name(base: str, spec: ChartSpec) -> str:
    extra = option(spec, "class_name")
    if isinstance(extra, str) and extra:
        return f"{base} {extra}"
    return base


def finite_series(data: Any) -> tuple[float, ...]:
    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
        return ()
    return tuple(float(value) for value in data if is_finite_number(value))


def normalized_pct(value: float) -> float:
    return clamp(value, 0.0, 100.0)


def normalize_segments(data: Any) -> tuple[Segment, ...]:
    """Keep positive, colored segments and rescale them to sum to 100."""
    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
        return ()
    kept: list[Segment] = []
    for item in data:
        if not isinstance(item, Mapping):
            continue
        pct = item.get("pct")
        color = item.get("color")
        if not is_finite_number(pct) or pct <= 0:
            continue
        if not isinstance(color, str) or not color:
            continue
        name = item.get("name")
        kept.append(Segment(pct=float(pct), color=color, name=name if isinstance(name, str) else None))
    total = sum(segment.pct for segment in kept)
    if total <= 0:
        return ()
    return tuple(
        Segment(pct=segment.pct / total * 100, color=segment.color, name=segment.name)
        for segment in kept
    )


@dataclass(frozen=True)
class SegmentRun:
    color: str
    name: Optional[str]
    x: float
    w: float


def layout_segments_by_pct(
    segments: Sequence[Segment],
    usable_w: float,
    gap: float,
) -> list[SegmentRun]:
    """Lay segments left to right; the last run absorbs rounding slack."""
    if not segments:
        return []
    safe_gap = max(0.0, gap)
    available_w = max(0.0, usable_w - safe_gap * max(0, len(segments) - 1))
    widths = [segment.pct / 100 * available_w for segment in segments]

    runs: list[SegmentRun] = []
    acc = 0.0
    last_index = len(segments) - 1
    for index, segment in enumerate(segments):
        x = acc + safe_gap * index
        w = max(0.0, available_w - acc) if index == last_index else max(0.0, widths[index])
        runs.append(SegmentRun(color=segment.color, name=segment.name, x=x, w=w))
        acc += widths[index]
    return runs


def allocate_units_by_pct(segments: Sequence[Segment], total_units: int) -> list[int]:
    """Largest-remainder split of ``total_units`` across segments."""
    if not segments:
        return []
    total = max(0, int(math.floor(total_units)))
    if total <= 0:
        return [0 for _ in segments]

    raw = [segment.pct / 100 * total for segment in segments]
    base = [int(math.floor(value)) for value in raw]
    remaining = total - sum(base)

    def _key(index: int) -> str:
        segment = segments[index]
        return segment.name or segment.color or str(index)

    order = sorted(range(len(segments)), key=lambda i: (-(raw[i] - base[i]), _key(i), i))
    for index in order[: max(0, remaining)]:
        base[index] += 1
    return base


def sparkline_path(
    series: Sequence[float],
    width: float,
    height: float,
    pad: float,
) -> tuple[str, Optional[tuple[float, float]]]:
    """Min/max scaled polyline through the series and its last point."""
    if not series:
        return "", None
    x0, x1 = pad, width - pad
    y0, y1 = pad, height - pad
    lo, hi = min(series), max(series)
    denom = (hi - lo) or 1
    dx = (x1 - x0) / (len(series) - 1) if len(series) > 1 else 0
    points = [(x0 + dx * i, y1 - (v - lo) / denom * (y1 - y0)) for i, v in enumerate(series)]
    d = polyline_d(points)
    return d, points[-1]


def polyline_d(points: Sequence[tuple[float, float]]) -> str:
    head, *rest = points
    parts = [f"M {fixed2(head[0])} {fixed2(head[1])}"]
    parts.extend(f"L {fixed2(x)} {fixed2(y)}" for x, y in rest)
    return " ".join(parts)


def _series_hash_hex(series: Sequence[float]) -> str:
    # 32-bit FNV-1a over the little-endian bytes of each value scaled by 1000.
    value = 0x811C9DC5
    for item in series:
        scaled_value = item * 1000
        scaled = round_half_up(scaled_value) & 0xFFFFFFFF if math.isfinite(scaled_value) else 0
        for shift in (0, 8, 16, 24):
            value ^= (scaled >> shift) & 0xFF
            value = (value * 0x01000193) & 0xFFFFFFFF
    return f"{value:08x}"


def spark_area_gradient_id(series: Sequence[float]) -> str:
    return f"mv-spark-area-grad-{_series_hash_hex(series)}"


__all__ = [
    "SegmentRun",
    "allocate_units_by_pct",
    "class_name",
    "coerce_finite",
    "coerce_finite_int",
    "coerce_finite_non_negative",
    "finite_series",
    "layout_segments_by_pct",
    "normalize_segments",
    "normalized_pct",
    "option",
    "polyline_d",
    "spark_area_gradient_id",
    "sparkline_path",
    "spec_opacity",
    "spec_option_number",
]
