"""Diagnostics over assembled marks and defs.

Two independent passes run after mark generation: numeric sanity plus
viewport bounds (``validate_marks``) and reference integrity between marks
and defs (``validate_def_references``). Both stop as soon as the per-call
warning budget is spent.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
import logging
import math
import re
from typing import Any, Optional

from chartmodel.config.schema import BOUNDS_EPSILON, MAX_DIAGNOSTIC_WARNINGS
from chartmodel.model import Def, DiagnosticWarning, Mark

logger = logging.getLogger(__name__)

_URL_UNQUOTED_RE = re.compile(r"^url\(\s*#([^)]+?)\s*\)$")
_URL_QUOTED_RE = re.compile(r"^url\(\s*['\"]#([^'\"]+?)['\"]\s*\)$")
_PATH_COMMAND_RE = re.compile(r"[a-zA-Z]")
_PATH_NUMBER_RE = re.compile(r"-?\d*\.?\d+(?:e[-+]?\d+)?", re.IGNORECASE)
_NON_FINITE_TOKEN_RE = re.compile(r"nan|inf", re.IGNORECASE)

# Reference relation -> def kinds it may point at.
REFERENCE_KINDS: dict[str, tuple[str, ...]] = {
    "clipPath": ("clipRect",),
    "mask": ("mask",),
    "filter": ("filter",),
    "fill": ("linearGradient", "pattern"),
    "stroke": ("linearGradient", "pattern"),
}


class WarningSink:
    """Per-call warning list with a hard budget."""

    def __init__(self, limit: int = MAX_DIAGNOSTIC_WARNINGS) -> None:
        self.limit = max(0, int(limit))
        self._items: list[DiagnosticWarning] = []
        self._overflow_logged = False

    @property
    def exhausted(self) -> bool:
        return len(self._items) >= self.limit

    @property
    def remaining(self) -> int:
        return max(0, self.limit - len(self._items))

    def _reject(self, code: str) -> bool:
        if not self._overflow_logged:
            logger.debug("Warning budget of %d exhausted; dropping %s.", self.limit, code)
            self._overflow_logged = True
        return False

    def push(self, warning: DiagnosticWarning) -> bool:
        if self.exhausted:
            return self._reject(warning.code)
        self._items.append(warning)
        return True

    def warn(self, code: str, message: str, **fields: Any) -> bool:
        if self.exhausted:
            return self._reject(code)
        return self.push(DiagnosticWarning(code=code, message=message, **fields))

    def codes(self) -> list[str]:
        return [item.code for item in self._items]

    def to_list(self) -> list[DiagnosticWarning]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[DiagnosticWarning]:
        return iter(self._items)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.min_x, self.min_y, self.max_x, self.max_y))


def parse_url_ref(value: str) -> Optional[str]:
    """Return the def id from ``url(#id)``, ``url('#id')`` or ``url("#id")``."""
    trimmed = value.strip()
    if not trimmed.startswith("url("):
        return None
    match = _URL_UNQUOTED_RE.match(trimmed) or _URL_QUOTED_RE.match(trimmed)
    if match is None:
        return None
    return match.group(1).strip() or None


def _numeric_fields(mark: Mark) -> list[Optional[float]]:
    if mark.type == "rect":
        values = [mark.x, mark.y, mark.w, mark.h, mark.rx, mark.ry]
    elif mark.type == "circle":
        values = [mark.cx, mark.cy, mark.r, mark.stroke_width]
    elif mark.type == "line":
        values = [mark.x1, mark.y1, mark.x2, mark.y2, mark.stroke_width]
    elif mark.type == "text":
        values = [mark.x, mark.y]
    else:
        values = [mark.stroke_width]
    values.append(mark.opacity)
    values.append(getattr(mark, "fill_opacity", None))
    values.append(getattr(mark, "stroke_opacity", None))
    return values


def has_non_finite_numbers(mark: Mark) -> bool:
    if mark.type == "path" and _NON_FINITE_TOKEN_RE.search(mark.d):
        return True
    return any(value is not None and not math.isfinite(value) for value in _numeric_fields(mark))


def path_bounds(d: str) -> Optional[Bounds]:
    """Bounds of a path made only of M/L/Z commands; None when undecodable."""
    for command in _PATH_COMMAND_RE.findall(d):
        if command.upper() not in ("M", "L", "Z"):
            return None
    numbers = _PATH_NUMBER_RE.findall(d)
    if len(numbers) < 2:
        return None
    xs: list[float] = []
    ys: list[float] = []
    for index in range(0, len(numbers) - 1, 2):
        x = float(numbers[index])
        y = float(numbers[index + 1])
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        xs.append(x)
        ys.append(y)
    return Bounds(min(xs), min(ys), max(xs), max(ys))


def bounds_for_mark(mark: Mark) -> Optional[Bounds]:
    if mark.type == "rect":
        x0, x1 = mark.x, mark.x + mark.w
        y0, y1 = mark.y, mark.y + mark.h
        return Bounds(min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))
    if mark.type == "circle":
        return Bounds(mark.cx - mark.r, mark.cy - mark.r, mark.cx + mark.r, mark.cy + mark.r)
    if mark.type == "line":
        return Bounds(
            min(mark.x1, mark.x2),
            min(mark.y1, mark.y2),
            max(mark.x1, mark.x2),
            max(mark.y1, mark.y2),
        )
    if mark.type == "text":
        return Bounds(mark.x, mark.y, mark.x, mark.y)
    return path_bounds(mark.d)


def validate_marks(
    marks: Sequence[Mark],
    width: float,
    height: float,
    warnings: WarningSink,
    *,
    epsilon: float = BOUNDS_EPSILON,
) -> None:
    """Flag non-finite geometry and marks that leave the viewport."""
    for mark in marks:
        if warnings.exhausted:
            return
        if has_non_finite_numbers(mark):
            warnings.warn(
                "NAN_COORDINATE",
                f"Non-finite numeric value in mark ({mark.type}).",
                mark_id=mark.id,
                phase="render",
            )
            continue

        bounds = bounds_for_mark(mark)
        if bounds is None or not bounds.is_finite():
            continue
        out_of_bounds = (
            bounds.min_x < -epsilon
            or bounds.min_y < -epsilon
            or bounds.max_x > width + epsilon
            or bounds.max_y > height + epsilon
        )
        if out_of_bounds:
            warnings.warn(
                "MARK_OUT_OF_BOUNDS",
                f"Mark is outside the viewport ({mark.type}).",
                mark_id=mark.id,
                phase="render",
            )


def _references(mark: Mark) -> Iterator[tuple[str, str]]:
    clip_path = getattr(mark, "clip_path", None)
    if clip_path:
        yield "clipPath", clip_path
    if mark.mask:
        yield "mask", mark.mask
    if mark.filter:
        yield "filter", mark.filter
    for relation in ("fill", "stroke"):
        value = getattr(mark, relation, None)
        if isinstance(value, str):
            def_id = parse_url_ref(value)
            if def_id:
                yield relation, def_id


def validate_def_references(
    marks: Sequence[Mark],
    defs: Sequence[Def],
    warnings: WarningSink,
) -> None:
    """Report marks pointing at missing defs or defs of the wrong kind.

    Each ``relation:def_id`` pair is reported once, whichever mark uses it.
    """
    if not marks or warnings.exhausted:
        return

    defs_by_id = {item.id: item.type for item in defs}
    seen: set[str] = set()

    for mark in marks:
        for relation, def_id in _references(mark):
            if warnings.exhausted:
                return
            key = f"{relation}:{def_id}"
            if key in seen:
                continue
            seen.add(key)

            expected = REFERENCE_KINDS[relation]
            expected_text = " | ".join(expected)
            actual = defs_by_id.get(def_id)
            if actual is None:
                warnings.warn(
                    "MISSING_DEF",
                    f"Missing def '#{def_id}' referenced by {relation} on mark "
                    f"({mark.type}); expected {expected_text}.",
                    mark_id=mark.id,
                    phase="render",
                )
            elif actual not in expected:
                warnings.warn(
                    "MISSING_DEF",
                    f"Def '#{def_id}' referenced by {relation} on mark ({mark.type}) "
                    f"is {actual}; expected {expected_text}.",
                    mark_id=mark.id,
                    phase="render",
                )


__all__ = [
    "Bounds",
    "REFERENCE_KINDS",
    "WarningSink",
    "bounds_for_mark",
    "has_non_finite_numbers",
    "parse_url_ref",
    "path_bounds",
    "validate_def_references",
    "validate_marks",
]
