"""Small numeric helpers shared by chart definitions, a11y and inference."""

from __future__ import annotations

import math
import numbers
from typing import Any, Optional


def to_float(value: Any) -> float:
    """``float(value)``, with integers too large for a float mapped to +/-inf."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def is_finite_number(value: Any) -> bool:
    """True for finite real numbers; bools and numeric strings do not count."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(to_float(value))


def as_finite(value: Any) -> Optional[float]:
    return float(value) if is_finite_number(value) else None


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def round_half_up(value: float) -> int:
    """Round halves toward positive infinity; non-finite input passes through."""
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def fixed2(value: float) -> str:
    text = f"{value:.2f}"
    return "0.00" if text == "-0.00" else text


__all__ = [
    "as_finite",
    "clamp",
    "fixed2",
    "is_finite_number",
    "lerp",
    "round_half_up",
    "to_float",
]
