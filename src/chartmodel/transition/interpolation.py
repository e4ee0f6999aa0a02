"""Tween a RenderModel between two snapshots.

Marks are matched by id. Same-type pairs blend every numeric field; a type
change snaps to the target; marks only present in the target appear as-is and
marks only present in the source are dropped. ``t`` is not clamped.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Optional

from chartmodel.model import CircleMark, LineMark, Mark, PathMark, RectMark, RenderModel, TextMark
from chartmodel.numeric import lerp
from chartmodel.transition.path_morph import blend_fields, interpolate_path_mark, lerp_optional

logger = logging.getLogger(__name__)

DONUT_SEGMENT_CLASS = "mv-donut-segment"


def _ease_in_out(t: float) -> float:
    return 4 * t * t * t if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2


EASINGS: dict[str, Callable[[float], float]] = {
    "linear": lambda t: t,
    "easeOut": lambda t: 1 - (1 - t) ** 3,
    "easeInOut": _ease_in_out,
}


def ease(name: str, t: float) -> float:
    try:
        curve = EASINGS[name]
    except KeyError as exc:
        available = ", ".join(sorted(EASINGS))
        raise ValueError(f"Unknown easing {name!r}. Available: {available}") from exc
    return curve(t)


# Numeric fields blended per variant; optional ones go through lerp_optional.
_BLENDED_FIELDS: dict[type, tuple[str, ...]] = {
    RectMark: ("x", "y", "w", "h", "rx", "ry", "opacity", "fill_opacity", "stroke_opacity", "stroke_width"),
    CircleMark: ("cx", "cy", "r", "opacity", "fill_opacity", "stroke_opacity", "stroke_width"),
    LineMark: ("x1", "y1", "x2", "y2", "opacity", "stroke_opacity", "stroke_width"),
    TextMark: ("x", "y", "opacity", "fill_opacity"),
    PathMark: ("opacity", "fill_opacity", "stroke_opacity", "stroke_width"),
}


def is_donut_segment(mark: PathMark) -> bool:
    if mark.id.startswith("donut-segment-"):
        return True
    return bool(mark.class_name) and DONUT_SEGMENT_CLASS in mark.class_name.split()


def interpolate_mark(start: Mark, end: Mark, t: float) -> Mark:
    if type(start) is not type(end):
        return end
    if isinstance(end, PathMark) and not (is_donut_segment(start) or is_donut_segment(end)):
        return interpolate_path_mark(start, end, t)

    # Donut wedges keep the target arc and only blend style.
    update = blend_fields(start, end, t, _BLENDED_FIELDS[type(end)])
    if isinstance(end, TextMark):
        update["text"] = start.text if t < 1 else end.text
    return end.model_copy(update=update)


def interpolate_model(
    start: RenderModel,
    end: RenderModel,
    t: float,
    *,
    easing: Optional[str] = None,
) -> RenderModel:
    """Interpolated frame at ``t``; ``a11y``, ``defs`` and ``stats`` come from ``end``.

    Args:
        start: Model shown at ``t == 0``.
        end: Model shown at ``t == 1``.
        t: Progress; values outside ``[0, 1]`` extrapolate.
        easing: Optional name from ``EASINGS`` applied to ``t`` first.
    """
    if easing is not None:
        t = ease(easing, t)
    by_id = {mark.id: mark for mark in start.marks}
    marks = [
        interpolate_mark(by_id[mark.id], mark, t) if mark.id in by_id else mark
        for mark in end.marks
    ]
    logger.debug(
        "Interpolated %d marks at t=%s (%d new, %d dropped).",
        len(marks),
        t,
        sum(1 for mark in end.marks if mark.id not in by_id),
        len(by_id.keys() - {mark.id for mark in end.marks}),
    )
    return end.model_copy(
        update={
            "width": lerp(start.width, end.width, t),
            "height": lerp(start.height, end.height, t),
            "marks": marks,
        }
    )


__all__ = [
    "DONUT_SEGMENT_CLASS",
    "EASINGS",
    "ease",
    "interpolate_mark",
    "interpolate_model",
    "is_donut_segment",
    "lerp",
    "lerp_optional",
]
