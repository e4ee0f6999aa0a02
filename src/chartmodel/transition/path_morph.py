"""SVG path morphing for paths that share a command structure."""

from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Optional, Sequence

from chartmodel.model import PathMark
from chartmodel.numeric import lerp, round_half_up

_COMMAND_RE = re.compile(r"([MLHVCSQTAZmlhvcsqtaz])([^MLHVCSQTAZmlhvcsqtaz]*)")
_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Optional numeric style fields blended alongside the path geometry.
PATH_STYLE_FIELDS = ("opacity", "fill_opacity", "stroke_opacity", "stroke_width")


@dataclass(frozen=True)
class PathCommand:
    type: str
    args: tuple[float, ...] = ()


def parse_path(d: str) -> list[PathCommand]:
    """Split a ``d`` attribute into commands, e.g. ``"M0 0L10 20Z"``."""
    commands = []
    for match in _COMMAND_RE.finditer(d):
        args = tuple(float(token) for token in _NUMBER_RE.findall(match.group(2)))
        commands.append(PathCommand(type=match.group(1), args=args))
    return commands


def _format_arg(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    rounded = round_half_up(value * 10000) / 10000
    if rounded == int(rounded):
        return str(int(rounded))
    return repr(rounded)


def serialize_path(commands: Sequence[PathCommand]) -> str:
    """Compact form: ``M0,0L10,20Z`` with args rounded to 4 decimals."""
    return "".join(
        command.type + ",".join(_format_arg(arg) for arg in command.args) for command in commands
    )


def are_paths_compatible(a: Sequence[PathCommand], b: Sequence[PathCommand]) -> bool:
    if len(a) != len(b):
        return False
    return all(
        left.type == right.type and len(left.args) == len(right.args) for left, right in zip(a, b)
    )


def interpolate_path(
    start: Sequence[PathCommand],
    end: Sequence[PathCommand],
    t: float,
) -> list[PathCommand]:
    if not are_paths_compatible(start, end):
        return list(end)
    return [
        PathCommand(
            type=left.type,
            args=tuple(lerp(a, b, t) for a, b in zip(left.args, right.args)),
        )
        for left, right in zip(start, end)
    ]


def lerp_optional(start: Optional[float], end: Optional[float], t: float) -> Optional[float]:
    """Blend when both sides are set; otherwise hold ``start`` until ``t >= 1``."""
    if start is None or end is None:
        return start if t < 1 else end
    return lerp(start, end, t)


def blend_fields(start, end, t: float, fields: Sequence[str]) -> dict:
    return {name: lerp_optional(getattr(start, name), getattr(end, name), t) for name in fields}


def interpolate_path_mark(start: PathMark, end: PathMark, t: float) -> PathMark:
    start_commands = parse_path(start.d)
    end_commands = parse_path(end.d)
    if not are_paths_compatible(start_commands, end_commands):
        return start if t < 1 else end

    update = blend_fields(start, end, t, PATH_STYLE_FIELDS)
    update["d"] = serialize_path(interpolate_path(start_commands, end_commands, t))
    return end.model_copy(update=update)


__all__ = [
    "PATH_STYLE_FIELDS",
    "PathCommand",
    "are_paths_compatible",
    "blend_fields",
    "interpolate_path",
    "interpolate_path_mark",
    "lerp_optional",
    "parse_path",
    "serialize_path",
]
