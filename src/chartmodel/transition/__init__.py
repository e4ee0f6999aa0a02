"""Pure interpolation helpers for animating render models."""

from chartmodel.transition.interpolation import (
    EASINGS,
    ease,
    interpolate_mark,
    interpolate_model,
    lerp,
    lerp_optional,
)
from chartmodel.transition.path_morph import (
    PathCommand,
    are_paths_compatible,
    interpolate_path,
    interpolate_path_mark,
    parse_path,
    serialize_path,
)

__all__ = [
    "EASINGS",
    "PathCommand",
    "are_paths_compatible",
    "ease",
    "interpolate_mark",
    "interpolate_model",
    "interpolate_path",
    "interpolate_path_mark",
    "lerp",
    "lerp_optional",
    "parse_path",
    "serialize_path",
]
