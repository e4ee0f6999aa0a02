"""Render model types: marks, defs, accessibility tree, diagnostics.

Attributes are snake_case in Python and serialize to the camelCase keys that
renderers consume (``fill_opacity`` -> ``fillOpacity``).
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MarkId = str

TextAnchor = Literal["start", "middle", "end"]
TextBaseline = Literal["alphabetic", "central", "hanging", "middle"]
StrokeLinecap = Literal["butt", "round", "square"]
StrokeLinejoin = Literal["bevel", "miter", "round"]
Units = Literal["userSpaceOnUse", "objectBoundingBox"]

DiagnosticCode = Literal[
    "BLANK_RENDER",
    "EMPTY_DATA",
    "MISSING_DEF",
    "MARK_OUT_OF_BOUNDS",
    "NAN_COORDINATE",
    "INVALID_TYPE",
    "INVALID_VALUE",
    "INVALID_DATA_SHAPE",
    "MISSING_VALUE",
    "MISSING_FIELD",
    "MISSING_DATA",
    "OUT_OF_RANGE",
    "UNKNOWN_CHART_TYPE",
]

DiagnosticPhase = Literal["input", "normalized", "compute", "render"]


class _ModelBase(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class _StyledMark(_ModelBase):
    id: MarkId
    opacity: Optional[float] = None
    fill: Optional[str] = None
    fill_opacity: Optional[float] = None
    mask: Optional[str] = None
    filter: Optional[str] = None
    class_name: Optional[str] = None


class RectMark(_StyledMark):
    type: Literal["rect"] = "rect"
    x: float
    y: float
    w: float
    h: float
    rx: Optional[float] = None
    ry: Optional[float] = None
    stroke: Optional[str] = None
    stroke_opacity: Optional[float] = None
    stroke_width: Optional[float] = None
    clip_path: Optional[str] = None


class PathMark(_StyledMark):
    type: Literal["path"] = "path"
    d: str
    stroke: Optional[str] = None
    stroke_opacity: Optional[float] = None
    stroke_width: Optional[float] = None
    stroke_linecap: Optional[StrokeLinecap] = None
    stroke_linejoin: Optional[StrokeLinejoin] = None
    clip_path: Optional[str] = None


class TextMark(_StyledMark):
    type: Literal["text"] = "text"
    x: float
    y: float
    text: str
    anchor: Optional[TextAnchor] = None
    baseline: Optional[TextBaseline] = None


class CircleMark(_StyledMark):
    type: Literal["circle"] = "circle"
    cx: float
    cy: float
    r: float
    stroke: Optional[str] = None
    stroke_opacity: Optional[float] = None
    stroke_width: Optional[float] = None
    stroke_dasharray: Optional[str] = None
    stroke_dashoffset: Optional[str] = None
    stroke_linecap: Optional[StrokeLinecap] = None


class LineMark(_ModelBase):
    type: Literal["line"] = "line"
    id: MarkId
    x1: float
    y1: float
    x2: float
    y2: float
    opacity: Optional[float] = None
    stroke: Optional[str] = None
    stroke_opacity: Optional[float] = None
    stroke_width: Optional[float] = None
    stroke_linecap: Optional[StrokeLinecap] = None
    stroke_linejoin: Optional[StrokeLinejoin] = None
    mask: Optional[str] = None
    filter: Optional[str] = None
    class_name: Optional[str] = None


Mark = Annotated[
    Union[RectMark, PathMark, TextMark, CircleMark, LineMark],
    Field(discriminator="type"),
]

MARK_TYPES = (RectMark, PathMark, TextMark, CircleMark, LineMark)


class PatternRect(_ModelBase):
    """Id-less rect drawn inside a pattern or mask def."""

    type: Literal["rect"] = "rect"
    x: float
    y: float
    w: float
    h: float
    rx: Optional[float] = None
    ry: Optional[float] = None
    fill: Optional[str] = None
    fill_opacity: Optional[float] = None
    opacity: Optional[float] = None
    class_name: Optional[str] = None


class PatternCircle(_ModelBase):
    type: Literal["circle"] = "circle"
    cx: float
    cy: float
    r: float
    fill: Optional[str] = None
    fill_opacity: Optional[float] = None
    opacity: Optional[float] = None
    class_name: Optional[str] = None


class PatternPath(_ModelBase):
    type: Literal["path"] = "path"
    d: str
    fill: Optional[str] = None
    fill_opacity: Optional[float] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    opacity: Optional[float] = None
    class_name: Optional[str] = None


PatternMark = Annotated[
    Union[PatternRect, PatternCircle, PatternPath],
    Field(discriminator="type"),
]


class GradientStop(_ModelBase):
    offset: float
    color: str
    opacity: Optional[float] = None


class LinearGradientDef(_ModelBase):
    type: Literal["linearGradient"] = "linearGradient"
    id: str
    x1: Optional[float] = None
    y1: Optional[float] = None
    x2: Optional[float] = None
    y2: Optional[float] = None
    stops: list[GradientStop]


class ClipRectDef(_ModelBase):
    type: Literal["clipRect"] = "clipRect"
    id: str
    x: float
    y: float
    w: float
    h: float
    rx: Optional[float] = None
    ry: Optional[float] = None


class PatternDef(_ModelBase):
    type: Literal["pattern"] = "pattern"
    id: str
    x: Optional[float] = None
    y: Optional[float] = None
    width: float
    height: float
    pattern_units: Optional[Units] = None
    pattern_content_units: Optional[Units] = None
    pattern_transform: Optional[str] = None
    marks: list[PatternMark] = Field(default_factory=list)


class MaskDef(_ModelBase):
    type: Literal["mask"] = "mask"
    id: str
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    mask_units: Optional[Units] = None
    mask_content_units: Optional[Units] = None
    marks: list[PatternMark] = Field(default_factory=list)


class DropShadow(_ModelBase):
    type: Literal["dropShadow"] = "dropShadow"
    dx: Optional[float] = None
    dy: Optional[float] = None
    std_deviation: Optional[float] = None
    flood_color: Optional[str] = None
    flood_opacity: Optional[float] = None


class GaussianBlur(_ModelBase):
    type: Literal["gaussianBlur"] = "gaussianBlur"
    std_deviation: Optional[float] = None


FilterPrimitive = Annotated[Union[DropShadow, GaussianBlur], Field(discriminator="type")]


class FilterDef(_ModelBase):
    type: Literal["filter"] = "filter"
    id: str
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    filter_units: Optional[Units] = None
    primitives: list[FilterPrimitive] = Field(default_factory=list)


Def = Annotated[
    Union[LinearGradientDef, ClipRectDef, PatternDef, MaskDef, FilterDef],
    Field(discriminator="type"),
]

DEF_TYPES = (LinearGradientDef, ClipRectDef, PatternDef, MaskDef, FilterDef)


class A11ySeriesSummary(_ModelBase):
    kind: Literal["series"] = "series"
    count: int
    min: Optional[float] = None
    max: Optional[float] = None
    last: Optional[float] = None
    trend: Optional[Literal["up", "down", "flat"]] = None


class A11ySegmentsSummary(_ModelBase):
    kind: Literal["segments"] = "segments"
    count: int
    largest_pct: Optional[float] = None
    largest_name: Optional[str] = None


A11ySummary = Annotated[
    Union[A11ySeriesSummary, A11ySegmentsSummary],
    Field(discriminator="kind"),
]


class A11yItem(_ModelBase):
    id: MarkId
    label: str
    value: Optional[float] = None
    value_text: Optional[str] = None
    series: Optional[str] = None
    rank: Optional[int] = None


class A11yTree(_ModelBase):
    role: Literal["img", "graphics-document"] = "img"
    label: Optional[str] = None
    summary: Optional[A11ySummary] = None
    items: Optional[list[A11yItem]] = None


class DiagnosticWarning(_ModelBase):
    code: DiagnosticCode
    message: str
    phase: Optional[DiagnosticPhase] = None
    mark_id: Optional[MarkId] = None
    path: Optional[list[Union[str, int]]] = None
    expected: Optional[str] = None
    received: Optional[str] = None
    hint: Optional[str] = None
    example: Optional[str] = None
    cause: Optional[DiagnosticCode] = None


class ModelStats(_ModelBase):
    mark_count: int
    text_count: int
    has_defs: bool
    warnings: Optional[list[DiagnosticWarning]] = None


class RenderModel(_ModelBase):
    width: float
    height: float
    marks: list[Mark] = Field(default_factory=list)
    defs: Optional[list[Def]] = None
    a11y: Optional[A11yTree] = Field(default=None, alias="a11y")
    stats: Optional[ModelStats] = None

    @property
    def warnings(self) -> list[DiagnosticWarning]:
        if self.stats is None or self.stats.warnings is None:
            return []
        return list(self.stats.warnings)

    def warning_codes(self) -> list[str]:
        return [warning.code for warning in self.warnings]

    @classmethod
    def from_dict(cls, payload: dict) -> "RenderModel":
        return cls.model_validate(payload)


__all__ = [
    "A11yItem",
    "A11ySegmentsSummary",
    "A11ySeriesSummary",
    "A11ySummary",
    "A11yTree",
    "CircleMark",
    "ClipRectDef",
    "DEF_TYPES",
    "Def",
    "DiagnosticCode",
    "DiagnosticPhase",
    "DiagnosticWarning",
    "DropShadow",
    "FilterDef",
    "GaussianBlur",
    "GradientStop",
    "LineMark",
    "LinearGradientDef",
    "MARK_TYPES",
    "Mark",
    "MarkId",
    "MaskDef",
    "ModelStats",
    "PathMark",
    "PatternCircle",
    "PatternDef",
    "PatternMark",
    "PatternPath",
    "PatternRect",
    "RectMark",
    "RenderModel",
    "TextMark",
]
