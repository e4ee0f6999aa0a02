"""Compute orchestrator: spec + data + size -> RenderModel.

``compute_model`` is total for malformed domain input: bad data, sizes and
options become diagnostic warnings on the returned model. Only a chart
definition that breaks its contract raises (``ChartContractError``).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any, Optional

from chartmodel.a11y import infer_a11y_items, infer_a11y_summary
from chartmodel.charts import DEFAULT_REGISTRY
from chartmodel.charts.base import (
    ChartDefinition,
    ChartSpec,
    InteractionState,
    Layout,
    Normalized,
    ThemeTokens,
)
from chartmodel.charts.shared import coerce_finite_non_negative
from chartmodel.config.schema import DEFAULT_ENGINE_CONFIG, EngineConfig
from chartmodel.diagnostics import WarningSink, validate_def_references, validate_marks
from chartmodel.errors import ChartContractError
from chartmodel.model import (
    DEF_TYPES,
    MARK_TYPES,
    A11yTree,
    Def,
    Mark,
    ModelStats,
    RenderModel,
)
from chartmodel.registry import ChartMeta, ChartRegistry
from chartmodel.validators import stringify, validate_chart_data

logger = logging.getLogger(__name__)

# BLANK_RENDER names the first of these present as its cause.
_BLANK_CAUSES = ("UNKNOWN_CHART_TYPE", "EMPTY_DATA", "MISSING_DATA")


def _registry(registry: Optional[ChartRegistry]) -> ChartRegistry:
    return DEFAULT_REGISTRY if registry is None else registry


def _spec_type(spec: Any) -> Any:
    return spec.get("type") if isinstance(spec, Mapping) else None


def _size_value(size: Any, key: str) -> Any:
    if isinstance(size, Mapping):
        return size.get(key)
    return getattr(size, key, None)


def _types_match(spec: ChartSpec, normalized: Any) -> bool:
    return getattr(normalized, "type", None) == _spec_type(spec)


def is_chart_type(chart_type: Any, *, registry: Optional[ChartRegistry] = None) -> bool:
    return chart_type in _registry(registry)


def preferred_aspect_ratio(
    chart_type: str,
    *,
    registry: Optional[ChartRegistry] = None,
) -> Optional[str]:
    definition = _registry(registry).find(chart_type)
    return None if definition is None else definition.preferred_aspect_ratio


def get_chart_meta(chart_type: str, *, registry: Optional[ChartRegistry] = None) -> ChartMeta:
    return _registry(registry).get_chart_meta(chart_type)


def all_chart_meta(*, registry: Optional[ChartRegistry] = None) -> list[ChartMeta]:
    return _registry(registry).all_chart_meta()


def normalize_data(
    spec: ChartSpec,
    data: Any,
    *,
    registry: Optional[ChartRegistry] = None,
) -> Normalized:
    return _registry(registry).get(_spec_type(spec)).normalize(spec, data)


def compute_layout(
    spec: ChartSpec,
    size: Any,
    warnings: Optional[WarningSink] = None,
    *,
    registry: Optional[ChartRegistry] = None,
) -> Layout:
    """Resolve width, height and pad independently to finite non-negative values."""
    pad_raw = spec.get("pad") if isinstance(spec, Mapping) else None
    if pad_raw is None:
        definition = _registry(registry).find(_spec_type(spec))
        pad_raw = 0 if definition is None else definition.default_pad

    width = coerce_finite_non_negative(
        _size_value(size, "width"), 0, warnings, "Non-finite chart width; defaulted to 0."
    )
    height = coerce_finite_non_negative(
        _size_value(size, "height"), 0, warnings, "Non-finite chart height; defaulted to 0."
    )
    pad = coerce_finite_non_negative(pad_raw, 0, warnings, "Non-finite chart padding; defaulted to 0.")
    return Layout(width=width, height=height, pad=pad)


def _checked(items: Any, allowed: tuple[type, ...], what: str, definition: ChartDefinition) -> list:
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise ChartContractError(
            f"Chart {definition.type!r} returned {type(items).__name__} from {what}(); expected a list.",
            context={"chart_type": definition.type},
        )
    for item in items:
        if not isinstance(item, allowed):
            raise ChartContractError(
                f"Chart {definition.type!r} returned a {type(item).__name__} from {what}().",
                context={"chart_type": definition.type},
            )
    return list(items)


def compute_marks(
    spec: ChartSpec,
    normalized: Normalized,
    layout: Layout,
    state: Optional[InteractionState] = None,
    theme: Optional[ThemeTokens] = None,
    warnings: Optional[WarningSink] = None,
    *,
    registry: Optional[ChartRegistry] = None,
) -> list[Mark]:
    if not _types_match(spec, normalized):
        return []
    definition = _registry(registry).get(_spec_type(spec))
    produced = definition.marks(spec, normalized, layout, state, theme, warnings)
    return _checked(produced, MARK_TYPES, "marks", definition)


def compute_defs(
    spec: ChartSpec,
    normalized: Normalized,
    layout: Layout,
    warnings: Optional[WarningSink] = None,
    *,
    registry: Optional[ChartRegistry] = None,
) -> list[Def]:
    if not _types_match(spec, normalized):
        return []
    definition = _registry(registry).get(_spec_type(spec))
    produced = definition.defs(spec, normalized, layout, warnings)
    if produced is None:
        return []
    return _checked(produced, DEF_TYPES, "defs", definition)


def compute_a11y(
    spec: ChartSpec,
    normalized: Normalized,
    layout: Layout,
    *,
    registry: Optional[ChartRegistry] = None,
    max_items: int = DEFAULT_ENGINE_CONFIG.max_a11y_items,
) -> A11yTree:
    """Definition a11y tree with summary and items back-filled when absent."""
    if not _types_match(spec, normalized):
        return A11yTree(role="img", label=f"Chart ({_spec_type(spec)})")
    definition = _registry(registry).get(_spec_type(spec))
    tree = definition.a11y(spec, normalized, layout)
    summary = tree.summary if tree.summary is not None else infer_a11y_summary(normalized)
    items = tree.items if tree.items is not None else infer_a11y_items(normalized, max_items=max_items)
    if summary is None and items is None:
        return tree
    return tree.model_copy(update={"summary": summary, "items": items})


def _push_validation_issues(spec: ChartSpec, data: Any, warnings: WarningSink) -> None:
    result = validate_chart_data(spec, data)
    for issue in result.errors:
        if not warnings.warn(
            issue.code,
            issue.message,
            phase="input",
            path=list(issue.path),
            expected=issue.expected,
            received=issue.received,
            hint=issue.hint,
            example=issue.example,
        ):
            return


def _blank_render(warnings: WarningSink) -> None:
    codes = set(warnings.codes())
    cause = next((code for code in _BLANK_CAUSES if code in codes), None)
    warnings.warn("BLANK_RENDER", "No marks produced.", phase="compute", cause=cause)


def _assemble(
    layout: Layout,
    marks: list[Mark],
    defs: list[Def],
    a11y: A11yTree,
    warnings: WarningSink,
) -> RenderModel:
    stats = ModelStats(
        mark_count=len(marks),
        text_count=sum(1 for mark in marks if mark.type == "text"),
        has_defs=bool(defs),
        warnings=warnings.to_list() or None,
    )
    return RenderModel(
        width=layout.width,
        height=layout.height,
        marks=marks,
        defs=defs or None,
        a11y=a11y,
        stats=stats,
    )


def compute_model(
    spec: ChartSpec,
    data: Any,
    size: Any,
    theme: Optional[ThemeTokens] = None,
    state: Optional[InteractionState] = None,
    *,
    registry: Optional[ChartRegistry] = None,
    config: Optional[EngineConfig] = None,
) -> RenderModel:
    """Build the render model for one chart.

    Args:
        spec: Mapping with a ``type`` key plus chart options and optional ``pad``.
        data: Raw chart data; its expected shape depends on ``spec["type"]``.
        size: Mapping or object with ``width`` and ``height``.
        theme: Optional theme tokens passed through to the chart definition.
        state: Optional interaction state passed through to the chart definition.
        registry: Chart registry to resolve ``spec["type"]``; defaults to the built-ins.
        config: Engine knobs (warning budget, bounds tolerance, a11y item cap).
    """
    registry = _registry(registry)
    config = config or DEFAULT_ENGINE_CONFIG
    warnings = WarningSink(config.max_warnings)
    chart_type = _spec_type(spec)
    definition = registry.find(chart_type)

    if definition is None:
        available = ", ".join(sorted(registry.list())) or "<none>"
        warnings.warn(
            "UNKNOWN_CHART_TYPE",
            f"Unknown chart type: {stringify(chart_type)}.",
            phase="input",
            path=["type"],
            expected=f"one of: {available}",
            received=stringify(chart_type),
            hint="Use a registered chart type.",
        )
        width = coerce_finite_non_negative(
            _size_value(size, "width"), 0, warnings, "Non-finite chart width; defaulted to 0."
        )
        height = coerce_finite_non_negative(
            _size_value(size, "height"), 0, warnings, "Non-finite chart height; defaulted to 0."
        )
        _blank_render(warnings)
        logger.debug("Unknown chart type %r; returning blank model.", chart_type)
        return _assemble(
            Layout(width=width, height=height, pad=0.0),
            [],
            [],
            A11yTree(role="img", label=f"Chart ({chart_type})"),
            warnings,
        )

    _push_validation_issues(spec, data, warnings)

    normalized = definition.normalize(spec, data)
    if definition.empty_data_warning_message and definition.is_empty(normalized):
        warnings.warn(
            "EMPTY_DATA",
            definition.empty_data_warning_message,
            phase="normalized",
            hint=definition.empty_data_hint,
        )

    layout = compute_layout(spec, size, warnings, registry=registry)
    marks = compute_marks(spec, normalized, layout, state, theme, warnings, registry=registry)
    defs = compute_defs(spec, normalized, layout, warnings, registry=registry)
    if not marks:
        _blank_render(warnings)

    validate_marks(marks, layout.width, layout.height, warnings, epsilon=config.bounds_epsilon)
    validate_def_references(marks, defs, warnings)

    a11y = compute_a11y(
        spec, normalized, layout, registry=registry, max_items=config.max_a11y_items
    )
    logger.debug(
        "Computed %s model: %d marks, %d defs, %d warnings.",
        chart_type,
        len(marks),
        len(defs),
        len(warnings),
    )
    return _assemble(layout, marks, defs, a11y, warnings)


__all__ = [
    "all_chart_meta",
    "compute_a11y",
    "compute_defs",
    "compute_layout",
    "compute_marks",
    "compute_model",
    "get_chart_meta",
    "is_chart_type",
    "normalize_data",
    "preferred_aspect_ratio",
]
