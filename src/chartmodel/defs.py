"""Attach def-backed fills (gradients, patterns) and overlays to computed models."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import re
from typing import Literal, Optional, TypeVar, Union

from chartmodel.model import Def, Mark, ModelStats, RenderModel

TextPattern = Union[str, re.Pattern]
MergeMode = Literal["append", "prepend", "replace"]

_T = TypeVar("_T")


def fill_url(def_id: str) -> str:
    return f"url(#{def_id})"


def _matches_text(expected: TextPattern, actual: str) -> bool:
    if isinstance(expected, str):
        return actual == expected
    return expected.search(actual) is not None


@dataclass(frozen=True)
class MarkMatcher:
    """Selects marks by id, type and class name; unset criteria match anything.

    ``class_name`` is compared against the whole class string, not per token.
    """

    id: Optional[TextPattern] = None
    type: Optional[str] = None
    class_name: Optional[TextPattern] = None

    def __call__(self, mark: Mark) -> bool:
        if self.type is not None and mark.type != self.type:
            return False
        if self.id is not None and not _matches_text(self.id, mark.id):
            return False
        if self.class_name is not None and not _matches_text(self.class_name, mark.class_name or ""):
            return False
        return True


Matcher = Union[MarkMatcher, Callable[[Mark], bool]]


@dataclass(frozen=True)
class FillRule:
    id: str
    match: Matcher


def apply_fill_rules(
    marks: Sequence[Mark],
    rules: Sequence[FillRule],
    *,
    overwrite: bool = False,
) -> list[Mark]:
    """Set ``fill`` to the first matching rule's def; explicit fills win unless ``overwrite``."""
    if not rules:
        return list(marks)
    result = []
    for mark in marks:
        if "fill" not in type(mark).model_fields or (mark.fill is not None and not overwrite):
            result.append(mark)
            continue
        rule = next((rule for rule in rules if rule.match(mark)), None)
        result.append(mark if rule is None else mark.model_copy(update={"fill": fill_url(rule.id)}))
    return result


class IdAllocator:
    """Hands out unique ids for one model: ``prefix``, then ``prefix-2``, ``prefix-3``..."""

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._used = set(reserved)

    def reserve(self, value: str) -> None:
        self._used.add(value)

    def __contains__(self, value: object) -> bool:
        return value in self._used

    def allocate(self, prefix: str) -> str:
        candidate = prefix
        suffix = 2
        while candidate in self._used:
            candidate = f"{prefix}-{suffix}"
            suffix += 1
        self._used.add(candidate)
        return candidate


class ModelIdAllocator:
    """Separate id spaces for new defs and new marks of one model."""

    def __init__(self, model: RenderModel) -> None:
        self.defs = IdAllocator(item.id for item in model.defs or [])
        self.marks = IdAllocator(mark.id for mark in model.marks)

    def def_id(self, prefix: str) -> str:
        return self.defs.allocate(prefix)

    def mark_id(self, prefix: str) -> str:
        return self.marks.allocate(prefix)


def _merge(existing: Sequence[_T], added: Sequence[_T], mode: MergeMode) -> list[_T]:
    if mode == "replace":
        return list(added)
    if mode == "prepend":
        return list(added) + list(existing)
    if mode == "append":
        return list(existing) + list(added)
    raise ValueError(f"Unknown merge mode: {mode!r}. Use append, prepend or replace.")


def model_stats(model: RenderModel) -> ModelStats:
    """Counts for ``model``; warnings already on the model are kept."""
    return ModelStats(
        mark_count=len(model.marks),
        text_count=sum(1 for mark in model.marks if mark.type == "text"),
        has_defs=bool(model.defs),
        warnings=model.stats.warnings if model.stats is not None else None,
    )


def patch_render_model(
    model: RenderModel,
    *,
    marks: Optional[Sequence[Mark]] = None,
    defs: Optional[Sequence[Def]] = None,
    marks_mode: MergeMode = "append",
    defs_mode: MergeMode = "append",
    update_stats: bool = True,
) -> RenderModel:
    """Merge overlay ``marks`` and ``defs`` into ``model``.

    Args:
        model: Model to patch; it is not modified.
        marks: Marks to merge, or None to keep the current marks.
        defs: Defs to merge, or None to keep the current defs.
        marks_mode: ``append``, ``prepend`` or ``replace``.
        defs_mode: ``append``, ``prepend`` or ``replace``.
        update_stats: Recount ``mark_count``, ``text_count`` and ``has_defs``.

    Ids are taken as given; use ``ModelIdAllocator`` to pick free ones.
    """
    update: dict = {}
    if marks is not None:
        update["marks"] = _merge(model.marks, marks, marks_mode)
    if defs is not None:
        update["defs"] = _merge(model.defs or [], defs, defs_mode) or None
    patched = model.model_copy(update=update)
    if update_stats:
        patched = patched.model_copy(update={"stats": model_stats(patched)})
    return patched


def attach_defs(
    model: RenderModel,
    defs: Sequence[Def],
    rules: Sequence[FillRule] = (),
    *,
    overwrite: bool = False,
) -> RenderModel:
    """Append ``defs`` to ``model`` and apply ``rules``.

    Def ids that collide with existing mark or def ids are renamed, and rules
    pointing at a renamed def follow it.
    """
    existing = list(model.defs or [])
    allocator = IdAllocator([mark.id for mark in model.marks] + [item.id for item in existing])
    renamed: dict[str, str] = {}
    added = []
    for item in defs:
        new_id = allocator.allocate(item.id)
        if new_id != item.id:
            renamed[item.id] = new_id
            item = item.model_copy(update={"id": new_id})
        added.append(item)

    rules = [FillRule(id=renamed.get(rule.id, rule.id), match=rule.match) for rule in rules]
    filled = model.model_copy(
        update={"marks": apply_fill_rules(model.marks, rules, overwrite=overwrite)}
    )
    return patch_render_model(filled, defs=added, update_stats=model.stats is not None)


__all__ = [
    "FillRule",
    "IdAllocator",
    "MarkMatcher",
    "MergeMode",
    "ModelIdAllocator",
    "apply_fill_rules",
    "attach_defs",
    "fill_url",
    "model_stats",
    "patch_render_model",
]
