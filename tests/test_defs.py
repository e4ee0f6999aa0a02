import re

import pytest

from chartmodel.compute import compute_model
from chartmodel.defs import (
    FillRule,
    IdAllocator,
    MarkMatcher,
    ModelIdAllocator,
    apply_fill_rules,
    attach_defs,
    fill_url,
    patch_render_model,
)
from chartmodel.model import (
    CircleMark,
    GradientStop,
    LineMark,
    LinearGradientDef,
    PatternDef,
    PatternRect,
    RectMark,
    TextMark,
)


def _gradient(def_id: str) -> LinearGradientDef:
    return LinearGradientDef(id=def_id, stops=[GradientStop(offset=0, color="#000")])


def test_mark_matcher_criteria() -> None:
    rect = RectMark(id="pareto-seg-1", x=0, y=0, w=1, h=1, class_name="mv-pareto-seg extra")

    assert MarkMatcher()(rect)
    assert MarkMatcher(id="pareto-seg-1", type="rect")(rect)
    assert not MarkMatcher(type="circle")(rect)
    assert MarkMatcher(id=re.compile(r"seg-\d+$"))(rect)
    assert not MarkMatcher(class_name="mv-pareto-seg")(rect)
    assert MarkMatcher(class_name=re.compile(r"\bmv-pareto-seg\b"))(rect)


def test_apply_fill_rules_first_match_and_explicit_fill() -> None:
    marks = [
        RectMark(id="a", x=0, y=0, w=1, h=1),
        RectMark(id="b", x=0, y=0, w=1, h=1, fill="#f00"),
        CircleMark(id="c", cx=0, cy=0, r=1),
        LineMark(id="l", x1=0, y1=0, x2=1, y2=1),
    ]
    rules = [FillRule(id="stripes", match=MarkMatcher(type="rect")), FillRule(id="dots", match=lambda m: True)]

    kept = apply_fill_rules(marks, rules)
    forced = apply_fill_rules(marks, rules, overwrite=True)

    assert [getattr(mark, "fill", None) for mark in kept] == [
        "url(#stripes)",
        "#f00",
        "url(#dots)",
        None,
    ]
    assert forced[1].fill == "url(#stripes)"
    assert kept[3] is marks[3]
    assert marks[0].fill is None


def test_id_allocator_suffixes_collisions() -> None:
    allocator = IdAllocator(["grad"])

    assert allocator.allocate("grad") == "grad-2"
    assert allocator.allocate("grad") == "grad-3"
    assert allocator.allocate("fresh") == "fresh"
    allocator.reserve("taken")
    assert "taken" in allocator
    assert allocator.allocate("taken") == "taken-2"


def test_attach_defs_renames_colliding_ids_and_follows_rules() -> None:
    data = [{"pct": 60, "color": "#a00"}, {"pct": 40, "color": "#0a0"}]
    model = compute_model({"type": "pareto"}, data, {"width": 100, "height": 20})
    pattern = PatternDef(
        id="pareto-seg-0",
        width=4,
        height=4,
        marks=[PatternRect(x=0, y=0, w=2, h=4, fill="#fff")],
    )

    result = attach_defs(
        model,
        [pattern, _gradient("shine")],
        [FillRule(id="pareto-seg-0", match=MarkMatcher(id=re.compile(r"^pareto-bg-")))],
        overwrite=True,
    )

    assert [item.id for item in result.defs] == ["pareto-seg-0-2", "shine"]
    bg_fills = {mark.fill for mark in result.marks if mark.id.startswith("pareto-bg-")}
    assert bg_fills == {fill_url("pareto-seg-0-2")}
    assert result.stats.has_defs
    assert model.defs is None
    assert not model.stats.has_defs


def test_attach_defs_keeps_existing_defs_first() -> None:
    model = compute_model({"type": "spark-area"}, [10, 20], {"width": 100, "height": 20})
    existing_id = model.defs[0].id

    result = attach_defs(model, [_gradient(existing_id)])

    assert [item.id for item in result.defs] == [existing_id, f"{existing_id}-2"]
    assert result.marks == model.marks


def _sparkline():
    return compute_model({"type": "sparkline"}, [1, 2, 3], {"width": 200, "height": 32})


def test_model_id_allocator_keeps_def_and_mark_ids_apart() -> None:
    allocator = ModelIdAllocator(_sparkline())

    assert [allocator.def_id("x") for _ in range(3)] == ["x", "x-2", "x-3"]
    assert allocator.mark_id("sparkline-line") == "sparkline-line-2"
    assert allocator.def_id("sparkline-line") == "sparkline-line"
    assert allocator.mark_id("m") == "m"
    assert allocator.mark_id("m") == "m-2"


def test_patch_appends_marks_and_recounts_stats() -> None:
    model = _sparkline()

    patched = patch_render_model(
        model,
        marks=[
            RectMark(id="extra", x=0, y=0, w=10, h=10),
            TextMark(id="note", x=1, y=1, text="hi"),
        ],
    )

    assert [mark.id for mark in patched.marks] == [
        "sparkline-line",
        "sparkline-dot",
        "extra",
        "note",
    ]
    assert (patched.stats.mark_count, patched.stats.text_count) == (4, 1)
    assert patched.stats.has_defs is False
    assert model.stats.mark_count == 2


def test_patch_prepend_and_replace_modes() -> None:
    model = _sparkline()
    backdrop = RectMark(id="backdrop", x=0, y=0, w=200, h=32)

    prepended = patch_render_model(model, marks=[backdrop], marks_mode="prepend")
    replaced = patch_render_model(model, marks=[backdrop], marks_mode="replace")

    assert [mark.id for mark in prepended.marks][:2] == ["backdrop", "sparkline-line"]
    assert [mark.id for mark in replaced.marks] == ["backdrop"]
    assert replaced.stats.mark_count == 1


def test_patch_defs_modes_update_has_defs() -> None:
    model = compute_model({"type": "spark-area"}, [10, 20], {"width": 100, "height": 20})
    existing_id = model.defs[0].id

    appended = patch_render_model(model, defs=[_gradient("shine")])
    prepended = patch_render_model(model, defs=[_gradient("shine")], defs_mode="prepend")
    cleared = patch_render_model(model, defs=[], defs_mode="replace")

    assert [item.id for item in appended.defs] == [existing_id, "shine"]
    assert [item.id for item in prepended.defs] == ["shine", existing_id]
    assert cleared.defs is None
    assert cleared.stats.has_defs is False
    assert appended.marks == model.marks


def test_patch_keeps_warnings_and_can_skip_stats() -> None:
    model = compute_model({"type": "donut"}, None, {"width": 20, "height": 20})
    extra = RectMark(id="extra", x=0, y=0, w=1, h=1)

    patched = patch_render_model(model, marks=[extra])
    untouched = patch_render_model(model, marks=[extra], update_stats=False)

    assert patched.warnings == model.warnings
    assert patched.stats.mark_count == len(model.marks) + 1
    assert untouched.stats == model.stats


def test_patch_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError, match="Unknown merge mode"):
        patch_render_model(_sparkline(), marks=[], marks_mode="insert")
