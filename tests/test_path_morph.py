from chartmodel.model import PathMark
from chartmodel.transition import (
    PathCommand,
    are_paths_compatible,
    interpolate_path,
    interpolate_path_mark,
    parse_path,
    serialize_path,
)


def test_parse_path_splits_commands_and_numbers() -> None:
    commands = parse_path("M0,0 L10 -20.5 A5,5,0,0,1,15,25 Z")

    assert commands == [
        PathCommand("M", (0.0, 0.0)),
        PathCommand("L", (10.0, -20.5)),
        PathCommand("A", (5.0, 5.0, 0.0, 0.0, 1.0, 15.0, 25.0)),
        PathCommand("Z", ()),
    ]


def test_parse_path_handles_exponents_and_leading_dots() -> None:
    assert parse_path("M.5 1e2")[0].args == (0.5, 100.0)


def test_serialize_path_rounds_to_four_decimals() -> None:
    commands = [PathCommand("M", (0.123456, 2.0)), PathCommand("L", (-1.5, 3.00004)), PathCommand("Z")]

    assert serialize_path(commands) == "M0.1235,2L-1.5,3Z"


def test_compatibility_requires_same_commands_and_arity() -> None:
    a = parse_path("M 0 0 L 1 1")

    assert are_paths_compatible(a, parse_path("M 5 5 L 9 9"))
    assert not are_paths_compatible(a, parse_path("M 5 5 L 9 9 L 3 3"))
    assert not are_paths_compatible(a, parse_path("M 5 5 H 9"))


def test_interpolate_path_blends_arguments() -> None:
    start = parse_path("M 0 0 L 10 10")
    end = parse_path("M 10 20 L 30 10")

    assert serialize_path(interpolate_path(start, end, 0.5)) == "M5,10L20,10"


def test_incompatible_paths_return_target_commands() -> None:
    end = parse_path("M 1 1 L 2 2 L 3 3")

    assert interpolate_path(parse_path("M 0 0"), end, 0.5) == end


def test_path_mark_morphs_geometry_and_style() -> None:
    start = PathMark(id="p", d="M 0 0 L 10 0", stroke_width=1, fill_opacity=0.2)
    end = PathMark(id="p", d="M 0 10 L 10 10", stroke_width=3, fill_opacity=0.6)

    mid = interpolate_path_mark(start, end, 0.5)

    assert mid.d == "M0,5L10,5"
    assert mid.stroke_width == 2
    assert abs(mid.fill_opacity - 0.4) < 1e-9


def test_incompatible_path_marks_hold_source_until_end() -> None:
    start = PathMark(id="p", d="M 0 0 L 1 1")
    end = PathMark(id="p", d="M 0 0 A 1 1 0 0 1 2 2")

    assert interpolate_path_mark(start, end, 0.5) is start
    assert interpolate_path_mark(start, end, 1) is end
