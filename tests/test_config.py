import json

import pytest

from chartmodel.config import EngineConfig, engine_config_from_mapping, load_engine_config
from chartmodel.errors import ConfigError


def test_yaml_engine_section_is_loaded(tmp_path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text(
        "engine:\n  max_warnings: 5\n  bounds_epsilon: 0.5\n  default_easing: easeOut\n",
        encoding="utf-8",
    )

    config = load_engine_config(path)

    assert config == EngineConfig(max_warnings=5, bounds_epsilon=0.5, default_easing="easeOut")


def test_flat_json_mapping_is_accepted(tmp_path) -> None:
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"max_a11y_items": 3}), encoding="utf-8")

    assert load_engine_config(path).max_a11y_items == 3


def test_empty_yaml_gives_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_engine_config(path) == EngineConfig()
    assert engine_config_from_mapping({"engine": None}) == EngineConfig()


def test_missing_config_names_the_path(tmp_path) -> None:
    missing = tmp_path / "missing.yaml"

    with pytest.raises(ConfigError) as exc:
        load_engine_config(missing)

    assert "Config not found" in str(exc.value)
    assert str(missing) in str(exc.value)


def test_malformed_file_is_a_config_error(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("engine: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to load config"):
        load_engine_config(path)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"engine": {"max_warning": 3}}, "Unknown engine config keys"),
        ({"max_warnings": True}, "must be an integer"),
        ({"max_warnings": -1}, "must be >= 0"),
        ({"bounds_epsilon": float("nan")}, "finite non-negative"),
        ({"bounds_epsilon": "0.1"}, "must be a number"),
        ({"bounds_epsilon": 10**400}, "finite non-negative"),
        ({"default_easing": "bounce"}, "easeInOut, easeOut, linear"),
        ({"engine": [1, 2]}, "section must be a mapping"),
    ],
)
def test_invalid_values_raise_config_error(payload, message) -> None:
    with pytest.raises(ConfigError, match=message):
        engine_config_from_mapping(payload)
