import logging

import pytest

from chartmodel.config import load_engine_config
from chartmodel.errors import ChartModelError, ConfigError, InputError, RegistryError
from chartmodel.logging_utils import (
    get_user_message,
    log_exception,
    parse_log_level,
    run_with_error_handling,
)
from chartmodel.registry import ChartRegistry


def test_missing_config_raises_config_error(tmp_path) -> None:
    missing = tmp_path / "missing.yaml"

    with pytest.raises(ConfigError) as exc:
        load_engine_config(missing)

    message = str(exc.value)
    assert "Config not found" in message
    assert str(missing) in message


def test_missing_chart_type_raises_key_error() -> None:
    registry = ChartRegistry()

    with pytest.raises(KeyError) as exc:
        registry.get("missing-chart")

    message = str(exc.value)
    assert "missing-chart" in message
    assert "Available: <none>" in message


def test_registry_error_is_a_chartmodel_error() -> None:
    assert issubclass(RegistryError, ChartModelError)


def test_user_message_and_context() -> None:
    error = InputError(
        "Spec file not found: spec.json",
        user_message="Pass --spec with an existing file.",
        context={"path": "spec.json"},
    )

    assert get_user_message(error) == "Pass --spec with an existing file."
    assert error.log_message() == "Spec file not found: spec.json: {'path': 'spec.json'}"
    assert get_user_message(ValueError("boom")) == "Unexpected error: boom"


def test_run_with_error_handling_logs_and_reraises(caplog) -> None:
    logger = logging.getLogger("chartmodel.test")
    logger.setLevel(logging.INFO)
    logger.propagate = True
    logger.handlers.clear()

    def _raise_config_error() -> None:
        raise ConfigError("Config not found: configs/missing.yaml")

    with caplog.at_level(logging.INFO, logger=logger.name):
        with pytest.raises(ConfigError):
            run_with_error_handling(_raise_config_error, logger=logger)

    assert any(
        "Config not found" in record.getMessage() for record in caplog.records
    )


def test_log_exception_emits_traceback_at_debug_level(caplog) -> None:
    logger = logging.getLogger("chartmodel.test.debug")
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    logger.handlers.clear()

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        log_exception(logger, ConfigError("Config not found: configs/missing.yaml"))

    assert any(record.exc_info for record in caplog.records)


def test_log_exception_adds_context_details_at_debug_level(caplog) -> None:
    logger = logging.getLogger("chartmodel.test.details")
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    logger.handlers.clear()
    error = InputError(
        "Spec file not found: spec.json",
        user_message="Pass --spec with an existing file.",
        context={"path": "spec.json"},
    )

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        assert log_exception(logger, error) == "Pass --spec with an existing file."

    messages = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert messages[0] == (logging.ERROR, "Pass --spec with an existing file.")
    assert (logging.DEBUG, "Details: Spec file not found: spec.json: {'path': 'spec.json'}") in messages


def test_parse_log_level() -> None:
    assert parse_log_level(" debug ") == logging.DEBUG
    assert parse_log_level(logging.WARNING) == logging.WARNING
    with pytest.raises(ValueError, match="Unknown log level"):
        parse_log_level("chatty")
