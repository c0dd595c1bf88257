from __future__ import annotations

import logging

import pytest

from evolvetrade import engine
from evolvetrade.config_manager import ConfigError
from evolvetrade.engine import DEFAULT_ENTRY_POINT, EngineError, load_entry_point, run


def test_run_logs_lifecycle(caplog):
    caplog.set_level(logging.DEBUG, logger="evolvetrade.engine")

    assert run(False) is None

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["EvolveTrade engine starting", "EvolveTrade engine finished"]


def test_run_verbose_adds_debug_output(caplog):
    caplog.set_level(logging.DEBUG, logger="evolvetrade.engine")

    run(True)

    debug = [record.getMessage() for record in caplog.records if record.levelno == logging.DEBUG]
    assert debug == ["Verbose output enabled"]


def test_load_entry_point_resolves_default():
    assert load_entry_point(DEFAULT_ENTRY_POINT) is engine.run


def test_load_entry_point_follows_dotted_attributes():
    assert load_entry_point("evolvetrade:engine.run") is engine.run


@pytest.mark.parametrize(
    "path, message",
    [
        ("evolvetrade.engine", "module:function"),
        ("evolvetrade.not_a_module:run", "Unable to import"),
        ("evolvetrade.engine:missing", "not found"),
        ("evolvetrade.engine:DEFAULT_ENTRY_POINT", "not callable"),
    ],
)
def test_load_entry_point_rejects_bad_paths(path, message):
    with pytest.raises(ConfigError, match=message):
        load_entry_point(path)


def test_engine_error_carries_message():
    error = EngineError("fitness evaluation failed")

    assert str(error) == "fitness evaluation failed"
