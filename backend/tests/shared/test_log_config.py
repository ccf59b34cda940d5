"""Tests for shared/log_config.py."""

import json
import logging

import pytest

from shared.config import Settings
from shared.log_config import APP_LOGGERS, JSONFormatter, configure_logging


def _record(msg="hello %s", args=("world",), exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="modules.auth.service",
        level=logging.WARNING,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
        func="login",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_formats_single_line_json(self):
        output = JSONFormatter().format(_record())
        assert "\n" not in output

        entry = json.loads(output)
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "modules.auth.service"
        assert entry["message"] == "hello world"
        assert entry["function"] == "login"
        assert entry["line"] == 42
        assert entry["timestamp"].endswith("Z")

    def test_includes_known_extra_fields(self):
        entry = json.loads(JSONFormatter().format(_record(user_id="u-1", status_code=401)))
        assert entry["user_id"] == "u-1"
        assert entry["status_code"] == 401

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys
            record = _record(exc_info=sys.exc_info())

        entry = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_loggers(self):
        saved = {
            name: (logging.getLogger(name).level, list(logging.getLogger(name).handlers),
                   logging.getLogger(name).propagate)
            for name in APP_LOGGERS
        }
        yield
        for name, (level, handlers, propagate) in saved.items():
            logger = logging.getLogger(name)
            logger.setLevel(level)
            logger.handlers = handlers
            logger.propagate = propagate

    def test_sets_level_on_app_loggers(self):
        configure_logging(Settings(log_level="debug"))
        for name in APP_LOGGERS:
            assert logging.getLogger(name).level == logging.DEBUG

    def test_json_format(self):
        configure_logging(Settings(log_format="json"))
        handler = logging.getLogger("modules").handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)

    def test_text_format(self):
        configure_logging(Settings(log_format="text"))
        handler = logging.getLogger("api").handlers[0]
        assert not isinstance(handler.formatter, JSONFormatter)

    def test_repeated_calls_do_not_stack_handlers(self):
        configure_logging(Settings())
        configure_logging(Settings())
        assert len(logging.getLogger("shared").handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(Settings(log_level="chatty"))
        assert logging.getLogger("client").level == logging.INFO
