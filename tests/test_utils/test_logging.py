"""
Tests for nad_matcher/utils/logging.py.

What we test
------------
configure_logging():
  - Uses the configured level; debug=True forces DEBUG.
  - Creates the log file's parent directories.

JsonLineFormatter:
  - Emits ts / level / logger / msg plus extra= fields.
"""

from __future__ import annotations

import json
import logging

import pytest

from nad_matcher.config import LoggingConfig
from nad_matcher.utils.logging import JsonLineFormatter, configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_configured_level(self):
        assert configure_logging(LoggingConfig(level="WARNING")) == logging.WARNING
        assert logging.getLogger().level == logging.WARNING

    def test_debug_overrides_level(self):
        assert configure_logging(LoggingConfig(level="ERROR"), debug=True) == logging.DEBUG

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "nad.log"
        configure_logging(LoggingConfig(log_file=str(log_file)))
        logging.getLogger("nad_matcher.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")


class TestJsonLineFormatter:
    def test_fields_and_extras(self):
        record = logging.LogRecord(
            "nad_matcher.workflows.base", logging.INFO, __file__, 1,
            "Workflow [%s] done", ("countries_to_module",), None,
        )
        record.workflow = "countries_to_module"
        payload = json.loads(JsonLineFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "nad_matcher.workflows.base"
        assert payload["msg"] == "Workflow [countries_to_module] done"
        assert payload["workflow"] == "countries_to_module"
        assert payload["ts"].endswith("Z")
        assert "args" not in payload
