"""
Tests for structured logging.
"""

import json
import logging

from spamlens.logging import JSONFormatter, TextFormatter, get_logger, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        name="spamlens.test", level=logging.INFO, pathname="test.py",
        lineno=1, msg="Analysis complete", args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogging:

    def test_json_formatter(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "spamlens.test"
        assert data["message"] == "Analysis complete"
        assert "timestamp" in data

    def test_json_formatter_extra_fields(self):
        data = json.loads(JSONFormatter().format(
            _record(score=85, is_spam=True, unrelated="dropped"),
        ))
        assert data["score"] == 85
        assert data["is_spam"] is True
        assert "unrelated" not in data

    def test_json_formatter_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = _record()
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]

    def test_get_logger(self):
        assert get_logger("api").name == "spamlens.api"

    def test_setup_logging_text(self):
        root = setup_logging(level="debug", fmt="text")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_setup_logging_json(self):
        root = setup_logging(level="INFO", fmt="json")
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
