"""
Tests for log formatting.
"""
import json
import logging

from sheetstats.core.logging import JSONFormatter, TextFormatter, configure_logging


def _record(**extra):
    record = logging.LogRecord("sheetstats.test", logging.INFO, __file__, 10, "Analyzing %d rows", (5,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_analysis_id():
    payload = json.loads(JSONFormatter().format(_record(analysis_id="abc123", metric="build_charts")))

    assert payload["message"] == "Analyzing 5 rows"
    assert payload["level"] == "INFO"
    assert payload["analysis_id"] == "abc123"
    assert payload["metric"] == "build_charts"


def test_json_formatter_defaults_analysis_id():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["analysis_id"] == "system"


def test_text_formatter():
    line = TextFormatter().format(_record())
    assert "[system] - Analyzing 5 rows" in line
    assert "INFO" in line


def test_configure_logging_json():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(level="debug", log_format="json")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
