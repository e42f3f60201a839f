"""Structured Logging — verifies the JSON formatter output."""

import json
import logging
import sys

from chopshop.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("chopshop.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_core_fields():
    out = json.loads(JSONFormatter().format(_record()))
    assert out["level"] == "INFO"
    assert out["logger"] == "chopshop.test"
    assert out["message"] == "hello world"
    assert "timestamp" in out


def test_json_formatter_surfaces_known_extras_only():
    out = json.loads(JSONFormatter().format(
        _record(username="ada", status_code=500, password="nope"),
    ))
    assert out["username"] == "ada"
    assert out["status_code"] == 500
    assert "password" not in out


def test_json_formatter_records_exception_type():
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord("chopshop.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    out = json.loads(JSONFormatter().format(record))
    assert out["exception_type"] == "ValueError"
    assert "ValueError: bad" in out["exception"]


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("DEBUG", "json")
        handler = setup_logging("WARNING", "text")
        ours = [h for h in root.handlers if h.get_name() == "chopshop"]
        assert ours == [handler]
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = before
        root.setLevel(level)
