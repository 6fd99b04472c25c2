"""Tests for structured log output."""

import json
import logging

from ats_server.core.logging import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("ats_server.test", logging.INFO, __file__, 1, "Generated %s artifact", ("resume",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_generation_fields():
    line = JSONFormatter().format(_record(user_id="u-1", job_id=7, kind="resume", latency_ms=42, request_id="abc"))
    data = json.loads(line)
    assert data["message"] == "Generated resume artifact"
    assert data["level"] == "INFO"
    assert data["logger"] == "ats_server.test"
    assert data["user_id"] == "u-1"
    assert data["job_id"] == 7
    assert data["kind"] == "resume"
    assert data["latency_ms"] == 42
    assert data["request_id"] == "abc"


def test_json_formatter_omits_absent_fields():
    data = json.loads(JSONFormatter().format(_record()))
    assert "user_id" not in data
    assert "request_id" not in data
