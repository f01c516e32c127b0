"""Structured Logging — verifies JSON log shape and extra-field surfacing."""

import json
import logging

from phonebook.infrastructure.observability import JSONFormatter


def _make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "phonebook.test", logging.ERROR, __file__, 1, "Lookup failed", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_base_fields():
    log = json.loads(JSONFormatter().format(_make_record()))
    assert log["level"] == "ERROR"
    assert log["logger"] == "phonebook.test"
    assert log["message"] == "Lookup failed"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(_make_record(
        phone_number="+15551234567", error_code="CORRUPT_RECORD", unrelated="x",
    )))
    assert log["phone_number"] == "+15551234567"
    assert log["error_code"] == "CORRUPT_RECORD"
    assert "unrelated" not in log
