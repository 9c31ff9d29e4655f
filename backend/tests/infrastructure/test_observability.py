"""Structured Logging — JSON formatter surfaces side-effect context fields."""

import json
import logging

from assignflow.infrastructure.observability import JSONFormatter


def _record(**extra):
    record = logging.LogRecord(
        "assignflow.test", logging.ERROR, __file__, 1, "side effect failed", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_side_effect_fields():
    line = JSONFormatter().format(_record(
        assignment_id="a-1", booking_id="b-1", operation="complete",
        side_effect="close_chat_room", error_code="SIDE_EFFECT_FAILED",
    ))

    payload = json.loads(line)
    assert payload["level"] == "ERROR"
    assert payload["message"] == "side effect failed"
    assert payload["assignment_id"] == "a-1"
    assert payload["booking_id"] == "b-1"
    assert payload["operation"] == "complete"
    assert payload["side_effect"] == "close_chat_room"
    assert payload["error_code"] == "SIDE_EFFECT_FAILED"


def test_json_formatter_omits_absent_fields():
    payload = json.loads(JSONFormatter().format(_record()))

    assert "assignment_id" not in payload
    assert "side_effect" not in payload
