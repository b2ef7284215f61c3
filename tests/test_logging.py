import json
import logging

from perf_review.core.logging import CustomJsonFormatter, request_id_var


def _record(message="Review session 1 opened"):
    return logging.LogRecord("perf_review.services", logging.WARNING, __file__, 1, message, None, None)


def test_json_log_carries_request_id_and_level():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    token = request_id_var.set("req-42")
    try:
        payload = json.loads(formatter.format(_record()))
    finally:
        request_id_var.reset(token)

    assert payload["request_id"] == "req-42"
    assert payload["level"] == "WARNING"
    assert payload["name"] == "perf_review.services"
    assert payload["message"] == "Review session 1 opened"
    assert payload["timestamp"]


def test_json_log_without_request_context():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(message)s")
    payload = json.loads(formatter.format(_record()))
    assert "request_id" not in payload
