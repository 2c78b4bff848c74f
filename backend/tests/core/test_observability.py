"""Structured Logging — JSON formatter output and idempotent setup.

Tests cover:
    - JSON lines carry level, logger, message and known extras
    - setup_logging called twice installs a single handler
"""

import json
import logging

from tasklist.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "tasklist.services.list_service", logging.INFO, __file__, 1,
        "List created", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    line = JSONFormatter().format(_record(list_id="abc", error_code="NOT_FOUND"))
    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "tasklist.services.list_service"
    assert payload["message"] == "List created"
    assert payload["list_id"] == "abc"
    assert payload["error_code"] == "NOT_FOUND"


def test_json_formatter_skips_absent_extras():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "user_id" not in payload


def test_setup_logging_does_not_stack_handlers():
    before = list(logging.root.handlers)
    level_before = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        ours = [
            h for h in logging.root.handlers
            if getattr(h, "_tasklist_handler", False)
        ]
        assert len(ours) == 1
        assert logging.root.level == logging.INFO
    finally:
        for handler in list(logging.root.handlers):
            if handler not in before:
                logging.root.removeHandler(handler)
        logging.root.setLevel(level_before)
