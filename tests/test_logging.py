import json
import logging
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from tasktimer.core.config import settings
from tasktimer.core.logging import JsonLogFormatter, configure_logging
from tasktimer.middlewares import principal_ctx_var, request_id_ctx_var


def _record(message, **extra_data):
    record = logging.LogRecord("tasktimer.test", logging.INFO, __file__, 1, message, None, None)
    if extra_data:
        record.extra_data = extra_data
    return record


def test_formatter_emits_one_json_object_with_context():
    request_token = request_id_ctx_var.set("req-42")
    principal_token = principal_ctx_var.set("user:abc")
    try:
        line = JsonLogFormatter().format(_record("timer.started", task_id="t-1", duration=5))
    finally:
        request_id_ctx_var.reset(request_token)
        principal_ctx_var.reset(principal_token)

    payload = json.loads(line)
    assert payload["message"] == "timer.started"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "tasktimer.test"
    assert payload["request_id"] == "req-42"
    assert payload["principal"] == "user:abc"
    assert payload["task_id"] == "t-1"
    assert payload["duration"] == 5
    assert payload["timestamp"].endswith("Z")


def test_formatter_omits_missing_context():
    payload = json.loads(JsonLogFormatter().format(_record("app.started")))

    assert "request_id" not in payload
    assert "principal" not in payload


def test_event_fields_do_not_override_request_context():
    token = request_id_ctx_var.set("req-7")
    try:
        payload = json.loads(JsonLogFormatter().format(_record("task.created", request_id="spoofed", task_id="t-9")))
    finally:
        request_id_ctx_var.reset(token)

    assert payload["request_id"] == "req-7"
    assert payload["task_id"] == "t-9"


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    access = logging.getLogger("uvicorn.access")
    handlers, level, access_level = list(root.handlers), root.level, access.level
    try:
        yield root
    finally:
        root.handlers = handlers
        root.setLevel(level)
        access.setLevel(access_level)


def test_configure_logging_installs_one_handler_at_settings_level(root_logger, monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "debug")

    first = configure_logging()
    second = configure_logging("warning")

    assert first is second
    assert [handler for handler in root_logger.handlers if handler is first] == [first]
    assert isinstance(first.formatter, JsonLogFormatter)
    assert root_logger.level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.WARNING

    configure_logging()
    assert root_logger.level == logging.DEBUG
