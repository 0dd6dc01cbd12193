"""JSON log lines for the task timer service.

``configure_logging`` is safe to call more than once: it installs a single
stream handler on the root logger and only adjusts the level on later calls.
Uvicorn's own access log is silenced because ``RequestIdMiddleware`` already
writes ``request.completed`` with the request id and principal attached.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Mapping, Optional

from ..middlewares import principal_ctx_var, request_id_ctx_var
from .config import settings

_HANDLER_NAME = "tasktimer-json"
_QUIET_LOGGERS = ("uvicorn.access",)


class JsonLogFormatter(logging.Formatter):
    """Render log records as JSON for easier ingestion."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = request_id_ctx_var.get()
        if request_id:
            payload["request_id"] = request_id
        principal = principal_ctx_var.get()
        if principal:
            payload["principal"] = principal
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            # Context fields win over same-named event fields.
            payload.update({key: value for key, value in extra.items() if key not in payload})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def _json_handler(root: logging.Logger) -> Optional[logging.Handler]:
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return handler
    return None


def configure_logging(level: Optional[str] = None) -> logging.Handler:
    """Route every log record through one JSON handler at ``level``.

    ``level`` defaults to ``settings.LOG_LEVEL``. Returns the installed handler.
    """

    root = logging.getLogger()
    handler = _json_handler(root)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(JsonLogFormatter())
        root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
