"""JSON log output with the request ID on every record.

Call :func:`setup_logging` once at startup.
"""

from __future__ import annotations

import datetime
import json
import logging
import sys
import traceback
from typing import Any

from ai_template_api.middleware.correlation import get_request_id


class CorrelationIdFilter(logging.Filter):
    """Copy the current request ID onto each record as ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class JsonLogFormatter(logging.Formatter):
    """Render a record as one line of JSON.

    Output schema::

        {
            "timestamp": "2025-06-15T12:34:56.789012+00:00",
            "level": "INFO",
            "logger": "ai_template_api.db.repository",
            "message": "Saved feature_example 3f2c...",
            "request_id": "abc123",
            "exception": null
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        exc_text: str | None = None
        if record.exc_info and record.exc_info[0] is not None:
            exc_text = "".join(traceback.format_exception(*record.exc_info))

        payload: dict[str, Any] = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created,
                tz=datetime.UTC,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
            "exception": exc_text,
        }
        return json.dumps(payload, default=str)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Replace the root handlers with a single JSON stdout handler.

    *level* may be a number or a level name such as ``"DEBUG"``; unknown
    names fall back to ``INFO``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonLogFormatter())
    handler.addFilter(CorrelationIdFilter())

    root.addHandler(handler)
