"""Structured JSON logging for the wheel service.

Each record becomes one JSON object on stdout so log shippers can parse
``extra`` fields (item ids, rotation, store keys) without regexes.

Usage::

    from backend.logging_config import configure_logging
    configure_logging()
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone

# Fields that engine/request code passes via ``extra={}`` on log calls.
_KNOWN_EXTRA_FIELDS = frozenset(
    {
        "item_id",
        "label",
        "rotation",
        "winning_index",
        "item_count",
        "history_size",
        "store_key",
        "reason",
        "error",
        "request_id",
        "method",
        "path",
        "status_code",
        "duration_ms",
    }
)

_LEVEL_TO_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARNING",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_PLAIN_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"


class JsonLineFormatter(logging.Formatter):
    """Emit one JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "severity": _LEVEL_TO_SEVERITY.get(record.levelno, "DEFAULT"),
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
        }

        for field in _KNOWN_EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        if record.exc_info and record.levelno >= logging.ERROR:
            payload["stack_trace"] = "".join(
                traceback.format_exception(*record.exc_info)
            )

        return json.dumps(payload, default=str)


def configure_logging(log_format: str = "json") -> None:
    """Install the formatter on the root logger.

    Safe to call multiple times; existing handlers are removed first.
    """
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "plain":
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
    else:
        handler.setFormatter(JsonLineFormatter())
    root.addHandler(handler)
