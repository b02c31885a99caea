"""Structured Logging — JSON log lines that carry the record a write concerned.

Invariants:
    - Every line has timestamp (the record's creation time, UTC), level, logger, message
    - OCC keys (entity, record_id, expected_version) plus error_code and path are
      surfaced when present and never emitted as null
    - setup_logging is idempotent: calling it again replaces its own handler

Design Decisions:
    - occ_extra builds the OCC keys in one place so every layer logs them the same way
    - Driver and access-log chatter pinned to WARNING: conflicts must stand out
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any

_EXTRA_KEYS = (
    "entity", "record_id", "expected_version", "error_code", "path",
)

_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def occ_extra(
    entity: Any, record_id: Any, expected_version: int | None = None,
) -> dict[str, Any]:
    """`extra=` mapping for a log call about one record."""
    extra = {
        "entity": getattr(entity, "value", entity),
        "record_id": str(record_id),
    }
    if expected_version is not None:
        extra["expected_version"] = expected_version
    return extra


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(
            (key, record.__dict__[key])
            for key in _EXTRA_KEYS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class _ClassTrackHandler(logging.StreamHandler):
    """Marker type so setup_logging can find and replace its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the root handler (JSON or text) and return it."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _ClassTrackHandler)]:
        root.removeHandler(existing)

    handler = _ClassTrackHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
