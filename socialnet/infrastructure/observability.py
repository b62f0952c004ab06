"""Structured Logging — JSON lines for production, readable lines for development.

Invariants:
    - Every JSON line has timestamp (UTC, ISO-8601), level, logger and message
    - Only whitelisted extra keys are emitted; secrets never travel through `extra`
    - setup_logging is idempotent: calling it again replaces, never duplicates, its handler

Design Decisions:
    - Stdlib logging with a small formatter instead of a logging library
    - The SQLAlchemy engine logger is held at WARNING unless the app runs at DEBUG
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "request_id", "user_id", "entity_type", "entity_key",
    "applied", "error_code", "path",
)

_HANDLER_NAME = "socialnet"


def _extras(record: logging.LogRecord) -> dict:
    found = {}
    for key in EXTRA_FIELDS:
        value = getattr(record, key, None)
        if value is None:
            continue
        found[key] = value if isinstance(value, (bool, int, float)) else str(value)
    return found


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Plain text with the structured extras appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " [" + " ".join(f"{k}={v}" for k, v in extras.items()) + "]"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else ConsoleFormatter())
    root.addHandler(handler)

    resolved = logging.getLevelName(level.upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING,
    )
