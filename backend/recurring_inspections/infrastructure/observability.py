"""Structured Logging — one JSON object per line for scheduler and generation-tick logs.

Invariants:
    - Every line carries ts, level, logger, msg and service="recurring-inspections"
    - Scheduler extras (schedule_id, scheduled_date, counters, error_code) are emitted
      only when set; UUIDs and dates are rendered as strings, counters stay numeric
    - setup_logging() is idempotent: calling it again replaces its own handler

Design Decisions:
    - stdlib logging + a Formatter subclass: the host application keeps its own handlers,
      this module only adds one
    - Text format for local runs and tests (LOG_FORMAT=text)
"""

import json
import logging
from datetime import date, datetime, timezone

SERVICE_NAME = "recurring-inspections"

EXTRA_FIELDS: tuple[str, ...] = (
    "schedule_id", "inspection_id", "scheduled_date", "error_code",
    "generated_count", "advanced_count", "deactivated_count", "conflict_count",
    "failed_count",
)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _jsonable(value: object) -> object:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value.isoformat() if isinstance(value, date) else str(value)
    return value


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "msg": record.getMessage(),
        }
        entry.update({
            key: _jsonable(record.__dict__[key])
            for key in EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the scheduler's root handler. Returns the installed handler."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if getattr(h, "_recurring_inspections", False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._recurring_inspections = True
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
