"""Structured Logging — JSON formatter and setup for retention diagnostics.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Decision fields (node_name, trigger, skip_reason, minutes) surfaced when present
    - JSON format in production, human-readable in development

Design Decisions:
    - Decision fields ride on logging `extra`: termination lines stay greppable
      text while log shippers index node_name and trigger
    - setup_logging_from_settings is the host's single startup call; LOG_LEVEL
      and LOG_FORMAT come from Settings
"""

import logging
import json
from datetime import datetime, timezone

from node_retention.config import Settings, get_settings

_EXTRA_FIELDS = (
    "node_name", "decision", "trigger", "skip_reason",
    "idle_minutes", "cycle_remaining_minutes",
    "error_code", "error_category", "field_name",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging. Returns the installed handler."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def setup_logging_from_settings(settings: Settings | None = None) -> logging.Handler:
    """Configure root logging from LOG_LEVEL / LOG_FORMAT."""
    settings = settings or get_settings()
    return setup_logging(settings.log_level, settings.log_format)
