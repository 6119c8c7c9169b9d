"""Diagnostic logging configuration.

Every diagnostic line goes to stderr; stdout is reserved for the
Code Quality report. Plain text by default, JSON lines with
``LOG_FORMAT=json``:

    {"ts": "2024-05-10T12:00:00+00:00", "level": "INFO", "logger": "codequality.services.analysis_service", "msg": "Running Psalm..."}
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # Stage name attached via extra={}
        if hasattr(record, "stage"):
            payload["stage"] = record.stage

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def level_for_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 1) -> None:
    """Configure the root logger to write diagnostics to stderr.

    The level follows ``verbosity`` unless the ``LOG_LEVEL`` env var is set.
    """
    level = level_for_verbosity(verbosity)
    level_name = os.getenv("LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), level)

    handler = logging.StreamHandler(sys.stderr)
    if os.getenv("LOG_FORMAT", "text").lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.setLevel(level)

    root.handlers.clear()
    root.addHandler(handler)
