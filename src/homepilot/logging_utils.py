"""JSON-lines logging for the engine, recovery and generation layers.

Loggers write one JSON object per record to stderr so stdout stays free for
command output. Pass structured fields with ``extra={"context": {...}}``.
The level comes from ``HOMEPILOT_LOG_LEVEL`` (default ``INFO``).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

LOG_LEVEL_ENV = "HOMEPILOT_LOG_LEVEL"


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload["context"] = ctx
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _level_from_env() -> str:
    return os.environ.get(LOG_LEVEL_ENV, "INFO").strip().upper() or "INFO"


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, attaching the JSON stderr handler once."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(_level_from_env())
        logger.propagate = False
    return logger
