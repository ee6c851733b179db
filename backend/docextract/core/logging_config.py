"""
Central logging configuration.

Goals:
- One shared logging setup for the API and Celery workers.
- JSON lines to stdout, correlated by request_id / task_id / document.
- Document content never reaches the logs: content-bearing extras are
  reduced to their size, any other long string is cut.

Levels come from settings: LOG_LEVEL for everything, EXTRACTION_LOG_LEVEL
for the chatty per-attempt lines under `docextract.extraction`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.config import dictConfig

from docextract.core.config import Settings, settings as default_settings
from docextract.core.request_context import get_context


MAX_EXTRA_CHARS = 200

# extras that may hold recovered or uploaded text
CONTENT_KEYS = frozenset({"text", "candidate", "raw", "source", "payload"})

# LogRecord attributes, never treated as extras
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _loggable(key: str, value):
    if key in CONTENT_KEYS and isinstance(value, (str, bytes)):
        return f"<{len(value)} {'chars' if isinstance(value, str) else 'bytes'}>"
    if isinstance(value, str) and len(value) > MAX_EXTRA_CHARS:
        return value[:MAX_EXTRA_CHARS] + "..."
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)[:MAX_EXTRA_CHARS]
    return value


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        base.update(get_context())

        for k, v in record.__dict__.items():
            if k in _RECORD_ATTRS or k.startswith("_") or k in base:
                continue
            base[k] = _loggable(k, v)

        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False)


def build_logging_config(s: Settings | None = None) -> dict:
    s = s or default_settings
    level = s.LOG_LEVEL.upper()
    extraction_level = (s.EXTRACTION_LOG_LEVEL or s.LOG_LEVEL).upper()
    console = {"level": level, "handlers": ["console"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "docextract.core.logging_config.JsonFormatter"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "docextract.extraction": {"level": extraction_level},
            "uvicorn": dict(console),
            "uvicorn.error": dict(console),
            # the request middleware already logs every call
            "uvicorn.access": {**console, "level": "WARNING"},
            "celery": dict(console),
        },
    }


def configure_logging(s: Settings | None = None) -> None:
    """Call once at process startup (API and Celery worker)."""
    dictConfig(build_logging_config(s))
