"""
Structured logging setup for the proxy.

Uses LOG_LEVEL from settings (ghcr_proxy.core.config) and configures a JSON
formatter on the root logger. Intended to be called once during application startup.

Credentials never belong in a log line: `extra` keys that look like secrets
(token, password, authorization) are replaced with "***" before serialization.

Usage:
    from ghcr_proxy.core.logging import init_logging, get_logger
    init_logging()
    log = get_logger(__name__)
    log.info("catalog fetched", extra={"username": "octocat", "count": 3})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ghcr_proxy.core.config import get_settings

__all__ = ["JsonFormatter", "init_logging", "get_logger", "REDACTED"]

REDACTED = "***"

# LogRecord attributes that are never copied into the payload as extras
_RESERVED = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)

_SECRET_MARKERS = ("token", "password", "secret", "authorization")


def _is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


class JsonFormatter(logging.Formatter):
    """JSON log formatter with stable keys and secret redaction for extras."""

    default_time_format = "%Y-%m-%dT%H:%M:%S%z"

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (shadow builtin)
        payload: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                self.default_time_format
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED or key in payload:
                continue
            if _is_secret_key(key):
                payload[key] = REDACTED
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


_configured: bool = False


def init_logging(level: Optional[str] = None) -> None:
    """
    Install the JSON handler on the root logger.
    Idempotent: safe to call multiple times.
    """
    global _configured
    if _configured:
        return

    name = (level or get_settings().log_level or "INFO").upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    root = logging.getLogger()
    root.setLevel(resolved)

    # Remove existing handlers to avoid duplicate logs under uvicorn reload / tests
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger; handlers come from init_logging()."""
    return logging.getLogger(name if name else "ghcr_proxy")
