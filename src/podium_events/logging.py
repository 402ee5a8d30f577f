"""Structured JSON logging helpers for the podium emitter.

Registry and dispatch records carry the emitter ``action`` (``event_registered``,
``listener_added`` ...), the ``event_name`` it applies to, the handler count
after the change and any extra ``details``.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging import Logger
from typing import Any, Callable, Dict

_LOGGER_NAME = "podium_events"
_RECORD_FIELDS = ("action", "event_name", "handlers", "details")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        payload: Dict[str, Any] = {
            "ts": ts,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in _RECORD_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        # data and listeners are arbitrary objects
        return json.dumps(payload, ensure_ascii=False, default=repr)


def get_logger(name: str | None = None) -> Logger:
    """Return a module level logger configured for structured JSON output."""

    logger_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        level = os.environ.get("LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
    return logger


def describe_listener(listener: Callable[..., Any]) -> str:
    """Return a readable name for a subscribed callable."""

    return getattr(listener, "__qualname__", None) or repr(listener)


def log_event(
    logger: Logger,
    action: str,
    event_name: object,
    *,
    handlers: int | None = None,
    level: int = logging.DEBUG,
    **details: Any,
) -> None:
    """Log an emitter registry or dispatch action on ``event_name``."""

    extra = {
        "action": action,
        "event_name": event_name,
        "handlers": handlers,
        "details": details or None,
    }
    logger.log(level, "%s event=%s", action, event_name, extra=extra)
