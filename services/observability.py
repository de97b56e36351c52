"""Structured logging helpers with per-request correlation ids."""

from __future__ import annotations

import json
import logging
import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

_LOGGER_NAME = "contact_forms"
_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_request_id(now_ts: float | None = None) -> str:
    """Build an opaque correlation id: millisecond timestamp plus a random suffix."""
    now_value = now_ts if now_ts is not None else time.time()
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"req_{int(now_value * 1000)}_{suffix}"


@dataclass(frozen=True)
class LogContext:
    """Context values merged into every structured log event."""

    request_id: str | None = None
    endpoint: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)


class StructuredLogger:
    """Emit JSON logs with a stable event shape.

    Callers pass only non-sensitive fields: status codes, reason tags,
    field names. Submitted values, tokens and addresses never belong here.
    """

    def __init__(self, name: str = _LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)
        self._logger.setLevel(logging.INFO)

    def info(self, event: str, *, context: LogContext | None = None, **fields: Any) -> None:
        self._emit(logging.INFO, event, context=context, fields=fields)

    def warning(self, event: str, *, context: LogContext | None = None, **fields: Any) -> None:
        self._emit(logging.WARNING, event, context=context, fields=fields)

    def error(self, event: str, *, context: LogContext | None = None, **fields: Any) -> None:
        self._emit(logging.ERROR, event, context=context, fields=fields)

    def _emit(
        self,
        level: int,
        event: str,
        *,
        context: LogContext | None,
        fields: dict[str, Any],
    ) -> None:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": logging.getLevelName(level).lower(),
            "event": event,
        }
        if context is not None:
            if context.request_id:
                payload["request_id"] = context.request_id
            if context.endpoint:
                payload["endpoint"] = context.endpoint
            payload.update(context.extras)
        payload.update(fields)
        self._logger.log(level, json.dumps(payload, sort_keys=True, default=str))


_default_logger: StructuredLogger | None = None


def get_logger() -> StructuredLogger:
    global _default_logger
    if _default_logger is None:
        _default_logger = StructuredLogger()
    return _default_logger
