# src/maritime_reporting_api/infrastructure/logging/logger.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Structured JSON logging utilities.

This module exposes an idempotent root configurator and a per-module logger
factory that produce JSON logs suitable for shipboard log shipping and
shore-side ingestion.

Features:
    * Stable keys: ``ts``, ``level``, ``logger``, ``message``.
    * Automatic enrichment with ``request_id``, ``trace_id`` and the acting
      ``actor`` (from ``X-User``) via contextvars.
    * Structured ``extra`` fields merged into the top-level payload.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
    log.info("reports.create.success", extra={"report_number": "NOON-20250110-0001"})
"""

from __future__ import annotations

import json
import logging
import os
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "configure_root_logging",
    "get_json_logger",
    "set_request_context",
    "get_request_id",
    "get_trace_id",
    "get_actor",
]

_REQUEST_ID_ENV_KEY = "REQUEST_ID"

# Standard LogRecord attributes; anything else passed via ``extra=`` is emitted.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime"}
)

_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("reporting_request_id", default=None)
_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("reporting_trace_id", default=None)
_ACTOR_CTX: ContextVar[str | None] = ContextVar("reporting_actor", default=None)


def set_request_context(
    *,
    request_id: str | None = None,
    trace_id: str | None = None,
    actor: str | None = None,
) -> None:
    """Set per-request correlation identifiers on the current context.

    Args:
        request_id: Correlation identifier from ``X-Request-ID``, if any.
        trace_id: Tracing identifier, if any.
        actor: Acting user recorded in the audit trail, if known.

    Notes:
        Only the arguments passed are updated; the others are left
        unchanged, so several middleware layers may call this per request.
    """
    if request_id is not None:
        _REQUEST_ID_CTX.set(request_id)
    if trace_id is not None:
        _TRACE_ID_CTX.set(trace_id)
    if actor is not None:
        _ACTOR_CTX.set(actor)


def get_request_id() -> str | None:
    """Return the current request id from contextvars, if any."""
    return _REQUEST_ID_CTX.get(None)


def get_trace_id() -> str | None:
    """Return the current trace id from contextvars, if any."""
    return _TRACE_ID_CTX.get(None)


def get_actor() -> str | None:
    """Return the acting user bound to the current request, if any."""
    return _ACTOR_CTX.get(None)


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys and structured extras."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON object.

        Args:
            record: Logging record.

        Returns:
            JSON-encoded log line.
        """
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid: str | None = (
            getattr(record, "request_id", None)
            or _REQUEST_ID_CTX.get(None)
            or os.getenv(_REQUEST_ID_ENV_KEY)
        )
        if rid:
            payload["request_id"] = rid

        tid: str | None = getattr(record, "trace_id", None) or _TRACE_ID_CTX.get(None)
        if tid:
            payload["trace_id"] = tid

        actor: str | None = getattr(record, "actor", None) or _ACTOR_CTX.get(None)
        if actor:
            payload["actor"] = actor

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        # Fields passed via ``extra={...}`` land as record attributes.
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRS or key in payload or key.startswith("_"):
                continue
            payload[key] = value

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Initialize the root logger with a JSON stream handler (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    root.setLevel(resolved)

    if root.handlers:
        # Already configured; avoid duplicate handlers on hot reload.
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return a module-specific logger backed by the JSON root handler.

    This does *not* configure the root logger. Call
    :func:`configure_root_logging` once at startup.

    Args:
        name: Logger name, typically ``__name__`` of the caller.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
