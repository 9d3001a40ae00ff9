# src/maritime_reporting_api/infrastructure/middleware/request_id.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Request correlation middleware.

Binds the correlation id and the acting user to the request so every log line
written while serving it (use cases, repositories, retries) carries both.

Contract:
    * Reads ``X-Request-ID`` (optional) and ``X-User`` (optional).
    * Writes ``X-Request-ID`` on every response.
    * Stores ``request.state.request_id`` and ``request.state.actor``.

Error envelopes echo the correlation id as ``trace_id``.
"""

from __future__ import annotations

import re
import uuid
from typing import Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from maritime_reporting_api.infrastructure.logging.logger import set_request_context

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
ACTOR_HEADER: Final[str] = "X-User"
ANONYMOUS_ACTOR: Final[str] = "Unknown"

_SAFE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9\-_.:@]{1,128}$")
_MAX_ACTOR_LEN: Final[int] = 100


def coerce_request_id(raw: str | None) -> str:
    """Return the caller's request id when it is safe to echo, else a new UUID4."""
    if raw and _SAFE_RE.match(raw):
        return raw
    return str(uuid.uuid4())


def actor_from_header(raw: str | None) -> str:
    """Normalise ``X-User`` into the name written to logs.

    Blank or missing values map to ``Unknown``; control characters are dropped
    and the result is cut to the audit column width.
    """
    if not raw:
        return ANONYMOUS_ACTOR
    cleaned = "".join(ch for ch in raw if ch.isprintable()).strip()
    return cleaned[:_MAX_ACTOR_LEN] or ANONYMOUS_ACTOR


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach correlation id and actor to the request, the log context and the response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        req_id = coerce_request_id(request.headers.get(REQUEST_ID_HEADER))
        actor = actor_from_header(request.headers.get(ACTOR_HEADER))

        request.state.request_id = req_id
        request.state.actor = actor
        set_request_context(request_id=req_id, trace_id=req_id, actor=actor)

        response: Response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, req_id)
        return response
