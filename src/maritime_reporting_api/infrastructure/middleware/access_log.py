# src/maritime_reporting_api/infrastructure/middleware/access_log.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Access Log Middleware.

Summary:
    Emits one structured access record per request. Records for report and
    amendment routes carry the ids taken from the path, so a report's HTTP
    history can be joined with its workflow audit trail.

Fields:
    evt: Literal "access" marker.
    method: HTTP method.
    route: Matched route template (e.g. ``/v1/reports/{report_id}/submit``),
        or the raw path when no route matched.
    path: URL path.
    status: HTTP status code (500 if the handler raised).
    elapsed_ms: Latency in milliseconds, two decimals.
    client_ip: Best-effort client IP.
    report_id / amendment_id: Present only when the route declares them.
    ok: False if the downstream handler raised.

    ``request_id`` and ``actor`` come from the log context bound by
    :class:`RequestIdMiddleware`.

Levels:
    Probe and scrape traffic (``/v1/health``, ``/metrics``) logs at DEBUG,
    server errors at WARNING, everything else at INFO.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from maritime_reporting_api.infrastructure.logging.logger import get_json_logger

_logger: logging.Logger = get_json_logger(__name__)

_QUIET_PREFIXES: Final[tuple[str, ...]] = ("/v1/health", "/metrics")
_ID_PARAMS: Final[tuple[str, ...]] = ("report_id", "amendment_id")


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _level_for(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.WARNING
    if path.startswith(_QUIET_PREFIXES):
        return logging.DEBUG
    return logging.INFO


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured access logging middleware."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        t0 = time.perf_counter()
        response: Response | None = None
        ok = False
        try:
            response = await call_next(request)
            ok = True
            return response
        finally:
            status_code = response.status_code if response is not None else 500
            record: dict[str, Any] = {
                "evt": "access",
                "method": request.method,
                "route": _route_template(request),
                "path": request.url.path,
                "status": status_code,
                "elapsed_ms": round((time.perf_counter() - t0) * 1000.0, 2),
                "client_ip": request.client.host if request.client else None,
                "ok": ok,
            }
            path_params = request.scope.get("path_params") or {}
            for name in _ID_PARAMS:
                if name in path_params:
                    record[name] = path_params[name]
            _logger.log(_level_for(request.url.path, status_code), "access_log", extra=record)
