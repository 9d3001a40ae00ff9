# src/maritime_reporting_api/infrastructure/middleware/request_metrics.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Request latency middleware (Prometheus).

Measures server-side request latency and records it to the Prometheus
histogram ``http_server_request_duration_seconds``.

Design:
    * Labels: (method, handler, status). Handler prefers the templated route
      path so report ids do not explode label cardinality.
    * Errors in metrics code never impact request flow.

Usage:
    app.add_middleware(RequestLatencyMiddleware)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from maritime_reporting_api.infrastructure.observability.metrics import _get_or_create_hist

if TYPE_CHECKING:
    from prometheus_client import Histogram

__all__ = ["RequestLatencyMiddleware", "get_http_server_request_duration_seconds"]

logger = logging.getLogger(__name__)

_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


def get_http_server_request_duration_seconds() -> Histogram:
    """Return the canonical server request-duration histogram.

    Labels:
        method: Uppercased HTTP method.
        handler: Templated route or raw path.
        status: Response code as string.

    Returns:
        Histogram: Registry-aware histogram bound to the active registry.
    """
    return _get_or_create_hist(
        "http_server_request_duration_seconds",
        "Request duration (seconds), server-side histogram.",
        buckets=_BUCKETS,
        labelnames=("method", "handler", "status"),
    )


class RequestLatencyMiddleware(BaseHTTPMiddleware):
    """Record request latency to Prometheus."""

    def __init__(self, app: Any) -> None:
        """Initialize middleware and bind the collector."""
        super().__init__(app)
        self._prom_hist = get_http_server_request_duration_seconds()

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Measure request latency and record it."""
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start
            route_obj = request.scope.get("route")
            handler = (
                getattr(route_obj, "path_format", None)
                or getattr(route_obj, "path", None)
                or request.url.path
            )
            try:
                self._prom_hist.labels(request.method.upper(), handler, str(status_code)).observe(
                    duration
                )
            except Exception:
                logger.debug("prom.histogram_observe_failed", exc_info=True)
