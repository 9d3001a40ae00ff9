# src/maritime_reporting_api/adapters/routers/metrics_router.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

The lazily created readiness and workflow collectors are touched before the
first scrape so their series exist on a cold start.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from maritime_reporting_api.infrastructure.logging.logger import get_json_logger
from maritime_reporting_api.infrastructure.middleware.request_metrics import (
    get_http_server_request_duration_seconds,
)
from maritime_reporting_api.infrastructure.observability.metrics import (
    get_readyz_db_latency_seconds,
    get_readyz_redis_latency_seconds,
    get_report_number_retries_total,
    get_report_transitions_total,
)

logger = get_json_logger(__name__)
router = APIRouter()

_WARM: tuple[tuple[str, Callable[[], Any]], ...] = (
    ("readyz_db_latency_seconds", get_readyz_db_latency_seconds),
    ("readyz_redis_latency_seconds", get_readyz_redis_latency_seconds),
    ("http_server_request_duration_seconds", get_http_server_request_duration_seconds),
    ("reporting_transitions_total", get_report_transitions_total),
    ("reporting_number_allocation_retries_total", get_report_number_retries_total),
)


def _warm_collectors() -> None:
    for name, getter in _WARM:
        try:
            getter()
        except ValueError as exc:  # pragma: no cover
            logger.debug("metrics_router.warm_failed", extra={"metric": name, "error": str(exc)})


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics in text format."""
    _warm_collectors()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
