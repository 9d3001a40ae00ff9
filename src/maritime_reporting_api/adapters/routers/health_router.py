# src/maritime_reporting_api/adapters/routers/health_router.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    Expose liveness and readiness signals suitable for container orchestrators
    and load balancers.

Design:
    * Probes are injected; a provider instance (`probe_provider`) is the DI
      token so tests can override it by identity.
    * Probes run concurrently; latencies are recorded to Prometheus.
    * `/ready` is canonical; `/readiness` is an alias hidden from OpenAPI.
"""

from __future__ import annotations

import asyncio
import typing as t
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Annotated, Protocol

from fastapi import APIRouter, Depends, Response, status
from pydantic import Field

from maritime_reporting_api.adapters.dependencies.health_probe import build_health_probe
from maritime_reporting_api.adapters.schemas.http.base import BaseHTTPSchema
from maritime_reporting_api.infrastructure.logging.logger import get_json_logger
from maritime_reporting_api.infrastructure.observability.metrics import (
    get_readyz_db_latency_seconds,
    get_readyz_redis_latency_seconds,
)

logger = get_json_logger(__name__)
router = APIRouter()


class HealthState(str, Enum):
    """Overall service health classification."""

    OK = "ok"
    DEGRADED = "degraded"


class CheckResult(BaseHTTPSchema):
    """Result of a single dependency check."""

    name: str = Field(..., examples=["db", "redis"])
    status: t.Literal["ok", "down"]
    detail: str | None = None
    duration_ms: float


class ReadinessResponse(BaseHTTPSchema):
    """Aggregated readiness response."""

    status: HealthState
    checks: list[CheckResult] = Field(default_factory=list)


class LivenessResponse(BaseHTTPSchema):
    """Liveness response indicating the process is running."""

    status: t.Literal["ok"] = "ok"


class HealthProbe(Protocol):
    """Minimal, non-destructive dependency checks returning ``(is_ok, detail)``."""

    async def db(self) -> tuple[bool, str | None]: ...

    async def redis(self) -> tuple[bool, str | None]: ...


class ProbeProvider:
    """Dependency token object for readiness routes."""

    def __call__(self) -> HealthProbe:
        return build_health_probe()


probe_provider = ProbeProvider()


@router.get(
    "/z",
    summary="Liveness",
    operation_id="health_liveness",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
)
async def liveness() -> LivenessResponse:
    """Return a fast liveness signal (no external I/O)."""
    return LivenessResponse()


async def _readiness_impl(response: Response, probe: HealthProbe) -> ReadinessResponse:
    """Run the checks concurrently; HTTP 503 unless every check is ok."""
    loop = asyncio.get_running_loop()

    async def _time(
        name: str,
        fn: Callable[[], Awaitable[tuple[bool, str | None]]],
        observe_seconds: Callable[[float], None],
    ) -> CheckResult:
        start = loop.time()
        ok, detail = await fn()
        duration_ms = (loop.time() - start) * 1000.0
        observe_seconds(duration_ms / 1000.0)
        return CheckResult(
            name=name,
            status="ok" if ok else "down",
            detail=detail,
            duration_ms=duration_ms,
        )

    results = await asyncio.gather(
        _time("db", probe.db, get_readyz_db_latency_seconds().observe),
        _time("redis", probe.redis, get_readyz_redis_latency_seconds().observe),
    )

    all_ok = all(r.status == "ok" for r in results)
    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    payload = ReadinessResponse(
        status=HealthState.OK if all_ok else HealthState.DEGRADED,
        checks=list(results),
    )
    logger.info(
        "readiness_probe",
        extra={
            "overall": payload.status,
            "checks": [r.model_dump_http() for r in payload.checks],
        },
    )
    return payload


@router.get(
    "/ready",
    summary="Readiness",
    operation_id="health_readiness",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service degraded", "model": ReadinessResponse}},
)
async def readiness(
    response: Response,
    probe: Annotated[HealthProbe, Depends(probe_provider, use_cache=False)],
) -> ReadinessResponse:
    """Canonical readiness endpoint (published in OpenAPI)."""
    return await _readiness_impl(response, probe)


@router.get("/readiness", include_in_schema=False)
async def readiness_alias(
    response: Response,
    probe: Annotated[HealthProbe, Depends(probe_provider, use_cache=False)],
) -> ReadinessResponse:
    """Alias of `/ready`."""
    return await _readiness_impl(response, probe)
