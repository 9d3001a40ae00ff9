# tests/integration/routers/test_health_router.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI

from maritime_reporting_api.adapters.routers.health_router import probe_provider


class _StubProbe:
    def __init__(self, *, db_ok: bool, redis_ok: bool) -> None:
        self._db_ok = db_ok
        self._redis_ok = redis_ok

    async def db(self) -> tuple[bool, str | None]:
        return self._db_ok, None if self._db_ok else "connection refused"

    async def redis(self) -> tuple[bool, str | None]:
        return self._redis_ok, None if self._redis_ok else "timeout"


@pytest.mark.anyio
async def test_liveness(client: httpx.AsyncClient) -> None:
    resp = await client.get("/v1/health/z")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_readiness_ok(app: FastAPI, client: httpx.AsyncClient) -> None:
    app.dependency_overrides[probe_provider] = lambda: _StubProbe(db_ok=True, redis_ok=True)

    resp = await client.get("/v1/health/ready")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert {c["name"]: c["status"] for c in body["checks"]} == {"db": "ok", "redis": "ok"}


@pytest.mark.anyio
@pytest.mark.parametrize("path", ["/v1/health/ready", "/v1/health/readiness"])
async def test_readiness_degraded_returns_503(
    app: FastAPI, client: httpx.AsyncClient, path: str
) -> None:
    app.dependency_overrides[probe_provider] = lambda: _StubProbe(db_ok=True, redis_ok=False)

    resp = await client.get(path)

    assert resp.status_code == 503
    body = resp.json()
    assert body["status"] == "degraded"
    redis = next(c for c in body["checks"] if c["name"] == "redis")
    assert redis == {
        "name": "redis",
        "status": "down",
        "detail": "timeout",
        "duration_ms": redis["duration_ms"],
    }
