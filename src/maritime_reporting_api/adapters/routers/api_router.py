# src/maritime_reporting_api/adapters/routers/api_router.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose and expose the top-level `router` that includes all feature routers.

Responsibilities:
    • Mount health endpoints under `/v1/health`.
    • Mount the report lifecycle under `/v1/reports/...`.
    • Mount the amendment sub-workflow under `/v1/reports/{id}/amendments/...`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from maritime_reporting_api.adapters.routers.amendments_router import router as amendments_router
from maritime_reporting_api.adapters.routers.health_router import router as health_router
from maritime_reporting_api.adapters.routers.reports_router import router as reports_router

router = APIRouter()

# Health endpoints (liveness/readiness) under /v1/health.
router.include_router(health_router, prefix="/v1/health", tags=["Health"])

# Reports – BaseRouter already includes the /v1/reports prefix.
router.include_router(reports_router)

# Amendments share the /v1/reports prefix.
router.include_router(amendments_router)
