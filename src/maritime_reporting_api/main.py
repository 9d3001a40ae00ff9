# src/maritime_reporting_api/main.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and all
    routers. Provides an application factory (`create_app`) and a module-level
    eager app (`app`) for tooling.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan initializes DB/Redis and tears them down safely.
    • Observability:
        - Root JSON logging configured at import time.
        - Request id, access log and latency middleware on every request.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from maritime_reporting_api.adapters.routers.api_router import router as api_router
from maritime_reporting_api.adapters.routers.metrics_router import router as metrics_router
from maritime_reporting_api.config.settings import Settings, get_settings
from maritime_reporting_api.dependencies.core.bootstrap import bootstrap
from maritime_reporting_api.infrastructure.http.errors import (
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from maritime_reporting_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from maritime_reporting_api.infrastructure.middleware.access_log import AccessLogMiddleware
from maritime_reporting_api.infrastructure.middleware.request_id import RequestIdMiddleware
from maritime_reporting_api.infrastructure.middleware.request_metrics import (
    RequestLatencyMiddleware,
)

configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``post__v1_reports_report_id_submit``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and teardown shared infrastructure via the core bootstrap."""
    async with bootstrap(app) as state:
        app.state.settings = state.settings
        yield


def _attach_middlewares(app: FastAPI) -> None:
    """Attach core middleware.

    Starlette runs the last added middleware first, so the request id is
    assigned before the access log and latency middleware see the request.
    """
    app.add_middleware(RequestLatencyMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)


def _attach_cors(app: FastAPI, settings: Settings) -> None:
    """Attach CORS middleware based on settings."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _patch_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing exception handlers."""

    async def _http_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, HTTPException):
            raise exc
        return await handle_http_exception(request, exc)

    async def _validation_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, RequestValidationError):
            raise exc
        return await handle_validation_error(request, exc)

    async def _unhandled_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        return await handle_unhandled_exception(request, exc)

    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings: Settings = get_settings()
    service_name = settings.service_name or "maritime-reporting-api"
    service_version = settings.service_version or "0.0.0"

    app = FastAPI(
        title="Maritime Reporting API",
        version=service_version,
        description="Vessel report lifecycle: drafting, approval, transmission and amendments.",
        lifespan=runtime_lifespan,
        generate_unique_id_function=_stable_operation_id,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )

    _patch_exception_handlers(app)
    _attach_middlewares(app)
    _attach_cors(app, settings)

    app.include_router(api_router)
    app.include_router(metrics_router)

    logger.info(
        "service_startup",
        extra={
            "service": service_name,
            "env": settings.environment.value,
            "version": service_version,
            "status": "starting",
        },
    )
    return app


# Eager app for tools.
app: FastAPI = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "maritime_reporting_api.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8080")),
        reload=True,
    )
