# src/maritime_reporting_api/dependencies/core/bootstrap.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (logging, DB, Redis).

This module owns the lifecycle of shared infrastructure used by the FastAPI
app. Configuration is read from Settings and all heavy lifting is delegated
to the infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields a simple state object with the resolved Settings.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from maritime_reporting_api.config.settings import Settings, get_settings, is_test_mode
from maritime_reporting_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    redis_enabled: bool


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and teardown shared infrastructure.

    Responsibilities:
        * Load application settings and apply the configured log level.
        * Initialize DB engine/sessionmaker.
        * Initialize the Redis client unless the in-process cache is selected.
        * Ensure all of the above are shut down on exit, even on error.

    Args:
        app: FastAPI application instance.

    Yields:
        BootstrapState: Resolved settings.
    """
    settings: Settings = get_settings()
    configure_root_logging(settings.log_level)
    logger.info("bootstrap.start", extra={"service": settings.service_name})

    # Imported here so tests can monkeypatch their functions.
    import maritime_reporting_api.infrastructure.caching.redis_client as redis_client
    import maritime_reporting_api.infrastructure.database.session as db_session

    db_session.init_engine_and_sessionmaker(settings)
    redis_enabled = not is_test_mode()
    if redis_enabled:
        redis_client.init_redis(settings)

    state = BootstrapState(settings=settings, redis_enabled=redis_enabled)
    try:
        yield state
    finally:
        if redis_enabled:
            try:
                await redis_client.close_redis()
            except Exception:
                logger.exception("bootstrap.redis_close_failed")

        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")
