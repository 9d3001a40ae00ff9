# src/maritime_reporting_api/infrastructure/health/probe.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Readiness probes for Postgres and Redis.

Design:
    * Each probe returns ``(success, detail)`` and never raises.
    * Latency is observed by the readiness router, which owns the histograms.

Dependencies:
    - SQLAlchemy async_sessionmaker for the ``SELECT 1`` check
    - Redis client typed via the RedisClient Protocol
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maritime_reporting_api.infrastructure.caching.redis_client import RedisClient

__all__ = ["DbRedisProbe"]


class DbRedisProbe:
    """Readiness probe for Postgres and Redis."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        redis: RedisClient | None,
    ) -> None:
        """Initialize the probe.

        Args:
            session_factory: Async SQLAlchemy session factory bound to the DB.
            redis: Redis client, or ``None`` when the service runs with the
                in-process cache.
        """
        self._session_factory = session_factory
        self._redis = redis

    async def db(self) -> tuple[bool, str | None]:
        """Probe Postgres using a trivial ``SELECT 1``."""
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            return False, str(exc)
        return True, None

    async def redis(self) -> tuple[bool, str | None]:
        """Probe Redis using ``PING``."""
        if self._redis is None:
            return True, "in-process cache"
        try:
            pong = await self._redis.ping()
        except Exception as exc:
            return False, str(exc)
        if not pong:
            return False, "unexpected PONG value"
        return True, None
