# src/maritime_reporting_api/infrastructure/caching/redis_client.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Process-wide async Redis connection.

Redis backs two things only: the report-type catalog cache and the readiness
probe. Neither is on the write path of a report, so a Redis outage degrades
readiness and makes catalog lookups fall through to Postgres, nothing more.

The client is created once in the application lifespan (``init_redis``) and
closed on shutdown; ``get_redis_client`` creates it lazily for callers that
run outside the lifespan, such as scripts.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import redis.asyncio as aioredis

from maritime_reporting_api.config.settings import Settings, get_settings

__all__ = [
    "RedisClient",
    "init_redis",
    "close_redis",
    "get_redis_client",
]


@runtime_checkable
class RedisClient(Protocol):
    """The subset of ``redis.asyncio.Redis`` the service calls."""

    async def ping(self) -> Any: ...
    async def get(self, key: str) -> Any: ...
    async def set(self, key: str, value: Any, *, ex: int | None = None) -> Any: ...
    async def delete(self, *keys: str) -> Any: ...
    async def aclose(self) -> None: ...


_client: RedisClient | None = None


def init_redis(settings: Settings) -> RedisClient:
    """Create the shared client if it does not exist yet and return it."""
    global _client
    if _client is None:
        _client = aioredis.Redis.from_url(
            str(settings.redis_url),
            encoding="utf-8",
            decode_responses=True,
            health_check_interval=settings.redis_health_check_interval_s,
            socket_timeout=settings.redis_socket_timeout_s,
            socket_connect_timeout=settings.redis_socket_connect_timeout_s,
        )
    return _client


async def close_redis() -> None:
    """Close and forget the shared client."""
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()


def get_redis_client() -> RedisClient:
    """Return the shared client, creating it from settings on first use."""
    return _client if _client is not None else init_redis(get_settings())
