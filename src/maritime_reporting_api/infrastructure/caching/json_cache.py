# src/maritime_reporting_api/infrastructure/caching/json_cache.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""JSON caches implementing the application CachePort.

Synopsis:
    * :class:`RedisJsonCache`: namespaced JSON get/set/delete with TTL on the
      shared Redis client.
    * :class:`InMemoryJsonCache`: process-local equivalent used in test mode
      so the suite never needs Redis.

Design:
    * Pure JSON (utf-8) serialization; no pickle.
    * Keys are ``{namespace}:{key}``; the namespace owns service + version:
      ``maritime:reporting:v1``.
    * Cache metrics are recorded in ``finally`` blocks and never raise.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Mapping
from contextlib import suppress
from typing import Any, Final

from maritime_reporting_api.application.interfaces.cache_port import CachePort
from maritime_reporting_api.infrastructure.caching.redis_client import get_redis_client
from maritime_reporting_api.infrastructure.observability.metrics import (
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
)

__all__ = ["DEFAULT_NAMESPACE", "RedisJsonCache", "InMemoryJsonCache"]

DEFAULT_NAMESPACE: Final[str] = "maritime:reporting:v1"


def _record(operation: str, namespace: str, hit: str, started: float) -> None:
    with suppress(Exception):
        get_cache_operation_duration_seconds().labels(
            operation=operation, namespace=namespace, hit=hit
        ).observe(time.perf_counter() - started)
        get_cache_operations_total().labels(
            operation=operation, namespace=namespace, hit=hit
        ).inc()


class RedisJsonCache(CachePort):
    """Redis-backed implementation of the CachePort Protocol."""

    def __init__(self, *, namespace: str = DEFAULT_NAMESPACE) -> None:
        """Initialize the cache adapter.

        Args:
            namespace: Prefix applied to all keys to avoid collisions.
        """
        self._ns = namespace

    def _k(self, key: str) -> str:
        return f"{self._ns}:{key.lstrip(':')}"

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        """Get a JSON-serialized value by key.

        Args:
            key: Unqualified cache key.

        Returns:
            Deserialized mapping if present, else None.
        """
        started = time.perf_counter()
        hit = "false"
        try:
            raw = await get_redis_client().get(self._k(key))
            if raw is None:
                return None
            hit = "true"
            return json.loads(raw)
        finally:
            _record("get_json", self._ns, hit, started)

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        """Set a JSON-serialized value with TTL; ``ttl <= 0`` skips the write."""
        started = time.perf_counter()
        try:
            if ttl <= 0:
                return
            await get_redis_client().set(self._k(key), json.dumps(value, default=str), ex=ttl)
        finally:
            _record("set_json", self._ns, "n/a", started)

    async def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        started = time.perf_counter()
        try:
            await get_redis_client().delete(self._k(key))
        finally:
            _record("delete", self._ns, "n/a", started)


class InMemoryJsonCache(CachePort):
    """A small, concurrency-safe in-memory cache for dev/test."""

    def __init__(self, *, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._ns = namespace
        self._store: dict[str, tuple[float, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def get_json(self, key: str) -> Mapping[str, Any] | None:
        """Return a JSON blob by key if present and not expired."""
        started = time.perf_counter()
        hit = "false"
        try:
            async with self._lock:
                entry = self._store.get(key)
                if entry is None:
                    return None
                expires_at, value = entry
                if expires_at <= time.monotonic():
                    self._store.pop(key, None)
                    return None
                hit = "true"
                return json.loads(json.dumps(value))
        finally:
            _record("get_json", self._ns, hit, started)

    async def set_json(self, key: str, value: Mapping[str, Any], *, ttl: int) -> None:
        """Store a JSON round-tripped copy under the given key."""
        if ttl <= 0:
            return
        snapshot = json.loads(json.dumps(value, default=str))
        async with self._lock:
            self._store[key] = (time.monotonic() + float(ttl), snapshot)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._store.pop(key, None)
