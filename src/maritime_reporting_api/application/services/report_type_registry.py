# src/maritime_reporting_api/application/services/report_type_registry.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report-type registry with a TTL cache.

Purpose:
    Read-mostly access to report-type metadata. The full catalog is loaded
    from the repository on a cache miss and stored as one JSON document;
    lookups by code or id and the active-only listing are served from it.

Layer:
    application/services

Notes:
    * The cache is injected (Redis in deployments, in-process in tests).
    * Workflow operations never write to the cache; only a miss or an
      explicit :meth:`ReportTypeRegistry.invalidate` changes it.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Final

from maritime_reporting_api.application.interfaces.cache_port import CachePort
from maritime_reporting_api.domain.entities.report_type import ReportType
from maritime_reporting_api.domain.interfaces.repositories.report_types_repository import (
    ReportTypesRepository,
)

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY: Final[str] = "report_types:catalog"


class ReportTypeRegistry:
    """Cached view over the report-type catalog.

    Args:
        cache: JSON cache port.
        ttl_s: Lifetime of the cached catalog in seconds.
    """

    def __init__(self, *, cache: CachePort, ttl_s: int) -> None:
        self._cache = cache
        self._ttl_s = ttl_s

    async def _catalog(self, repo: ReportTypesRepository) -> list[ReportType]:
        cached = await self._cache.get_json(CATALOG_CACHE_KEY)
        if cached is not None:
            return [ReportType(**item) for item in cached.get("items", [])]

        types = await repo.list_types(active_only=False)
        payload: dict[str, Any] = {"items": [asdict(t) for t in types]}
        await self._cache.set_json(CATALOG_CACHE_KEY, payload, ttl=self._ttl_s)
        logger.info("report_types.cache.fill", extra={"count": len(types), "ttl_s": self._ttl_s})
        return types

    async def list_types(
        self, repo: ReportTypesRepository, *, active_only: bool = True
    ) -> list[ReportType]:
        """Return catalog entries ordered by code."""
        types = sorted(await self._catalog(repo), key=lambda t: t.code)
        if active_only:
            return [t for t in types if t.is_active]
        return types

    async def get_by_code(self, repo: ReportTypesRepository, code: str) -> ReportType | None:
        """Return the active type with ``code`` (case-insensitive) or ``None``."""
        wanted = code.upper()
        for report_type in await self._catalog(repo):
            if report_type.code == wanted and report_type.is_active:
                return report_type
        return None

    async def get_by_id(self, repo: ReportTypesRepository, type_id: int) -> ReportType | None:
        """Return the type with ``type_id`` regardless of its active flag."""
        for report_type in await self._catalog(repo):
            if report_type.id == type_id:
                return report_type
        return None

    async def invalidate(self) -> None:
        """Drop the cached catalog so the next lookup reloads it."""
        await self._cache.delete(CATALOG_CACHE_KEY)
        logger.info("report_types.cache.invalidated")
