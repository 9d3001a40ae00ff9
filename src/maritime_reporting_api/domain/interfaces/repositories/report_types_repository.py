# src/maritime_reporting_api/domain/interfaces/repositories/report_types_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report-type repository interface (read-only catalog)."""

from __future__ import annotations

from typing import Protocol

from maritime_reporting_api.domain.entities.report_type import ReportType


class ReportTypesRepository(Protocol):
    """Read access to the report-type registry table."""

    async def list_types(self, *, active_only: bool = True) -> list[ReportType]:
        """Return report types ordered by code.

        Args:
            active_only: Hide types whose ``is_active`` flag is false.

        Returns:
            list[ReportType]: Catalog entries.
        """
        raise NotImplementedError

    async def get_by_code(self, code: str) -> ReportType | None:
        """Return the type with ``code`` or ``None``."""
        raise NotImplementedError

    async def get_by_id(self, type_id: int) -> ReportType | None:
        """Return the type with primary key ``type_id`` or ``None``."""
        raise NotImplementedError
