# src/maritime_reporting_api/application/use_cases/reports/list_reports.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use case: Paginated listing of visible reports.

Purpose:
    Filter headers by status, type, voyage and report-time window, order them
    by report time descending, and decorate each row with its report-type
    name from the cached registry.

Layer:
    application
"""

from __future__ import annotations

from maritime_reporting_api.application.schemas.dto.report_views import (
    ReportListDTO,
    ReportSummaryDTO,
)
from maritime_reporting_api.application.services.report_type_registry import ReportTypeRegistry
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    report_types_repo,
    reports_repo,
)
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import ReportFilter
from maritime_reporting_api.domain.value_objects.result import Result


class ListReportsUseCase:
    """List report summaries.

    Args:
        uow: Unit of work.
        registry: Report-type catalog used to name each row's type.
        max_page_size: Upper bound applied to ``page_size``.
    """

    def __init__(
        self, uow: UnitOfWork, *, registry: ReportTypeRegistry, max_page_size: int = 100
    ) -> None:
        self._uow = uow
        self._registry = registry
        self._max_page_size = max_page_size

    async def execute(
        self, filters: ReportFilter, *, page: int = 1, page_size: int = 20
    ) -> Result[ReportListDTO]:
        """Return one page of summaries.

        Args:
            filters: Optional status/type/voyage/time filters.
            page: 1-based page number (values below 1 are clamped).
            page_size: Requested size, clamped to ``1..max_page_size``.

        Returns:
            Result[ReportListDTO]: Items, total and the effective paging.
        """
        page = max(page, 1)
        page_size = min(max(page_size, 1), self._max_page_size)

        async with self._uow as tx:
            headers, total = await reports_repo(tx).list_headers(
                filters, page=page, page_size=page_size
            )
            types = {
                t.id: t
                for t in await self._registry.list_types(report_types_repo(tx), active_only=False)
            }

        items = [ReportSummaryDTO.from_header(h, types.get(h.report_type_id)) for h in headers]
        return Result.success(ReportListDTO(items=items, total=total, page=page, page_size=page_size))
