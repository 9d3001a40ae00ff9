# src/maritime_reporting_api/application/use_cases/reports/report_statistics.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use case: Dashboard counters over visible reports.

Purpose:
    Status breakdown, pending work, failed transmissions, counts per report
    type and per creation day over the last week. Soft-deleted reports never
    count.

Layer:
    application
"""

from __future__ import annotations

from datetime import datetime, timedelta

from maritime_reporting_api.application.schemas.dto.report_views import ReportStatisticsDTO
from maritime_reporting_api.application.services.report_type_registry import ReportTypeRegistry
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    Clock,
    report_types_repo,
    reports_repo,
    transmission_logs_repo,
    utc_now,
)
from maritime_reporting_api.domain.enums.reporting import ReportStatus
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import ReportFilter
from maritime_reporting_api.domain.value_objects.result import Result


class GetReportStatisticsUseCase:
    """Compute dashboard counters, optionally within a report-time window."""

    def __init__(
        self, uow: UnitOfWork, *, registry: ReportTypeRegistry, clock: Clock = utc_now
    ) -> None:
        self._uow = uow
        self._registry = registry
        self._clock = clock

    async def execute(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> Result[ReportStatisticsDTO]:
        filters = ReportFilter(from_date=from_date, to_date=to_date)
        since = self._clock() - timedelta(days=7)

        async with self._uow as tx:
            reports = reports_repo(tx)
            by_status = await reports.status_breakdown(filters)
            pending_transmission = await reports.count_pending_transmission(filters)
            by_type_id = await reports.count_by_type(filters)
            by_day = await reports.count_created_by_day(filters, since=since)
            failed = await transmission_logs_repo(tx).count_failed(
                from_date=from_date, to_date=to_date
            )
            types = {
                t.id: t.name
                for t in await self._registry.list_types(report_types_repo(tx), active_only=False)
            }

        submitted = by_status.get(ReportStatus.SUBMITTED, 0)
        return Result.success(
            ReportStatisticsDTO(
                total_reports=sum(by_status.values()),
                draft_reports=by_status.get(ReportStatus.DRAFT, 0),
                submitted_reports=submitted,
                approved_reports=by_status.get(ReportStatus.APPROVED, 0),
                transmitted_reports=by_status.get(ReportStatus.TRANSMITTED, 0),
                pending_approval=submitted,
                pending_transmission=pending_transmission,
                failed_transmissions=failed,
                reports_by_type={
                    types.get(type_id, str(type_id)): count
                    for type_id, count in sorted(by_type_id.items())
                },
                reports_last_7_days=dict(sorted(by_day.items())),
            )
        )
