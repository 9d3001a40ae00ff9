# src/maritime_reporting_api/application/use_cases/reports/report_retention.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use cases: Soft delete, restore and the deleted-report listing.

Purpose:
    Reports are never physically removed. A soft delete stamps the header
    with who, when and why; every ordinary read path then hides it. A restore
    clears the stamp. Neither changes the workflow status, and neither writes
    an audit row.

Layer:
    application
"""

from __future__ import annotations

import logging
from datetime import datetime

from maritime_reporting_api.application.schemas.dto.report_commands import SoftDeleteReportDTO
from maritime_reporting_api.application.schemas.dto.report_views import (
    DeletedReportDTO,
    DeletedReportsDTO,
    RestoreResultDTO,
    SoftDeleteResultDTO,
)
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    Clock,
    not_found,
    reports_repo,
    stale,
    utc_now,
)
from maritime_reporting_api.domain.enums.reporting import ErrorKind
from maritime_reporting_api.domain.exceptions.reporting import (
    ConcurrencyConflictError,
    DuplicatePeriodReportError,
)
from maritime_reporting_api.domain.services import workflow
from maritime_reporting_api.domain.value_objects.result import Result

logger = logging.getLogger(__name__)

RESTORE_PERIOD_TAKEN = "Cannot restore report: another visible report already covers its period"


class SoftDeleteReportUseCase:
    """Hide a DRAFT report while keeping it for retention."""

    def __init__(self, uow: UnitOfWork, *, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._clock = clock

    async def execute(
        self, report_id: int, dto: SoftDeleteReportDTO, *, actor: str
    ) -> Result[SoftDeleteResultDTO]:
        now = self._clock()
        async with self._uow as tx:
            reports = reports_repo(tx)
            header = await reports.get_header(report_id, include_deleted=True)
            if header is None:
                return not_found(report_id=report_id)

            result = workflow.soft_delete(header, actor=actor, reason=dto.reason, now=now)
            if result.error is not None:
                return Result.from_error(result.error)
            try:
                await reports.update_header(result.unwrap())
            except ConcurrencyConflictError as exc:
                return stale(exc)
            await tx.commit()

        logger.warning(
            "reports.soft_deleted",
            extra={
                "report_id": report_id,
                "report_number": header.report_number,
                "deleted_by": actor,
                "reason": dto.reason,
            },
        )
        return Result.success(
            SoftDeleteResultDTO(
                message="Report soft deleted successfully",
                report_id=report_id,
                deleted_by=actor,
                deleted_at=now,
            )
        )


class RestoreReportUseCase:
    """Make a soft-deleted report visible again."""

    def __init__(self, uow: UnitOfWork, *, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._clock = clock

    async def execute(self, report_id: int, *, actor: str) -> Result[RestoreResultDTO]:
        now = self._clock()
        async with self._uow as tx:
            reports = reports_repo(tx)
            header = await reports.get_header(report_id, include_deleted=True)
            if header is None:
                return not_found(report_id=report_id)

            result = workflow.restore(header, now=now)
            if result.error is not None:
                return Result.from_error(result.error)
            try:
                await reports.update_header(result.unwrap())
            except ConcurrencyConflictError as exc:
                return stale(exc)
            except DuplicatePeriodReportError as exc:
                return Result.failure(ErrorKind.CONFLICT, RESTORE_PERIOD_TAKEN, **exc.details)
            await tx.commit()

        logger.info(
            "reports.restored",
            extra={"report_id": report_id, "report_number": header.report_number, "actor": actor},
        )
        return Result.success(
            RestoreResultDTO(
                message="Report restored successfully",
                report_id=report_id,
                restored_by=actor,
                restored_at=now,
            )
        )


class ListDeletedReportsUseCase:
    """List soft-deleted reports, newest deletion first."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> Result[DeletedReportsDTO]:
        async with self._uow as tx:
            headers = await reports_repo(tx).list_deleted(from_date=from_date, to_date=to_date)

        reports = [DeletedReportDTO.from_header(h) for h in headers]
        return Result.success(DeletedReportsDTO(total_deleted=len(reports), reports=reports))
