# src/maritime_reporting_api/application/use_cases/reports/get_report.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use case: Fetch one visible report of a given kind."""

from __future__ import annotations

from maritime_reporting_api.application.schemas.dto.report_views import ReportDetailDTO
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import not_found, reports_repo
from maritime_reporting_api.domain.enums.reporting import ReportKind
from maritime_reporting_api.domain.value_objects.result import Result


class GetReportUseCase:
    """Return the header and typed payload of one report.

    A report of another kind is reported as missing so that
    ``/reports/noon/{id}`` never exposes a departure report.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, kind: ReportKind, report_id: int) -> Result[ReportDetailDTO]:
        async with self._uow as tx:
            report = await reports_repo(tx).get_report(report_id)

        if report is None or report.kind is not kind:
            return not_found(f"{kind.label} report not found", report_id=report_id)
        return Result.success(ReportDetailDTO.from_report(report))
