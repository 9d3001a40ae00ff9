# src/maritime_reporting_api/application/use_cases/reports/report_audit.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use cases: Read the audit trail and the transmission status of a report."""

from __future__ import annotations

from maritime_reporting_api.application.schemas.dto.report_views import (
    TransmissionStatusDTO,
    WorkflowHistoryDTO,
    WorkflowHistoryEntryDTO,
)
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    history_repo,
    not_found,
    reports_repo,
    transmission_logs_repo,
)
from maritime_reporting_api.domain.value_objects.result import Result


class GetWorkflowHistoryUseCase:
    """Return every status change of a report, newest first.

    The trail is append-only and outlives soft deletion, so it is read
    straight from the history store. An empty trail is reported as missing.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, report_id: int) -> Result[WorkflowHistoryDTO]:
        async with self._uow as tx:
            entries = await history_repo(tx).list_for_header(report_id)

        if not entries:
            return not_found("No workflow history found for this report", report_id=report_id)
        return Result.success(
            WorkflowHistoryDTO(
                report_id=report_id,
                total_changes=len(entries),
                history=[WorkflowHistoryEntryDTO.from_entry(e) for e in entries],
            )
        )


class GetTransmissionStatusUseCase:
    """Summarize whether a report reached shore and how the last attempt went."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, report_id: int) -> Result[TransmissionStatusDTO]:
        async with self._uow as tx:
            header = await reports_repo(tx).get_header(report_id)
            if header is None:
                return not_found(report_id=report_id)
            attempts = await transmission_logs_repo(tx).list_for_header(report_id)

        latest = attempts[0] if attempts else None
        return Result.success(
            TransmissionStatusDTO(
                report_id=report_id,
                report_number=header.report_number,
                is_transmitted=header.is_transmitted,
                transmitted_at=header.transmitted_at,
                transmission_attempts=len(attempts),
                last_transmission_status=latest.status.value if latest else None,
                last_transmission_time=latest.transmitted_at if latest else None,
                error_message=latest.error_message if latest else None,
            )
        )
