# src/maritime_reporting_api/application/use_cases/reports/report_transitions.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use cases: Report status transitions.

Purpose:
    Submit, approve, reject, reopen and transmit a report. Every transition
    runs as one short transaction: read the header, check the guard, write
    the new header (version-checked), write exactly one audit row (plus a
    transmission-log row for transmit) and commit.

Layer:
    application

Notes:
    - Guards live in :mod:`maritime_reporting_api.domain.services.workflow`;
      these use cases only orchestrate storage around them.
    - Soft-deleted headers are loaded so the guard can name the reason.
    - A concurrent writer that bumped the header version turns the attempt
      into a CONCURRENCY result; nothing is written.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import ClassVar

from maritime_reporting_api.application.schemas.dto.report_commands import (
    ApproveReportDTO,
    RejectReportDTO,
    ReopenReportDTO,
    TransmitReportDTO,
)
from maritime_reporting_api.application.schemas.dto.report_views import MessageDTO
from maritime_reporting_api.application.services.report_type_registry import ReportTypeRegistry
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    Clock,
    history_repo,
    not_found,
    report_types_repo,
    reports_repo,
    stale,
    transmission_logs_repo,
    utc_now,
)
from maritime_reporting_api.domain.entities.report import ReportHeader
from maritime_reporting_api.domain.enums.reporting import ErrorKind
from maritime_reporting_api.domain.exceptions.reporting import ConcurrencyConflictError
from maritime_reporting_api.domain.services import workflow
from maritime_reporting_api.domain.services.workflow import Transition
from maritime_reporting_api.domain.value_objects.result import Result

logger = logging.getLogger(__name__)

Guard = Callable[[ReportHeader, UnitOfWork], Awaitable[Result[Transition]]]


class _TransitionUseCase:
    """Load, guard, write, audit, commit."""

    transition: ClassVar[str]
    success_message: ClassVar[str]

    def __init__(self, uow: UnitOfWork, *, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._clock = clock

    async def _run(self, report_id: int, guard: Guard) -> Result[MessageDTO]:
        async with self._uow as tx:
            reports = reports_repo(tx)
            header = await reports.get_header(report_id, include_deleted=True)
            if header is None:
                return not_found(report_id=report_id)

            result = await guard(header, tx)
            if result.error is not None:
                logger.warning(
                    "reports.transition.rejected",
                    extra={
                        "transition": self.transition,
                        "report_id": report_id,
                        "status": header.status.value,
                        "kind": result.error.kind.value,
                        "reason": result.error.message,
                    },
                )
                return Result.from_error(result.error)

            change = result.unwrap()
            try:
                await reports.update_header(change.header)
            except ConcurrencyConflictError as exc:
                logger.warning(
                    "reports.transition.stale",
                    extra={"transition": self.transition, "report_id": report_id},
                )
                return stale(exc)

            await history_repo(tx).add(change.history)
            if change.transmission is not None:
                await transmission_logs_repo(tx).add(change.transmission)
            await tx.commit()

        logger.info(
            "reports.transition.success",
            extra={
                "transition": self.transition,
                "report_id": report_id,
                "report_number": header.report_number,
                "from_status": change.history.from_status.value,
                "to_status": change.history.to_status.value,
                "actor": change.history.changed_by,
            },
        )
        return Result.success(MessageDTO(message=self.success_message))


class SubmitReportUseCase(_TransitionUseCase):
    """DRAFT -> SUBMITTED."""

    transition = "submit"
    success_message = "Report submitted for approval"

    async def execute(self, report_id: int) -> Result[MessageDTO]:
        async def guard(header: ReportHeader, tx: UnitOfWork) -> Result[Transition]:
            return workflow.submit(header, now=self._clock())

        return await self._run(report_id, guard)


class ApproveReportUseCase(_TransitionUseCase):
    """SUBMITTED -> APPROVED with the Master's signature.

    Args:
        uow: Unit of work.
        registry: Report-type catalog, consulted for the signature requirement.
        clock: Source of "now"; reports dated later cannot be approved.
    """

    transition = "approve"
    success_message = "Report approved by Master"

    def __init__(
        self, uow: UnitOfWork, *, registry: ReportTypeRegistry, clock: Clock = utc_now
    ) -> None:
        super().__init__(uow, clock=clock)
        self._registry = registry

    async def execute(self, report_id: int, dto: ApproveReportDTO) -> Result[MessageDTO]:
        async def guard(header: ReportHeader, tx: UnitOfWork) -> Result[Transition]:
            report_type = await self._registry.get_by_id(
                report_types_repo(tx), header.report_type_id
            )
            if report_type is None:
                return Result.failure(
                    ErrorKind.VALIDATION, f"Report type {header.report_type_id} not found"
                )
            return workflow.approve(
                header,
                report_type,
                master_signature=dto.master_signature,
                approval_remarks=dto.approval_remarks,
                now=self._clock(),
            )

        return await self._run(report_id, guard)


class RejectReportUseCase(_TransitionUseCase):
    """SUBMITTED -> REJECTED with a reason."""

    transition = "reject"
    success_message = "Report rejected"

    async def execute(self, report_id: int, dto: RejectReportDTO, *, actor: str) -> Result[MessageDTO]:
        async def guard(header: ReportHeader, tx: UnitOfWork) -> Result[Transition]:
            return workflow.reject(header, reason=dto.reason, actor=actor, now=self._clock())

        return await self._run(report_id, guard)


class ReopenReportUseCase(_TransitionUseCase):
    """REJECTED -> DRAFT with the corrections to make."""

    transition = "reopen"
    success_message = "Report reopened for corrections"

    async def execute(self, report_id: int, dto: ReopenReportDTO, *, actor: str) -> Result[MessageDTO]:
        async def guard(header: ReportHeader, tx: UnitOfWork) -> Result[Transition]:
            return workflow.reopen(
                header, corrections=dto.corrections, actor=actor, now=self._clock()
            )

        return await self._run(report_id, guard)


class TransmitReportUseCase(_TransitionUseCase):
    """APPROVED -> TRANSMITTED; delivery is recorded as a stubbed SUCCESS."""

    transition = "transmit"
    success_message = "Report transmitted successfully"

    async def execute(
        self, report_id: int, dto: TransmitReportDTO, *, actor: str
    ) -> Result[MessageDTO]:
        async def guard(header: ReportHeader, tx: UnitOfWork) -> Result[Transition]:
            return workflow.transmit(
                header,
                method=dto.transmission_method,
                recipients=dto.recipient_emails,
                actor=actor,
                now=self._clock(),
            )

        return await self._run(report_id, guard)
