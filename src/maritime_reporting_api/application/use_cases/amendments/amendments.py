# src/maritime_reporting_api/application/use_cases/amendments/amendments.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use cases: Amendment sub-workflow.

Purpose:
    Record corrections to APPROVED or TRANSMITTED reports without touching
    the original payload, then run the amendment through its own approval
    and transmission steps.

Layer:
    application

Notes:
    - Numbers are 1-based per original report. The original header row is
      locked while ``max + 1`` is read and the new row is staged; a
      uniqueness violation from a racing writer re-runs the attempt.
    - The amendment status is DRAFT -> APPROVED; transmission only sets
      ``is_transmitted`` and ``transmitted_at``.
    - Approve and transmit lock the amendment row, so of two racing
      approvals the second sees APPROVED and is refused.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from maritime_reporting_api.application.interfaces.retry_port import RetryRunner
from maritime_reporting_api.application.schemas.dto.report_commands import (
    ApproveAmendmentDTO,
    CreateAmendmentDTO,
)
from maritime_reporting_api.application.schemas.dto.report_views import (
    AmendmentCreatedDTO,
    AmendmentDTO,
    AmendmentListDTO,
    MessageDTO,
)
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    Clock,
    amendments_repo,
    not_found,
    reports_repo,
    utc_now,
)
from maritime_reporting_api.domain.entities.amendment import Amendment, FieldCorrection
from maritime_reporting_api.domain.enums.reporting import AmendmentStatus, ErrorKind
from maritime_reporting_api.domain.exceptions.reporting import DuplicateAmendmentNumberError
from maritime_reporting_api.domain.services.workflow import append_marker, ensure_amendable
from maritime_reporting_api.domain.value_objects.result import Result

logger = logging.getLogger(__name__)

AMENDMENT_NOT_FOUND = "Amendment not found"
AMENDMENT_ALLOCATION_MESSAGE = (
    "Could not allocate an amendment number due to concurrent writers. Please retry."
)


def _is_number_collision(exc: Exception) -> bool:
    return isinstance(exc, DuplicateAmendmentNumberError)


class CreateAmendmentUseCase:
    """Create a DRAFT amendment for an approved or transmitted report.

    Args:
        uow: Unit of work; re-entered once per attempt.
        retry: Runner that re-executes an attempt on number collisions.
        clock: Source of "now".
    """

    def __init__(self, uow: UnitOfWork, *, retry: RetryRunner, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._retry = retry
        self._clock = clock

    async def execute(
        self, report_id: int, dto: CreateAmendmentDTO, *, actor: str
    ) -> Result[AmendmentCreatedDTO]:
        try:
            return await self._retry(
                lambda: self._attempt(report_id, dto, actor), retry_on=_is_number_collision
            )
        except DuplicateAmendmentNumberError:
            logger.error("amendments.create.allocation_exhausted", extra={"report_id": report_id})
            return Result.failure(ErrorKind.CONCURRENCY, AMENDMENT_ALLOCATION_MESSAGE)

    async def _attempt(
        self, report_id: int, dto: CreateAmendmentDTO, actor: str
    ) -> Result[AmendmentCreatedDTO]:
        async with self._uow as tx:
            header = await reports_repo(tx).get_header(
                report_id, include_deleted=True, for_update=True
            )
            if header is None:
                return not_found(report_id=report_id)
            amendable = ensure_amendable(header)
            if amendable.error is not None:
                return Result.from_error(amendable.error)

            amendments = amendments_repo(tx)
            number = await amendments.next_number(report_id)
            now = self._clock()
            saved = await amendments.add(
                Amendment(
                    id=None,
                    original_header_id=report_id,
                    amendment_number=number,
                    amendment_reason=dto.amendment_reason,
                    corrected_fields={
                        name: FieldCorrection(old_value=c.old_value, new_value=c.new_value)
                        for name, c in dto.corrected_fields.items()
                    },
                    amended_by=actor,
                    amended_report_data=dto.amended_report_data,
                    remarks=dto.remarks,
                    created_at=now,
                    updated_at=now,
                    original_report_number=header.report_number,
                )
            )
            await tx.commit()

        logger.info(
            "amendments.create.success",
            extra={
                "report_id": report_id,
                "report_number": header.report_number,
                "amendment_number": number,
                "fields": sorted(dto.corrected_fields),
            },
        )
        return Result.success(
            AmendmentCreatedDTO(
                message="Amendment created successfully",
                amendment_id=saved.id or 0,
                amendment_number=saved.amendment_number,
            )
        )


class ListAmendmentsUseCase:
    """Amendments of one visible report, ordered by number."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, report_id: int) -> Result[AmendmentListDTO]:
        async with self._uow as tx:
            header = await reports_repo(tx).get_header(report_id)
            if header is None:
                return not_found(report_id=report_id)
            amendments = await amendments_repo(tx).list_for_header(report_id)

        items = [
            AmendmentDTO.from_amendment(replace(a, original_report_number=header.report_number))
            for a in amendments
        ]
        return Result.success(
            AmendmentListDTO(report_id=report_id, total_amendments=len(items), amendments=items)
        )


class GetAmendmentUseCase:
    """One amendment of one report."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, report_id: int, amendment_id: int) -> Result[AmendmentDTO]:
        async with self._uow as tx:
            amendment = await amendments_repo(tx).get(report_id, amendment_id)
        if amendment is None:
            return not_found(AMENDMENT_NOT_FOUND, amendment_id=amendment_id)
        return Result.success(AmendmentDTO.from_amendment(amendment))


class ApproveAmendmentUseCase:
    """DRAFT -> APPROVED with the Master's signature."""

    def __init__(self, uow: UnitOfWork, *, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._clock = clock

    async def execute(
        self, report_id: int, amendment_id: int, dto: ApproveAmendmentDTO
    ) -> Result[MessageDTO]:
        async with self._uow as tx:
            amendments = amendments_repo(tx)
            amendment = await amendments.get(report_id, amendment_id, for_update=True)
            if amendment is None:
                return not_found(AMENDMENT_NOT_FOUND, amendment_id=amendment_id)
            if amendment.status is not AmendmentStatus.DRAFT:
                return Result.failure(
                    ErrorKind.INVALID_STATE_TRANSITION,
                    f"Cannot approve amendment with status {amendment.status.value}",
                    status=amendment.status.value,
                )

            now = self._clock()
            remarks = amendment.remarks
            if dto.approval_remarks:
                remarks = append_marker(remarks, f"[APPROVED] {dto.approval_remarks}")
            await amendments.update(
                replace(
                    amendment,
                    status=AmendmentStatus.APPROVED,
                    master_signature=dto.master_signature,
                    signed_at=now,
                    remarks=remarks,
                    updated_at=now,
                )
            )
            await tx.commit()

        logger.info(
            "amendments.approve.success",
            extra={"report_id": report_id, "amendment_number": amendment.amendment_number},
        )
        return Result.success(MessageDTO(message="Amendment approved by Master"))


class TransmitAmendmentUseCase:
    """Mark an APPROVED amendment as sent ashore."""

    def __init__(self, uow: UnitOfWork, *, clock: Clock = utc_now) -> None:
        self._uow = uow
        self._clock = clock

    async def execute(self, report_id: int, amendment_id: int, *, actor: str) -> Result[MessageDTO]:
        async with self._uow as tx:
            amendments = amendments_repo(tx)
            amendment = await amendments.get(report_id, amendment_id, for_update=True)
            if amendment is None:
                return not_found(AMENDMENT_NOT_FOUND, amendment_id=amendment_id)
            if amendment.status is not AmendmentStatus.APPROVED:
                return Result.failure(
                    ErrorKind.INVALID_STATE_TRANSITION,
                    f"Cannot transmit amendment with status {amendment.status.value}. "
                    "Must be APPROVED.",
                    status=amendment.status.value,
                )
            if amendment.is_transmitted:
                return Result.failure(ErrorKind.CONFLICT, "Amendment is already transmitted")

            now = self._clock()
            await amendments.update(
                replace(amendment, is_transmitted=True, transmitted_at=now, updated_at=now)
            )
            await tx.commit()

        logger.info(
            "amendments.transmit.success",
            extra={
                "report_id": report_id,
                "amendment_number": amendment.amendment_number,
                "actor": actor,
            },
        )
        return Result.success(MessageDTO(message="Amendment transmitted successfully"))
