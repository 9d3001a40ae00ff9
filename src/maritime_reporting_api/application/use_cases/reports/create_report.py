# src/maritime_reporting_api/application/use_cases/reports/create_report.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use case: Create a report of any kind.

Purpose:
    Validate the submitted payload, enforce the per-period uniqueness rules,
    allocate a ``PREFIX-YYYYMMDD-NNNN`` number and persist the header and its
    typed payload in one transaction.

Layer:
    application

Notes:
    - The number is allocated from a locked counter row inside the creating
      transaction, so a failed attempt rolls back the increment as well.
    - The whole attempt is re-run by the injected retry runner when the store
      reports a transient conflict; exhaustion becomes a CONCURRENCY result.
    - Blocking validation errors never reach the store.
    - The per-period check runs after the counter row is locked. Same-day
      noon creates share one counter key, so they are serialised by that
      lock; departure and arrival per voyage are backed by a unique index
      whose violation also becomes a CONFLICT.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from maritime_reporting_api.application.interfaces.retry_port import RetryRunner
from maritime_reporting_api.application.schemas.dto.report_commands import ReportCreateDTO
from maritime_reporting_api.application.schemas.dto.report_views import ReportCreatedDTO
from maritime_reporting_api.application.services.report_type_registry import ReportTypeRegistry
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    Clock,
    report_types_repo,
    reports_repo,
    sequences_repo,
    utc_now,
)
from maritime_reporting_api.domain.entities.report import Report, ReportHeader
from maritime_reporting_api.domain.entities.report_payloads import NoonPayload, ReportPayload
from maritime_reporting_api.domain.enums.reporting import ErrorKind, ReportKind, ReportStatus
from maritime_reporting_api.domain.exceptions.reporting import (
    DuplicatePeriodReportError,
    SequenceExhaustedError,
    TransientStoreConflictError,
)
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import (
    ReportsRepository,
)
from maritime_reporting_api.domain.services.report_numbers import (
    MAX_DAILY_SEQUENCE,
    format_report_number,
    report_day,
    sequence_key,
)
from maritime_reporting_api.domain.services.report_validator import validate_report
from maritime_reporting_api.domain.services.workflow import with_validation_warnings
from maritime_reporting_api.domain.value_objects.result import Result

logger = logging.getLogger(__name__)

ALLOCATION_EXHAUSTED_MESSAGE = "Could not allocate a report number due to concurrent writers. Please retry."


def _is_transient(exc: Exception) -> bool:
    return isinstance(exc, TransientStoreConflictError)


def duplicate_message(kind: ReportKind, payload: ReportPayload, voyage_id: int | None) -> str:
    """Return the CONFLICT message for a broken per-period rule."""
    if isinstance(payload, NoonPayload):
        return (
            f"Noon report already exists for {report_day(payload.report_date):%Y-%m-%d}. "
            "Only one noon report per day is allowed."
        )
    return (
        f"{kind.label} report already exists for voyage ID {voyage_id}. "
        f"Only one {kind.value} report per voyage is allowed."
    )


async def find_duplicate(
    reports: ReportsRepository,
    kind: ReportKind,
    payload: ReportPayload,
    *,
    voyage_id: int | None,
    exclude_header_id: int | None = None,
) -> str | None:
    """Return the conflict message when the report would break a per-period rule.

    At most one noon report per calendar date, and at most one departure and
    one arrival per voyage. Soft-deleted reports do not count.
    """
    if isinstance(payload, NoonPayload):
        day = report_day(payload.report_date)
        if await reports.noon_exists_on(day, exclude_header_id=exclude_header_id):
            return duplicate_message(kind, payload, voyage_id)
    elif kind in (ReportKind.DEPARTURE, ReportKind.ARRIVAL) and voyage_id is not None:
        if await reports.voyage_report_exists(kind, voyage_id):
            return duplicate_message(kind, payload, voyage_id)
    return None


class CreateReportUseCase:
    """Create a DRAFT report with a freshly allocated number.

    Args:
        uow: Unit of work; re-entered once per attempt.
        registry: Cached report-type catalog.
        retry: Runner that re-executes an attempt on transient conflicts.
        clock: Source of "now".
        future_tolerance: Clock skew accepted for position reports.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        registry: ReportTypeRegistry,
        retry: RetryRunner,
        clock: Clock = utc_now,
        future_tolerance: timedelta = timedelta(hours=1),
    ) -> None:
        self._uow = uow
        self._registry = registry
        self._retry = retry
        self._clock = clock
        self._future_tolerance = future_tolerance

    async def execute(
        self, kind: ReportKind, dto: ReportCreateDTO, *, actor: str
    ) -> Result[ReportCreatedDTO]:
        """Validate and persist one report.

        Args:
            kind: Report kind; must match the DTO type.
            dto: Create model for ``kind``.
            actor: Acting user, used as preparer when the body names none.

        Returns:
            Result[ReportCreatedDTO]: Number and id with any warnings, or a
            VALIDATION / CONFLICT / CONCURRENCY failure.
        """
        payload = dto.to_payload()
        outcome = validate_report(
            payload, now=self._clock(), future_tolerance=self._future_tolerance
        )
        if not outcome.is_valid:
            message = "; ".join(outcome.errors)
            logger.warning(
                "reports.create.validation_failed",
                extra={"kind": kind.value, "errors": outcome.errors},
            )
            return Result.failure(ErrorKind.VALIDATION, message, errors=list(outcome.errors))

        if outcome.warnings:
            logger.warning(
                "reports.create.validation_warnings",
                extra={"kind": kind.value, "warnings": outcome.warnings},
            )

        warnings = tuple(outcome.warnings)
        try:
            return await self._retry(
                lambda: self._attempt(kind, dto, payload, warnings, actor),
                retry_on=_is_transient,
            )
        except DuplicatePeriodReportError:
            logger.info("reports.create.duplicate", extra={"kind": kind.value, "source": "index"})
            return Result.failure(
                ErrorKind.CONFLICT, duplicate_message(kind, payload, dto.voyage_id)
            )
        except SequenceExhaustedError as exc:
            logger.error("reports.create.sequence_exhausted", extra={"kind": kind.value, **exc.details})
            return Result.failure(ErrorKind.CONFLICT, exc.message, **exc.details)
        except TransientStoreConflictError as exc:
            logger.error(
                "reports.create.allocation_exhausted",
                extra={"kind": kind.value, "reason": type(exc).__name__},
            )
            return Result.failure(ErrorKind.CONCURRENCY, ALLOCATION_EXHAUSTED_MESSAGE)

    async def _attempt(
        self,
        kind: ReportKind,
        dto: ReportCreateDTO,
        payload: ReportPayload,
        warnings: tuple[str, ...],
        actor: str,
    ) -> Result[ReportCreatedDTO]:
        async with self._uow as tx:
            report_type = await self._registry.get_by_code(report_types_repo(tx), kind.type_code)
            if report_type is None:
                return Result.failure(
                    ErrorKind.VALIDATION, f"Report type {kind.type_code} not found"
                )

            day = report_day(payload.report_time)
            key = sequence_key(kind, day)
            sequence = await sequences_repo(tx).next_value(key)
            if sequence > MAX_DAILY_SEQUENCE:
                raise SequenceExhaustedError(
                    f"Daily report number capacity exhausted for {key}", details={"key": key}
                )

            reports = reports_repo(tx)
            duplicate = await find_duplicate(reports, kind, payload, voyage_id=dto.voyage_id)
            if duplicate is not None:
                logger.info("reports.create.duplicate", extra={"kind": kind.value})
                return Result.failure(ErrorKind.CONFLICT, duplicate)

            now = self._clock()
            header = ReportHeader(
                id=None,
                report_number=format_report_number(kind.number_prefix, day, sequence),
                report_type_id=report_type.id,
                kind=kind,
                report_date_time=payload.report_time,
                status=ReportStatus.DRAFT,
                prepared_by=dto.prepared_by or actor,
                voyage_id=dto.voyage_id,
                remarks=with_validation_warnings(dto.remarks, warnings),
                created_at=now,
                updated_at=now,
            )
            saved = await reports.add(Report(header=header, payload=payload))
            await tx.commit()

        logger.info(
            "reports.create.success",
            extra={
                "kind": kind.value,
                "report_id": saved.id,
                "report_number": saved.header.report_number,
                "warnings": len(warnings),
            },
        )
        return Result.success(
            ReportCreatedDTO(
                report_id=saved.id or 0,
                report_number=saved.header.report_number,
                message=f"{kind.label} report created successfully",
                warnings=list(warnings),
            ),
            warnings=warnings,
        )
