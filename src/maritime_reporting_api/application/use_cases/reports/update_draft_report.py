# src/maritime_reporting_api/application/use_cases/reports/update_draft_report.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use cases: Edit a DRAFT report.

Purpose:
    * PATCH: merge the non-null fields of the kind's typed partial model into
      the stored payload, re-validate and stamp an ``[UPDATED ...]`` marker.
    * PUT (noon only): replace the payload and header metadata wholesale.

Layer:
    application

Notes:
    - Only visible DRAFT reports are editable.
    - The partial body is parsed only after the stored kind is known, so a
      field that belongs to another kind is refused as a validation error.
    - Changing a noon date or a departure/arrival voyage re-checks the
      per-period uniqueness rules, ignoring the report being edited.
    - The report number is fixed at creation and survives a date change.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import timedelta
from typing import Any

from pydantic import ValidationError

from maritime_reporting_api.application.schemas.dto.report_commands import (
    PATCH_DTOS,
    NoonReportCreateDTO,
)
from maritime_reporting_api.application.schemas.dto.report_views import MessageDTO
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import (
    Clock,
    not_found,
    reports_repo,
    stale,
    utc_now,
)
from maritime_reporting_api.application.use_cases.reports.create_report import (
    duplicate_message,
    find_duplicate,
)
from maritime_reporting_api.domain.enums.reporting import ErrorKind, ReportKind
from maritime_reporting_api.domain.exceptions.reporting import (
    ConcurrencyConflictError,
    DuplicatePeriodReportError,
)
from maritime_reporting_api.domain.services.report_validator import validate_report
from maritime_reporting_api.domain.services.workflow import (
    append_marker,
    ensure_editable,
    with_validation_warnings,
)
from maritime_reporting_api.domain.value_objects.result import Result

logger = logging.getLogger(__name__)

_HEADER_PATCH_FIELDS = ("voyage_id", "prepared_by")


def _describe(exc: ValidationError) -> tuple[str, list[dict[str, Any]]]:
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    message = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in errors
    )
    return message, [dict(err) for err in errors]


class PatchDraftReportUseCase:
    """Apply a partial edit to a DRAFT report of any kind.

    Args:
        uow: Unit of work.
        clock: Source of "now", used for the marker and position checks.
        future_tolerance: Clock skew accepted for position reports.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        clock: Clock = utc_now,
        future_tolerance: timedelta = timedelta(hours=1),
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._future_tolerance = future_tolerance

    async def execute(
        self, report_id: int, body: Mapping[str, Any], *, actor: str
    ) -> Result[MessageDTO]:
        """Merge ``body`` into the stored draft.

        Args:
            report_id: Header id.
            body: Raw JSON object; parsed with the stored kind's partial model.
            actor: Acting user (logged only).

        Returns:
            Result[MessageDTO]: Acknowledgement with any validation warnings.
        """
        async with self._uow as tx:
            reports = reports_repo(tx)
            header = await reports.get_header(report_id, include_deleted=True)
            if header is None:
                return not_found(report_id=report_id)

            editable = ensure_editable(header, verb="edit")
            if editable.error is not None:
                return Result.from_error(editable.error)

            try:
                dto = PATCH_DTOS[header.kind].model_validate(dict(body))
            except ValidationError as exc:
                message, errors = _describe(exc)
                return Result.failure(ErrorKind.VALIDATION, message, errors=errors)

            changes = dto.changes()
            if not changes:
                return Result.failure(ErrorKind.VALIDATION, "No updates provided")
            header_changes = {k: changes.pop(k) for k in _HEADER_PATCH_FIELDS if k in changes}

            report = await reports.get_report(report_id)
            if report is None:
                return not_found(report_id=report_id)
            payload = replace(report.payload, **changes) if changes else report.payload

            now = self._clock()
            outcome = validate_report(payload, now=now, future_tolerance=self._future_tolerance)
            if not outcome.is_valid:
                return Result.failure(
                    ErrorKind.VALIDATION, "; ".join(outcome.errors), errors=list(outcome.errors)
                )
            if outcome.warnings:
                logger.warning(
                    "reports.patch.validation_warnings",
                    extra={"report_id": report_id, "warnings": outcome.warnings},
                )

            voyage_id = header_changes.get("voyage_id", header.voyage_id)
            date_changed = header.kind is ReportKind.NOON and "report_date" in changes
            voyage_changed = voyage_id != header.voyage_id
            if date_changed or voyage_changed:
                duplicate = await find_duplicate(
                    reports, header.kind, payload, voyage_id=voyage_id, exclude_header_id=header.id
                )
                if duplicate is not None:
                    return Result.failure(ErrorKind.CONFLICT, duplicate)

            updated = replace(
                header,
                **header_changes,
                report_date_time=payload.report_time,
                remarks=append_marker(
                    header.remarks, f"[UPDATED {now:%Y-%m-%d %H:%M} UTC] Draft modified"
                ),
                updated_at=now,
            )
            try:
                await reports.update_header(updated)
            except ConcurrencyConflictError as exc:
                return stale(exc)
            except DuplicatePeriodReportError:
                return Result.failure(
                    ErrorKind.CONFLICT, duplicate_message(header.kind, payload, voyage_id)
                )
            if changes:
                await reports.replace_payload(report_id, payload)
            await tx.commit()

        logger.info(
            "reports.patch.success",
            extra={
                "report_id": report_id,
                "fields": sorted([*changes, *header_changes]),
                "actor": actor,
            },
        )
        return Result.success(
            MessageDTO(message="Draft report updated successfully", warnings=list(outcome.warnings)),
            warnings=tuple(outcome.warnings),
        )


class ReplaceNoonReportUseCase:
    """Replace a DRAFT noon report with a complete new submission."""

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        clock: Clock = utc_now,
        future_tolerance: timedelta = timedelta(hours=1),
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._future_tolerance = future_tolerance

    async def execute(
        self, report_id: int, dto: NoonReportCreateDTO, *, actor: str
    ) -> Result[MessageDTO]:
        async with self._uow as tx:
            reports = reports_repo(tx)
            header = await reports.get_header(report_id, include_deleted=True)
            if header is None or header.kind is not ReportKind.NOON:
                return not_found("Noon report not found", report_id=report_id)

            editable = ensure_editable(header, verb="update")
            if editable.error is not None:
                return Result.from_error(editable.error)

            payload = dto.to_payload()
            now = self._clock()
            outcome = validate_report(payload, now=now, future_tolerance=self._future_tolerance)
            if not outcome.is_valid:
                return Result.failure(
                    ErrorKind.VALIDATION, "; ".join(outcome.errors), errors=list(outcome.errors)
                )

            duplicate = await find_duplicate(
                reports,
                ReportKind.NOON,
                payload,
                voyage_id=dto.voyage_id,
                exclude_header_id=header.id,
            )
            if duplicate is not None:
                return Result.failure(ErrorKind.CONFLICT, duplicate)

            updated = replace(
                header,
                report_date_time=payload.report_time,
                voyage_id=dto.voyage_id,
                prepared_by=dto.prepared_by or actor,
                remarks=with_validation_warnings(dto.remarks, outcome.warnings),
                updated_at=now,
            )
            try:
                await reports.update_header(updated)
            except ConcurrencyConflictError as exc:
                return stale(exc)
            except DuplicatePeriodReportError:
                return Result.failure(
                    ErrorKind.CONFLICT, duplicate_message(ReportKind.NOON, payload, dto.voyage_id)
                )
            await reports.replace_payload(report_id, payload)
            await tx.commit()

        logger.info(
            "reports.replace.success",
            extra={"report_id": report_id, "warnings": len(outcome.warnings), "actor": actor},
        )
        return Result.success(
            MessageDTO(message="Noon report updated successfully", warnings=list(outcome.warnings)),
            warnings=tuple(outcome.warnings),
        )
