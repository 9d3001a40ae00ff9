# src/maritime_reporting_api/domain/services/workflow.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report workflow state machine.

Purpose:
    Pure transition functions for the report lifecycle. Each function checks
    its guards against a header snapshot and returns a :class:`Result`
    holding the next header and the audit entry that must be written in the
    same transaction.

Layer:
    domain/services

Transitions:
    DRAFT --submit--> SUBMITTED --approve--> APPROVED --transmit--> TRANSMITTED
    SUBMITTED --reject--> REJECTED --reopen--> DRAFT

Notes:
    * Guards return INVALID_STATE_TRANSITION naming the offending status;
      missing free-text inputs return VALIDATION.
    * Functions never touch storage; ``now`` is always injected.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from maritime_reporting_api.domain.entities.report import ReportHeader
from maritime_reporting_api.domain.entities.report_type import ReportType
from maritime_reporting_api.domain.entities.transmission_log import TransmissionLogEntry
from maritime_reporting_api.domain.entities.workflow_history import WorkflowHistoryEntry
from maritime_reporting_api.domain.enums.reporting import (
    ErrorKind,
    ReportStatus,
    TransmissionMethod,
    TransmissionStatus,
)
from maritime_reporting_api.domain.value_objects.result import Result

__all__ = [
    "Transition",
    "submit",
    "approve",
    "reject",
    "reopen",
    "transmit",
    "ensure_editable",
    "soft_delete",
    "restore",
    "ensure_amendable",
    "append_marker",
    "with_validation_warnings",
    "confirmation_number",
]


@dataclass(frozen=True, slots=True)
class Transition:
    """Next header state plus the audit row describing the change."""

    header: ReportHeader
    history: WorkflowHistoryEntry
    transmission: TransmissionLogEntry | None = None


# ---------------------------------------------------------------------------
# Remarks helpers


def append_marker(remarks: str | None, marker: str) -> str:
    """Append a workflow marker on its own line."""
    return f"{remarks or ''}\n{marker}"


def with_validation_warnings(remarks: str | None, warnings: Sequence[str]) -> str | None:
    """Prefix remarks with a ``[VALIDATION WARNINGS]`` block when warnings exist."""
    if not warnings:
        return remarks
    block = "[VALIDATION WARNINGS]\n" + "\n".join(warnings)
    return f"{block}\n\n{remarks}" if remarks else block


def confirmation_number(now: datetime) -> str:
    """Stub shore confirmation token, ``TXN-yyyyMMddHHmmss``."""
    return f"TXN-{now:%Y%m%d%H%M%S}"


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _history(
    header: ReportHeader,
    to_status: ReportStatus,
    *,
    actor: str,
    now: datetime,
    remarks: str | None,
) -> WorkflowHistoryEntry:
    if header.id is None:
        raise ValueError("transition requires a persisted header")
    return WorkflowHistoryEntry(
        id=None,
        header_id=header.id,
        from_status=header.status,
        to_status=to_status,
        changed_by=actor,
        changed_at=now,
        remarks=remarks,
    )


def _deleted(verb: str) -> Result[Transition]:
    return Result.failure(ErrorKind.INVALID_STATE_TRANSITION, f"Cannot {verb} deleted report")


def _bad_status(message: str, status: ReportStatus) -> Result[Transition]:
    return Result.failure(ErrorKind.INVALID_STATE_TRANSITION, message, status=status.value)


# ---------------------------------------------------------------------------
# Primary transitions


def submit(header: ReportHeader, *, now: datetime) -> Result[Transition]:
    """DRAFT -> SUBMITTED. The preparer (or ``System``) is recorded as actor."""
    if header.is_deleted:
        return _deleted("submit")
    if header.status is not ReportStatus.DRAFT:
        return _bad_status(f"Cannot submit report with status {header.status.value}", header.status)

    history = _history(
        header,
        ReportStatus.SUBMITTED,
        actor=header.prepared_by or "System",
        now=now,
        remarks="Report submitted for approval",
    )
    return Result.success(
        Transition(header=replace(header, status=ReportStatus.SUBMITTED, updated_at=now), history=history)
    )


def approve(
    header: ReportHeader,
    report_type: ReportType,
    *,
    master_signature: str | None,
    approval_remarks: str | None,
    now: datetime,
) -> Result[Transition]:
    """SUBMITTED -> APPROVED.

    Args:
        header: Current header snapshot.
        report_type: Registry entry for the header's type.
        master_signature: Master's signature; mandatory when the type requires it.
        approval_remarks: Optional remarks appended as ``[APPROVAL]``.
        now: Reference instant; reports dated after it cannot be approved.

    Returns:
        Result[Transition]: Approved header and audit row, or the guard failure.
    """
    if header.is_deleted:
        return _deleted("approve")
    if header.status is not ReportStatus.SUBMITTED:
        return _bad_status(
            f"Cannot approve report with status {header.status.value}. Must be SUBMITTED.",
            header.status,
        )
    signature = (master_signature or "").strip()
    if report_type.requires_master_signature and not signature:
        return Result.failure(
            ErrorKind.VALIDATION, f"Master signature is required for {report_type.name}"
        )
    if _as_utc(header.report_date_time) > _as_utc(now):
        return Result.failure(
            ErrorKind.INVALID_STATE_TRANSITION, "Cannot approve report with future date/time"
        )

    remarks = header.remarks
    if approval_remarks:
        remarks = append_marker(remarks, f"[APPROVAL] {approval_remarks}")

    history = _history(
        header,
        ReportStatus.APPROVED,
        actor=signature or "Master",
        now=now,
        remarks=approval_remarks,
    )
    approved = replace(
        header,
        status=ReportStatus.APPROVED,
        master_signature=signature or None,
        signed_at=now,
        remarks=remarks,
        updated_at=now,
    )
    return Result.success(Transition(header=approved, history=history))


def reject(header: ReportHeader, *, reason: str, actor: str, now: datetime) -> Result[Transition]:
    """SUBMITTED -> REJECTED with a mandatory reason."""
    if header.is_deleted:
        return _deleted("reject")
    if header.status is not ReportStatus.SUBMITTED:
        return _bad_status(f"Cannot reject report with status {header.status.value}", header.status)
    if not (reason or "").strip():
        return Result.failure(ErrorKind.VALIDATION, "Rejection reason is required")

    history = _history(header, ReportStatus.REJECTED, actor=actor, now=now, remarks=reason)
    rejected = replace(
        header,
        status=ReportStatus.REJECTED,
        remarks=append_marker(header.remarks, f"[REJECTED] {reason}"),
        updated_at=now,
    )
    return Result.success(Transition(header=rejected, history=history))


def reopen(
    header: ReportHeader, *, corrections: str, actor: str, now: datetime
) -> Result[Transition]:
    """REJECTED -> DRAFT, recording the corrections the crew must make."""
    if header.is_deleted:
        return _deleted("reopen")
    if header.status is not ReportStatus.REJECTED:
        return _bad_status(
            f"Only rejected reports can be reopened. Current status: {header.status.value}",
            header.status,
        )
    if not (corrections or "").strip():
        return Result.failure(ErrorKind.VALIDATION, "Corrections description is required")

    marker = f"[REOPENED {now:%Y-%m-%d %H:%M} UTC by {actor}] Corrections to be made: {corrections}"
    history = _history(
        header,
        ReportStatus.DRAFT,
        actor=actor,
        now=now,
        remarks=f"Reopened after rejection. Corrections: {corrections}",
    )
    reopened = replace(
        header,
        status=ReportStatus.DRAFT,
        remarks=append_marker(header.remarks, marker),
        updated_at=now,
    )
    return Result.success(Transition(header=reopened, history=history))


def transmit(
    header: ReportHeader,
    *,
    method: TransmissionMethod,
    recipients: Sequence[str],
    actor: str,
    now: datetime,
) -> Result[Transition]:
    """APPROVED -> TRANSMITTED.

    Delivery itself is stubbed: the transition carries a SUCCESS
    transmission-log row with a ``TXN-`` confirmation.
    """
    if header.is_deleted:
        return _deleted("transmit")
    if header.status is not ReportStatus.APPROVED:
        return _bad_status(
            f"Cannot transmit report with status {header.status.value}. Must be APPROVED.",
            header.status,
        )
    if header.id is None:
        raise ValueError("transition requires a persisted header")

    recipients = tuple(recipients)
    history = _history(
        header,
        ReportStatus.TRANSMITTED,
        actor=actor,
        now=now,
        remarks=f"Transmitted via {method.value} to {len(recipients)} recipients",
    )
    log = TransmissionLogEntry(
        id=None,
        header_id=header.id,
        method=method,
        recipients=recipients,
        status=TransmissionStatus.SUCCESS,
        transmitted_at=now,
        confirmation_number=confirmation_number(now),
    )
    transmitted = replace(
        header,
        status=ReportStatus.TRANSMITTED,
        is_transmitted=True,
        transmitted_at=now,
        updated_at=now,
    )
    return Result.success(Transition(header=transmitted, history=history, transmission=log))


# ---------------------------------------------------------------------------
# Non-transition guards


def ensure_editable(header: ReportHeader, *, verb: str = "edit") -> Result[ReportHeader]:
    """Only visible DRAFT reports accept payload changes."""
    if header.is_deleted:
        return Result.failure(ErrorKind.INVALID_STATE_TRANSITION, f"Cannot {verb} deleted report")
    if header.status is not ReportStatus.DRAFT:
        return Result.failure(
            ErrorKind.INVALID_STATE_TRANSITION,
            f"Cannot {verb} report with status {header.status.value}. "
            "Only DRAFT reports can be edited.",
            status=header.status.value,
        )
    return Result.success(header)


def soft_delete(
    header: ReportHeader, *, actor: str, reason: str, now: datetime
) -> Result[ReportHeader]:
    """Hide a DRAFT report while keeping the row for retention."""
    if header.is_deleted:
        return Result.failure(ErrorKind.CONFLICT, "Report is already deleted")
    if header.status is not ReportStatus.DRAFT:
        return Result.failure(
            ErrorKind.INVALID_STATE_TRANSITION,
            f"Cannot delete report with status {header.status.value}. "
            "Only DRAFT reports can be deleted.",
            status=header.status.value,
        )
    if not (reason or "").strip():
        return Result.failure(ErrorKind.VALIDATION, "Deletion reason is required")
    return Result.success(
        replace(header, deleted_at=now, deleted_by=actor, deleted_reason=reason, updated_at=now)
    )


def restore(header: ReportHeader, *, now: datetime) -> Result[ReportHeader]:
    """Clear soft-delete markers; allowed for any status."""
    if not header.is_deleted:
        return Result.failure(ErrorKind.CONFLICT, "Report is not deleted")
    return Result.success(
        replace(header, deleted_at=None, deleted_by=None, deleted_reason=None, updated_at=now)
    )


def ensure_amendable(header: ReportHeader) -> Result[ReportHeader]:
    """Amendments chain only to visible APPROVED or TRANSMITTED reports."""
    if header.is_deleted:
        return Result.failure(ErrorKind.INVALID_STATE_TRANSITION, "Cannot amend deleted report")
    if not header.status.is_amendable:
        return Result.failure(
            ErrorKind.INVALID_STATE_TRANSITION,
            "Only APPROVED or TRANSMITTED reports can be amended. "
            f"Current status: {header.status.value}",
            status=header.status.value,
        )
    return Result.success(header)
