# src/maritime_reporting_api/domain/entities/report.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report header and aggregate entities.

Purpose:
    The header carries the regulated lifecycle (status, signatures,
    transmission state, soft-delete markers); the aggregate pairs it with the
    typed child payload so both are persisted as one logical unit.

Layer:
    domain

Notes:
    Entities are immutable. Workflow operations derive a new header with
    ``dataclasses.replace`` and hand it back to the repository, which checks
    ``version`` on write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from maritime_reporting_api.domain.entities.report_payloads import ReportPayload
from maritime_reporting_api.domain.enums.reporting import ReportKind, ReportStatus


@dataclass(frozen=True, slots=True)
class ReportHeader:
    """Common header shared by every report kind.

    Args:
        id: Store-assigned identifier; ``None`` until persisted.
        report_number: Unique ``PREFIX-YYYYMMDD-NNNN`` identifier.
        report_type_id: Foreign key into the report-type registry.
        kind: Report kind, which selects the child payload table.
        report_date_time: Instant the report refers to.
        status: Current lifecycle status.
        prepared_by: Officer who prepared the report.
        voyage_id: Optional voyage reference.
        master_signature: Signature captured on approval.
        signed_at: Approval instant.
        is_transmitted: Whether the report reached shore.
        transmitted_at: Transmission instant.
        remarks: Free text, may embed ``[VALIDATION WARNINGS]`` and workflow markers.
        created_at: Creation instant.
        updated_at: Last modification instant.
        deleted_at: Soft-delete instant; ``None`` while visible.
        deleted_by: Actor who soft-deleted the report.
        deleted_reason: Reason supplied at soft delete.
        version: Optimistic concurrency counter, bumped by the store on each write.
    """

    id: int | None
    report_number: str
    report_type_id: int
    kind: ReportKind
    report_date_time: datetime
    status: ReportStatus
    prepared_by: str | None = None
    voyage_id: int | None = None
    master_signature: str | None = None
    signed_at: datetime | None = None
    is_transmitted: bool = False
    transmitted_at: datetime | None = None
    remarks: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    deleted_reason: str | None = None
    version: int = 1

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True, slots=True)
class Report:
    """Header plus typed payload."""

    header: ReportHeader
    payload: ReportPayload

    @property
    def id(self) -> int | None:
        return self.header.id

    @property
    def kind(self) -> ReportKind:
        return self.header.kind
