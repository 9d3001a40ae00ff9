# src/maritime_reporting_api/application/schemas/dto/report_views.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Application DTOs returned by the reporting use cases.

Synopsis:
    Read models for created reports, summaries, full reports, the audit
    trail, transmission status, retention records, amendments, statistics
    and the report-type catalog. Mapping helpers turn domain entities into
    these DTOs so adapters never touch entities directly.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from pydantic import ConfigDict, Field

from maritime_reporting_api.application.schemas.dto.base import BaseDTO
from maritime_reporting_api.domain.entities.amendment import Amendment
from maritime_reporting_api.domain.entities.report import Report, ReportHeader
from maritime_reporting_api.domain.entities.report_type import ReportType
from maritime_reporting_api.domain.entities.workflow_history import WorkflowHistoryEntry


class MessageDTO(BaseDTO):
    """Plain acknowledgement of a workflow action."""

    message: str
    warnings: list[str] = Field(default_factory=list)


class ReportCreatedDTO(BaseDTO):
    """Outcome of a successful create."""

    report_id: int
    report_number: str
    message: str
    warnings: list[str] = Field(default_factory=list)


class ReportSummaryDTO(BaseDTO):
    """Listing row for one visible report."""

    id: int
    report_number: str
    report_type_id: int
    report_type_name: str
    report_type_code: str
    report_date_time: datetime
    status: str
    voyage_id: int | None = None
    prepared_by: str | None = None
    master_signature: str | None = None
    signed_at: datetime | None = None
    is_transmitted: bool
    transmitted_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_header(cls, header: ReportHeader, report_type: ReportType | None) -> ReportSummaryDTO:
        """Map a header plus its registry entry (may be unknown)."""
        return cls(
            id=header.id or 0,
            report_number=header.report_number,
            report_type_id=header.report_type_id,
            report_type_name=report_type.name if report_type else "",
            report_type_code=report_type.code if report_type else header.kind.type_code,
            report_date_time=header.report_date_time,
            status=header.status.value,
            voyage_id=header.voyage_id,
            prepared_by=header.prepared_by,
            master_signature=header.master_signature,
            signed_at=header.signed_at,
            is_transmitted=header.is_transmitted,
            transmitted_at=header.transmitted_at,
            created_at=header.created_at,
        )


class ReportDetailDTO(BaseDTO):
    """Full report: header fields plus the typed payload fields."""

    model_config = ConfigDict(extra="forbid")

    id: int
    report_number: str
    kind: str
    status: str
    report_date_time: datetime
    voyage_id: int | None = None
    prepared_by: str | None = None
    master_signature: str | None = None
    signed_at: datetime | None = None
    is_transmitted: bool
    transmitted_at: datetime | None = None
    remarks: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int
    payload: dict[str, Any]

    @classmethod
    def from_report(cls, report: Report) -> ReportDetailDTO:
        header = report.header
        return cls(
            id=header.id or 0,
            report_number=header.report_number,
            kind=header.kind.value,
            status=header.status.value,
            report_date_time=header.report_date_time,
            voyage_id=header.voyage_id,
            prepared_by=header.prepared_by,
            master_signature=header.master_signature,
            signed_at=header.signed_at,
            is_transmitted=header.is_transmitted,
            transmitted_at=header.transmitted_at,
            remarks=header.remarks,
            created_at=header.created_at,
            updated_at=header.updated_at,
            version=header.version,
            payload=asdict(report.payload),
        )


class ReportListDTO(BaseDTO):
    """One page of summaries."""

    items: list[ReportSummaryDTO]
    total: int
    page: int
    page_size: int


class TransmissionStatusDTO(BaseDTO):
    """Transmission state of a report and its latest attempt."""

    report_id: int
    report_number: str
    is_transmitted: bool
    transmitted_at: datetime | None = None
    transmission_attempts: int
    last_transmission_status: str | None = None
    last_transmission_time: datetime | None = None
    error_message: str | None = None


class WorkflowHistoryEntryDTO(BaseDTO):
    """One audit row."""

    id: int
    from_status: str
    to_status: str
    changed_by: str
    changed_at: datetime
    remarks: str | None = None

    @classmethod
    def from_entry(cls, entry: WorkflowHistoryEntry) -> WorkflowHistoryEntryDTO:
        return cls(
            id=entry.id or 0,
            from_status=entry.from_status.value,
            to_status=entry.to_status.value,
            changed_by=entry.changed_by,
            changed_at=entry.changed_at,
            remarks=entry.remarks,
        )


class WorkflowHistoryDTO(BaseDTO):
    """Audit trail of one report, newest first."""

    report_id: int
    total_changes: int
    history: list[WorkflowHistoryEntryDTO]


class SoftDeleteResultDTO(BaseDTO):
    """Acknowledgement of a soft delete."""

    message: str
    report_id: int
    deleted_by: str
    deleted_at: datetime


class RestoreResultDTO(BaseDTO):
    """Acknowledgement of a restore."""

    message: str
    report_id: int
    restored_by: str
    restored_at: datetime


class DeletedReportDTO(BaseDTO):
    """Retention record of a soft-deleted report."""

    id: int
    report_number: str
    report_date_time: datetime
    status: str
    deleted_at: datetime
    deleted_by: str
    deleted_reason: str | None = None

    @classmethod
    def from_header(cls, header: ReportHeader) -> DeletedReportDTO:
        return cls(
            id=header.id or 0,
            report_number=header.report_number,
            report_date_time=header.report_date_time,
            status=header.status.value,
            deleted_at=header.deleted_at or header.updated_at or header.report_date_time,
            deleted_by=header.deleted_by or "",
            deleted_reason=header.deleted_reason,
        )


class DeletedReportsDTO(BaseDTO):
    """Soft-deleted reports, newest deletion first."""

    total_deleted: int
    reports: list[DeletedReportDTO]


class AmendmentDTO(BaseDTO):
    """Amendment read model."""

    id: int
    original_report_id: int
    original_report_number: str | None = None
    amendment_number: int
    amendment_reason: str
    corrected_fields: dict[str, dict[str, Any]]
    amended_report_data: dict[str, Any] | None = None
    amended_by: str
    status: str
    master_signature: str | None = None
    signed_at: datetime | None = None
    is_transmitted: bool
    transmitted_at: datetime | None = None
    remarks: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_amendment(cls, amendment: Amendment) -> AmendmentDTO:
        return cls(
            id=amendment.id or 0,
            original_report_id=amendment.original_header_id,
            original_report_number=amendment.original_report_number,
            amendment_number=amendment.amendment_number,
            amendment_reason=amendment.amendment_reason,
            corrected_fields={
                name: {"old_value": c.old_value, "new_value": c.new_value}
                for name, c in amendment.corrected_fields.items()
            },
            amended_report_data=(
                dict(amendment.amended_report_data) if amendment.amended_report_data else None
            ),
            amended_by=amendment.amended_by,
            status=amendment.status.value,
            master_signature=amendment.master_signature,
            signed_at=amendment.signed_at,
            is_transmitted=amendment.is_transmitted,
            transmitted_at=amendment.transmitted_at,
            remarks=amendment.remarks,
            created_at=amendment.created_at,
        )


class AmendmentCreatedDTO(BaseDTO):
    """Outcome of a successful amendment create."""

    message: str
    amendment_id: int
    amendment_number: int


class AmendmentListDTO(BaseDTO):
    """Amendments of one report ordered by number."""

    report_id: int
    total_amendments: int
    amendments: list[AmendmentDTO]


class ReportStatisticsDTO(BaseDTO):
    """Dashboard counters over visible reports."""

    total_reports: int
    draft_reports: int
    submitted_reports: int
    approved_reports: int
    transmitted_reports: int
    pending_approval: int
    pending_transmission: int
    failed_transmissions: int
    reports_by_type: dict[str, int]
    reports_last_7_days: dict[date, int]


class ReportTypeDTO(BaseDTO):
    """Report-type catalog entry."""

    id: int
    type_code: str
    type_name: str
    category: str
    description: str | None = None
    regulation_reference: str | None = None
    frequency: str
    is_mandatory: bool
    requires_master_signature: bool
    is_active: bool

    @classmethod
    def from_entity(cls, report_type: ReportType) -> ReportTypeDTO:
        return cls(
            id=report_type.id,
            type_code=report_type.code,
            type_name=report_type.name,
            category=report_type.category,
            description=report_type.description,
            regulation_reference=report_type.regulation_reference,
            frequency=report_type.frequency,
            is_mandatory=report_type.is_mandatory,
            requires_master_signature=report_type.requires_master_signature,
            is_active=report_type.is_active,
        )
