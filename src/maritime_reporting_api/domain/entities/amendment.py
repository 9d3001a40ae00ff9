# src/maritime_reporting_api/domain/entities/amendment.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Amendment entities.

Purpose:
    Post-approval corrections chained to an APPROVED or TRANSMITTED report.
    The original report stays the system of record; an amendment records the
    intended corrections next to it and runs its own small workflow
    (DRAFT -> APPROVED, then a transmitted flag).

Layer:
    domain
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from maritime_reporting_api.domain.enums.reporting import AmendmentStatus


@dataclass(frozen=True, slots=True)
class FieldCorrection:
    """Old and new value of one corrected field."""

    old_value: Any = None
    new_value: Any = None


@dataclass(frozen=True, slots=True)
class Amendment:
    """Correction record for an approved report.

    Args:
        id: Store-assigned identifier; ``None`` until persisted.
        original_header_id: Report being corrected.
        amendment_number: 1-based sequence per original report.
        amendment_reason: Why the correction is needed.
        corrected_fields: Field name to old/new values.
        amended_by: Actor who raised the amendment.
        status: Amendment workflow status.
        amended_report_data: Optional full corrected payload snapshot.
        master_signature: Signature captured on approval.
        signed_at: Approval instant.
        is_transmitted: Whether the amendment reached shore.
        transmitted_at: Transmission instant.
        remarks: Free text with ``[APPROVED]`` markers.
        created_at: Creation instant.
        updated_at: Last modification instant.
    """

    id: int | None
    original_header_id: int
    amendment_number: int
    amendment_reason: str
    corrected_fields: Mapping[str, FieldCorrection]
    amended_by: str
    status: AmendmentStatus = AmendmentStatus.DRAFT
    amended_report_data: Mapping[str, Any] | None = None
    master_signature: str | None = None
    signed_at: datetime | None = None
    is_transmitted: bool = False
    transmitted_at: datetime | None = None
    remarks: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    original_report_number: str | None = field(default=None, compare=False)
