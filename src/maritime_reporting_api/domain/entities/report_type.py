# src/maritime_reporting_api/domain/entities/report_type.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report type metadata entity.

Purpose:
    Read-only catalog entry describing one regulated report kind: display
    name, category, regulation reference, submission frequency and whether
    the Master's signature is mandatory for approval.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReportType:
    """Registry entry for a report kind.

    Args:
        id: Primary key of the report type.
        code: Stable type code (``NOON``, ``DEPARTURE`` ...).
        name: Display name (e.g. "Noon Report").
        category: Regulatory grouping (e.g. "OPERATIONAL", "ENVIRONMENTAL").
        frequency: Submission cadence label ("DAILY", "PER_VOYAGE" ...).
        description: Optional long description.
        regulation_reference: Optional convention reference (e.g. "MARPOL Annex VI").
        is_mandatory: Whether the report is statutorily required.
        requires_master_signature: Whether approval needs a Master signature.
        is_active: Inactive types are hidden from the active catalog.
    """

    id: int
    code: str
    name: str
    category: str
    frequency: str
    description: str | None = None
    regulation_reference: str | None = None
    is_mandatory: bool = True
    requires_master_signature: bool = True
    is_active: bool = True
