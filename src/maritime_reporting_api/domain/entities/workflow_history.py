# src/maritime_reporting_api/domain/entities/workflow_history.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Audit trail entry for a report status transition (append-only)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from maritime_reporting_api.domain.enums.reporting import ReportStatus


@dataclass(frozen=True, slots=True)
class WorkflowHistoryEntry:
    """One status change of one report.

    Args:
        id: Store-assigned identifier; ``None`` until persisted.
        header_id: Report the transition applies to.
        from_status: Status before the transition.
        to_status: Status after the transition.
        changed_by: Acting user.
        changed_at: Transition instant.
        remarks: Optional context (reason, corrections, transmission summary).
    """

    id: int | None
    header_id: int
    from_status: ReportStatus
    to_status: ReportStatus
    changed_by: str
    changed_at: datetime
    remarks: str | None = None
