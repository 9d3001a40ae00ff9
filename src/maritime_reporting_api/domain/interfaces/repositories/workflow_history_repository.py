# src/maritime_reporting_api/domain/interfaces/repositories/workflow_history_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Workflow-history repository interface (append-only audit trail)."""

from __future__ import annotations

from typing import Protocol

from maritime_reporting_api.domain.entities.workflow_history import WorkflowHistoryEntry


class WorkflowHistoryRepository(Protocol):
    """Audit rows for report status transitions.

    There is no update or delete operation; entries are immutable once
    written.
    """

    async def add(self, entry: WorkflowHistoryEntry) -> WorkflowHistoryEntry:
        """Stage one entry in the caller's transaction and return it with its id."""
        raise NotImplementedError

    async def list_for_header(self, header_id: int) -> list[WorkflowHistoryEntry]:
        """Return the header's entries, newest first."""
        raise NotImplementedError
