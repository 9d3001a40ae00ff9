# src/maritime_reporting_api/adapters/repositories/workflow_history_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Workflow-history repository (SQLAlchemy, append-only)."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from maritime_reporting_api.adapters.repositories.base_repository import BaseRepository
from maritime_reporting_api.domain.entities.workflow_history import WorkflowHistoryEntry
from maritime_reporting_api.domain.enums.reporting import ReportStatus
from maritime_reporting_api.infrastructure.database.models.reporting import WorkflowHistoryModel


class SqlAlchemyWorkflowHistoryRepository(BaseRepository[WorkflowHistoryModel]):
    """Audit rows in ``workflow_history``."""

    _MODEL_NAME = "workflow_history"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    async def add(self, entry: WorkflowHistoryEntry) -> WorkflowHistoryEntry:
        async with self._observe("add"):
            row = WorkflowHistoryModel(
                header_id=entry.header_id,
                from_status=entry.from_status.value,
                to_status=entry.to_status.value,
                changed_by=entry.changed_by,
                changed_at=entry.changed_at,
                remarks=entry.remarks,
            )
            self._session.add(row)
            await self._session.flush()
            return replace(entry, id=row.id)

    async def list_for_header(self, header_id: int) -> list[WorkflowHistoryEntry]:
        async with self._observe("list_for_header"):
            h = WorkflowHistoryModel
            stmt = self.order_by_latest(select(h).where(h.header_id == header_id), h.changed_at, h.id)
            return [
                WorkflowHistoryEntry(
                    id=r.id,
                    header_id=r.header_id,
                    from_status=ReportStatus(r.from_status),
                    to_status=ReportStatus(r.to_status),
                    changed_by=r.changed_by,
                    changed_at=r.changed_at,
                    remarks=r.remarks,
                )
                for r in await self.fetch_all(stmt)
            ]
