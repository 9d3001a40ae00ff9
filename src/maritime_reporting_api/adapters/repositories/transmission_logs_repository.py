# src/maritime_reporting_api/adapters/repositories/transmission_logs_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Transmission-log repository (SQLAlchemy)."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from maritime_reporting_api.adapters.repositories.base_repository import BaseRepository
from maritime_reporting_api.domain.entities.transmission_log import TransmissionLogEntry
from maritime_reporting_api.domain.enums.reporting import TransmissionMethod, TransmissionStatus
from maritime_reporting_api.infrastructure.database.models.reporting import (
    ReportHeaderModel,
    TransmissionLogModel,
)


def _to_domain(row: TransmissionLogModel) -> TransmissionLogEntry:
    return TransmissionLogEntry(
        id=row.id,
        header_id=row.header_id,
        method=TransmissionMethod(row.transmission_method),
        recipients=tuple(row.recipients or ()),
        status=TransmissionStatus(row.transmission_status),
        transmitted_at=row.transmitted_at,
        confirmation_number=row.confirmation_number,
        error_message=row.error_message,
    )


class SqlAlchemyTransmissionLogsRepository(BaseRepository[TransmissionLogModel]):
    """Attempts in ``transmission_logs``."""

    _MODEL_NAME = "transmission_logs"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    async def add(self, entry: TransmissionLogEntry) -> TransmissionLogEntry:
        async with self._observe("add"):
            row = TransmissionLogModel(
                header_id=entry.header_id,
                transmission_method=entry.method.value,
                recipients=list(entry.recipients),
                transmission_status=entry.status.value,
                transmitted_at=entry.transmitted_at,
                confirmation_number=entry.confirmation_number,
                error_message=entry.error_message,
            )
            self._session.add(row)
            await self._session.flush()
            return replace(entry, id=row.id)

    async def list_for_header(self, header_id: int) -> list[TransmissionLogEntry]:
        async with self._observe("list_for_header"):
            t = TransmissionLogModel
            stmt = self.order_by_latest(
                select(t).where(t.header_id == header_id), t.transmitted_at, t.id
            )
            return [_to_domain(r) for r in await self.fetch_all(stmt)]

    async def count_failed(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> int:
        async with self._observe("count_failed"):
            t, h = TransmissionLogModel, ReportHeaderModel
            stmt = (
                select(func.count(t.id))
                .join(h, h.id == t.header_id)
                .where(
                    t.transmission_status == TransmissionStatus.FAILED.value,
                    h.deleted_at.is_(None),
                )
            )
            if from_date is not None:
                stmt = stmt.where(h.report_date_time >= from_date)
            if to_date is not None:
                stmt = stmt.where(h.report_date_time <= to_date)
            res = await self._session.execute(stmt)
            return int(res.scalar_one())
