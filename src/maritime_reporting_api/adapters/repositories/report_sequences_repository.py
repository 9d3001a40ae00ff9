# src/maritime_reporting_api/adapters/repositories/report_sequences_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report-number counters (SQLAlchemy).

Purpose:
    Allocate the next value of a ``PREFIX-YYYYMMDD`` counter by locking its
    row with ``SELECT ... FOR UPDATE``. The first allocation of a day inserts
    the row inside a savepoint; losing that insert race to another writer
    rolls back only the savepoint and the row is then locked as usual.

Layer:
    adapters/repositories

Notes:
    - Never commits. The row lock is held until the creating transaction
      ends, so numbers are gap-free and strictly increasing per key.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from maritime_reporting_api.adapters.repositories.base_repository import (
    BaseRepository,
    is_transient,
    is_unique_violation,
)
from maritime_reporting_api.domain.exceptions.reporting import TransientStoreConflictError
from maritime_reporting_api.infrastructure.database.models.reporting import ReportSequenceModel


class SqlAlchemyReportSequencesRepository(BaseRepository[ReportSequenceModel]):
    """Row-locked counters in ``report_sequences``."""

    _MODEL_NAME = "report_sequences"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    async def _locked(self, key: str) -> ReportSequenceModel | None:
        stmt = (
            select(ReportSequenceModel)
            .where(ReportSequenceModel.sequence_key == key)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return await self.fetch_optional(stmt)

    async def _create(self, key: str) -> None:
        try:
            async with self._session.begin_nested():
                self._session.add(ReportSequenceModel(sequence_key=key, last_value=0))
                await self._session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise

    async def next_value(self, key: str) -> int:
        async with self._observe("next_value"):
            try:
                row = await self._locked(key)
                if row is None:
                    await self._create(key)
                    row = await self._locked(key)
                if row is None:
                    raise TransientStoreConflictError(
                        f"Counter row for {key} vanished", details={"key": key}
                    )
                row.last_value += 1
                row.updated_at = self.utc_now()
                await self._session.flush()
            except DBAPIError as exc:
                if is_transient(exc):
                    raise TransientStoreConflictError(
                        f"Counter {key} hit a transient conflict", details={"key": key}
                    ) from exc
                raise
            return row.last_value
