# src/maritime_reporting_api/adapters/repositories/report_types_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report-type catalog repository (SQLAlchemy, read-only)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from maritime_reporting_api.adapters.repositories.base_repository import BaseRepository
from maritime_reporting_api.domain.entities.report_type import ReportType
from maritime_reporting_api.infrastructure.database.models.reporting import ReportTypeModel


def _to_domain(row: ReportTypeModel) -> ReportType:
    return ReportType(
        id=row.id,
        code=row.type_code,
        name=row.type_name,
        category=row.category,
        frequency=row.frequency,
        description=row.description,
        regulation_reference=row.regulation_reference,
        is_mandatory=row.is_mandatory,
        requires_master_signature=row.requires_master_signature,
        is_active=row.is_active,
    )


class SqlAlchemyReportTypesRepository(BaseRepository[ReportTypeModel]):
    """Rows of ``report_types`` mapped to :class:`ReportType`."""

    _MODEL_NAME = "report_types"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    async def list_types(self, *, active_only: bool = True) -> list[ReportType]:
        async with self._observe("list_types"):
            stmt = select(ReportTypeModel).order_by(ReportTypeModel.type_code.asc())
            if active_only:
                stmt = stmt.where(ReportTypeModel.is_active.is_(True))
            return [_to_domain(r) for r in await self.fetch_all(stmt)]

    async def get_by_code(self, code: str) -> ReportType | None:
        async with self._observe("get_by_code"):
            stmt = select(ReportTypeModel).where(ReportTypeModel.type_code == code.upper())
            row = await self.fetch_optional(stmt)
            return _to_domain(row) if row is not None else None

    async def get_by_id(self, type_id: int) -> ReportType | None:
        async with self._observe("get_by_id"):
            row = await self._session.get(ReportTypeModel, type_id)
            return _to_domain(row) if row is not None else None
