# src/maritime_reporting_api/adapters/repositories/amendments_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Amendment repository (SQLAlchemy).

Notes:
    - ``(original_header_id, amendment_number)`` is unique; a collision on
      insert is raised as :class:`DuplicateAmendmentNumberError` so the
      caller can retry with a fresh number.
    - Reads join the original header to carry its report number.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from maritime_reporting_api.adapters.repositories.base_repository import (
    BaseRepository,
    is_unique_violation,
)
from maritime_reporting_api.domain.entities.amendment import Amendment, FieldCorrection
from maritime_reporting_api.domain.enums.reporting import AmendmentStatus
from maritime_reporting_api.domain.exceptions.reporting import DuplicateAmendmentNumberError
from maritime_reporting_api.infrastructure.database.models.reporting import (
    AmendmentModel,
    ReportHeaderModel,
)


def _to_domain(row: AmendmentModel, report_number: str | None) -> Amendment:
    return Amendment(
        id=row.id,
        original_header_id=row.original_header_id,
        amendment_number=row.amendment_number,
        amendment_reason=row.amendment_reason,
        corrected_fields={
            name: FieldCorrection(old_value=v.get("old_value"), new_value=v.get("new_value"))
            for name, v in (row.corrected_fields or {}).items()
        },
        amended_by=row.amended_by,
        status=AmendmentStatus(row.status),
        amended_report_data=row.amended_report_data,
        master_signature=row.master_signature,
        signed_at=row.signed_at,
        is_transmitted=row.is_transmitted,
        transmitted_at=row.transmitted_at,
        remarks=row.remarks,
        created_at=row.created_at,
        updated_at=row.updated_at,
        original_report_number=report_number,
    )


class SqlAlchemyAmendmentsRepository(BaseRepository[AmendmentModel]):
    """Rows of ``report_amendments``."""

    _MODEL_NAME = "report_amendments"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    @staticmethod
    def _with_number() -> Select[Any]:
        return select(AmendmentModel, ReportHeaderModel.report_number).join(
            ReportHeaderModel, ReportHeaderModel.id == AmendmentModel.original_header_id
        )

    async def next_number(self, header_id: int) -> int:
        async with self._observe("next_number"):
            stmt = select(func.coalesce(func.max(AmendmentModel.amendment_number), 0)).where(
                AmendmentModel.original_header_id == header_id
            )
            res = await self._session.execute(stmt)
            return int(res.scalar_one()) + 1

    async def add(self, amendment: Amendment) -> Amendment:
        async with self._observe("add"):
            row = AmendmentModel(
                original_header_id=amendment.original_header_id,
                amendment_number=amendment.amendment_number,
                amendment_reason=amendment.amendment_reason,
                corrected_fields={
                    name: {"old_value": c.old_value, "new_value": c.new_value}
                    for name, c in amendment.corrected_fields.items()
                },
                amended_report_data=(
                    dict(amendment.amended_report_data)
                    if amendment.amended_report_data is not None
                    else None
                ),
                amended_by=amendment.amended_by,
                status=amendment.status.value,
                remarks=amendment.remarks,
                created_at=amendment.created_at or self.utc_now(),
                updated_at=amendment.updated_at or self.utc_now(),
            )
            self._session.add(row)
            try:
                await self._session.flush()
            except IntegrityError as exc:
                if is_unique_violation(exc):
                    raise DuplicateAmendmentNumberError(
                        "Amendment number already taken",
                        details={
                            "report_id": amendment.original_header_id,
                            "amendment_number": amendment.amendment_number,
                        },
                    ) from exc
                raise
            return _to_domain(row, amendment.original_report_number)

    async def get(
        self, header_id: int, amendment_id: int, *, for_update: bool = False
    ) -> Amendment | None:
        async with self._observe("get"):
            stmt = self._with_number().where(
                AmendmentModel.id == amendment_id,
                AmendmentModel.original_header_id == header_id,
            )
            if for_update:
                stmt = stmt.with_for_update(of=AmendmentModel)
            res = await self._session.execute(stmt)
            found = res.first()
            if found is None:
                return None
            row, report_number = found
            return _to_domain(row, report_number)

    async def list_for_header(self, header_id: int) -> list[Amendment]:
        async with self._observe("list_for_header"):
            stmt = (
                self._with_number()
                .where(AmendmentModel.original_header_id == header_id)
                .order_by(AmendmentModel.amendment_number.asc())
            )
            res = await self._session.execute(stmt)
            return [_to_domain(row, number) for row, number in res.all()]

    async def update(self, amendment: Amendment) -> Amendment:
        async with self._observe("update"):
            row = await self._session.get(AmendmentModel, amendment.id)
            if row is None:
                raise LookupError(f"Amendment {amendment.id} does not exist")
            row.status = amendment.status.value
            row.master_signature = amendment.master_signature
            row.signed_at = amendment.signed_at
            row.is_transmitted = amendment.is_transmitted
            row.transmitted_at = amendment.transmitted_at
            row.remarks = amendment.remarks
            row.updated_at = amendment.updated_at or self.utc_now()
            await self._session.flush()
            return _to_domain(row, amendment.original_report_number)
