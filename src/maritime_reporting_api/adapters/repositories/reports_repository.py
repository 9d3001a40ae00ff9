# src/maritime_reporting_api/adapters/repositories/reports_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report aggregate repository (SQLAlchemy).

Purpose:
    Persist report headers and their typed child rows, answer the
    uniqueness, listing and statistics queries, and translate store-level
    conflicts into domain exceptions.

Layer:
    adapters/repositories

Notes:
    - Every read except ``include_deleted`` / ``list_deleted`` filters
      ``deleted_at IS NULL``.
    - ``report_headers.version`` is SQLAlchemy's ``version_id_col``; a write
      against a moved version surfaces as :class:`ConcurrencyConflictError`.
    - The per-period partial unique indexes surface as
      :class:`DuplicatePeriodReportError` on insert, edit and restore.
"""

from __future__ import annotations

from dataclasses import asdict, fields
from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from sqlalchemy import Date, Select, cast, exists, func, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from maritime_reporting_api.adapters.repositories.base_repository import (
    BaseRepository,
    constraint_name,
    is_transient,
    is_unique_violation,
)
from maritime_reporting_api.domain.entities.report import Report, ReportHeader
from maritime_reporting_api.domain.entities.report_payloads import (
    PAYLOAD_TYPES,
    ReportPayload,
    kind_of,
)
from maritime_reporting_api.domain.enums.reporting import ReportKind, ReportStatus
from maritime_reporting_api.domain.exceptions.reporting import (
    ConcurrencyConflictError,
    DuplicatePeriodReportError,
    DuplicateReportNumberError,
    TransientStoreConflictError,
)
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import ReportFilter
from maritime_reporting_api.infrastructure.database.models.reporting import (
    ArrivalReportModel,
    BunkerReportModel,
    MOVEMENT_PER_VOYAGE_INDEX,
    NOON_PER_DAY_INDEX,
    DepartureReportModel,
    NoonReportModel,
    PositionReportModel,
    ReportHeaderModel,
)

_PERIOD_INDEXES = frozenset({NOON_PER_DAY_INDEX, MOVEMENT_PER_VOYAGE_INDEX})


def _period_conflict(
    exc: IntegrityError, header: ReportHeader
) -> DuplicatePeriodReportError | None:
    if not is_unique_violation(exc) or constraint_name(exc) not in _PERIOD_INDEXES:
        return None
    return DuplicatePeriodReportError(
        f"A visible {header.kind.label} report already covers this period",
        details={"kind": header.kind.value, "voyage_id": header.voyage_id},
    )


_CHILD_MODELS: dict[ReportKind, type[Any]] = {
    ReportKind.NOON: NoonReportModel,
    ReportKind.DEPARTURE: DepartureReportModel,
    ReportKind.ARRIVAL: ArrivalReportModel,
    ReportKind.BUNKER: BunkerReportModel,
    ReportKind.POSITION: PositionReportModel,
}

# Header columns a workflow step may change.
_MUTABLE_HEADER_FIELDS = (
    "report_date_time",
    "status",
    "prepared_by",
    "voyage_id",
    "master_signature",
    "signed_at",
    "is_transmitted",
    "transmitted_at",
    "remarks",
    "updated_at",
    "deleted_at",
    "deleted_by",
    "deleted_reason",
)


def _to_header(row: ReportHeaderModel) -> ReportHeader:
    return ReportHeader(
        id=row.id,
        report_number=row.report_number,
        report_type_id=row.report_type_id,
        kind=ReportKind(row.kind),
        report_date_time=row.report_date_time,
        status=ReportStatus(row.status),
        prepared_by=row.prepared_by,
        voyage_id=row.voyage_id,
        master_signature=row.master_signature,
        signed_at=row.signed_at,
        is_transmitted=row.is_transmitted,
        transmitted_at=row.transmitted_at,
        remarks=row.remarks,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
        deleted_by=row.deleted_by,
        deleted_reason=row.deleted_reason,
        version=row.version,
    )


def _to_payload(kind: ReportKind, child: Any) -> ReportPayload:
    payload_type = PAYLOAD_TYPES[kind]
    return payload_type(**{f.name: getattr(child, f.name) for f in fields(payload_type)})


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=UTC)
    return start, start + timedelta(days=1)


class SqlAlchemyReportsRepository(BaseRepository[ReportHeaderModel]):
    """SQLAlchemy-backed report aggregate repository."""

    _MODEL_NAME = "report_headers"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _visible(stmt: Select[Any]) -> Select[Any]:
        return stmt.where(ReportHeaderModel.deleted_at.is_(None))

    @classmethod
    def _filtered(cls, stmt: Select[Any], filters: ReportFilter) -> Select[Any]:
        h = ReportHeaderModel
        stmt = cls._visible(stmt)
        if filters.status is not None:
            stmt = stmt.where(h.status == filters.status.value)
        if filters.report_type_id is not None:
            stmt = stmt.where(h.report_type_id == filters.report_type_id)
        if filters.voyage_id is not None:
            stmt = stmt.where(h.voyage_id == filters.voyage_id)
        if filters.from_date is not None:
            stmt = stmt.where(h.report_date_time >= filters.from_date)
        if filters.to_date is not None:
            stmt = stmt.where(h.report_date_time <= filters.to_date)
        return stmt

    async def _exists(self, stmt: Select[Any]) -> bool:
        res = await self._session.execute(select(exists(stmt)))
        return bool(res.scalar())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_header(
        self,
        header_id: int,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> ReportHeader | None:
        async with self._observe("get_header"):
            stmt = select(ReportHeaderModel).where(ReportHeaderModel.id == header_id)
            if not include_deleted:
                stmt = self._visible(stmt)
            if for_update:
                stmt = stmt.with_for_update()
            row = await self.fetch_optional(stmt.execution_options(populate_existing=True))
            return _to_header(row) if row is not None else None

    async def get_report(self, header_id: int) -> Report | None:
        async with self._observe("get_report"):
            stmt = self._visible(select(ReportHeaderModel).where(ReportHeaderModel.id == header_id))
            row = await self.fetch_optional(stmt)
            if row is None:
                return None
            header = _to_header(row)
            child = await self._session.get(_CHILD_MODELS[header.kind], header_id)
            if child is None:
                return None
            return Report(header=header, payload=_to_payload(header.kind, child))

    async def noon_exists_on(self, day: date, *, exclude_header_id: int | None = None) -> bool:
        async with self._observe("noon_exists_on"):
            h = ReportHeaderModel
            start, end = _day_bounds(day)
            stmt = self._visible(
                select(h.id).where(
                    h.kind == ReportKind.NOON.value,
                    h.report_date_time >= start,
                    h.report_date_time < end,
                )
            )
            if exclude_header_id is not None:
                stmt = stmt.where(h.id != exclude_header_id)
            return await self._exists(stmt)

    async def voyage_report_exists(self, kind: ReportKind, voyage_id: int) -> bool:
        async with self._observe("voyage_report_exists"):
            h = ReportHeaderModel
            stmt = self._visible(select(h.id).where(h.kind == kind.value, h.voyage_id == voyage_id))
            return await self._exists(stmt)

    async def list_headers(
        self, filters: ReportFilter, *, page: int, page_size: int
    ) -> tuple[list[ReportHeader], int]:
        async with self._observe("list_headers"):
            h = ReportHeaderModel
            base = self._filtered(select(h), filters)
            total_res = await self._session.execute(
                select(func.count()).select_from(base.subquery())
            )
            total = int(total_res.scalar_one())

            stmt = (
                self.order_by_latest(base, h.report_date_time, h.id)
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            rows = await self.fetch_all(stmt)
            return [_to_header(r) for r in rows], total

    async def list_deleted(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> list[ReportHeader]:
        async with self._observe("list_deleted"):
            h = ReportHeaderModel
            stmt = select(h).where(h.deleted_at.is_not(None))
            if from_date is not None:
                stmt = stmt.where(h.deleted_at >= from_date)
            if to_date is not None:
                stmt = stmt.where(h.deleted_at <= to_date)
            rows = await self.fetch_all(self.order_by_latest(stmt, h.deleted_at, h.id))
            return [_to_header(r) for r in rows]

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    async def status_breakdown(self, filters: ReportFilter) -> dict[ReportStatus, int]:
        async with self._observe("status_breakdown"):
            h = ReportHeaderModel
            stmt = self._filtered(select(h.status, func.count(h.id)), filters).group_by(h.status)
            res = await self._session.execute(stmt)
            return {ReportStatus(status): int(count) for status, count in res.all()}

    async def count_pending_transmission(self, filters: ReportFilter) -> int:
        async with self._observe("count_pending_transmission"):
            h = ReportHeaderModel
            stmt = self._filtered(select(func.count(h.id)), filters).where(
                h.status == ReportStatus.APPROVED.value,
                h.is_transmitted.is_(False),
            )
            res = await self._session.execute(stmt)
            return int(res.scalar_one())

    async def count_by_type(self, filters: ReportFilter) -> dict[int, int]:
        async with self._observe("count_by_type"):
            h = ReportHeaderModel
            stmt = self._filtered(select(h.report_type_id, func.count(h.id)), filters).group_by(
                h.report_type_id
            )
            res = await self._session.execute(stmt)
            return {int(type_id): int(count) for type_id, count in res.all()}

    async def count_created_by_day(
        self, filters: ReportFilter, *, since: datetime
    ) -> dict[date, int]:
        async with self._observe("count_created_by_day"):
            h = ReportHeaderModel
            created_day = cast(func.timezone("UTC", h.created_at), Date).label("created_day")
            stmt = (
                self._filtered(select(created_day, func.count(h.id)), filters)
                .where(h.created_at >= since)
                .group_by(created_day)
            )
            res = await self._session.execute(stmt)
            return {day: int(count) for day, count in res.all()}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add(self, report: Report) -> Report:
        async with self._observe("add"):
            header = report.header
            row = ReportHeaderModel(
                report_number=header.report_number,
                report_type_id=header.report_type_id,
                kind=header.kind.value,
                report_date_time=header.report_date_time,
                status=header.status.value,
                prepared_by=header.prepared_by,
                voyage_id=header.voyage_id,
                remarks=header.remarks,
                created_at=header.created_at or self.utc_now(),
                updated_at=header.updated_at or self.utc_now(),
            )
            self._session.add(row)
            try:
                await self._session.flush()
            except IntegrityError as exc:
                period = _period_conflict(exc, header)
                if period is not None:
                    raise period from exc
                if is_unique_violation(exc):
                    raise DuplicateReportNumberError(
                        f"Report number {header.report_number} is already taken",
                        details={"report_number": header.report_number},
                    ) from exc
                raise
            except DBAPIError as exc:
                if is_transient(exc):
                    raise TransientStoreConflictError(
                        "Report insert hit a transient conflict",
                        details={"report_number": header.report_number},
                    ) from exc
                raise

            child_model = _CHILD_MODELS[kind_of(report.payload)]
            self._session.add(child_model(header_id=row.id, **asdict(report.payload)))
            await self._session.flush()
            return Report(header=_to_header(row), payload=report.payload)

    async def update_header(self, header: ReportHeader) -> ReportHeader:
        async with self._observe("update_header"):
            row = await self._session.get(ReportHeaderModel, header.id)
            if row is None or row.version != header.version:
                raise ConcurrencyConflictError(
                    "Report header version moved",
                    details={"report_id": header.id, "expected_version": header.version},
                )
            for name in _MUTABLE_HEADER_FIELDS:
                value = getattr(header, name)
                setattr(row, name, value.value if isinstance(value, ReportStatus) else value)
            try:
                await self._session.flush()
            except StaleDataError as exc:
                raise ConcurrencyConflictError(
                    "Report header was modified concurrently",
                    details={"report_id": header.id, "expected_version": header.version},
                ) from exc
            except IntegrityError as exc:
                period = _period_conflict(exc, header)
                if period is not None:
                    raise period from exc
                raise
            return _to_header(row)

    async def replace_payload(self, header_id: int, payload: ReportPayload) -> None:
        async with self._observe("replace_payload"):
            child_model = _CHILD_MODELS[kind_of(payload)]
            child = await self._session.get(child_model, header_id)
            if child is None:
                self._session.add(child_model(header_id=header_id, **asdict(payload)))
            else:
                for name, value in asdict(payload).items():
                    setattr(child, name, value)
            await self._session.flush()
