# tests/reporting_fakes.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""In-memory doubles for the reporting repositories and unit of work.

The store keeps every table as a plain dict/list. A unit of work holds the
store lock for its whole scope (serializable isolation) and snapshots the
data on entry so that leaving without a commit restores it.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from functools import partial
from types import TracebackType
from typing import Any

from maritime_reporting_api.application.interfaces.retry_port import RetryRunner
from maritime_reporting_api.application.services.report_type_registry import ReportTypeRegistry
from maritime_reporting_api.domain.entities.amendment import Amendment
from maritime_reporting_api.domain.entities.report import Report, ReportHeader
from maritime_reporting_api.domain.entities.report_payloads import (
    NoonPayload,
    ReportPayload,
    kind_of,
)
from maritime_reporting_api.domain.entities.report_type import ReportType
from maritime_reporting_api.domain.entities.transmission_log import TransmissionLogEntry
from maritime_reporting_api.domain.entities.workflow_history import WorkflowHistoryEntry
from maritime_reporting_api.domain.enums.reporting import (
    ReportKind,
    ReportStatus,
    TransmissionStatus,
)
from maritime_reporting_api.domain.exceptions.reporting import (
    ConcurrencyConflictError,
    DuplicateAmendmentNumberError,
    DuplicatePeriodReportError,
    DuplicateReportNumberError,
    TransientStoreConflictError,
)
from maritime_reporting_api.domain.interfaces.repositories.amendments_repository import (
    AmendmentsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.report_sequences_repository import (
    ReportSequencesRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.report_types_repository import (
    ReportTypesRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import (
    ReportFilter,
    ReportsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.transmission_logs_repository import (
    TransmissionLogsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.workflow_history_repository import (
    WorkflowHistoryRepository,
)
from maritime_reporting_api.domain.services.report_numbers import report_day
from maritime_reporting_api.infrastructure.caching.json_cache import InMemoryJsonCache
from maritime_reporting_api.infrastructure.resilience.retry import RetryPolicy, retry_async

FIXED_NOW = datetime(2025, 1, 10, 14, 0, tzinfo=UTC)

SEED_REPORT_TYPES: tuple[ReportType, ...] = (
    ReportType(id=1, code="NOON", name="Noon Report", category="OPERATIONAL", frequency="DAILY"),
    ReportType(
        id=2, code="DEPARTURE", name="Departure Report", category="PORT", frequency="PER_VOYAGE"
    ),
    ReportType(id=3, code="ARRIVAL", name="Arrival Report", category="PORT", frequency="PER_VOYAGE"),
    ReportType(
        id=4,
        code="BUNKER",
        name="Bunker Delivery Report",
        category="ENVIRONMENTAL",
        frequency="PER_EVENT",
        regulation_reference="MARPOL Annex VI Regulation 18",
    ),
    ReportType(
        id=5,
        code="POSITION",
        name="Position Report",
        category="OPERATIONAL",
        frequency="AS_REQUIRED",
        is_mandatory=False,
        requires_master_signature=False,
    ),
)


def fixed_clock() -> datetime:
    return FIXED_NOW


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


@dataclass
class _Tables:
    types: dict[int, ReportType] = field(default_factory=dict)
    headers: dict[int, ReportHeader] = field(default_factory=dict)
    payloads: dict[int, ReportPayload] = field(default_factory=dict)
    history: list[WorkflowHistoryEntry] = field(default_factory=list)
    amendments: dict[int, Amendment] = field(default_factory=dict)
    logs: list[TransmissionLogEntry] = field(default_factory=list)
    sequences: dict[str, int] = field(default_factory=dict)
    ids: Counter[str] = field(default_factory=Counter)

    def next_id(self, table: str) -> int:
        self.ids[table] += 1
        return self.ids[table]


class InMemoryReportingStore:
    """Shared state behind every fake repository.

    Attributes:
        sequence_conflicts: Number of upcoming ``next_value`` calls that raise
            a transient conflict before succeeding.
        stale_updates: Number of upcoming ``update_header`` calls that raise a
            concurrency conflict.
        type_loads: Count of catalog reads that reached the repository.
        commits: Count of committed units of work.
        amendment_row_locks: Amendment ids fetched with ``for_update``.
    """

    def __init__(self, report_types: tuple[ReportType, ...] = SEED_REPORT_TYPES) -> None:
        self.tables = _Tables(types={t.id: t for t in report_types})
        self.lock = asyncio.Lock()
        self.sequence_conflicts = 0
        self.stale_updates = 0
        self.type_loads = 0
        self.commits = 0
        self.amendment_row_locks: list[int] = []

    def snapshot(self) -> _Tables:
        # Entities are frozen, so copying the containers is enough.
        t = self.tables
        return _Tables(
            types=dict(t.types),
            headers=dict(t.headers),
            payloads=dict(t.payloads),
            history=list(t.history),
            amendments=dict(t.amendments),
            logs=list(t.logs),
            sequences=dict(t.sequences),
            ids=Counter(t.ids),
        )

    def restore(self, tables: _Tables) -> None:
        self.tables = tables

    # Convenience accessors for assertions
    @property
    def headers(self) -> dict[int, ReportHeader]:
        return self.tables.headers

    @property
    def history(self) -> list[WorkflowHistoryEntry]:
        return self.tables.history

    @property
    def logs(self) -> list[TransmissionLogEntry]:
        return self.tables.logs

    @property
    def amendments(self) -> dict[int, Amendment]:
        return self.tables.amendments

    def history_for(self, header_id: int) -> list[WorkflowHistoryEntry]:
        return [e for e in self.tables.history if e.header_id == header_id]


# =============================================================================
# Repositories
# =============================================================================


class FakeReportsRepository(ReportsRepository):
    def __init__(self, store: InMemoryReportingStore) -> None:
        self._store = store

    @property
    def _t(self) -> _Tables:
        return self._store.tables

    def _visible(self) -> list[ReportHeader]:
        return [h for h in self._t.headers.values() if not h.is_deleted]

    @staticmethod
    def _matches(header: ReportHeader, filters: ReportFilter) -> bool:
        if filters.status is not None and header.status is not filters.status:
            return False
        if filters.report_type_id is not None and header.report_type_id != filters.report_type_id:
            return False
        if filters.voyage_id is not None and header.voyage_id != filters.voyage_id:
            return False
        when = _as_utc(header.report_date_time)
        if filters.from_date is not None and when < _as_utc(filters.from_date):
            return False
        if filters.to_date is not None and when > _as_utc(filters.to_date):
            return False
        return True

    def _filtered(self, filters: ReportFilter) -> list[ReportHeader]:
        return [h for h in self._visible() if self._matches(h, filters)]

    def _check_period(self, header: ReportHeader) -> None:
        """Mirror the partial unique indexes on visible noon and movement reports."""
        if header.is_deleted:
            return
        for other in self._visible():
            if other.id == header.id or other.kind is not header.kind:
                continue
            if header.kind is ReportKind.NOON:
                clash = report_day(other.report_date_time) == report_day(header.report_date_time)
            elif header.kind in (ReportKind.DEPARTURE, ReportKind.ARRIVAL):
                clash = header.voyage_id is not None and other.voyage_id == header.voyage_id
            else:
                clash = False
            if clash:
                raise DuplicatePeriodReportError(
                    "period taken",
                    details={"kind": header.kind.value, "voyage_id": header.voyage_id},
                )

    async def get_header(
        self, header_id: int, *, include_deleted: bool = False, for_update: bool = False
    ) -> ReportHeader | None:
        header = self._t.headers.get(header_id)
        if header is None or (header.is_deleted and not include_deleted):
            return None
        return header

    async def get_report(self, header_id: int) -> Report | None:
        header = await self.get_header(header_id)
        if header is None:
            return None
        return Report(header=header, payload=self._t.payloads[header_id])

    async def noon_exists_on(self, day: date, *, exclude_header_id: int | None = None) -> bool:
        for header in self._visible():
            if header.kind is not ReportKind.NOON or header.id == exclude_header_id:
                continue
            payload = self._t.payloads[header.id or 0]
            if isinstance(payload, NoonPayload) and report_day(payload.report_date) == day:
                return True
        return False

    async def voyage_report_exists(self, kind: ReportKind, voyage_id: int) -> bool:
        return any(h.kind is kind and h.voyage_id == voyage_id for h in self._visible())

    async def list_headers(
        self, filters: ReportFilter, *, page: int, page_size: int
    ) -> tuple[list[ReportHeader], int]:
        rows = sorted(
            self._filtered(filters), key=lambda h: _as_utc(h.report_date_time), reverse=True
        )
        start = (page - 1) * page_size
        return rows[start : start + page_size], len(rows)

    async def list_deleted(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> list[ReportHeader]:
        rows = [h for h in self._t.headers.values() if h.deleted_at is not None]
        if from_date is not None:
            rows = [h for h in rows if _as_utc(h.deleted_at) >= _as_utc(from_date)]  # type: ignore[arg-type]
        if to_date is not None:
            rows = [h for h in rows if _as_utc(h.deleted_at) <= _as_utc(to_date)]  # type: ignore[arg-type]
        return sorted(rows, key=lambda h: h.deleted_at, reverse=True)  # type: ignore[arg-type, return-value]

    async def status_breakdown(self, filters: ReportFilter) -> dict[ReportStatus, int]:
        return dict(Counter(h.status for h in self._filtered(filters)))

    async def count_pending_transmission(self, filters: ReportFilter) -> int:
        return sum(
            1
            for h in self._filtered(filters)
            if h.status is ReportStatus.APPROVED and not h.is_transmitted
        )

    async def count_by_type(self, filters: ReportFilter) -> dict[int, int]:
        return dict(Counter(h.report_type_id for h in self._filtered(filters)))

    async def count_created_by_day(
        self, filters: ReportFilter, *, since: datetime
    ) -> dict[date, int]:
        return dict(
            Counter(
                _as_utc(h.created_at).date()
                for h in self._filtered(filters)
                if h.created_at is not None and _as_utc(h.created_at) >= _as_utc(since)
            )
        )

    async def add(self, report: Report) -> Report:
        number = report.header.report_number
        if any(h.report_number == number for h in self._t.headers.values()):
            raise DuplicateReportNumberError(
                "Report number already taken", details={"report_number": number}
            )
        self._check_period(report.header)
        header_id = self._t.next_id("report_headers")
        header = replace(report.header, id=header_id, version=1)
        self._t.headers[header_id] = header
        self._t.payloads[header_id] = report.payload
        return Report(header=header, payload=report.payload)

    async def update_header(self, header: ReportHeader) -> ReportHeader:
        stored = self._t.headers.get(header.id or 0)
        if stored is None:
            raise LookupError(f"Report header {header.id} does not exist")
        if self._store.stale_updates > 0:
            self._store.stale_updates -= 1
            raise ConcurrencyConflictError("stale", details={"report_id": header.id})
        if stored.version != header.version:
            raise ConcurrencyConflictError(
                "stale", details={"report_id": header.id, "version": header.version}
            )
        self._check_period(header)
        updated = replace(header, version=stored.version + 1)
        self._t.headers[updated.id or 0] = updated
        return updated

    async def replace_payload(self, header_id: int, payload: ReportPayload) -> None:
        self._t.payloads[header_id] = payload


class FakeReportTypesRepository(ReportTypesRepository):
    def __init__(self, store: InMemoryReportingStore) -> None:
        self._store = store

    async def list_types(self, *, active_only: bool = True) -> list[ReportType]:
        self._store.type_loads += 1
        types = sorted(self._store.tables.types.values(), key=lambda t: t.code)
        return [t for t in types if t.is_active or not active_only]

    async def get_by_code(self, code: str) -> ReportType | None:
        return next((t for t in self._store.tables.types.values() if t.code == code), None)

    async def get_by_id(self, type_id: int) -> ReportType | None:
        return self._store.tables.types.get(type_id)


class FakeReportSequencesRepository(ReportSequencesRepository):
    def __init__(self, store: InMemoryReportingStore) -> None:
        self._store = store

    async def next_value(self, key: str) -> int:
        if self._store.sequence_conflicts > 0:
            self._store.sequence_conflicts -= 1
            raise TransientStoreConflictError("serialization failure", details={"key": key})
        sequences = self._store.tables.sequences
        sequences[key] = sequences.get(key, 0) + 1
        return sequences[key]


class FakeWorkflowHistoryRepository(WorkflowHistoryRepository):
    def __init__(self, store: InMemoryReportingStore) -> None:
        self._store = store

    async def add(self, entry: WorkflowHistoryEntry) -> WorkflowHistoryEntry:
        saved = replace(entry, id=self._store.tables.next_id("workflow_history"))
        self._store.tables.history.append(saved)
        return saved

    async def list_for_header(self, header_id: int) -> list[WorkflowHistoryEntry]:
        entries = [e for e in self._store.tables.history if e.header_id == header_id]
        return sorted(entries, key=lambda e: (e.changed_at, e.id or 0), reverse=True)


class FakeTransmissionLogsRepository(TransmissionLogsRepository):
    def __init__(self, store: InMemoryReportingStore) -> None:
        self._store = store

    async def add(self, entry: TransmissionLogEntry) -> TransmissionLogEntry:
        saved = replace(entry, id=self._store.tables.next_id("transmission_logs"))
        self._store.tables.logs.append(saved)
        return saved

    async def list_for_header(self, header_id: int) -> list[TransmissionLogEntry]:
        entries = [e for e in self._store.tables.logs if e.header_id == header_id]
        return sorted(entries, key=lambda e: (e.transmitted_at, e.id or 0), reverse=True)

    async def count_failed(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> int:
        headers = self._store.tables.headers
        count = 0
        for entry in self._store.tables.logs:
            header = headers.get(entry.header_id)
            if entry.status is not TransmissionStatus.FAILED or header is None or header.is_deleted:
                continue
            when = _as_utc(header.report_date_time)
            if from_date is not None and when < _as_utc(from_date):
                continue
            if to_date is not None and when > _as_utc(to_date):
                continue
            count += 1
        return count


class FakeAmendmentsRepository(AmendmentsRepository):
    def __init__(self, store: InMemoryReportingStore) -> None:
        self._store = store

    def _with_number(self, amendment: Amendment) -> Amendment:
        header = self._store.tables.headers.get(amendment.original_header_id)
        return replace(
            amendment, original_report_number=header.report_number if header else None
        )

    async def next_number(self, header_id: int) -> int:
        numbers = [
            a.amendment_number
            for a in self._store.tables.amendments.values()
            if a.original_header_id == header_id
        ]
        return max(numbers, default=0) + 1

    async def add(self, amendment: Amendment) -> Amendment:
        for existing in self._store.tables.amendments.values():
            if (
                existing.original_header_id == amendment.original_header_id
                and existing.amendment_number == amendment.amendment_number
            ):
                raise DuplicateAmendmentNumberError(
                    "Amendment number already taken",
                    details={"amendment_number": amendment.amendment_number},
                )
        saved = replace(amendment, id=self._store.tables.next_id("report_amendments"))
        self._store.tables.amendments[saved.id or 0] = saved
        return self._with_number(saved)

    async def get(
        self, header_id: int, amendment_id: int, *, for_update: bool = False
    ) -> Amendment | None:
        if for_update:
            self._store.amendment_row_locks.append(amendment_id)
        amendment = self._store.tables.amendments.get(amendment_id)
        if amendment is None or amendment.original_header_id != header_id:
            return None
        return self._with_number(amendment)

    async def list_for_header(self, header_id: int) -> list[Amendment]:
        rows = [
            self._with_number(a)
            for a in self._store.tables.amendments.values()
            if a.original_header_id == header_id
        ]
        return sorted(rows, key=lambda a: a.amendment_number)

    async def update(self, amendment: Amendment) -> Amendment:
        if amendment.id not in self._store.tables.amendments:
            raise LookupError(f"Amendment {amendment.id} does not exist")
        self._store.tables.amendments[amendment.id] = amendment
        return self._with_number(amendment)


_FAKE_REPOS: dict[type[Any], type[Any]] = {
    ReportsRepository: FakeReportsRepository,
    ReportTypesRepository: FakeReportTypesRepository,
    ReportSequencesRepository: FakeReportSequencesRepository,
    WorkflowHistoryRepository: FakeWorkflowHistoryRepository,
    TransmissionLogsRepository: FakeTransmissionLogsRepository,
    AmendmentsRepository: FakeAmendmentsRepository,
}


# =============================================================================
# Unit of work
# =============================================================================


class FakeUnitOfWork:
    """Serializable in-memory unit of work over :class:`InMemoryReportingStore`."""

    def __init__(self, store: InMemoryReportingStore) -> None:
        self._store = store
        self._snapshot: Any = None
        self._active = False
        self._committed = False
        self.rollbacks = 0

    async def __aenter__(self) -> FakeUnitOfWork:
        if self._active:
            raise RuntimeError("UnitOfWork is already active; nested usage is not supported.")
        await self._store.lock.acquire()
        self._active = True
        self._committed = False
        self._snapshot = self._store.snapshot()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        try:
            if not self._committed:
                await self.rollback()
        finally:
            self._active = False
            self._snapshot = None
            self._store.lock.release()
        return None

    async def commit(self) -> None:
        if not self._active:
            raise RuntimeError("Cannot commit: UnitOfWork has no active session.")
        self._committed = True
        self._store.commits += 1

    async def rollback(self) -> None:
        if not self._active or self._committed or self._snapshot is None:
            return
        self._store.restore(self._snapshot)
        self._snapshot = self._store.snapshot()
        self.rollbacks += 1

    def get_repository(self, repo_type: type[Any]) -> Any:
        if not self._active:
            raise RuntimeError("get_repository() called outside of an active UnitOfWork scope.")
        return _FAKE_REPOS[repo_type](self._store)


# =============================================================================
# Builders
# =============================================================================


def make_registry(ttl_s: int = 3600) -> ReportTypeRegistry:
    return ReportTypeRegistry(cache=InMemoryJsonCache(), ttl_s=ttl_s)


def make_retry(total: int = 3) -> RetryRunner:
    policy = RetryPolicy(total=total, base=0.0, cap=0.0, jitter=False)
    runner: RetryRunner = partial(retry_async, policy=policy)  # type: ignore[assignment]
    return runner


def noon_body(**overrides: Any) -> dict[str, Any]:
    """Plausible noon report body: no validation errors and no warnings."""
    body: dict[str, Any] = {
        "report_date": "2025-01-10T12:00:00Z",
        "latitude": 35.5,
        "longitude": 139.8,
        "course_over_ground": 90.0,
        "speed_over_ground": 12.5,
        "distance_traveled": 300.0,
        "fuel_oil_consumed": 28.0,
        "fuel_oil_rob": 800.0,
        "prepared_by": "2/O Smith",
        "voyage_id": 7,
    }
    body.update(overrides)
    return body


def seed_report(
    store: InMemoryReportingStore,
    *,
    status: ReportStatus = ReportStatus.DRAFT,
    payload: ReportPayload | None = None,
    **overrides: Any,
) -> ReportHeader:
    """Insert a report directly, bypassing the create use case."""
    payload = payload or NoonPayload(
        report_date=datetime(2025, 1, 10, 12, 0, tzinfo=UTC),
        latitude=35.5,
        longitude=139.8,
        speed_over_ground=12.5,
        distance_traveled=300.0,
        fuel_oil_consumed=28.0,
        fuel_oil_rob=800.0,
    )
    kind = kind_of(payload)
    tables = store.tables
    header_id = tables.next_id("report_headers")
    type_id = next(t.id for t in tables.types.values() if t.code == kind.type_code)
    fields: dict[str, Any] = {
        "id": header_id,
        "report_number": f"{kind.number_prefix}-{report_day(payload.report_time):%Y%m%d}-{header_id:04d}",
        "report_type_id": type_id,
        "kind": kind,
        "report_date_time": payload.report_time,
        "status": status,
        "prepared_by": "2/O Smith",
        "created_at": FIXED_NOW,
        "updated_at": FIXED_NOW,
    }
    fields.update(overrides)
    header = ReportHeader(**fields)
    tables.headers[header_id] = header
    tables.payloads[header_id] = payload
    return header
