# src/maritime_reporting_api/domain/interfaces/repositories/reports_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report aggregate repository interface.

Purpose:
    Persist and query report headers together with their typed child
    payloads. Every read path except the explicit ``include_deleted`` and
    ``list_deleted`` variants hides soft-deleted headers.

Layer:
    domain

Notes:
    * Implementations never commit; the unit of work owns the transaction.
    * ``update_header`` compares the snapshot's ``version`` with the stored
      one and raises :class:`ConcurrencyConflictError` on mismatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from maritime_reporting_api.domain.entities.report import Report, ReportHeader
from maritime_reporting_api.domain.entities.report_payloads import ReportPayload
from maritime_reporting_api.domain.enums.reporting import ReportKind, ReportStatus


@dataclass(frozen=True, slots=True)
class ReportFilter:
    """Listing and statistics filter; ``None`` fields are ignored."""

    status: ReportStatus | None = None
    report_type_id: int | None = None
    voyage_id: int | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None


class ReportsRepository(Protocol):
    """Report headers plus one typed payload each."""

    # Reads ---------------------------------------------------------------

    async def get_header(
        self,
        header_id: int,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> ReportHeader | None:
        """Return a header snapshot.

        Args:
            header_id: Header primary key.
            include_deleted: Also return soft-deleted headers.
            for_update: Lock the row for the rest of the transaction.

        Returns:
            ReportHeader | None: The header, or ``None`` when missing or hidden.
        """
        raise NotImplementedError

    async def get_report(self, header_id: int) -> Report | None:
        """Return a visible header with its payload."""
        raise NotImplementedError

    async def noon_exists_on(self, day: date, *, exclude_header_id: int | None = None) -> bool:
        """True when a visible noon report already exists for ``day``."""
        raise NotImplementedError

    async def voyage_report_exists(self, kind: ReportKind, voyage_id: int) -> bool:
        """True when a visible report of ``kind`` exists for ``voyage_id``."""
        raise NotImplementedError

    async def list_headers(
        self, filters: ReportFilter, *, page: int, page_size: int
    ) -> tuple[list[ReportHeader], int]:
        """Return one page of visible headers (report time desc) and the total."""
        raise NotImplementedError

    async def list_deleted(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> list[ReportHeader]:
        """Return soft-deleted headers ordered by deletion time, newest first."""
        raise NotImplementedError

    # Statistics ----------------------------------------------------------

    async def status_breakdown(self, filters: ReportFilter) -> dict[ReportStatus, int]:
        """Count visible headers per status."""
        raise NotImplementedError

    async def count_pending_transmission(self, filters: ReportFilter) -> int:
        """Count APPROVED headers that have not been transmitted."""
        raise NotImplementedError

    async def count_by_type(self, filters: ReportFilter) -> dict[int, int]:
        """Count visible headers per report type id."""
        raise NotImplementedError

    async def count_created_by_day(self, filters: ReportFilter, *, since: datetime) -> dict[date, int]:
        """Count visible headers created at or after ``since``, per creation date."""
        raise NotImplementedError

    # Writes --------------------------------------------------------------

    async def add(self, report: Report) -> Report:
        """Stage a header and its payload; return them with id and timestamps.

        Raises:
            DuplicateReportNumberError: If ``report_number`` is already taken.
        """
        raise NotImplementedError

    async def update_header(self, header: ReportHeader) -> ReportHeader:
        """Write a changed header snapshot and return it with the bumped version.

        Raises:
            ConcurrencyConflictError: If the stored version moved on.
        """
        raise NotImplementedError

    async def replace_payload(self, header_id: int, payload: ReportPayload) -> None:
        """Overwrite the typed child payload of a header."""
        raise NotImplementedError
