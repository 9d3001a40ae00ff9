# tests/unit/application/test_list_and_get_reports.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from maritime_reporting_api.application.use_cases.reports.get_report import GetReportUseCase
from maritime_reporting_api.application.use_cases.reports.list_reports import ListReportsUseCase
from maritime_reporting_api.application.use_cases.reports.report_types import (
    ListReportTypesUseCase,
)
from maritime_reporting_api.domain.entities.report_payloads import NoonPayload
from maritime_reporting_api.domain.enums.reporting import ErrorKind, ReportKind, ReportStatus
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import ReportFilter
from reporting_fakes import FIXED_NOW, FakeUnitOfWork, InMemoryReportingStore, make_registry, seed_report


def _noon(day: int) -> NoonPayload:
    return NoonPayload(report_date=datetime(2025, 1, day, 12, 0, tzinfo=UTC))


@pytest.mark.asyncio
async def test_list_orders_by_report_time_and_names_types(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    for day in (3, 5, 4):
        seed_report(store, payload=_noon(day), voyage_id=7)

    page = (
        await ListReportsUseCase(uow, registry=make_registry()).execute(
            ReportFilter(), page=1, page_size=2
        )
    ).unwrap()

    assert page.total == 3
    assert (page.page, page.page_size) == (1, 2)
    assert [i.report_date_time.day for i in page.items] == [5, 4]
    assert page.items[0].report_type_name == "Noon Report"
    assert page.items[0].report_type_code == "NOON"
    assert page.items[0].status == "DRAFT"


@pytest.mark.asyncio
async def test_list_filters_and_hides_deleted(
    store: InMemoryReportingStore, uow_factory
) -> None:
    seed_report(store, payload=_noon(3), voyage_id=7)
    seed_report(store, payload=_noon(4), voyage_id=8, status=ReportStatus.SUBMITTED)
    seed_report(store, payload=_noon(5), voyage_id=7, deleted_at=FIXED_NOW, deleted_by="x")

    uc = ListReportsUseCase(uow_factory(), registry=make_registry())
    by_voyage = (await uc.execute(ReportFilter(voyage_id=7))).unwrap()
    assert by_voyage.total == 1

    uc = ListReportsUseCase(uow_factory(), registry=make_registry())
    by_status = (await uc.execute(ReportFilter(status=ReportStatus.SUBMITTED))).unwrap()
    assert [i.voyage_id for i in by_status.items] == [8]

    uc = ListReportsUseCase(uow_factory(), registry=make_registry())
    window = (
        await uc.execute(ReportFilter(to_date=datetime(2025, 1, 3, 23, 0, tzinfo=UTC)))
    ).unwrap()
    assert window.total == 1


@pytest.mark.asyncio
async def test_paging_is_clamped(uow: FakeUnitOfWork) -> None:
    uc = ListReportsUseCase(uow, registry=make_registry(), max_page_size=100)
    page = (await uc.execute(ReportFilter(), page=0, page_size=500)).unwrap()
    assert (page.page, page.page_size) == (1, 100)
    assert page.items == []
    assert page.total == 0


@pytest.mark.asyncio
async def test_get_returns_header_and_payload(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store)

    detail = (await GetReportUseCase(uow).execute(ReportKind.NOON, header.id or 0)).unwrap()

    assert detail.report_number == header.report_number
    assert detail.kind == "noon"
    assert detail.version == 1
    assert detail.payload["fuel_oil_rob"] == 800.0
    assert detail.payload["latitude"] == 35.5


@pytest.mark.asyncio
async def test_get_with_wrong_kind_is_not_found(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store)
    result = await GetReportUseCase(uow).execute(ReportKind.DEPARTURE, header.id or 0)
    assert result.error is not None
    assert result.error.kind is ErrorKind.NOT_FOUND
    assert result.error.message == "Departure report not found"


@pytest.mark.asyncio
async def test_report_types_listing(store: InMemoryReportingStore, uow_factory) -> None:
    store.tables.types[5] = replace(store.tables.types[5], is_active=False)

    active = (
        await ListReportTypesUseCase(uow_factory(), registry=make_registry()).execute()
    ).unwrap()
    everything = (
        await ListReportTypesUseCase(uow_factory(), registry=make_registry()).execute(
            active_only=False
        )
    ).unwrap()

    assert [t.type_code for t in active] == ["ARRIVAL", "BUNKER", "DEPARTURE", "NOON"]
    assert len(everything) == 5
    bunker = next(t for t in active if t.type_code == "BUNKER")
    assert bunker.regulation_reference == "MARPOL Annex VI Regulation 18"
