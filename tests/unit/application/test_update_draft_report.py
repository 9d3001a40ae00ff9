# tests/unit/application/test_update_draft_report.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from datetime import UTC, datetime

import pytest

from maritime_reporting_api.application.schemas.dto.report_commands import NoonReportCreateDTO
from maritime_reporting_api.application.use_cases.reports.update_draft_report import (
    PatchDraftReportUseCase,
    ReplaceNoonReportUseCase,
)
from maritime_reporting_api.domain.entities.report_payloads import BunkerPayload, NoonPayload
from maritime_reporting_api.domain.enums.reporting import ErrorKind, ReportStatus
from reporting_fakes import FakeUnitOfWork, InMemoryReportingStore, fixed_clock, noon_body, seed_report


def _patch(uow: FakeUnitOfWork) -> PatchDraftReportUseCase:
    return PatchDraftReportUseCase(uow, clock=fixed_clock)


@pytest.mark.asyncio
async def test_patch_merges_fields_and_stamps_marker(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store, remarks="Fair weather")
    report_id = header.id or 0

    result = await _patch(uow).execute(
        report_id, {"fuel_oil_rob": 750.0, "voyage_id": 9}, actor="2/O Smith"
    )

    assert result.unwrap().message == "Draft report updated successfully"
    payload = store.tables.payloads[report_id]
    assert isinstance(payload, NoonPayload)
    assert payload.fuel_oil_rob == 750.0
    assert payload.fuel_oil_consumed == 28.0
    saved = store.headers[report_id]
    assert saved.voyage_id == 9
    assert saved.version == 2
    assert saved.remarks == "Fair weather\n[UPDATED 2025-01-10 14:00 UTC] Draft modified"


@pytest.mark.asyncio
async def test_patch_requires_some_change(store: InMemoryReportingStore, uow: FakeUnitOfWork) -> None:
    header = seed_report(store)
    for body in ({}, {"fuel_oil_rob": None}):
        result = await _patch(uow).execute(header.id or 0, body, actor="x")
        assert result.error is not None
        assert result.error.kind is ErrorKind.VALIDATION
        assert result.error.message == "No updates provided"


@pytest.mark.asyncio
async def test_patch_refuses_fields_of_another_kind(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store)
    result = await _patch(uow).execute(header.id or 0, {"sulphur_content": 0.1}, actor="x")
    assert result.error is not None
    assert result.error.kind is ErrorKind.VALIDATION
    assert "sulphur_content" in result.error.message


@pytest.mark.asyncio
async def test_patch_revalidates_merged_payload(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    bunker = BunkerPayload(
        bunker_date=datetime(2025, 1, 9, 8, 0, tzinfo=UTC),
        port_name="Singapore",
        supplier_name="Harbour Fuels",
        bdn_number="BDN-1",
        fuel_type="VLSFO",
        quantity_received=500.0,
    )
    header = seed_report(store, payload=bunker)

    result = await _patch(uow).execute(header.id or 0, {"sulphur_content": 0.9}, actor="x")

    assert result.error is not None
    assert result.error.kind is ErrorKind.VALIDATION
    assert store.tables.payloads[header.id or 0] == bunker


@pytest.mark.asyncio
async def test_patch_only_on_drafts(store: InMemoryReportingStore, uow: FakeUnitOfWork) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)
    result = await _patch(uow).execute(header.id or 0, {"fuel_oil_rob": 1.0}, actor="x")
    assert result.error is not None
    assert result.error.kind is ErrorKind.INVALID_STATE_TRANSITION
    assert result.error.message == (
        "Cannot edit report with status APPROVED. Only DRAFT reports can be edited."
    )


@pytest.mark.asyncio
async def test_patch_moving_noon_onto_taken_day_conflicts(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    seed_report(store)
    other = seed_report(
        store,
        payload=NoonPayload(report_date=datetime(2025, 1, 9, 12, 0, tzinfo=UTC)),
    )

    result = await _patch(uow).execute(
        other.id or 0, {"report_date": "2025-01-10T12:30:00Z"}, actor="x"
    )
    assert result.error is not None
    assert result.error.kind is ErrorKind.CONFLICT


@pytest.mark.asyncio
async def test_put_replaces_noon_payload(store: InMemoryReportingStore, uow: FakeUnitOfWork) -> None:
    header = seed_report(store, remarks="old")
    dto = NoonReportCreateDTO.model_validate(
        noon_body(fuel_oil_consumed=30.0, remarks="Revised", prepared_by="3/O Lee")
    )

    result = await ReplaceNoonReportUseCase(uow, clock=fixed_clock).execute(
        header.id or 0, dto, actor="x"
    )

    assert result.unwrap().message == "Noon report updated successfully"
    saved = store.headers[header.id or 0]
    assert saved.prepared_by == "3/O Lee"
    assert saved.remarks == "Revised"
    assert saved.voyage_id == 7
    payload = store.tables.payloads[header.id or 0]
    assert isinstance(payload, NoonPayload)
    assert payload.fuel_oil_consumed == 30.0


@pytest.mark.asyncio
async def test_put_on_non_noon_report_is_not_found(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    bunker = BunkerPayload(
        bunker_date=datetime(2025, 1, 9, 8, 0, tzinfo=UTC),
        port_name="Singapore",
        supplier_name="Harbour Fuels",
        bdn_number="BDN-1",
        fuel_type="VLSFO",
        quantity_received=500.0,
    )
    header = seed_report(store, payload=bunker)
    result = await ReplaceNoonReportUseCase(uow).execute(
        header.id or 0, NoonReportCreateDTO.model_validate(noon_body()), actor="x"
    )
    assert result.error is not None
    assert result.error.message == "Noon report not found"


@pytest.mark.asyncio
async def test_patch_moving_noon_to_a_free_day_keeps_its_number(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store)
    report_id = header.id or 0

    result = await _patch(uow).execute(report_id, {"report_date": "2025-01-09T12:00:00Z"}, actor="x")

    assert result.ok
    saved = store.headers[report_id]
    assert saved.report_number == header.report_number == "NOON-20250110-0001"
    assert saved.report_date_time == datetime(2025, 1, 9, 12, 0, tzinfo=UTC)
