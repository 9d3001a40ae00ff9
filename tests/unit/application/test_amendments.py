# tests/unit/application/test_amendments.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from maritime_reporting_api.application.schemas.dto.report_commands import (
    ApproveAmendmentDTO,
    CreateAmendmentDTO,
)
from maritime_reporting_api.application.use_cases.amendments.amendments import (
    ApproveAmendmentUseCase,
    CreateAmendmentUseCase,
    GetAmendmentUseCase,
    ListAmendmentsUseCase,
    TransmitAmendmentUseCase,
)
from maritime_reporting_api.domain.entities.report_payloads import NoonPayload
from maritime_reporting_api.domain.enums.reporting import AmendmentStatus, ErrorKind, ReportStatus
from reporting_fakes import (
    FIXED_NOW,
    FakeUnitOfWork,
    InMemoryReportingStore,
    fixed_clock,
    make_retry,
    seed_report,
)

UowFactory = Callable[[], FakeUnitOfWork]


def _request(**overrides: Any) -> CreateAmendmentDTO:
    body: dict[str, Any] = {
        "amendment_reason": "Fuel ROB misread from sounding table",
        "corrected_fields": {"fuel_oil_rob": {"old_value": 800.0, "new_value": 780.0}},
    }
    body.update(overrides)
    return CreateAmendmentDTO.model_validate(body)


def _create(uow: FakeUnitOfWork) -> CreateAmendmentUseCase:
    return CreateAmendmentUseCase(uow, retry=make_retry(), clock=fixed_clock)


@pytest.mark.asyncio
async def test_amendments_are_numbered_per_report(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    first = seed_report(store, status=ReportStatus.APPROVED)
    second = seed_report(
        store, status=ReportStatus.TRANSMITTED, is_transmitted=True, payload=_noon_on(9)
    )

    a1 = (await _create(uow).execute(first.id or 0, _request(), actor="C/E Brown")).unwrap()
    a2 = (await _create(uow).execute(first.id or 0, _request(), actor="C/E Brown")).unwrap()
    b1 = (await _create(uow).execute(second.id or 0, _request(), actor="C/E Brown")).unwrap()

    assert a1.message == "Amendment created successfully"
    assert (a1.amendment_number, a2.amendment_number, b1.amendment_number) == (1, 2, 1)
    saved = store.amendments[a1.amendment_id]
    assert saved.status is AmendmentStatus.DRAFT
    assert saved.amended_by == "C/E Brown"
    assert saved.corrected_fields["fuel_oil_rob"].new_value == 780.0
    assert store.tables.payloads[first.id or 0].fuel_oil_rob == 800.0  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_only_approved_or_transmitted_reports_are_amendable(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    draft = seed_report(store)
    result = await _create(uow).execute(draft.id or 0, _request(), actor="x")
    assert result.error is not None
    assert result.error.kind is ErrorKind.INVALID_STATE_TRANSITION
    assert result.error.message == (
        "Only APPROVED or TRANSMITTED reports can be amended. Current status: DRAFT"
    )
    assert store.amendments == {}


@pytest.mark.asyncio
async def test_missing_report_cannot_be_amended(uow: FakeUnitOfWork) -> None:
    result = await _create(uow).execute(404, _request(), actor="x")
    assert result.error is not None
    assert result.error.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_concurrent_amendments_get_distinct_numbers(
    store: InMemoryReportingStore, uow_factory: UowFactory
) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)

    async def amend() -> int:
        result = await _create(uow_factory()).execute(header.id or 0, _request(), actor="x")
        return result.unwrap().amendment_number

    numbers = await asyncio.gather(*(amend() for _ in range(5)))
    assert sorted(numbers) == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_approve_then_transmit(store: InMemoryReportingStore, uow_factory: UowFactory) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)
    report_id = header.id or 0
    created = (await _create(uow_factory()).execute(report_id, _request(), actor="x")).unwrap()
    amendment_id = created.amendment_id

    approved = await ApproveAmendmentUseCase(uow_factory(), clock=fixed_clock).execute(
        report_id,
        amendment_id,
        ApproveAmendmentDTO(master_signature="Capt. Jones", approval_remarks="Verified"),
    )
    assert approved.unwrap().message == "Amendment approved by Master"
    saved = store.amendments[amendment_id]
    assert saved.status is AmendmentStatus.APPROVED
    assert saved.master_signature == "Capt. Jones"
    assert saved.signed_at == FIXED_NOW
    assert saved.remarks is not None and saved.remarks.endswith("[APPROVED] Verified")

    again = await ApproveAmendmentUseCase(uow_factory()).execute(
        report_id, amendment_id, ApproveAmendmentDTO(master_signature="Capt. Jones")
    )
    assert again.error is not None
    assert again.error.kind is ErrorKind.INVALID_STATE_TRANSITION

    transmit = TransmitAmendmentUseCase(uow_factory(), clock=fixed_clock)
    sent = await transmit.execute(report_id, amendment_id, actor="Capt. Jones")
    assert sent.unwrap().message == "Amendment transmitted successfully"
    assert store.amendments[amendment_id].is_transmitted is True
    assert store.amendments[amendment_id].status is AmendmentStatus.APPROVED

    twice = await TransmitAmendmentUseCase(uow_factory()).execute(
        report_id, amendment_id, actor="Capt. Jones"
    )
    assert twice.error is not None
    assert twice.error.kind is ErrorKind.CONFLICT
    assert twice.error.message == "Amendment is already transmitted"


@pytest.mark.asyncio
async def test_draft_amendment_cannot_be_transmitted(
    store: InMemoryReportingStore, uow_factory: UowFactory
) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)
    created = (await _create(uow_factory()).execute(header.id or 0, _request(), actor="x")).unwrap()

    result = await TransmitAmendmentUseCase(uow_factory()).execute(
        header.id or 0, created.amendment_id, actor="x"
    )
    assert result.error is not None
    assert result.error.kind is ErrorKind.INVALID_STATE_TRANSITION
    assert result.error.message == "Cannot transmit amendment with status DRAFT. Must be APPROVED."


@pytest.mark.asyncio
async def test_list_and_get_amendments(
    store: InMemoryReportingStore, uow_factory: UowFactory
) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)
    other = seed_report(store, status=ReportStatus.APPROVED, payload=_noon_on(9))
    report_id = header.id or 0
    for _ in range(2):
        await _create(uow_factory()).execute(report_id, _request(), actor="x")

    listing = (await ListAmendmentsUseCase(uow_factory()).execute(report_id)).unwrap()
    assert listing.total_amendments == 2
    assert [a.amendment_number for a in listing.amendments] == [1, 2]
    assert listing.amendments[0].original_report_number == header.report_number
    assert listing.amendments[0].corrected_fields == {
        "fuel_oil_rob": {"old_value": 800.0, "new_value": 780.0}
    }

    first_id = listing.amendments[0].id
    found = (await GetAmendmentUseCase(uow_factory()).execute(report_id, first_id)).unwrap()
    assert found.amendment_number == 1

    foreign = await GetAmendmentUseCase(uow_factory()).execute(other.id or 0, first_id)
    assert foreign.error is not None
    assert foreign.error.kind is ErrorKind.NOT_FOUND
    assert foreign.error.message == "Amendment not found"


def _noon_on(day: int) -> NoonPayload:
    return NoonPayload(report_date=datetime(2025, 1, day, 12, 0, tzinfo=UTC))


@pytest.mark.asyncio
async def test_competing_approvals_keep_the_first_signature(
    store: InMemoryReportingStore, uow_factory: UowFactory
) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)
    report_id = header.id or 0
    created = (await _create(uow_factory()).execute(report_id, _request(), actor="x")).unwrap()
    amendment_id = created.amendment_id

    async def approve(signature: str) -> Any:
        return await ApproveAmendmentUseCase(uow_factory(), clock=fixed_clock).execute(
            report_id, amendment_id, ApproveAmendmentDTO(master_signature=signature)
        )

    first, second = await asyncio.gather(approve("Capt. Jones"), approve("Capt. Silva"))

    assert first.ok
    assert second.error is not None
    assert second.error.kind is ErrorKind.INVALID_STATE_TRANSITION
    assert second.error.message == "Cannot approve amendment with status APPROVED"
    assert store.amendments[amendment_id].master_signature == "Capt. Jones"
    assert store.amendment_row_locks == [amendment_id, amendment_id]
