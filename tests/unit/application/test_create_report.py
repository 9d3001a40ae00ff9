# tests/unit/application/test_create_report.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from typing import Any

import pytest

from maritime_reporting_api.application.schemas.dto.report_commands import (
    BunkerReportCreateDTO,
    DepartureReportCreateDTO,
    NoonReportCreateDTO,
    PositionReportCreateDTO,
)
from maritime_reporting_api.application.use_cases.reports.create_report import (
    ALLOCATION_EXHAUSTED_MESSAGE,
    CreateReportUseCase,
)
from maritime_reporting_api.domain.enums.reporting import ErrorKind, ReportKind, ReportStatus
from reporting_fakes import (
    FakeReportsRepository,
    FakeUnitOfWork,
    InMemoryReportingStore,
    fixed_clock,
    make_registry,
    make_retry,
    noon_body,
)


def _use_case(
    uow: FakeUnitOfWork, *, retries: int = 3, registry: Any = None
) -> CreateReportUseCase:
    return CreateReportUseCase(
        uow,
        registry=registry or make_registry(),
        retry=make_retry(retries),
        clock=fixed_clock,
    )


def _bunker(**overrides: Any) -> BunkerReportCreateDTO:
    body: dict[str, Any] = {
        "bunker_date": "2025-01-09T08:00:00Z",
        "port_name": "Singapore",
        "supplier_name": "Harbour Fuels",
        "bdn_number": "BDN-001",
        "fuel_type": "VLSFO",
        "quantity_received": 500.0,
        "prepared_by": "C/E Brown",
    }
    body.update(overrides)
    return BunkerReportCreateDTO.model_validate(body)


@pytest.mark.asyncio
async def test_first_noon_of_the_day_gets_sequence_one(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    result = await _use_case(uow).execute(
        ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="bridge"
    )

    assert result.ok, result.error
    created = result.unwrap()
    assert created.report_number == "NOON-20250110-0001"
    assert created.message == "Noon report created successfully"
    assert created.warnings == []

    header = store.headers[created.report_id]
    assert header.status is ReportStatus.DRAFT
    assert header.report_type_id == 1
    assert header.prepared_by == "2/O Smith"
    assert header.version == 1
    assert store.history == []


@pytest.mark.asyncio
async def test_numbers_are_sequential_per_prefix_and_day(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    uc = _use_case(uow)
    numbers = []
    for bdn in ("BDN-1", "BDN-2", "BDN-3"):
        result = await uc.execute(ReportKind.BUNKER, _bunker(bdn_number=bdn), actor="x")
        numbers.append(result.unwrap().report_number)
    other_day = await uc.execute(
        ReportKind.BUNKER, _bunker(bunker_date="2025-01-08T08:00:00Z"), actor="x"
    )

    assert numbers == ["BNK-20250109-0001", "BNK-20250109-0002", "BNK-20250109-0003"]
    assert other_day.unwrap().report_number == "BNK-20250108-0001"


@pytest.mark.asyncio
async def test_preparer_defaults_to_actor(store: InMemoryReportingStore, uow: FakeUnitOfWork) -> None:
    body = noon_body()
    del body["prepared_by"]
    created = (
        await _use_case(uow).execute(
            ReportKind.NOON, NoonReportCreateDTO.model_validate(body), actor="3/O Lee"
        )
    ).unwrap()
    assert store.headers[created.report_id].prepared_by == "3/O Lee"


@pytest.mark.asyncio
async def test_warnings_are_returned_and_prefixed_to_remarks(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    result = await _use_case(uow).execute(
        ReportKind.BUNKER, _bunker(sulphur_content=0.15, remarks="Sampled"), actor="x"
    )

    created = result.unwrap()
    assert result.warnings == ("Sulphur content 0.15% exceeds ECA limit of 0.10%",)
    assert created.warnings == ["Sulphur content 0.15% exceeds ECA limit of 0.10%"]
    assert store.headers[created.report_id].remarks == (
        "[VALIDATION WARNINGS]\nSulphur content 0.15% exceeds ECA limit of 0.10%\n\nSampled"
    )


@pytest.mark.asyncio
async def test_blocking_errors_are_never_persisted(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    result = await _use_case(uow).execute(
        ReportKind.BUNKER, _bunker(sulphur_content=0.60), actor="x"
    )

    assert result.error is not None
    assert result.error.kind is ErrorKind.VALIDATION
    assert "exceeds MARPOL 2020 global limit of 0.50%" in result.error.message
    assert store.headers == {}
    assert store.tables.sequences == {}


@pytest.mark.asyncio
async def test_null_island_noon_is_refused(store: InMemoryReportingStore, uow: FakeUnitOfWork) -> None:
    result = await _use_case(uow).execute(
        ReportKind.NOON,
        NoonReportCreateDTO.model_validate(noon_body(latitude=0.001, longitude=0.001)),
        actor="x",
    )
    assert result.error is not None
    assert "Null Island" in result.error.message
    assert store.headers == {}


@pytest.mark.asyncio
async def test_second_noon_on_same_day_conflicts(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    uc = _use_case(uow)
    await uc.execute(ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="x")
    second = await uc.execute(
        ReportKind.NOON,
        NoonReportCreateDTO.model_validate(noon_body(report_date="2025-01-10T11:30:00Z")),
        actor="x",
    )

    assert second.error is not None
    assert second.error.kind is ErrorKind.CONFLICT
    assert second.error.message == (
        "Noon report already exists for 2025-01-10. Only one noon report per day is allowed."
    )
    assert len(store.headers) == 1
    assert store.tables.sequences == {"NOON-20250110": 1}


@pytest.mark.asyncio
async def test_deleted_noon_does_not_block_a_new_one(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    uc = _use_case(uow)
    first = (
        await uc.execute(ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="x")
    ).unwrap()
    store.headers[first.report_id] = replace(
        store.headers[first.report_id], deleted_at=fixed_clock(), deleted_by="x"
    )

    again = await uc.execute(
        ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="x"
    )
    assert again.unwrap().report_number == "NOON-20250110-0002"


@pytest.mark.asyncio
async def test_one_departure_per_voyage(store: InMemoryReportingStore, uow: FakeUnitOfWork) -> None:
    body = {
        "port_name": "Rotterdam",
        "departure_date_time": "2025-01-08T06:00:00Z",
        "destination_port": "Hamburg",
        "voyage_id": 11,
    }
    uc = _use_case(uow)
    assert (await uc.execute(ReportKind.DEPARTURE, DepartureReportCreateDTO.model_validate(body), actor="x")).ok

    again = await uc.execute(
        ReportKind.DEPARTURE, DepartureReportCreateDTO.model_validate(body), actor="x"
    )
    assert again.error is not None
    assert again.error.kind is ErrorKind.CONFLICT
    assert again.error.message == (
        "Departure report already exists for voyage ID 11. "
        "Only one departure report per voyage is allowed."
    )

    other_voyage = await uc.execute(
        ReportKind.DEPARTURE,
        DepartureReportCreateDTO.model_validate({**body, "voyage_id": 12}),
        actor="x",
    )
    assert other_voyage.unwrap().report_number == "DEP-20250108-0002"


@pytest.mark.asyncio
async def test_future_position_is_refused(store: InMemoryReportingStore, uow: FakeUnitOfWork) -> None:
    dto = PositionReportCreateDTO.model_validate(
        {"report_date_time": "2025-01-10T18:00:00Z", "latitude": 10.0, "longitude": 20.0}
    )
    result = await _use_case(uow).execute(ReportKind.POSITION, dto, actor="x")
    assert result.error is not None
    assert result.error.message == "Report datetime cannot be in the future"


@pytest.mark.asyncio
async def test_missing_report_type_is_a_validation_failure(uow: FakeUnitOfWork) -> None:
    store = InMemoryReportingStore(report_types=())
    result = await _use_case(FakeUnitOfWork(store)).execute(
        ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="x"
    )
    assert result.error is not None
    assert result.error.kind is ErrorKind.VALIDATION
    assert result.error.message == "Report type NOON not found"


@pytest.mark.asyncio
async def test_transient_conflicts_are_retried(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    store.sequence_conflicts = 2

    result = await _use_case(uow, retries=3).execute(
        ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="x"
    )

    assert result.unwrap().report_number == "NOON-20250110-0001"
    assert uow.rollbacks == 2
    assert store.tables.sequences == {"NOON-20250110": 1}


@pytest.mark.asyncio
async def test_exhausted_retries_become_concurrency_failure(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    store.sequence_conflicts = 10

    result = await _use_case(uow, retries=2).execute(
        ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="x"
    )

    assert result.error is not None
    assert result.error.kind is ErrorKind.CONCURRENCY
    assert result.error.message == ALLOCATION_EXHAUSTED_MESSAGE
    assert store.headers == {}
    assert store.sequence_conflicts == 7


@pytest.mark.asyncio
async def test_daily_capacity_exhaustion_is_a_conflict(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    store.tables.sequences["BNK-20250109"] = 9999

    result = await _use_case(uow).execute(ReportKind.BUNKER, _bunker(), actor="x")

    assert result.error is not None
    assert result.error.kind is ErrorKind.CONFLICT
    assert result.error.message == "Daily report number capacity exhausted for BNK-20250109"
    assert store.tables.sequences["BNK-20250109"] == 9999


@pytest.mark.asyncio
async def test_concurrent_creates_receive_distinct_consecutive_numbers(
    store: InMemoryReportingStore, uow_factory: Callable[[], FakeUnitOfWork]
) -> None:
    registry = make_registry()

    async def create(i: int) -> str:
        uc = _use_case(uow_factory(), registry=registry)
        result = await uc.execute(ReportKind.BUNKER, _bunker(bdn_number=f"BDN-{i}"), actor="x")
        return result.unwrap().report_number

    numbers = await asyncio.gather(*(create(i) for i in range(8)))

    assert sorted(numbers) == [f"BNK-20250109-{n:04d}" for n in range(1, 9)]
    assert len(store.headers) == 8


async def _nothing_yet(*args: Any, **kwargs: Any) -> bool:
    return False


@pytest.mark.asyncio
async def test_noon_racing_past_the_existence_check_still_conflicts(
    store: InMemoryReportingStore, uow: FakeUnitOfWork, monkeypatch: pytest.MonkeyPatch
) -> None:
    uc = _use_case(uow)
    assert (
        await uc.execute(ReportKind.NOON, NoonReportCreateDTO.model_validate(noon_body()), actor="x")
    ).ok
    monkeypatch.setattr(FakeReportsRepository, "noon_exists_on", _nothing_yet)

    second = await uc.execute(
        ReportKind.NOON,
        NoonReportCreateDTO.model_validate(noon_body(report_date="2025-01-10T11:30:00Z")),
        actor="x",
    )

    assert second.error is not None
    assert second.error.kind is ErrorKind.CONFLICT
    assert second.error.message == (
        "Noon report already exists for 2025-01-10. Only one noon report per day is allowed."
    )
    assert len(store.headers) == 1
    assert store.tables.sequences == {"NOON-20250110": 1}


@pytest.mark.asyncio
async def test_departure_racing_past_the_existence_check_still_conflicts(
    store: InMemoryReportingStore, uow: FakeUnitOfWork, monkeypatch: pytest.MonkeyPatch
) -> None:
    body = {
        "port_name": "Rotterdam",
        "departure_date_time": "2025-01-08T06:00:00Z",
        "destination_port": "Hamburg",
        "voyage_id": 11,
    }
    uc = _use_case(uow)
    assert (
        await uc.execute(
            ReportKind.DEPARTURE, DepartureReportCreateDTO.model_validate(body), actor="x"
        )
    ).ok
    monkeypatch.setattr(FakeReportsRepository, "voyage_report_exists", _nothing_yet)

    again = await uc.execute(
        ReportKind.DEPARTURE, DepartureReportCreateDTO.model_validate(body), actor="x"
    )

    assert again.error is not None
    assert again.error.kind is ErrorKind.CONFLICT
    assert again.error.message.startswith("Departure report already exists for voyage ID 11.")
    assert len(store.headers) == 1
