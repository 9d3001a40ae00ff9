# tests/unit/application/test_report_transitions.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from datetime import timedelta

import pytest

from maritime_reporting_api.application.schemas.dto.report_commands import (
    ApproveReportDTO,
    RejectReportDTO,
    ReopenReportDTO,
    TransmitReportDTO,
)
from maritime_reporting_api.application.use_cases.reports.common import STALE_REPORT_MESSAGE
from maritime_reporting_api.application.use_cases.reports.report_audit import (
    GetTransmissionStatusUseCase,
    GetWorkflowHistoryUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_transitions import (
    ApproveReportUseCase,
    RejectReportUseCase,
    ReopenReportUseCase,
    SubmitReportUseCase,
    TransmitReportUseCase,
)
from maritime_reporting_api.domain.entities.report_payloads import PositionPayload
from maritime_reporting_api.domain.entities.workflow_history import WorkflowHistoryEntry
from maritime_reporting_api.domain.enums.reporting import (
    ErrorKind,
    ReportStatus,
    TransmissionMethod,
    TransmissionStatus,
)
from reporting_fakes import (
    FIXED_NOW,
    FakeUnitOfWork,
    FakeWorkflowHistoryRepository,
    InMemoryReportingStore,
    fixed_clock,
    make_registry,
    seed_report,
)


@pytest.mark.asyncio
async def test_submit_writes_header_and_one_audit_row(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store)

    result = await SubmitReportUseCase(uow, clock=fixed_clock).execute(header.id or 0)

    assert result.unwrap().message == "Report submitted for approval"
    saved = store.headers[header.id or 0]
    assert saved.status is ReportStatus.SUBMITTED
    assert saved.version == 2
    [entry] = store.history_for(header.id or 0)
    assert (entry.from_status, entry.to_status) == (ReportStatus.DRAFT, ReportStatus.SUBMITTED)
    assert entry.changed_by == "2/O Smith"
    assert entry.changed_at == FIXED_NOW


@pytest.mark.asyncio
async def test_refused_transition_leaves_no_trace(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)

    result = await SubmitReportUseCase(uow, clock=fixed_clock).execute(header.id or 0)

    assert result.error is not None
    assert result.error.kind is ErrorKind.INVALID_STATE_TRANSITION
    assert store.headers[header.id or 0] == header
    assert store.history == []


@pytest.mark.asyncio
async def test_unknown_report_is_not_found(uow: FakeUnitOfWork) -> None:
    result = await SubmitReportUseCase(uow).execute(999)
    assert result.error is not None
    assert result.error.kind is ErrorKind.NOT_FOUND
    assert result.error.message == "Report not found"


@pytest.mark.asyncio
async def test_deleted_report_cannot_be_submitted(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store, deleted_at=FIXED_NOW, deleted_by="x")
    result = await SubmitReportUseCase(uow).execute(header.id or 0)
    assert result.error is not None
    assert result.error.message == "Cannot submit deleted report"


@pytest.mark.asyncio
async def test_concurrent_writer_yields_concurrency_failure(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store)
    store.stale_updates = 1

    result = await SubmitReportUseCase(uow, clock=fixed_clock).execute(header.id or 0)

    assert result.error is not None
    assert result.error.kind is ErrorKind.CONCURRENCY
    assert result.error.message == STALE_REPORT_MESSAGE
    assert store.headers[header.id or 0].status is ReportStatus.DRAFT
    assert store.history == []


@pytest.mark.asyncio
async def test_approve_checks_signature_against_report_type(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store, status=ReportStatus.SUBMITTED)
    uc = ApproveReportUseCase(uow, registry=make_registry(), clock=fixed_clock)

    missing = await uc.execute(header.id or 0, ApproveReportDTO(master_signature=""))
    assert missing.error is not None
    assert missing.error.kind is ErrorKind.VALIDATION
    assert missing.error.message == "Master signature is required for Noon Report"

    ok = await uc.execute(
        header.id or 0, ApproveReportDTO(master_signature="Capt. Jones", approval_remarks="OK")
    )
    assert ok.unwrap().message == "Report approved by Master"
    saved = store.headers[header.id or 0]
    assert saved.status is ReportStatus.APPROVED
    assert saved.master_signature == "Capt. Jones"
    assert saved.signed_at == FIXED_NOW
    [entry] = store.history_for(header.id or 0)
    assert entry.changed_by == "Capt. Jones"
    assert entry.remarks == "OK"


@pytest.mark.asyncio
async def test_position_reports_approve_without_signature(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    payload = PositionPayload(
        report_date_time=FIXED_NOW - timedelta(hours=1), latitude=10.0, longitude=20.0
    )
    header = seed_report(store, status=ReportStatus.SUBMITTED, payload=payload)

    result = await ApproveReportUseCase(uow, registry=make_registry(), clock=fixed_clock).execute(
        header.id or 0, ApproveReportDTO(master_signature="")
    )

    assert result.ok
    assert store.headers[header.id or 0].master_signature is None


@pytest.mark.asyncio
async def test_future_dated_report_cannot_be_approved(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(
        store, status=ReportStatus.SUBMITTED, report_date_time=FIXED_NOW + timedelta(hours=2)
    )
    result = await ApproveReportUseCase(uow, registry=make_registry(), clock=fixed_clock).execute(
        header.id or 0, ApproveReportDTO(master_signature="Capt. Jones")
    )
    assert result.error is not None
    assert result.error.message == "Cannot approve report with future date/time"


@pytest.mark.asyncio
async def test_reject_then_reopen_round_trip(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store, status=ReportStatus.SUBMITTED)
    report_id = header.id or 0

    rejected = await RejectReportUseCase(uow, clock=fixed_clock).execute(
        report_id, RejectReportDTO(reason="ROB does not add up"), actor="Capt. Jones"
    )
    assert rejected.unwrap().message == "Report rejected"
    assert store.headers[report_id].status is ReportStatus.REJECTED

    reopened = await ReopenReportUseCase(uow, clock=fixed_clock).execute(
        report_id, ReopenReportDTO(corrections="Recount ROB"), actor="C/E Brown"
    )
    assert reopened.unwrap().message == "Report reopened for corrections"

    saved = store.headers[report_id]
    assert saved.status is ReportStatus.DRAFT
    assert saved.remarks is not None
    assert "[REJECTED] ROB does not add up" in saved.remarks
    assert "[REOPENED 2025-01-10 14:00 UTC by C/E Brown]" in saved.remarks
    assert [e.changed_by for e in store.history_for(report_id)] == ["Capt. Jones", "C/E Brown"]


@pytest.mark.asyncio
async def test_blank_rejection_reason_is_refused(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store, status=ReportStatus.SUBMITTED)
    result = await RejectReportUseCase(uow).execute(
        header.id or 0, RejectReportDTO(reason="   "), actor="x"
    )
    assert result.error is not None
    assert result.error.kind is ErrorKind.VALIDATION
    assert result.error.message == "Rejection reason is required"


@pytest.mark.asyncio
async def test_transmit_logs_attempt_and_reports_status(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store, status=ReportStatus.APPROVED)
    report_id = header.id or 0

    result = await TransmitReportUseCase(uow, clock=fixed_clock).execute(
        report_id,
        TransmitReportDTO(
            transmission_method=TransmissionMethod.API, recipient_emails=["ops@example.com"]
        ),
        actor="Capt. Jones",
    )

    assert result.unwrap().message == "Report transmitted successfully"
    saved = store.headers[report_id]
    assert saved.status is ReportStatus.TRANSMITTED
    assert saved.is_transmitted is True
    [log] = store.logs
    assert log.method is TransmissionMethod.API
    assert log.status is TransmissionStatus.SUCCESS
    assert log.confirmation_number == "TXN-20250110140000"

    status = (await GetTransmissionStatusUseCase(uow).execute(report_id)).unwrap()
    assert status.is_transmitted is True
    assert status.transmission_attempts == 1
    assert status.last_transmission_status == "SUCCESS"
    assert status.last_transmission_time == FIXED_NOW
    assert status.error_message is None


@pytest.mark.asyncio
async def test_transmission_status_of_untransmitted_report(
    store: InMemoryReportingStore, uow: FakeUnitOfWork
) -> None:
    header = seed_report(store)
    status = (await GetTransmissionStatusUseCase(uow).execute(header.id or 0)).unwrap()
    assert status.is_transmitted is False
    assert status.transmission_attempts == 0
    assert status.last_transmission_status is None


@pytest.mark.asyncio
async def test_history_is_newest_first_and_empty_trail_is_missing(
    store: InMemoryReportingStore, uow_factory
) -> None:
    header = seed_report(store)
    report_id = header.id or 0

    empty = await GetWorkflowHistoryUseCase(uow_factory()).execute(report_id)
    assert empty.error is not None
    assert empty.error.kind is ErrorKind.NOT_FOUND
    assert empty.error.message == "No workflow history found for this report"

    await SubmitReportUseCase(uow_factory(), clock=fixed_clock).execute(report_id)
    await ApproveReportUseCase(
        uow_factory(), registry=make_registry(), clock=lambda: FIXED_NOW + timedelta(minutes=5)
    ).execute(report_id, ApproveReportDTO(master_signature="Capt. Jones"))

    trail = (await GetWorkflowHistoryUseCase(uow_factory()).execute(report_id)).unwrap()
    assert trail.total_changes == 2
    assert [h.to_status for h in trail.history] == ["APPROVED", "SUBMITTED"]


@pytest.mark.asyncio
async def test_failed_audit_write_rolls_back_the_transition(
    store: InMemoryReportingStore, uow: FakeUnitOfWork, monkeypatch: pytest.MonkeyPatch
) -> None:
    header = seed_report(store)

    async def broken_add(
        self: FakeWorkflowHistoryRepository, entry: WorkflowHistoryEntry
    ) -> WorkflowHistoryEntry:
        raise RuntimeError("audit table unavailable")

    monkeypatch.setattr(FakeWorkflowHistoryRepository, "add", broken_add)

    with pytest.raises(RuntimeError, match="audit table unavailable"):
        await SubmitReportUseCase(uow, clock=fixed_clock).execute(header.id or 0)

    saved = store.headers[header.id or 0]
    assert saved.status is ReportStatus.DRAFT
    assert saved.version == header.version
    assert store.history == []
    assert uow.rollbacks == 1
