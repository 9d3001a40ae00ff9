# src/maritime_reporting_api/application/use_cases/reports/common.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Shared helpers for the reporting use cases.

Purpose:
    Repository resolution against the active unit of work, the injectable
    clock, and the translation of store-level conflicts into result values.

Layer:
    application
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import cast

from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.domain.enums.reporting import ErrorKind
from maritime_reporting_api.domain.exceptions.reporting import ConcurrencyConflictError
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
    ReportsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.transmission_logs_repository import (
    TransmissionLogsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.workflow_history_repository import (
    WorkflowHistoryRepository,
)
from maritime_reporting_api.domain.value_objects.result import Result

Clock = Callable[[], datetime]

REPORT_NOT_FOUND = "Report not found"
STALE_REPORT_MESSAGE = "Report was modified by another user. Reload and try again."


def utc_now() -> datetime:
    """Default clock: timezone-aware UTC now."""
    return datetime.now(UTC)


def reports_repo(tx: UnitOfWork) -> ReportsRepository:
    return cast(ReportsRepository, tx.get_repository(ReportsRepository))


def report_types_repo(tx: UnitOfWork) -> ReportTypesRepository:
    return cast(ReportTypesRepository, tx.get_repository(ReportTypesRepository))


def history_repo(tx: UnitOfWork) -> WorkflowHistoryRepository:
    return cast(WorkflowHistoryRepository, tx.get_repository(WorkflowHistoryRepository))


def amendments_repo(tx: UnitOfWork) -> AmendmentsRepository:
    return cast(AmendmentsRepository, tx.get_repository(AmendmentsRepository))


def transmission_logs_repo(tx: UnitOfWork) -> TransmissionLogsRepository:
    return cast(TransmissionLogsRepository, tx.get_repository(TransmissionLogsRepository))


def sequences_repo(tx: UnitOfWork) -> ReportSequencesRepository:
    return cast(ReportSequencesRepository, tx.get_repository(ReportSequencesRepository))


def not_found[T](message: str = REPORT_NOT_FOUND, **details: object) -> Result[T]:
    return Result.failure(ErrorKind.NOT_FOUND, message, **details)


def stale[T](exc: ConcurrencyConflictError) -> Result[T]:
    """Map an optimistic-lock failure to a CONCURRENCY result."""
    return Result.failure(ErrorKind.CONCURRENCY, STALE_REPORT_MESSAGE, **exc.details)
