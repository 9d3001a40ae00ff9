# src/maritime_reporting_api/dependencies/reporting.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the reporting workflow.

Overview:
    Provides the FastAPI dependency providers consumed by the reports and
    amendments routers: the acting user, the report-type registry, the
    retry runner, and a :class:`ReportsController` whose use cases share one
    unit of work per request.

Layer:
    dependencies

Design:
    * Always return the real use case types; tests override
      :func:`get_reporting_uow` with an in-memory unit of work.
    * Select cache implementation by environment:
        - In-memory JSON cache in test mode (hermetic, no Redis dependency).
        - RedisJsonCache everywhere else.
    * The registry is a process-wide singleton so its cache outlives requests.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from functools import lru_cache, partial
from typing import Annotated

from fastapi import Depends, Header

from maritime_reporting_api.adapters.controllers.reports_controller import (
    ReportingUseCases,
    ReportsController,
)
from maritime_reporting_api.adapters.dependencies.reporting_uow import get_reporting_uow
from maritime_reporting_api.application.interfaces.cache_port import CachePort
from maritime_reporting_api.application.interfaces.retry_port import RetryRunner
from maritime_reporting_api.application.services.report_type_registry import ReportTypeRegistry
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.amendments.amendments import (
    ApproveAmendmentUseCase,
    CreateAmendmentUseCase,
    GetAmendmentUseCase,
    ListAmendmentsUseCase,
    TransmitAmendmentUseCase,
)
from maritime_reporting_api.application.use_cases.reports.create_report import (
    CreateReportUseCase,
)
from maritime_reporting_api.application.use_cases.reports.get_report import GetReportUseCase
from maritime_reporting_api.application.use_cases.reports.list_reports import (
    ListReportsUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_audit import (
    GetTransmissionStatusUseCase,
    GetWorkflowHistoryUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_retention import (
    ListDeletedReportsUseCase,
    RestoreReportUseCase,
    SoftDeleteReportUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_statistics import (
    GetReportStatisticsUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_transitions import (
    ApproveReportUseCase,
    RejectReportUseCase,
    ReopenReportUseCase,
    SubmitReportUseCase,
    TransmitReportUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_types import (
    ListReportTypesUseCase,
)
from maritime_reporting_api.application.use_cases.reports.update_draft_report import (
    PatchDraftReportUseCase,
    ReplaceNoonReportUseCase,
)
from maritime_reporting_api.config.settings import Settings, get_settings, is_test_mode
from maritime_reporting_api.domain.exceptions.reporting import DuplicateAmendmentNumberError
from maritime_reporting_api.infrastructure.caching.json_cache import (
    InMemoryJsonCache,
    RedisJsonCache,
)
from maritime_reporting_api.infrastructure.middleware.request_id import actor_from_header
from maritime_reporting_api.infrastructure.observability.metrics import (
    get_report_number_retries_total,
)
from maritime_reporting_api.infrastructure.resilience.retry import RetryPolicy, retry_async

logger = logging.getLogger(__name__)


def get_actor(
    x_user: Annotated[
        str | None,
        Header(alias="X-User", description="Acting user recorded in the audit trail."),
    ] = None,
) -> str:
    """Return the acting user from ``X-User`` (``Unknown`` when absent or blank)."""
    return actor_from_header(x_user)


# =============================================================================
# Cache and registry
# =============================================================================


def _build_cache() -> CachePort:
    """Select cache backend based on environment.

    - REPORTING_TEST_MODE=1 (set by ENVIRONMENT=test) -> InMemoryJsonCache
    - otherwise -> RedisJsonCache
    """
    if is_test_mode():
        return InMemoryJsonCache()
    return RedisJsonCache()


@lru_cache(maxsize=1)
def get_report_type_registry() -> ReportTypeRegistry:
    """Return the process-wide report-type registry."""
    settings = get_settings()
    return ReportTypeRegistry(cache=_build_cache(), ttl_s=settings.report_type_cache_ttl_s)


# =============================================================================
# Retry runner
# =============================================================================


def _retry_prefix(exc: Exception) -> str:
    if isinstance(exc, DuplicateAmendmentNumberError):
        return "AMENDMENT"
    details = getattr(exc, "details", None) or {}
    ref = str(details.get("key") or details.get("report_number") or "")
    return ref.split("-", 1)[0] or "unknown"


def _record_retry(attempt: int, exc: Exception) -> None:
    prefix = _retry_prefix(exc)
    get_report_number_retries_total().labels(prefix=prefix, reason=type(exc).__name__).inc()
    logger.warning(
        "reports.number.retry",
        extra={"attempt": attempt + 1, "prefix": prefix, "reason": type(exc).__name__},
    )


def build_retry_runner(settings: Settings) -> RetryRunner:
    """Bind :func:`retry_async` to the configured allocation backoff."""
    policy = RetryPolicy(
        total=settings.report_number_retry_attempts,
        base=settings.report_number_retry_base_s,
        cap=settings.report_number_retry_cap_s,
    )
    runner: RetryRunner = partial(retry_async, policy=policy, on_retry=_record_retry)  # type: ignore[assignment]
    return runner


# =============================================================================
# Use cases and controller
# =============================================================================


def build_use_cases(
    uow: UnitOfWork,
    *,
    registry: ReportTypeRegistry,
    settings: Settings,
) -> ReportingUseCases:
    """Bind every reporting use case to ``uow``."""
    retry = build_retry_runner(settings)
    tolerance = timedelta(seconds=settings.report_future_tolerance_s)
    return ReportingUseCases(
        create=CreateReportUseCase(
            uow, registry=registry, retry=retry, future_tolerance=tolerance
        ),
        get=GetReportUseCase(uow),
        list=ListReportsUseCase(
            uow, registry=registry, max_page_size=settings.report_page_size_max
        ),
        patch=PatchDraftReportUseCase(uow, future_tolerance=tolerance),
        replace_noon=ReplaceNoonReportUseCase(uow, future_tolerance=tolerance),
        submit=SubmitReportUseCase(uow),
        approve=ApproveReportUseCase(uow, registry=registry),
        reject=RejectReportUseCase(uow),
        reopen=ReopenReportUseCase(uow),
        transmit=TransmitReportUseCase(uow),
        history=GetWorkflowHistoryUseCase(uow),
        transmission_status=GetTransmissionStatusUseCase(uow),
        soft_delete=SoftDeleteReportUseCase(uow),
        restore=RestoreReportUseCase(uow),
        list_deleted=ListDeletedReportsUseCase(uow),
        statistics=GetReportStatisticsUseCase(uow, registry=registry),
        types=ListReportTypesUseCase(uow, registry=registry),
        create_amendment=CreateAmendmentUseCase(uow, retry=retry),
        list_amendments=ListAmendmentsUseCase(uow),
        get_amendment=GetAmendmentUseCase(uow),
        approve_amendment=ApproveAmendmentUseCase(uow),
        transmit_amendment=TransmitAmendmentUseCase(uow),
    )


def get_reports_controller(
    uow: Annotated[UnitOfWork, Depends(get_reporting_uow)],
    registry: Annotated[ReportTypeRegistry, Depends(get_report_type_registry)],
) -> ReportsController:
    """Yield a controller whose use cases share the request's unit of work."""
    return ReportsController(build_use_cases(uow, registry=registry, settings=get_settings()))
