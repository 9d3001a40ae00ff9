# src/maritime_reporting_api/adapters/presenters/reports_presenter.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Presenter: workflow results to HTTP envelopes.

Synopsis:
    Maps a :class:`Result` from the reporting use cases onto the canonical
    envelopes. Successes become ``{"data": ...}`` (or a paginated body for
    listings); failures become ``{"error": ...}`` with a status and code
    chosen from the failure kind.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from fastapi.encoders import jsonable_encoder

from maritime_reporting_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from maritime_reporting_api.application.schemas.dto.report_views import ReportListDTO
from maritime_reporting_api.domain.enums.reporting import ErrorKind
from maritime_reporting_api.domain.value_objects.result import Result, WorkflowError

#: ErrorKind -> (HTTP status, public error code).
ERROR_MAP: Final[Mapping[ErrorKind, tuple[int, str]]] = {
    ErrorKind.VALIDATION: (400, "VALIDATION_FAILED"),
    ErrorKind.CONFLICT: (400, "CONFLICT"),
    ErrorKind.NOT_FOUND: (404, "NOT_FOUND"),
    ErrorKind.INVALID_STATE_TRANSITION: (400, "INVALID_STATE_TRANSITION"),
    ErrorKind.CONCURRENCY: (400, "CONCURRENCY_CONFLICT"),
}


class ReportsPresenter(BasePresenter[Any]):
    """Shape reporting results into envelopes."""

    def present_failure(
        self, error: WorkflowError, *, trace_id: str | None = None
    ) -> PresentResult[Any]:
        """Render a workflow failure as an ErrorEnvelope."""
        http_status, code = ERROR_MAP[error.kind]
        return self.present_error(
            code=code,
            http_status=http_status,
            message=error.message,
            trace_id=trace_id,
            details=jsonable_encoder(dict(error.details)),
        )

    def present_result(
        self,
        result: Result[Any],
        *,
        trace_id: str | None = None,
        status_code: int | None = None,
    ) -> PresentResult[Any]:
        """Render any single-resource result.

        Args:
            result: Use-case outcome.
            trace_id: Request id echoed in headers and error bodies.
            status_code: Override for successes (e.g. 201 on create).
        """
        if result.error is not None:
            return self.present_failure(result.error, trace_id=trace_id)
        return self.present_success(data=result.value, trace_id=trace_id, status_code=status_code)

    def present_report_page(
        self, result: Result[ReportListDTO], *, trace_id: str | None = None
    ) -> PresentResult[Any]:
        """Render a listing result as a PaginatedEnvelope."""
        if result.error is not None:
            return self.present_failure(result.error, trace_id=trace_id)
        page = result.unwrap()
        return self.present_paginated(
            items=list(page.items),
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            trace_id=trace_id,
        )
