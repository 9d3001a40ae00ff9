# tests/unit/adapters/test_reports_presenter.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import hashlib
import json

import pytest

from maritime_reporting_api.adapters.presenters.reports_presenter import (
    ERROR_MAP,
    ReportsPresenter,
)
from maritime_reporting_api.application.schemas.dto.report_views import (
    MessageDTO,
    ReportListDTO,
)
from maritime_reporting_api.domain.enums.reporting import ErrorKind
from maritime_reporting_api.domain.value_objects.result import Result


def test_every_failure_kind_has_a_mapping() -> None:
    assert set(ERROR_MAP) == set(ErrorKind)
    assert ERROR_MAP[ErrorKind.NOT_FOUND] == (404, "NOT_FOUND")
    assert {status for status, _ in ERROR_MAP.values()} == {400, 404}


def test_success_carries_quoted_sha256_etag() -> None:
    result = ReportsPresenter().present_result(
        Result.success(MessageDTO(message="Report submitted for approval")),
        trace_id="req-1",
        status_code=201,
    )

    assert result.status_code == 201
    assert result.headers["X-Request-ID"] == "req-1"
    assert result.body is not None
    payload = result.body.model_dump(mode="json")
    assert payload["data"]["message"] == "Report submitted for approval"
    material = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode()
    assert result.headers["ETag"] == f'"{hashlib.sha256(material).hexdigest()}"'


@pytest.mark.parametrize(
    ("kind", "status", "code"),
    [
        (ErrorKind.VALIDATION, 400, "VALIDATION_FAILED"),
        (ErrorKind.CONFLICT, 400, "CONFLICT"),
        (ErrorKind.INVALID_STATE_TRANSITION, 400, "INVALID_STATE_TRANSITION"),
        (ErrorKind.CONCURRENCY, 400, "CONCURRENCY_CONFLICT"),
    ],
)
def test_failure_becomes_error_envelope(kind: ErrorKind, status: int, code: str) -> None:
    result = ReportsPresenter().present_result(
        Result.failure(kind, "nope", status="DRAFT"), trace_id="req-2"
    )

    assert result.status_code == status
    assert "ETag" not in result.headers
    assert result.body is not None
    error = result.body.model_dump(mode="json")["error"]
    assert error == {
        "code": code,
        "http_status": status,
        "message": "nope",
        "details": {"status": "DRAFT"},
        "trace_id": "req-2",
    }


def test_listing_is_paginated_without_etag() -> None:
    result = ReportsPresenter().present_report_page(
        Result.success(ReportListDTO(items=[], total=0, page=2, page_size=10))
    )

    assert "ETag" not in result.headers
    assert result.body is not None
    assert result.body.model_dump(mode="json") == {
        "page": 2,
        "page_size": 10,
        "total": 0,
        "items": [],
    }
