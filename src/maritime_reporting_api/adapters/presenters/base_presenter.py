# src/maritime_reporting_api/adapters/presenters/base_presenter.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Envelope builders shared by the reporting presenters.

Every response body is one of three envelopes:

* ``{"data": ...}`` for a single report, amendment, audit trail or message.
  These carry a strong ``ETag`` so clients can detect that a report changed
  between two reads.
* ``{"page", "page_size", "total", "items"}`` for report listings. No ETag;
  listings change whenever any report on the page does.
* ``{"error": ...}`` for failures. No ETag; the body echoes the request id as
  ``trace_id``.

All three echo ``X-Request-ID`` when the request carried one.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from maritime_reporting_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    PaginatedEnvelope,
    SuccessEnvelope,
)


def strong_etag(payload: Mapping[str, Any]) -> str:
    """Return ``"<sha256>"`` over the compact, key-sorted JSON of ``payload``."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return '"' + hashlib.sha256(canonical.encode("utf-8")).hexdigest() + '"'


@dataclass(slots=True)
class PresentResult[T]:
    """Body plus the headers and status a router should send with it."""

    body: T | None
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int | None = None


def _correlation_headers(trace_id: str | None) -> dict[str, str]:
    return {"X-Request-ID": trace_id} if trace_id else {}


class BasePresenter[T]:
    """Build envelopes; business decisions stay in the use cases."""

    def present_success(
        self,
        *,
        data: Any,
        trace_id: str | None = None,
        status_code: int | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        body = SuccessEnvelope[Any](data=data)
        headers = _correlation_headers(trace_id)
        headers["ETag"] = strong_etag(body.model_dump_http())
        return PresentResult(body=body, headers=headers, status_code=status_code)

    def present_error(
        self,
        *,
        code: str,
        http_status: int,
        message: str,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> PresentResult[ErrorEnvelope]:
        error = ErrorObject(
            code=code,
            http_status=http_status,
            message=message,
            details=details or {},
            trace_id=trace_id,
        )
        return PresentResult(
            body=ErrorEnvelope(error=error),
            headers=_correlation_headers(trace_id),
            status_code=int(http_status),
        )

    def present_paginated(
        self,
        *,
        items: list[Any],
        page: int,
        page_size: int,
        total: int,
        trace_id: str | None = None,
    ) -> PresentResult[PaginatedEnvelope[Any]]:
        body = PaginatedEnvelope[Any](page=page, page_size=page_size, total=total, items=items)
        return PresentResult(body=body, headers=_correlation_headers(trace_id))
