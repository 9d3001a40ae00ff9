# src/maritime_reporting_api/adapters/schemas/http/envelopes.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Purpose:
    Canonical transport-facing HTTP envelopes:
      - ErrorEnvelope
      - SuccessEnvelope[T]
      - PaginatedEnvelope[T]
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from maritime_reporting_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = [
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "PaginatedEnvelope",
]


# ---------------------------------------------------------------------------
# Error Object
# ---------------------------------------------------------------------------


class ErrorObject(BaseModel):
    """Structured error object inside ErrorEnvelope.

    Error codes are UPPER_SNAKE_CASE and stable across releases:
        - VALIDATION_FAILED: A business rule rejected the report.
        - CONFLICT: The operation collides with existing data.
        - NOT_FOUND: The report or amendment does not exist (or is deleted).
        - INVALID_STATE_TRANSITION: The workflow forbids the action now.
        - CONCURRENCY_CONFLICT: Another writer won; reload and retry.
        - VALIDATION_ERROR: The request body or query is malformed.
    """

    model_config = ConfigDict(
        title="ErrorObject",
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "code": "INVALID_STATE_TRANSITION",
                    "http_status": 400,
                    "message": "Cannot submit report with status APPROVED",
                    "details": {"status": "APPROVED"},
                    "trace_id": "req-123",
                }
            ]
        },
    )

    code: str = Field(..., description="Stable machine-readable error code.")
    http_status: int = Field(..., description="Associated HTTP status.")
    message: str = Field(..., description="Human-readable error description.")
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional structured details safe for clients.",
    )
    trace_id: str | None = Field(
        default=None,
        description="Request correlation identifier.",
    )


# ---------------------------------------------------------------------------
# Error Envelope
# ---------------------------------------------------------------------------


class ErrorEnvelope(BaseHTTPSchema):
    r"""Canonical error envelope: {"error": ErrorObject}."""

    model_config = ConfigDict(title="ErrorEnvelope", extra="forbid")

    error: ErrorObject = Field(..., description="Structured error details.")


# ---------------------------------------------------------------------------
# Success Envelope
# ---------------------------------------------------------------------------


class SuccessEnvelope[T](BaseHTTPSchema):
    r"""Success envelope for non-paginated responses: {"data": T}."""

    model_config = ConfigDict(title="SuccessEnvelope", extra="forbid")

    data: T = Field(..., description="Returned resource or value.")


# ---------------------------------------------------------------------------
# Paginated Envelope
# ---------------------------------------------------------------------------


class PaginatedEnvelope[T](BaseHTTPSchema):
    """Paginated success envelope."""

    model_config = ConfigDict(title="PaginatedEnvelope", extra="forbid")

    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=200)
    total: int = Field(..., ge=0)
    items: Sequence[T] = Field(...)
