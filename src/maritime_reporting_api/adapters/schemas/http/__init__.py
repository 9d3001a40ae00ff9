# src/maritime_reporting_api/adapters/schemas/http/__init__.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface. Re-exports the canonical
    envelopes used by routers and presenters; BaseHTTPSchema stays internal.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from maritime_reporting_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    PaginatedEnvelope,
    SuccessEnvelope,
)

__all__ = [
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "PaginatedEnvelope",
]
