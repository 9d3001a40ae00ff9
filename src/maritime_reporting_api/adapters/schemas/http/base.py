# src/maritime_reporting_api/adapters/schemas/http/base.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Pydantic base for HTTP-facing schemas (envelopes and probe responses).

Layer: adapters/schemas
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseHTTPSchema(BaseModel):
    """Response schemas serialize exactly their declared fields; enums as values."""

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        ser_json_inf_nan="null",
        use_enum_values=True,
    )

    def model_dump_http(self, **kwargs: Any) -> dict[str, Any]:
        """Return a JSON-safe dict; presenters and log records use this, not ``model_dump``."""
        return self.model_dump(mode="json", **kwargs)
