# src/maritime_reporting_api/domain/exceptions/base.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""
Base Domain Exceptions.

Summary:
    Canonical base class for domain exceptions. Workflow failures travel as
    result values; these exceptions are reserved for conditions that adapters
    detect inside the persistence layer and the use cases translate back
    into results before they leave the application layer.

Layer:
    domain/exceptions
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions."""

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        return self.message
