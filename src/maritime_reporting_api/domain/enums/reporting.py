# src/maritime_reporting_api/domain/enums/reporting.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""
Reporting enumerations.

Purpose:
    Stable, storage-agnostic tokens for report kinds, the primary report
    status machine, the amendment sub-machine, transmission channels, and the
    error taxonomy used by workflow results.

Layer:
    domain

Notes:
    - Values are persisted verbatim in the database; never rename a value
      without a migration.
"""

from __future__ import annotations

from enum import Enum


class ReportKind(str, Enum):
    """Report kinds exposed on the HTTP surface (``/reports/{kind}``)."""

    NOON = "noon"
    DEPARTURE = "departure"
    ARRIVAL = "arrival"
    BUNKER = "bunker"
    POSITION = "position"

    @property
    def type_code(self) -> str:
        """Report-type code in the registry (e.g. ``NOON``)."""
        return self.value.upper()

    @property
    def number_prefix(self) -> str:
        """Prefix used by report numbers (e.g. ``DEP`` for departures)."""
        return _NUMBER_PREFIXES[self]

    @property
    def label(self) -> str:
        """Human label used in messages (``Noon``, ``Departure`` ...)."""
        return self.value.capitalize()


_NUMBER_PREFIXES: dict[ReportKind, str] = {
    ReportKind.NOON: "NOON",
    ReportKind.DEPARTURE: "DEP",
    ReportKind.ARRIVAL: "ARR",
    ReportKind.BUNKER: "BNK",
    ReportKind.POSITION: "POS",
}


class ReportStatus(str, Enum):
    """Primary report lifecycle status."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    TRANSMITTED = "TRANSMITTED"

    @property
    def is_mutable(self) -> bool:
        """True while the payload may still change without an amendment."""
        return self in (ReportStatus.DRAFT, ReportStatus.SUBMITTED, ReportStatus.REJECTED)

    @property
    def is_amendable(self) -> bool:
        """True when corrections must go through the amendment sub-workflow."""
        return self in (ReportStatus.APPROVED, ReportStatus.TRANSMITTED)


class AmendmentStatus(str, Enum):
    """Amendment sub-workflow status; transmission is a flag, not a state."""

    DRAFT = "DRAFT"
    APPROVED = "APPROVED"


class TransmissionMethod(str, Enum):
    """Shore transmission channel."""

    EMAIL = "EMAIL"
    VSAT = "VSAT"
    API = "API"


class TransmissionStatus(str, Enum):
    """Outcome of a single transmission attempt."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ErrorKind(str, Enum):
    """Failure taxonomy carried by workflow results."""

    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    CONCURRENCY = "CONCURRENCY"
