# src/maritime_reporting_api/domain/exceptions/reporting.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""
Reporting domain exceptions.

Purpose:
    Typed signals raised by repository adapters when the store reports a
    conflict that the application layer must turn into a result value.

Layer:
    domain

Notes:
    - Adapters translate driver errors (``StaleDataError``, unique violations,
      serialization failures) into these types so use cases never import
      SQLAlchemy.
"""

from __future__ import annotations

from maritime_reporting_api.domain.exceptions.base import DomainError


class ReportingError(DomainError):
    """Base class for reporting persistence conflicts."""

    code = "REPORTING_ERROR"


class ConcurrencyConflictError(ReportingError):
    """Raised when a header changed underneath an update (stale version)."""

    code = "CONCURRENCY_CONFLICT"


class TransientStoreConflictError(ReportingError):
    """Raised on serialization failures and deadlocks; safe to retry."""

    code = "TRANSIENT_CONFLICT"


class DuplicateReportNumberError(TransientStoreConflictError):
    """Raised when an insert collides on the unique report number."""

    code = "DUPLICATE_REPORT_NUMBER"


class DuplicateAmendmentNumberError(TransientStoreConflictError):
    """Raised when two amendments race for the same number on one header."""

    code = "DUPLICATE_AMENDMENT_NUMBER"


class SequenceExhaustedError(ReportingError):
    """Raised when a daily report-number sequence passes its 4-digit capacity."""

    code = "SEQUENCE_EXHAUSTED"


class DuplicatePeriodReportError(ReportingError):
    """Raised when a write breaks a per-period rule.

    At most one visible noon report per UTC day, and at most one visible
    departure and one visible arrival report per voyage.
    """

    code = "DUPLICATE_PERIOD_REPORT"
