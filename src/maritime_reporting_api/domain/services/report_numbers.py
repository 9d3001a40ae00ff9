# src/maritime_reporting_api/domain/services/report_numbers.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report number formatting.

Purpose:
    Build and parse ``PREFIX-YYYYMMDD-NNNN`` identifiers. Allocation of the
    sequence value itself happens in the report-sequence repository, inside
    the transaction that creates the report.

Layer:
    domain/services
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Final

from maritime_reporting_api.domain.enums.reporting import ReportKind

MAX_DAILY_SEQUENCE: Final[int] = 9999

_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"^(?P<prefix>[A-Z]+)-(?P<day>\d{8})-(?P<seq>\d{4})$")


@dataclass(frozen=True, slots=True)
class ReportNumber:
    """Parsed report number."""

    prefix: str
    day: date
    sequence: int

    def __str__(self) -> str:
        return format_report_number(self.prefix, self.day, self.sequence)


def report_day(report_date_time: datetime) -> date:
    """Return the calendar date used for numbering (UTC date; naive means UTC)."""
    if report_date_time.tzinfo is None:
        return report_date_time.date()
    return report_date_time.astimezone(UTC).date()


def sequence_key(kind: ReportKind, day: date) -> str:
    """Counter key for one prefix and day, e.g. ``NOON-20250110``."""
    return f"{kind.number_prefix}-{day:%Y%m%d}"


def format_report_number(prefix: str, day: date, sequence: int) -> str:
    """Render a report number.

    Raises:
        ValueError: If ``sequence`` is outside ``1..9999``.
    """
    if not 1 <= sequence <= MAX_DAILY_SEQUENCE:
        raise ValueError(f"sequence out of range: {sequence}")
    return f"{prefix}-{day:%Y%m%d}-{sequence:04d}"


def parse_report_number(value: str) -> ReportNumber:
    """Parse a report number.

    Raises:
        ValueError: If ``value`` is not of the form ``PREFIX-YYYYMMDD-NNNN``.
    """
    match = _NUMBER_RE.match(value)
    if match is None:
        raise ValueError(f"malformed report number: {value!r}")
    day = datetime.strptime(match["day"], "%Y%m%d").date()
    return ReportNumber(prefix=match["prefix"], day=day, sequence=int(match["seq"]))
