# src/maritime_reporting_api/domain/entities/transmission_log.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Transmission log entry recorded on every report transmission attempt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from maritime_reporting_api.domain.enums.reporting import TransmissionMethod, TransmissionStatus


@dataclass(frozen=True, slots=True)
class TransmissionLogEntry:
    """One attempt to send a report ashore.

    Args:
        id: Store-assigned identifier; ``None`` until persisted.
        header_id: Report that was transmitted.
        method: Channel used.
        recipients: Recipient addresses (may be empty for VSAT/API).
        status: Attempt outcome.
        transmitted_at: Attempt instant.
        confirmation_number: Channel confirmation token, if any.
        error_message: Failure detail, if any.
    """

    id: int | None
    header_id: int
    method: TransmissionMethod
    recipients: tuple[str, ...]
    status: TransmissionStatus
    transmitted_at: datetime
    confirmation_number: str | None = None
    error_message: str | None = None
