# src/maritime_reporting_api/domain/interfaces/repositories/transmission_logs_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Transmission-log repository interface."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from maritime_reporting_api.domain.entities.transmission_log import TransmissionLogEntry


class TransmissionLogsRepository(Protocol):
    """Rows describing each attempt to send a report ashore."""

    async def add(self, entry: TransmissionLogEntry) -> TransmissionLogEntry:
        """Stage one log row in the caller's transaction."""
        raise NotImplementedError

    async def list_for_header(self, header_id: int) -> list[TransmissionLogEntry]:
        """Return attempts for a header, newest first."""
        raise NotImplementedError

    async def count_failed(
        self, *, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> int:
        """Count FAILED attempts for visible reports dated within the window."""
        raise NotImplementedError
