# src/maritime_reporting_api/domain/interfaces/repositories/report_sequences_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Report-sequence repository interface.

Purpose:
    Atomic per-key counters backing report numbers. Implementations lock the
    counter row for the rest of the caller's transaction, so a rolled-back
    creation also rolls back the increment and sequences stay gap-free.

Layer:
    domain
"""

from __future__ import annotations

from typing import Protocol


class ReportSequencesRepository(Protocol):
    """Counter rows keyed by ``PREFIX-YYYYMMDD``."""

    async def next_value(self, key: str) -> int:
        """Increment and return the counter for ``key`` (first value is 1).

        Args:
            key: Counter name, e.g. ``NOON-20250110``.

        Returns:
            int: The newly allocated value.

        Raises:
            TransientStoreConflictError: If a concurrent writer won a race the
                caller should retry.
        """
        raise NotImplementedError
