# src/maritime_reporting_api/domain/interfaces/repositories/amendments_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Amendment repository interface.

Purpose:
    Storage contract for post-approval corrections. Numbers are unique per
    original report; callers hold the original header's row lock while they
    allocate the next number.

Layer:
    domain
"""

from __future__ import annotations

from typing import Protocol

from maritime_reporting_api.domain.entities.amendment import Amendment


class AmendmentsRepository(Protocol):
    """Amendments chained to report headers."""

    async def next_number(self, header_id: int) -> int:
        """Return ``max(amendment_number) + 1`` for the header (1 when none)."""
        raise NotImplementedError

    async def add(self, amendment: Amendment) -> Amendment:
        """Stage a new amendment and return it with id and timestamps.

        Raises:
            DuplicateAmendmentNumberError: If the number is already taken.
        """
        raise NotImplementedError

    async def get(
        self, header_id: int, amendment_id: int, *, for_update: bool = False
    ) -> Amendment | None:
        """Return one amendment of one header, or ``None``.

        With ``for_update`` the amendment row stays locked until the unit of
        work ends, so status changes on one amendment are serialised.
        """
        raise NotImplementedError

    async def list_for_header(self, header_id: int) -> list[Amendment]:
        """Return the header's amendments ordered by number."""
        raise NotImplementedError

    async def update(self, amendment: Amendment) -> Amendment:
        """Persist status, signature, transmission and remarks changes."""
        raise NotImplementedError
