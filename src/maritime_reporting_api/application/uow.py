# src/maritime_reporting_api/application/uow.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Unit of Work (Application Layer).

Purpose:
    Define the transactional boundary used by the reporting use cases. A
    workflow operation reads the header, checks its guard, writes the new
    header, writes the audit row and commits, all inside one unit of work.

    This module is infrastructure-agnostic:
        * No SQLAlchemy / DB / HTTP imports.
        * No concrete repository implementations.

    Concrete implementations (SQLAlchemy-backed) live in the adapters layer
    and must satisfy this protocol.

Layer:
    application
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from types import TracebackType
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Abstract Unit-of-Work contract for application use cases.

    A single instance may be entered repeatedly, one scope at a time; every
    ``async with`` opens a fresh transaction. Leaving the scope without a
    commit discards all staged writes.
    """

    async def __aenter__(self) -> UnitOfWork:
        """Enter the transactional scope and return the active UoW."""
        raise NotImplementedError

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        """Exit the transactional scope, rolling back uncommitted work."""
        raise NotImplementedError

    async def commit(self) -> None:
        """Commit all pending changes for this UnitOfWork."""
        raise NotImplementedError

    async def rollback(self) -> None:
        """Roll back any pending changes for this UnitOfWork."""
        raise NotImplementedError

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return a repository bound to the active transaction.

        Args:
            repo_type:
                Repository protocol from ``domain.interfaces.repositories``
                (e.g. ``ReportsRepository``) used as the resolution key.
        """
        raise NotImplementedError


async def run_in_uow[TResult](
    uow: UnitOfWork,
    fn: Callable[[UnitOfWork], Awaitable[TResult]],
) -> TResult:
    """Execute a coroutine against a UnitOfWork with commit/rollback semantics.

    The helper guarantees that:

        * On success: the transaction is committed.
        * On exception: the transaction is rolled back and the exception is
          re-raised.

    Args:
        uow: UnitOfWork instance providing transactional boundaries.
        fn: Callable that receives the active UnitOfWork and returns a result.

    Returns:
        TResult: The result of the callable.
    """
    async with uow as tx:
        try:
            result = await fn(tx)
        except Exception:
            await tx.rollback()
            raise
        else:
            await tx.commit()
            return result
