# src/maritime_reporting_api/adapters/repositories/base_repository.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""
BaseRepository: Shared foundation for the reporting repositories.

Purpose:
    Shared mechanics for all repositories:
      * Deterministic ordering helper (NULLS LAST + PK tie-breaker).
      * Safe fetch helpers (optional, all).
      * Per-operation DB metrics (duration histogram + error counter).
      * PostgreSQL SQLSTATE inspection for conflict translation.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
    * Repositories never commit; use cases own transactions.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from datetime import UTC, datetime
from typing import Any, Final, Generic, TypeVar

from sqlalchemy import Select, nulls_last
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from maritime_reporting_api.infrastructure.observability.metrics import (
    get_db_errors_total,
    get_db_operation_duration_seconds,
)

TModel = TypeVar("TModel")

UNIQUE_VIOLATION: Final[str] = "23505"
SERIALIZATION_FAILURE: Final[str] = "40001"
DEADLOCK_DETECTED: Final[str] = "40P01"


def sqlstate(exc: DBAPIError) -> str | None:
    """Return the PostgreSQL SQLSTATE carried by a DBAPI error, if any."""
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if isinstance(code, str):
            return code
    cause = getattr(orig, "__cause__", None)
    code = getattr(cause, "sqlstate", None)
    return code if isinstance(code, str) else None


def constraint_name(exc: DBAPIError) -> str | None:
    """Return the name of the violated constraint or index, if the driver reports it."""
    orig = exc.orig
    for source in (orig, getattr(orig, "__cause__", None), getattr(orig, "diag", None)):
        name = getattr(source, "constraint_name", None)
        if isinstance(name, str):
            return name
    return None


def is_unique_violation(exc: DBAPIError) -> bool:
    return sqlstate(exc) == UNIQUE_VIOLATION


def is_transient(exc: DBAPIError) -> bool:
    """True for serialization failures and deadlocks, which are safe to retry."""
    return sqlstate(exc) in (SERIALIZATION_FAILURE, DEADLOCK_DETECTED)


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Abstract base class for all repositories."""

    _MODEL_NAME: str = "unknown"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        self._session: AsyncSession = session
        self._metrics_hist = get_db_operation_duration_seconds()
        self._metrics_err = get_db_errors_total()

    @staticmethod
    def utc_now() -> datetime:
        """Return current UTC time with timezone info."""
        return datetime.now(UTC)

    @staticmethod
    def order_by_latest(stmt: Select[Any], timestamp_col: Any, pk_col: Any) -> Select[Any]:
        """Apply deterministic latest-first ordering.

        The resulting query orders by:

            timestamp DESC NULLS LAST, pk DESC
        """
        return stmt.order_by(nulls_last(timestamp_col.desc()), pk_col.desc())

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _observe(self, operation: str) -> AsyncIterator[None]:
        """Time one repository operation and count its failures."""
        start = time.perf_counter()
        outcome = "success"
        try:
            yield
        except Exception as exc:
            outcome = "error"
            with suppress(Exception):
                self._metrics_err.labels(
                    operation=operation,
                    model=self._MODEL_NAME,
                    reason=type(exc).__name__,
                ).inc()
            raise
        finally:
            with suppress(Exception):
                self._metrics_hist.labels(
                    operation=operation,
                    model=self._MODEL_NAME,
                    outcome=outcome,
                ).observe(time.perf_counter() - start)

    # ------------------------------------------------------------------
    # Fetch helpers
    # ------------------------------------------------------------------

    async def fetch_optional(self, stmt: Select[Any]) -> TModel | None:
        """Execute a statement and return zero or one row."""
        res = await self._session.execute(stmt)
        return res.scalars().first()

    async def fetch_all(self, stmt: Select[Any]) -> list[TModel]:
        """Execute a statement and return all rows as a list."""
        res = await self._session.execute(stmt)
        return list(res.scalars().all())
