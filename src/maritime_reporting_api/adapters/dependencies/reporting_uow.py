# src/maritime_reporting_api/adapters/dependencies/reporting_uow.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Reporting UnitOfWork dependency wiring.

Purpose:
    Provide a concrete, SQLAlchemy-backed UnitOfWork instance for the
    reporting use cases, backed by the core async_sessionmaker.

Layer:
    adapters/dependencies
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maritime_reporting_api.adapters.uow import SqlAlchemyUnitOfWork
from maritime_reporting_api.infrastructure.database.session import get_sessionmaker


def get_reporting_uow() -> SqlAlchemyUnitOfWork:
    """Construct a UnitOfWork instance for one request.

    Behavior:
        - Obtains the global async_sessionmaker via `get_sessionmaker()`.
        - Returns a fresh SqlAlchemyUnitOfWork bound to that factory.
    """
    session_factory: async_sessionmaker[AsyncSession] = get_sessionmaker()
    return SqlAlchemyUnitOfWork(session_factory=session_factory)
