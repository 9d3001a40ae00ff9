# src/maritime_reporting_api/infrastructure/database/session.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Async SQLAlchemy engine and session factory for the reporting store.

The engine is process-global: created in the application lifespan, disposed on
shutdown. Each unit of work opens its own ``AsyncSession`` from
:func:`get_sessionmaker`, so one HTTP request (or one retry attempt of a report
number allocation) maps to exactly one database transaction.

When ``DB_SCHEMA`` is set, asyncpg connections get it as their ``search_path``
so the reporting tables can live outside ``public``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from maritime_reporting_api.config.settings import Settings, get_settings

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def _connect_args(settings: Settings) -> dict[str, Any]:
    if settings.db_schema and settings.database_url.startswith("postgresql+asyncpg"):
        return {"server_settings": {"search_path": settings.db_schema}}
    return {}


def init_engine_and_sessionmaker(settings: Settings) -> None:
    """Create the engine and session factory once.

    Raises:
        ValueError: If ``database_url`` is empty.
    """
    global _engine, _sessionmaker
    if _engine is not None:
        return
    if not settings.database_url:
        raise ValueError("database_url must be configured")

    _engine = create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        connect_args=_connect_args(settings),
    )
    # Entities are rebuilt from rows before commit; nothing reads ORM state afterwards.
    _sessionmaker = async_sessionmaker(bind=_engine, expire_on_commit=False)


async def dispose_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _sessionmaker
    engine, _engine, _sessionmaker = _engine, None, None
    if engine is not None:
        await engine.dispose()


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the session factory, creating the engine on first use.

    Test transports skip the lifespan, hence the lazy path.
    """
    if _sessionmaker is None:
        init_engine_and_sessionmaker(get_settings())
    assert _sessionmaker is not None
    return _sessionmaker
