# src/maritime_reporting_api/infrastructure/database/models/base.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Declarative Base and persistence mixins for the reporting schema.

This module defines:
    - A project-wide SQLAlchemy Declarative Base with deterministic naming
      conventions (for stable Alembic diffs).
    - Mixins for integer identity, UTC audit timestamps, soft-delete markers
      and the optimistic-locking ``version`` column.

Notes:
    * Tables are unqualified; the PostgreSQL schema is selected per
      connection through ``search_path`` (see ``database.session``).
    * Persistence-only: no domain behavior lives on the models.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime, Integer, String, Text

__all__ = [
    "metadata",
    "Base",
    "IdentityMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    "now_utc",
]

#: Deterministic naming conventions for Alembic-friendly diffs.
#: Ref: https://alembic.sqlalchemy.org/en/latest/naming.html
NAMING_CONVENTIONS: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTIONS)


def now_utc() -> datetime:
    """Return the current UTC time with timezone info."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative Base for all ORM models."""

    metadata = metadata


class IdentityMixin:
    """Integer surrogate primary key ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """``created_at`` / ``updated_at`` columns, both timezone-aware."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
        server_default=func.now(),
    )


class SoftDeleteMixin:
    """Soft-delete markers: when, by whom and why."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        index=True,
    )
    deleted_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    deleted_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
