# src/maritime_reporting_api/adapters/uow/__init__.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""
Unit of Work implementations (Adapters Layer)

Purpose:
    Provide concrete UnitOfWork implementations backed by SQLAlchemy's
    AsyncSession. Application-layer code depends only on the `UnitOfWork`
    protocol from `maritime_reporting_api.application.uow`.

Exports:
    - SqlAlchemyUnitOfWork: SQLAlchemy-backed UnitOfWork used by the FastAPI
      dependencies.
"""

from __future__ import annotations

from .sqlalchemy_uow import SqlAlchemyUnitOfWork

__all__ = ["SqlAlchemyUnitOfWork"]
