# src/maritime_reporting_api/adapters/uow/sqlalchemy_uow.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""SQLAlchemy-backed Unit of Work implementation.

Purpose:
    Provide a concrete implementation of the application-layer UnitOfWork
    protocol using SQLAlchemy's AsyncSession. This UoW coordinates the
    reporting repositories within a single transactional scope.

Layer:
    adapters/uow

Notes:
    Leaving the scope without :meth:`commit` rolls back, so a use case that
    returns a failure result (or a caller that abandons a request) leaves no
    visible writes. The instance may be re-entered sequentially; each entry
    opens a fresh session, which the retry runner relies on.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maritime_reporting_api.adapters.repositories.amendments_repository import (
    SqlAlchemyAmendmentsRepository,
)
from maritime_reporting_api.adapters.repositories.report_sequences_repository import (
    SqlAlchemyReportSequencesRepository,
)
from maritime_reporting_api.adapters.repositories.report_types_repository import (
    SqlAlchemyReportTypesRepository,
)
from maritime_reporting_api.adapters.repositories.reports_repository import (
    SqlAlchemyReportsRepository,
)
from maritime_reporting_api.adapters.repositories.transmission_logs_repository import (
    SqlAlchemyTransmissionLogsRepository,
)
from maritime_reporting_api.adapters.repositories.workflow_history_repository import (
    SqlAlchemyWorkflowHistoryRepository,
)
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.domain.interfaces.repositories.amendments_repository import (
    AmendmentsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.report_sequences_repository import (
    ReportSequencesRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.report_types_repository import (
    ReportTypesRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import (
    ReportsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.transmission_logs_repository import (
    TransmissionLogsRepository,
)
from maritime_reporting_api.domain.interfaces.repositories.workflow_history_repository import (
    WorkflowHistoryRepository,
)

RepoFactory = Callable[[AsyncSession], Any]

DEFAULT_REPO_FACTORIES: Mapping[type[Any], RepoFactory] = {
    ReportsRepository: lambda s: SqlAlchemyReportsRepository(session=s),
    ReportTypesRepository: lambda s: SqlAlchemyReportTypesRepository(session=s),
    ReportSequencesRepository: lambda s: SqlAlchemyReportSequencesRepository(session=s),
    WorkflowHistoryRepository: lambda s: SqlAlchemyWorkflowHistoryRepository(session=s),
    TransmissionLogsRepository: lambda s: SqlAlchemyTransmissionLogsRepository(session=s),
    AmendmentsRepository: lambda s: SqlAlchemyAmendmentsRepository(session=s),
}


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy-based UnitOfWork implementation.

    Coordinates a single AsyncSession and a set of repositories within a
    transactional context. Intended to be used via:

        async with SqlAlchemyUnitOfWork(...) as uow:
            repo = uow.get_repository(ReportsRepository)
            ...
            await uow.commit()
    """

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        repo_factories: Mapping[type[Any], RepoFactory] | None = None,
    ) -> None:
        """Initialize the UnitOfWork.

        Args:
            session_factory:
                Factory for creating new AsyncSession instances.
            repo_factories:
                Optional overrides keyed by repository protocol; merged over
                :data:`DEFAULT_REPO_FACTORIES`.
        """
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._repo_factories: dict[type[Any], RepoFactory] = {
            **DEFAULT_REPO_FACTORIES,
            **(dict(repo_factories) if repo_factories is not None else {}),
        }
        self._repos: dict[type[Any], Any] = {}
        self._committed = False
        self._rolled_back = False

    # ------------------------------------------------------------------
    # Async context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        """Open a new AsyncSession.

        Raises:
            RuntimeError: If a session is already active (nested usage).
        """
        if self._session is not None:
            raise RuntimeError("UnitOfWork is already active; nested usage is not supported.")

        self._session = self._session_factory()
        self._committed = False
        self._rolled_back = False
        self._repos.clear()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        """Roll back anything not committed, then close the session.

        Returns:
            Always returns None; exceptions are propagated.
        """
        try:
            if not self._committed and not self._rolled_back:
                await self.rollback()
        finally:
            if self._session is not None:
                await self._session.close()
                self._session = None
            self._repos.clear()
        return None

    # ------------------------------------------------------------------
    # Transaction control
    # ------------------------------------------------------------------

    async def commit(self) -> None:
        """Commit the current transaction.

        No-op if the UnitOfWork was already committed or rolled back.

        Raises:
            RuntimeError: If called without an active session.
        """
        if self._session is None:
            raise RuntimeError("Cannot commit: UnitOfWork has no active session.")

        if self._committed or self._rolled_back:
            return

        await self._session.commit()
        self._committed = True

    async def rollback(self) -> None:
        """Roll back the current transaction if one is active."""
        if self._session is None:
            return

        if self._rolled_back or self._committed:
            return

        await self._session.rollback()
        self._rolled_back = True

    # ------------------------------------------------------------------
    # Repository resolution
    # ------------------------------------------------------------------

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return a repository bound to the active session.

        Args:
            repo_type: Repository protocol used as the resolution key.

        Returns:
            The cached repository instance for this scope.

        Raises:
            RuntimeError: If called outside of an active UnitOfWork context.
            KeyError: If no factory is registered for the given repo_type.
        """
        if self._session is None:
            raise RuntimeError(
                "get_repository() called outside of an active UnitOfWork scope. "
                "Use 'async with uow:' before requesting repositories.",
            )

        if repo_type in self._repos:
            return self._repos[repo_type]

        try:
            factory = self._repo_factories[repo_type]
        except KeyError as exc:
            raise KeyError(
                f"No repository factory registered for type {repo_type!r}.",
            ) from exc

        repo = factory(self._session)
        self._repos[repo_type] = repo
        return repo
