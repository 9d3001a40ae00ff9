# src/maritime_reporting_api/application/use_cases/reports/report_types.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Use case: Read the report-type catalog."""

from __future__ import annotations

from maritime_reporting_api.application.schemas.dto.report_views import ReportTypeDTO
from maritime_reporting_api.application.services.report_type_registry import ReportTypeRegistry
from maritime_reporting_api.application.uow import UnitOfWork
from maritime_reporting_api.application.use_cases.reports.common import report_types_repo
from maritime_reporting_api.domain.value_objects.result import Result


class ListReportTypesUseCase:
    """Return catalog entries ordered by code, served from the registry cache."""

    def __init__(self, uow: UnitOfWork, *, registry: ReportTypeRegistry) -> None:
        self._uow = uow
        self._registry = registry

    async def execute(self, *, active_only: bool = True) -> Result[list[ReportTypeDTO]]:
        async with self._uow as tx:
            types = await self._registry.list_types(report_types_repo(tx), active_only=active_only)
        return Result.success([ReportTypeDTO.from_entity(t) for t in types])
