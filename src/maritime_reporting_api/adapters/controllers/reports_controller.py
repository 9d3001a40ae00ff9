# src/maritime_reporting_api/adapters/controllers/reports_controller.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""
Controller: Reports and amendments.

Synopsis:
    Thin orchestration layer between the reporting routers and the use
    cases. It forwards adapter inputs unchanged, returns the use-case
    :class:`Result` untouched, and counts every workflow operation in
    ``reporting_transitions_total`` by outcome. HTTP-agnostic: no web
    framework imports.

Layer:
    adapters/controllers
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from maritime_reporting_api.adapters.controllers.base import BaseController
from maritime_reporting_api.application.schemas.dto.report_commands import (
    ApproveAmendmentDTO,
    ApproveReportDTO,
    CreateAmendmentDTO,
    NoonReportCreateDTO,
    RejectReportDTO,
    ReopenReportDTO,
    ReportCreateDTO,
    SoftDeleteReportDTO,
    TransmitReportDTO,
)
from maritime_reporting_api.application.schemas.dto.report_views import (
    AmendmentCreatedDTO,
    AmendmentDTO,
    AmendmentListDTO,
    DeletedReportsDTO,
    MessageDTO,
    ReportCreatedDTO,
    ReportDetailDTO,
    ReportListDTO,
    ReportStatisticsDTO,
    ReportTypeDTO,
    RestoreResultDTO,
    SoftDeleteResultDTO,
    TransmissionStatusDTO,
    WorkflowHistoryDTO,
)
from maritime_reporting_api.application.use_cases.amendments.amendments import (
    ApproveAmendmentUseCase,
    CreateAmendmentUseCase,
    GetAmendmentUseCase,
    ListAmendmentsUseCase,
    TransmitAmendmentUseCase,
)
from maritime_reporting_api.application.use_cases.reports.create_report import (
    CreateReportUseCase,
)
from maritime_reporting_api.application.use_cases.reports.get_report import GetReportUseCase
from maritime_reporting_api.application.use_cases.reports.list_reports import (
    ListReportsUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_audit import (
    GetTransmissionStatusUseCase,
    GetWorkflowHistoryUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_retention import (
    ListDeletedReportsUseCase,
    RestoreReportUseCase,
    SoftDeleteReportUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_statistics import (
    GetReportStatisticsUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_transitions import (
    ApproveReportUseCase,
    RejectReportUseCase,
    ReopenReportUseCase,
    SubmitReportUseCase,
    TransmitReportUseCase,
)
from maritime_reporting_api.application.use_cases.reports.report_types import (
    ListReportTypesUseCase,
)
from maritime_reporting_api.application.use_cases.reports.update_draft_report import (
    PatchDraftReportUseCase,
    ReplaceNoonReportUseCase,
)
from maritime_reporting_api.domain.enums.reporting import ReportKind
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import ReportFilter
from maritime_reporting_api.domain.value_objects.result import Result


@dataclass(frozen=True, slots=True)
class ReportingUseCases:
    """Use cases bound to one request's unit of work."""

    create: CreateReportUseCase
    get: GetReportUseCase
    list: ListReportsUseCase
    patch: PatchDraftReportUseCase
    replace_noon: ReplaceNoonReportUseCase
    submit: SubmitReportUseCase
    approve: ApproveReportUseCase
    reject: RejectReportUseCase
    reopen: ReopenReportUseCase
    transmit: TransmitReportUseCase
    history: GetWorkflowHistoryUseCase
    transmission_status: GetTransmissionStatusUseCase
    soft_delete: SoftDeleteReportUseCase
    restore: RestoreReportUseCase
    list_deleted: ListDeletedReportsUseCase
    statistics: GetReportStatisticsUseCase
    types: ListReportTypesUseCase
    create_amendment: CreateAmendmentUseCase
    list_amendments: ListAmendmentsUseCase
    get_amendment: GetAmendmentUseCase
    approve_amendment: ApproveAmendmentUseCase
    transmit_amendment: TransmitAmendmentUseCase


class ReportsController(BaseController):
    """Controller orchestrating the report lifecycle."""

    __slots__ = ("_uc",)

    def __init__(self, use_cases: ReportingUseCases) -> None:
        """Initialize the controller.

        Args:
            use_cases: Use cases sharing the request's unit of work.
        """
        self._uc = use_cases

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    async def create(
        self, kind: ReportKind, dto: ReportCreateDTO, *, actor: str
    ) -> Result[ReportCreatedDTO]:
        return self._observe("create", await self._uc.create.execute(kind, dto, actor=actor))

    async def get(self, kind: ReportKind, report_id: int) -> Result[ReportDetailDTO]:
        return await self._uc.get.execute(kind, report_id)

    async def list_reports(
        self, filters: ReportFilter, *, page: int, page_size: int
    ) -> Result[ReportListDTO]:
        return await self._uc.list.execute(filters, page=page, page_size=page_size)

    async def patch(
        self, report_id: int, body: Mapping[str, Any], *, actor: str
    ) -> Result[MessageDTO]:
        return self._observe("update", await self._uc.patch.execute(report_id, body, actor=actor))

    async def replace_noon(
        self, report_id: int, dto: NoonReportCreateDTO, *, actor: str
    ) -> Result[MessageDTO]:
        return self._observe(
            "update", await self._uc.replace_noon.execute(report_id, dto, actor=actor)
        )

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def submit(self, report_id: int) -> Result[MessageDTO]:
        return self._observe("submit", await self._uc.submit.execute(report_id))

    async def approve(self, report_id: int, dto: ApproveReportDTO) -> Result[MessageDTO]:
        return self._observe("approve", await self._uc.approve.execute(report_id, dto))

    async def reject(
        self, report_id: int, dto: RejectReportDTO, *, actor: str
    ) -> Result[MessageDTO]:
        return self._observe("reject", await self._uc.reject.execute(report_id, dto, actor=actor))

    async def reopen(
        self, report_id: int, dto: ReopenReportDTO, *, actor: str
    ) -> Result[MessageDTO]:
        return self._observe("reopen", await self._uc.reopen.execute(report_id, dto, actor=actor))

    async def transmit(
        self, report_id: int, dto: TransmitReportDTO, *, actor: str
    ) -> Result[MessageDTO]:
        return self._observe(
            "transmit", await self._uc.transmit.execute(report_id, dto, actor=actor)
        )

    # ------------------------------------------------------------------
    # Audit, retention, dashboards
    # ------------------------------------------------------------------

    async def history(self, report_id: int) -> Result[WorkflowHistoryDTO]:
        return await self._uc.history.execute(report_id)

    async def transmission_status(self, report_id: int) -> Result[TransmissionStatusDTO]:
        return await self._uc.transmission_status.execute(report_id)

    async def soft_delete(
        self, report_id: int, dto: SoftDeleteReportDTO, *, actor: str
    ) -> Result[SoftDeleteResultDTO]:
        return self._observe(
            "soft_delete", await self._uc.soft_delete.execute(report_id, dto, actor=actor)
        )

    async def restore(self, report_id: int, *, actor: str) -> Result[RestoreResultDTO]:
        return self._observe("restore", await self._uc.restore.execute(report_id, actor=actor))

    async def list_deleted(
        self, *, from_date: datetime | None, to_date: datetime | None
    ) -> Result[DeletedReportsDTO]:
        return await self._uc.list_deleted.execute(from_date=from_date, to_date=to_date)

    async def statistics(
        self, *, from_date: datetime | None, to_date: datetime | None
    ) -> Result[ReportStatisticsDTO]:
        return await self._uc.statistics.execute(from_date=from_date, to_date=to_date)

    async def report_types(self, *, active_only: bool) -> Result[list[ReportTypeDTO]]:
        return await self._uc.types.execute(active_only=active_only)

    # ------------------------------------------------------------------
    # Amendments
    # ------------------------------------------------------------------

    async def create_amendment(
        self, report_id: int, dto: CreateAmendmentDTO, *, actor: str
    ) -> Result[AmendmentCreatedDTO]:
        return self._observe(
            "amend", await self._uc.create_amendment.execute(report_id, dto, actor=actor)
        )

    async def list_amendments(self, report_id: int) -> Result[AmendmentListDTO]:
        return await self._uc.list_amendments.execute(report_id)

    async def get_amendment(self, report_id: int, amendment_id: int) -> Result[AmendmentDTO]:
        return await self._uc.get_amendment.execute(report_id, amendment_id)

    async def approve_amendment(
        self, report_id: int, amendment_id: int, dto: ApproveAmendmentDTO
    ) -> Result[MessageDTO]:
        return self._observe(
            "approve_amendment",
            await self._uc.approve_amendment.execute(report_id, amendment_id, dto),
        )

    async def transmit_amendment(
        self, report_id: int, amendment_id: int, *, actor: str
    ) -> Result[MessageDTO]:
        return self._observe(
            "transmit_amendment",
            await self._uc.transmit_amendment.execute(report_id, amendment_id, actor=actor),
        )
