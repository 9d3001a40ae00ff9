# src/maritime_reporting_api/adapters/routers/reports_router.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Reports Router (v1).

Synopsis:
    HTTP surface for the maritime report lifecycle.

Endpoints (all under /v1/reports):
    - GET    /v1/reports                             → PaginatedEnvelope of summaries.
    - GET    /v1/reports/statistics                  → dashboard counters.
    - GET    /v1/reports/types                       → report-type catalog.
    - GET    /v1/reports/deleted                     → soft-deleted reports.
    - POST   /v1/reports/{kind}                      → create a DRAFT (201).
    - PUT    /v1/reports/noon/{report_id}            → replace a DRAFT noon report.
    - PATCH  /v1/reports/{report_id}                 → partial DRAFT edit.
    - DELETE /v1/reports/{report_id}                 → soft delete.
    - POST   /v1/reports/{report_id}/submit|approve|reject|reopen|transmit|restore
    - GET    /v1/reports/{report_id}/history         → audit trail.
    - GET    /v1/reports/{report_id}/transmission-status
    - GET    /v1/reports/{kind}/{report_id}          → full report.

Design:
    * Router handles HTTP parsing and the acting user (``X-User``).
    * Controller forwards to the use cases and counts workflow outcomes.
    * Presenter turns results into envelopes; failures bypass response_model.
    * Static segments are registered before parameterized ones and report ids
      use the ``int`` path convertor, so ``/statistics`` never reaches the
      ``/{kind}/{report_id}`` route.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from fastapi import Body, Depends, Query, Request, Response, status

from maritime_reporting_api.adapters.controllers.reports_controller import ReportsController
from maritime_reporting_api.adapters.presenters.reports_presenter import ReportsPresenter
from maritime_reporting_api.adapters.routers.base_router import BaseRouter, PageParams
from maritime_reporting_api.adapters.schemas.http.envelopes import (
    PaginatedEnvelope,
    SuccessEnvelope,
)
from maritime_reporting_api.application.schemas.dto.report_commands import (
    ApproveReportDTO,
    ArrivalReportCreateDTO,
    BunkerReportCreateDTO,
    DepartureReportCreateDTO,
    NoonReportCreateDTO,
    PositionReportCreateDTO,
    RejectReportDTO,
    ReopenReportDTO,
    ReportCreateDTO,
    SoftDeleteReportDTO,
    TransmitReportDTO,
)
from maritime_reporting_api.application.schemas.dto.report_views import (
    DeletedReportsDTO,
    MessageDTO,
    ReportCreatedDTO,
    ReportDetailDTO,
    ReportStatisticsDTO,
    ReportSummaryDTO,
    ReportTypeDTO,
    RestoreResultDTO,
    SoftDeleteResultDTO,
    TransmissionStatusDTO,
    WorkflowHistoryDTO,
)
from maritime_reporting_api.dependencies.reporting import get_actor, get_reports_controller
from maritime_reporting_api.domain.enums.reporting import ReportKind, ReportStatus
from maritime_reporting_api.domain.interfaces.repositories.reports_repository import ReportFilter
from maritime_reporting_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

router = BaseRouter(version="v1", resource="reports", tags=["Reports"])
presenter = ReportsPresenter()

Controller = Annotated[ReportsController, Depends(get_reports_controller)]
Actor = Annotated[str, Depends(get_actor)]
ERRORS = BaseRouter.std_error_responses()


async def _create(
    request: Request,
    response: Response,
    controller: ReportsController,
    kind: ReportKind,
    dto: ReportCreateDTO,
    actor: str,
) -> Any:
    result = await controller.create(kind, dto, actor=actor)
    return BaseRouter.send(
        response,
        presenter.present_result(
            result, trace_id=BaseRouter.trace_id(request), status_code=status.HTTP_201_CREATED
        ),
    )


# ---------------------------------------------------------------------------
# Collection and static routes
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=PaginatedEnvelope[ReportSummaryDTO],
    responses=ERRORS,
    summary="List reports",
    description=(
        "Visible (non-deleted) reports ordered by report time, newest first. "
        "Filters combine with AND; page_size is capped at 100."
    ),
)
async def list_reports(
    request: Request,
    response: Response,
    controller: Controller,
    page_params: Annotated[PageParams, Depends(BaseRouter.page_params)],
    status_: Annotated[ReportStatus | None, Query(alias="status")] = None,
    report_type_id: Annotated[int | None, Query()] = None,
    voyage_id: Annotated[int | None, Query()] = None,
    from_date: Annotated[datetime | None, Query()] = None,
    to_date: Annotated[datetime | None, Query()] = None,
) -> Any:
    filters = ReportFilter(
        status=status_,
        report_type_id=report_type_id,
        voyage_id=voyage_id,
        from_date=from_date,
        to_date=to_date,
    )
    result = await controller.list_reports(
        filters, page=page_params.page, page_size=page_params.page_size
    )
    return BaseRouter.send(
        response, presenter.present_report_page(result, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/statistics",
    response_model=SuccessEnvelope[ReportStatisticsDTO],
    responses=ERRORS,
    summary="Report dashboard counters",
)
async def report_statistics(
    request: Request,
    response: Response,
    controller: Controller,
    from_date: Annotated[datetime | None, Query()] = None,
    to_date: Annotated[datetime | None, Query()] = None,
) -> Any:
    result = await controller.statistics(from_date=from_date, to_date=to_date)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/types",
    response_model=SuccessEnvelope[list[ReportTypeDTO]],
    responses=ERRORS,
    summary="Report-type catalog",
)
async def report_types(
    request: Request,
    response: Response,
    controller: Controller,
    active_only: Annotated[bool, Query()] = True,
) -> Any:
    result = await controller.report_types(active_only=active_only)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/deleted",
    response_model=SuccessEnvelope[DeletedReportsDTO],
    responses=ERRORS,
    summary="List soft-deleted reports",
    description="Retention view; the date window applies to the deletion time.",
)
async def list_deleted_reports(
    request: Request,
    response: Response,
    controller: Controller,
    from_date: Annotated[datetime | None, Query()] = None,
    to_date: Annotated[datetime | None, Query()] = None,
) -> Any:
    result = await controller.list_deleted(from_date=from_date, to_date=to_date)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@router.post(
    "/noon",
    response_model=SuccessEnvelope[ReportCreatedDTO],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Create a noon report",
)
async def create_noon_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    dto: NoonReportCreateDTO,
) -> Any:
    return await _create(request, response, controller, ReportKind.NOON, dto, actor)


@router.post(
    "/departure",
    response_model=SuccessEnvelope[ReportCreatedDTO],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Create a departure report",
)
async def create_departure_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    dto: DepartureReportCreateDTO,
) -> Any:
    return await _create(request, response, controller, ReportKind.DEPARTURE, dto, actor)


@router.post(
    "/arrival",
    response_model=SuccessEnvelope[ReportCreatedDTO],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Create an arrival report",
)
async def create_arrival_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    dto: ArrivalReportCreateDTO,
) -> Any:
    return await _create(request, response, controller, ReportKind.ARRIVAL, dto, actor)


@router.post(
    "/bunker",
    response_model=SuccessEnvelope[ReportCreatedDTO],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Create a bunker report",
)
async def create_bunker_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    dto: BunkerReportCreateDTO,
) -> Any:
    return await _create(request, response, controller, ReportKind.BUNKER, dto, actor)


@router.post(
    "/position",
    response_model=SuccessEnvelope[ReportCreatedDTO],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Create a position report",
)
async def create_position_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    dto: PositionReportCreateDTO,
) -> Any:
    return await _create(request, response, controller, ReportKind.POSITION, dto, actor)


# ---------------------------------------------------------------------------
# Draft edits and retention
# ---------------------------------------------------------------------------


@router.put(
    "/noon/{report_id:int}",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Replace a draft noon report",
)
async def replace_noon_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    dto: NoonReportCreateDTO,
) -> Any:
    result = await controller.replace_noon(report_id, dto, actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.patch(
    "/{report_id:int}",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Partially update a draft report",
    description=(
        "Only fields sent with a non-null value are applied. The accepted fields "
        "depend on the stored report kind."
    ),
)
async def patch_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    body: Annotated[dict[str, Any], Body()],
) -> Any:
    result = await controller.patch(report_id, body, actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.delete(
    "/{report_id:int}",
    response_model=SuccessEnvelope[SoftDeleteResultDTO],
    responses=ERRORS,
    summary="Soft delete a report",
)
async def soft_delete_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    dto: SoftDeleteReportDTO,
) -> Any:
    result = await controller.soft_delete(report_id, dto, actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/{report_id:int}/restore",
    response_model=SuccessEnvelope[RestoreResultDTO],
    responses=ERRORS,
    summary="Restore a soft-deleted report",
)
async def restore_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
) -> Any:
    result = await controller.restore(report_id, actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


@router.post(
    "/{report_id:int}/submit",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Submit a draft for Master approval",
)
async def submit_report(
    request: Request,
    response: Response,
    controller: Controller,
    report_id: int,
) -> Any:
    result = await controller.submit(report_id)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/{report_id:int}/approve",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Approve a submitted report",
)
async def approve_report(
    request: Request,
    response: Response,
    controller: Controller,
    report_id: int,
    dto: ApproveReportDTO,
) -> Any:
    result = await controller.approve(report_id, dto)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/{report_id:int}/reject",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Reject a submitted report",
)
async def reject_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    dto: RejectReportDTO,
) -> Any:
    result = await controller.reject(report_id, dto, actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/{report_id:int}/reopen",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Reopen a rejected report for corrections",
)
async def reopen_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    dto: ReopenReportDTO,
) -> Any:
    result = await controller.reopen(report_id, dto, actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/{report_id:int}/transmit",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Transmit an approved report ashore",
)
async def transmit_report(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    dto: Annotated[TransmitReportDTO | None, Body()] = None,
) -> Any:
    result = await controller.transmit(report_id, dto or TransmitReportDTO(), actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


# ---------------------------------------------------------------------------
# Audit and reads
# ---------------------------------------------------------------------------


@router.get(
    "/{report_id:int}/history",
    response_model=SuccessEnvelope[WorkflowHistoryDTO],
    responses=ERRORS,
    summary="Workflow audit trail",
)
async def report_history(
    request: Request,
    response: Response,
    controller: Controller,
    report_id: int,
) -> Any:
    result = await controller.history(report_id)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/{report_id:int}/transmission-status",
    response_model=SuccessEnvelope[TransmissionStatusDTO],
    responses=ERRORS,
    summary="Transmission status",
)
async def transmission_status(
    request: Request,
    response: Response,
    controller: Controller,
    report_id: int,
) -> Any:
    result = await controller.transmission_status(report_id)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/{kind}/{report_id:int}",
    response_model=SuccessEnvelope[ReportDetailDTO],
    responses=ERRORS,
    summary="Get one report of the given kind",
)
async def get_report(
    request: Request,
    response: Response,
    controller: Controller,
    kind: ReportKind,
    report_id: int,
) -> Any:
    result = await controller.get(kind, report_id)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )
