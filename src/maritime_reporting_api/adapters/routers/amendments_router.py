# src/maritime_reporting_api/adapters/routers/amendments_router.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Amendments Router (v1).

Endpoints (all under /v1/reports/{report_id}/amendments):
    - POST /                             → create a DRAFT amendment (201).
    - GET  /                             → amendments ordered by number.
    - GET  /{amendment_id}               → one amendment.
    - POST /{amendment_id}/approve       → Master approval.
    - POST /{amendment_id}/transmit      → mark an approved amendment transmitted.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Request, Response, status

from maritime_reporting_api.adapters.controllers.reports_controller import ReportsController
from maritime_reporting_api.adapters.presenters.reports_presenter import ReportsPresenter
from maritime_reporting_api.adapters.routers.base_router import BaseRouter
from maritime_reporting_api.adapters.schemas.http.envelopes import SuccessEnvelope
from maritime_reporting_api.application.schemas.dto.report_commands import (
    ApproveAmendmentDTO,
    CreateAmendmentDTO,
)
from maritime_reporting_api.application.schemas.dto.report_views import (
    AmendmentCreatedDTO,
    AmendmentDTO,
    AmendmentListDTO,
    MessageDTO,
)
from maritime_reporting_api.dependencies.reporting import get_actor, get_reports_controller

router = BaseRouter(version="v1", resource="reports", tags=["Amendments"])
presenter = ReportsPresenter()

Controller = Annotated[ReportsController, Depends(get_reports_controller)]
Actor = Annotated[str, Depends(get_actor)]
ERRORS = BaseRouter.std_error_responses()


@router.post(
    "/{report_id:int}/amendments",
    response_model=SuccessEnvelope[AmendmentCreatedDTO],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Create an amendment for an approved or transmitted report",
)
async def create_amendment(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    dto: CreateAmendmentDTO,
) -> Any:
    result = await controller.create_amendment(report_id, dto, actor=actor)
    return BaseRouter.send(
        response,
        presenter.present_result(
            result, trace_id=BaseRouter.trace_id(request), status_code=status.HTTP_201_CREATED
        ),
    )


@router.get(
    "/{report_id:int}/amendments",
    response_model=SuccessEnvelope[AmendmentListDTO],
    responses=ERRORS,
    summary="List amendments of a report",
)
async def list_amendments(
    request: Request,
    response: Response,
    controller: Controller,
    report_id: int,
) -> Any:
    result = await controller.list_amendments(report_id)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/{report_id:int}/amendments/{amendment_id:int}",
    response_model=SuccessEnvelope[AmendmentDTO],
    responses=ERRORS,
    summary="Get one amendment",
)
async def get_amendment(
    request: Request,
    response: Response,
    controller: Controller,
    report_id: int,
    amendment_id: int,
) -> Any:
    result = await controller.get_amendment(report_id, amendment_id)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/{report_id:int}/amendments/{amendment_id:int}/approve",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Approve an amendment",
)
async def approve_amendment(
    request: Request,
    response: Response,
    controller: Controller,
    report_id: int,
    amendment_id: int,
    dto: ApproveAmendmentDTO,
) -> Any:
    result = await controller.approve_amendment(report_id, amendment_id, dto)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/{report_id:int}/amendments/{amendment_id:int}/transmit",
    response_model=SuccessEnvelope[MessageDTO],
    responses=ERRORS,
    summary="Transmit an approved amendment",
)
async def transmit_amendment(
    request: Request,
    response: Response,
    controller: Controller,
    actor: Actor,
    report_id: int,
    amendment_id: int,
) -> Any:
    result = await controller.transmit_amendment(report_id, amendment_id, actor=actor)
    return BaseRouter.send(
        response, presenter.present_result(result, trace_id=BaseRouter.trace_id(request))
    )
