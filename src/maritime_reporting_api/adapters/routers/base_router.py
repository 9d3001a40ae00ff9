# src/maritime_reporting_api/adapters/routers/base_router.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Versioned router base shared by the reports and amendments endpoints.

Provides:
    * ``/{version}/{resource}`` prefixes.
    * :meth:`BaseRouter.send`, which turns a presenter result into the HTTP
      response (headers, status, and error envelopes outside the route's
      ``response_model``).
    * A pagination dependency that clamps instead of rejecting: ``page < 1``
      becomes 1 and ``page_size`` is held to ``[1, 100]``.
    * The OpenAPI error responses every workflow endpoint can return.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Final

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse

from maritime_reporting_api.adapters.presenters.base_presenter import PresentResult
from maritime_reporting_api.adapters.schemas.http.envelopes import ErrorEnvelope

_ERROR_RESPONSES: Final[dict[int | str, dict[str, Any]]] = {
    400: {
        "model": ErrorEnvelope,
        "description": "Rule violation, duplicate report, refused transition or stale write.",
    },
    404: {"model": ErrorEnvelope, "description": "Report, amendment or audit trail not found."},
    422: {"model": ErrorEnvelope, "description": "Malformed request body or parameters."},
    500: {"model": ErrorEnvelope, "description": "Unexpected server error."},
}


@dataclass(frozen=True)
class PageParams:
    """1-indexed page number and page size, already clamped."""

    page: int
    page_size: int


class BaseRouter(APIRouter):
    """APIRouter mounted at ``/{version}/{resource}``."""

    MIN_PAGE: int = 1
    MIN_PAGE_SIZE: int = 1
    MAX_PAGE_SIZE: int = 100
    DEFAULT_PAGE_SIZE: int = 20

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        tags: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(prefix=f"/{version}/{resource}", tags=list(tags or []), **kwargs)

    @staticmethod
    def trace_id(request: Request) -> str | None:
        """Return the request id bound by the correlation middleware."""
        return getattr(request.state, "request_id", None)

    @staticmethod
    def send(response: Response, result: PresentResult[Any]) -> Any:
        """Apply a presenter result to the outgoing response.

        Error envelopes are returned as a ``JSONResponse`` so FastAPI does not
        validate them against the route's success ``response_model``.
        """
        if isinstance(result.body, ErrorEnvelope):
            return JSONResponse(
                status_code=result.status_code or 500,
                content=result.body.model_dump_http(),
                headers=dict(result.headers),
            )
        response.headers.update(dict(result.headers))
        if result.status_code is not None:
            response.status_code = result.status_code
        return result.body if result.body is not None else {}

    @classmethod
    def page_params(
        cls,
        page: int | None = Query(default=None, description="1-indexed page number.", examples=[1]),
        page_size: int | None = Query(
            default=None, description="Reports per page, at most 100.", examples=[20]
        ),
    ) -> PageParams:
        """Return pagination parameters clamped to the allowed range."""
        p = max(page if page is not None else cls.MIN_PAGE, cls.MIN_PAGE)
        ps = page_size if page_size is not None else cls.DEFAULT_PAGE_SIZE
        return PageParams(page=p, page_size=min(max(ps, cls.MIN_PAGE_SIZE), cls.MAX_PAGE_SIZE))

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the OpenAPI error responses shared by workflow endpoints."""
        return dict(_ERROR_RESPONSES)
