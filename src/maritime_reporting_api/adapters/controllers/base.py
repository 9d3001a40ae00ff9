# src/maritime_reporting_api/adapters/controllers/base.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Base Controller.

Summary:
    Canonical base for adapter controllers. Controllers are thin coordinators:
    they invoke use cases and record the outcome of every state-changing call
    on the ``reporting_transitions_total`` counter. They perform no I/O of
    their own.

Layer:
    adapters/controllers
"""

from __future__ import annotations

from typing import Any

from maritime_reporting_api.domain.value_objects.result import Result
from maritime_reporting_api.infrastructure.observability.metrics import (
    get_report_transitions_total,
)


def outcome_label(result: Result[Any]) -> str:
    """Return ``success`` or the lower-cased error kind of a use-case result."""
    if result.error is None:
        return "success"
    return result.error.kind.value.lower()


class BaseController:
    """Base for adapter controllers."""

    __slots__ = ()

    @staticmethod
    def _observe[T](transition: str, result: Result[T]) -> Result[T]:
        """Count one attempted transition by outcome and pass the result through."""
        get_report_transitions_total().labels(
            transition=transition, outcome=outcome_label(result)
        ).inc()
        return result
