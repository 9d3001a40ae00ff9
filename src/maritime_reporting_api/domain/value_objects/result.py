# src/maritime_reporting_api/domain/value_objects/result.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Workflow result value objects.

Purpose:
    Every workflow operation returns a :class:`Result` instead of raising
    across the application boundary. A result holds either a value (plus any
    non-blocking validation warnings) or a :class:`WorkflowError` whose
    :class:`ErrorKind` tells the HTTP edge how to render it.

Layer:
    domain/value_objects

Example:
    >>> res = Result.failure(ErrorKind.NOT_FOUND, "Report not found")
    >>> res.ok, res.error.kind
    (False, <ErrorKind.NOT_FOUND: 'NOT_FOUND'>)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from maritime_reporting_api.domain.enums.reporting import ErrorKind


@dataclass(frozen=True, slots=True)
class WorkflowError:
    """A human-readable domain failure.

    Attributes:
        kind: Failure category.
        message: Message safe to show to the crew.
        details: Optional machine-readable context (e.g. the offending status).
    """

    kind: ErrorKind
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Result[T]:
    """Outcome of a workflow operation."""

    value: T | None = None
    error: WorkflowError | None = None
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, *, warnings: tuple[str, ...] | list[str] = ()) -> Result[T]:
        return cls(value=value, warnings=tuple(warnings))

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, **details: Any) -> Result[T]:
        return cls(error=WorkflowError(kind=kind, message=message, details=details))

    @classmethod
    def from_error(cls, error: WorkflowError) -> Result[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise ``ValueError`` for a failed result."""
        if self.error is not None:
            raise ValueError(f"{self.error.kind.value}: {self.error.message}")
        return self.value  # type: ignore[return-value]
