# src/maritime_reporting_api/application/interfaces/retry_port.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Application Interface: Retry Runner.

Synopsis:
    Callable that re-runs a complete transactional attempt while a predicate
    classifies the raised exception as retryable. The composition root binds
    it to the infrastructure backoff policy.

Layer:
    application/interfaces
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol


class RetryRunner(Protocol):
    """Bounded retry of an idempotent async attempt."""

    async def __call__[T](
        self,
        fn: Callable[[], Awaitable[T]],
        *,
        retry_on: Callable[[Exception], bool],
    ) -> T:
        """Run ``fn`` until it succeeds, the budget runs out or ``retry_on`` says no.

        Raises:
            Exception: The last exception raised by ``fn``.
        """
        ...
