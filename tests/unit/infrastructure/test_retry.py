# tests/unit/infrastructure/test_retry.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

import pytest

from maritime_reporting_api.infrastructure.resilience.retry import RetryPolicy, retry_async


class _Flaky(Exception):
    pass


def test_backoff_is_capped_exponential_without_jitter() -> None:
    policy = RetryPolicy(total=5, base=0.1, cap=0.5, jitter=False)
    assert [policy.backoff(n) for n in range(4)] == [0.1, 0.2, 0.4, 0.5]


def test_jittered_backoff_stays_within_bounds() -> None:
    policy = RetryPolicy(total=5, base=0.1, cap=0.5)
    for attempt in range(6):
        assert 0.0 <= policy.backoff(attempt) <= 0.5


@pytest.mark.asyncio
async def test_retries_until_success_and_reports_attempts() -> None:
    calls = 0
    seen: list[int] = []

    async def attempt() -> str:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise _Flaky
        return "done"

    result = await retry_async(
        attempt,
        policy=RetryPolicy(total=3, base=0.0, cap=0.0, jitter=False),
        retry_on=lambda exc: isinstance(exc, _Flaky),
        on_retry=lambda n, exc: seen.append(n),
    )

    assert result == "done"
    assert calls == 3
    assert seen == [0, 1]


@pytest.mark.asyncio
async def test_gives_up_after_budget() -> None:
    calls = 0

    async def attempt() -> None:
        nonlocal calls
        calls += 1
        raise _Flaky

    with pytest.raises(_Flaky):
        await retry_async(
            attempt,
            policy=RetryPolicy(total=2, base=0.0, cap=0.0, jitter=False),
            retry_on=lambda exc: True,
        )
    assert calls == 3


@pytest.mark.asyncio
async def test_non_retryable_errors_propagate_immediately() -> None:
    calls = 0

    async def attempt() -> None:
        nonlocal calls
        calls += 1
        raise ValueError("bad")

    with pytest.raises(ValueError):
        await retry_async(
            attempt,
            policy=RetryPolicy(total=5, base=0.0, cap=0.0, jitter=False),
            retry_on=lambda exc: isinstance(exc, _Flaky),
        )
    assert calls == 1
