"""Tests for retry policy, backoff, and retry_call."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from reqkit.runtime.retry import (
    NO_RETRY,
    ExponentialBackoff,
    RetryPolicy,
    delay_for_attempt,
    retry_call,
    should_retry,
)


def test_should_retry_bounds_attempts() -> None:
    assert [should_retry(a, 3) for a in range(5)] == [True, True, True, False, False]
    assert not should_retry(0, 0)


def test_delay_is_pure_exponential() -> None:
    assert [delay_for_attempt(a, 100) for a in range(5)] == [100, 200, 400, 800, 1600]
    assert delay_for_attempt(20, 1) == 2 ** 20  # uncapped


def test_backoff_cap_is_opt_in() -> None:
    backoff = ExponentialBackoff(base_ms=100, max_delay_ms=250)
    assert [backoff.delay(a) for a in range(4)] == [100, 200, 250, 250]


def test_policy_model() -> None:
    policy = RetryPolicy(max_retries=2, base_delay_ms=50)
    assert policy.max_attempts == 3
    assert not policy.is_disabled
    assert NO_RETRY.is_disabled
    assert [policy.delay_for_attempt(a) for a in range(3)] == [50, 100, 200]
    assert policy.should_retry(1) and not policy.should_retry(2)


def test_policy_custom_backoff() -> None:
    policy = RetryPolicy(max_retries=1, backoff=ExponentialBackoff(base_ms=10, multiplier=3))
    assert policy.delay_for_attempt(2) == 90


def test_policy_rejects_out_of_range() -> None:
    with pytest.raises(ValidationError):
        RetryPolicy(max_retries=11)
    with pytest.raises(ValidationError):
        RetryPolicy(max_retries=-1)


@pytest.mark.asyncio
async def test_retry_call_eventually_succeeds() -> None:
    calls = 0

    async def flaky() -> str:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise ConnectionError("reset")
        return "done"

    retries: list[tuple[int, float]] = []
    result = await retry_call(
        flaky,
        RetryPolicy(max_retries=3, base_delay_ms=1),
        on_retry=lambda attempt, err, delay: retries.append((attempt, delay)),
    )
    assert result == "done"
    assert calls == 3
    assert retries == [(0, 1), (1, 2)]


@pytest.mark.asyncio
async def test_retry_call_exhausts_and_raises_last() -> None:
    calls = 0

    async def always_fails() -> None:
        nonlocal calls
        calls += 1
        raise ConnectionError(f"attempt {calls}")

    with pytest.raises(ConnectionError, match="attempt 3"):
        await retry_call(always_fails, RetryPolicy(max_retries=2, base_delay_ms=1))
    assert calls == 3


@pytest.mark.asyncio
async def test_retry_call_respects_retry_on() -> None:
    calls = 0

    async def bad_input() -> None:
        nonlocal calls
        calls += 1
        raise ValueError("not retryable")

    with pytest.raises(ValueError):
        await retry_call(bad_input, RetryPolicy(max_retries=5, base_delay_ms=1), retry_on=(ConnectionError,))
    assert calls == 1


@pytest.mark.asyncio
async def test_retry_call_logs_retries(caplog: pytest.LogCaptureFixture) -> None:
    attempts = iter([ConnectionError("x"), None])

    async def once_flaky() -> int:
        if (err := next(attempts)) is not None:
            raise err
        return 1

    with caplog.at_level(logging.INFO, logger="reqkit.retry"):
        await retry_call(once_flaky, RetryPolicy(max_retries=1, base_delay_ms=1), name="probe")
    assert "[probe] Retry 1/1 after 1ms (ConnectionError)" in caplog.text
