"""Retry policy: how many attempts, and how long to wait between them.

The policy never inspects errors. Deciding which failures are retryable is
the caller's job (the executor retries every transport-level throw and never
retries a status rejected by its validator).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Annotated, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, computed_field

from reqkit.runtime.concurrency import checkpoint

from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")

logger = logging.getLogger("reqkit.retry")


def should_retry(attempt: int, max_retries: int) -> bool:
    """True while ``attempt < max_retries`` (total attempts = max_retries + 1)."""
    return attempt < max_retries


def delay_for_attempt(attempt: int, base_delay_ms: float) -> float:
    """Pure exponential backoff: ``base_delay_ms * 2 ** attempt`` milliseconds."""
    return ExponentialBackoff(base_ms=base_delay_ms).delay(attempt)


class RetryPolicy(BaseModel):
    """Immutable retry configuration.

    Attributes:
        max_retries: Retries after the initial attempt (0 = single attempt)
        base_delay_ms: Backoff base in milliseconds
        backoff: Optional strategy overriding pure exponential backoff

    Example:
        >>> policy = RetryPolicy(max_retries=3, base_delay_ms=100)
        >>> [policy.delay_for_attempt(a) for a in range(3)]
        [100.0, 200.0, 400.0]
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        extra="forbid",
        revalidate_instances="never",
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 0
    base_delay_ms: NonNegativeInt = 100
    backoff: Backoff | None = Field(default=None, repr=False)

    @computed_field
    @property
    def is_disabled(self) -> bool:
        return self.max_retries == 0

    @computed_field
    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def should_retry(self, attempt: int) -> bool:
        return should_retry(attempt, self.max_retries)

    def delay_for_attempt(self, attempt: int) -> float:
        if self.backoff is not None:
            return self.backoff.delay(attempt)
        return delay_for_attempt(attempt, self.base_delay_ms)

    def __hash__(self) -> int:
        return hash((self.max_retries, self.base_delay_ms))


# Single attempt, no waiting
NO_RETRY = RetryPolicy(max_retries=0)


async def retry_call(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    name: str = "operation",
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    on_retry: Callable[[int, BaseException, float], None] | None = None,
) -> T:
    """Run an async operation, retrying exceptions with exponential backoff.

    Args:
        operation: Zero-arg async callable, invoked once per attempt
        policy: Attempt bound and backoff
        name: Label used in log lines
        retry_on: Exception types that trigger a retry; others propagate at once
        on_retry: Callback ``(attempt, error, delay_ms)`` before each wait

    Returns:
        The first successful result.

    Raises:
        The last exception once attempts are exhausted.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except retry_on as e:
            if not policy.should_retry(attempt):
                raise
            delay = policy.delay_for_attempt(attempt)
            logger.info(f"[{name}] Retry {attempt + 1}/{policy.max_retries} after {delay:.0f}ms ({type(e).__name__})")
            if on_retry:
                on_retry(attempt, e, delay)
            await asyncio.sleep(delay / 1000)
            await checkpoint()
            attempt += 1
