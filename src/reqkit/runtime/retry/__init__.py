"""Retry policies with pluggable backoff.

Example:
    >>> from reqkit.runtime.retry import RetryPolicy, retry_call
    >>>
    >>> policy = RetryPolicy(max_retries=3, base_delay_ms=100)
    >>> body = await retry_call(lambda: fetch_body(url), policy, name="fetch")
"""

from .backoff import Backoff, ExponentialBackoff
from .policy import (
    NO_RETRY,
    RetryPolicy,
    delay_for_attempt,
    retry_call,
    should_retry,
)

__all__ = [
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    # Policy
    "RetryPolicy",
    "NO_RETRY",
    "should_retry",
    "delay_for_attempt",
    # Execution
    "retry_call",
]
