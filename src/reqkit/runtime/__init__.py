"""Runtime - Execution flow control and monitoring.

Contains: retry, concurrency (cancellation), observability (logging).
"""

from __future__ import annotations

__all__ = [
    # Retry
    "Backoff", "ExponentialBackoff", "RetryPolicy", "NO_RETRY",
    "should_retry", "delay_for_attempt", "retry_call",
    # Concurrency
    "CancellationToken", "Guarded", "GuardState", "checkpoint", "guard",
    # Observability
    "configure_logging", "get_logger", "JsonFormatter", "TextFormatter",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    retry_attrs = {
        "Backoff", "ExponentialBackoff", "RetryPolicy", "NO_RETRY",
        "should_retry", "delay_for_attempt", "retry_call",
    }
    if name in retry_attrs:
        from . import retry
        return getattr(retry, name)

    concurrency_attrs = {"CancellationToken", "Guarded", "GuardState", "checkpoint", "guard"}
    if name in concurrency_attrs:
        from . import concurrency
        return getattr(concurrency, name)

    observability_attrs = {"configure_logging", "get_logger", "JsonFormatter", "TextFormatter"}
    if name in observability_attrs:
        from . import observability
        return getattr(observability, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
