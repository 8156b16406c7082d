"""Backoff strategies for retry policies.

Delays are expressed in milliseconds and attempt numbers are 0-indexed
(the delay after the first failed attempt is ``delay(0)``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation."""

    def delay(self, attempt: int) -> float:
        """Delay in milliseconds before the attempt following ``attempt``."""
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Pure exponential backoff.

    Delay = base_ms * (multiplier ^ attempt), optionally capped by max_delay_ms.
    No jitter: identical inputs always give identical delays. Callers needing
    a ceiling set max_delay_ms (None means uncapped).

    Attributes:
        base_ms: Initial delay in milliseconds (default: 100)
        multiplier: Exponential growth factor (default: 2.0)
        max_delay_ms: Optional cap in milliseconds
    """

    base_ms: float = 100.0
    multiplier: float = 2.0
    max_delay_ms: float | None = None

    def delay(self, attempt: int) -> float:
        d = self.base_ms * (self.multiplier ** attempt)
        return d if self.max_delay_ms is None else min(d, self.max_delay_ms)
