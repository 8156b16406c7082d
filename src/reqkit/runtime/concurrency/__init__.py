"""Cancellation primitives for attempt-level timeouts.

Pure asyncio: no background threads, no schedulers. Suspension happens only
while awaiting the guarded call.
"""

from __future__ import annotations

from .cancel import (
    CancellationToken,
    Guarded,
    GuardState,
    checkpoint,
    guard,
)

__all__ = [
    "CancellationToken",
    "Guarded",
    "GuardState",
    "checkpoint",
    "guard",
]
