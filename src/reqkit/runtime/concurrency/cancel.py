"""Cooperative cancellation for in-flight attempts.

A `CancellationToken` is a caller-owned signal. `guard` races an awaitable
against a deadline and an optional token: whichever fires first aborts the
awaitable, and the caller learns which one it was.

Example:
    >>> token = CancellationToken()
    >>> outcome = await guard(client.get(url), timeout=5.0, token=token)
    >>> if outcome.timed_out: ...
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")


class CancellationToken:
    """Caller-supplied cancellation signal.

    Safe to share between concurrent executions; cancelling is idempotent.
    """

    __slots__ = ("reason", "_event")

    def __init__(self) -> None:
        self.reason: str | None = None
        self._event = asyncio.Event()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled}, reason={self.reason!r})"

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if reason is not None and self.reason is None:
            self.reason = reason
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class GuardState(StrEnum):
    """How a guarded awaitable ended."""
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Guarded(Generic[T]):
    """Outcome of `guard`. `value` is set only when state is COMPLETED."""

    state: GuardState
    value: T | None = None

    @property
    def completed(self) -> bool:
        return self.state is GuardState.COMPLETED

    @property
    def timed_out(self) -> bool:
        return self.state is GuardState.TIMED_OUT

    @property
    def cancelled(self) -> bool:
        return self.state is GuardState.CANCELLED


async def guard(
    aw: Awaitable[T],
    *,
    timeout: float | None,
    token: CancellationToken | None = None,
) -> Guarded[T]:
    """Await ``aw`` unless the deadline or the token fires first.

    Exceptions raised by ``aw`` propagate unchanged. When the deadline or the
    token wins, ``aw`` is cancelled and awaited before returning, so nothing
    is left running.

    Args:
        aw: The awaitable to run (typically one transport call)
        timeout: Deadline in seconds; None waits indefinitely
        token: Optional caller cancellation signal
    """
    call = asyncio.ensure_future(aw)
    watcher = asyncio.ensure_future(token.wait()) if token is not None else None
    waiters: set[asyncio.Future[object]] = {call} if watcher is None else {call, watcher}

    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        call.cancel()
        await asyncio.gather(call, return_exceptions=True)
        raise
    finally:
        if watcher is not None and not watcher.done():
            watcher.cancel()
            await asyncio.gather(watcher, return_exceptions=True)

    if call in done:
        return Guarded(GuardState.COMPLETED, call.result())

    call.cancel()
    await asyncio.gather(call, return_exceptions=True)
    state = GuardState.CANCELLED if watcher is not None and watcher in done else GuardState.TIMED_OUT
    return Guarded(state)


async def checkpoint() -> None:
    """Cooperative cancellation checkpoint.

    Yields control to the event loop, allowing pending cancellations
    to be processed.
    """
    await asyncio.sleep(0)
