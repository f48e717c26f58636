"""Collapse bursts of input changes into one settled value."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Generic, TypeVar

from cinefind.logging import logger

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Await ``on_settle`` with the latest value once input stays quiet.

    Every ``push`` restarts the quiet window. A settlement that has already
    started is never cancelled by later input; the new value simply schedules
    the next settlement.
    """

    def __init__(self, delay_seconds: float, on_settle: Callable[[T], Awaitable[Any]]) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        self.delay_seconds = delay_seconds
        self._on_settle = on_settle
        self._timer: asyncio.Task[None] | None = None
        self._settling: set[asyncio.Task[None]] = set()
        self.settled: T | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def push(self, value: T) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.create_task(self._settle_after_quiet(value))

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def wait(self) -> None:
        """Block until the pending window and any running settlement finish."""

        while self.pending or self._settling:
            tasks = [task for task in (self._timer, *self._settling) if task is not None]
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _settle_after_quiet(self, value: T) -> None:
        await asyncio.sleep(self.delay_seconds)
        current = asyncio.current_task()
        assert current is not None
        # Detach from the timer slot so a later push cannot cancel this settlement.
        self._timer = None
        self._settling.add(current)
        try:
            self.settled = value
            await self._on_settle(value)
        except Exception:
            logger.exception("debounce_settle_failed")
        finally:
            self._settling.discard(current)


__all__ = ["Debouncer"]
