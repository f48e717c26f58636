"""Fire-and-forget task tracking with a dedicated failure channel."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Coroutine

from cinefind.logging import logger

FailureHook = Callable[[str, BaseException], None]


class DetachedTasks:
    """Spawn background coroutines whose failures never reach the caller.

    Tasks are referenced until they finish so the event loop cannot collect
    them mid-flight. Exceptions are reported through the structured logger and
    the optional ``on_error`` hook instead of being raised.
    """

    def __init__(self, *, on_error: FailureHook | None = None) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._on_error = on_error

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._finalize)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding task; failures are already reported."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _finalize(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("detached_task_cancelled", task=task.get_name())
            return
        exc = task.exception()
        if exc is None:
            return
        logger.warning(
            "detached_task_failed",
            task=task.get_name(),
            error_type=exc.__class__.__name__,
            error=str(exc),
        )
        if self._on_error is not None:
            try:
                self._on_error(task.get_name(), exc)
            except Exception:
                logger.exception("detached_task_hook_failed", task=task.get_name())


__all__ = ["DetachedTasks", "FailureHook"]
