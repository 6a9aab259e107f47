"""Background task bookkeeping for the capture controller."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, Set

from .logging_utils import LoggerLike, ensure_structured_logger


class BackgroundTaskManager:
    """Track background tasks and cancel them together on shutdown."""

    def __init__(self, name: str = "CaptureTasks", logger: LoggerLike = None) -> None:
        self._name = name
        self._logger = ensure_structured_logger(logger, fallback_name=name)
        self._tasks: Set[asyncio.Task] = set()
        self._closing = False

    def create(self, coro: Awaitable, *, name: Optional[str] = None) -> asyncio.Task:
        if self._closing:
            # Close the coroutine so it does not warn about never being awaited.
            close = getattr(coro, "close", None)
            if close is not None:
                close()
            raise RuntimeError(f"{self._name} is closing; refusing to create new tasks")
        loop = asyncio.get_running_loop()
        task = loop.create_task(coro, name=name or getattr(coro, "__name__", None))
        self._register(task)
        return task

    def _register(self, task: asyncio.Task) -> None:
        self._tasks.add(task)

        def _on_done(done: asyncio.Task) -> None:
            self._tasks.discard(done)
            if done.cancelled():
                return
            exc = done.exception()
            if exc:
                self._logger.error(
                    "%s task %s failed: %s", self._name, done.get_name(), exc, exc_info=exc
                )

        task.add_done_callback(_on_done)

    async def shutdown(self, *, timeout: float = 5.0) -> bool:
        self._closing = True
        pending = [task for task in self._tasks if not task.done()]
        if not pending:
            return True
        for task in pending:
            task.cancel()
        try:
            await asyncio.wait_for(asyncio.gather(*pending, return_exceptions=True), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            still_pending = [t.get_name() for t in pending if not t.done()]
            self._logger.warning(
                "%s timeout cancelling %d task(s): %s",
                self._name,
                len(still_pending),
                ", ".join(still_pending),
            )
            return False

    def active(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    @property
    def closing(self) -> bool:
        return self._closing


__all__ = ["BackgroundTaskManager"]
