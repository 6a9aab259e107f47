"""Time-bounded signal verification for an active capture.

Each run is bound to one capture generation and consists of two tasks that
share a cancellation token: a repeating poll of ``check_signal`` and a
one-shot expiry that ends the run once its lifetime has elapsed. Ending the
run never stops the capture itself.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from live_capture.core.logging_utils import LoggerLike, ensure_structured_logger
from live_capture.core.task_manager import BackgroundTaskManager
from live_capture.domain import (
    SIGNAL_MONITOR_LIFETIME,
    SIGNAL_POLL_INTERVAL,
    CaptureState,
    CaptureStatus,
    SignalCheckFailed,
)
from live_capture.services import BackendGateway


class SignalMonitor:
    """Poll the backend for signal while the bound generation is active."""

    def __init__(
        self,
        gateway: BackendGateway,
        state: CaptureState,
        logger: LoggerLike = None,
        *,
        interval: float = SIGNAL_POLL_INTERVAL,
        lifetime: float = SIGNAL_MONITOR_LIFETIME,
        task_manager: Optional[BackgroundTaskManager] = None,
    ) -> None:
        self.gateway = gateway
        self.state = state
        self.logger = ensure_structured_logger(logger, fallback_name="Capture").getChild("Monitor")
        self.interval = max(0.001, float(interval))
        self.lifetime = max(0.0, float(lifetime))
        self.task_manager = task_manager or BackgroundTaskManager("SignalMonitorTasks", self.logger)
        self.generation: int | None = None
        self.started_at: float | None = None
        self.polls = 0
        self._token: asyncio.Event | None = None
        self._poll_task: asyncio.Task | None = None
        self._expiry_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._token is not None and not self._token.is_set()

    def start(self, generation: int) -> None:
        """Begin a new run for ``generation``, ending any previous run first."""
        self.cancel()
        loop = asyncio.get_running_loop()
        token = asyncio.Event()
        self._token = token
        self.generation = generation
        self.started_at = loop.time()
        self.polls = 0
        self._poll_task = self.task_manager.create(
            self._poll_loop(generation, token), name=f"signal_poll_{generation}"
        )
        self._expiry_task = self.task_manager.create(
            self._expire(generation, token), name=f"signal_expiry_{generation}"
        )
        self.logger.debug(
            "Monitoring generation %d every %.2fs for %.1fs",
            generation,
            self.interval,
            self.lifetime,
        )

    def cancel(self) -> None:
        """End the current run immediately; no poll result lands afterwards."""
        token = self._token
        if token is None:
            return
        token.set()
        for task in (self._poll_task, self._expiry_task):
            if task is not None and not task.done():
                task.cancel()
        self.logger.debug("Monitoring of generation %s cancelled", self.generation)
        self._token = None
        self._poll_task = None
        self._expiry_task = None

    async def wait_closed(self) -> None:
        """Wait until both tasks of the current run have finished."""
        tasks = [task for task in (self._poll_task, self._expiry_task) if task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Tasks

    async def _poll_loop(self, generation: int, token: asyncio.Event) -> None:
        while not token.is_set():
            await asyncio.sleep(self.interval)
            if token.is_set():
                return
            if self.state.generation != generation:
                self.logger.debug("Generation %d superseded; poll loop exiting", generation)
                return
            if self.state.status is not CaptureStatus.ACTIVE:
                # Stop in flight; resume if it fails and the session stays active.
                continue
            await self._poll_once(generation, token)

    async def _poll_once(self, generation: int, token: asyncio.Event) -> None:
        self.polls += 1
        try:
            message = await self.gateway.check_signal()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            failure = SignalCheckFailed.from_exception(exc)
            self.logger.warning("Signal check failed: %s", failure.detail)
            message = failure.message
        if token.is_set():
            self.logger.debug("Discarding signal result after cancellation")
            return
        if self.state.apply_signal_message(generation, message):
            self.logger.debug("Signal (generation %d): %s", generation, message)

    async def _expire(self, generation: int, token: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(token.wait(), timeout=self.lifetime)
            return
        except asyncio.TimeoutError:
            pass
        if token is not self._token:
            return
        token.set()
        poll_task = self._poll_task
        if poll_task is not None and not poll_task.done():
            poll_task.cancel()
        self._token = None
        self._poll_task = None
        self._expiry_task = None
        self.logger.info(
            "Signal monitoring for generation %d ended after %.1fs (%d poll(s))",
            generation,
            self.lifetime,
            self.polls,
        )


__all__ = ["SignalMonitor"]
