"""Capture session lifecycle: idle -> starting -> active -> stopping -> idle.

Every start/stop request takes a fresh request token. A backend response is
applied only if its token is still current, so a slow response to a request
that has since been superseded cannot move the state machine. Signal results
are fenced separately by the capture generation (see ``SignalMonitor``).
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from live_capture.core.logging_utils import LoggerLike, ensure_structured_logger
from live_capture.domain import (
    DEFAULT_DEVICE_LABEL,
    CaptureError,
    CaptureState,
    CaptureStatus,
    StartFailed,
    StopFailed,
)
from live_capture.services import BackendGateway

from .device_catalog import DeviceCatalog
from .signal_monitor import SignalMonitor

CaptureChangeCallback = Callable[[bool, Optional[str]], None]

NO_DEVICES_MESSAGE = "No input devices found. Connect an audio interface and refresh."


class CaptureSession:
    """Own the single capture session and drive its transitions."""

    def __init__(
        self,
        gateway: BackendGateway,
        catalog: DeviceCatalog,
        state: CaptureState,
        monitor: SignalMonitor,
        logger: LoggerLike = None,
        *,
        on_capture_change: CaptureChangeCallback | None = None,
    ) -> None:
        self.gateway = gateway
        self.catalog = catalog
        self.state = state
        self.monitor = monitor
        self.logger = ensure_structured_logger(logger, fallback_name="Capture").getChild("Session")
        self.on_capture_change = on_capture_change
        self.last_error: CaptureError | None = None
        self._request_token = 0
        self._capture_fact: tuple[bool, Optional[str]] = (False, None)

    @property
    def status(self) -> CaptureStatus:
        return self.state.status

    @property
    def selected_device(self) -> str | None:
        return self.state.selected_device

    def select_device(self, device: str | None) -> bool:
        """Select a device (``None`` = backend default); only honoured while idle."""
        return self.state.set_selected_device(device)

    # ------------------------------------------------------------------
    # Transitions

    async def start(self) -> bool:
        status = self.state.status
        if status not in (CaptureStatus.IDLE, CaptureStatus.FAILED):
            self.logger.debug("Start ignored while %s", status.value)
            return False
        if self.catalog.is_empty:
            self.logger.warning("Start rejected: no input devices listed")
            self.state.set_error(NO_DEVICES_MESSAGE)
            return False

        token = self._next_request()
        device = self.state.selected_device
        label = device or DEFAULT_DEVICE_LABEL
        self.last_error = None
        self.state.clear_error()
        self.state.set_status(CaptureStatus.STARTING)
        self.logger.info("Starting capture on %s", label)

        try:
            message = await self.gateway.start_capture(device)
        except asyncio.CancelledError:
            if token == self._request_token:
                self.state.set_status(CaptureStatus.IDLE)
            raise
        except Exception as exc:
            failure = StartFailed.from_exception(exc)
            if token != self._request_token:
                self.logger.info("Superseded start failed: %s", failure.detail)
                return False
            self._record_failure(failure)
            self.state.set_status(CaptureStatus.IDLE)
            return False

        if token != self._request_token:
            await self._undo_superseded_start(message)
            return False

        generation = self.state.next_generation()
        self.state.set_status_message(message)
        self.state.set_status(CaptureStatus.ACTIVE)
        self.monitor.start(generation)
        self.logger.info("Capture active on %s (generation %d)", label, generation)
        self._report_capture(True, device)
        return True

    async def stop(self) -> bool:
        status = self.state.status
        if status is CaptureStatus.STARTING:
            self._abort_pending_start()
            return True
        if status is not CaptureStatus.ACTIVE:
            self.logger.debug("Stop ignored while %s", status.value)
            return False

        token = self._next_request()
        self.last_error = None
        self.state.clear_error()
        self.state.set_status(CaptureStatus.STOPPING)
        self.logger.info("Stopping capture")

        try:
            message = await self.gateway.stop_capture()
        except asyncio.CancelledError:
            if token == self._request_token:
                self.state.set_status(CaptureStatus.ACTIVE)
            raise
        except Exception as exc:
            failure = StopFailed.from_exception(exc)
            if token != self._request_token:
                self.logger.info("Superseded stop failed: %s", failure.detail)
                return False
            self._record_failure(failure)
            self.state.set_status(CaptureStatus.ACTIVE)
            return False

        if token != self._request_token:
            self.logger.debug("Discarding superseded stop response: %s", message)
            return False

        # Monitor is cancelled and the generation retired before the state
        # reads idle, so no poll from this period can land afterwards.
        self.monitor.cancel()
        self.state.next_generation()
        self.state.clear_signal_message()
        self.state.set_status_message(message)
        self.state.set_status(CaptureStatus.IDLE)
        self.logger.info("Capture stopped")
        self._report_capture(False, None)
        return True

    async def toggle(self) -> bool:
        if self.state.status in (CaptureStatus.ACTIVE, CaptureStatus.STARTING):
            return await self.stop()
        return await self.start()

    def reset(self) -> bool:
        """Acknowledge a failed session and return it to idle."""
        if self.state.status is not CaptureStatus.FAILED:
            return False
        self.last_error = None
        self.state.clear_error()
        self.state.set_status(CaptureStatus.IDLE)
        return True

    # ------------------------------------------------------------------
    # Helpers

    def _next_request(self) -> int:
        self._request_token += 1
        return self._request_token

    def _abort_pending_start(self) -> None:
        self._next_request()
        self.logger.info("Pending start cancelled by stop request")
        self.state.set_status_message("Capture start cancelled")
        self.state.set_status(CaptureStatus.IDLE)

    async def _undo_superseded_start(self, message: str) -> None:
        self.logger.warning(
            "Backend reported '%s' after the start was cancelled; closing the stream", message
        )
        try:
            await self.gateway.stop_capture()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            failure = StopFailed.from_exception(exc)
            self.logger.error("Could not close superseded capture: %s", failure.detail)
            if self.state.status is CaptureStatus.IDLE:
                self._record_failure(failure)
                self.state.set_status(CaptureStatus.FAILED)

    def _record_failure(self, failure: CaptureError) -> None:
        self.last_error = failure
        self.logger.error("%s", failure)
        self.state.set_error(failure.message)

    def _report_capture(self, capturing: bool, device: Optional[str]) -> None:
        fact = (capturing, device)
        if fact == self._capture_fact:
            return
        self._capture_fact = fact
        callback = self.on_capture_change
        if callback is None:
            return
        try:
            callback(capturing, device)
        except Exception:
            self.logger.debug("Capture change callback failed", exc_info=True)


__all__ = ["CaptureChangeCallback", "CaptureSession", "NO_DEVICES_MESSAGE"]
