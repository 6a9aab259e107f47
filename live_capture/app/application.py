"""Capture application composed of the catalog, session and signal monitor."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from live_capture.config import CaptureSettings
from live_capture.core.logging_utils import LoggerLike, ensure_structured_logger
from live_capture.core.task_manager import BackgroundTaskManager
from live_capture.domain import CaptureState, CaptureStatus
from live_capture.services import BackendGateway

from .capture_session import CaptureChangeCallback, CaptureSession
from .command_router import CommandRouter
from .device_catalog import DeviceCatalog
from .signal_monitor import SignalMonitor


class CaptureApp:
    """High-level coordinator for one capture session against one backend."""

    def __init__(
        self,
        settings: CaptureSettings,
        gateway: BackendGateway,
        *,
        logger: LoggerLike = None,
        on_capture_change: CaptureChangeCallback | None = None,
        status_callback: Callable[[str, dict[str, object]], None] | None = None,
    ) -> None:
        self.settings = settings
        self.gateway = gateway
        self.status_callback = status_callback
        base_logger = ensure_structured_logger(logger, fallback_name="Capture")
        self.logger = base_logger.getChild("App")

        self.state = CaptureState()
        self.task_manager = BackgroundTaskManager("CaptureTasks", self.logger)
        self.catalog = DeviceCatalog(gateway, base_logger, hints=settings.preferred_hints)
        self.monitor = SignalMonitor(
            gateway,
            self.state,
            base_logger,
            interval=settings.signal_interval,
            lifetime=settings.signal_lifetime,
            task_manager=self.task_manager,
        )
        self.session = CaptureSession(
            gateway,
            self.catalog,
            self.state,
            self.monitor,
            base_logger,
            on_capture_change=on_capture_change,
        )
        self.command_router = CommandRouter(self.logger, self)
        self._stop_event = asyncio.Event()

        self.logger.debug("Initialized CaptureApp with settings: %s", settings)

    # ------------------------------------------------------------------
    # Lifecycle

    async def start(self) -> None:
        self.logger.info("Capture controller started")
        if self.settings.refresh_on_start:
            await self.refresh_devices()

    async def shutdown(self) -> None:
        self.logger.debug("Shutdown requested")
        self._stop_event.set()
        if self.state.status in (CaptureStatus.ACTIVE, CaptureStatus.STARTING):
            await self.session.stop()
        self.monitor.cancel()
        await self.task_manager.shutdown(timeout=self.settings.shutdown_timeout)
        self.logger.info("Capture controller shutdown complete")

    def request_stop(self) -> None:
        self._stop_event.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    async def wait_stopped(self) -> None:
        await self._stop_event.wait()

    # ------------------------------------------------------------------
    # Operations exposed to the command router and front-ends

    async def refresh_devices(self) -> bool:
        refreshed = await self.catalog.refresh()
        if refreshed and self.settings.auto_select_preferred:
            self.apply_preferred_device()
        return refreshed

    def apply_preferred_device(self) -> bool:
        """Select the detected preferred device if nothing is selected yet."""
        preferred = self.catalog.preferred_device
        if preferred is None or self.state.selected_device is not None:
            return False
        if not self.session.select_device(preferred):
            return False
        self.state.set_status_message(f"Preferred device detected: {preferred}")
        self.logger.info("Auto-selected preferred device %s", preferred)
        return True

    def select_device(self, name: Optional[str]) -> bool:
        if name is not None and name not in self.catalog:
            self.logger.warning("Unknown device %r; keeping %r", name, self.state.selected_device)
            return False
        return self.session.select_device(name)

    async def start_capture(self) -> bool:
        return await self.session.start()

    async def stop_capture(self) -> bool:
        return await self.session.stop()

    async def toggle_capture(self) -> bool:
        return await self.session.toggle()

    def reset(self) -> bool:
        return self.session.reset()

    async def handle_command(self, command: dict[str, Any]) -> bool:
        return await self.command_router.handle_command(command)

    def status_payload(self) -> dict[str, object]:
        payload = self.state.status_payload()
        payload.update(
            {
                "devices": list(self.catalog.devices),
                "preferred_device": self.catalog.preferred_device,
                "catalog_error": self.catalog.error_message,
                "monitoring": self.monitor.running,
            }
        )
        return payload

    def emit_status(self, kind: str, payload: dict[str, object]) -> None:
        if self.status_callback is None:
            return
        try:
            self.status_callback(kind, payload)
        except Exception:
            self.logger.debug("Status callback failed", exc_info=True)

    def submit(self, coro: Awaitable[Any], name: str) -> asyncio.Task:
        return self.task_manager.create(coro, name=name)


__all__ = ["CaptureApp"]
