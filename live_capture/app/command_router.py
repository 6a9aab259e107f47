"""Command routing for the capture application."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from live_capture.core.logging_utils import LoggerLike, ensure_structured_logger

if TYPE_CHECKING:  # pragma: no cover - avoids circular import at runtime
    from .application import CaptureApp


class CommandRouter:
    """Route ``{"command": ...}`` dictionaries to the application."""

    def __init__(self, logger: LoggerLike, app: "CaptureApp") -> None:
        self.logger = ensure_structured_logger(logger, fallback_name="Capture").getChild("CommandRouter")
        self.app = app

    async def handle_command(self, command: dict[str, Any]) -> bool:
        action = str(command.get("command") or "").lower()
        self.logger.debug("Handling command: %s", action)
        if action == "refresh_devices":
            await self.app.refresh_devices()
            return True
        if action == "select_device":
            device = command.get("device")
            self.app.select_device(str(device) if device is not None else None)
            return True
        if action == "start_capture":
            await self.app.start_capture()
            return True
        if action == "stop_capture":
            await self.app.stop_capture()
            return True
        if action == "toggle_capture":
            await self.app.toggle_capture()
            return True
        if action == "reset":
            self.app.reset()
            return True
        if action == "get_status":
            self.app.emit_status("status_report", self.app.status_payload())
            return True
        self.logger.debug("Unhandled command: %s", action)
        return False


__all__ = ["CommandRouter"]
