"""Observable capture state, independent of asyncio and sounddevice."""

from __future__ import annotations

from typing import Callable

from live_capture.core.logging_utils import get_module_logger

from .constants import DEFAULT_DEVICE_LABEL
from .entities import CaptureSnapshot, CaptureStatus

logger = get_module_logger("State")


class CaptureState:
    """Holds the single capture session's fields and notifies observers.

    Only the session's transition logic writes ``status``. The signal monitor
    writes the signal display through :meth:`apply_signal_message`, which
    drops results belonging to an earlier generation.
    """

    def __init__(self) -> None:
        self.status: CaptureStatus = CaptureStatus.IDLE
        self.selected_device: str | None = None
        self.status_message: str | None = None
        self.error_message: str | None = None
        self.signal_message: str | None = None
        self.generation: int = 0
        self._observers: list[Callable[[CaptureSnapshot], None]] = []

    # ------------------------------------------------------------------
    # Observer helpers

    def subscribe(self, observer: Callable[[CaptureSnapshot], None]) -> None:
        self._observers.append(observer)
        observer(self.snapshot())

    def unsubscribe(self, observer: Callable[[CaptureSnapshot], None]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.debug("Observer notification failed", exc_info=True)

    def snapshot(self) -> CaptureSnapshot:
        return CaptureSnapshot(
            status=self.status,
            selected_device=self.selected_device,
            status_message=self.status_message,
            error_message=self.error_message,
            signal_message=self.signal_message,
            generation=self.generation,
        )

    # ------------------------------------------------------------------
    # Mutation helpers

    def set_status(self, status: CaptureStatus) -> None:
        if self.status is status:
            return
        logger.debug("Status %s -> %s", self.status.value, status.value)
        self.status = status
        self._notify()

    def set_selected_device(self, device: str | None) -> bool:
        """Change the selection; refused unless the session is idle."""
        if self.status is not CaptureStatus.IDLE:
            logger.debug(
                "Ignoring device selection %r while %s", device, self.status.value
            )
            return False
        if self.selected_device == device:
            return True
        self.selected_device = device
        self._notify()
        return True

    def set_status_message(self, message: str | None) -> None:
        self.status_message = message
        self._notify()

    def set_error(self, message: str | None) -> None:
        self.error_message = message
        self._notify()

    def clear_error(self) -> None:
        if self.error_message is None:
            return
        self.error_message = None
        self._notify()

    def next_generation(self) -> int:
        self.generation += 1
        return self.generation

    def apply_signal_message(self, generation: int, message: str | None) -> bool:
        """Show a signal result if it belongs to the current generation."""
        if generation != self.generation:
            logger.debug(
                "Dropping stale signal result from generation %d (current %d)",
                generation,
                self.generation,
            )
            return False
        self.signal_message = message
        self._notify()
        return True

    def clear_signal_message(self) -> None:
        if self.signal_message is None:
            return
        self.signal_message = None
        self._notify()

    # ------------------------------------------------------------------
    # Status payload helpers

    @property
    def device_label(self) -> str:
        return self.selected_device or DEFAULT_DEVICE_LABEL

    def status_payload(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "capturing": self.status.capturing,
            "selected_device": self.selected_device,
            "device_label": self.device_label,
            "status_message": self.status_message,
            "error_message": self.error_message,
            "signal_message": self.signal_message,
            "generation": self.generation,
        }


__all__ = ["CaptureState"]
