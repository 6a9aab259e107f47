"""Most recent input device enumeration and the preferred device within it."""

from __future__ import annotations

import asyncio
from typing import Callable, Iterable

from live_capture.core.logging_utils import LoggerLike, ensure_structured_logger
from live_capture.domain import (
    PREFERRED_DEVICE_HINTS,
    CatalogSnapshot,
    EnumerationFailed,
    find_preferred_device,
    normalize_hints,
)
from live_capture.services import BackendGateway


class DeviceCatalog:
    """Hold the last successful device listing.

    A failed refresh keeps the previous listing so the operator can still pick
    a device, and records the failure for display. The catalog never selects
    a device into the capture session on its own.
    """

    def __init__(
        self,
        gateway: BackendGateway,
        logger: LoggerLike = None,
        *,
        hints: Iterable[str] = PREFERRED_DEVICE_HINTS,
    ) -> None:
        self.gateway = gateway
        self.logger = ensure_structured_logger(logger, fallback_name="Capture").getChild("Catalog")
        self.hints = normalize_hints(hints)
        self.devices: tuple[str, ...] = ()
        self.preferred_device: str | None = None
        self.last_error: EnumerationFailed | None = None
        self._observers: list[Callable[[CatalogSnapshot], None]] = []

    @property
    def is_empty(self) -> bool:
        return not self.devices

    @property
    def error_message(self) -> str | None:
        return self.last_error.message if self.last_error else None

    def __contains__(self, name: object) -> bool:
        return name in self.devices

    async def refresh(self) -> bool:
        """Query the backend and replace the listing on success."""
        self.logger.debug("Refreshing device list")
        try:
            names = await self.gateway.enumerate_devices()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.last_error = EnumerationFailed.from_exception(exc)
            self.logger.error("%s (keeping %d known device(s))", self.last_error, len(self.devices))
            self._notify()
            return False

        self.devices = tuple(str(name) for name in names)
        self.preferred_device = find_preferred_device(self.devices, self.hints)
        self.last_error = None
        self.logger.info(
            "Found %d input device(s); preferred=%s",
            len(self.devices),
            self.preferred_device,
        )
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Observer helpers

    def subscribe(self, observer: Callable[[CatalogSnapshot], None]) -> None:
        self._observers.append(observer)
        observer(self.snapshot())

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                self.logger.debug("Catalog observer failed", exc_info=True)

    def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            devices=self.devices,
            preferred_device=self.preferred_device,
            error_message=self.error_message,
        )


__all__ = ["DeviceCatalog"]
