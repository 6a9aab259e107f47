"""Contract between the capture controller and an audio backend."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class BackendGateway(Protocol):
    """Asynchronous command surface of an audio backend.

    Every operation may raise a :class:`~live_capture.domain.errors.BackendError`
    subclass. Callers treat failures opaquely and only display their message.
    """

    async def enumerate_devices(self) -> list[str]:
        """Return input device names in backend order.

        Raises:
            BackendUnavailable: the audio subsystem cannot be queried.
        """
        ...

    async def start_capture(self, device_name: Optional[str]) -> str:
        """Open a capture stream; ``None`` requests the backend default device.

        Raises:
            DeviceNotFound, DeviceBusy, BackendUnavailable
        """
        ...

    async def stop_capture(self) -> str:
        """Close the capture stream.

        Raises:
            NotCapturing, BackendUnavailable
        """
        ...

    async def check_signal(self) -> str:
        """Describe whether audio has arrived since the previous check.

        Raises:
            NotCapturing, BackendUnavailable
        """
        ...


__all__ = ["BackendGateway"]
