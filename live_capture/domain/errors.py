"""Failure taxonomy for the capture controller.

Two families live here. ``BackendError`` subclasses are raised by gateway
implementations; the controller never branches on their concrete type and
only reads the message. ``CaptureError`` subclasses are what the controller
records for display after handling a gateway failure.
"""

from __future__ import annotations


class BackendError(Exception):
    """Base class for failures reported by an audio backend."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class BackendUnavailable(BackendError):
    """The audio subsystem could not be queried or opened."""


class DeviceNotFound(BackendError):
    """The requested input device is not present."""


class DeviceBusy(BackendError):
    """The backend is already capturing or the device is held elsewhere."""


class NotCapturing(BackendError):
    """An operation needed an open capture stream and none exists."""


class CaptureError(Exception):
    """Base class for failures surfaced by the controller."""

    prefix = "Capture error"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")

    @property
    def message(self) -> str:
        return str(self)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "CaptureError":
        detail = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
        return cls(detail)


class EnumerationFailed(CaptureError):
    prefix = "Failed to list devices"


class StartFailed(CaptureError):
    prefix = "Failed to start capture"


class StopFailed(CaptureError):
    prefix = "Failed to stop capture"


class SignalCheckFailed(CaptureError):
    prefix = "Error"


__all__ = [
    "BackendError",
    "BackendUnavailable",
    "CaptureError",
    "DeviceBusy",
    "DeviceNotFound",
    "EnumerationFailed",
    "NotCapturing",
    "SignalCheckFailed",
    "StartFailed",
    "StopFailed",
]
