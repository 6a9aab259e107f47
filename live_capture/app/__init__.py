"""Capture application package."""

from .application import CaptureApp
from .capture_session import NO_DEVICES_MESSAGE, CaptureChangeCallback, CaptureSession
from .command_router import CommandRouter
from .device_catalog import DeviceCatalog
from .signal_monitor import SignalMonitor

__all__ = [
    "CaptureApp",
    "CaptureChangeCallback",
    "CaptureSession",
    "CommandRouter",
    "DeviceCatalog",
    "NO_DEVICES_MESSAGE",
    "SignalMonitor",
]
