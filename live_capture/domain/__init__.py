"""Domain models and constants for the capture controller."""

from .constants import (
    CAPTURE_BLOCK_SIZE,
    CAPTURE_CHANNELS,
    CAPTURE_SAMPLE_RATE,
    DB_MAX,
    DB_MIN,
    DEFAULT_DEVICE_LABEL,
    PREFERRED_DEVICE_HINTS,
    SIGNAL_MONITOR_LIFETIME,
    SIGNAL_POLL_INTERVAL,
)
from .devices import find_preferred_device, normalize_hints
from .entities import CaptureSnapshot, CaptureStatus, CatalogSnapshot
from .errors import (
    BackendError,
    BackendUnavailable,
    CaptureError,
    DeviceBusy,
    DeviceNotFound,
    EnumerationFailed,
    NotCapturing,
    SignalCheckFailed,
    StartFailed,
    StopFailed,
)
from .level_meter import LevelMeter
from .state import CaptureState

__all__ = [
    "BackendError",
    "BackendUnavailable",
    "CAPTURE_BLOCK_SIZE",
    "CAPTURE_CHANNELS",
    "CAPTURE_SAMPLE_RATE",
    "CaptureError",
    "CaptureSnapshot",
    "CaptureState",
    "CaptureStatus",
    "CatalogSnapshot",
    "DB_MAX",
    "DB_MIN",
    "DEFAULT_DEVICE_LABEL",
    "DeviceBusy",
    "DeviceNotFound",
    "EnumerationFailed",
    "LevelMeter",
    "NotCapturing",
    "PREFERRED_DEVICE_HINTS",
    "SIGNAL_MONITOR_LIFETIME",
    "SIGNAL_POLL_INTERVAL",
    "SignalCheckFailed",
    "StartFailed",
    "StopFailed",
    "find_preferred_device",
    "normalize_hints",
]
