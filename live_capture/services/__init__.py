"""Service layer for the capture controller."""

from .gateway import BackendGateway
from .sounddevice_backend import SOUNDDEVICE_AVAILABLE, SoundDeviceBackend

__all__ = [
    "BackendGateway",
    "SOUNDDEVICE_AVAILABLE",
    "SoundDeviceBackend",
]
