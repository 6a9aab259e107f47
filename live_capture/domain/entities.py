"""Core data structures for the capture domain layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CaptureStatus(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    ACTIVE = "active"
    STOPPING = "stopping"
    FAILED = "failed"

    @property
    def capturing(self) -> bool:
        return self in (CaptureStatus.ACTIVE, CaptureStatus.STOPPING)


@dataclass(slots=True, frozen=True)
class CaptureSnapshot:
    status: CaptureStatus
    selected_device: str | None
    status_message: str | None
    error_message: str | None
    signal_message: str | None
    generation: int


@dataclass(slots=True, frozen=True)
class CatalogSnapshot:
    devices: tuple[str, ...]
    preferred_device: str | None
    error_message: str | None


__all__ = ["CaptureSnapshot", "CaptureStatus", "CatalogSnapshot"]
