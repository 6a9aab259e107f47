"""Audio backend that captures from a PortAudio input via sounddevice."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Optional

from live_capture.core.logging_utils import LoggerLike, ensure_structured_logger, get_module_logger
from live_capture.domain import (
    CAPTURE_BLOCK_SIZE,
    CAPTURE_CHANNELS,
    CAPTURE_SAMPLE_RATE,
    DEFAULT_DEVICE_LABEL,
    BackendUnavailable,
    DeviceBusy,
    DeviceNotFound,
    LevelMeter,
    NotCapturing,
)

_module_logger = get_module_logger("SoundDevice")

# PortAudio is loaded at import time; a missing shared library surfaces as OSError.
try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError) as exc:
    sd = None
    SOUNDDEVICE_AVAILABLE = False
    _module_logger.warning("sounddevice not available - capture disabled (%s)", exc)


class SoundDeviceBackend:
    """Single-stream capture backend implementing :class:`BackendGateway`.

    Blocking PortAudio calls run in worker threads. The stream callback runs on
    PortAudio's thread and only touches the block counter and level meter,
    both guarded by ``_lock``.
    """

    def __init__(
        self,
        logger: LoggerLike = None,
        *,
        sample_rate: int = CAPTURE_SAMPLE_RATE,
        channels: int = CAPTURE_CHANNELS,
        block_size: int = CAPTURE_BLOCK_SIZE,
    ) -> None:
        self.logger = ensure_structured_logger(logger, fallback_name="SoundDevice").getChild("Backend")
        self.sample_rate = max(1, int(sample_rate))
        self.channels = max(1, int(channels))
        self.block_size = max(1, int(block_size))
        self._lock = threading.Lock()
        self._stream: Any = None
        self._opening = False
        self._device_label: str | None = None
        self._pending_blocks = 0
        self._level_meter = LevelMeter()

    @property
    def capturing(self) -> bool:
        return self._stream is not None

    # ------------------------------------------------------------------
    # BackendGateway operations

    async def enumerate_devices(self) -> list[str]:
        devices = await asyncio.to_thread(self._query_devices)
        names = [
            str(info.get("name", f"Device {index}"))
            for index, info in enumerate(devices)
            if int(info.get("max_input_channels", 0) or 0) > 0
        ]
        self.logger.debug("Found %d input device(s)", len(names))
        return names

    async def start_capture(self, device_name: Optional[str]) -> str:
        if self._stream is not None or self._opening:
            raise DeviceBusy(f"Already capturing from {self._device_label or DEFAULT_DEVICE_LABEL}")
        self._opening = True
        try:
            index, resolved_name = await asyncio.to_thread(self._resolve_device, device_name)
            stream = await asyncio.to_thread(self._open_stream, index)
        finally:
            self._opening = False

        with self._lock:
            self._pending_blocks = 0
            self._level_meter.reset()
        self._stream = stream
        self._device_label = resolved_name
        self.logger.info(
            "Capture started on %s (%d Hz, %d channel(s), block %d)",
            resolved_name,
            self.sample_rate,
            self.channels,
            self.block_size,
        )
        return f"Capture started: {device_name or DEFAULT_DEVICE_LABEL}"

    async def stop_capture(self) -> str:
        stream = self._stream
        if stream is None:
            raise NotCapturing("Capture not started")
        self._stream = None
        try:
            await asyncio.to_thread(self._close_stream, stream)
        except BackendUnavailable:
            self._stream = stream
            raise
        self.logger.info("Capture stopped on %s", self._device_label)
        self._device_label = None
        return "Capture stopped"

    async def check_signal(self) -> str:
        if self._stream is None:
            raise NotCapturing("Capture not started")
        with self._lock:
            count = self._pending_blocks
            self._pending_blocks = 0
            rms_db, _ = self._level_meter.get_db_levels()
        if count > 0:
            return f"Audio signal OK ({count} buffers, {rms_db:.1f} dBFS)"
        return "No buffers received yet"

    # ------------------------------------------------------------------
    # Blocking helpers (worker threads)

    def _require_sounddevice(self) -> None:
        if not SOUNDDEVICE_AVAILABLE:
            raise BackendUnavailable("sounddevice is not available")

    def _query_devices(self, index: int | None = None) -> Any:
        self._require_sounddevice()
        try:
            if index is None:
                return sd.query_devices()
            return sd.query_devices(index)
        except Exception as exc:
            raise BackendUnavailable(f"Cannot query audio devices: {exc}") from exc

    def _resolve_device(self, device_name: Optional[str]) -> tuple[int, str]:
        self._require_sounddevice()
        if device_name is None:
            default = sd.default.device
            index = default[0] if isinstance(default, (list, tuple)) else default
            if index is None or int(index) < 0:
                raise DeviceNotFound("No default input device found")
            info = self._query_devices(int(index))
            return int(index), str(info.get("name", DEFAULT_DEVICE_LABEL))

        wanted = device_name.lower()
        for index, info in enumerate(self._query_devices()):
            if int(info.get("max_input_channels", 0) or 0) <= 0:
                continue
            name = str(info.get("name", ""))
            if wanted in name.lower():
                return index, name
        raise DeviceNotFound(f"Device '{device_name}' not found")

    def _open_stream(self, index: int) -> Any:
        self._require_sounddevice()
        stream = None
        try:
            stream = sd.InputStream(
                device=index,
                channels=self.channels,
                samplerate=self.sample_rate,
                blocksize=self.block_size,
                dtype="float32",
                callback=self._on_block,
            )
            stream.start()
        except Exception as exc:
            if stream is not None:
                try:
                    stream.close()
                except Exception:
                    self.logger.debug("Stream close after failed start raised", exc_info=True)
            raise BackendUnavailable(f"Cannot open input stream: {exc}") from exc
        return stream

    def _close_stream(self, stream: Any) -> None:
        try:
            stream.stop()
            stream.close()
        except Exception as exc:
            raise BackendUnavailable(f"Cannot close input stream: {exc}") from exc

    def _on_block(self, indata, frames, time_info, status) -> None:
        if status:
            self.logger.debug("Input status: %s", status)
        samples = indata[:, 0] if getattr(indata, "ndim", 1) > 1 else indata
        with self._lock:
            self._pending_blocks += 1
            self._level_meter.add_samples(samples)


__all__ = ["SOUNDDEVICE_AVAILABLE", "SoundDeviceBackend"]
