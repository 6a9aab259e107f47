"""Entry point wiring the sounddevice backend into the capture console."""

from __future__ import annotations

import asyncio
from typing import Optional

from live_capture.app import CaptureApp
from live_capture.cli import CaptureConsole, install_signal_handlers
from live_capture.config import DEFAULT_CONFIG_PATH, CaptureSettings, parse_cli_args
from live_capture.core.logging_config import configure_logging, resolve_log_level
from live_capture.core.logging_utils import get_module_logger
from live_capture.services import SoundDeviceBackend

logger = get_module_logger("Capture")

_DEFAULT_LOG_LEVEL = CaptureSettings().log_level


def parse_args(argv: Optional[list[str]] = None):
    return parse_cli_args(argv, config_path=DEFAULT_CONFIG_PATH)


def _log_capture_change(capturing: bool, device: Optional[str]) -> None:
    if capturing:
        logger.info("Capturing from %s", device or "the default device")
    else:
        logger.info("Capture released")


async def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)

    requested_level = str(getattr(args, "log_level", "") or "")
    effective_level, invalid_level = resolve_log_level(requested_level, _DEFAULT_LOG_LEVEL)
    configure_logging(
        level=effective_level,
        console=getattr(args, "console_output", True),
        log_file=getattr(args, "log_file", None),
    )
    if requested_level and invalid_level:
        logger.warning(
            "Unknown log level '%s'; defaulting to %s",
            requested_level,
            effective_level,
        )

    settings = CaptureSettings.from_args(args)
    backend = SoundDeviceBackend(
        logger,
        sample_rate=settings.sample_rate,
        channels=settings.channels,
        block_size=settings.block_size,
    )
    app = CaptureApp(
        settings,
        backend,
        logger=logger,
        on_capture_change=_log_capture_change,
    )
    console = CaptureConsole(app)

    loop = asyncio.get_running_loop()
    install_signal_handlers(app, loop)

    try:
        await app.start()
        await console.run()
    finally:
        await app.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
