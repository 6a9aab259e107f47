"""Process-level helpers shared by command-line entry points."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import Any


def install_signal_handlers(app: Any, loop: asyncio.AbstractEventLoop) -> None:
    """Register SIGINT/SIGTERM handlers that ask the application to stop."""

    def signal_handler() -> None:
        if not app.stop_requested:
            app.request_stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, signal_handler)


__all__ = ["install_signal_handlers"]
