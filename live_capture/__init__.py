"""Capture session controller for a live audio input."""

from __future__ import annotations

import asyncio
from importlib import metadata
from typing import Optional, Sequence

try:
    __version__ = metadata.version("live-capture")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev
    __version__ = "0.0.0"


def run(argv: Optional[Sequence[str]] = None) -> None:
    """Run the console entry point."""
    from .main_capture import main

    asyncio.run(main(list(argv) if argv is not None else None))


__all__ = ["__version__", "run"]
