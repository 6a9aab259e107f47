"""Command-line front-end for the capture application."""

from .common import install_signal_handlers
from .console import CaptureConsole, poll_stdin

__all__ = ["CaptureConsole", "install_signal_handlers", "poll_stdin"]
