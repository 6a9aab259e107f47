"""Line-oriented console front-end for the capture application."""

from __future__ import annotations

import asyncio
import select
import shlex
import sys
from typing import Callable, Optional, TextIO, TYPE_CHECKING

from live_capture.domain import DEFAULT_DEVICE_LABEL, CaptureSnapshot, CatalogSnapshot

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from live_capture.app import CaptureApp

# Returns a line, "" at end of input, or None when nothing arrived in time.
LineReader = Callable[[], Optional[str]]

HELP_TEXT = """\
Commands:
  devices            List input devices
  refresh            Re-scan input devices
  select <n|name>    Select device by number or exact name ('default' or 0 for system default)
  start | stop       Start or stop capture
  toggle             Start when idle, stop when capturing
  status             Show session status
  reset              Clear a failed session
  help               Show this help
  quit               Exit"""


def poll_stdin(timeout: float = 0.25) -> Optional[str]:
    """Wait up to ``timeout`` seconds for one line on stdin."""
    ready, _, _ = select.select([sys.stdin], [], [], timeout)
    if not ready:
        return None
    return sys.stdin.readline()


class CaptureConsole:
    """Read text commands and print session changes."""

    def __init__(
        self,
        app: "CaptureApp",
        *,
        reader: LineReader = poll_stdin,
        output: TextIO | None = None,
    ) -> None:
        self.app = app
        self.reader = reader
        self.output = output or sys.stdout
        self._last_capture: CaptureSnapshot | None = None

    async def run(self) -> None:
        self._write(HELP_TEXT)
        self.app.catalog.subscribe(self._on_catalog)
        self.app.state.subscribe(self._on_capture)
        while not self.app.stop_requested:
            line = await asyncio.to_thread(self.reader)
            if line is None:
                continue
            if line == "":
                break
            if not await self.execute(line):
                break
        self.app.request_stop()

    async def execute(self, line: str) -> bool:
        """Run one command line; returns False when the console should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self._write(f"Cannot parse command: {exc}")
            return True
        if not parts:
            return True

        verb, args = parts[0].lower(), parts[1:]
        if verb in {"quit", "exit", "q"}:
            return False
        if verb in {"help", "?"}:
            self._write(HELP_TEXT)
        elif verb == "devices":
            self._print_devices()
        elif verb == "refresh":
            await self.app.handle_command({"command": "refresh_devices"})
            self._print_devices()
        elif verb == "select":
            self._select(" ".join(args))
        elif verb in {"start", "stop", "toggle"}:
            await self.app.handle_command({"command": f"{verb}_capture"})
        elif verb == "reset":
            await self.app.handle_command({"command": "reset"})
        elif verb == "status":
            self._print_status()
        else:
            self._write(f"Unknown command '{verb}' (try 'help')")
        return True

    # ------------------------------------------------------------------
    # Command helpers

    def _select(self, target: str) -> None:
        devices = self.app.catalog.devices
        choice: Optional[str]
        if not target:
            self._write("Usage: select <n|name|default>")
            return
        if target.lower() == "default" or target == "0":
            choice = None
        elif target.isdigit():
            index = int(target)
            if index > len(devices):
                self._write(f"No device number {index}")
                return
            choice = devices[index - 1]
        else:
            choice = target
        if not self.app.select_device(choice):
            self._write("Selection unchanged (unknown device, or capture in progress)")

    def _print_devices(self) -> None:
        catalog = self.app.catalog
        selected = self.app.state.selected_device
        marker = "*" if selected is None else " "
        self._write(f" {marker}[0] {DEFAULT_DEVICE_LABEL}")
        for index, name in enumerate(catalog.devices, start=1):
            marker = "*" if name == selected else " "
            hint = "  (preferred)" if name == catalog.preferred_device else ""
            self._write(f" {marker}[{index}] {name}{hint}")
        if catalog.is_empty:
            self._write("No input devices found. Connect your audio interface.")
        if catalog.error_message:
            self._write(catalog.error_message)

    def _print_status(self) -> None:
        payload = self.app.status_payload()
        for key in ("status", "device_label", "status_message", "signal_message", "error_message"):
            value = payload.get(key)
            if value:
                self._write(f"{key:>15}: {value}")

    # ------------------------------------------------------------------
    # Observers

    def _on_catalog(self, snapshot: CatalogSnapshot) -> None:
        if snapshot.error_message:
            self._write(f"! {snapshot.error_message}")

    def _on_capture(self, snapshot: CaptureSnapshot) -> None:
        previous = self._last_capture
        self._last_capture = snapshot
        if previous is None:
            return
        if snapshot.status is not previous.status:
            self._write(f"-- {snapshot.status.value}")
        if snapshot.selected_device != previous.selected_device:
            self._write(f"-- device: {snapshot.selected_device or DEFAULT_DEVICE_LABEL}")
        if snapshot.status_message and snapshot.status_message != previous.status_message:
            self._write(snapshot.status_message)
        if snapshot.signal_message and snapshot.signal_message != previous.signal_message:
            self._write(snapshot.signal_message)
        if snapshot.error_message and snapshot.error_message != previous.error_message:
            self._write(f"! {snapshot.error_message}")

    def _write(self, text: str) -> None:
        print(text, file=self.output, flush=True)


__all__ = ["CaptureConsole", "HELP_TEXT", "poll_stdin"]
