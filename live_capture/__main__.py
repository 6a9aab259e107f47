"""Allow ``python -m live_capture`` to launch the capture console."""

from __future__ import annotations

from live_capture import run

if __name__ == "__main__":
    run()
