"""Configuration loading + normalization helpers for the capture controller."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from live_capture.domain import (
    CAPTURE_BLOCK_SIZE,
    CAPTURE_CHANNELS,
    CAPTURE_SAMPLE_RATE,
    PREFERRED_DEVICE_HINTS,
    SIGNAL_MONITOR_LIFETIME,
    SIGNAL_POLL_INTERVAL,
    normalize_hints,
)

INTERACTION_MODES: tuple[str, ...] = ("cli",)
LOG_LEVEL_CHOICES: tuple[str, ...] = ("debug", "info", "warning", "error", "critical")


@dataclass(slots=True)
class CaptureSettings:
    """Normalized configuration derived from CLI args and config file."""

    mode: str = "cli"
    log_level: str = "info"
    log_file: Path | None = None
    console_output: bool = True
    sample_rate: int = CAPTURE_SAMPLE_RATE
    channels: int = CAPTURE_CHANNELS
    block_size: int = CAPTURE_BLOCK_SIZE
    signal_interval: float = SIGNAL_POLL_INTERVAL
    signal_lifetime: float = SIGNAL_MONITOR_LIFETIME
    preferred_hints: tuple[str, ...] = PREFERRED_DEVICE_HINTS
    auto_select_preferred: bool = True
    refresh_on_start: bool = True
    shutdown_timeout: float = 5.0

    @classmethod
    def from_args(cls, args: Any) -> "CaptureSettings":
        """Create a settings instance from an argparse namespace."""

        defaults = cls()

        log_file = getattr(args, "log_file", None)
        if log_file is not None and not isinstance(log_file, Path):
            log_file = Path(str(log_file))

        return cls(
            mode=_normalize_mode(getattr(args, "mode", defaults.mode)),
            log_level=str(getattr(args, "log_level", defaults.log_level) or defaults.log_level),
            log_file=log_file,
            console_output=bool(getattr(args, "console_output", defaults.console_output)),
            sample_rate=_positive_int(getattr(args, "sample_rate", None), defaults.sample_rate),
            channels=_positive_int(getattr(args, "channels", None), defaults.channels),
            block_size=_positive_int(getattr(args, "block_size", None), defaults.block_size),
            signal_interval=_positive_float(
                getattr(args, "signal_interval", None), defaults.signal_interval
            ),
            signal_lifetime=_positive_float(
                getattr(args, "signal_lifetime", None), defaults.signal_lifetime
            ),
            preferred_hints=normalize_hints(
                getattr(args, "preferred_hints", None) or defaults.preferred_hints
            ),
            auto_select_preferred=bool(
                getattr(args, "auto_select_preferred", defaults.auto_select_preferred)
            ),
            refresh_on_start=bool(getattr(args, "refresh_on_start", defaults.refresh_on_start)),
            shutdown_timeout=_positive_float(
                getattr(args, "shutdown_timeout", None), defaults.shutdown_timeout
            ),
        )


def read_config_file(path: Path) -> dict[str, object]:
    """Load key/value pairs from ``config.txt`` style files."""

    config: dict[str, object] = {}
    if not path.exists():
        return config

    text = path.read_text(encoding="utf-8")
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = [part.strip() for part in line.split("=", 1)]
        if not key:
            continue
        lowered = value.lower()
        if lowered in {"true", "yes", "on"}:
            config[key] = True
        elif lowered in {"false", "no", "off"}:
            config[key] = False
        else:
            try:
                if "." in value:
                    config[key] = float(value)
                else:
                    config[key] = int(value)
            except ValueError:
                config[key] = value
    return config


def _config_value(config: Mapping[str, object], key: str, fallback: Any) -> Any:
    value = config.get(key, fallback)
    if isinstance(value, str) and key.endswith("_file"):
        return Path(value)
    return value


def build_arg_parser(config: Mapping[str, object]) -> argparse.ArgumentParser:
    """Create the CLI parser with defaults sourced from the config file."""

    defaults = CaptureSettings()
    parser = argparse.ArgumentParser(
        prog="live-capture",
        description="Select an audio input, run a capture session and verify its signal",
    )

    parser.add_argument(
        "--mode",
        choices=INTERACTION_MODES,
        default=_normalize_mode(_config_value(config, "mode", defaults.mode)),
        help="Interaction mode ('cli' reads commands from stdin)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=_config_value(config, "log_level", defaults.log_level),
        help="Logging verbosity",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=_config_value(config, "log_file", defaults.log_file),
        help="Optional log file path (rotated)",
    )
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=_config_value(config, "sample_rate", defaults.sample_rate),
        help="Sample rate (Hz) for the input stream",
    )
    parser.add_argument(
        "--channels",
        type=int,
        default=_config_value(config, "channels", defaults.channels),
        help="Channels requested from the input device",
    )
    parser.add_argument(
        "--block-size",
        type=int,
        default=_config_value(config, "block_size", defaults.block_size),
        help="Frames per captured buffer",
    )
    parser.add_argument(
        "--signal-interval",
        type=float,
        default=_config_value(config, "signal_interval", defaults.signal_interval),
        help="Seconds between signal checks while capturing",
    )
    parser.add_argument(
        "--signal-lifetime",
        type=float,
        default=_config_value(config, "signal_lifetime", defaults.signal_lifetime),
        help="Seconds after capture start when signal checks stop",
    )
    parser.add_argument(
        "--preferred-hints",
        type=str,
        default=_config_value(config, "preferred_hints", ",".join(defaults.preferred_hints)),
        help="Comma-separated name fragments used to auto-detect the preferred device",
    )

    select_group = parser.add_mutually_exclusive_group()
    select_group.add_argument(
        "--auto-select",
        dest="auto_select_preferred",
        action="store_true",
        default=_config_value(config, "auto_select_preferred", defaults.auto_select_preferred),
        help="Select the detected preferred device when nothing is selected",
    )
    select_group.add_argument(
        "--no-auto-select",
        dest="auto_select_preferred",
        action="store_false",
        help="Leave the system default device selected",
    )

    refresh_group = parser.add_mutually_exclusive_group()
    refresh_group.add_argument(
        "--refresh-on-start",
        dest="refresh_on_start",
        action="store_true",
        default=_config_value(config, "refresh_on_start", defaults.refresh_on_start),
        help="List devices as soon as the controller starts",
    )
    refresh_group.add_argument(
        "--no-refresh-on-start",
        dest="refresh_on_start",
        action="store_false",
        help="Wait for an explicit refresh",
    )

    console_group = parser.add_mutually_exclusive_group()
    console_group.add_argument(
        "--console",
        dest="console_output",
        action="store_true",
        default=_config_value(config, "console_output", defaults.console_output),
        help="Enable console logging",
    )
    console_group.add_argument(
        "--no-console",
        dest="console_output",
        action="store_false",
        help="Disable console logging",
    )

    return parser


def parse_cli_args(
    argv: list[str] | None = None,
    *,
    config_path: Path,
) -> argparse.Namespace:
    """Parse CLI arguments using configuration defaults."""

    config = read_config_file(config_path)
    parser = build_arg_parser(config)
    return parser.parse_args(argv)


def _normalize_mode(value: Any) -> str:
    text = str(value or "").strip().lower()
    if text in {"headless", "console"}:
        return "cli"
    if text in INTERACTION_MODES:
        return text
    return INTERACTION_MODES[0]


def _positive_int(value: Any, fallback: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback


def _positive_float(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback
