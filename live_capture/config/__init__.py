"""Configuration helpers for the capture controller."""

from pathlib import Path

from .settings import CaptureSettings, build_arg_parser, parse_cli_args, read_config_file

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.txt"

__all__ = [
    "CaptureSettings",
    "DEFAULT_CONFIG_PATH",
    "build_arg_parser",
    "parse_cli_args",
    "read_config_file",
]
