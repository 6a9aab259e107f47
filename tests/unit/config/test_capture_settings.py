"""Unit tests for configuration loading and CLI parsing."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

import pytest

from live_capture.config import (
    DEFAULT_CONFIG_PATH,
    CaptureSettings,
    build_arg_parser,
    parse_cli_args,
    read_config_file,
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a temporary config file for testing."""
    config_path = tmp_path / "config.txt"
    config_path.write_text("""
# capture configuration
log_level = debug
log_file = logs/capture.log
sample_rate = 48000
signal_interval = 0.5
preferred_hints = Scarlett, Focusrite
auto_select_preferred = no
console_output = off
not a key value line
""")
    return config_path


class TestReadConfigFile:
    """Tests for read_config_file()."""

    def test_missing_file(self, tmp_path):
        assert read_config_file(tmp_path / "absent.txt") == {}

    def test_value_coercion(self, config_file):
        config = read_config_file(config_file)
        assert config["log_level"] == "debug"
        assert config["sample_rate"] == 48000
        assert config["signal_interval"] == 0.5
        assert config["auto_select_preferred"] is False
        assert config["console_output"] is False
        assert config["preferred_hints"] == "Scarlett, Focusrite"
        assert "not a key value line" not in config

    def test_packaged_defaults(self):
        config = read_config_file(DEFAULT_CONFIG_PATH)
        assert config["preferred_hints"] == "karsect,upc"
        assert config["sample_rate"] == 44100
        assert config["block_size"] == 2048
        assert config["signal_interval"] == 1.0
        assert config["signal_lifetime"] == 10.0


class TestArgParser:
    """Tests for build_arg_parser() and parse_cli_args()."""

    def test_defaults_come_from_config(self, config_file):
        args = parse_cli_args([], config_path=config_file)
        assert args.log_level == "debug"
        assert args.log_file == Path("logs/capture.log")
        assert args.sample_rate == 48000
        assert args.auto_select_preferred is False
        assert args.console_output is False

    def test_cli_overrides_config(self, config_file):
        args = parse_cli_args(
            ["--sample-rate", "22050", "--auto-select", "--console", "--signal-lifetime", "3"],
            config_path=config_file,
        )
        assert args.sample_rate == 22050
        assert args.auto_select_preferred is True
        assert args.console_output is True
        assert args.signal_lifetime == 3.0

    def test_builtin_defaults_without_config(self):
        args = build_arg_parser({}).parse_args([])
        assert args.mode == "cli"
        assert args.preferred_hints == "karsect,upc"
        assert args.refresh_on_start is True
        assert args.log_file is None

    def test_mutually_exclusive_flags(self):
        parser = build_arg_parser({})
        with pytest.raises(SystemExit):
            parser.parse_args(["--auto-select", "--no-auto-select"])


class TestCaptureSettings:
    """Tests for CaptureSettings.from_args()."""

    def test_defaults(self):
        settings = CaptureSettings()
        assert settings.sample_rate == 44100
        assert settings.channels == 1
        assert settings.block_size == 2048
        assert settings.signal_interval == 1.0
        assert settings.signal_lifetime == 10.0
        assert settings.preferred_hints == ("karsect", "upc")

    def test_from_parsed_args(self, config_file):
        settings = CaptureSettings.from_args(parse_cli_args([], config_path=config_file))
        assert settings.log_level == "debug"
        assert settings.log_file == Path("logs/capture.log")
        assert settings.sample_rate == 48000
        assert settings.signal_interval == 0.5
        assert settings.preferred_hints == ("scarlett", "focusrite")
        assert settings.auto_select_preferred is False

    def test_from_sparse_namespace(self):
        settings = CaptureSettings.from_args(Namespace(log_file="out.log"))
        assert settings.log_file == Path("out.log")
        assert settings.sample_rate == 44100
        assert settings.preferred_hints == ("karsect", "upc")

    @pytest.mark.parametrize("value", [0, -5, "abc", None])
    def test_invalid_numbers_fall_back(self, value):
        settings = CaptureSettings.from_args(
            Namespace(sample_rate=value, signal_interval=value, signal_lifetime=value)
        )
        assert settings.sample_rate == 44100
        assert settings.signal_interval == 1.0
        assert settings.signal_lifetime == 10.0

    @pytest.mark.parametrize("mode, expected", [("CLI", "cli"), ("headless", "cli"), ("gui", "cli")])
    def test_mode_normalization(self, mode, expected):
        assert CaptureSettings.from_args(Namespace(mode=mode)).mode == expected
