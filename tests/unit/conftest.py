"""Unit test fixtures for isolated, fast test execution.

Fixtures here build the capture components against ``FakeBackend`` with
short signal timings so monitor behaviour can be observed in milliseconds.
The root conftest provides ``project_root`` and ``fake_backend``.
"""

from __future__ import annotations

import logging

import pytest

from live_capture.config import CaptureSettings
from live_capture.domain import CaptureState

FAST_INTERVAL = 0.01
FAST_LIFETIME = 0.2


@pytest.fixture
def test_logger() -> logging.Logger:
    """Create a debug-level logger for components under test."""
    logger = logging.getLogger("live_capture.tests")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def capture_state() -> CaptureState:
    """Create a fresh CaptureState instance."""
    return CaptureState()


@pytest.fixture
def fast_settings() -> CaptureSettings:
    """Settings with millisecond signal timings."""
    return CaptureSettings(
        signal_interval=FAST_INTERVAL,
        signal_lifetime=FAST_LIFETIME,
        shutdown_timeout=1.0,
    )
