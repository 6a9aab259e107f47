"""Unit tests for the capture domain layer.

Covers:
- Preferred device detection (normalize_hints, find_preferred_device)
- CaptureState transitions, selection guard and generation fencing
- Failure messages (BackendError, CaptureError)
- LevelMeter dBFS tracking
"""

from __future__ import annotations

import numpy as np
import pytest

from live_capture.domain import (
    DB_MAX,
    DB_MIN,
    PREFERRED_DEVICE_HINTS,
    BackendError,
    CaptureSnapshot,
    CaptureState,
    CaptureStatus,
    DeviceNotFound,
    EnumerationFailed,
    LevelMeter,
    SignalCheckFailed,
    StartFailed,
    StopFailed,
    find_preferred_device,
    normalize_hints,
)


# =============================================================================
# Preferred Device Detection
# =============================================================================

class TestPreferredDevice:
    """Tests for hint normalization and preferred device lookup."""

    def test_default_hints(self):
        assert normalize_hints(None) == PREFERRED_DEVICE_HINTS
        assert PREFERRED_DEVICE_HINTS == ("karsect", "upc")

    def test_normalize_comma_string(self):
        assert normalize_hints(" Foo, BAR ,,baz") == ("foo", "bar", "baz")

    def test_normalize_iterable_drops_blanks(self):
        assert normalize_hints(["A", "", "  ", "b"]) == ("a", "b")

    def test_case_insensitive_match(self):
        devices = ["Built-in Microphone", "Karsect UPC Audio"]
        assert find_preferred_device(devices, PREFERRED_DEVICE_HINTS) == "Karsect UPC Audio"

    def test_first_matching_device_in_list_order_wins(self):
        devices = ["Mic", "UPC interface", "KARSECT box"]
        assert find_preferred_device(devices, PREFERRED_DEVICE_HINTS) == "UPC interface"

    def test_substring_anywhere_in_name(self):
        assert find_preferred_device(["usb-upcore-2"], ["upc"]) == "usb-upcore-2"

    def test_no_match(self):
        assert find_preferred_device(["Mic", "Line In"], PREFERRED_DEVICE_HINTS) is None

    def test_empty_list(self):
        assert find_preferred_device([], PREFERRED_DEVICE_HINTS) is None

    def test_empty_hints_never_match(self):
        assert find_preferred_device(["Mic"], []) is None


# =============================================================================
# CaptureState
# =============================================================================

class TestCaptureState:
    """Tests for CaptureState."""

    def test_initial_state(self, capture_state):
        assert capture_state.status is CaptureStatus.IDLE
        assert capture_state.selected_device is None
        assert capture_state.generation == 0
        assert capture_state.device_label == "default device"

    def test_subscribe_receives_snapshot_immediately(self, capture_state):
        received = []
        capture_state.subscribe(received.append)
        assert len(received) == 1
        assert isinstance(received[0], CaptureSnapshot)
        assert received[0].status is CaptureStatus.IDLE

    def test_unsubscribe_stops_notifications(self, capture_state):
        received = []
        capture_state.subscribe(received.append)
        capture_state.unsubscribe(received.append)
        capture_state.set_status(CaptureStatus.STARTING)
        assert len(received) == 1

    def test_set_status_notifies_once_per_change(self, capture_state):
        received = []
        capture_state.subscribe(received.append)
        capture_state.set_status(CaptureStatus.STARTING)
        capture_state.set_status(CaptureStatus.STARTING)
        assert [snap.status for snap in received] == [CaptureStatus.IDLE, CaptureStatus.STARTING]

    def test_failing_observer_does_not_break_others(self, capture_state):
        received = []

        def broken(_snapshot):
            raise RuntimeError("boom")

        capture_state.subscribe(lambda snap: None)
        capture_state._observers.insert(0, broken)
        capture_state.subscribe(received.append)
        capture_state.set_status(CaptureStatus.ACTIVE)
        assert received[-1].status is CaptureStatus.ACTIVE

    def test_selection_allowed_while_idle(self, capture_state):
        assert capture_state.set_selected_device("Mic") is True
        assert capture_state.selected_device == "Mic"
        assert capture_state.device_label == "Mic"
        assert capture_state.set_selected_device(None) is True
        assert capture_state.selected_device is None

    @pytest.mark.parametrize(
        "status",
        [CaptureStatus.STARTING, CaptureStatus.ACTIVE, CaptureStatus.STOPPING, CaptureStatus.FAILED],
    )
    def test_selection_refused_unless_idle(self, capture_state, status):
        capture_state.set_selected_device("Mic")
        capture_state.set_status(status)
        assert capture_state.set_selected_device("Other") is False
        assert capture_state.selected_device == "Mic"

    def test_signal_message_fenced_by_generation(self, capture_state):
        generation = capture_state.next_generation()
        assert capture_state.apply_signal_message(generation, "ok") is True
        assert capture_state.signal_message == "ok"

        capture_state.next_generation()
        assert capture_state.apply_signal_message(generation, "late") is False
        assert capture_state.signal_message == "ok"

    def test_clear_signal_and_error(self, capture_state):
        generation = capture_state.next_generation()
        capture_state.apply_signal_message(generation, "ok")
        capture_state.set_error("bad")
        capture_state.clear_signal_message()
        capture_state.clear_error()
        assert capture_state.signal_message is None
        assert capture_state.error_message is None

    def test_status_payload(self, capture_state):
        capture_state.set_selected_device("Mic")
        capture_state.set_status(CaptureStatus.ACTIVE)
        payload = capture_state.status_payload()
        assert payload["status"] == "active"
        assert payload["capturing"] is True
        assert payload["selected_device"] == "Mic"
        assert payload["device_label"] == "Mic"
        assert payload["generation"] == 0

    def test_capturing_flag_per_status(self):
        assert CaptureStatus.ACTIVE.capturing
        assert CaptureStatus.STOPPING.capturing
        assert not CaptureStatus.IDLE.capturing
        assert not CaptureStatus.STARTING.capturing
        assert not CaptureStatus.FAILED.capturing


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Tests for backend and controller failure messages."""

    def test_backend_error_message_defaults_to_class_name(self):
        assert BackendError().message == "BackendError"
        assert DeviceNotFound("Device 'x' not found").message == "Device 'x' not found"

    @pytest.mark.parametrize(
        "error_cls, expected",
        [
            (EnumerationFailed, "Failed to list devices: busy"),
            (StartFailed, "Failed to start capture: busy"),
            (StopFailed, "Failed to stop capture: busy"),
            (SignalCheckFailed, "Error: busy"),
        ],
    )
    def test_prefixed_messages(self, error_cls, expected):
        error = error_cls("busy")
        assert str(error) == expected
        assert error.message == expected
        assert error.detail == "busy"

    def test_from_backend_error_uses_its_message(self):
        failure = StartFailed.from_exception(DeviceNotFound("Device 'Mic' not found"))
        assert failure.message == "Failed to start capture: Device 'Mic' not found"

    def test_from_plain_exception(self):
        assert StopFailed.from_exception(RuntimeError("io")).detail == "io"
        assert StopFailed.from_exception(RuntimeError()).detail == "RuntimeError"


# =============================================================================
# LevelMeter
# =============================================================================

class TestLevelMeter:
    """Tests for LevelMeter."""

    def test_initial_levels(self):
        assert LevelMeter().get_db_levels() == (DB_MIN, DB_MIN)

    def test_full_scale_signal(self):
        meter = LevelMeter()
        meter.add_samples(np.ones(512, dtype=np.float32), timestamp=1.0)
        rms_db, peak_db = meter.get_db_levels()
        assert rms_db == pytest.approx(DB_MAX, abs=0.01)
        assert peak_db == pytest.approx(DB_MAX, abs=0.01)

    def test_half_scale_signal(self):
        meter = LevelMeter()
        meter.add_samples(np.full(512, 0.5, dtype=np.float32), timestamp=1.0)
        rms_db, _ = meter.get_db_levels()
        assert rms_db == pytest.approx(-6.02, abs=0.05)

    def test_silence_clamps_to_floor(self):
        meter = LevelMeter()
        meter.add_samples(np.zeros(256, dtype=np.float32), timestamp=1.0)
        assert meter.get_db_levels()[0] == DB_MIN

    def test_empty_block_ignored(self):
        meter = LevelMeter()
        meter.add_samples(np.ones(16, dtype=np.float32), timestamp=1.0)
        meter.add_samples(np.array([], dtype=np.float32), timestamp=2.0)
        assert meter.get_db_levels()[0] == pytest.approx(DB_MAX, abs=0.01)

    def test_peak_hold_then_release(self):
        meter = LevelMeter(peak_hold_time=1.0)
        meter.add_samples(np.ones(16, dtype=np.float32), timestamp=0.0)
        meter.add_samples(np.full(16, 0.1, dtype=np.float32), timestamp=0.5)
        assert meter.get_db_levels()[1] == pytest.approx(DB_MAX, abs=0.01)
        meter.add_samples(np.full(16, 0.1, dtype=np.float32), timestamp=2.0)
        assert meter.get_db_levels()[1] == pytest.approx(-20.0, abs=0.05)

    def test_reset(self):
        meter = LevelMeter()
        meter.add_samples(np.ones(16, dtype=np.float32), timestamp=1.0)
        meter.reset()
        assert meter.get_db_levels() == (DB_MIN, DB_MIN)
