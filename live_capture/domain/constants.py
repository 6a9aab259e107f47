"""Constants for the capture domain."""

PREFERRED_DEVICE_HINTS = ("karsect", "upc")

SIGNAL_POLL_INTERVAL = 1.0
SIGNAL_MONITOR_LIFETIME = 10.0

CAPTURE_SAMPLE_RATE = 44_100
CAPTURE_CHANNELS = 1
CAPTURE_BLOCK_SIZE = 2048

DEFAULT_DEVICE_LABEL = "default device"

DB_MIN = -60.0
DB_MAX = 0.0
