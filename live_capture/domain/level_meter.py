"""Signal level tracking for an open capture stream."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Iterable, Tuple

import numpy as np

from .constants import DB_MAX, DB_MIN


@dataclass(slots=True)
class LevelMeter:
    """Track RMS/peak dBFS for a single input stream."""

    peak_hold_time: float = 2.0
    _rms_db: float = field(init=False, default=DB_MIN)
    _peak_db: float = field(init=False, default=DB_MIN)
    _peak_timestamp: float = field(init=False, default=0.0)

    def add_samples(self, samples: Iterable[float], timestamp: float | None = None) -> None:
        array = np.asarray(samples, dtype=np.float32)
        if array.size == 0:
            return

        rms = float(np.sqrt(np.mean(np.square(array), dtype=np.float32)))
        peak = float(np.max(np.abs(array)))
        now = timestamp if timestamp is not None else time.monotonic()

        self._rms_db = self._to_db(rms)

        if peak > 0:
            peak_db = self._to_db(peak)
            if peak_db >= self._peak_db or (now - self._peak_timestamp) > self.peak_hold_time:
                self._peak_db = peak_db
                self._peak_timestamp = now
        elif (now - self._peak_timestamp) > self.peak_hold_time:
            self._peak_db = DB_MIN
            self._peak_timestamp = now

    def get_db_levels(self) -> Tuple[float, float]:
        return self._rms_db, self._peak_db

    def reset(self) -> None:
        self._rms_db = DB_MIN
        self._peak_db = DB_MIN
        self._peak_timestamp = 0.0

    @staticmethod
    def _to_db(value: float) -> float:
        if value <= 0:
            return DB_MIN
        return max(DB_MIN, min(DB_MAX, 20.0 * math.log10(value)))


__all__ = ["LevelMeter"]
