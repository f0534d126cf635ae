"""Process-wide guard that admits only strictly newer readings."""

from __future__ import annotations

from threading import Lock

from models.records import Reading


class PollState:
    """Holds the timestamp of the last displayed reading.

    The stored value only moves forward. Each instance owns its lock, so
    separate monitors (and tests) never share state.
    """

    def __init__(self, last_timestamp_ms: int = 0) -> None:
        self._last_timestamp_ms = last_timestamp_ms
        self._lock = Lock()

    @property
    def last_timestamp_ms(self) -> int:
        with self._lock:
            return self._last_timestamp_ms

    def admit(self, reading: Reading) -> bool:
        with self._lock:
            if reading.timestamp_ms <= self._last_timestamp_ms:
                return False
            self._last_timestamp_ms = reading.timestamp_ms
            return True
