"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True, slots=True)
class Reading:
    """A single ground-motion sample reported by one sensor."""

    sensor_id: str
    acceleration: float
    velocity: float
    displacement: float
    timestamp_ms: int

    @property
    def observed_at(self) -> datetime:
        """Sample time in UTC, truncated to whole seconds."""
        return datetime.fromtimestamp(self.timestamp_ms // 1000, tz=timezone.utc)
