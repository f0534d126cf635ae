"""Sensor lookup within a parsed envelope."""

from __future__ import annotations

from typing import Optional

from models.records import Reading
from models.schemas import ResponseEnvelope


def select_reading(envelope: ResponseEnvelope, sensor_id: str) -> Optional[Reading]:
    """Return the first reading whose id equals ``sensor_id`` exactly."""
    for item in envelope.items:
        if item.id == sensor_id:
            return item.to_reading()
    return None
