from __future__ import annotations

from dataclasses import replace
from typing import Optional

from settings import Settings, get_settings


def load_config(
    url: Optional[str] = None,
    sensor_id: Optional[str] = None,
    fan_out: Optional[int] = None,
    interval: Optional[float] = None,
) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    settings = get_settings()
    overrides = {}
    if url:
        overrides["url"] = url.strip()
    if sensor_id:
        overrides["sensor_id"] = sensor_id.strip()
    if fan_out is not None and fan_out > 0:
        overrides["fan_out"] = fan_out
    if interval is not None and interval >= 0:
        overrides["poll_interval"] = interval
    return replace(settings, **overrides) if overrides else settings
