from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_URL = "https://api.raspberryshake.org/query/objects.json"
DEFAULT_LOG_FILE = "sensor.log"
DEFAULT_SENSOR_ID = "AM.R1B7B"
DEFAULT_SOUND_HIGH_THRESHOLD = 3500.0
DEFAULT_SOUND_MEDIUM_THRESHOLD = 350.0
DEFAULT_FAN_OUT = 5
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_REQUEST_TIMEOUT = 10.0

_URL_ENV = "URL"
_LOG_FILE_ENV = "LOG_FILE"
_SENSOR_ID_ENV = "SENSOR_ID"
_SOUND_HIGH_ENV = "SOUND_HIGH_THRESHOLD"
_SOUND_MEDIUM_ENV = "SOUND_MEDIUM_THRESHOLD"
_FAN_OUT_ENV = "FAN_OUT"
_POLL_INTERVAL_ENV = "POLL_INTERVAL"
_REQUEST_TIMEOUT_ENV = "REQUEST_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_ENV_FILES = (".env", ".env.example")


@dataclass(frozen=True)
class Settings:
    url: str
    log_file: str
    sensor_id: str
    sound_high_threshold: float
    sound_medium_threshold: float
    fan_out: int
    poll_interval: float
    request_timeout: float
    log_level: str


def load_environment(directory: Optional[Path] = None) -> Optional[Path]:
    """Load the first env file found; variables already set in the process win."""
    base = directory or Path.cwd()
    for name in _ENV_FILES:
        candidate = base / name
        if candidate.is_file():
            load_dotenv(candidate, override=False)
            return candidate
    return None


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return float(candidate)
    except ValueError:
        return default


def _read_non_negative_float_env(name: str, default: float) -> float:
    parsed = _read_float_env(name, default)
    return parsed if parsed >= 0 else default


def _read_positive_float_env(name: str, default: float) -> float:
    parsed = _read_float_env(name, default)
    return parsed if parsed > 0 else default


def _read_fan_out(default: int) -> int:
    value = os.getenv(_FAN_OUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    level = candidate.upper()
    if not isinstance(logging.getLevelName(level), int):
        return default
    return level


@lru_cache
def get_settings() -> Settings:
    return Settings(
        url=_read_str_env(_URL_ENV, DEFAULT_URL),
        log_file=_read_str_env(_LOG_FILE_ENV, DEFAULT_LOG_FILE),
        sensor_id=_read_str_env(_SENSOR_ID_ENV, DEFAULT_SENSOR_ID),
        sound_high_threshold=_read_float_env(_SOUND_HIGH_ENV, DEFAULT_SOUND_HIGH_THRESHOLD),
        sound_medium_threshold=_read_float_env(_SOUND_MEDIUM_ENV, DEFAULT_SOUND_MEDIUM_THRESHOLD),
        fan_out=_read_fan_out(DEFAULT_FAN_OUT),
        poll_interval=_read_non_negative_float_env(_POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL),
        request_timeout=_read_positive_float_env(_REQUEST_TIMEOUT_ENV, DEFAULT_REQUEST_TIMEOUT),
        log_level=_read_log_level("WARNING"),
    )
