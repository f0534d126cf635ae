"""Audible alerts keyed on peak ground acceleration."""

from __future__ import annotations

import logging
import platform
import subprocess
import sys
from enum import Enum
from typing import Mapping, Optional, Protocol, Sequence, TextIO

from models.records import Reading
from services.classifier import ThresholdTable, classify
from services.errors import SoundPlaybackError

logger = logging.getLogger(__name__)


class AlertLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class AlertSink(Protocol):
    def play(self, level: AlertLevel) -> None:
        ...


class SilentAlertSink:
    """Used on platforms without a known sound command."""

    def play(self, level: AlertLevel) -> None:
        return None


class BellAlertSink:
    """Rings the terminal bell for medium and high alerts."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def play(self, level: AlertLevel) -> None:
        if level is AlertLevel.low:
            return
        stream = self._stream or sys.stdout
        try:
            stream.write("\a")
            stream.flush()
        except (OSError, ValueError) as exc:
            raise SoundPlaybackError(f"could not ring bell: {exc}") from exc


class CommandAlertSink:
    """Runs a platform sound command for each configured level."""

    def __init__(self, commands: Mapping[AlertLevel, Sequence[str]]) -> None:
        self.commands = dict(commands)

    def play(self, level: AlertLevel) -> None:
        command = self.commands.get(level)
        if not command:
            return
        try:
            subprocess.run(list(command), check=True, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise SoundPlaybackError(f"{command[0]} failed: {exc}") from exc


# No platform plays a sound for low readings.
SOUND_COMMANDS: Mapping[str, Mapping[AlertLevel, Sequence[str]]] = {
    "darwin": {
        AlertLevel.high: ("afplay", "/System/Library/Sounds/Hero.aiff"),
        AlertLevel.medium: ("afplay", "/System/Library/Sounds/Submarine.aiff"),
    },
    "linux": {
        AlertLevel.high: ("paplay", "/usr/share/sounds/freedesktop/stereo/complete.oga"),
        AlertLevel.medium: ("paplay", "/usr/share/sounds/freedesktop/stereo/message.oga"),
    },
}


def build_alert_sink(system: Optional[str] = None) -> AlertSink:
    """Pick the sound strategy for the host (or the named) platform."""
    name = (system or platform.system()).lower()
    if name == "windows":
        return BellAlertSink()
    commands = SOUND_COMMANDS.get(name)
    if commands is None:
        logger.warning("No alert sound configured for platform %s", name)
        return SilentAlertSink()
    return CommandAlertSink(commands)


def sound_table(high_threshold: float, medium_threshold: float) -> ThresholdTable[AlertLevel]:
    # A medium threshold above the high one leaves the medium band empty.
    medium_bound = min(medium_threshold, high_threshold)
    return ThresholdTable.from_pairs(
        [(medium_bound, AlertLevel.low), (high_threshold, AlertLevel.medium)],
        ceiling=AlertLevel.high,
    )


class AlertDispatcher:
    """Turns an admitted reading into at most one alert sound."""

    def __init__(
        self,
        sink: AlertSink,
        high_threshold: float = 3500.0,
        medium_threshold: float = 350.0,
    ) -> None:
        self.sink = sink
        self.table = sound_table(high_threshold, medium_threshold)

    def level_for(self, acceleration: float) -> AlertLevel:
        return classify(acceleration, self.table)

    def dispatch(self, reading: Reading) -> AlertLevel:
        level = self.level_for(reading.acceleration)
        try:
            self.sink.play(level)
        except (SoundPlaybackError, OSError) as exc:
            logger.error(
                "Error playing sound: %s",
                exc,
                extra={"level": level.value, "sensor_id": reading.sensor_id},
            )
        return level
