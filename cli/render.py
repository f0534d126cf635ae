from __future__ import annotations

from typing import Iterable

import typer

from models.records import Reading
from services.classifier import ThresholdTable, classify

RULE = "=" * 40
THIN_RULE = "-" * 40
CLEAR_SCREEN = "\033[H\033[J"

ACCELERATION_COLORS: ThresholdTable[str] = ThresholdTable.from_pairs(
    [
        (350.0, typer.colors.GREEN),
        (3500.0, typer.colors.YELLOW),
        (10000.0, typer.colors.RED),
    ],
    ceiling=typer.colors.RED,
)

VELOCITY_COLORS: ThresholdTable[str] = ThresholdTable.from_pairs(
    [
        (0.2, typer.colors.BLUE),
        (0.4, typer.colors.CYAN),
        (0.8, typer.colors.BRIGHT_GREEN),
        (1.5, typer.colors.BRIGHT_YELLOW),
        (4.0, typer.colors.YELLOW),
        (12.0, typer.colors.BRIGHT_MAGENTA),
        (30.0, typer.colors.MAGENTA),
        (60.0, typer.colors.BRIGHT_RED),
        (1000.0, typer.colors.RED),
    ],
    ceiling=typer.colors.RED,
)

INTRO = f"""
Welcome to the Ground Motion Monitoring System!
{RULE}
This tool fetches data from the sensor and displays
ground motion information in real time.
{RULE}
"""

_PARAMETER_LEGEND = f"""
Ground Motion Legend
{RULE}
Parameter       Description                              Units                Desired Range
{THIN_RULE}
Acceleration    Peak ground acceleration in last 10s    micrometers/sec²     Noise level < 0.5
Velocity        Peak ground velocity in last 10s        micrometers/sec      Noise level < 0.1
Displacement    Peak ground displacement in last 10s    micrometers          Noise level ~0
{RULE}
"""


def clear_screen() -> None:
    typer.echo(CLEAR_SCREEN, nl=False, color=True)


def render_intro() -> str:
    return INTRO


def _color_legend(title: str, table: ThresholdTable[str], unit: str, precision: int) -> Iterable[str]:
    yield ""
    yield title
    yield THIN_RULE
    lower = 0.0
    for tier in table:
        label = f"{lower:.{precision}f} - {tier.upper_bound:.{precision}f} {unit}"
        yield typer.style(label, fg=tier.severity)
        lower = tier.upper_bound
    yield THIN_RULE


def render_legend() -> str:
    """Units table followed by the velocity and acceleration color bands."""
    lines = [_PARAMETER_LEGEND]
    lines.extend(_color_legend("Velocity Color Legend", VELOCITY_COLORS, "µm/s", 1))
    lines.extend(_color_legend("Acceleration Color Legend", ACCELERATION_COLORS, "µm/s²", 0))
    return "\n".join(lines) + "\n"


def render_reading(reading: Reading) -> str:
    """Format one admitted reading for a freshly cleared screen."""
    observed = reading.observed_at.strftime("%Y-%m-%dT%H:%M:%SZ")
    acceleration = typer.style(
        f"{reading.acceleration:.2f} µm/s²",
        fg=classify(reading.acceleration, ACCELERATION_COLORS),
    )
    velocity = typer.style(
        f"{reading.velocity:.2f} µm/s",
        fg=classify(reading.velocity, VELOCITY_COLORS),
    )
    return (
        "\r\nGround Motion\n"
        f"{RULE}\n"
        f"Data Time: {observed}\n"
        f"Acceleration: {acceleration}\n"
        f"Velocity: {velocity}\n"
        f"Displacement: {reading.displacement:.2f} µm\n"
        f"{RULE}\n"
    )
