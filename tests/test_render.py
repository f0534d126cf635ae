from __future__ import annotations

import typer

from cli.render import CLEAR_SCREEN, clear_screen, render_intro, render_legend, render_reading
from models.records import Reading
from services.alerts import AlertDispatcher, AlertLevel
from services.dedup import PollState


def _reading(**overrides) -> Reading:
    values = dict(
        sensor_id="AM.R1B7B",
        acceleration=4000.0,
        velocity=5.0,
        displacement=1.23,
        timestamp_ms=1000,
    )
    values.update(overrides)
    return Reading(**values)


class RecordingSink:
    def __init__(self) -> None:
        self.levels = []

    def play(self, level: AlertLevel) -> None:
        self.levels.append(level)


def test_end_to_end_reading_is_admitted_rendered_and_alerted() -> None:
    reading = _reading()
    state = PollState()
    sink = RecordingSink()

    assert state.admit(reading) is True
    output = render_reading(reading)
    level = AlertDispatcher(sink).dispatch(reading)

    assert level is AlertLevel.high
    assert sink.levels == [AlertLevel.high]
    assert "Displacement: 1.23 µm\n" in output
    assert typer.style("5.00 µm/s", fg=typer.colors.BRIGHT_MAGENTA) in output
    assert typer.style("4000.00 µm/s²", fg=typer.colors.RED) in output


def test_render_layout() -> None:
    output = render_reading(_reading(timestamp_ms=1_700_000_000_999))
    lines = output.splitlines()

    assert lines[0] == ""
    assert lines[1] == "Ground Motion"
    assert lines[2] == "=" * 40
    assert lines[3] == "Data Time: 2023-11-14T22:13:20Z"
    assert lines[-1] == "=" * 40


def test_render_uses_tier_colors() -> None:
    output = render_reading(_reading(acceleration=120.0, velocity=0.1))

    assert typer.style("120.00 µm/s²", fg=typer.colors.GREEN) in output
    assert typer.style("0.10 µm/s", fg=typer.colors.BLUE) in output


def test_legend_lists_every_band() -> None:
    legend = render_legend()

    assert "Ground Motion Legend" in legend
    assert typer.style("4.0 - 12.0 µm/s", fg=typer.colors.BRIGHT_MAGENTA) in legend
    assert typer.style("60.0 - 1000.0 µm/s", fg=typer.colors.RED) in legend
    assert typer.style("350 - 3500 µm/s²", fg=typer.colors.YELLOW) in legend


def test_intro_mentions_system() -> None:
    assert "Ground Motion Monitoring System" in render_intro()


def test_clear_screen_writes_ansi_sequence(capsys) -> None:
    clear_screen()

    assert capsys.readouterr().out == CLEAR_SCREEN
