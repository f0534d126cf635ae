from __future__ import annotations

from typing import Optional

import typer

from cli.config import load_config
from cli.render import clear_screen, render_intro, render_legend, render_reading
from logging_config import configure_logging
from models.records import Reading
from services.alerts import AlertDispatcher, build_alert_sink
from services.dedup import PollState
from services.fetcher import Fetcher
from services.poller import PollCycle
from settings import load_environment

app = typer.Typer(
    help="Live ground-motion monitor for a single seismic sensor.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main() -> None:
    """Load .env (or .env.example) before any settings are read."""
    load_environment()


@app.command("monitor")
def monitor_command(
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="Data source URL (defaults to URL env or the Raspberry Shake endpoint).",
    ),
    sensor_id: Optional[str] = typer.Option(
        None,
        "--sensor-id",
        "-s",
        help="Sensor identifier to display (defaults to SENSOR_ID env).",
    ),
    fan_out: Optional[int] = typer.Option(
        None,
        "--fan-out",
        min=1,
        help="Concurrent fetches issued per poll cycle.",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        min=0.0,
        help="Seconds to wait between poll cycles.",
    ),
    cycles: Optional[int] = typer.Option(
        None,
        "--cycles",
        min=1,
        help="Stop after this many poll cycles instead of running forever.",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Start polling without waiting for Enter.",
    ),
) -> None:
    """Poll the data source and redraw the screen for every new reading."""
    settings = load_config(url=url, sensor_id=sensor_id, fan_out=fan_out, interval=interval)
    configure_logging(settings)

    typer.echo(render_intro())
    typer.echo(render_legend())
    if not yes:
        typer.prompt("Press Enter to start", default="", show_default=False, prompt_suffix=" ")
    clear_screen()

    fetcher = Fetcher(settings.url, timeout=settings.request_timeout)
    dispatcher = AlertDispatcher(
        build_alert_sink(),
        high_threshold=settings.sound_high_threshold,
        medium_threshold=settings.sound_medium_threshold,
    )

    def present(reading: Reading) -> None:
        output = render_reading(reading)
        clear_screen()
        typer.echo(output, nl=False)
        dispatcher.dispatch(reading)

    poller = PollCycle(
        fetcher=fetcher,
        sensor_id=settings.sensor_id,
        state=PollState(),
        on_reading=present,
        fan_out=settings.fan_out,
        interval=settings.poll_interval,
    )
    try:
        poller.run_forever(max_cycles=cycles)
    except KeyboardInterrupt:
        typer.echo("\nStopped.")
    finally:
        poller.shutdown()
        fetcher.close()


@app.command("legend")
def legend_command() -> None:
    """Print the units and color legend."""
    typer.echo(render_legend())
