"""CLI entry point for streamlauncher."""

import sys
import time
from enum import Enum
from pathlib import Path

import typer
from rich.table import Table

from streamlauncher import context
from streamlauncher.cli_stream import app as stream_app
from streamlauncher.config.logging import setup_logging
from streamlauncher.config.manager import ConfigManager, list_keys
from streamlauncher.timing.models import SunEvent
from streamlauncher.ui import console, err_console, fail
from streamlauncher.utils.datetime import CLOCK_FORMAT, LOCAL_TIME_FORMAT, SHORT_CLOCK_FORMAT
from streamlauncher.utils.errors import ConfigError, LauncherError
from streamlauncher.weather import WeatherOverlay, write_text

app = typer.Typer(
    name="streamlauncher",
    help="Schedule and launch YouTube live streams from OBS",
    no_args_is_help=True,
)
app.add_typer(stream_app, name="stream")

config_app = typer.Typer(
    name="config",
    help="Manage streamlauncher configuration",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

class OutputFormat(str, Enum):
    HUMAN = "human"
    DATETIME = "datetime"
    TIME = "time"


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
    config_dir: Path | None = typer.Option(
        None, "--config-dir", help="Use a custom configuration directory"
    ),
) -> None:
    """Stream Launcher - schedule YouTube broadcasts and start OBS at the right time."""
    # Initialize logging before any command runs
    setup_logging(verbose=verbose, log_file=log_file)
    ctx.obj = {"config_dir": config_dir, "verbose": verbose, "log_file": log_file}


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from streamlauncher import __version__

    console.print(f"[bold cyan]Stream Launcher[/bold cyan] v{__version__}")


@app.command("auth")
def auth_command(ctx: typer.Context) -> None:
    """Authorize access to your YouTube channel.

    Opens a browser for the OAuth consent screen and caches the token next
    to credentials.json, so scheduled runs can go live unattended.
    """
    try:
        app_context = context.context_from_cli(ctx.obj)
        context.build_platform(app_context, interactive=True)
        credentials_dir = app_context.manager.credentials_dir(app_context.config)
        console.print(f"[green]✓[/green] Authorized (token cached in {credentials_dir})")
    except LauncherError as e:
        fail(str(e))


def _sun_command(
    ctx: typer.Context,
    event: SunEvent,
    city: str | None,
    offset: int,
    output: OutputFormat,
) -> None:
    try:
        app_context = context.context_from_cli(ctx.obj)
        resolver = context.build_resolver(app_context.config)
        location, sun_times = resolver.lookup(city)
        result = resolver.resolve(event.value, city, offset)
    except LauncherError as e:
        fail(str(e))
        return

    if output is OutputFormat.DATETIME:
        typer.echo(result.timestamp.strftime(LOCAL_TIME_FORMAT))
    elif output is OutputFormat.TIME:
        typer.echo(result.timestamp.strftime(SHORT_CLOCK_FORMAT))
    else:
        label = event.value.capitalize() + ":"
        console.print(f"Location: {location.name}")
        console.print(f"{label:<9} {sun_times.get(event).strftime(CLOCK_FORMAT)}")
        if offset != 0:
            console.print(f"Offset:   {offset:+d} minutes")
            console.print(f"Result:   {result.timestamp.strftime(CLOCK_FORMAT)}")


@app.command("sunrise")
def sunrise_command(
    ctx: typer.Context,
    city: str | None = typer.Option(
        None, "--city", help="City name (default: detect from IP address)"
    ),
    offset: int = typer.Option(0, "--offset", help="Offset in minutes (e.g. -30, +15)"),
    output: OutputFormat = typer.Option(
        OutputFormat.HUMAN, "--format", help="Output format: human, datetime or time (HH:MM)"
    ),
) -> None:
    """Show today's sunrise for a location.

    Examples:
        streamlauncher sunrise --city "Denver"

        streamlauncher sunrise --offset -30 --format time
    """
    _sun_command(ctx, SunEvent.SUNRISE, city, offset, output)


@app.command("sunset")
def sunset_command(
    ctx: typer.Context,
    city: str | None = typer.Option(
        None, "--city", help="City name (default: detect from IP address)"
    ),
    offset: int = typer.Option(0, "--offset", help="Offset in minutes (e.g. -30, +15)"),
    output: OutputFormat = typer.Option(
        OutputFormat.HUMAN, "--format", help="Output format: human, datetime or time (HH:MM)"
    ),
) -> None:
    """Show today's sunset for a location."""
    _sun_command(ctx, SunEvent.SUNSET, city, offset, output)


@app.command("weather")
def weather_command(
    ctx: typer.Context,
    wind_file: Path | None = typer.Option(
        None, "--wind-file", help="Write the wind text to this file (OBS text source)"
    ),
    datetime_file: Path | None = typer.Option(
        None, "--datetime-file", help="Write the date/time text to this file"
    ),
    watch: bool = typer.Option(
        False, "--watch", help="Keep refreshing every update interval"
    ),
) -> None:
    """Show the latest weather-station reading for the stream overlay.

    Examples:
        streamlauncher weather

        streamlauncher weather --wind-file wind.txt --datetime-file time.txt --watch
    """
    try:
        app_context = context.context_from_cli(ctx.obj)
    except LauncherError as e:
        fail(str(e))
        return

    overlay = WeatherOverlay(app_context.config.weather)
    interval = app_context.config.weather.update_interval_seconds

    while True:
        try:
            wind_text, datetime_text = overlay.render()
        except LauncherError as e:
            if not watch:
                fail(str(e))
            err_console.print(f"[red]✗[/red] Error: {e}")
            wind_text = datetime_text = f"Error: {e}"

        if wind_file is not None:
            write_text(wind_file, wind_text)
        if datetime_file is not None:
            write_text(datetime_file, datetime_text)
        console.print(f"Wind: {wind_text}")
        console.print(f"Time: {datetime_text}")

        if not watch:
            return
        try:
            time.sleep(interval)
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopped[/yellow]")
            return


@app.command("update")
def update_command(ctx: typer.Context) -> None:
    """Update streamlauncher to the latest release."""
    from streamlauncher import __version__
    from streamlauncher.updater import Updater

    try:
        app_context = context.context_from_cli(ctx.obj)
        updater = Updater(__version__, app_context.config.update)
        console.print("Checking for updates...")
        release = updater.get_latest_release()
        if updater.is_current(release):
            console.print(f"[green]✓[/green] Already up to date (v{__version__})")
            return
        console.print(f"Updating v{__version__} → {release.tag_name}")
        updater.apply(release)
        console.print(f"[green]✓[/green] Updated to {release.tag_name}")
    except LauncherError as e:
        fail(str(e))


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Display current configuration."""
    try:
        app_context = context.context_from_cli(ctx.obj)
    except LauncherError as e:
        fail(str(e))
        return

    manager = app_context.manager
    config = app_context.config

    console.print("\n[bold]Stream Launcher Configuration[/bold]\n")

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Config file", str(manager.config_file))
    table.add_row("Credentials", str(manager.credentials_dir(config)))
    table.add_row("Broadcast ID file", str(manager.handoff_path(config)))
    table.add_row("", "")

    data = config.model_dump(mode="json")
    for key in list_keys(config):
        value = data
        for part in key.split("."):
            value = value[part]
        table.add_row(key, "-" if value is None else str(value))

    console.print(table)


@config_app.command("set", context_settings={"ignore_unknown_options": True})
def config_set(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Dotted config key, e.g. schedule.city"),
    value: str = typer.Argument(..., help="New value (parsed as YAML)"),
) -> None:
    """Set a configuration value.

    Examples:
        streamlauncher config set schedule.city "Boulder, CO"

        streamlauncher config set timing.obs_warmup_seconds 45

        streamlauncher config set schedule.start_offset -45
    """
    manager = ConfigManager((ctx.obj or {}).get("config_dir"))
    try:
        manager.set_value(key, value)
    except ConfigError as e:
        err_console.print(f"[red]✗[/red] {e}")
        if str(e).startswith("Unknown config key"):
            err_console.print("\nAvailable keys:")
            for name in list_keys(manager.load_config()):
                err_console.print(f"  • {name}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Set [cyan]{key}[/cyan] = [yellow]{value}[/yellow]")


@config_app.command("path")
def config_path(ctx: typer.Context) -> None:
    """Print the configuration file path."""
    manager = ConfigManager((ctx.obj or {}).get("config_dir"))
    typer.echo(str(manager.config_file))


if __name__ == "__main__":
    app()
