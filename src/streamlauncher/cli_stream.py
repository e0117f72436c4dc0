"""CLI commands for the stream lifecycle.

This module provides the `streamlauncher stream` subcommand group for
scheduling a broadcast, taking it live, ending it and inspecting it.
"""

import sys
from datetime import timedelta
from pathlib import Path
from typing import Any

import typer
from rich.table import Table

from streamlauncher import context
from streamlauncher.broadcast.models import Broadcast, IngestEndpoint, Privacy, mask_secret
from streamlauncher.orchestrator import ScheduleOptions
from streamlauncher.timing.models import ResolvedTime, ScheduleWindow
from streamlauncher.ui import console, fail
from streamlauncher.utils.datetime import CLOCK_FORMAT, DISPLAY_FORMAT, SHORT_CLOCK_FORMAT
from streamlauncher.utils.errors import LauncherError
from streamlauncher.waiting.countdown import Countdown, format_remaining

app = typer.Typer(
    name="stream",
    help="Schedule, start and end YouTube broadcasts",
    no_args_is_help=True,
)
def _describe_start(start: ResolvedTime) -> str:
    if start.event is None:
        return start.timestamp.strftime(DISPLAY_FORMAT)
    return (
        f"{start.timestamp.strftime(CLOCK_FORMAT)} "
        f"({start.event.value.lower()} {start.offset_minutes:+d} min)"
    )


def _print_window(window: ScheduleWindow) -> None:
    console.print(f"Location: {window.location_name}")
    console.print(f"Sunrise:  {window.sun_times.sunrise.strftime(CLOCK_FORMAT)}")
    console.print(f"Sunset:   {window.sun_times.sunset.strftime(CLOCK_FORMAT)}")
    console.print(f"Stream start: {_describe_start(window.start)}")
    console.print(f"Stream end:   {_describe_start(window.end)}")
    console.print()


def _print_stream_info(broadcast: Broadcast, endpoint: IngestEndpoint, show_key: bool) -> None:
    key = endpoint.stream_key if show_key else mask_secret(endpoint.stream_key)

    table = Table(title="[bold]Stream Information[/bold]", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_row("Broadcast ID", broadcast.id)
    table.add_row("Title", broadcast.title)
    table.add_row("Studio", broadcast.studio_url)
    table.add_row("Watch", broadcast.watch_url)
    table.add_row("Ingest address", endpoint.ingestion_address)
    table.add_row("Stream key", key)
    table.add_row("RTMP URL", endpoint.rtmp_url if show_key else f"{endpoint.ingestion_address}/{key}")
    console.print(table)


def _make_progress_handler(show_key: bool):
    def handle_progress(step_name: str, step_data: dict[str, Any]) -> None:
        if step_name == "window_resolved":
            _print_window(step_data["window"])
        elif step_name == "start_resolved":
            console.print(f"Stream start: {_describe_start(step_data['start'])}")
        elif step_name == "spec_ready":
            console.print(f"Title: {step_data['spec'].title}\n")
        elif step_name == "broadcast_scheduled":
            console.print("[green]✓[/green] Broadcast created and bound")
            _print_stream_info(step_data["broadcast"], step_data["endpoint"], show_key)
        elif step_name == "handoff_saved":
            console.print(f"[dim]Broadcast ID saved to: {step_data['path']}[/dim]")
        elif step_name == "handoff_failed":
            console.print(f"[yellow]⚠[/yellow] Could not save broadcast ID: {step_data['error']}")
        elif step_name == "task_registered":
            console.print(
                f"[green]✓[/green] Scheduled {step_data['action']} task for: "
                f"{step_data['when'].strftime(SHORT_CLOCK_FORMAT)}"
            )
        elif step_name == "waiting":
            console.print(f"Waiting until {step_data['until'].strftime(DISPLAY_FORMAT)}...")
        elif step_name == "broadcast_selected":
            console.print(f"Broadcast ID: {step_data['broadcast_id']}")
        elif step_name == "obs_started":
            console.print(f"[green]✓[/green] OBS started ({step_data['path']})")
        elif step_name == "obs_failed":
            console.print(f"[yellow]⚠[/yellow] Error starting OBS: {step_data['error']}")
        elif step_name == "obs_warmup":
            console.print(f"Waiting {step_data['seconds']:g} seconds for OBS to start streaming...")
        elif step_name == "live":
            console.print("[green]✓[/green] Broadcast is now LIVE!")
        elif step_name == "ended":
            console.print("[green]✓[/green] Broadcast ended")

    return handle_progress


def _print_tick(remaining: timedelta) -> None:
    console.print(f"Time remaining: {format_remaining(remaining)}")


@app.command("schedule")
def schedule_command(
    ctx: typer.Context,
    title: str | None = typer.Option(
        None, "--title", help="Broadcast title (default: title template with today's date)"
    ),
    description: str | None = typer.Option(None, "--description", help="Broadcast description"),
    privacy: Privacy | None = typer.Option(None, "--privacy", help="public, private or unlisted"),
    start_time: str | None = typer.Option(
        None, "--time", help="Start time: SUNRISE, SUNSET or YYYY-MM-DDTHH:MM:SS"
    ),
    city: str | None = typer.Option(
        None, "--city", help="City for sunrise/sunset (default: detect from IP address)"
    ),
    start_offset: int | None = typer.Option(
        None, "--start-offset", help="Minutes added to a sunrise/sunset start"
    ),
    end_offset: int | None = typer.Option(
        None, "--end-offset", help="Minutes added to sunset for the end"
    ),
    wait: bool = typer.Option(
        False, "--wait", help="Stay attached: count down and go live in this process"
    ),
    show_key: bool = typer.Option(False, "--show-key", help="Print the stream key unmasked"),
) -> None:
    """Create a broadcast and schedule its start and end.

    By default the start and end are registered as OS tasks (cron or Task
    Scheduler) and the command returns. With --wait the command counts down
    and goes live itself.

    Examples:
        streamlauncher stream schedule --time SUNRISE --start-offset -30

        streamlauncher stream schedule --time 2026-10-18T07:00:00 --title "Morning"

        streamlauncher stream schedule --time SUNSET --city "Boulder" --wait
    """
    try:
        app_context = context.context_from_cli(ctx.obj)
        config = app_context.config
        options = ScheduleOptions(
            time=start_time or config.schedule.time,
            city=city if city is not None else config.schedule.city,
            start_offset=config.schedule.start_offset if start_offset is None else start_offset,
            end_offset=config.schedule.end_offset if end_offset is None else end_offset,
            title=title,
            description=config.broadcast.description if description is None else description,
            privacy=privacy or Privacy(config.broadcast.privacy),
        )

        console.print("[bold]=== Stream Scheduler ===[/bold]\n")
        orchestrator = context.build_orchestrator(
            app_context,
            interactive=True,
            countdown=Countdown(
                tick_seconds=config.timing.countdown_tick_seconds, on_tick=_print_tick
            ),
            progress_callback=_make_progress_handler(show_key),
        )

        if wait:
            orchestrator.schedule_and_wait(options)
        else:
            orchestrator.schedule(options)
            console.print("\n[bold]=== Schedule Complete ===[/bold]")
            console.print("The stream will automatically start and end at the scheduled times.")

    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except LauncherError as e:
        fail(str(e))


@app.command("start")
def start_command(
    ctx: typer.Context,
    broadcast_id: str | None = typer.Option(
        None, "--id", help="Broadcast ID (default: the last scheduled broadcast)"
    ),
    obs_path: Path | None = typer.Option(None, "--obs-path", help="Path to the OBS executable"),
    skip_launch: bool = typer.Option(False, "--skip-launch", help="Do not start OBS"),
    unattended: bool = typer.Option(
        False, "--unattended", help="Never prompt for authorization (scheduled runs)"
    ),
) -> None:
    """Start OBS and take the broadcast live."""
    try:
        app_context = context.context_from_cli(ctx.obj)
        console.print("[bold]=== Starting Stream ===[/bold]\n")
        orchestrator = context.build_orchestrator(
            app_context,
            interactive=not unattended,
            progress_callback=_make_progress_handler(show_key=False),
        )
        orchestrator.start(broadcast_id, obs_path=obs_path, skip_launch=skip_launch or None)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except LauncherError as e:
        fail(str(e))


@app.command("end")
def end_command(
    ctx: typer.Context,
    broadcast_id: str | None = typer.Option(
        None, "--id", help="Broadcast ID (default: the last scheduled broadcast)"
    ),
    unattended: bool = typer.Option(
        False, "--unattended", help="Never prompt for authorization (scheduled runs)"
    ),
) -> None:
    """End the broadcast."""
    try:
        app_context = context.context_from_cli(ctx.obj)
        console.print("[bold]=== Ending Stream ===[/bold]\n")
        orchestrator = context.build_orchestrator(
            app_context,
            interactive=not unattended,
            progress_callback=_make_progress_handler(show_key=False),
        )
        orchestrator.end(broadcast_id)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except LauncherError as e:
        fail(str(e))


@app.command("status")
def status_command(
    ctx: typer.Context,
    broadcast_id: str | None = typer.Option(
        None, "--id", help="Broadcast ID (default: the last scheduled broadcast)"
    ),
) -> None:
    """Show the remote state of the broadcast."""
    try:
        app_context = context.context_from_cli(ctx.obj)
        orchestrator = context.build_orchestrator(app_context)
        bid, state = orchestrator.status(broadcast_id)
    except LauncherError as e:
        fail(str(e))
        return

    console.print(f"Broadcast ID: {bid}")
    if state is None:
        console.print("[yellow]Broadcast not found[/yellow]")
        sys.exit(1)
    console.print(f"State: [bold]{state.value}[/bold]")


@app.command("cancel")
def cancel_command(ctx: typer.Context) -> None:
    """Remove the scheduled start and end tasks."""
    try:
        app_context = context.context_from_cli(ctx.obj)
        orchestrator = context.build_orchestrator(app_context)
        removed = orchestrator.cancel()
    except LauncherError as e:
        fail(str(e))
        return

    if not removed:
        console.print("[yellow]No scheduled tasks found[/yellow]")
        return
    for name in removed:
        console.print(f"[green]✓[/green] Removed task {name}")
