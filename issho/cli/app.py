"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.events_client import EventsApiClient
from ..adapters.file_source import FileIntervalSource
from ..config import AppConfig
from ..domain.exceptions import IsshoError
from ..domain.formatting import (
    coverage_counts,
    format_duration,
    format_hour_label,
    format_instant,
    format_range,
)
from ..domain.metrics_calculator import MetricsCalculator
from ..domain.models import AvailabilityMetrics
from ..logging_config import configure_logging
from ..services.availability_service import AvailabilityService, IntervalSourceProtocol

app = typer.Typer(
    name="issho",
    help="Find when a group overlaps best from everyone's marked availability",
    add_completion=False
)

console = Console()
logger = logging.getLogger(__name__)


def _parse_day(value: str, tz: str, option: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).start_of("day")
    except ValueError as e:
        console.print(f"[red]Could not parse {option} date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _build_source(
    *,
    config: AppConfig,
    file: Optional[Path],
    calendar: Optional[str],
    pin: Optional[str],
) -> IntervalSourceProtocol:
    """Pick the interval source from the command line options."""
    if file and calendar:
        console.print("[red]Use either --file or --calendar, not both.[/red]")
        raise typer.Exit(1)

    if file:
        return FileIntervalSource(path=file, timezone=config.timezone)

    if calendar:
        if not pin:
            console.print("[red]--pin is required when reading from --calendar.[/red]")
            raise typer.Exit(1)
        return EventsApiClient(
            base_url=config.api.base_url,
            calendar_id=calendar,
            pin=pin,
            timeout=config.api.timeout_seconds,
            timezone=config.timezone,
        )

    console.print("[red]Provide an events source with --file or --calendar.[/red]")
    raise typer.Exit(1)


def _render_empty_state() -> None:
    console.print(Panel.fit(
        "Add events to see availability metrics.",
        title="Availability Overview"
    ))


def _render_overview(metrics: AvailabilityMetrics, time_format: str) -> None:
    with_time = metrics.has_time_events
    lines = [
        f"[bold]Participants:[/bold] {metrics.total_participants}",
        "[bold]Everyone available:[/bold] "
        + ("[green]Yes[/green]" if metrics.everyone_available else "[yellow]No[/yellow]"),
    ]

    if metrics.earliest_date:
        lines.append(
            f"[bold]Earliest best time:[/bold] {format_instant(metrics.earliest_date, time_format, with_time)}"
        )
    if metrics.latest_date:
        lines.append(
            f"[bold]Latest best time:[/bold] {format_instant(metrics.latest_date, time_format, with_time)}"
        )
    if metrics.longest:
        lines.append(
            f"[bold]Longest common window:[/bold] {format_range(metrics.longest, time_format)} "
            f"({format_duration(metrics.longest_duration_minutes)})"
        )
    if metrics.best_day_of_week:
        lines.append(
            f"[bold]Best day:[/bold] {metrics.best_day_of_week.day} "
            f"({metrics.best_day_of_week.avg_participants:.1f} people on average)"
        )
    lines.append(f"[bold]Typical meeting length:[/bold] {format_duration(metrics.optimal_meeting_minutes)}")

    console.print(Panel("\n".join(lines), title="Availability Overview"))


def _render_meeting_windows(metrics: AvailabilityMetrics, time_format: str, limit: int) -> None:
    table = Table(title="Best Meeting Windows", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("When")
    table.add_column("People", justify="right")
    table.add_column("Duration")
    table.add_column("Who", style="dim")

    for position, window in enumerate(metrics.meeting_windows[:limit], 1):
        table.add_row(
            str(position),
            format_range(window.time_range, time_format),
            f"{window.count}/{metrics.total_participants}",
            format_duration(window.duration_minutes),
            ", ".join(window.participants),
        )

    console.print(table)


def _render_participants(metrics: AvailabilityMetrics) -> None:
    table = Table(title="Individual Availability", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold yellow")
    table.add_column("Available")
    table.add_column("Share", justify="right")

    for participant in metrics.participant_metrics:
        table.add_row(
            participant.name,
            format_duration(participant.total_minutes),
            f"{participant.percentage:.0f}%",
        )

    console.print(table)

    if metrics.most_available:
        console.print(f"  Most available: [green]{metrics.most_available.name}[/green]")
    if metrics.least_available:
        console.print(f"  Least available: [yellow]{metrics.least_available.name}[/yellow]")


def _render_coverage(metrics: AvailabilityMetrics) -> None:
    covered, total, unit = coverage_counts(metrics)
    lines = [
        f"[bold]Coverage:[/bold] {metrics.coverage_percentage:.0f}% ({covered} of {total} {unit})",
        f"[bold]Average people per slot:[/bold] {metrics.average_participants_per_slot:.1f}",
        f"[bold]Weekdays:[/bold] {format_duration(metrics.weekday_slots * metrics.slot_minutes)}",
        f"[bold]Weekends:[/bold] {format_duration(metrics.weekend_slots * metrics.slot_minutes)}",
    ]
    console.print(Panel("\n".join(lines), title="Coverage Analysis"))


def _render_day_of_week(metrics: AvailabilityMetrics) -> None:
    table = Table(title="Day of Week", show_header=True, header_style="bold cyan")
    table.add_column("Day")
    table.add_column("Available")
    table.add_column("Avg. people", justify="right")

    for day in metrics.day_of_week_breakdown:
        table.add_row(
            day.day,
            format_duration(day.slots * metrics.slot_minutes),
            f"{day.avg_participants:.1f}",
        )

    console.print(table)


def _render_peak_hours(metrics: AvailabilityMetrics, time_format: str, limit: int) -> None:
    if not metrics.peak_hours:
        return

    table = Table(title="Peak Hours", show_header=True, header_style="bold cyan")
    table.add_column("Hour")
    table.add_column("Avg. people", justify="right")
    table.add_column("Slots", justify="right")

    for hour in metrics.peak_hours[:limit]:
        table.add_row(
            format_hour_label(hour.hour, time_format),
            f"{hour.avg_participants:.1f}",
            str(hour.total_slots),
        )

    console.print(table)


def _render_pairwise(metrics: AvailabilityMetrics) -> None:
    if metrics.total_participants < 2:
        console.print("[dim]Add more participants to see pairwise overlap.[/dim]")
        return
    if not metrics.pairwise_overlaps:
        console.print("[yellow]No two participants share any available time.[/yellow]")
        return

    table = Table(title="Pairwise Overlap", show_header=True, header_style="bold cyan")
    table.add_column("Pair")
    table.add_column("Shared")
    table.add_column("Share", justify="right")

    for overlap in metrics.pairwise_overlaps:
        table.add_row(
            " & ".join(overlap.pair),
            format_duration(overlap.overlap_minutes),
            f"{overlap.percentage:.0f}%",
        )

    console.print(table)


def render_metrics(metrics: AvailabilityMetrics, config: AppConfig) -> None:
    """Print every metrics section to the console."""
    if metrics.is_empty:
        _render_empty_state()
        return

    time_format = config.time_format
    _render_overview(metrics, time_format)
    _render_meeting_windows(metrics, time_format, config.display.top_windows)
    _render_participants(metrics)
    _render_coverage(metrics)
    _render_day_of_week(metrics)
    _render_peak_hours(metrics, time_format, config.display.top_peak_hours)
    _render_pairwise(metrics)


@app.command()
def metrics(
    file: Annotated[Optional[Path], typer.Option("--file", "-f", help="JSON or YAML file with availability events")] = None,
    calendar: Annotated[Optional[str], typer.Option("--calendar", help="Calendar ID to fetch events from")] = None,
    pin: Annotated[Optional[str], typer.Option("--pin", envvar="ISSHO_PIN", help="Calendar PIN (or set ISSHO_PIN)")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-z", help="IANA timezone for slots, days and hours")] = None,
    time_format: Annotated[Optional[str], typer.Option("--time-format", help="Clock style: 12h or 24h")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Only events ending after this day (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Only events starting on or before this day (YYYY-MM-DD)")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print metrics as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Show group availability metrics for a set of events.

    Examples:

        # From an exported events file
        issho metrics --file events.json

        # Straight from a shared calendar
        issho metrics --calendar AB12CD34 --pin 123456 --time-format 24h

        # Machine readable
        issho metrics -f events.yaml --json
    """
    try:
        config = AppConfig.load_or_default(config_file)

        overrides = {}
        if timezone:
            overrides["timezone"] = timezone
        if time_format:
            overrides["time_format"] = time_format
        if verbose:
            overrides["log_level"] = "DEBUG"
        if overrides:
            config = AppConfig(**{**config.model_dump(), **overrides})

        configure_logging(config.log_level)

        window_start = _parse_day(start, config.timezone, "--start") if start else None
        window_end = _parse_day(end, config.timezone, "--end").add(days=1) if end else None

        source = _build_source(config=config, file=file, calendar=calendar, pin=pin)
        service = AvailabilityService(
            interval_source=source,
            calculator=MetricsCalculator(timezone=config.timezone),
        )

        result = service.refresh(start=window_start, end=window_end)

        if as_json:
            typer.echo(json.dumps(result.to_dict(), indent=2))
        else:
            render_metrics(result, config)

    except (IsshoError, FileNotFoundError, ValueError) as e:
        logger.debug("metrics command failed", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]issho[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
