"""
Main CLI application using Typer.
"""

import calendar
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_booking_repository import JsonBookingRepository
from ..adapters.yaml_config_provider import YamlConfigProvider
from ..config import AppConfig, get_default_config_path
from ..domain.availability_engine import AvailabilityEngine
from ..domain.exceptions import BookingError
from ..domain.time_representation import format_display
from ..services.booking_service import BookingService

app = typer.Typer(
    name="bookable",
    help="List and book appointment slots for a business day",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _parse_date(value: str, tz: str):
    """Parse a YYYY-MM-DD argument into a calendar date."""
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Invalid date '{value}', expected YYYY-MM-DD: {e}[/red]")
        raise typer.Exit(1)


def _build_service(config_path: Path, config: AppConfig) -> BookingService:
    """Wire the file-backed collaborators and the engine from the config."""
    engine = AvailabilityEngine(
        granularity_minutes=config.defaults.granularity_minutes,
        meridiem_case=config.defaults.meridiem_case,
    )
    repository = JsonBookingRepository(
        path=config.resolve_bookings_file(config_path),
        timezone=config.timezone,
    )
    return BookingService(
        config_provider=YamlConfigProvider(config_path),
        booking_repository=repository,
        engine=engine,
    )


def _load(config_file: Optional[Path]):
    config_path = config_file or get_default_config_path()
    return config_path, AppConfig.load_from_yaml(config_path)


@app.command()
def slots(
    day: Annotated[str, typer.Argument(help="Date to search (YYYY-MM-DD)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List available appointment start times for one day.

    Examples:

        bookable slots 2024-11-25

        bookable slots 2024-11-25 --duration 60
    """
    _configure_logging(verbose)

    try:
        config_path, config = _load(config_file)
        target = _parse_date(day, config.timezone)
        minutes = duration if duration is not None else config.defaults.duration_minutes

        service = _build_service(config_path, config)
        available = service.available_slots(target, minutes)

    except (BookingError, FileNotFoundError, ValidationError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    if not available:
        console.print(
            f"[yellow]⚠ No available slots on {target.isoformat()} for {minutes} minutes.[/yellow]\n"
            "Try another day or a shorter duration."
        )
    else:
        console.print(
            f"[bold green]✓ {len(available)} available slot(s) on {target.isoformat()} "
            f"({minutes} min):[/bold green]\n"
        )
        for display in available:
            console.print(f"  {display}")
    console.print()


@app.command()
def book(
    day: Annotated[str, typer.Argument(help="Date of the appointment (YYYY-MM-DD)")],
    slot: Annotated[str, typer.Argument(help="Slot as listed, e.g. '2:15 PM'")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    label: Annotated[str, typer.Option("--label", "-l", help="Customer name or note")] = "",
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Book a listed slot.
    """
    _configure_logging(verbose)

    try:
        config_path, config = _load(config_file)
        target = _parse_date(day, config.timezone)
        minutes = duration if duration is not None else config.defaults.duration_minutes

        service = _build_service(config_path, config)
        result = service.book(target, slot, minutes, label=label)

    except (BookingError, FileNotFoundError, ValidationError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not result.ok:
        console.print(f"[bold red]✗ {slot} on {target.isoformat()} is no longer available.[/bold red]")
        raise typer.Exit(2)

    console.print(
        f"[green]✓ Booked {result.display} on {target.isoformat()} "
        f"({result.canonical_time}, {minutes} min).[/green]"
    )


@app.command()
def show_config(
    config_file: ConfigOption = None,
):
    """
    Show the configured business hours.
    """
    try:
        config_path, config = _load(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if config.business is None:
        console.print("[yellow]No business hours configured in the config file.[/yellow]")
        raise typer.Exit(1)

    case = config.defaults.meridiem_case
    business = config.business

    table = Table(
        title="Business hours",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Setting", style="bold yellow")
    table.add_column("Value")

    table.add_row("Timezone", config.timezone)
    table.add_row(
        "Open",
        f"{format_display(business.work_start, case)} - {format_display(business.work_end, case)}",
    )
    if business.lunch_start is not None:
        table.add_row(
            "Lunch",
            f"{format_display(business.lunch_start, case)} - {format_display(business.lunch_end, case)}",
        )
    if business.closed_weekdays:
        table.add_row(
            "Closed",
            ", ".join(calendar.day_name[day] for day in business.closed_weekdays),
        )
    table.add_row("Default duration", f"{config.defaults.duration_minutes} min")
    table.add_row("Granularity", f"{config.defaults.granularity_minutes} min")
    table.add_row("Bookings file", str(config.resolve_bookings_file(config_path)))

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookable[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
