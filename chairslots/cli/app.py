"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.clinic_client import ClinicApiClient
from ..adapters.mock_clinic_client import MockClinicClient
from ..config import AppConfig, get_default_config_path
from ..domain.availability import AvailabilityClassifier
from ..domain.models import SlotState
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="chairslots",
    help="Show bookable appointment slots for clinic dentists",
    add_completion=False
)

console = Console()

STATE_STYLES = {
    SlotState.AVAILABLE: ("green", "available"),
    SlotState.BOOKED: ("red", "booked"),
    SlotState.BOOKED_SELF: ("blue", "your booking"),
    SlotState.BLOCKED: ("dim", "blocked"),
    SlotState.PAST: ("dim", "past"),
}


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load an explicit config file, or the default one if it exists."""
    if config_file:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    console.print("[dim]No config.yaml found, using defaults.[/dim]")
    return AppConfig()


def _build_service(config: AppConfig, mock: bool) -> AvailabilityService:
    if mock:
        client = MockClinicClient(default_duration=config.defaults.slot_duration_minutes)
    else:
        client = ClinicApiClient(
            base_url=config.api.base_url,
            token=config.api.token,
            timeout=config.api.timeout_seconds,
            default_duration=config.defaults.slot_duration_minutes,
        )

    classifier = AvailabilityClassifier(max_slots=config.defaults.max_slots)
    return AvailabilityService(clinic_client=client, classifier=classifier, timezone=config.timezone)


@app.command()
def slots(
    dentist: Annotated[str, typer.Argument(help="Dentist alias from the config, or a raw dentist id.")],
    day: Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    patient: Annotated[Optional[str], typer.Option("--patient", "-p", help="Patient id; marks that patient's own bookings.")] = None,
    show_all: Annotated[bool, typer.Option("--all", "-a", help="Also list slots that cannot be booked.")] = False,
    mock: Annotated[bool, typer.Option("--mock", help="Use bundled mock data instead of the backend.")] = False,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show diagnostic logging.")] = False,
):
    """
    Show the appointment slots of a dentist for one day.

    Examples:

        chairslots slots D001 --date 2030-03-04 --mock

        chairslots slots perera --patient P100 --all
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone

        if day:
            try:
                target = pendulum.from_format(day, "YYYY-MM-DD", tz=tz).date()
            except ValueError as e:
                console.print(f"[red]Could not parse date '{day}': {e}[/red]")
                raise typer.Exit(1)
        else:
            target = pendulum.now(tz).date()

        dentist_id = config.resolve_dentist(dentist)
        service = _build_service(config, mock)

        if mock:
            console.print("[yellow]⚠  MOCK MODE: using bundled test data[/yellow]")

        availability = asyncio.run(
            service.get_day_availability(
                dentist_id=dentist_id,
                day=target,
                requester_id=patient,
            )
        )

        console.print(
            f"\n[bold cyan]Dentist {dentist_id}[/bold cyan] – "
            f"{target.format('dddd, YYYY-MM-DD')}\n"
        )

        if not availability.slots or not availability.has_availability:
            console.print(f"[yellow]⚠ No slots available: {availability.reason}[/yellow]")
            if not show_all or not availability.slots:
                raise typer.Exit(0)

        entries = availability.slots if show_all else availability.available

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Slot", style="bold")
        table.add_column("State")
        table.add_column("Details", style="dim")

        for entry in entries:
            style, label = STATE_STYLES[entry.state]
            details = ""
            if entry.interval is not None and entry.state is SlotState.BOOKED:
                details = f"{entry.interval.kind.value} {entry.interval.interval_id or ''}".strip()
            table.add_row(entry.slot.label, f"[{style}]{label}[/{style}]", details)

        console.print(table)
        console.print(
            f"\n[green]✓ {len(availability.available)} of {len(availability.slots)} slot(s) bookable[/green]\n"
        )

    except typer.Exit:
        raise

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_dentists(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured dentist aliases.
    """
    try:
        config = _load_config(config_file)

        if not config.dentists:
            console.print("[yellow]No dentists defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured dentists",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name (Alias)", style="bold yellow")
        table.add_column("Dentist ID", style="dim")

        for dentist in config.dentists:
            table.add_row(dentist.name, dentist.dentist_id)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]chairslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
