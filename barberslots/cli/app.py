"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.mock_client import MockBookingClient
from ..adapters.supabase_client import SupabaseClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookingError, ConflictError, SlotUnavailableError
from ..domain.models import AddOn, BookingRequest, CustomerDetails, Service, Stylist
from ..domain.schedule import get_schedule_for_date
from ..domain.time_utils import format_time_display
from ..services.booking_service import BookingClientProtocol, BookingService

app = typer.Typer(
    name="barberslots",
    help="Find open appointment slots and book them",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock data instead of the hosted database.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    """Load the YAML config; mock mode may run without one."""
    config_path = config_file or get_default_config_path()
    if mock and not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _configure_logging(config: AppConfig, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_client(config: AppConfig, mock: bool) -> BookingClientProtocol:
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using bundled test data[/yellow]\n")
        return MockBookingClient()

    if not config.has_remote_store():
        console.print(
            "[bold red]Error:[/bold red] supabase_url and supabase_anon_key must be set "
            "in the config file (or use --mock)."
        )
        raise typer.Exit(1)

    return SupabaseClient(
        base_url=config.supabase_url,
        api_key=config.supabase_anon_key,
        timeout=config.request_timeout_seconds,
    )


def _build_service(config: AppConfig, client: BookingClientProtocol) -> BookingService:
    return BookingService(client=client, tax_rate=config.tax_rate, timezone=config.timezone)


def _parse_date(value: str, tz: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date {value!r}: {e}[/red]")
        raise typer.Exit(1)


def _find_by_id(items, item_id: str, kind: str):
    for item in items:
        if item.id == item_id:
            return item
    console.print(f"[bold red]Error:[/bold red] Unknown {kind} '{item_id}'.")
    raise typer.Exit(1)


def _resolve_selection(
    client: BookingClientProtocol,
    stylist_id: str,
    service_id: str,
    add_on_ids: List[str],
) -> tuple[Stylist, Service, List[AddOn]]:
    stylist = _find_by_id(client.get_stylists(), stylist_id, "stylist")
    service = _find_by_id(client.get_services(), service_id, "service")
    all_add_ons = client.get_add_ons()
    add_ons = [_find_by_id(all_add_ons, add_on_id, "add-on") for add_on_id in add_on_ids]

    if not stylist.offers(service.id):
        console.print(
            f"[yellow]Warning: {stylist.name} does not list '{service.name}' as a specialty.[/yellow]"
        )

    return stylist, service, add_ons


def _print_slots(date, slots: List[str]) -> None:
    if not slots:
        console.print(
            "[yellow]⚠ No available times on this day.[/yellow]\n"
            "Try another date or a shorter service."
        )
        return

    console.print(f"[bold green]✓ {len(slots)} available start time(s):[/bold green]\n")
    for slot in slots:
        console.print(f"  {slot}  [dim]({format_time_display(date, slot)})[/dim]")


@app.command()
def services(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List bookable services and add-ons.
    """
    try:
        config = _load_config(config_file, mock)
        _configure_logging(config, verbose)
        client = _build_client(config, mock)

        table = Table(title="Services", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="bold yellow")
        table.add_column("Name")
        table.add_column("Minutes", justify="right")
        table.add_column("Price", justify="right")

        for service in client.get_services():
            table.add_row(service.id, service.name, str(service.duration), f"${service.price:.2f}")

        add_on_table = Table(title="Add-ons", show_header=True, header_style="bold cyan")
        add_on_table.add_column("ID", style="bold yellow")
        add_on_table.add_column("Name")
        add_on_table.add_column("Minutes", justify="right")
        add_on_table.add_column("Price", justify="right")

        for add_on in client.get_add_ons():
            add_on_table.add_row(add_on.id, add_on.name, str(add_on.duration), f"${add_on.price:.2f}")

        console.print()
        console.print(table)
        console.print(add_on_table)
        console.print()

    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def stylists(
    service_id: Annotated[Optional[str], typer.Option("--service", "-s", help="Only stylists offering this service")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List stylists and their weekly schedules.
    """
    try:
        config = _load_config(config_file, mock)
        _configure_logging(config, verbose)
        client = _build_client(config, mock)
        service_obj = _find_by_id(client.get_services(), service_id, "service") if service_id else None

        table = Table(title="Stylists", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="bold yellow")
        table.add_column("Name")
        table.add_column("Rating", justify="right")
        table.add_column("Schedule", style="dim")

        for stylist in BookingService.eligible_stylists(client.get_stylists(), service_obj):
            lines = []
            for entry in stylist.schedule:
                blocks = ", ".join(str(block) for block in entry.blocks)
                breaks = ", ".join(str(brk) for brk in entry.breaks)
                line = f"{WEEKDAY_NAMES[entry.day][:3]} {blocks}"
                if breaks:
                    line += f" (break {breaks})"
                lines.append(line)
            table.add_row(stylist.id, stylist.name, f"{stylist.rating:.2f}", "\n".join(lines))

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def slots(
    stylist_id: Annotated[str, typer.Argument(help="Stylist ID")],
    date: Annotated[str, typer.Argument(help="Appointment date (YYYY-MM-DD)")],
    service_id: Annotated[str, typer.Option("--service", "-s", help="Service ID")],
    add_on_ids: Annotated[Optional[List[str]], typer.Option("--add-on", "-a", help="Add-on ID (repeatable)")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show available start times for a stylist on a date.

    Examples:

        barberslots slots leon 2024-02-07 --service signature-cut --mock

        barberslots slots leon 2024-02-07 -s signature-cut -a beard-trim
    """
    try:
        config = _load_config(config_file, mock)
        _configure_logging(config, verbose)
        client = _build_client(config, mock)
        service = _build_service(config, client)

        appointment_date = _parse_date(date, config.timezone)
        stylist, service_obj, add_ons = _resolve_selection(client, stylist_id, service_id, add_on_ids or [])
        duration = service.total_duration(service_obj, add_ons)

        console.print("[bold cyan]📊 Summary:[/bold cyan]")
        console.print(f"   Stylist: {stylist.name}")
        console.print(f"   Date: {appointment_date.format('dddd, MMMM Do YYYY', locale='en')}")
        console.print(f"   Service: {service_obj.name} (+{len(add_ons)} add-on(s))")
        console.print(f"   Total duration: {duration} minutes")
        console.print()

        if get_schedule_for_date(stylist, appointment_date) is None:
            console.print(f"[yellow]⚠ {stylist.name} does not work on {WEEKDAY_NAMES[appointment_date.isoweekday() % 7]}s.[/yellow]\n")
            return

        _print_slots(appointment_date, service.available_slots(stylist, appointment_date, duration))
        console.print()

    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def book(
    stylist_id: Annotated[str, typer.Argument(help="Stylist ID")],
    date: Annotated[str, typer.Argument(help="Appointment date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    service_id: Annotated[str, typer.Option("--service", "-s", help="Service ID")],
    name: Annotated[str, typer.Option("--name", help="Client name")],
    email: Annotated[str, typer.Option("--email", help="Client email")],
    phone: Annotated[str, typer.Option("--phone", help="Client phone")],
    add_on_ids: Annotated[Optional[List[str]], typer.Option("--add-on", "-a", help="Add-on ID (repeatable)")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Notes for the stylist")] = None,
    marketing: Annotated[bool, typer.Option("--marketing/--no-marketing", help="Opt in to marketing emails")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Book an appointment at a chosen start time.
    """
    try:
        config = _load_config(config_file, mock)
        _configure_logging(config, verbose)
        client = _build_client(config, mock)
        service = _build_service(config, client)

        appointment_date = _parse_date(date, config.timezone)
        stylist, service_obj, add_ons = _resolve_selection(client, stylist_id, service_id, add_on_ids or [])
        duration = service.total_duration(service_obj, add_ons)

        request = BookingRequest(
            service=service_obj,
            stylist=stylist,
            date=appointment_date,
            time=time,
            duration=duration,
            customer=CustomerDetails(
                name=name,
                email=email,
                phone=phone,
                notes=notes.strip() if notes else None,
                marketing_consent=marketing,
            ),
            add_on_ids=tuple(add_on.id for add_on in add_ons),
        )

        try:
            confirmation = service.submit_booking(request, quote=service.quote(service_obj, add_ons))
        except ConflictError as e:
            console.print(f"\n[bold red]✗ Slot no longer available:[/bold red] {e}\n")
            console.print("Fresh availability:")
            _print_slots(appointment_date, service.available_slots(stylist, appointment_date, duration))
            raise typer.Exit(1)
        except SlotUnavailableError as e:
            console.print(f"\n[bold red]✗ Not available:[/bold red] {e}\n")
            raise typer.Exit(1)

        quote = confirmation.quote
        console.print(Panel.fit(
            f"[bold green]✓ Booking confirmed![/bold green]\n\n"
            f"[bold]Code:[/bold] {confirmation.confirmation_code}\n"
            f"[bold]Service:[/bold] {service_obj.name} with {stylist.name}\n"
            f"[bold]When:[/bold] {appointment_date.isoformat()} at {format_time_display(appointment_date, time)}\n"
            f"[bold]Duration:[/bold] {confirmation.booking.duration} minutes\n"
            f"[bold]Total:[/bold] ${quote.total:.2f} (incl. ${quote.tax:.2f} tax)",
            title="✓ Booking"
        ))
        console.print()

    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
