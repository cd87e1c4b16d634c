#!/usr/bin/env python3
"""
Booking Flow CLI

Walks a full booking through the session manager from the terminal:
search flights, add passengers, pick seats and add-ons, pay with a mock
card and print the receipt. Uses Typer for the CLI and Rich for output.

Usage:
    airbooking search JFK LHR 2026-12-01
    airbooking book JFK LHR 2026-12-01 --name "Ada Lovelace" --seat 12A
    airbooking book JFK LHR 2026-12-01 --fail-payment    # decline the charge
    airbooking book JFK LHR 2026-12-01 --persist         # save to Valkey
"""

import asyncio
import re
from datetime import date
from decimal import Decimal
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .cache.client import ValkeyClient
from .cache.config import SessionStoreError, ValkeyConnectionError
from .models.enums import BaggageType, PassengerType
from .models.session import BookingSessionModel
from .services.booking_session_manager import BookingSessionManager
from .services.document_renderer import DocumentRenderer
from .services.errors import BookingError
from .services.flight_catalog import MockFlightCatalog
from .services.payment_gateway import MockPaymentGateway
from .services.session_store import BookingSessionStore
from .utils.config import BookingConfig, load_config, setup_logging

# Initialize typer app and rich console
app = typer.Typer(
    help="Airline booking session walk-through",
    add_completion=False
)
console = Console()

BAGGAGE_OPTIONS = {
    "basic": {"type": BaggageType.CHECKED, "weight": 20, "price": Decimal("30"), "description": "20kg checked baggage"},
    "standard": {"type": BaggageType.CHECKED, "weight": 30, "price": Decimal("50"), "description": "30kg checked baggage"},
    "premium": {"type": BaggageType.CHECKED, "weight": 40, "price": Decimal("70"), "description": "40kg checked baggage"},
}

INSURANCE_PLANS = {
    "basic": {"type": "basic", "coverage": Decimal("1000"), "price": Decimal("15"),
              "description": "Trip cancellation and delay coverage"},
    "premium": {"type": "premium", "coverage": Decimal("5000"), "price": Decimal("30"),
                "description": "Adds emergency medical coverage"},
    "elite": {"type": "elite", "coverage": Decimal("10000"), "price": Decimal("50"),
              "description": "Cancel for any reason"},
}

SEAT_PRICE = Decimal("25")
TEST_CARD = "4242424242424242"
SEAT_PATTERN = re.compile(r"^\d+[A-Z]$", re.IGNORECASE)


def _configure(verbose: bool) -> BookingConfig:
    config = load_config()
    if verbose:
        config.booking_debug = True
    setup_logging(config, RichHandler(console=console, show_path=False))
    return config


def _fail(message: str) -> None:
    console.print(f"[red]✗ {message}[/red]")
    raise typer.Exit(code=1)


def _next_seat(seat: str) -> str:
    """12A -> 12B, 12F -> 13A."""
    row, letter = int(seat[:-1]), seat[-1].upper()
    if letter >= "F":
        return f"{row + 1}A"
    return f"{row}{chr(ord(letter) + 1)}"


def _passenger(name: str) -> dict:
    first, _, last = name.strip().partition(" ")
    return {
        "first_name": first,
        "last_name": last or first,
        "date_of_birth": date(1990, 1, 1),
        "type": PassengerType.ADULT,
    }


def _print_summary(session: BookingSessionModel) -> None:
    table = Table(title=f"Session {session.session_id[:8]}", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Status", session.status.value)
    table.add_row("Payment", session.payment_status.value)
    table.add_row("Passengers", str(len(session.passengers)))
    table.add_row("Seats", ", ".join(s.seat_id for s in session.selected_seats) or "--")
    table.add_row("Total", f"{session.currency} {session.total_price:.2f}")
    if session.failure_reason:
        table.add_row("Last decline", session.failure_reason)
    console.print(table)


async def _persist(config: BookingConfig, session: BookingSessionModel) -> str:
    async with ValkeyClient(config.valkey_config()) as client:
        store = BookingSessionStore(client, ttl_seconds=config.session_ttl_seconds)
        return await store.save(session)


@app.command()
def search(
    origin: str = typer.Argument(..., help="Origin IATA code"),
    destination: str = typer.Argument(..., help="Destination IATA code"),
    departure_date: str = typer.Argument(..., help="Travel date (YYYY-MM-DD)"),
    passengers: int = typer.Option(1, "--passengers", "-p", min=1, help="Seats needed"),
    seed: int = typer.Option(0, "--seed", help="Catalog seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Search the mock flight catalog."""
    config = _configure(verbose)
    catalog = MockFlightCatalog(seed=seed, currency=config.default_currency)

    try:
        flights = catalog.search(origin, destination, departure_date, passengers)
    except ValueError as e:
        _fail(f"Invalid date {departure_date!r}: {e}")

    if not flights:
        console.print(f"[yellow]No flights found for {origin.upper()} → {destination.upper()}[/yellow]")
        return

    table = Table(title=f"Flights {origin.upper()} → {destination.upper()} on {departure_date}", box=box.ROUNDED)
    table.add_column("Flight ID", style="cyan")
    table.add_column("Airline")
    table.add_column("Departs")
    table.add_column("Arrives")
    table.add_column("Seats left", justify="right")
    table.add_column("Fare", justify="right", style="green")
    for flight in flights:
        table.add_row(
            flight.flight_id,
            flight.airline or "--",
            flight.scheduled_departure.strftime("%H:%M"),
            flight.scheduled_arrival.strftime("%H:%M"),
            str(flight.remaining_capacity),
            f"{flight.currency} {flight.fare:.2f}",
        )
    console.print(table)


@app.command()
def book(
    origin: str = typer.Argument(..., help="Origin IATA code"),
    destination: str = typer.Argument(..., help="Destination IATA code"),
    departure_date: str = typer.Argument(..., help="Travel date (YYYY-MM-DD)"),
    names: Optional[List[str]] = typer.Option(None, "--name", "-n", help="Passenger full name (repeatable)"),
    seat: Optional[str] = typer.Option(None, "--seat", "-s", help="First seat; later passengers sit alongside"),
    baggage: Optional[str] = typer.Option(None, "--baggage", help="Checked bag: basic, standard or premium"),
    insurance: Optional[str] = typer.Option(None, "--insurance", help="Insurance: basic, premium or elite"),
    email: str = typer.Option("traveller@example.com", "--email", help="Contact email"),
    phone: str = typer.Option("+1 555 010 2030", "--phone", help="Contact phone"),
    card: str = typer.Option(TEST_CARD, "--card", help="Card number"),
    fail_payment: bool = typer.Option(False, "--fail-payment", help="Force the gateway to decline"),
    boarding_pass: bool = typer.Option(False, "--boarding-pass", help="Also print boarding passes"),
    persist: bool = typer.Option(False, "--persist", help="Save the final session to Valkey"),
    seed: int = typer.Option(0, "--seed", help="Catalog seed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Book the first available flight end to end."""
    config = _configure(verbose)
    names = names or ["Ada Lovelace"]

    if baggage and baggage not in BAGGAGE_OPTIONS:
        _fail(f"Unknown baggage option {baggage!r}; choose from {', '.join(BAGGAGE_OPTIONS)}")
    if insurance and insurance not in INSURANCE_PLANS:
        _fail(f"Unknown insurance plan {insurance!r}; choose from {', '.join(INSURANCE_PLANS)}")
    if seat and not SEAT_PATTERN.match(seat):
        _fail(f"Invalid seat {seat!r}; use a row number followed by a letter, e.g. 12A")

    catalog = MockFlightCatalog(seed=seed, currency=config.default_currency)
    gateway = MockPaymentGateway(failure_rate=1.0 if fail_payment else config.payment_failure_rate)
    manager = BookingSessionManager(default_currency=config.default_currency)

    try:
        flights = catalog.search(origin, destination, departure_date, len(names))
    except ValueError as e:
        _fail(f"Invalid date {departure_date!r}: {e}")
    if not flights:
        _fail(f"No flights found for {origin.upper()} → {destination.upper()} on {departure_date}")

    flight = flights[0]
    console.print(f"[cyan]Selected {flight.flight_id} ({flight.route}), fare {flight.currency} {flight.fare:.2f}[/cyan]")

    try:
        manager.start_session(flight)
        manager.set_passengers([_passenger(name) for name in names])

        if seat:
            current = seat.upper()
            for index in range(len(names)):
                manager.select_seat(index, current, SEAT_PRICE)
                current = _next_seat(current)

        if baggage:
            for index in range(len(names)):
                manager.add_baggage(index, BAGGAGE_OPTIONS[baggage])

        if insurance:
            manager.set_insurance(INSURANCE_PLANS[insurance])

        manager.set_contact(email, phone)
        pending = manager.request_payment()
        _print_summary(pending)

        year = date.today().year + 2
        outcome = gateway.charge(
            pending.total_price,
            pending.currency,
            {"card_number": card, "holder_name": names[0], "expiry_month": 12, "expiry_year": year, "cvv": "123"},
        )
        session = manager.apply_payment_result(outcome)
    except BookingError as e:
        _fail(str(e))

    if not outcome.success:
        _print_summary(session)
        console.print(f"[yellow]Payment declined: {session.failure_reason}. The booking is back in draft.[/yellow]")
    else:
        renderer = DocumentRenderer()
        console.print(renderer.render_receipt(session), markup=False, highlight=False)
        if boarding_pass:
            for index in range(len(session.passengers)):
                console.print(renderer.render_boarding_pass(session, index), markup=False, highlight=False)
        console.print(f"[green]✓ Booking confirmed, reference {session.reference}[/green]")

    if persist:
        try:
            key = asyncio.run(_persist(config, session))
        except (ValkeyConnectionError, SessionStoreError) as e:
            _fail(f"Could not save session: {e}")
        console.print(f"[green]✓ Session saved to Valkey under {key}[/green]")

    if not outcome.success:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
