"""
Text renderer for confirmed bookings.

Turns a finalized booking session into a human-readable receipt or a
per-passenger boarding pass. Layout is produced with rich tables rendered
to plain text, so the artifacts can be printed, emailed or saved as-is.
"""

import io
import logging
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..models.enums import BookingStatus
from ..models.session import BookingSessionModel
from .errors import PreconditionError, ValidationError
from .pricing import compute_total, price_breakdown

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"


def _fmt(moment) -> str:
    return moment.strftime(DATETIME_FORMAT) if moment else "--"


class DocumentRenderer:
    """Render receipts and boarding passes for confirmed sessions."""

    def __init__(self, width: int = 80):
        self.width = width

    def _console(self, buffer: io.StringIO) -> Console:
        return Console(file=buffer, width=self.width, force_terminal=False, color_system=None)

    def _require_confirmed(self, session: BookingSessionModel) -> None:
        if session.status != BookingStatus.CONFIRMED:
            raise PreconditionError(["confirmed status"], "render documents")

    def render_receipt(self, session: BookingSessionModel) -> str:
        """
        Render the booking confirmation and payment receipt.

        Args:
            session: Confirmed booking session

        Returns:
            str: Plain-text receipt

        Raises:
            PreconditionError: If the session is not confirmed
        """
        self._require_confirmed(session)
        flight = session.flight

        buffer = io.StringIO()
        console = self._console(buffer)
        console.print(Panel(f"Booking Confirmation  {session.reference or ''}".rstrip(), box=box.DOUBLE))

        details = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        details.add_column("Field")
        details.add_column("Value")
        details.add_row("Booking Ref", session.reference or "--")
        details.add_row("Status", session.status.value.upper())
        details.add_row("Payment", session.payment_status.value.upper())
        details.add_row("Transaction", session.transaction_id or "--")
        details.add_row("Booked", _fmt(session.updated_at))
        if flight:
            details.add_row("Flight", f"{flight.airline or ''} {flight.flight_number or flight.flight_id}".strip())
            details.add_row("Route", flight.route)
            details.add_row("Departure", _fmt(flight.scheduled_departure))
            details.add_row("Arrival", _fmt(flight.scheduled_arrival))
        if session.contact:
            details.add_row("Contact", f"{session.contact.email} / {session.contact.phone}")
        console.print(details)

        passengers = Table(title="Passengers", box=box.SIMPLE)
        passengers.add_column("#", justify="right")
        passengers.add_column("Name")
        passengers.add_column("Type")
        passengers.add_column("Seat")
        passengers.add_column("Baggage")
        for index, passenger in enumerate(session.passengers):
            seat = session.seat_for(index)
            bags = ", ".join(f"{b.type.value} {b.weight}kg" for b in session.baggage_for(index))
            passengers.add_row(
                str(index + 1),
                passenger.full_name,
                passenger.type.value,
                seat.seat_id if seat else "--",
                bags or "--",
            )
        console.print(passengers)

        breakdown = Table(title="Price Breakdown", box=box.SIMPLE)
        breakdown.add_column("Description")
        breakdown.add_column("Amount", justify="right")
        for line in price_breakdown(session):
            breakdown.add_row(line.description, f"{line.total:.2f}")
        breakdown.add_row("TOTAL", f"{session.currency} {compute_total(session):.2f}")
        console.print(breakdown)

        logger.debug(f"Rendered receipt for session {session.session_id}")
        return buffer.getvalue()

    def render_boarding_pass(self, session: BookingSessionModel, passenger_index: int = 0) -> str:
        """
        Render a boarding pass for one passenger.

        Raises:
            PreconditionError: If the session is not confirmed
            ValidationError: If there is no passenger at that position
        """
        self._require_confirmed(session)
        if not 0 <= passenger_index < len(session.passengers):
            raise ValidationError({"passenger_index": f"No passenger at position {passenger_index}"})

        passenger = session.passengers[passenger_index]
        seat = session.seat_for(passenger_index)
        flight = session.flight

        table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        table.add_column("Field")
        table.add_column("Value")
        table.add_row("PASSENGER", passenger.full_name.upper())
        table.add_row("FLIGHT", (flight.flight_number or flight.flight_id) if flight else "--")
        table.add_row("FROM", (flight.origin or "--") if flight else "--")
        table.add_row("TO", (flight.destination or "--") if flight else "--")
        table.add_row("DEPARTS", _fmt(flight.scheduled_departure) if flight else "--")
        table.add_row("SEAT", seat.seat_id if seat else "--")
        table.add_row("BOOKING REF", session.reference or "--")

        buffer = io.StringIO()
        console = self._console(buffer)
        title = f"BOARDING PASS  {flight.airline or ''}".rstrip() if flight else "BOARDING PASS"
        console.print(Panel(table, title=title, box=box.ROUNDED))
        console.print("Please arrive at the gate 30 minutes before departure")
        return buffer.getvalue()

    def render(self, session: BookingSessionModel, passenger_index: Optional[int] = None) -> str:
        """Render a receipt, or a boarding pass when a passenger position is given."""
        if passenger_index is None:
            return self.render_receipt(session)
        return self.render_boarding_pass(session, passenger_index)
