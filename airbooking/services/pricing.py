"""
Pure pricing functions for booking sessions.

The booking total is never a source of truth: it is recomputed from the fare
and the add-ons whenever any of them changes.
"""

from decimal import Decimal
from typing import List

from ..models.session import BookingSessionModel, PriceLineModel

ZERO = Decimal("0")


def compute_total(session: BookingSessionModel) -> Decimal:
    """
    Compute the booking total from its components.

    fare + sum of seat prices + sum of baggage prices + insurance price,
    where a missing flight or insurance contributes zero.
    """
    fare = session.flight.fare if session.flight else ZERO
    seats = sum((seat.price for seat in session.selected_seats), ZERO)
    baggage = sum((bag.price for bag in session.baggage_options), ZERO)
    insurance = session.insurance.price if session.insurance else ZERO
    return fare + seats + baggage + insurance


def price_breakdown(session: BookingSessionModel) -> List[PriceLineModel]:
    """
    Itemize the booking total for receipts and summaries.

    The line totals always add up to ``compute_total(session)``.
    """
    lines: List[PriceLineModel] = []

    if session.flight:
        label = f"Fare {session.flight.flight_number or session.flight.flight_id}"
        lines.append(PriceLineModel(description=label, amount=session.flight.fare))

    for seat in sorted(session.selected_seats, key=lambda s: s.passenger_index):
        lines.append(PriceLineModel(
            description=f"Seat {seat.seat_id} (passenger {seat.passenger_index + 1})",
            amount=seat.price,
        ))

    for bag in session.baggage_options:
        label = bag.description or f"{bag.type.value} baggage {bag.weight}kg"
        lines.append(PriceLineModel(
            description=f"{label} (passenger {bag.passenger_index + 1})",
            amount=bag.price,
        ))

    if session.insurance:
        lines.append(PriceLineModel(
            description=f"Insurance: {session.insurance.type}",
            amount=session.insurance.price,
        ))

    return lines
