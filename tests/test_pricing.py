"""
Tests for the pure pricing functions.
"""

from decimal import Decimal

from airbooking.models import (
    BaggageOptionModel,
    BookingSessionModel,
    InsuranceOptionModel,
    SeatSelectionModel,
)
from airbooking.services import compute_total, price_breakdown
from tests.factories import make_flight


def build_session(**overrides) -> BookingSessionModel:
    data = {
        "flight": make_flight(),
        "selected_seats": [
            SeatSelectionModel(passenger_index=0, seat_id="12A", price=Decimal("50")),
            SeatSelectionModel(passenger_index=1, seat_id="12B", price=Decimal("25.50")),
        ],
        "baggage_options": [
            BaggageOptionModel(passenger_index=1, type="checked", weight=20, price=Decimal("30"),
                               description="20kg checked baggage"),
        ],
        "insurance": InsuranceOptionModel(type="premium", coverage=Decimal("5000"), price=Decimal("30")),
    }
    data.update(overrides)
    return BookingSessionModel(**data)


class TestComputeTotal:
    """Test the booking total formula."""

    def test_all_components(self):
        """Test fare, seats, baggage and insurance are summed."""
        assert compute_total(build_session()) == Decimal("435.50")

    def test_empty_session(self):
        """Test a session without a flight totals zero."""
        assert compute_total(BookingSessionModel()) == Decimal("0")

    def test_fare_only(self):
        session = build_session(selected_seats=[], baggage_options=[], insurance=None)
        assert compute_total(session) == Decimal("300.00")

    def test_stored_total_is_ignored(self):
        """Test a stale stored total does not leak into the computation."""
        session = build_session(total_price=Decimal("1"))
        assert compute_total(session) == Decimal("435.50")


class TestPriceBreakdown:
    """Test receipt line items."""

    def test_lines_sum_to_total(self):
        session = build_session()
        lines = price_breakdown(session)

        assert sum(line.total for line in lines) == compute_total(session)

    def test_line_descriptions(self):
        descriptions = [line.description for line in price_breakdown(build_session())]

        assert descriptions == [
            "Fare SA123",
            "Seat 12A (passenger 1)",
            "Seat 12B (passenger 2)",
            "20kg checked baggage (passenger 2)",
            "Insurance: premium",
        ]

    def test_unlabelled_baggage(self):
        session = build_session(baggage_options=[
            BaggageOptionModel(passenger_index=0, type="carry-on", weight=7, price=Decimal("0")),
        ])
        lines = price_breakdown(session)

        assert "carry-on baggage 7kg (passenger 1)" in [line.description for line in lines]
