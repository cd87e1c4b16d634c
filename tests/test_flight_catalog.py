"""
Tests for the mock flight catalog.
"""

import pytest
from datetime import date
from decimal import Decimal

from airbooking.services import FlightNotFoundError, MockFlightCatalog
from airbooking.services.flight_catalog import AIRPORTS, _flight_duration_minutes, _haversine_miles
from tests.factories import make_flight


class TestDistanceHelpers:
    """Test distance and duration estimates."""

    def test_haversine_jfk_lhr(self):
        jfk, lhr = AIRPORTS["JFK"], AIRPORTS["LHR"]
        distance = _haversine_miles(jfk["lat"], jfk["lng"], lhr["lat"], lhr["lng"])
        assert 3400 < distance < 3500

    def test_duration_includes_ground_time(self):
        assert _flight_duration_minutes(0) == 30
        assert _flight_duration_minutes(1000) == 150


class TestMockFlightCatalog:
    """Test catalog search and lookup."""

    def test_search_returns_route_flights(self):
        catalog = MockFlightCatalog(seed=7)
        flights = catalog.search("JFK", "LHR", "2026-12-01")

        assert 0 < len(flights) <= 5
        for flight in flights:
            assert flight.origin == "JFK"
            assert flight.destination == "LHR"
            assert flight.scheduled_departure.date() == date(2026, 12, 1)
            assert flight.scheduled_arrival > flight.scheduled_departure
            assert flight.fare > Decimal("49")
            assert flight.fare == flight.fare.quantize(Decimal("0.01"))
            assert flight.flight_id.endswith("-20261201")

    def test_search_sorted_by_departure(self):
        flights = MockFlightCatalog().search("SFO", "SEA", date(2026, 12, 1))
        departures = [f.scheduled_departure for f in flights]
        assert departures == sorted(departures)

    def test_search_is_deterministic(self):
        """Test the same seed, route and date give the same flights."""
        first = MockFlightCatalog(seed=3).search("jfk", "lhr", "2026-12-01")
        second = MockFlightCatalog(seed=3).search("JFK", "LHR", date(2026, 12, 1))

        assert [f.model_dump() for f in first] == [f.model_dump() for f in second]

    def test_search_respects_max_results(self):
        flights = MockFlightCatalog(max_results=2).search("ATL", "LAX", "2026-12-01")
        assert len(flights) <= 2

    def test_search_filters_capacity(self):
        assert MockFlightCatalog().search("JFK", "LHR", "2026-12-01", passengers=500) == []

    @pytest.mark.parametrize("origin,destination", [("JFK", "JFK"), ("JFK", "XXX"), ("ZZZ", "LHR")])
    def test_search_unknown_routes(self, origin, destination):
        assert MockFlightCatalog().search(origin, destination, "2026-12-01") == []

    def test_search_invalid_date(self):
        with pytest.raises(ValueError):
            MockFlightCatalog().search("JFK", "LHR", "01/12/2026")

    def test_get_searched_flight(self):
        catalog = MockFlightCatalog()
        flight = catalog.search("JFK", "LHR", "2026-12-01")[0]

        found = catalog.get_flight(flight.flight_id)

        assert found == flight
        found.fare = Decimal("1")
        assert catalog.get_flight(flight.flight_id).fare == flight.fare

    def test_get_added_flight(self):
        catalog = MockFlightCatalog()
        catalog.add_flight(make_flight())

        assert catalog.get_flight("SA123-20261201").flight_number == "SA123"

    def test_get_unknown_flight(self):
        with pytest.raises(FlightNotFoundError):
            MockFlightCatalog().get_flight("NOPE")

    def test_currency(self):
        flights = MockFlightCatalog(currency="EUR").search("CDG", "FRA", "2026-12-01")
        assert all(f.currency == "EUR" for f in flights)

    def test_airport_name(self):
        catalog = MockFlightCatalog()
        assert catalog.airport_name("lhr") == "Heathrow"
        assert catalog.airport_name("XXX") is None
