"""
Mock flight catalog for development, demos and tests.

Generates plausible flights on the fly: distances come from airport
coordinates, durations from a cruise-speed estimate, and fares from distance.
Generation is seeded per route and date, so the same search always returns
the same flights.
"""

import logging
import math
import random
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Union

from ..models.flight import FlightModel
from .errors import BookingError

logger = logging.getLogger(__name__)

AIRPORTS = {
    "ATL": {"name": "Hartsfield-Jackson Atlanta International", "city": "Atlanta", "lat": 33.6407, "lng": -84.4277},
    "LAX": {"name": "Los Angeles International", "city": "Los Angeles", "lat": 33.9425, "lng": -118.4081},
    "ORD": {"name": "O'Hare International", "city": "Chicago", "lat": 41.9742, "lng": -87.9073},
    "DFW": {"name": "Dallas/Fort Worth International", "city": "Dallas", "lat": 32.8998, "lng": -97.0403},
    "DEN": {"name": "Denver International", "city": "Denver", "lat": 39.8561, "lng": -104.6737},
    "JFK": {"name": "John F Kennedy International", "city": "New York", "lat": 40.6413, "lng": -73.7781},
    "SFO": {"name": "San Francisco International", "city": "San Francisco", "lat": 37.6213, "lng": -122.3790},
    "SEA": {"name": "Seattle-Tacoma International", "city": "Seattle", "lat": 47.4502, "lng": -122.3088},
    "MIA": {"name": "Miami International", "city": "Miami", "lat": 25.7959, "lng": -80.2870},
    "BOS": {"name": "Boston Logan International", "city": "Boston", "lat": 42.3656, "lng": -71.0096},
    "LHR": {"name": "Heathrow", "city": "London", "lat": 51.4700, "lng": -0.4543},
    "CDG": {"name": "Charles de Gaulle", "city": "Paris", "lat": 49.0097, "lng": 2.5479},
    "FRA": {"name": "Frankfurt am Main", "city": "Frankfurt", "lat": 50.0379, "lng": 8.5622},
    "AMS": {"name": "Amsterdam Schiphol", "city": "Amsterdam", "lat": 52.3105, "lng": 4.7683},
    "DXB": {"name": "Dubai International", "city": "Dubai", "lat": 25.2532, "lng": 55.3657},
    "LOS": {"name": "Murtala Muhammed International", "city": "Lagos", "lat": 6.5774, "lng": 3.3212},
    "NRT": {"name": "Narita International", "city": "Tokyo", "lat": 35.7720, "lng": 140.3929},
}

AIRLINES = {
    "AA": "American Airlines",
    "DL": "Delta Air Lines",
    "UA": "United Airlines",
    "BA": "British Airways",
    "AF": "Air France",
    "LH": "Lufthansa",
    "EK": "Emirates",
    "SA": "Sky Airlines",
}

DEPARTURE_HOURS = [6, 8, 10, 13, 16, 19, 21]


def _haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in miles."""
    r = 3959
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(dlng / 2) ** 2)
    return r * 2 * math.asin(math.sqrt(a))


def _flight_duration_minutes(distance_miles: float) -> int:
    """Estimate flight time: ~500 mph cruise + 30 min taxi/climb/descent."""
    return int(distance_miles / 500 * 60) + 30


class FlightNotFoundError(BookingError):
    """Flight identifier is not known to the catalog."""
    pass


class MockFlightCatalog:
    """
    In-memory flight catalog with deterministic generation.

    Flights returned by search() are remembered so get_flight() can resolve
    them later, the same way a real catalog resolves a selected offer.
    """

    def __init__(self, seed: int = 0, currency: str = "USD", max_results: int = 5):
        """
        Initialize the catalog.

        Args:
            seed: Base seed mixed into every route/date generation
            currency: Currency of generated fares
            max_results: Upper bound on flights returned per search
        """
        self.seed = seed
        self.currency = currency
        self.max_results = max_results
        self._flights: Dict[str, FlightModel] = {}

    def add_flight(self, flight: FlightModel) -> FlightModel:
        """Register a fixed flight (useful for fixtures)."""
        self._flights[flight.flight_id] = flight
        return flight

    def get_flight(self, flight_id: str) -> FlightModel:
        """
        Look up a flight by identifier.

        Raises:
            FlightNotFoundError: If the flight was never searched or added
        """
        flight = self._flights.get(flight_id)
        if flight is None:
            raise FlightNotFoundError(f"Flight {flight_id} not found")
        return flight.model_copy(deep=True)

    def search(
        self,
        origin: str,
        destination: str,
        departure_date: Union[date, str],
        passengers: int = 1,
    ) -> List[FlightModel]:
        """
        Search flights between two airports on a date.

        Args:
            origin: Origin IATA code
            destination: Destination IATA code
            departure_date: Travel date (date or YYYY-MM-DD string)
            passengers: Seats needed; flights with less capacity are skipped

        Returns:
            List[FlightModel]: Flights sorted by departure time
        """
        origin, destination = origin.upper(), destination.upper()
        if isinstance(departure_date, str):
            departure_date = datetime.strptime(departure_date, "%Y-%m-%d").date()

        o = AIRPORTS.get(origin)
        d = AIRPORTS.get(destination)
        if not o or not d or origin == destination:
            logger.info(f"No flights for {origin}->{destination}")
            return []

        rng = random.Random(f"{self.seed}:{origin}:{destination}:{departure_date.isoformat()}")
        distance = _haversine_miles(o["lat"], o["lng"], d["lat"], d["lng"])
        minutes = _flight_duration_minutes(distance)

        hours = list(DEPARTURE_HOURS)
        rng.shuffle(hours)
        count = min(rng.randint(3, 5), self.max_results)

        flights = []
        for i in range(count):
            code = rng.choice(sorted(AIRLINES))
            number = f"{code}{rng.randint(100, 9999)}"
            departure = datetime.combine(departure_date, datetime.min.time()).replace(
                hour=hours[i % len(hours)], minute=rng.choice([0, 15, 30, 45])
            )
            fare = Decimal(str(49 + distance * 0.11 + rng.uniform(0, 150))).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
            flight = FlightModel(
                flight_id=f"{number}-{departure_date.strftime('%Y%m%d')}",
                flight_number=number,
                airline=AIRLINES[code],
                origin=origin,
                destination=destination,
                scheduled_departure=departure,
                scheduled_arrival=departure + timedelta(minutes=minutes),
                fare=fare,
                currency=self.currency,
                remaining_capacity=rng.randint(0, 180),
            )
            if flight.remaining_capacity < passengers:
                continue
            self._flights[flight.flight_id] = flight
            flights.append(flight)

        flights.sort(key=lambda f: f.scheduled_departure)
        logger.info(f"Search {origin}->{destination} on {departure_date}: {len(flights)} flight(s)")
        return [f.model_copy(deep=True) for f in flights]

    def airport_name(self, iata: str) -> Optional[str]:
        airport = AIRPORTS.get(iata.upper())
        return airport["name"] if airport else None
