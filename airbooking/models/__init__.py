"""
Booking session Pydantic models package.

This package contains all Pydantic v2 models used by the booking session
core for data validation, serialization, and type safety.
"""

# Enums
from .enums import (
    BookingStatus,
    PaymentStatus,
    PassengerType,
    BaggageType,
    FlightStatus,
)

# Flight, passenger and add-on models
from .flight import FlightModel

from .passenger import (
    PassengerModel,
    ContactModel,
)

from .extras import (
    SeatSelectionModel,
    BaggageOptionModel,
    InsuranceOptionModel,
)

# Payment models
from .payment import (
    CardInstrumentModel,
    PaymentOutcomeModel,
)

# Session aggregate
from .session import (
    BookingSessionModel,
    PriceLineModel,
)

__all__ = [
    # Enums
    "BookingStatus",
    "PaymentStatus",
    "PassengerType",
    "BaggageType",
    "FlightStatus",

    # Core models
    "FlightModel",
    "PassengerModel",
    "ContactModel",

    # Add-on models
    "SeatSelectionModel",
    "BaggageOptionModel",
    "InsuranceOptionModel",

    # Payment models
    "CardInstrumentModel",
    "PaymentOutcomeModel",

    # Session models
    "BookingSessionModel",
    "PriceLineModel",
]
