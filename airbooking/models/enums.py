"""
Enums for the booking session domain.

This module contains all enumeration types used by the booking session
aggregate and its collaborators for consistent validation and serialization.
"""

from enum import Enum


class BookingStatus(str, Enum):
    """Lifecycle status of a booking session."""
    DRAFT = "draft"
    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment state tracked alongside the booking status."""
    UNPAID = "unpaid"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PassengerType(str, Enum):
    """Fare category of a passenger."""
    ADULT = "adult"
    CHILD = "child"
    INFANT = "infant"


class BaggageType(str, Enum):
    """Baggage add-on categories."""
    CARRY_ON = "carry-on"
    CHECKED = "checked"


class FlightStatus(str, Enum):
    """Operational status reported by the flight catalog."""
    SCHEDULED = "scheduled"
    DELAYED = "delayed"
    CANCELLED = "cancelled"
    BOARDING = "boarding"
    DEPARTED = "departed"
    ARRIVED = "arrived"
