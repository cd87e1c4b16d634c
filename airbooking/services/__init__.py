"""
Business logic services for the booking session core.

This module contains the booking session manager, its typed errors, the
pricing functions, and the collaborators the booking flow talks to: the
flight catalog, the payment gateway, the document renderer and the
session store.
"""

from .errors import (
    BookingError,
    InvalidFlightError,
    ValidationError,
    SeatConflictError,
    PreconditionError,
    ImmutableSessionError,
    CancellationWindowError,
)
from .pricing import compute_total, price_breakdown
from .booking_session_manager import BookingSessionManager, generate_reference
from .flight_catalog import MockFlightCatalog, FlightNotFoundError
from .payment_gateway import MockPaymentGateway, luhn_valid, expiry_valid
from .document_renderer import DocumentRenderer
from .session_store import BookingSessionStore

__all__ = [
    'BookingError',
    'InvalidFlightError',
    'ValidationError',
    'SeatConflictError',
    'PreconditionError',
    'ImmutableSessionError',
    'CancellationWindowError',
    'compute_total',
    'price_breakdown',
    'BookingSessionManager',
    'generate_reference',
    'MockFlightCatalog',
    'FlightNotFoundError',
    'MockPaymentGateway',
    'luhn_valid',
    'expiry_valid',
    'DocumentRenderer',
    'BookingSessionStore',
]
