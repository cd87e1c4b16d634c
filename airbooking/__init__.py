"""
airbooking: booking-session core for an airline booking application.

Holds one traveller's in-progress booking (flight, passengers, seats, baggage,
insurance, contact and payment state) across the steps of a booking wizard
and enforces the rules for moving it from draft to a confirmed or cancelled
booking.
"""

__version__ = "0.1.0"
