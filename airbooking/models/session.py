"""
Booking session aggregate model.

This module contains the single mutable aggregate that represents one
traveller's in-progress booking, plus the price breakdown derived from it.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from .enums import BookingStatus, PaymentStatus
from .flight import FlightModel
from .passenger import PassengerModel, ContactModel
from .extras import SeatSelectionModel, BaggageOptionModel, InsuranceOptionModel


class BookingSessionModel(BaseModel):
    """
    In-progress booking held by a BookingSessionManager.

    ``total_price`` is stored for display and persistence only; it is always
    recomputed from the fare and add-ons after a mutation.
    """
    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    session_id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Session identifier")
    flight: Optional[FlightModel] = Field(None, description="Selected flight")
    passengers: List[PassengerModel] = Field(default_factory=list, description="Ordered passenger list")
    selected_seats: List[SeatSelectionModel] = Field(default_factory=list, description="Seat per passenger position")
    baggage_options: List[BaggageOptionModel] = Field(default_factory=list, description="Baggage add-ons")
    insurance: Optional[InsuranceOptionModel] = Field(None, description="Insurance add-on")
    contact: Optional[ContactModel] = Field(None, description="Booking contact")

    total_price: Decimal = Field(default=Decimal("0"), ge=0, description="Derived booking total")
    currency: str = Field(default="USD", description="Currency of the total")

    status: BookingStatus = Field(default=BookingStatus.DRAFT, description="Booking lifecycle status")
    payment_status: PaymentStatus = Field(default=PaymentStatus.UNPAID, description="Payment state")

    reference: Optional[str] = Field(None, description="Booking reference, assigned on confirmation")
    transaction_id: Optional[str] = Field(None, description="Last payment transaction reference")
    failure_reason: Optional[str] = Field(None, description="Last payment decline reason")
    cancellation_reason: Optional[str] = Field(None, description="Reason given on cancellation")

    created_at: Optional[datetime] = Field(None, description="Time of the first mutation")
    updated_at: Optional[datetime] = Field(None, description="Time of the last mutation")
    cancelled_at: Optional[datetime] = Field(None, description="Cancellation time")

    def seat_for(self, passenger_index: int) -> Optional[SeatSelectionModel]:
        """Return the seat selection for a passenger position, if any."""
        for seat in self.selected_seats:
            if seat.passenger_index == passenger_index:
                return seat
        return None

    def baggage_for(self, passenger_index: int) -> List[BaggageOptionModel]:
        """Return the baggage add-ons for a passenger position."""
        return [b for b in self.baggage_options if b.passenger_index == passenger_index]


class PriceLineModel(BaseModel):
    """One line of a booking price breakdown."""
    model_config = ConfigDict(from_attributes=True)

    description: str
    quantity: int = Field(default=1, ge=1)
    amount: Decimal = Field(..., ge=0)

    @property
    def total(self) -> Decimal:
        return self.amount * self.quantity
