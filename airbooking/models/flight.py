"""
Flight models for the booking session domain.

A booking session keeps a cached copy of the chosen flight: its identifier,
the display fields shown on every wizard page, and the fare the total is
computed from.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, AliasChoices

from .enums import FlightStatus


class FlightModel(BaseModel):
    """
    Flight reference held by a booking session.

    Only ``flight_id`` and ``fare`` are required; the remaining fields are
    cached display data supplied by the flight catalog.
    """
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, str_strip_whitespace=True)

    flight_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("flight_id", "id"),
        description="Catalog flight identifier",
    )
    fare: Decimal = Field(
        ..., ge=0, max_digits=10, decimal_places=2, validation_alias=AliasChoices("fare", "price"),
        description="Base fare per booking",
    )
    currency: str = Field(default="USD", min_length=3, max_length=3, description="ISO 4217 currency code")
    flight_number: Optional[str] = Field(None, max_length=8, description="Marketing flight number")
    airline: Optional[str] = Field(None, description="Operating carrier name")
    origin: Optional[str] = Field(None, description="Departure airport IATA code")
    destination: Optional[str] = Field(None, description="Arrival airport IATA code")
    scheduled_departure: Optional[datetime] = Field(None, description="Scheduled departure time")
    scheduled_arrival: Optional[datetime] = Field(None, description="Scheduled arrival time")
    remaining_capacity: Optional[int] = Field(None, ge=0, description="Seats still for sale")
    status: FlightStatus = Field(default=FlightStatus.SCHEDULED, description="Operational status")

    @property
    def route(self) -> str:
        return f"{self.origin or '?'} → {self.destination or '?'}"
