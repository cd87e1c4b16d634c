"""
Seat, baggage and insurance add-on models.

Seat and baggage selections reference passengers by position in the
session's passenger list.
"""

from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .enums import BaggageType


class SeatSelectionModel(BaseModel):
    """Seat chosen for one passenger position."""
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    passenger_index: int = Field(..., ge=0, description="Passenger position")
    seat_id: str = Field(..., min_length=1, description="Seat code (e.g., '12A')")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Seat price")

    @field_validator("seat_id")
    @classmethod
    def normalize_seat_id(cls, v: str) -> str:
        """Seat codes compare case-insensitively ("12a" is "12A")."""
        return v.upper()


class BaggageOptionModel(BaseModel):
    """Baggage add-on for one passenger position."""
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    passenger_index: int = Field(..., ge=0, description="Passenger position")
    type: BaggageType = Field(..., description="Carry-on or checked")
    weight: int = Field(..., ge=0, description="Allowance in kilograms")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Baggage price")
    description: str = Field(default="", description="Display label")


class InsuranceOptionModel(BaseModel):
    """Travel insurance add-on (at most one per session)."""
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    type: str = Field(..., min_length=1, description="Plan identifier (basic, premium, elite)")
    coverage: Decimal = Field(..., ge=0, description="Maximum coverage amount")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Insurance price")
    description: str = Field(default="", description="Display label")
