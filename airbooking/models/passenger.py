"""
Passenger and contact models for the booking session domain.

This module contains the passenger records entered on the passenger step of
the booking wizard and the contact details required before payment.
"""

import re
from datetime import date
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .enums import PassengerType

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-\(\)]{10,}$")


class PassengerModel(BaseModel):
    """
    Passenger information model with validation.

    Passengers are referenced by their position in the session's passenger
    list, so the model carries no identifier of its own.
    """
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    first_name: str = Field(..., min_length=1, max_length=100, description="First name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name")
    date_of_birth: date = Field(..., description="Date of birth")
    type: PassengerType = Field(..., description="Passenger fare category")
    gender: Optional[str] = Field(None, description="male, female or other")
    nationality: Optional[str] = Field(None, description="Nationality")
    passport_number: Optional[str] = Field(None, max_length=9, description="Passport number")
    passport_expiry: Optional[date] = Field(None, description="Passport expiry date")
    special_assistance: bool = Field(default=False, description="Requires special assistance")
    dietary_requirements: List[str] = Field(default_factory=list, description="Meal requests")
    frequent_flyer_number: Optional[str] = Field(None, description="Loyalty programme number")

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: date) -> date:
        """Reject dates of birth in the future."""
        if v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ContactModel(BaseModel):
    """Booking contact details used for confirmations."""
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    email: str = Field(..., description="Contact email address")
    phone: str = Field(..., description="Contact phone number")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if not PHONE_PATTERN.match(v):
            raise ValueError("Please enter a valid phone number")
        return v
