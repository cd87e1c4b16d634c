"""
Payment models exchanged with the payment gateway.

The booking session never talks to a gateway itself; the caller charges the
instrument and feeds the resulting outcome back into the session manager.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class CardInstrumentModel(BaseModel):
    """Card details submitted on the payment step."""
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    card_number: str = Field(..., description="Primary account number, digits only")
    holder_name: str = Field(..., min_length=2, description="Name on card")
    expiry_month: int = Field(..., ge=1, le=12, description="Expiry month")
    expiry_year: int = Field(..., ge=2000, description="Four-digit expiry year")
    cvv: str = Field(..., description="Card verification value")

    @property
    def last4(self) -> str:
        return self.card_number[-4:]

    def __str__(self) -> str:
        """String representation hiding the card number."""
        return f"CardInstrumentModel(holder={self.holder_name}, last4={self.last4})"


class PaymentOutcomeModel(BaseModel):
    """
    Result of a charge attempt.

    ``success`` is the only field the session state machine depends on; the
    rest is recorded on the session for receipts and support.
    """
    model_config = ConfigDict(from_attributes=True)

    success: bool = Field(..., description="Whether the charge was authorized")
    failure_reason: Optional[str] = Field(None, description="Gateway decline reason")
    transaction_id: Optional[str] = Field(None, description="Gateway transaction reference")
    amount: Optional[Decimal] = Field(None, ge=0, description="Amount charged")
    currency: Optional[str] = Field(None, description="Currency charged")
    processed_at: datetime = Field(default_factory=datetime.now, description="Gateway response time")
