"""
Mock payment gateway.

Validates card instruments the way a hosted checkout would (Luhn checksum,
expiry and CVV) and authorizes or declines the charge. A configurable
failure rate simulates issuer declines so retry paths can be exercised.
"""

import logging
import random
import re
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..models.payment import CardInstrumentModel, PaymentOutcomeModel

logger = logging.getLogger(__name__)

CVV_PATTERN = re.compile(r"^\d{3,4}$")
SUPPORTED_CURRENCIES = {"USD", "EUR", "GBP", "JPY", "CAD", "AUD", "NGN"}


def luhn_valid(card_number: str) -> bool:
    """Check a card number against the Luhn checksum."""
    digits = re.sub(r"\D", "", card_number)
    if not 12 <= len(digits) <= 19:
        return False

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def expiry_valid(month: int, year: int, today: Optional[date] = None) -> bool:
    """Cards are valid through the end of their expiry month."""
    today = today or date.today()
    if not 1 <= month <= 12:
        return False
    return (year, month) >= (today.year, today.month)


class MockPaymentGateway:
    """
    Payment gateway stand-in returning PaymentOutcomeModel results.

    Never raises for a declined charge: declines are outcomes, which the
    caller passes to BookingSessionManager.apply_payment_result().
    """

    def __init__(self, failure_rate: float = 0.0, seed: Optional[int] = None):
        """
        Initialize the gateway.

        Args:
            failure_rate: Probability (0.0-1.0) that a valid charge is declined
            seed: Seed for the decline simulation
        """
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0.0 and 1.0")
        self.failure_rate = failure_rate
        self._rng = random.Random(seed)
        self.charges: List[PaymentOutcomeModel] = []

    def charge(
        self,
        amount: Decimal,
        currency: str,
        instrument: Union[CardInstrumentModel, Mapping[str, Any]],
    ) -> PaymentOutcomeModel:
        """
        Authorize a charge.

        Args:
            amount: Amount to charge
            currency: ISO 4217 currency code
            instrument: Card details

        Returns:
            PaymentOutcomeModel: success, or failure with a reason
        """
        amount = Decimal(str(amount))
        reason = self._decline_reason(amount, currency, instrument)

        if reason is None and self.failure_rate and self._rng.random() < self.failure_rate:
            reason = "Card declined by issuer"

        outcome = PaymentOutcomeModel(
            success=reason is None,
            failure_reason=reason,
            transaction_id=f"txn_{uuid.uuid4().hex[:12]}",
            amount=amount if amount >= 0 else None,
            currency=currency,
        )
        self.charges.append(outcome)

        if outcome.success:
            logger.info(f"Charge {outcome.transaction_id} authorized: {amount} {currency}")
        else:
            logger.warning(f"Charge {outcome.transaction_id} declined: {reason}")
        return outcome

    def _decline_reason(
        self, amount: Decimal, currency: str, instrument: Union[CardInstrumentModel, Mapping[str, Any]]
    ) -> Optional[str]:
        if amount <= 0:
            return "Invalid amount"
        if currency.upper() not in SUPPORTED_CURRENCIES:
            return f"Unsupported currency {currency}"

        try:
            card = (
                instrument if isinstance(instrument, CardInstrumentModel)
                else CardInstrumentModel.model_validate(instrument)
            )
        except PydanticValidationError:
            return "Invalid payment details"

        if not luhn_valid(card.card_number):
            return "Invalid card number"
        if not expiry_valid(card.expiry_month, card.expiry_year):
            return "Card expired"
        if not CVV_PATTERN.match(card.cvv):
            return "Invalid CVV"
        return None
