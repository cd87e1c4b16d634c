"""
Tests for the mock payment gateway.
"""

import pytest
from datetime import date
from decimal import Decimal

from airbooking.models import CardInstrumentModel
from airbooking.services import MockPaymentGateway, expiry_valid, luhn_valid

VALID_CARD = {
    "card_number": "4242424242424242",
    "holder_name": "Ada Lovelace",
    "expiry_month": 12,
    "expiry_year": date.today().year + 2,
    "cvv": "123",
}


class TestCardChecks:
    """Test card number and expiry checks."""

    @pytest.mark.parametrize("number", ["4242424242424242", "4242 4242 4242 4242", "5555555555554444", "378282246310005"])
    def test_luhn_valid(self, number):
        assert luhn_valid(number)

    @pytest.mark.parametrize("number", ["4242424242424241", "1234", "", "0000000000"])
    def test_luhn_invalid(self, number):
        assert not luhn_valid(number)

    def test_expiry(self):
        today = date(2026, 12, 15)
        assert expiry_valid(12, 2026, today=today)
        assert expiry_valid(1, 2027, today=today)
        assert not expiry_valid(11, 2026, today=today)
        assert not expiry_valid(13, 2027, today=today)


class TestMockPaymentGateway:
    """Test charge authorization and declines."""

    def test_successful_charge(self):
        gateway = MockPaymentGateway()
        outcome = gateway.charge(Decimal("380.00"), "USD", VALID_CARD)

        assert outcome.success is True
        assert outcome.failure_reason is None
        assert outcome.transaction_id.startswith("txn_")
        assert outcome.amount == Decimal("380.00")
        assert gateway.charges == [outcome]

    def test_accepts_card_model(self):
        outcome = MockPaymentGateway().charge(Decimal("10"), "EUR", CardInstrumentModel(**VALID_CARD))
        assert outcome.success is True

    @pytest.mark.parametrize("overrides,amount,currency,reason", [
        ({}, Decimal("0"), "USD", "Invalid amount"),
        ({}, Decimal("10"), "XYZ", "Unsupported currency XYZ"),
        ({"holder_name": ""}, Decimal("10"), "USD", "Invalid payment details"),
        ({"card_number": "4242424242424241"}, Decimal("10"), "USD", "Invalid card number"),
        ({"expiry_month": 1, "expiry_year": 2001}, Decimal("10"), "USD", "Card expired"),
        ({"cvv": "12"}, Decimal("10"), "USD", "Invalid CVV"),
    ])
    def test_declines(self, overrides, amount, currency, reason):
        outcome = MockPaymentGateway().charge(amount, currency, {**VALID_CARD, **overrides})

        assert outcome.success is False
        assert outcome.failure_reason == reason

    def test_failure_rate_declines(self):
        outcome = MockPaymentGateway(failure_rate=1.0).charge(Decimal("10"), "USD", VALID_CARD)

        assert outcome.success is False
        assert outcome.failure_reason == "Card declined by issuer"

    def test_seeded_failure_rate_is_repeatable(self):
        gateway_a = MockPaymentGateway(0.5, seed=1)
        gateway_b = MockPaymentGateway(0.5, seed=1)
        results_a = [gateway_a.charge(Decimal("10"), "USD", VALID_CARD).success for _ in range(20)]
        results_b = [gateway_b.charge(Decimal("10"), "USD", VALID_CARD).success for _ in range(20)]

        assert results_a == results_b

    def test_invalid_failure_rate(self):
        with pytest.raises(ValueError):
            MockPaymentGateway(failure_rate=1.5)
