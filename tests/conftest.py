"""
Shared fixtures for booking session tests.
"""

import pytest

from tests.factories import FakeClock, NOW, make_flight, make_passenger


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def flight():
    return make_flight()


@pytest.fixture
def passengers():
    return [make_passenger(), make_passenger("Alan", "Turing")]
