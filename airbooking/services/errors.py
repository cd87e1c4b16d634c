"""
Typed errors raised by the booking session manager.

Every error is local, synchronous and recoverable: the caller surfaces it to
the traveller, who corrects the input and retries. A raised error always
means the session was left unchanged.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError


class BookingError(Exception):
    """Base class for booking session errors."""
    pass


class InvalidFlightError(BookingError):
    """Flight reference is unusable (missing identifier or fare)."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class ValidationError(BookingError):
    """
    Field-level validation failure.

    ``violations`` maps a field path (e.g. ``passengers[1].first_name``) to a
    human-readable message; all violations found are reported together.
    """

    def __init__(self, violations: Dict[str, str]):
        self.violations = dict(violations)
        details = "; ".join(f"{field}: {message}" for field, message in self.violations.items())
        super().__init__(f"Validation failed: {details}")


class SeatConflictError(BookingError):
    """Seat is already assigned to a different passenger position."""

    def __init__(self, seat_id: str, holder_index: int, passenger_index: int):
        self.seat_id = seat_id
        self.holder_index = holder_index
        self.passenger_index = passenger_index
        super().__init__(
            f"Seat {seat_id} is already assigned to passenger {holder_index}"
        )


class PreconditionError(BookingError):
    """One or more preconditions of an operation are unmet."""

    def __init__(self, missing: Iterable[str], operation: str = "operation"):
        self.missing = list(missing)
        self.operation = operation
        super().__init__(f"Cannot perform {operation}: missing {', '.join(self.missing)}")


class ImmutableSessionError(BookingError):
    """Session is locked against mutation in its current status."""

    def __init__(self, status: str, operation: str):
        self.status = status
        self.operation = operation
        super().__init__(f"Cannot {operation}: session is {status}")


class CancellationWindowError(BookingError):
    """Confirmed booking can no longer be cancelled."""

    def __init__(self, departure: Optional[datetime], now: datetime):
        self.departure = departure
        self.now = now
        if departure is None:
            message = "Cannot cancel: departure time is unknown"
        else:
            message = f"Cannot cancel: departure {departure.isoformat()} is not after {now.isoformat()}"
        super().__init__(message)


def violations_from_pydantic(exc: PydanticValidationError, prefix: str = "") -> Dict[str, str]:
    """
    Flatten a pydantic ValidationError into field-path -> message pairs.

    Args:
        exc: Error raised by pydantic model validation
        prefix: Path prepended to every field (e.g. ``passengers[0]``)

    Returns:
        Dict[str, str]: Violations keyed by dotted field path
    """
    violations: Dict[str, str] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
        field = ".".join(part for part in (prefix, location) if part) or prefix or "value"
        message = error.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        violations.setdefault(field, message)
    return violations
