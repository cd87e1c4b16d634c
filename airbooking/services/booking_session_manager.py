"""
Booking session manager enforcing the booking state machine.

This module implements the core of the booking flow:
- One BookingSessionModel aggregate per manager instance (no shared state)
- Passenger, seat, baggage, insurance and contact mutations with validation
- Status transitions draft -> pending_payment -> confirmed | cancelled
- Copy-on-write commits so a rejected operation never leaves partial updates

The manager performs no I/O. Flight lookups and payment charges happen in the
caller, whose results are fed back in through start_session() and
apply_payment_result().
"""

import logging
import secrets
import string
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from ..models.enums import BaggageType, BookingStatus, PaymentStatus
from ..models.extras import BaggageOptionModel, InsuranceOptionModel, SeatSelectionModel
from ..models.flight import FlightModel
from ..models.passenger import ContactModel, PassengerModel
from ..models.payment import PaymentOutcomeModel
from ..models.session import BookingSessionModel
from .errors import (
    CancellationWindowError,
    ImmutableSessionError,
    InvalidFlightError,
    PreconditionError,
    SeatConflictError,
    ValidationError,
    violations_from_pydantic,
)
from .pricing import compute_total

logger = logging.getLogger(__name__)

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 6

Clock = Callable[[], datetime]


def generate_reference() -> str:
    """Generate a 6-character booking reference (e.g. 'K7Q2ZD')."""
    return "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_LENGTH))


def _is_after(moment: datetime, now: datetime) -> bool:
    """Compare datetimes, treating a naive side as local time."""
    if (moment.tzinfo is None) != (now.tzinfo is None):
        moment = moment.astimezone() if moment.tzinfo is None else moment
        now = now.astimezone() if now.tzinfo is None else now
    return moment > now


class BookingSessionManager:
    """
    Owner of one in-progress booking.

    Features:
    - Constructor-injected, one instance per traveller flow
    - Every public mutation validates fully before anything is applied
    - total_price and updated_at are refreshed on every successful mutation
    - Confirmed and cancelled sessions are locked against further edits
    """

    def __init__(
        self,
        session: Optional[Union[BookingSessionModel, Mapping[str, Any]]] = None,
        clock: Optional[Clock] = None,
        default_currency: str = "USD",
        reference_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the manager, optionally restoring a persisted session.

        Args:
            session: Previously saved session (model or its dumped mapping)
            clock: Callable returning the current time, defaults to datetime.now
            default_currency: Currency used until a flight is selected
            reference_factory: Callable producing booking references on confirmation
        """
        self._clock = clock or datetime.now
        self._default_currency = default_currency
        self._reference_factory = reference_factory or generate_reference

        if session is None:
            self._session = BookingSessionModel(currency=default_currency)
        elif isinstance(session, BookingSessionModel):
            self._session = session.model_copy(deep=True)
        else:
            self._session = BookingSessionModel.model_validate(session)

        logger.debug(f"BookingSessionManager initialized for session {self._session.session_id}")

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def session(self) -> BookingSessionModel:
        """Snapshot of the held session; edits to it do not reach the manager."""
        return self._session.model_copy(deep=True)

    @property
    def session_id(self) -> str:
        return self._session.session_id

    @property
    def status(self) -> BookingStatus:
        return self._session.status

    @property
    def payment_status(self) -> PaymentStatus:
        return self._session.payment_status

    def compute_total(self) -> Decimal:
        """Recompute the booking total from fare and add-ons."""
        return compute_total(self._session)

    def missing_requirements(self) -> List[str]:
        """
        List every unmet requirement for requesting payment.

        Returns:
            List[str]: Empty when the session is payable
        """
        session = self._session
        missing = []
        if session.status != BookingStatus.DRAFT:
            missing.append("draft status")
        if session.flight is None:
            missing.append("flight")
        if not session.passengers:
            missing.append("passengers")
        if session.contact is None:
            missing.append("contact")
        return missing

    def confirmed_session(self) -> BookingSessionModel:
        """
        Return the finalized session for document rendering.

        Raises:
            PreconditionError: If the session is not confirmed
        """
        if self._session.status != BookingStatus.CONFIRMED:
            raise PreconditionError(["confirmed status"], "render documents")
        return self.session

    # ------------------------------------------------------------------
    # Flight and passengers
    # ------------------------------------------------------------------

    def start_session(self, flight: Union[FlightModel, Mapping[str, Any]]) -> BookingSessionModel:
        """
        Start a new draft session for the selected flight.

        Only a draft is replaced. A booking that reached payment, confirmation
        or cancellation stays with this manager; a new booking flow uses a new
        manager.

        Raises:
            InvalidFlightError: If the flight lacks an identifier or fare
            ImmutableSessionError: If the held session is not a draft
        """
        if self._session.status != BookingStatus.DRAFT:
            self._reject("start session", f"session is {self._session.status.value}")
            raise ImmutableSessionError(self._session.status.value, "start a new session")

        flight_model = self._coerce_flight(flight)
        candidate = BookingSessionModel(flight=flight_model, currency=flight_model.currency)

        logger.info(
            f"Started session {candidate.session_id} for flight {flight_model.flight_id} "
            f"({flight_model.route}), fare {flight_model.fare} {flight_model.currency}"
        )
        return self._commit(candidate)

    def set_passengers(
        self, passengers: Sequence[Union[PassengerModel, Mapping[str, Any]]]
    ) -> BookingSessionModel:
        """
        Replace the passenger list.

        Seat and baggage records pointing at positions that no longer exist
        are removed along with the passengers.

        Raises:
            ValidationError: If the list is empty or any record is invalid
            ImmutableSessionError: If the session is locked
        """
        candidate = self._begin("set passengers")

        if isinstance(passengers, (str, bytes, Mapping)) or not isinstance(passengers, Sequence):
            self._reject("set passengers", f"unsupported value {type(passengers).__name__}")
            raise ValidationError({"passengers": "Passengers must be a list"})

        if not passengers:
            self._reject("set passengers", "empty passenger list")
            raise ValidationError({"passengers": "At least one passenger is required"})

        parsed: List[PassengerModel] = []
        violations: Dict[str, str] = {}
        for index, passenger in enumerate(passengers):
            try:
                if isinstance(passenger, PassengerModel):
                    parsed.append(PassengerModel.model_validate(passenger.model_dump()))
                else:
                    parsed.append(PassengerModel.model_validate(passenger))
            except PydanticValidationError as exc:
                violations.update(violations_from_pydantic(exc, f"passengers[{index}]"))

        if violations:
            self._reject("set passengers", f"{len(violations)} invalid field(s)")
            raise ValidationError(violations)

        count = len(parsed)
        kept_seats = [s for s in candidate.selected_seats if s.passenger_index < count]
        kept_baggage = [b for b in candidate.baggage_options if b.passenger_index < count]
        dropped = (len(candidate.selected_seats) - len(kept_seats),
                   len(candidate.baggage_options) - len(kept_baggage))
        if any(dropped):
            logger.info(
                f"Session {candidate.session_id}: dropped {dropped[0]} seat(s) and "
                f"{dropped[1]} baggage record(s) for removed passengers"
            )

        candidate.passengers = parsed
        candidate.selected_seats = kept_seats
        candidate.baggage_options = kept_baggage
        return self._commit(candidate)

    # ------------------------------------------------------------------
    # Seats
    # ------------------------------------------------------------------

    def select_seat(self, passenger_index: int, seat_id: str, price: Any) -> BookingSessionModel:
        """
        Assign or replace the seat for a passenger position.

        Raises:
            ValidationError: Unknown passenger position, empty seat or bad price
            SeatConflictError: Seat already held by another passenger position
            ImmutableSessionError: If the session is locked
        """
        candidate = self._begin("select seat")

        violations: Dict[str, str] = {}
        selection = None
        try:
            selection = SeatSelectionModel(passenger_index=passenger_index, seat_id=seat_id, price=price)
        except PydanticValidationError as exc:
            violations.update(violations_from_pydantic(exc))
        else:
            passenger_index = selection.passenger_index
            self._check_passenger_index(candidate, passenger_index, violations)

        if violations:
            self._reject("select seat", f"{len(violations)} invalid field(s)")
            raise ValidationError(violations)

        for seat in candidate.selected_seats:
            if seat.seat_id == selection.seat_id and seat.passenger_index != passenger_index:
                self._reject("select seat", f"seat {selection.seat_id} held by passenger {seat.passenger_index}")
                raise SeatConflictError(selection.seat_id, seat.passenger_index, passenger_index)

        seats = [s for s in candidate.selected_seats if s.passenger_index != passenger_index]
        seats.append(selection)
        candidate.selected_seats = sorted(seats, key=lambda s: s.passenger_index)

        logger.info(f"Session {candidate.session_id}: passenger {passenger_index} -> seat {selection.seat_id}")
        return self._commit(candidate)

    def remove_seat(self, passenger_index: int) -> BookingSessionModel:
        """Remove a passenger's seat; a no-op when none is selected."""
        candidate = self._begin("remove seat")

        if candidate.seat_for(passenger_index) is None:
            return self.session

        candidate.selected_seats = [s for s in candidate.selected_seats if s.passenger_index != passenger_index]
        return self._commit(candidate)

    # ------------------------------------------------------------------
    # Baggage and insurance
    # ------------------------------------------------------------------

    def add_baggage(
        self, passenger_index: int, option: Union[BaggageOptionModel, Mapping[str, Any]]
    ) -> BookingSessionModel:
        """
        Add a baggage option for a passenger position.

        Raises:
            ValidationError: Unknown passenger position or invalid option
            ImmutableSessionError: If the session is locked
        """
        candidate = self._begin("add baggage")

        if isinstance(option, BaggageOptionModel):
            data = option.model_dump()
        elif isinstance(option, Mapping):
            data = dict(option)
        else:
            self._reject("add baggage", f"unsupported option {type(option).__name__}")
            raise ValidationError({"option": "Baggage option must be a mapping or BaggageOptionModel"})
        data["passenger_index"] = passenger_index

        violations: Dict[str, str] = {}
        baggage = None
        try:
            baggage = BaggageOptionModel.model_validate(data)
        except PydanticValidationError as exc:
            violations.update(violations_from_pydantic(exc))
        else:
            self._check_passenger_index(candidate, baggage.passenger_index, violations)

        if violations:
            self._reject("add baggage", f"{len(violations)} invalid field(s)")
            raise ValidationError(violations)

        candidate.baggage_options = candidate.baggage_options + [baggage]
        return self._commit(candidate)

    def remove_baggage(self, passenger_index: int, baggage_type: Union[BaggageType, str]) -> BookingSessionModel:
        """Remove every baggage option of a type for a passenger; a no-op when none match."""
        candidate = self._begin("remove baggage")

        try:
            baggage_type = BaggageType(baggage_type)
        except ValueError:
            self._reject("remove baggage", f"unknown baggage type {baggage_type!r}")
            raise ValidationError({"type": f"Unknown baggage type {baggage_type!r}"})

        kept = [
            b for b in candidate.baggage_options
            if not (b.passenger_index == passenger_index and b.type == baggage_type)
        ]
        if len(kept) == len(candidate.baggage_options):
            return self.session

        candidate.baggage_options = kept
        return self._commit(candidate)

    def set_insurance(
        self, option: Optional[Union[InsuranceOptionModel, Mapping[str, Any]]]
    ) -> BookingSessionModel:
        """Select an insurance plan, or clear it with None."""
        candidate = self._begin("set insurance")

        if option is None:
            candidate.insurance = None
        else:
            try:
                candidate.insurance = (
                    InsuranceOptionModel.model_validate(option.model_dump())
                    if isinstance(option, InsuranceOptionModel)
                    else InsuranceOptionModel.model_validate(option)
                )
            except PydanticValidationError as exc:
                self._reject("set insurance", "invalid option")
                raise ValidationError(violations_from_pydantic(exc, "insurance"))

        return self._commit(candidate)

    # ------------------------------------------------------------------
    # Contact
    # ------------------------------------------------------------------

    def set_contact(self, email: str, phone: str) -> BookingSessionModel:
        """
        Set the booking contact.

        Raises:
            ValidationError: Invalid email and/or phone (both reported)
            ImmutableSessionError: If the session is locked
        """
        candidate = self._begin("set contact")

        try:
            candidate.contact = ContactModel(email=email, phone=phone)
        except PydanticValidationError as exc:
            self._reject("set contact", "invalid contact details")
            raise ValidationError(violations_from_pydantic(exc))

        return self._commit(candidate)

    # ------------------------------------------------------------------
    # Payment and cancellation
    # ------------------------------------------------------------------

    def request_payment(self) -> BookingSessionModel:
        """
        Move a complete draft to pending_payment.

        Raises:
            PreconditionError: Listing every unmet requirement
        """
        missing = self.missing_requirements()
        if missing:
            self._reject("request payment", f"missing {missing}")
            raise PreconditionError(missing, "request payment")

        candidate = self._session.model_copy(deep=True)
        candidate.status = BookingStatus.PENDING_PAYMENT

        logger.info(
            f"Session {candidate.session_id}: payment requested for "
            f"{candidate.total_price} {candidate.currency}"
        )
        return self._commit(candidate)

    def apply_payment_result(
        self, outcome: Union[PaymentOutcomeModel, Mapping[str, Any]]
    ) -> BookingSessionModel:
        """
        Record the gateway outcome for a pending payment.

        Success confirms and freezes the booking; failure returns it to draft
        so the traveller can retry or change details.

        Raises:
            PreconditionError: If no payment is pending
            ValidationError: If the outcome is malformed
        """
        if self._session.status != BookingStatus.PENDING_PAYMENT:
            self._reject("apply payment result", f"status is {self._session.status.value}")
            raise PreconditionError(["pending_payment status"], "apply payment result")

        try:
            if not isinstance(outcome, PaymentOutcomeModel):
                outcome = PaymentOutcomeModel.model_validate(outcome)
        except PydanticValidationError as exc:
            self._reject("apply payment result", "malformed outcome")
            raise ValidationError(violations_from_pydantic(exc, "outcome"))

        candidate = self._session.model_copy(deep=True)
        candidate.transaction_id = outcome.transaction_id

        if outcome.amount is not None and outcome.amount != candidate.total_price:
            logger.warning(
                f"Session {candidate.session_id}: charged {outcome.amount} "
                f"but total is {candidate.total_price}"
            )

        if outcome.success:
            candidate.status = BookingStatus.CONFIRMED
            candidate.payment_status = PaymentStatus.PAID
            candidate.failure_reason = None
            candidate.reference = self._reference_factory()
            logger.info(f"Session {candidate.session_id}: confirmed with reference {candidate.reference}")
        else:
            candidate.status = BookingStatus.DRAFT
            candidate.payment_status = PaymentStatus.FAILED
            candidate.failure_reason = outcome.failure_reason or "Payment declined"
            logger.warning(f"Session {candidate.session_id}: payment failed ({candidate.failure_reason})")

        return self._commit(candidate)

    def cancel(self, reason: Optional[str] = None) -> BookingSessionModel:
        """
        Cancel the booking, refunding it if it was paid.

        Raises:
            PreconditionError: If the session is already cancelled
            CancellationWindowError: Confirmed booking whose departure has passed
        """
        session = self._session
        if session.status == BookingStatus.CANCELLED:
            self._reject("cancel", "already cancelled")
            raise PreconditionError(["active booking"], "cancel")

        now = self._clock()
        if session.status == BookingStatus.CONFIRMED:
            departure = session.flight.scheduled_departure if session.flight else None
            if departure is None or not _is_after(departure, now):
                self._reject("cancel", "departure has passed")
                raise CancellationWindowError(departure, now)

        candidate = session.model_copy(deep=True)
        candidate.status = BookingStatus.CANCELLED
        candidate.cancellation_reason = reason
        candidate.cancelled_at = now
        if candidate.payment_status == PaymentStatus.PAID:
            candidate.payment_status = PaymentStatus.REFUNDED

        logger.info(
            f"Session {candidate.session_id}: cancelled "
            f"(payment {candidate.payment_status.value}, reason={reason!r})"
        )
        return self._commit(candidate, now)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin(self, operation: str) -> BookingSessionModel:
        """Return a working copy if the session accepts edits."""
        if self._session.status != BookingStatus.DRAFT:
            self._reject(operation, f"session is {self._session.status.value}")
            raise ImmutableSessionError(self._session.status.value, operation)
        return self._session.model_copy(deep=True)

    def _commit(self, candidate: BookingSessionModel, now: Optional[datetime] = None) -> BookingSessionModel:
        """Recompute derived fields, stamp, and swap in the working copy."""
        now = now or self._clock()
        candidate.total_price = compute_total(candidate)
        if candidate.flight is not None:
            candidate.currency = candidate.flight.currency
        if candidate.created_at is None:
            candidate.created_at = now
        candidate.updated_at = now

        self._session = candidate
        return self.session

    def _reject(self, operation: str, detail: str) -> None:
        logger.warning(f"Session {self._session.session_id}: {operation} rejected ({detail})")

    @staticmethod
    def _check_passenger_index(
        session: BookingSessionModel, passenger_index: int, violations: Dict[str, str]
    ) -> None:
        if not 0 <= passenger_index < len(session.passengers):
            violations.setdefault("passenger_index", f"No passenger at position {passenger_index}")

    @staticmethod
    def _coerce_flight(flight: Union[FlightModel, Mapping[str, Any]]) -> FlightModel:
        """Validate a flight reference from the catalog."""
        if isinstance(flight, FlightModel):
            data = flight.model_dump()
        elif isinstance(flight, Mapping):
            data = dict(flight)
        else:
            raise InvalidFlightError(f"Unsupported flight reference: {type(flight).__name__}")

        missing = []
        if data.get("flight_id", data.get("id")) in (None, ""):
            missing.append("flight_id")
        if data.get("fare", data.get("price")) is None:
            missing.append("fare")
        if missing:
            logger.warning(f"start_session rejected: flight missing {missing}")
            raise InvalidFlightError(f"Flight reference is missing {', '.join(missing)}", missing)

        try:
            return FlightModel.model_validate(data)
        except PydanticValidationError as exc:
            violations = violations_from_pydantic(exc, "flight")
            logger.warning(f"start_session rejected: invalid flight {violations}")
            raise InvalidFlightError(f"Invalid flight reference: {violations}", list(violations))
