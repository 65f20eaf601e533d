"""
Application services for looking up availability and submitting bookings.

The service coordinates fetching bookings via a client adapter and delegates
the slot computation to the domain-level ``SlotCalculator``. Computed slots
are an optimistic hint; the client's atomic ``create_booking`` decides who
actually gets a slot.
"""

from __future__ import annotations

import logging
import secrets
import string
from datetime import date as Date
from typing import List, Optional, Protocol, Sequence

from pendulum import DateTime

from ..domain.exceptions import ConflictError, InvalidDurationError, SlotUnavailableError
from ..domain.models import (
    AddOn,
    BookingConfirmation,
    BookingRecord,
    BookingRequest,
    PriceQuote,
    Service,
    Stylist,
)
from ..domain.schedule import get_schedule_for_date
from ..domain.slot_calculator import DEFAULT_TIMEZONE, SlotCalculator
from ..domain.time_utils import to_minutes

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = 0.05
CONFIRMATION_PREFIX = "BRG"
_CODE_ALPHABET = string.ascii_uppercase + string.digits


class BookingClientProtocol(Protocol):
    """Protocol describing the client behaviour needed by the service."""

    def get_services(self) -> List[Service]:
        """Return the service catalogue."""

    def get_add_ons(self) -> List[AddOn]:
        """Return available add-ons."""

    def get_stylists(self) -> List[Stylist]:
        """Return stylists with their weekly schedules."""

    def get_bookings(self, stylist_id: str, date: Date) -> List[BookingRecord]:
        """Return confirmed bookings for one stylist and date."""

    def create_booking(self, request: BookingRequest) -> BookingRecord:
        """Atomically create a booking or raise ConflictError."""


def generate_confirmation_code(length: int = 6) -> str:
    """Generate a customer-facing code such as ``BRG-7KQ2XM``."""
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))
    return f"{CONFIRMATION_PREFIX}-{suffix}"


class BookingService:
    """
    Orchestrates booking retrieval, slot calculation and submission.

    Dependency inversion toward a protocol makes it easy to plug in the real
    database adapter or the mock implementation in tests.
    """

    def __init__(
        self,
        client: BookingClientProtocol,
        slot_calculator: Optional[SlotCalculator] = None,
        tax_rate: float = DEFAULT_TAX_RATE,
        timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        self._client = client
        self._slot_calculator = slot_calculator or SlotCalculator(timezone=timezone)
        self._tax_rate = tax_rate

    @staticmethod
    def total_duration(service: Service, add_ons: Sequence[AddOn] = ()) -> int:
        """Service duration plus every selected add-on, in minutes."""
        return service.duration + sum(add_on.duration for add_on in add_ons)

    def quote(self, service: Service, add_ons: Sequence[AddOn] = ()) -> PriceQuote:
        subtotal = service.price + sum(add_on.price for add_on in add_ons)
        tax = subtotal * self._tax_rate
        return PriceQuote(
            subtotal=round(subtotal, 2),
            tax=round(tax, 2),
            total=round(subtotal + tax, 2),
        )

    @staticmethod
    def eligible_stylists(stylists: Sequence[Stylist], service: Optional[Service]) -> List[Stylist]:
        """Stylists offering ``service``; everyone when no service is chosen."""
        if service is None:
            return list(stylists)
        return [stylist for stylist in stylists if stylist.offers(service.id)]

    @staticmethod
    def recommended_add_ons(add_ons: Sequence[AddOn], service: Service) -> List[AddOn]:
        return [add_on for add_on in add_ons if service.id in add_on.recommended_for]

    def fetch_bookings(self, stylist: Stylist, date: Date) -> List[BookingRecord]:
        """
        Fetch bookings for the stylist and date.

        Rows for other stylists or dates are dropped so the engine only ever
        sees intervals that belong to the requested day.
        """
        bookings = self._client.get_bookings(stylist.id, date)
        return [
            booking for booking in bookings
            if booking.stylist_id == stylist.id and booking.date == date
        ]

    def available_slots(
        self,
        stylist: Stylist,
        date: Date,
        duration: int,
        now: Optional[DateTime] = None,
    ) -> List[str]:
        """
        Compute bookable start times for a stylist on a date.

        Returns an empty list when the stylist does not work that weekday.
        """
        schedule = get_schedule_for_date(stylist, date)
        if schedule is None:
            logger.debug("%s does not work on %s", stylist.id, date)
            return []

        bookings = self.fetch_bookings(stylist, date)

        slots = self._slot_calculator.generate_slots(
            schedule=schedule,
            date=date,
            requested_duration=duration,
            existing_bookings=bookings,
            now=now,
        )
        logger.debug(
            "%d slot(s) for %s on %s (%d min, %d booking(s))",
            len(slots),
            stylist.id,
            date,
            duration,
            len(bookings),
        )
        return slots

    def submit_booking(
        self,
        request: BookingRequest,
        quote: Optional[PriceQuote] = None,
        now: Optional[DateTime] = None,
    ) -> BookingConfirmation:
        """
        Submit a booking through the client's atomic create operation.

        The requested time is checked against freshly computed availability
        before anything is written.

        Raises:
            InvalidFormatError: If the requested time is malformed
            InvalidDurationError: If the duration is not positive
            SlotUnavailableError: If the date is past, the stylist is off that
                day, or the time is not currently an offered slot
            ConflictError: If the slot was taken since availability was computed
        """
        to_minutes(request.time)
        if request.duration <= 0:
            raise InvalidDurationError(
                f"Duration must be greater than zero, got {request.duration}"
            )

        current_time = now if now is not None else self._slot_calculator.now()
        if request.date < current_time.date():
            raise SlotUnavailableError(f"{request.date} is in the past")

        if get_schedule_for_date(request.stylist, request.date) is None:
            raise SlotUnavailableError(
                f"{request.stylist.name} does not work on {request.date}"
            )

        slots = self.available_slots(
            request.stylist, request.date, request.duration, now=current_time
        )
        if request.time not in slots:
            raise SlotUnavailableError(
                f"{request.time} on {request.date} is not available with {request.stylist.name}"
            )

        try:
            booking = self._client.create_booking(request)
        except ConflictError:
            logger.warning(
                "Slot %s on %s with %s was taken concurrently",
                request.time,
                request.date,
                request.stylist.id,
            )
            raise

        logger.info("Booking %s confirmed for %s", booking.id, request.stylist.id)
        return BookingConfirmation(
            booking=booking,
            confirmation_code=generate_confirmation_code(),
            quote=quote,
        )
