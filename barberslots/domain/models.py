"""
Domain models for stylist schedules, bookings and the catalogue.
"""

import re
from dataclasses import dataclass, field
from datetime import date as Date
from typing import Optional, Tuple

from .exceptions import InvalidCustomerError, InvalidDurationError, InvalidScheduleError
from .time_utils import to_minutes

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+()0-9\s-]+$")
MAX_NOTES_LENGTH = 500


@dataclass(frozen=True)
class ScheduleBlock:
    """
    A contiguous span of availability within one day.

    Invariant: start must be before end.
    """
    start: str
    end: str

    def __post_init__(self):
        if self.start_minutes >= self.end_minutes:
            raise InvalidScheduleError(
                f"Start time {self.start} must be before end time {self.end}"
            )

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end)

    def overlaps(self, other: "ScheduleBlock") -> bool:
        """Check if this span overlaps with another (touching is not overlap)."""
        return self.start_minutes < other.end_minutes and self.end_minutes > other.start_minutes

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


@dataclass(frozen=True)
class ScheduleBreak(ScheduleBlock):
    """
    A span during which the stylist is unavailable (e.g. lunch).

    Not required to sit inside a block; it is simply blocked time.
    """


@dataclass(frozen=True)
class StylistScheduleEntry:
    """
    One weekday's recurring schedule for one stylist.

    ``day`` follows the 0=Sunday..6=Saturday convention.
    """
    day: int
    blocks: Tuple[ScheduleBlock, ...] = ()
    breaks: Tuple[ScheduleBreak, ...] = ()

    def __post_init__(self):
        if not 0 <= self.day <= 6:
            raise InvalidScheduleError(f"Weekday must be between 0 and 6, got {self.day}")

        # Accept lists from callers but store immutable tuples
        object.__setattr__(self, "blocks", tuple(self.blocks))
        object.__setattr__(self, "breaks", tuple(self.breaks))

        for idx, block in enumerate(self.blocks):
            for other in self.blocks[idx + 1:]:
                if block.overlaps(other):
                    raise InvalidScheduleError(
                        f"Schedule blocks {block} and {other} overlap on day {self.day}"
                    )


@dataclass(frozen=True)
class Stylist:
    """A stylist and their ordered weekly schedule."""
    id: str
    name: str
    schedule: Tuple[StylistScheduleEntry, ...] = ()
    title: str = ""
    bio: str = ""
    specialties: Tuple[str, ...] = ()
    years_experience: int = 0
    rating: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "schedule", tuple(self.schedule))
        object.__setattr__(self, "specialties", tuple(self.specialties))

    def offers(self, service_id: str) -> bool:
        return service_id in self.specialties


@dataclass(frozen=True)
class BookingRecord:
    """
    An existing confirmed reservation.

    The slot engine only reads ``time`` and ``duration``.
    """
    id: str
    stylist_id: str
    date: Date
    time: str
    duration: int
    service_id: str = ""
    add_on_ids: Tuple[str, ...] = ()
    client_name: str = ""
    client_email: str = ""
    client_phone: str = ""
    notes: Optional[str] = None
    marketing_consent: bool = False

    def __post_init__(self):
        to_minutes(self.time)
        if self.duration <= 0:
            raise InvalidDurationError(
                f"Booking {self.id} has a non-positive duration: {self.duration}"
            )
        object.__setattr__(self, "add_on_ids", tuple(self.add_on_ids))

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration


@dataclass(frozen=True)
class BlockedInterval:
    """Half-open ``[start, end)`` interval in minutes since midnight."""
    start: int
    end: int

    def overlaps(self, start: int, end: int) -> bool:
        """Check if the candidate ``[start, end)`` intersects this interval."""
        return start < self.end and end > self.start


@dataclass(frozen=True)
class Service:
    """A bookable service from the catalogue."""
    id: str
    name: str
    duration: int
    price: float
    category: str = ""
    description: str = ""
    includes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AddOn:
    """An optional extra that lengthens and prices up a service."""
    id: str
    name: str
    duration: int
    price: float
    description: str = ""
    recommended_for: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CustomerDetails:
    """
    Contact details collected before a booking is submitted.

    Fields are stripped of surrounding whitespace; blank notes become None.
    """
    name: str
    email: str
    phone: str
    notes: Optional[str] = None
    marketing_consent: bool = False

    def __post_init__(self):
        name = (self.name or "").strip()
        email = (self.email or "").strip()
        phone = (self.phone or "").strip()
        notes = (self.notes or "").strip() or None

        if len(name) < 2:
            raise InvalidCustomerError("Please share your full name.")
        if not EMAIL_PATTERN.match(email):
            raise InvalidCustomerError(f"Invalid email address: {email!r}")
        if len(phone) < 7:
            raise InvalidCustomerError("Phone number is required for confirmations.")
        if not PHONE_PATTERN.match(phone):
            raise InvalidCustomerError("Phone number may only contain digits, spaces, +, - and ().")
        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise InvalidCustomerError(f"Notes must be {MAX_NOTES_LENGTH} characters or fewer.")

        object.__setattr__(self, "name", name)
        object.__setattr__(self, "email", email)
        object.__setattr__(self, "phone", phone)
        object.__setattr__(self, "notes", notes)


@dataclass(frozen=True)
class BookingRequest:
    """Everything the atomic create-booking call needs."""
    service: Service
    stylist: Stylist
    date: Date
    time: str
    duration: int
    customer: CustomerDetails
    add_on_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PriceQuote:
    subtotal: float
    tax: float
    total: float


@dataclass(frozen=True)
class BookingConfirmation:
    """
    Result of a successful booking submission.
    """
    booking: BookingRecord
    confirmation_code: str
    quote: Optional[PriceQuote] = None
