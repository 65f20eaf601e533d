"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    BookingAPIError,
    BookingError,
    ConflictError,
    InvalidCustomerError,
    InvalidDurationError,
    InvalidFormatError,
    InvalidScheduleError,
    MappingError,
    SlotUnavailableError,
)
from .models import (
    AddOn,
    BlockedInterval,
    BookingConfirmation,
    BookingRecord,
    BookingRequest,
    CustomerDetails,
    PriceQuote,
    ScheduleBlock,
    ScheduleBreak,
    Service,
    Stylist,
    StylistScheduleEntry,
)
from .schedule import get_schedule_for_date, stylist_works_on_date, weekday_index
from .slot_calculator import (
    DEFAULT_TIMEZONE,
    SLOT_GRANULARITY_MINUTES,
    SlotCalculator,
    generate_slots,
)
from .time_utils import format_time_display, minutes_to_time, normalize_time, to_minutes

__all__ = [
    "AddOn",
    "BlockedInterval",
    "BookingAPIError",
    "BookingConfirmation",
    "BookingError",
    "BookingRecord",
    "BookingRequest",
    "ConflictError",
    "CustomerDetails",
    "DEFAULT_TIMEZONE",
    "InvalidCustomerError",
    "InvalidDurationError",
    "InvalidFormatError",
    "InvalidScheduleError",
    "MappingError",
    "PriceQuote",
    "SLOT_GRANULARITY_MINUTES",
    "ScheduleBlock",
    "ScheduleBreak",
    "Service",
    "SlotCalculator",
    "SlotUnavailableError",
    "Stylist",
    "StylistScheduleEntry",
    "format_time_display",
    "generate_slots",
    "get_schedule_for_date",
    "minutes_to_time",
    "normalize_time",
    "stylist_works_on_date",
    "to_minutes",
    "weekday_index",
]
