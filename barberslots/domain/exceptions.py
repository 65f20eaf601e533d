"""
Domain-specific exception hierarchy for the barbershop booking engine.
"""


class BookingError(Exception):
    """Base class for all application-level errors."""


class InvalidFormatError(BookingError, ValueError):
    """Raised when a wall-clock time string is not canonical ``HH:MM``."""


class InvalidDurationError(BookingError, ValueError):
    """Raised when a requested service duration is non-positive or absurd."""


class InvalidScheduleError(BookingError, ValueError):
    """Raised when a schedule block, break or entry breaks its invariants."""


class MappingError(BookingError):
    """Raised when a raw database row cannot be mapped to a domain object."""


class BookingAPIError(BookingError):
    """Raised when booking data cannot be fetched from or written to the store."""


class ConflictError(BookingAPIError):
    """Raised when the chosen slot was claimed by a concurrent booking."""


class InvalidCustomerError(BookingError, ValueError):
    """Raised when the customer's contact details fail validation."""


class SlotUnavailableError(BookingError):
    """Raised when a requested date and time is not an offered slot."""
