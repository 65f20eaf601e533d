"""
Conversions between ``HH:MM`` wall-clock strings and minute offsets.
"""

import re
from datetime import date as Date

import pendulum

from .exceptions import InvalidFormatError

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")


def to_minutes(time: str) -> int:
    """
    Parse a canonical ``HH:MM`` string into minutes since midnight.

    Raises:
        InvalidFormatError: If the string is not zero-padded 24-hour time
    """
    if not isinstance(time, str):
        raise InvalidFormatError(f"Expected an 'HH:MM' string, got {time!r}")

    match = _TIME_PATTERN.match(time)
    if match is None:
        raise InvalidFormatError(f"Invalid time format: {time!r} (expected 'HH:MM')")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidFormatError(f"Time out of range: {time!r}")

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Inverse of :func:`to_minutes`; both components are zero padded."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidFormatError(
            f"Minute offset must be between 0 and {MINUTES_PER_DAY - 1}, got {minutes}"
        )
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def normalize_time(value: str) -> str:
    """
    Reduce a database ``HH:MM:SS`` time column to canonical ``HH:MM``.

    Already-canonical input is returned unchanged.
    """
    if not isinstance(value, str):
        raise InvalidFormatError(f"Expected a time string, got {value!r}")
    candidate = value[:5]
    to_minutes(candidate)
    return candidate


def format_time_display(date: Date, time: str) -> str:
    """
    Render a wall-clock time on a calendar date as 12-hour text.

    Example: ``format_time_display(date(2024, 2, 7), "13:45") == "1:45 PM"``
    """
    hours, minutes = divmod(to_minutes(time), 60)
    moment = pendulum.datetime(date.year, date.month, date.day, hours, minutes, tz="UTC")
    return moment.format("h:mm A", locale="en")
