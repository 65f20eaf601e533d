"""
Weekly schedule lookup for a stylist on a calendar date.
"""

from datetime import date as Date
from typing import Optional

from .models import Stylist, StylistScheduleEntry


def weekday_index(date: Date) -> int:
    """Return the civil weekday of ``date`` with 0=Sunday..6=Saturday."""
    return date.isoweekday() % 7


def get_schedule_for_date(stylist: Stylist, date: Date) -> Optional[StylistScheduleEntry]:
    """
    Get the stylist's schedule entry for the weekday of ``date``.

    Returns None if the stylist does not work that weekday. When a schedule
    holds duplicate entries for one weekday the first one wins.
    """
    day = weekday_index(date)
    for entry in stylist.schedule:
        if entry.day == day:
            return entry
    return None


def stylist_works_on_date(stylist: Stylist, date: Date) -> bool:
    """Check if the stylist has a schedule entry for the weekday of ``date``."""
    return get_schedule_for_date(stylist, date) is not None
