"""
Core business logic for calculating bookable appointment start times.

Pure domain logic: no API calls, no database, no I/O. The only notion of
time is the explicit ``now`` handed in by the caller (or read once from the
injected clock).
"""

from datetime import date as Date, datetime
from typing import Callable, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidDurationError
from .models import BlockedInterval, BookingRecord, StylistScheduleEntry
from .time_utils import MINUTES_PER_DAY, minutes_to_time

SLOT_GRANULARITY_MINUTES = 15
DEFAULT_TIMEZONE = "America/Edmonton"


class SlotCalculator:
    """
    Enumerates valid start times for a service on one stylist's day.

    Algorithm:
    1. Lower every break and existing booking into a blocked interval
    2. Walk each schedule block on a fixed grid from the block start
    3. Keep candidates that fit in the block and miss every blocked interval
    4. On "today", keep only candidates strictly after the current instant
    """

    def __init__(
        self,
        granularity_minutes: int = SLOT_GRANULARITY_MINUTES,
        clock: Optional[Callable[[], DateTime]] = None,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        if granularity_minutes <= 0:
            raise ValueError(f"Granularity must be positive, got {granularity_minutes}")
        self.granularity_minutes = granularity_minutes
        self.timezone = timezone
        self._clock = clock or (lambda: pendulum.now(self.timezone))

    def now(self) -> DateTime:
        """Read the current instant from the clock, in the shop timezone by default."""
        return self._clock()

    def generate_slots(
        self,
        schedule: StylistScheduleEntry,
        date: Date,
        requested_duration: int,
        existing_bookings: Iterable[BookingRecord] = (),
        now: Optional[DateTime] = None,
    ) -> List[str]:
        """
        Generate the ordered list of bookable ``HH:MM`` start times.

        Args:
            schedule: The stylist's schedule entry for the weekday of ``date``
            date: Calendar date being booked
            requested_duration: Total service length in minutes
            existing_bookings: Confirmed bookings for this stylist and date
            now: Current instant; read from the clock when omitted

        Returns:
            Start times in block order, ascending within a block. An empty
            list means no availability and is not an error.

        Raises:
            InvalidDurationError: If the duration is non-positive or exceeds a day
        """
        self._validate_duration(requested_duration)

        if not schedule.blocks:
            return []

        blocked = self.build_blocked_intervals(schedule, existing_bookings)

        current_time = now if now is not None else self.now()
        target_date = date.date() if isinstance(date, datetime) else date
        day_is_today = current_time.date() == target_date

        slots: List[str] = []

        for block in schedule.blocks:
            cursor = block.start_minutes
            block_end = block.end_minutes

            while cursor + requested_duration <= block_end:
                slot_end = cursor + requested_duration

                overlaps = any(interval.overlaps(cursor, slot_end) for interval in blocked)

                if not overlaps and (
                    not day_is_today or self._starts_after(cursor, current_time)
                ):
                    slots.append(minutes_to_time(cursor))

                cursor += self.granularity_minutes

        return slots

    @staticmethod
    def build_blocked_intervals(
        schedule: StylistScheduleEntry,
        existing_bookings: Iterable[BookingRecord],
    ) -> List[BlockedInterval]:
        """Lower breaks and bookings into half-open minute intervals."""
        blocked = [
            BlockedInterval(start=brk.start_minutes, end=brk.end_minutes)
            for brk in schedule.breaks
        ]
        blocked.extend(
            BlockedInterval(start=booking.start_minutes, end=booking.end_minutes)
            for booking in existing_bookings
        )
        return blocked

    @staticmethod
    def _validate_duration(requested_duration: int) -> None:
        if isinstance(requested_duration, bool) or not isinstance(requested_duration, int):
            raise InvalidDurationError(
                f"Duration must be a whole number of minutes, got {requested_duration!r}"
            )
        if requested_duration <= 0:
            raise InvalidDurationError(
                f"Duration must be greater than zero, got {requested_duration}"
            )
        if requested_duration > MINUTES_PER_DAY:
            raise InvalidDurationError(
                f"Duration cannot exceed one day, got {requested_duration}"
            )

    @staticmethod
    def _starts_after(cursor: int, now: DateTime) -> bool:
        """Check if the slot start on today's date is strictly after ``now``."""
        hours, minutes = divmod(cursor, 60)
        slot_start = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
        return slot_start > now


def generate_slots(
    schedule: StylistScheduleEntry,
    date: Date,
    requested_duration: int,
    existing_bookings: Iterable[BookingRecord] = (),
    now: Optional[DateTime] = None,
) -> List[str]:
    """Run :meth:`SlotCalculator.generate_slots` with the default 15-minute grid."""
    return SlotCalculator().generate_slots(
        schedule=schedule,
        date=date,
        requested_duration=requested_duration,
        existing_bookings=existing_bookings,
        now=now,
    )
