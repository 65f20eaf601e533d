"""
Tests for weekly schedule lookup.
"""

from datetime import date, datetime

import pendulum

from barberslots.domain.models import ScheduleBlock, Stylist, StylistScheduleEntry
from barberslots.domain.schedule import (
    get_schedule_for_date,
    stylist_works_on_date,
    weekday_index,
)


def _stylist() -> Stylist:
    return Stylist(
        id="leon",
        name="Leon",
        schedule=[
            StylistScheduleEntry(day=3, blocks=[ScheduleBlock(start="09:00", end="12:00")]),
            StylistScheduleEntry(day=3, blocks=[ScheduleBlock(start="13:00", end="17:00")]),
            StylistScheduleEntry(day=6, blocks=[ScheduleBlock(start="10:00", end="14:00")]),
        ],
    )


class TestWeekdayIndex:
    """Tests for weekday_index."""

    def test_sunday_is_zero(self):
        assert weekday_index(date(2024, 2, 4)) == 0  # Sunday
        assert weekday_index(date(2024, 2, 7)) == 3  # Wednesday
        assert weekday_index(date(2024, 2, 10)) == 6  # Saturday

    def test_accepts_datetimes(self):
        assert weekday_index(datetime(2024, 2, 7, 23, 59)) == 3
        assert weekday_index(pendulum.date(2024, 2, 4)) == 0


class TestScheduleLookup:
    """Tests for stylist_works_on_date and get_schedule_for_date."""

    def test_works_on_scheduled_weekday(self):
        stylist = _stylist()

        assert stylist_works_on_date(stylist, date(2024, 2, 7))
        assert stylist_works_on_date(stylist, date(2024, 2, 10))
        assert not stylist_works_on_date(stylist, date(2024, 2, 5))

    def test_returns_none_when_not_working(self):
        assert get_schedule_for_date(_stylist(), date(2024, 2, 4)) is None

    def test_first_matching_entry_wins(self):
        """Duplicate entries for one weekday resolve to the first one."""
        entry = get_schedule_for_date(_stylist(), date(2024, 2, 7))

        assert entry is not None
        assert entry.blocks[0].start == "09:00"

    def test_empty_schedule(self):
        stylist = Stylist(id="new", name="New Hire")

        assert not stylist_works_on_date(stylist, date(2024, 2, 7))
