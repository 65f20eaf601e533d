"""
Tests for domain models.
"""

from datetime import date

import pytest

from barberslots.domain.exceptions import (
    BookingError,
    InvalidCustomerError,
    InvalidDurationError,
    InvalidFormatError,
    InvalidScheduleError,
)
from barberslots.domain.models import (
    BlockedInterval,
    BookingRecord,
    CustomerDetails,
    ScheduleBlock,
    ScheduleBreak,
    Stylist,
    StylistScheduleEntry,
)


class TestScheduleBlock:
    """Tests for ScheduleBlock and ScheduleBreak."""

    def test_create_valid_block(self):
        block = ScheduleBlock(start="09:00", end="12:00")

        assert block.start_minutes == 540
        assert block.end_minutes == 720
        assert str(block) == "09:00 - 12:00"

    def test_invalid_block_raises_error(self):
        """Test that a block ending before it starts is rejected."""
        with pytest.raises(InvalidScheduleError, match="must be before end time"):
            ScheduleBlock(start="12:00", end="09:00")

    def test_empty_block_raises_error(self):
        with pytest.raises(InvalidScheduleError):
            ScheduleBlock(start="09:00", end="09:00")

    def test_malformed_time_raises_format_error(self):
        with pytest.raises(InvalidFormatError):
            ScheduleBreak(start="noon", end="13:00")

    def test_overlaps(self):
        """Test overlap detection; touching spans do not overlap."""
        morning = ScheduleBlock(start="09:00", end="12:00")
        late_morning = ScheduleBlock(start="11:00", end="14:00")
        afternoon = ScheduleBlock(start="12:00", end="17:00")

        assert morning.overlaps(late_morning)
        assert late_morning.overlaps(morning)
        assert not morning.overlaps(afternoon)


class TestStylistScheduleEntry:
    """Tests for StylistScheduleEntry."""

    def test_lists_become_tuples(self):
        entry = StylistScheduleEntry(
            day=3,
            blocks=[ScheduleBlock(start="09:00", end="12:00")],
            breaks=[ScheduleBreak(start="10:30", end="11:00")],
        )

        assert isinstance(entry.blocks, tuple)
        assert isinstance(entry.breaks, tuple)

    def test_overlapping_blocks_rejected(self):
        """Overlapping blocks would emit duplicate slots, so they are rejected."""
        with pytest.raises(InvalidScheduleError, match="overlap"):
            StylistScheduleEntry(
                day=1,
                blocks=[
                    ScheduleBlock(start="09:00", end="12:00"),
                    ScheduleBlock(start="11:00", end="15:00"),
                ],
            )

    def test_touching_blocks_allowed(self):
        entry = StylistScheduleEntry(
            day=1,
            blocks=[
                ScheduleBlock(start="09:00", end="12:00"),
                ScheduleBlock(start="12:00", end="15:00"),
            ],
        )
        assert len(entry.blocks) == 2

    @pytest.mark.parametrize("day", [-1, 7])
    def test_invalid_weekday(self, day):
        with pytest.raises(InvalidScheduleError):
            StylistScheduleEntry(day=day)


class TestBookingRecord:
    """Tests for BookingRecord."""

    def test_interval_bounds(self):
        booking = BookingRecord(
            id="b1", stylist_id="leon", date=date(2024, 2, 7), time="09:30", duration=60
        )

        assert booking.start_minutes == 570
        assert booking.end_minutes == 630

    def test_non_positive_duration_rejected(self):
        with pytest.raises(InvalidDurationError):
            BookingRecord(id="b1", stylist_id="leon", date=date(2024, 2, 7), time="09:30", duration=0)

    def test_malformed_time_rejected(self):
        with pytest.raises(InvalidFormatError):
            BookingRecord(id="b1", stylist_id="leon", date=date(2024, 2, 7), time="9.30", duration=30)


class TestBlockedInterval:
    """Tests for BlockedInterval."""

    def test_half_open_overlap(self):
        interval = BlockedInterval(start=570, end=630)

        assert interval.overlaps(555, 585)
        assert interval.overlaps(600, 615)
        assert not interval.overlaps(540, 570)  # ends where the interval starts
        assert not interval.overlaps(630, 660)  # starts where the interval ends


class TestStylist:
    """Tests for Stylist."""

    def test_offers(self):
        stylist = Stylist(id="maya", name="Maya", specialties=["signature-cut"])

        assert stylist.offers("signature-cut")
        assert not stylist.offers("hot-towel-shave")


class TestCustomerDetails:
    """Tests for CustomerDetails validation."""

    def _customer(self, **overrides):
        fields = {"name": "Sam Rivera", "email": "sam@example.com", "phone": "+1 (403) 555-0199"}
        fields.update(overrides)
        return CustomerDetails(**fields)

    def test_valid_details_are_trimmed(self):
        customer = self._customer(name="  Sam Rivera ", email=" sam@example.com", notes="   ")

        assert customer.name == "Sam Rivera"
        assert customer.email == "sam@example.com"
        assert customer.notes is None

    @pytest.mark.parametrize("name", ["", " ", "S", " S "])
    def test_short_name_raises(self, name):
        with pytest.raises(InvalidCustomerError, match="full name"):
            self._customer(name=name)

    @pytest.mark.parametrize("email", ["", "not-an-email", "sam@example", "sam @example.com", "@example.com"])
    def test_invalid_email_raises(self, email):
        with pytest.raises(InvalidCustomerError, match="email"):
            self._customer(email=email)

    @pytest.mark.parametrize("phone", ["", "abc", "555-01", "403-555-CALL", "403.555.0199"])
    def test_invalid_phone_raises(self, phone):
        with pytest.raises(InvalidCustomerError, match="Phone"):
            self._customer(phone=phone)

    def test_notes_limit(self):
        assert len(self._customer(notes="x" * 500).notes) == 500

        with pytest.raises(InvalidCustomerError, match="500"):
            self._customer(notes="x" * 5000)

    def test_is_a_booking_and_value_error(self):
        with pytest.raises(BookingError):
            self._customer(name="")
        with pytest.raises(ValueError):
            self._customer(name="")
