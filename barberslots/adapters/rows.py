"""
Strict mapping of raw PostgREST rows into domain objects.

Each table has a pydantic model describing the columns we rely on and one
mapping function. Missing or mistyped fields raise ``MappingError``; no
default schedule is ever substituted for absent data.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.exceptions import BookingError, MappingError
from ..domain.models import (
    AddOn,
    BookingRecord,
    ScheduleBlock,
    ScheduleBreak,
    Service,
    Stylist,
    StylistScheduleEntry,
)
from ..domain.time_utils import normalize_time

RowT = TypeVar("RowT", bound=BaseModel)


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ServiceRow(_Row):
    id: str
    name: str
    description: str
    duration_minutes: int = Field(gt=0)
    price_cents: int = Field(ge=0)
    category: str
    includes: Optional[List[str]] = None


class AddOnRow(_Row):
    id: str
    name: str
    description: str
    duration_minutes: int = Field(ge=0)
    price_cents: int = Field(ge=0)
    recommended_for: Optional[List[str]] = None


class BookingAddOnRow(_Row):
    add_on_id: str


class BookingRow(_Row):
    id: str
    service_id: str
    stylist_id: str
    appointment_date: date
    start_time: str
    duration_minutes: int = Field(gt=0)
    client_name: str
    client_email: str
    client_phone: str
    notes: Optional[str] = None
    marketing_consent: bool = False
    add_ons: Optional[List[BookingAddOnRow]] = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, value: str) -> str:
        return normalize_time(value)


class ScheduleBreakRow(_Row):
    break_start: str
    break_end: str

    @field_validator("break_start", "break_end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return normalize_time(value)


class ScheduleRow(_Row):
    day_of_week: int = Field(ge=0, le=6)
    block_start: str
    block_end: str
    breaks: Optional[List[ScheduleBreakRow]] = None

    @field_validator("block_start", "block_end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return normalize_time(value)


class SpecialtyRow(_Row):
    service_id: str


class StylistRow(_Row):
    id: str
    name: str
    title: str
    bio: str
    years_experience: int = Field(ge=0)
    rating: float
    schedules: List[ScheduleRow]
    specialties: Optional[List[SpecialtyRow]] = None


def _parse(model: Type[RowT], row: Dict[str, Any]) -> RowT:
    if not isinstance(row, dict):
        raise MappingError(f"Expected a {model.__name__} mapping, got {type(row).__name__}")
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        row_id = row.get("id", "<unknown>")
        raise MappingError(f"Invalid {model.__name__} '{row_id}': {exc}") from exc


def _cents_to_units(cents: int) -> float:
    return round(cents / 100, 2)


def map_service(row: Dict[str, Any]) -> Service:
    parsed = _parse(ServiceRow, row)
    return Service(
        id=parsed.id,
        name=parsed.name,
        description=parsed.description,
        duration=parsed.duration_minutes,
        price=_cents_to_units(parsed.price_cents),
        category=parsed.category,
        includes=tuple(parsed.includes or ()),
    )


def map_add_on(row: Dict[str, Any]) -> AddOn:
    parsed = _parse(AddOnRow, row)
    return AddOn(
        id=parsed.id,
        name=parsed.name,
        description=parsed.description,
        duration=parsed.duration_minutes,
        price=_cents_to_units(parsed.price_cents),
        recommended_for=tuple(parsed.recommended_for or ()),
    )


def map_booking(row: Dict[str, Any]) -> BookingRecord:
    """
    Map a ``bookings`` row (optionally with embedded ``add_ons``).
    """
    parsed = _parse(BookingRow, row)
    return BookingRecord(
        id=parsed.id,
        service_id=parsed.service_id,
        stylist_id=parsed.stylist_id,
        date=parsed.appointment_date,
        time=parsed.start_time,
        duration=parsed.duration_minutes,
        add_on_ids=tuple(item.add_on_id for item in parsed.add_ons or ()),
        client_name=parsed.client_name,
        client_email=parsed.client_email,
        client_phone=parsed.client_phone,
        notes=parsed.notes,
        marketing_consent=parsed.marketing_consent,
    )


def map_stylist(row: Dict[str, Any]) -> Stylist:
    """
    Map a ``stylists`` row with embedded schedules, breaks and specialties.

    The store keeps one schedule row per working block, so rows sharing a
    weekday are merged into a single entry. Entries are ordered by weekday
    and blocks by start time.
    """
    parsed = _parse(StylistRow, row)

    by_day: "OrderedDict[int, List[ScheduleRow]]" = OrderedDict()
    for schedule in sorted(parsed.schedules, key=lambda s: (s.day_of_week, s.block_start)):
        by_day.setdefault(schedule.day_of_week, []).append(schedule)

    try:
        entries = [
            StylistScheduleEntry(
                day=day,
                blocks=[ScheduleBlock(start=s.block_start, end=s.block_end) for s in rows],
                breaks=[
                    ScheduleBreak(start=b.break_start, end=b.break_end)
                    for s in rows
                    for b in s.breaks or ()
                ],
            )
            for day, rows in by_day.items()
        ]
    except BookingError as exc:
        raise MappingError(f"Invalid schedule for stylist '{parsed.id}': {exc}") from exc

    return Stylist(
        id=parsed.id,
        name=parsed.name,
        title=parsed.title,
        bio=parsed.bio,
        years_experience=parsed.years_experience,
        rating=float(parsed.rating),
        specialties=tuple(item.service_id for item in parsed.specialties or ()),
        schedule=entries,
    )
