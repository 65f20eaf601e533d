"""
In-memory booking client for testing without the hosted database.
"""

import json
import logging
import threading
import uuid
from datetime import date as Date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import ConflictError
from ..domain.models import AddOn, BookingRecord, BookingRequest, Service, Stylist
from ..domain.time_utils import to_minutes
from .rows import map_add_on, map_booking, map_service, map_stylist

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_salon_data.json"


class MockBookingClient:
    """
    Mock client that mirrors ``SupabaseClient``.

    Reference data is loaded from mock_salon_data.json (raw row shapes, run
    through the same mappers as the real client). Bookings live in memory,
    and ``create_booking`` enforces the same at-most-one-winner rule as the
    server-side procedure.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, data_file: Optional[Path] = None):
        """
        Initialize the mock client.

        Args:
            data: Raw rows keyed by table name; overrides ``data_file``
            data_file: Optional path to a JSON fixture
        """
        raw = data if data is not None else self._load_data(data_file or DEFAULT_DATA_FILE)

        self._services = [map_service(row) for row in raw.get("services", [])]
        self._add_ons = [map_add_on(row) for row in raw.get("add_ons", [])]
        self._stylists = [map_stylist(row) for row in raw.get("stylists", [])]
        self._bookings = [map_booking(row) for row in raw.get("bookings", [])]
        self._lock = threading.Lock()

    @staticmethod
    def _load_data(data_file: Path) -> Dict[str, Any]:
        with open(data_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def get_services(self) -> List[Service]:
        return sorted(self._services, key=lambda s: s.name)

    def get_add_ons(self) -> List[AddOn]:
        return sorted(self._add_ons, key=lambda a: a.name)

    def get_stylists(self) -> List[Stylist]:
        return sorted(self._stylists, key=lambda s: s.name)

    def get_bookings(self, stylist_id: str, date: Date) -> List[BookingRecord]:
        with self._lock:
            matching = [
                booking for booking in self._bookings
                if booking.stylist_id == stylist_id and booking.date == date
            ]
        return sorted(matching, key=lambda b: b.start_minutes)

    def create_booking(self, request: BookingRequest) -> BookingRecord:
        """
        Insert a booking unless it overlaps one already held for the stylist.

        Raises:
            ConflictError: If the requested range is already taken
        """
        start = to_minutes(request.time)
        end = start + request.duration

        with self._lock:
            for existing in self._bookings:
                if existing.stylist_id != request.stylist.id or existing.date != request.date:
                    continue
                if start < existing.end_minutes and end > existing.start_minutes:
                    logger.warning(
                        "Mock conflict for %s on %s at %s",
                        request.stylist.id,
                        request.date,
                        request.time,
                    )
                    raise ConflictError(
                        f"Slot {request.time} on {request.date} is no longer available"
                    )

            booking = BookingRecord(
                id=str(uuid.uuid4()),
                service_id=request.service.id,
                stylist_id=request.stylist.id,
                date=request.date,
                time=request.time,
                duration=request.duration,
                add_on_ids=request.add_on_ids,
                client_name=request.customer.name,
                client_email=request.customer.email,
                client_phone=request.customer.phone,
                notes=request.customer.notes,
                marketing_consent=request.customer.marketing_consent,
            )
            self._bookings.append(booking)

        return booking
