"""
REST client for the hosted booking database (Supabase / PostgREST).
"""

import logging
from datetime import date as Date
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import BookingAPIError, ConflictError
from ..domain.models import AddOn, BookingRecord, BookingRequest, Service, Stylist
from .rows import map_add_on, map_booking, map_service, map_stylist

logger = logging.getLogger(__name__)

STYLIST_SELECT = (
    "id, name, title, bio, years_experience, rating, "
    "schedules:stylist_schedules(day_of_week, block_start, block_end, "
    "breaks:stylist_schedule_breaks(break_start, break_end)), "
    "specialties:stylist_specialties(service_id)"
)

BOOKING_SELECT = "*, add_ons:booking_add_ons(add_on_id)"

# PostgreSQL unique_violation and exclusion_violation
CONFLICT_SQLSTATES = {"23505", "23P01"}


class SupabaseClient:
    """
    Client for the booking tables and the ``create_booking`` procedure.

    Reads go through the PostgREST table endpoints; the write goes through
    the atomic RPC, which is the source of truth for conflict-freedom.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Project URL, e.g. ``https://xyz.supabase.co``
            api_key: Anonymous (public) API key
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.rest_url = f"{base_url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def get_services(self) -> List[Service]:
        rows = self._request("GET", "/services", params={"select": "*", "order": "name.asc"})
        return [map_service(row) for row in rows]

    def get_add_ons(self) -> List[AddOn]:
        rows = self._request("GET", "/add_ons", params={"select": "*", "order": "name.asc"})
        return [map_add_on(row) for row in rows]

    def get_stylists(self) -> List[Stylist]:
        rows = self._request(
            "GET",
            "/stylists",
            params={"select": STYLIST_SELECT, "order": "name.asc"},
        )
        return [map_stylist(row) for row in rows]

    def get_bookings(self, stylist_id: str, date: Date) -> List[BookingRecord]:
        """Fetch confirmed bookings for one stylist on one date, by start time."""
        rows = self._request(
            "GET",
            "/bookings",
            params={
                "select": BOOKING_SELECT,
                "stylist_id": f"eq.{stylist_id}",
                "appointment_date": f"eq.{date.isoformat()}",
                "order": "start_time.asc",
            },
        )
        return [map_booking(row) for row in rows]

    def create_booking(self, request: BookingRequest) -> BookingRecord:
        """
        Atomically insert a booking.

        Raises:
            ConflictError: If the slot was taken concurrently
            BookingAPIError: On any other failure
        """
        payload = {
            "p_service_id": request.service.id,
            "p_stylist_id": request.stylist.id,
            "p_appointment_date": request.date.isoformat(),
            "p_start_time": request.time,
            "p_duration_minutes": request.duration,
            "p_client_name": request.customer.name,
            "p_client_email": request.customer.email,
            "p_client_phone": request.customer.phone,
            "p_notes": request.customer.notes or None,
            "p_marketing_consent": request.customer.marketing_consent,
            "p_add_on_ids": list(request.add_on_ids) or None,
        }
        row = self._request("POST", "/rpc/create_booking", json=payload)
        if isinstance(row, list):
            if not row:
                raise BookingAPIError("create_booking returned no row")
            row = row[0]
        if not isinstance(row, dict):
            raise BookingAPIError(f"create_booking returned an unexpected body: {row!r}")
        row.setdefault("add_ons", [{"add_on_id": add_on_id} for add_on_id in request.add_on_ids])
        return map_booking(row)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.rest_url}{path}"
        logger.debug("%s %s params=%s", method, url, kwargs.get("params"))

        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            raise BookingAPIError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            self._raise_for_error(path, response)

        try:
            return response.json()
        except ValueError as e:
            raise BookingAPIError(f"Invalid JSON in response from {path}") from e

    @staticmethod
    def _raise_for_error(path: str, response: requests.Response) -> None:
        """
        Translate a PostgREST error response into a domain exception.

        Error body format:
        {"code": "23P01", "message": "...", "details": "...", "hint": null}
        """
        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or response.text or response.reason
        code = str(body.get("code", ""))

        if response.status_code == 409 or code in CONFLICT_SQLSTATES:
            logger.warning("Booking conflict on %s: %s", path, message)
            raise ConflictError(f"Slot is no longer available: {message}")

        raise BookingAPIError(f"{path} failed with HTTP {response.status_code}: {message}")
