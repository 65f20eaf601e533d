"""
Adapters layer - External integrations (hosted booking database).
"""

from .mock_client import MockBookingClient
from .rows import map_add_on, map_booking, map_service, map_stylist
from .supabase_client import SupabaseClient

__all__ = [
    "MockBookingClient",
    "SupabaseClient",
    "map_add_on",
    "map_booking",
    "map_service",
    "map_stylist",
]
