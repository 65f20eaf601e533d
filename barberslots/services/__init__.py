"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_service import BookingClientProtocol, BookingService, generate_confirmation_code

__all__ = ["BookingClientProtocol", "BookingService", "generate_confirmation_code"]
