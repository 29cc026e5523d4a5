"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_service import BookingRepository, BookingResult, BookingService, ConfigProvider

__all__ = ["BookingRepository", "BookingResult", "BookingService", "ConfigProvider"]
