"""
Adapters layer - File-backed configuration and booking storage.
"""

from .json_booking_repository import JsonBookingRepository
from .yaml_config_provider import YamlConfigProvider

__all__ = ["JsonBookingRepository", "YamlConfigProvider"]
