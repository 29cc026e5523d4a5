"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_engine import AvailabilityEngine
from .calendar_resolver import BusinessCalendarResolver, day_bounds
from .models import (
    AnchoredDay,
    AvailabilityRequest,
    BookedInterval,
    BusinessCalendarConfig,
    Slot,
    SlotCandidate,
    TimeRange,
)
from .overlap import overlaps

__all__ = [
    "AnchoredDay",
    "AvailabilityEngine",
    "AvailabilityRequest",
    "BookedInterval",
    "BusinessCalendarConfig",
    "BusinessCalendarResolver",
    "Slot",
    "SlotCandidate",
    "TimeRange",
    "day_bounds",
    "overlaps",
]
