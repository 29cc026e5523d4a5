"""
Tests for the BookingService orchestration layer.
"""

from datetime import date, time
from typing import List, Optional

import pendulum
import pytest

from bookable.domain.exceptions import MalformedTimeString, MissingBusinessConfig
from bookable.domain.models import BookedInterval, BusinessCalendarConfig
from bookable.services.booking_service import BOOKING_CONFLICT, BOOKING_OK, BookingService

TZ = "America/New_York"
MONDAY = date(2024, 11, 25)


class StubConfigProvider:
    """Minimal stub matching ConfigProvider."""

    def __init__(self, config: Optional[BusinessCalendarConfig]):
        self._config = config

    def get_business_calendar_config(self) -> BusinessCalendarConfig:
        if self._config is None:
            raise MissingBusinessConfig("not configured")
        return self._config


class StubBookingRepository:
    """In-memory stub matching BookingRepository."""

    def __init__(self, bookings: Optional[List[BookedInterval]] = None):
        self.bookings = list(bookings or [])
        self.lookups: List[date] = []

    def get_booked_intervals(self, day):
        self.lookups.append(day)
        return list(self.bookings)

    def add_booking(self, interval: BookedInterval) -> None:
        self.bookings.append(interval)


def _build_service(
    bookings: Optional[List[BookedInterval]] = None,
    configured: bool = True,
    config: Optional[BusinessCalendarConfig] = None,
):
    config = config or BusinessCalendarConfig(
        work_start=time(9, 0),
        work_end=time(17, 0),
        lunch_start=time(12, 0),
        lunch_end=time(13, 0),
        timezone=TZ,
    )
    repository = StubBookingRepository(bookings)
    service = BookingService(
        config_provider=StubConfigProvider(config if configured else None),
        booking_repository=repository,
    )
    return service, repository


def test_available_slots_uses_repository_and_engine():
    """Listing should query bookings for the day and return display strings."""
    booking = BookedInterval(
        start=pendulum.parse("2024-11-25 14:00", tz=TZ),
        end=pendulum.parse("2024-11-25 14:30", tz=TZ),
    )
    service, repository = _build_service(bookings=[booking])

    slots = service.available_slots(MONDAY, 15)

    assert repository.lookups == [MONDAY]
    assert slots[0] == "9:00 AM"
    assert "2:00 PM" not in slots
    assert "2:30 PM" in slots


def test_book_available_slot():
    """Booking a free slot stores the canonical instant and removes the slot."""
    service, repository = _build_service()

    result = service.book(MONDAY, "2:15 PM", 30, label="Ana")

    assert result.status == BOOKING_OK
    assert result.ok
    assert result.canonical_time == "14:15"
    assert result.start == pendulum.parse("2024-11-25T19:15:00Z")
    assert result.end == pendulum.parse("2024-11-25T19:45:00Z")

    assert len(repository.bookings) == 1
    assert repository.bookings[0].label == "Ana"

    remaining = service.available_slots(MONDAY, 30)
    assert "2:15 PM" not in remaining
    assert "1:45 PM" in remaining
    assert "2:45 PM" in remaining


def test_book_taken_slot_is_conflict():
    """Booking over an existing appointment reports a conflict and stores nothing."""
    service, repository = _build_service()
    assert service.book(MONDAY, "10:00 AM", 60).ok

    result = service.book(MONDAY, "10:30 AM", 15)

    assert result.status == BOOKING_CONFLICT
    assert not result.ok
    assert len(repository.bookings) == 1


def test_book_during_lunch_is_conflict():
    """Slots inside the lunch window cannot be booked."""
    service, repository = _build_service()

    result = service.book(MONDAY, "12:15 PM", 15)

    assert result.status == BOOKING_CONFLICT
    assert repository.bookings == []


def test_book_off_grid_time_is_conflict():
    """Only listed slot starts can be booked."""
    service, _ = _build_service()

    assert service.book(MONDAY, "9:07 AM", 15).status == BOOKING_CONFLICT


def test_book_repeated_hour_on_fall_back_day():
    """Both occurrences of a repeated wall-clock time can be booked, earliest first."""
    early_hours = BusinessCalendarConfig(work_start=time(0, 0), work_end=time(5, 0), timezone=TZ)
    service, repository = _build_service(config=early_hours)
    fall_back = date(2024, 11, 3)

    assert service.available_slots(fall_back, 15).count("1:00 AM") == 2

    first = service.book(fall_back, "1:00 AM", 15)
    assert first.ok
    assert first.start == pendulum.parse("2024-11-03T05:00:00Z")  # 01:00 EDT

    second = service.book(fall_back, "1:00 AM", 15)
    assert second.ok
    assert second.start == pendulum.parse("2024-11-03T06:00:00Z")  # 01:00 EST

    assert service.book(fall_back, "1:00 AM", 15).status == BOOKING_CONFLICT
    assert len(repository.bookings) == 2
    assert "1:00 AM" not in service.available_slots(fall_back, 15)


def test_book_rejects_malformed_display():
    """A doubled meridiem must fail loudly rather than be repaired."""
    service, repository = _build_service()

    with pytest.raises(MalformedTimeString):
        service.book(MONDAY, "2:15 PM PM", 15)
    assert repository.bookings == []


def test_missing_config_propagates():
    """An unconfigured business surfaces MissingBusinessConfig."""
    service, _ = _build_service(configured=False)

    with pytest.raises(MissingBusinessConfig):
        service.available_slots(MONDAY, 15)
