"""
Application services for listing and booking appointment slots.

The service fetches the business calendar and existing bookings through
protocol-typed collaborators and delegates the availability calculation to
the domain-level ``AvailabilityEngine``. This keeps the CLI thin and lets
tests plug in simple stubs for the config store and the booking repository.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Protocol

from pendulum import DateTime

from ..domain.availability_engine import AvailabilityEngine
from ..domain.models import AvailabilityRequest, BookedInterval, BusinessCalendarConfig
from ..domain.time_representation import parse_display, to_24_hour, to_canonical_timestamp

logger = logging.getLogger(__name__)

BOOKING_OK = "ok"
BOOKING_CONFLICT = "conflict"


class ConfigProvider(Protocol):
    """Protocol describing where the business calendar comes from."""

    def get_business_calendar_config(self) -> BusinessCalendarConfig:
        """Return the current calendar config or raise MissingBusinessConfig."""


class BookingRepository(Protocol):
    """Protocol describing the booking store behaviour needed by the service."""

    def get_booked_intervals(self, day: date) -> List[BookedInterval]:
        """Return bookings intersecting ``day`` in the business timezone."""

    def add_booking(self, interval: BookedInterval) -> None:
        """Persist a new booking."""


@dataclass(frozen=True)
class BookingResult:
    """Outcome of a booking attempt."""
    status: str
    display: str
    canonical_time: str
    start: DateTime
    end: DateTime

    @property
    def ok(self) -> bool:
        return self.status == BOOKING_OK


class BookingService:
    """
    Orchestrates config and booking retrieval around the availability engine.

    The engine only prevents *showing* taken slots; two callers booking the
    same slot at once can still race. ``book`` narrows the window by
    re-fetching bookings right before writing, but the persistence layer
    remains the authoritative guard.
    """

    def __init__(
        self,
        config_provider: ConfigProvider,
        booking_repository: BookingRepository,
        engine: Optional[AvailabilityEngine] = None,
    ) -> None:
        self._config_provider = config_provider
        self._booking_repository = booking_repository
        self._engine = engine or AvailabilityEngine()

    def available_slots(self, day: date, duration_minutes: int) -> List[str]:
        """List the display strings of all free slots on ``day``."""
        request = AvailabilityRequest(date=day, duration_minutes=duration_minutes)
        config = self._config_provider.get_business_calendar_config()
        booked = self._booking_repository.get_booked_intervals(day)

        slots = self._engine.compute_slots(request, config, booked)
        return [slot.display for slot in slots]

    def book(
        self,
        day: date,
        display_slot: str,
        duration_minutes: int,
        label: str = "",
    ) -> BookingResult:
        """
        Book the slot shown as ``display_slot`` on ``day``.

        Returns:
            BookingResult with status ``ok`` when stored, ``conflict`` when the
            slot is no longer available

        Raises:
            MalformedTimeString: If ``display_slot`` is not a valid display time
            InvalidDuration: If the duration is not a positive integer
            MissingBusinessConfig: If no calendar config is available
        """
        request = AvailabilityRequest(date=day, duration_minutes=duration_minutes)
        config = self._config_provider.get_business_calendar_config()

        parsed = parse_display(display_slot, self._engine.meridiem_case)
        canonical_time = to_24_hour(*parsed)
        start = to_canonical_timestamp(day, canonical_time, config.timezone)
        end = start.add(minutes=duration_minutes)

        # Fresh snapshot: bookings may have changed since the slots were listed
        booked = self._booking_repository.get_booked_intervals(day)
        candidates = self._engine.compute_candidates(request, config, booked)

        # On a fall-back day one wall-clock time names two instants and
        # to_canonical_timestamp picks the later; take the earliest free one.
        matching = [
            candidate for candidate in candidates
            if candidate.start_local.format("HH:mm") == canonical_time
        ]

        if not matching:
            logger.info("Slot %s on %s is not available", display_slot, day.isoformat())
            return BookingResult(
                status=BOOKING_CONFLICT,
                display=display_slot,
                canonical_time=canonical_time,
                start=start,
                end=end,
            )

        start = matching[0].start_instant
        end = matching[0].end_instant
        booking = BookedInterval(start=start, end=end, label=label)
        self._booking_repository.add_booking(booking)
        logger.info(
            "Booked %s on %s for %d minutes", display_slot, day.isoformat(), booking.duration_minutes()
        )

        return BookingResult(
            status=BOOKING_OK,
            display=display_slot,
            canonical_time=canonical_time,
            start=start,
            end=end,
        )
