"""
Core business logic for calculating bookable appointment slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O). For fixed inputs
the output is exactly reproducible, and no state survives between calls.
"""

import logging
from typing import Iterable, List, Optional

from pendulum import DateTime

from .calendar_resolver import BusinessCalendarResolver, day_bounds
from .exceptions import InvalidDuration, SlotOrderingError
from .models import (
    AvailabilityRequest,
    BookedInterval,
    BusinessCalendarConfig,
    Slot,
    SlotCandidate,
)
from .overlap import overlaps, overlaps_any
from .time_representation import format_display, to_local

logger = logging.getLogger(__name__)

DEFAULT_GRANULARITY_MINUTES = 15


class AvailabilityEngine:
    """
    Calculates the start times still free on a given date.

    Algorithm:
    1. Bound the requested date by local midnights in the business timezone
    2. Anchor work and lunch boundaries onto that date
    3. Step candidate starts by the granularity while a full duration fits
    4. Convert each candidate to the local wall clock
    5. Keep candidates that start and end within working hours
    6. Drop candidates overlapping the lunch window
    7. Drop candidates overlapping any existing booking
    8. Format the survivors for display, in ascending order
    """

    def __init__(
        self,
        granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
        meridiem_case: str = "upper",
        resolver: Optional[BusinessCalendarResolver] = None,
    ):
        if granularity_minutes <= 0:
            raise ValueError(f"granularity_minutes must be greater than zero, got {granularity_minutes}")
        self.granularity_minutes = granularity_minutes
        self.meridiem_case = meridiem_case
        self.resolver = resolver or BusinessCalendarResolver()

    def compute_slots(
        self,
        request: AvailabilityRequest,
        config: Optional[BusinessCalendarConfig],
        booked: Iterable[BookedInterval],
    ) -> List[Slot]:
        """
        Find all bookable slots for the requested date and duration.

        Args:
            request: Date and service duration
            config: Business calendar snapshot for this request
            booked: Existing appointments, as absolute intervals

        Returns:
            List of Slot objects in ascending chronological order. Empty when
            the day is closed or fully booked.

        Raises:
            InvalidDuration: If the duration is not a positive integer
            MissingBusinessConfig: If ``config`` is None
        """
        candidates = self.compute_candidates(request, config, booked)

        return [
            Slot(display=format_display(candidate.start_local, self.meridiem_case))
            for candidate in candidates
        ]

    def compute_candidates(
        self,
        request: AvailabilityRequest,
        config: Optional[BusinessCalendarConfig],
        booked: Iterable[BookedInterval],
    ) -> List[SlotCandidate]:
        """Run the generate and filter steps, returning the surviving candidates."""
        self._validate_request(request)

        anchored = self.resolver.anchor(request.date, config)

        if not self.resolver.is_open(request.date, config):
            logger.debug("Business closed on %s", request.date.isoformat())
            return []

        day_start, day_end = day_bounds(request.date, config.timezone)
        booked_ranges = [(interval.start, interval.end) for interval in booked]
        lunch_window = anchored.lunch_window()

        survivors: List[SlotCandidate] = []
        generated = 0

        for start in self._candidate_starts(day_start, day_end, request.duration_minutes):
            generated += 1
            end = start.add(minutes=request.duration_minutes)

            candidate = SlotCandidate(
                start_instant=start,
                end_instant=end,
                start_local=to_local(start, config.timezone),
                end_local=to_local(end, config.timezone),
            )

            if candidate.start_local < anchored.work_start or candidate.end_local > anchored.work_end:
                continue

            if lunch_window and overlaps(start, end, *lunch_window):
                continue

            if overlaps_any(start, end, booked_ranges):
                continue

            survivors.append(candidate)

        self._ensure_ascending(survivors)

        logger.debug(
            "%s: %d of %d candidates free for %d minutes (%d bookings)",
            request.date.isoformat(),
            len(survivors),
            generated,
            request.duration_minutes,
            len(booked_ranges),
        )
        return survivors

    def _candidate_starts(self, day_start: DateTime, day_end: DateTime, duration_minutes: int):
        """
        Yield candidate start instants from ``day_start`` in granularity steps,
        up to and including the last start whose full duration ends by ``day_end``.
        """
        # step in UTC so every increment is exactly the granularity in elapsed time
        current = day_start.in_timezone("UTC")
        last_start = day_end.in_timezone("UTC").subtract(minutes=duration_minutes)

        while current <= last_start:
            yield current
            current = current.add(minutes=self.granularity_minutes)

    @staticmethod
    def _validate_request(request: AvailabilityRequest) -> None:
        duration = request.duration_minutes
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            raise InvalidDuration(f"Duration must be a positive number of minutes, got {duration!r}")

    @staticmethod
    def _ensure_ascending(candidates: List[SlotCandidate]) -> None:
        for previous, current in zip(candidates, candidates[1:]):
            if current.start_instant <= previous.start_instant:
                raise SlotOrderingError(
                    f"Slots out of order: {current.start_instant} after {previous.start_instant}"
                )
