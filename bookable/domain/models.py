"""
Domain models for business hours, bookings and slot calculations.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import InvalidDuration
from .overlap import overlaps
from .time_representation import resolve_timezone


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end instants.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        for name in ("start", "end"):
            value = getattr(self, name)
            if not isinstance(value, datetime):
                raise ValueError(f"{name} must be a datetime, got {type(value).__name__}")
            # naive values are UTC; frozen, so bypass __setattr__
            object.__setattr__(self, name, pendulum.instance(value))

        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ranges do not overlap."""
        return overlaps(self.start, self.end, other.start, other.end)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class BookedInterval(TimeRange):
    """An existing appointment, stored as absolute instants."""
    label: str = ""


@dataclass(frozen=True)
class BusinessCalendarConfig:
    """
    Time-of-day configuration of a business, independent of any date.

    Invariants: ``work_start < work_end``; lunch is either fully configured
    (``lunch_start < lunch_end``) or absent; the timezone resolves.
    """
    work_start: time
    work_end: time
    timezone: str
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None
    closed_weekdays: Tuple[int, ...] = ()  # 0=Monday, 6=Sunday

    def __post_init__(self):
        for name in ("work_start", "work_end", "lunch_start", "lunch_end"):
            value = getattr(self, name)
            if value is not None and (value.second or value.microsecond):
                raise ValueError(f"{name} must be a whole minute, got {value}")

        if self.work_start >= self.work_end:
            raise ValueError(
                f"Work start {self.work_start} must be before work end {self.work_end}"
            )

        if (self.lunch_start is None) != (self.lunch_end is None):
            raise ValueError("lunch_start and lunch_end must be configured together")

        if self.has_lunch and self.lunch_start >= self.lunch_end:
            raise ValueError(
                f"Lunch start {self.lunch_start} must be before lunch end {self.lunch_end}"
            )

        invalid_days = [day for day in self.closed_weekdays if day not in range(7)]
        if invalid_days:
            raise ValueError(f"closed_weekdays must be between 0 and 6, got {invalid_days}")

        resolve_timezone(self.timezone)

    @property
    def has_lunch(self) -> bool:
        return self.lunch_start is not None

    def is_working_day(self, day: date) -> bool:
        """Check if a given date falls on an open weekday."""
        return day.weekday() not in self.closed_weekdays


@dataclass(frozen=True)
class AnchoredDay:
    """Business boundaries projected onto one calendar date, as instants."""
    work_start: DateTime
    work_end: DateTime
    lunch_start: Optional[DateTime] = None
    lunch_end: Optional[DateTime] = None

    def lunch_window(self) -> Optional[Tuple[DateTime, DateTime]]:
        if self.lunch_start is None:
            return None
        return self.lunch_start, self.lunch_end


@dataclass(frozen=True)
class AvailabilityRequest:
    """
    A request for the open slots of one calendar date.

    ``duration_minutes`` must be a positive integer.
    """
    date: date
    duration_minutes: int

    def __post_init__(self):
        # bool is an int subclass but never a meaningful duration
        if isinstance(self.duration_minutes, bool) or not isinstance(self.duration_minutes, int):
            raise InvalidDuration(
                f"Duration must be a whole number of minutes, got {self.duration_minutes!r}"
            )
        if self.duration_minutes <= 0:
            raise InvalidDuration(
                f"Duration must be greater than zero, got {self.duration_minutes}"
            )


@dataclass(frozen=True)
class SlotCandidate:
    """A possible appointment, held in both absolute and local form."""
    start_instant: DateTime
    end_instant: DateTime
    start_local: DateTime
    end_local: DateTime


@dataclass(frozen=True)
class Slot:
    """
    An available appointment start, as shown to the customer.

    Format: H:MM AM|PM, e.g. ``9:00 AM`` or ``2:15 PM``.
    """
    display: str

    def __str__(self) -> str:
        return self.display
