"""
Booking repository storing appointments in a JSON file.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime

from ..domain.calendar_resolver import day_bounds
from ..domain.models import BookedInterval, TimeRange

logger = logging.getLogger(__name__)


class JsonBookingRepository:
    """
    File-backed store of booked intervals.

    The file holds a JSON list of objects with ISO-8601 ``start`` and ``end``
    instants and an optional ``label``:

        [{"start": "2024-11-25T19:00:00Z", "end": "2024-11-25T19:30:00Z", "label": "Ana"}]

    It is meant for single-process use; it does not lock the file.
    """

    def __init__(self, path: Path, timezone: str):
        self.path = Path(path)
        self.timezone = timezone

    def _load_entries(self) -> List[Dict[str, Any]]:
        """Load raw booking entries, treating a missing file as no bookings."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise ValueError(f"Bookings file {self.path} must contain a JSON list.")

        return data

    def _parse_entry(self, entry: Dict[str, Any]) -> BookedInterval:
        start = pendulum.parse(entry["start"])
        end = pendulum.parse(entry["end"])
        # parse also yields Duration, Interval or Date for non-instant ISO strings
        for name, value in (("start", start), ("end", end)):
            if not isinstance(value, DateTime):
                raise ValueError(f"{name} is not a date-time: {entry[name]!r}")
        return BookedInterval(start=start, end=end, label=entry.get("label", ""))

    def all_bookings(self) -> List[BookedInterval]:
        """Return every valid stored booking, skipping unparseable entries."""
        bookings: List[BookedInterval] = []

        for index, entry in enumerate(self._load_entries()):
            try:
                bookings.append(self._parse_entry(entry))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid booking #%d in %s: %s", index, self.path, exc)

        return bookings

    def get_booked_intervals(self, day: date) -> List[BookedInterval]:
        """
        Return all bookings intersecting ``day`` in the business timezone.

        Args:
            day: Calendar date to look up

        Returns:
            List of BookedInterval objects sorted by start
        """
        day_range = TimeRange(*day_bounds(day, self.timezone))

        intervals = [
            booking for booking in self.all_bookings()
            if booking.overlaps(day_range)
        ]
        return sorted(intervals, key=lambda b: b.start)

    def add_booking(self, interval: BookedInterval) -> None:
        """Append a booking and write the file back."""
        entries = self._load_entries()
        entries.append(
            {
                "start": interval.start.in_timezone("UTC").to_iso8601_string(),
                "end": interval.end.in_timezone("UTC").to_iso8601_string(),
                "label": interval.label,
            }
        )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)

        logger.info("Stored booking %s in %s", interval, self.path)
