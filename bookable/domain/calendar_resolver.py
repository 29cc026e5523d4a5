"""
Projects a business's time-of-day configuration onto a concrete date.
"""

import logging
from datetime import date, time
from typing import Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import MissingBusinessConfig
from .models import AnchoredDay, BusinessCalendarConfig
from .time_representation import resolve_timezone

logger = logging.getLogger(__name__)


def day_bounds(day: date, timezone: str) -> Tuple[DateTime, DateTime]:
    """
    Return the instants of local midnight at the start of ``day`` and of the
    following day. On DST transition days they are 23 or 25 hours apart.
    """
    tz = resolve_timezone(timezone)
    day_start = pendulum.datetime(day.year, day.month, day.day, tz=tz)
    # add(days=1) is wall-clock arithmetic in pendulum: lands on the next local midnight
    day_end = day_start.add(days=1)
    return day_start, day_end


class BusinessCalendarResolver:
    """
    Anchors configured work and lunch boundaries onto a specific date.

    Each boundary is resolved to the instant at which the local wall clock in
    the business timezone shows that time of day. On an ordinary day that is
    local midnight plus the time-of-day offset; on a DST transition day the
    offset lookup for the resolved instant absorbs the shifted hour, so a
    09:00 opening stays at 09:00 local time.
    """

    def anchor(self, day: date, config: Optional[BusinessCalendarConfig]) -> AnchoredDay:
        """
        Compute absolute work and lunch boundaries for ``day``.

        Raises:
            MissingBusinessConfig: If no configuration is available
        """
        if config is None:
            raise MissingBusinessConfig("No business calendar configuration is available")

        lunch_start = lunch_end = None
        if config.has_lunch:
            lunch_start = self._at(day, config.lunch_start, config.timezone)
            lunch_end = self._at(day, config.lunch_end, config.timezone)

        anchored = AnchoredDay(
            work_start=self._at(day, config.work_start, config.timezone),
            work_end=self._at(day, config.work_end, config.timezone),
            lunch_start=lunch_start,
            lunch_end=lunch_end,
        )
        logger.debug(
            "Anchored %s in %s: work %s-%s, lunch %s",
            day.isoformat(),
            config.timezone,
            anchored.work_start.to_iso8601_string(),
            anchored.work_end.to_iso8601_string(),
            anchored.lunch_window(),
        )
        return anchored

    def is_open(self, day: date, config: Optional[BusinessCalendarConfig]) -> bool:
        """Check whether the business opens at all on ``day``."""
        if config is None:
            raise MissingBusinessConfig("No business calendar configuration is available")
        return config.is_working_day(day)

    @staticmethod
    def _at(day: date, time_of_day: time, timezone: str) -> DateTime:
        tz = resolve_timezone(timezone)
        return pendulum.datetime(
            day.year,
            day.month,
            day.day,
            time_of_day.hour,
            time_of_day.minute,
            tz=tz,
        )
