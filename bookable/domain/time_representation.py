"""
Conversions between the four representations of a moment.

- absolute instant (timezone-aware ``pendulum.DateTime``, stored as UTC)
- local wall clock (the same instant viewed in the business timezone)
- 12-hour display string, e.g. ``9:00 AM``
- 24-hour canonical string, e.g. ``09:00``

Every conversion is strict: malformed input raises a named error instead of
being coerced into something that looks right.
"""

import re
from datetime import date, datetime
from typing import NamedTuple

import pendulum
from pendulum import DateTime, Time

from .exceptions import MalformedTimeString, UnknownTimezone

MERIDIEM_CASES = ("upper", "lower")

_DISPLAY_PATTERNS = {
    "upper": re.compile(r"(1[0-2]|[1-9]):([0-5][0-9]) (AM|PM)"),
    "lower": re.compile(r"(1[0-2]|[1-9]):([0-5][0-9]) (am|pm)"),
}
_HH24MM_PATTERN = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")


class DisplayTime(NamedTuple):
    """A parsed 12-hour display string. ``meridiem`` is always ``AM`` or ``PM``."""
    hour12: int
    minute: int
    meridiem: str


def resolve_timezone(name: str):
    """
    Resolve an IANA timezone identifier.

    Raises:
        UnknownTimezone: If the identifier is empty or not in the tz database
    """
    if not isinstance(name, str) or not name.strip():
        raise UnknownTimezone(f"Timezone identifier must be a non-empty string, got {name!r}")
    try:
        return pendulum.timezone(name)
    except (ValueError, KeyError) as exc:
        raise UnknownTimezone(f"Unknown timezone: '{name}'") from exc


def to_local(instant: datetime, timezone: str) -> DateTime:
    """
    View an absolute instant on the wall clock of ``timezone``.

    The offset is looked up for that exact instant, so DST transitions are
    handled correctly. Naive datetimes are treated as UTC.
    """
    tz = resolve_timezone(timezone)
    return pendulum.instance(instant).in_timezone(tz)


def _check_meridiem_case(meridiem_case: str) -> None:
    if meridiem_case not in MERIDIEM_CASES:
        raise ValueError(f"meridiem_case must be one of {MERIDIEM_CASES}, got {meridiem_case!r}")


def format_display(local, meridiem_case: str = "upper") -> str:
    """
    Format a wall-clock value as ``H:MM AM`` / ``H:MM PM``.

    Accepts anything with ``hour`` and ``minute`` attributes (datetime or time).
    The hour has no leading zero and the meridiem marker appears exactly once.
    """
    _check_meridiem_case(meridiem_case)

    if not isinstance(local, datetime):
        # a bare time of day; the date is irrelevant to the format
        local = pendulum.datetime(2000, 1, 1, local.hour, local.minute)

    text = pendulum.instance(local).format("h:mm A", locale="en")
    if meridiem_case == "lower":
        text = text[:-2] + text[-2:].lower()

    if not _DISPLAY_PATTERNS[meridiem_case].fullmatch(text):
        raise MalformedTimeString(f"Formatted display time '{text}' is not a valid H:MM AM|PM string")
    return text


def parse_display(text: str, meridiem_case: str = "upper") -> DisplayTime:
    """
    Parse a ``H:MM AM|PM`` display string.

    Only the meridiem case selected by ``meridiem_case`` is accepted. Strings
    with a doubled, missing or differently cased marker are rejected.

    Raises:
        MalformedTimeString: If ``text`` does not match the pattern exactly
    """
    _check_meridiem_case(meridiem_case)

    if not isinstance(text, str):
        raise MalformedTimeString(f"Display time must be a string, got {type(text).__name__}")

    match = _DISPLAY_PATTERNS[meridiem_case].fullmatch(text)
    if not match:
        example = "9:00 AM" if meridiem_case == "upper" else "9:00 am"
        raise MalformedTimeString(f"Malformed display time '{text}', expected e.g. '{example}'")

    return DisplayTime(
        hour12=int(match.group(1)),
        minute=int(match.group(2)),
        meridiem=match.group(3).upper(),
    )


def to_24_hour(hour12: int, minute: int, meridiem: str) -> str:
    """
    Convert a 12-hour clock reading to a canonical ``HH:MM`` string.

    12 AM is 00, 12 PM is 12, 1-11 AM keep their hour, 1-11 PM add twelve.
    """
    if not 1 <= hour12 <= 12:
        raise MalformedTimeString(f"Hour must be between 1 and 12, got {hour12}")
    if not 0 <= minute <= 59:
        raise MalformedTimeString(f"Minute must be between 0 and 59, got {minute}")
    if meridiem not in ("AM", "PM"):
        raise MalformedTimeString(f"Meridiem must be 'AM' or 'PM', got {meridiem!r}")

    hour24 = hour12 % 12
    if meridiem == "PM":
        hour24 += 12

    return f"{hour24:02d}:{minute:02d}"


def to_local_time(display_time: DisplayTime) -> Time:
    """Turn a parsed display time back into a wall-clock time of day."""
    hh, mm = to_24_hour(*display_time).split(":")
    return pendulum.time(int(hh), int(mm))


def parse_24_hour(hh24mm: str) -> Time:
    """
    Parse a canonical ``HH:MM`` string.

    Raises:
        MalformedTimeString: If the string is not exactly two-digit hour and minute
    """
    match = _HH24MM_PATTERN.fullmatch(hh24mm) if isinstance(hh24mm, str) else None
    if not match:
        raise MalformedTimeString(f"Malformed 24-hour time '{hh24mm}', expected HH:MM")
    return pendulum.time(int(match.group(1)), int(match.group(2)))


def to_canonical_timestamp(day: date, hh24mm: str, timezone: str) -> DateTime:
    """
    Combine a calendar date, a 24-hour wall-clock string and a timezone into
    the absolute instant (in UTC) that gets persisted.
    """
    wall_clock = parse_24_hour(hh24mm)
    tz = resolve_timezone(timezone)

    local = pendulum.datetime(
        day.year,
        day.month,
        day.day,
        wall_clock.hour,
        wall_clock.minute,
        tz=tz,
    )
    return local.in_timezone("UTC")
