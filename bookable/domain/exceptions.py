"""
Domain-specific exception hierarchy for the booking availability engine.
"""


class BookingError(Exception):
    """Base class for all application-level errors."""


class InvalidDuration(BookingError, ValueError):
    """Raised when a requested service duration is not a positive integer."""


class MissingBusinessConfig(BookingError, LookupError):
    """Raised when no business calendar configuration can be resolved."""


class MalformedTimeString(BookingError, ValueError):
    """Raised when a display or 24-hour time string does not match its pattern."""


class UnknownTimezone(BookingError, ValueError):
    """Raised when a timezone identifier cannot be resolved."""


class SlotOrderingError(BookingError):
    """Raised when computed slots are not in ascending chronological order."""
