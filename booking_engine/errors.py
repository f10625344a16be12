"""Error taxonomy for the booking engine.

Only ``ValidationError`` is reported back to the requester as a normal
decision (status ``error``). ``ConfigurationError`` and ``UpstreamError``
are hard failures the caller surfaces as service errors.
"""

from typing import Optional


class BookingEngineError(Exception):
    """Base class for all booking engine errors."""


class ValidationError(BookingEngineError):
    """Raised when a booking request has missing or malformed fields."""


class ConfigurationError(BookingEngineError):
    """Raised when required external configuration is missing or invalid."""


class UpstreamError(BookingEngineError):
    """Raised when the record store cannot complete a read or write."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
