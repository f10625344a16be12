"""
Time interval arithmetic shared by the slot enumerator and decision engine.

All instants are timezone-aware UTC datetimes. Overlap is half-open:
two intervals overlap iff ``a.start < b.end and a.end > b.start``, so
back-to-back intervals never conflict.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from booking_engine.errors import ValidationError

ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class TimeInterval:
    """An absolute time range with ``start < end``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeInterval bounds must be timezone-aware")
        if self.end <= self.start:
            raise ValueError(
                f"TimeInterval end must be after start ({self.start} >= {self.end})"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "TimeInterval") -> bool:
        return overlaps(self, other)

    def contains(self, other: "TimeInterval") -> bool:
        """True if ``other`` lies entirely within this interval."""
        return self.start <= other.start and self.end >= other.end


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Half-open overlap test."""
    return a.start < b.end and a.end > b.start


def parse_instant(value: Any) -> datetime:
    """Parse an ISO-8601 value into an aware UTC datetime.

    A trailing ``Z`` is accepted and naive values are taken to be UTC.

    Raises:
        ValidationError: If the value is empty, not ISO-8601, or out of
            range once converted to UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value if value is not None else "").strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid date value: {value}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        raise ValidationError(f"Invalid date value: {value}") from None


def try_parse_interval(start: Any, end: Any) -> Optional[TimeInterval]:
    """Build an interval from raw bounds, or None if either is missing or bad."""
    if not start or not end:
        return None
    try:
        return TimeInterval(parse_instant(start), parse_instant(end))
    except (ValidationError, ValueError):
        return None


def round_up_to_hour(instant: datetime) -> datetime:
    """Return ``instant`` if it is on the hour, else the next hour boundary."""
    floored = instant.replace(minute=0, second=0, microsecond=0)
    if floored == instant:
        return instant
    return floored + ONE_HOUR


def to_iso(instant: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision, e.g. ``2025-03-18T10:00:00.000Z``."""
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
