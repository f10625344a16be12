"""
Slot enumeration.

Expands availability windows into fixed-length bookable slots on a
regular cadence (session + break), dropping any slot that overlaps an
accepted booking.

Algorithm:
    1. Ignore windows that have ended or start beyond the horizon.
    2. Start each window at max(window start, now), rounded up to the hour.
    3. Emit a slot every ``session + break`` while the session still fits.
    4. Drop slots overlapping any accepted booking, from any window.
    5. Sort all survivors by start.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable
from zoneinfo import ZoneInfo

from booking_engine.clock import Clock
from booking_engine.config import SchedulingConfig
from booking_engine.scheduling.intervals import TimeInterval, round_up_to_hour
from booking_engine.schemas.booking_schema import Booking
from booking_engine.schemas.slot_schema import Slot

logger = logging.getLogger(__name__)


def format_local(instant: datetime, tz: ZoneInfo) -> str:
    """Human display string, e.g. ``Tue, 18 Mar 2025, 09:00 pm``."""
    local = instant.astimezone(tz)
    meridiem = local.strftime("%p").lower()
    return f"{local:%a}, {local.day} {local:%b} {local.year}, {local:%I:%M} {meridiem}"


class SlotEnumerator:
    """Derives bookable slots from availability windows and bookings."""

    def __init__(self, config: SchedulingConfig, clock: Clock) -> None:
        self._session = timedelta(minutes=config.session_minutes)
        self._step = timedelta(minutes=config.session_minutes + config.break_minutes)
        self._horizon = timedelta(days=config.horizon_days)
        self._tz = ZoneInfo(config.display_timezone)
        self._clock = clock

    def candidate_slots(self, window: TimeInterval, now: datetime) -> list[TimeInterval]:
        """All on-cadence slots inside one window, ignoring bookings."""
        cursor = round_up_to_hour(max(window.start, now))
        candidates: list[TimeInterval] = []
        while cursor + self._session <= window.end:
            candidates.append(TimeInterval(cursor, cursor + self._session))
            cursor += self._step
        return candidates

    def enumerate(self, windows: Iterable[TimeInterval], bookings: Iterable[Booking]) -> list[Slot]:
        now = self._clock.now()
        horizon_end = now + self._horizon
        blocking = [b.interval for b in bookings if b.blocks_availability]

        slots: list[Slot] = []
        for window in windows:
            if window.end <= now or window.start >= horizon_end:
                continue
            for candidate in self.candidate_slots(window, now):
                if any(candidate.overlaps(booked) for booked in blocking):
                    continue
                slots.append(Slot(
                    start=candidate.start,
                    end=candidate.end,
                    start_local=format_local(candidate.start, self._tz),
                ))

        slots.sort(key=lambda slot: slot.start)
        logger.debug("Enumerated %d open slot(s) against %d booking(s)", len(slots), len(blocking))
        return slots
