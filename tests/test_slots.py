"""Tests for slot enumeration from availability windows."""

from datetime import timedelta
from zoneinfo import ZoneInfo

import pytest

from booking_engine.clock import FixedClock
from booking_engine.config import SchedulingConfig
from booking_engine.scheduling.slots import SlotEnumerator, format_local
from booking_engine.schemas.booking_schema import BookingStatus
from booking_engine.schemas.slot_schema import SlotListing
from tests.conftest import NOW, make_booking, make_interval, utc

SESSION = timedelta(minutes=50)
CADENCE = timedelta(minutes=60)


@pytest.fixture
def enumerator(clock):
    return SlotEnumerator(SchedulingConfig(), clock)


def _starts(slots):
    return [slot.start for slot in slots]


class TestSlotGeneration:
    def test_window_yields_hourly_slots(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 12))
        slots = enumerator.enumerate([window], [])
        assert _starts(slots) == [utc(2025, 3, 18, 9), utc(2025, 3, 18, 10), utc(2025, 3, 18, 11)]

    def test_every_slot_is_one_session_long(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 17))
        slots = enumerator.enumerate([window], [])
        assert slots
        assert all(slot.end - slot.start == SESSION for slot in slots)

    def test_consecutive_slots_follow_cadence(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 17))
        starts = _starts(enumerator.enumerate([window], []))
        assert all(b - a == CADENCE for a, b in zip(starts, starts[1:]))

    def test_session_must_fit_before_window_end(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 10, 49))
        # 09:00 + 50 min fits; 10:00 + 50 min runs past 10:49.
        assert _starts(enumerator.enumerate([window], [])) == [utc(2025, 3, 18, 9)]

    def test_window_too_short_yields_nothing(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 9, 45))
        assert enumerator.enumerate([window], []) == []

    def test_window_in_progress_is_clamped_and_rounded(self, enumerator):
        # now is 08:20, so the first slot starts at 09:00
        window = make_interval(utc(2025, 3, 18, 7), utc(2025, 3, 18, 11))
        assert _starts(enumerator.enumerate([window], [])) == [
            utc(2025, 3, 18, 9), utc(2025, 3, 18, 10),
        ]

    def test_window_starting_off_the_hour_rounds_up(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9, 30), utc(2025, 3, 18, 12))
        assert _starts(enumerator.enumerate([window], [])) == [
            utc(2025, 3, 18, 10), utc(2025, 3, 18, 11),
        ]

    def test_custom_cadence(self):
        config = SchedulingConfig(session_minutes=30, break_minutes=0)
        enumerator = SlotEnumerator(config, FixedClock(NOW))
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 10))
        assert _starts(enumerator.enumerate([window], [])) == [
            utc(2025, 3, 18, 9), utc(2025, 3, 18, 9, 30),
        ]


class TestHorizon:
    def test_past_window_is_skipped(self, enumerator):
        window = make_interval(utc(2025, 3, 17, 9), utc(2025, 3, 17, 12))
        assert enumerator.enumerate([window], []) == []

    def test_window_ending_now_is_skipped(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 6), NOW)
        assert enumerator.enumerate([window], []) == []

    def test_window_beyond_horizon_is_skipped(self, enumerator):
        start = NOW + timedelta(days=30)
        window = make_interval(start, start + timedelta(hours=3))
        assert enumerator.enumerate([window], []) == []

    def test_window_inside_horizon_is_used(self, enumerator):
        start = utc(2025, 4, 16, 9)
        window = make_interval(start, start + timedelta(hours=2))
        assert len(enumerator.enumerate([window], [])) == 2


class TestBookingExclusion:
    def test_accepted_booking_removes_slot(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 12))
        booking = make_booking(utc(2025, 3, 18, 10), utc(2025, 3, 18, 10, 50))
        assert _starts(enumerator.enumerate([window], [booking])) == [
            utc(2025, 3, 18, 9), utc(2025, 3, 18, 11),
        ]

    def test_straddling_booking_removes_two_slots(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 12))
        booking = make_booking(utc(2025, 3, 18, 10, 30), utc(2025, 3, 18, 11, 30))
        assert _starts(enumerator.enumerate([window], [booking])) == [utc(2025, 3, 18, 9)]

    def test_booking_in_break_does_not_block(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 12))
        booking = make_booking(utc(2025, 3, 18, 9, 50), utc(2025, 3, 18, 10))
        assert len(enumerator.enumerate([window], [booking])) == 3

    def test_pending_booking_does_not_block(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 12))
        booking = make_booking(
            utc(2025, 3, 18, 10), utc(2025, 3, 18, 10, 50), BookingStatus.PENDING_REVIEW
        )
        assert len(enumerator.enumerate([window], [booking])) == 3

    def test_booking_checked_across_windows(self, enumerator):
        morning = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 11))
        afternoon = make_interval(utc(2025, 3, 18, 13), utc(2025, 3, 18, 15))
        booking = make_booking(utc(2025, 3, 18, 13), utc(2025, 3, 18, 13, 50))
        assert _starts(enumerator.enumerate([morning, afternoon], [booking])) == [
            utc(2025, 3, 18, 9), utc(2025, 3, 18, 10), utc(2025, 3, 18, 14),
        ]

    def test_no_slot_overlaps_an_accepted_booking(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 19, 9))
        bookings = [
            make_booking(utc(2025, 3, 18, 10, 15), utc(2025, 3, 18, 10, 45)),
            make_booking(utc(2025, 3, 18, 14), utc(2025, 3, 18, 16, 30)),
        ]
        slots = enumerator.enumerate([window], bookings)
        for slot in slots:
            assert not any(slot.interval.overlaps(b.interval) for b in bookings)


class TestOrderingAndStability:
    def test_output_sorted_across_windows(self, enumerator):
        later = make_interval(utc(2025, 3, 20, 9), utc(2025, 3, 20, 10))
        earlier = make_interval(utc(2025, 3, 19, 9), utc(2025, 3, 19, 10))
        assert _starts(enumerator.enumerate([later, earlier], [])) == [
            utc(2025, 3, 19, 9), utc(2025, 3, 20, 9),
        ]

    def test_overlapping_windows_tolerated(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 11))
        slots = enumerator.enumerate([window, window], [])
        assert _starts(slots) == [
            utc(2025, 3, 18, 9), utc(2025, 3, 18, 9),
            utc(2025, 3, 18, 10), utc(2025, 3, 18, 10),
        ]

    def test_repeat_calls_are_identical(self, enumerator):
        windows = [make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 17))]
        bookings = [make_booking(utc(2025, 3, 18, 12), utc(2025, 3, 18, 13))]
        assert enumerator.enumerate(windows, bookings) == enumerator.enumerate(windows, bookings)


class TestDisplay:
    def test_start_local_in_sydney_time(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 10))
        (slot,) = enumerator.enumerate([window], [])
        assert slot.start_local == "Tue, 18 Mar 2025, 08:00 pm"

    def test_format_local_morning(self):
        assert format_local(utc(2025, 6, 1, 23), ZoneInfo("Australia/Sydney")) == "Mon, 2 Jun 2025, 09:00 am"

    def test_listing_response_shape(self, enumerator):
        window = make_interval(utc(2025, 3, 18, 9), utc(2025, 3, 18, 11))
        listing = SlotListing.from_slots(enumerator.enumerate([window], []))
        response = listing.to_response()
        assert response["count"] == 2
        assert response["slots"][0] == {
            "start": "2025-03-18T09:00:00.000Z",
            "end": "2025-03-18T09:50:00.000Z",
            "startLocal": "Tue, 18 Mar 2025, 08:00 pm",
        }
