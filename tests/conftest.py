"""Shared test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from booking_engine.clock import FixedClock
from booking_engine.config import AppConfig, NotificationConfig
from booking_engine.scheduling.intervals import TimeInterval
from booking_engine.schemas.booking_schema import Booking, BookingStatus
from booking_engine.store.base import EMAIL_FIELD, STATUS_FIELD, Table
from booking_engine.store.memory import InMemoryRecordStore
from booking_engine.store.records import NAME_FIELD, interval_fields

# Tuesday morning UTC; 2025-03-18 is still daylight time in Sydney (UTC+11).
NOW = datetime(2025, 3, 18, 8, 20, tzinfo=timezone.utc)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_interval(start: datetime, end: datetime) -> TimeInterval:
    return TimeInterval(start, end)


def make_booking(
    start: datetime, end: datetime, status: BookingStatus = BookingStatus.ACCEPTED
) -> Booking:
    return Booking(interval=TimeInterval(start, end), status=status)


def make_request_body(
    start: str = "2025-03-18T10:00:00Z",
    end: str = "2025-03-18T10:50:00Z",
    **overrides: Any,
) -> dict[str, Any]:
    """Helper to create a booking request body with sensible defaults."""
    body = {
        "name": "Jane Citizen",
        "email": "jane@example.com",
        "bookingReason": "Initial consultation",
        "requestedStart": start,
        "requestedEnd": end,
    }
    body.update(overrides)
    return body


def make_store(
    windows: Optional[list[tuple[str, str]]] = None,
    bookings: Optional[list[tuple[str, str, str]]] = None,
    clients: Optional[list[tuple[str, str, str]]] = None,
) -> InMemoryRecordStore:
    """Seed an in-memory store with (start, end), (start, end, status) and
    (name, email, status) tuples."""
    store = InMemoryRecordStore()
    if windows is None:
        windows = [("2025-03-18T09:00:00Z", "2025-03-18T12:00:00Z")]
    for start, end in windows:
        store.add(Table.AVAILABILITY, interval_fields(start, end))
    for start, end, status in bookings or []:
        store.add(Table.BOOKINGS, interval_fields(start, end, status))
    for name, email, status in clients or []:
        store.add(Table.CLIENTS, {NAME_FIELD: name, EMAIL_FIELD: email, STATUS_FIELD: status})
    return store


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def config():
    return AppConfig(notifications=NotificationConfig(provider_alert_email="provider@clinic.test"))
