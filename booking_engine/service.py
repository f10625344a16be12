"""
Request handlers tying config, stores and the core components together.

These are what an HTTP or workflow layer calls. Store selection (network
versus in-memory fixtures) happens here, never inside the engine.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from booking_engine.clock import Clock, SystemClock
from booking_engine.config import (
    AVAILABILITY_QUERY_SETTINGS,
    BOOKING_REQUEST_SETTINGS,
    AppConfig,
    require_store_config,
)
from booking_engine.scheduling.decision import BookingDecisionEngine, ReservationGuard
from booking_engine.scheduling.slots import SlotEnumerator
from booking_engine.schemas.booking_schema import BookingStatus, CalendarAttachment, DecisionResult
from booking_engine.schemas.slot_schema import SlotListing
from booking_engine.store.airtable import AirtableRecordStore
from booking_engine.store.base import RecordStore, StatusEquals, Table
from booking_engine.store.memory import InMemoryRecordStore
from booking_engine.store.records import bookings_from_records, windows_from_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingResponse:
    """Decision body plus the optional ``booking.ics`` attachment."""

    body: dict[str, Any]
    attachment: Optional[CalendarAttachment] = None
    result: Optional[DecisionResult] = None


def build_store(config: AppConfig, settings=BOOKING_REQUEST_SETTINGS) -> RecordStore:
    """Return the network-backed store, failing fast on missing settings.

    Raises:
        ConfigurationError: If required store settings are absent.
    """
    require_store_config(config, settings)
    return AirtableRecordStore.from_config(config.store)


def list_available_slots(
    store: RecordStore, config: AppConfig, clock: Optional[Clock] = None
) -> SlotListing:
    windows = windows_from_records(store.fetch_all(Table.AVAILABILITY))
    bookings = bookings_from_records(
        store.fetch_all(Table.BOOKINGS, StatusEquals(BookingStatus.ACCEPTED.value))
    )
    enumerator = SlotEnumerator(config.scheduling, clock or SystemClock())
    return SlotListing.from_slots(enumerator.enumerate(windows, bookings))


def handle_availability_query(
    config: AppConfig,
    store: Optional[RecordStore] = None,
    clock: Optional[Clock] = None,
) -> dict[str, Any]:
    """Answer an availability query with ``{slots, count}``."""
    if store is None:
        if config.store.use_stub:
            store = InMemoryRecordStore()
        else:
            store = build_store(config, AVAILABILITY_QUERY_SETTINGS)
    listing = list_available_slots(store, config, clock)
    logger.info("Availability query returned %d slot(s)", listing.count)
    return listing.to_response()


def handle_booking_request(
    payload: Mapping[str, Any],
    config: AppConfig,
    store: Optional[RecordStore] = None,
    clock: Optional[Clock] = None,
    reservation_guard: Optional[ReservationGuard] = None,
) -> BookingResponse:
    """Decide a booking request and shape the response.

    In stub mode without an explicit store, fixtures are built from the
    request's ``stub*`` fields.
    """
    if store is None:
        if config.store.use_stub:
            store = InMemoryRecordStore.from_stub_payload(payload)
        else:
            store = build_store(config, BOOKING_REQUEST_SETTINGS)
    engine = BookingDecisionEngine(store, config, clock, reservation_guard)
    result = engine.decide(payload)
    return BookingResponse(body=result.to_response(), attachment=result.calendar, result=result)
