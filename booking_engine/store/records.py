"""
Mapping between raw store records and domain objects.

This is the ingestion edge: status strings are normalized into enums
here, once, and malformed rows are skipped with a warning instead of
failing the whole request.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from booking_engine.errors import ValidationError
from booking_engine.scheduling.intervals import TimeInterval, parse_instant, to_iso, try_parse_interval
from booking_engine.schemas.booking_schema import Booking, BookingRequest, BookingStatus
from booking_engine.schemas.client_schema import ClientRecord, ClientStatus
from booking_engine.store.base import EMAIL_FIELD, STATUS_FIELD, Record

logger = logging.getLogger(__name__)

START_FIELD = "Start"
END_FIELD = "End"
NAME_FIELD = "Name"
LATEST_REASON_FIELD = "Latest Reason"
CLIENT_NAME_FIELD = "Client Name"
BOOKING_REASON_FIELD = "Booking Reason"
CLIENT_STATUS_FIELD = "Client Status"
SOURCE_FIELD = "Source"
DECISION_TIMESTAMP_FIELD = "Decision Timestamp"

BOOKING_SOURCE = "Squarespace"


def window_from_record(record: Record) -> Optional[TimeInterval]:
    return try_parse_interval(record.fields.get(START_FIELD), record.fields.get(END_FIELD))


def windows_from_records(records: Iterable[Record]) -> list[TimeInterval]:
    """Availability windows, skipping rows with missing or unparsable bounds."""
    windows: list[TimeInterval] = []
    for record in records:
        window = window_from_record(record)
        if window is None:
            logger.warning("Skipping malformed availability record %s", record.id)
            continue
        windows.append(window)
    return windows


def _parse_created(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return parse_instant(raw)
    except ValidationError:
        return None


def booking_from_record(record: Record) -> Optional[Booking]:
    interval = try_parse_interval(record.fields.get(START_FIELD), record.fields.get(END_FIELD))
    status = BookingStatus.from_raw(record.fields.get(STATUS_FIELD))
    if interval is None or status is None:
        return None
    return Booking(
        interval=interval,
        status=status,
        client_ref=record.fields.get(EMAIL_FIELD),
        created_at=_parse_created(record.created_time),
        record_id=record.id,
    )


def bookings_from_records(records: Iterable[Record]) -> list[Booking]:
    """Bookings, skipping rows with bad bounds or an unrecognized status."""
    bookings: list[Booking] = []
    for record in records:
        booking = booking_from_record(record)
        if booking is None:
            logger.warning("Skipping malformed booking record %s", record.id)
            continue
        bookings.append(booking)
    return bookings


def client_from_record(record: Record) -> ClientRecord:
    status_raw = str(record.fields.get(STATUS_FIELD) or "").strip().lower() or "unknown"
    return ClientRecord(
        id=record.id,
        name=str(record.fields.get(NAME_FIELD) or ""),
        email=str(record.fields.get(EMAIL_FIELD) or ""),
        status=ClientStatus.from_raw(status_raw),
        status_raw=status_raw,
    )


def new_client_fields(request: BookingRequest) -> dict[str, Any]:
    return {
        NAME_FIELD: request.name,
        EMAIL_FIELD: request.email,
        STATUS_FIELD: "Unknown",
        LATEST_REASON_FIELD: request.booking_reason,
    }


def booking_fields(
    request: BookingRequest,
    client: ClientRecord,
    status: BookingStatus,
    decided_at: Optional[datetime] = None,
) -> dict[str, Any]:
    """Fields for the single booking write issued per accepted/pending decision."""
    fields: dict[str, Any] = {
        CLIENT_NAME_FIELD: request.name,
        EMAIL_FIELD: request.email,
        START_FIELD: to_iso(request.requested_start),
        END_FIELD: to_iso(request.requested_end),
        BOOKING_REASON_FIELD: request.booking_reason,
        CLIENT_STATUS_FIELD: client.status_raw.capitalize(),
        SOURCE_FIELD: BOOKING_SOURCE,
        STATUS_FIELD: status.value,
    }
    if decided_at is not None:
        fields[DECISION_TIMESTAMP_FIELD] = to_iso(decided_at)
    return fields


def interval_fields(start: Any, end: Any, status: Optional[str] = None) -> dict[str, Any]:
    """Raw Start/End(/Status) fields, used to seed fixture stores."""
    fields: dict[str, Any] = {START_FIELD: start, END_FIELD: end}
    if status is not None:
        fields[STATUS_FIELD] = status
    return fields
