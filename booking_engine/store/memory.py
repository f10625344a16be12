"""
In-memory record store.

Used for stub mode and tests. Seed it directly, from a fixture document,
or from the legacy stub fields a booking request may carry.
"""

import logging
from itertools import count
from typing import Any, Mapping, Optional

from booking_engine.store.base import EMAIL_FIELD, STATUS_FIELD, Record, RecordFilter, RecordStore, Table
from booking_engine.store.records import NAME_FIELD, interval_fields

logger = logging.getLogger(__name__)

STUB_CLIENT_ID = "stub-client"


class InMemoryRecordStore(RecordStore):
    """RecordStore holding records in process memory."""

    def __init__(self, id_prefix: str = "rec") -> None:
        self._tables: dict[Table, list[Record]] = {table: [] for table in Table}
        self._id_prefix = id_prefix
        self._ids = count(1)
        self.created: list[tuple[Table, Record]] = []

    def add(self, table: Table, fields: Mapping[str, Any], record_id: Optional[str] = None) -> Record:
        """Seed a record without counting it as a write."""
        record = Record(id=record_id or self._next_id(table), fields=dict(fields))
        self._tables[table].append(record)
        return record

    def _next_id(self, table: Table) -> str:
        return f"{self._id_prefix}-{table.value}-{next(self._ids)}"

    def records(self, table: Table) -> list[Record]:
        return list(self._tables[table])

    def fetch_all(self, table: Table, record_filter: Optional[RecordFilter] = None) -> list[Record]:
        rows = self._tables[table]
        if record_filter is None:
            return list(rows)
        return [r for r in rows if record_filter.matches(r.fields)]

    def create_record(self, table: Table, fields: Mapping[str, Any]) -> Record:
        record = self.add(table, fields)
        self.created.append((table, record))
        logger.info("Created %s record %s (in memory)", table.value, record.id)
        return record

    @classmethod
    def from_fixture(cls, data: Mapping[str, Any]) -> "InMemoryRecordStore":
        """Build a store from ``{availability: [...], bookings: [...], clients: [...]}``.

        Availability and bookings entries are ``{start, end}`` objects
        (bookings may add ``status``, default ``Accepted``); clients are
        ``{name, email, status}``.
        """
        store = cls()
        for window in data.get("availability") or []:
            store.add(Table.AVAILABILITY, interval_fields(window.get("start"), window.get("end")))
        for booking in data.get("bookings") or []:
            store.add(Table.BOOKINGS, interval_fields(
                booking.get("start"), booking.get("end"), booking.get("status") or "Accepted",
            ))
        for client in data.get("clients") or []:
            store.add(Table.CLIENTS, {
                NAME_FIELD: client.get("name", ""),
                EMAIL_FIELD: client.get("email", ""),
                STATUS_FIELD: client.get("status") or "Unknown",
            })
        return store

    @classmethod
    def from_stub_payload(cls, body: Mapping[str, Any]) -> "InMemoryRecordStore":
        """Build fixtures from the stub fields of a booking request body.

        ``stubClientStatus`` (default ``Active``) seeds a client matching the
        request email, ``stubAvailabilityStart``/``stubAvailabilityEnd``
        default to the requested interval, and ``stubExistingBookings`` is a
        list of ``{start, end, status}`` with status defaulting to Accepted.
        A body that is not an object seeds nothing.
        """
        store = cls(id_prefix="stub")
        if not isinstance(body, Mapping):
            return store
        status = str(body.get("stubClientStatus") or "Active").lower()
        store.add(Table.CLIENTS, {
            NAME_FIELD: body.get("name", ""),
            EMAIL_FIELD: str(body.get("email") or ""),
            STATUS_FIELD: status[:1].upper() + status[1:],
        }, record_id=STUB_CLIENT_ID)
        store.add(Table.AVAILABILITY, interval_fields(
            body.get("stubAvailabilityStart") or body.get("requestedStart"),
            body.get("stubAvailabilityEnd") or body.get("requestedEnd"),
        ))
        for index, booking in enumerate(body.get("stubExistingBookings") or []):
            store.add(Table.BOOKINGS, interval_fields(
                booking.get("start"), booking.get("end"), booking.get("status") or "Accepted",
            ), record_id=f"stub-booking-{index}")
        return store
