"""Client trust classification: look up by email, create if unseen."""

import logging

from booking_engine.schemas.booking_schema import BookingRequest
from booking_engine.schemas.client_schema import ClientRecord, ClientStatus
from booking_engine.store.base import EmailEquals, RecordStore, Table
from booking_engine.store.records import client_from_record, new_client_fields

logger = logging.getLogger(__name__)


class ClientClassifier:
    """Resolves the requesting client's record and trust status."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def classify(self, request: BookingRequest) -> ClientRecord:
        """Return the client's record, creating an ``Unknown`` one if absent."""
        matches = self._store.fetch_all(Table.CLIENTS, EmailEquals(request.email_key))
        if matches:
            client = client_from_record(matches[0])
            logger.debug("Returning client %s has status '%s'", client.id, client.status_raw)
            return client

        fields = new_client_fields(request)
        created = self._store.create_record(Table.CLIENTS, fields)
        logger.info("New client created: %s", created.id)
        return ClientRecord(
            id=created.id,
            name=request.name,
            email=request.email,
            status=ClientStatus.UNKNOWN,
            status_raw=ClientStatus.UNKNOWN.value,
        )
