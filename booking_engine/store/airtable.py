"""
Airtable-backed record store.

Talks to the Airtable REST API with ``requests``. ``fetch_all`` follows
the ``offset`` cursor until every page has been read; any transport
failure or non-2xx response is raised as ``UpstreamError`` with nothing
retried here.
"""

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import requests

from booking_engine.config import StoreConfig
from booking_engine.errors import ConfigurationError, UpstreamError
from booking_engine.store.base import Record, RecordFilter, RecordStore, Table

logger = logging.getLogger(__name__)


class AirtableRecordStore(RecordStore):
    """RecordStore implementation over the Airtable REST API."""

    def __init__(
        self,
        token: str,
        base_id: str,
        tables: Mapping[Table, str],
        api_url: str = "https://api.airtable.com/v0",
        page_size: int = 100,
        timeout_seconds: int = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = f"{api_url.rstrip('/')}/{base_id}"
        self._tables = dict(tables)
        self._page_size = page_size
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})

    @classmethod
    def from_config(
        cls, config: StoreConfig, session: Optional[requests.Session] = None
    ) -> "AirtableRecordStore":
        tables = {
            table: name
            for table, name in (
                (Table.AVAILABILITY, config.availability_table),
                (Table.BOOKINGS, config.bookings_table),
                (Table.CLIENTS, config.clients_table),
            )
            if name
        }
        return cls(
            token=config.token or "",
            base_id=config.base_id or "",
            tables=tables,
            api_url=config.api_url,
            page_size=config.page_size,
            timeout_seconds=config.timeout_seconds,
            session=session,
        )

    def _table_url(self, table: Table) -> str:
        try:
            name = self._tables[table]
        except KeyError:
            raise ConfigurationError(f"No Airtable table configured for '{table.value}'") from None
        return f"{self._base_url}/{quote(name, safe='')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> dict:
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Airtable %s %s failed: %s", method, url, exc)
            raise UpstreamError(f"Airtable request failed: {exc}") from exc

        if not response.ok:
            logger.error(
                "Airtable %s %s returned %s: %s",
                method, url, response.status_code, response.text[:200],
            )
            raise UpstreamError(
                f"Airtable returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError("Airtable returned a non-JSON body") from exc

    def fetch_all(self, table: Table, record_filter: Optional[RecordFilter] = None) -> list[Record]:
        url = self._table_url(table)
        params: dict[str, str] = {"pageSize": str(self._page_size)}
        if record_filter is not None:
            params["filterByFormula"] = record_filter.to_formula()

        records: list[Record] = []
        offset: Optional[str] = None
        while True:
            page_params = dict(params)
            if offset:
                page_params["offset"] = offset
            payload = self._request("GET", url, params=page_params)
            for raw in payload.get("records") or []:
                records.append(Record(
                    id=raw.get("id"),
                    fields=raw.get("fields") or {},
                    created_time=raw.get("createdTime"),
                ))
            offset = payload.get("offset")
            if not offset:
                break

        logger.debug("Fetched %d record(s) from %s", len(records), table.value)
        return records

    def create_record(self, table: Table, fields: Mapping[str, Any]) -> Record:
        payload = self._request("POST", self._table_url(table), json={"fields": dict(fields)})
        record = Record(
            id=payload.get("id"),
            fields=payload.get("fields") or dict(fields),
            created_time=payload.get("createdTime"),
        )
        logger.info("Created %s record %s", table.value, record.id)
        return record
