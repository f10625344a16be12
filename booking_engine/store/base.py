"""
Record store interface.

The engine talks to tabular storage only through ``RecordStore``. Two
implementations exist: ``AirtableRecordStore`` (network-backed) and
``InMemoryRecordStore`` (fixtures for stub mode and tests). Which one is
used is decided by the caller, never by the engine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

# Field names shared by every table.
STATUS_FIELD = "Status"
EMAIL_FIELD = "Email"


class Table(str, Enum):
    """Logical tables; stores map them to concrete identifiers."""

    AVAILABILITY = "availability"
    BOOKINGS = "bookings"
    CLIENTS = "clients"


@dataclass(frozen=True)
class Record:
    """A stored row: identifier plus raw field mapping."""

    id: Optional[str]
    fields: dict[str, Any] = field(default_factory=dict)
    created_time: Optional[str] = None


class RecordFilter(ABC):
    """A query predicate expressible both in memory and as a store formula."""

    @abstractmethod
    def matches(self, fields: Mapping[str, Any]) -> bool:
        ...

    @abstractmethod
    def to_formula(self) -> str:
        ...


def quote_formula_value(value: str) -> str:
    """Escape a value for a single-quoted formula string literal."""
    return str(value).replace("'", "''")


@dataclass(frozen=True)
class EmailEquals(RecordFilter):
    """Case-insensitive exact match on the Email field."""

    email: str

    def matches(self, fields: Mapping[str, Any]) -> bool:
        return str(fields.get(EMAIL_FIELD) or "").strip().lower() == self.email.strip().lower()

    def to_formula(self) -> str:
        return f"LOWER({{{EMAIL_FIELD}}})='{quote_formula_value(self.email.strip().lower())}'"


@dataclass(frozen=True)
class StatusEquals(RecordFilter):
    status: str

    def matches(self, fields: Mapping[str, Any]) -> bool:
        return fields.get(STATUS_FIELD) == self.status

    def to_formula(self) -> str:
        return f"{{{STATUS_FIELD}}}='{quote_formula_value(self.status)}'"


@dataclass(frozen=True)
class StatusNot(RecordFilter):
    status: str

    def matches(self, fields: Mapping[str, Any]) -> bool:
        return fields.get(STATUS_FIELD) != self.status

    def to_formula(self) -> str:
        return f"NOT({{{STATUS_FIELD}}}='{quote_formula_value(self.status)}')"


class RecordStore(ABC):
    """Read/create access to the external tabular store."""

    @abstractmethod
    def fetch_all(self, table: Table, record_filter: Optional[RecordFilter] = None) -> list[Record]:
        """Return every matching record, exhausting pagination.

        Raises:
            UpstreamError: If the store cannot be read.
        """

    @abstractmethod
    def create_record(self, table: Table, fields: Mapping[str, Any]) -> Record:
        """Create a record and return it with its new identifier.

        Raises:
            UpstreamError: If the write fails.
        """
