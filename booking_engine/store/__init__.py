from booking_engine.store.airtable import AirtableRecordStore
from booking_engine.store.base import (
    EmailEquals,
    Record,
    RecordFilter,
    RecordStore,
    StatusEquals,
    StatusNot,
    Table,
)
from booking_engine.store.memory import InMemoryRecordStore

__all__ = [
    "RecordStore", "Record", "RecordFilter", "Table",
    "EmailEquals", "StatusEquals", "StatusNot",
    "AirtableRecordStore", "InMemoryRecordStore",
]
