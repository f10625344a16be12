"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestPackageImports:
    def test_top_level_exports(self):
        from booking_engine import (
            AppConfig, BookingDecisionEngine, ConfigurationError, SlotEnumerator,
            UpstreamError, ValidationError, load_config,
        )
        assert issubclass(ValidationError, Exception)
        assert AppConfig().scheduling.session_minutes == 50

    def test_scheduling_exports(self):
        from booking_engine.scheduling import (
            BookingDecisionEngine, ClientClassifier, DecisionStage,
            SlotEnumerator, TimeInterval, overlaps, parse_instant,
        )
        assert DecisionStage.VALIDATE == "validate"

    def test_store_exports(self):
        from booking_engine.store import (
            AirtableRecordStore, EmailEquals, InMemoryRecordStore,
            Record, RecordStore, StatusEquals, StatusNot, Table,
        )
        assert issubclass(InMemoryRecordStore, RecordStore)
        assert issubclass(AirtableRecordStore, RecordStore)


class TestSchemaImports:
    def test_booking_schema(self):
        from booking_engine.schemas.booking_schema import BookingStatus, DecisionStatus
        assert BookingStatus.PENDING_REVIEW == "Pending Review"
        assert DecisionStatus.UNAVAILABLE == "unavailable"

    def test_client_schema(self):
        from booking_engine.schemas.client_schema import ClientStatus
        assert ClientStatus.from_raw(" Active ") == ClientStatus.ACTIVE
        assert ClientStatus.from_raw(None) == ClientStatus.UNKNOWN


class TestLoggingContext:
    def test_request_scope_binds_and_restores(self):
        import contextvars

        from booking_engine.logging_context import NO_REQUEST_ID, get_request_id, request_scope

        def run():
            with request_scope("REQ-test") as request_id:
                assert get_request_id() == request_id == "REQ-test"
            return get_request_id()

        assert contextvars.Context().run(run) == NO_REQUEST_ID

    def test_request_scope_generates_id(self):
        import contextvars

        from booking_engine.logging_context import request_scope

        def run():
            with request_scope() as request_id:
                return request_id

        assert contextvars.Context().run(run).startswith("REQ-")
