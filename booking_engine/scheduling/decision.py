"""
Booking decision engine.

Evaluates one booking request against the provider's availability, the
existing accepted bookings, and the client's trust status:

    VALIDATE -> CLASSIFY_CLIENT -> CHECK_AVAILABILITY -> CHECK_OVERLAP -> DECIDE

Every request ends in exactly one of ``error``, ``unavailable``,
``pending`` or ``accepted``; the last two write exactly one booking.

The overlap check and the booking write are not atomic against the
store. Two concurrent requests for the same slot can both be accepted
unless the caller supplies a ``reservation_guard`` that serializes
requests for overlapping intervals.
"""

from contextlib import AbstractContextManager, nullcontext
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from booking_engine.artifacts.calendar import build_calendar_attachment
from booking_engine.artifacts.email_templates import (
    build_client_confirmation,
    build_provider_confirmed_alert,
    build_provider_review_alert,
)
from booking_engine.clock import Clock, SystemClock
from booking_engine.config import AppConfig
from booking_engine.errors import ValidationError
from booking_engine.logging_context import get_request_logger, request_scope
from booking_engine.scheduling.clients import ClientClassifier
from booking_engine.scheduling.intervals import TimeInterval, to_iso
from booking_engine.schemas.booking_schema import (
    BookingRequest,
    BookingStatus,
    ClientSummary,
    DecisionResult,
    DecisionStatus,
    Identifiers,
    SlotRef,
)
from booking_engine.store.base import RecordStore, StatusNot, Table
from booking_engine.store.records import booking_fields, bookings_from_records, windows_from_records

logger = get_request_logger(__name__)

ReservationGuard = Callable[[TimeInterval], AbstractContextManager]

MESSAGE_ACCEPTED = "Booking confirmed."
MESSAGE_PENDING = "Request submitted and awaiting provider review."
MESSAGE_OUTSIDE_HOURS = "Requested slot does not fall within available working hours."
MESSAGE_TAKEN = "Requested slot is no longer available. Please select another time."


class DecisionStage(str, Enum):
    VALIDATE = "validate"
    CLASSIFY_CLIENT = "classify_client"
    CHECK_AVAILABILITY = "check_availability"
    CHECK_OVERLAP = "check_overlap"
    DECIDE = "decide"


def _no_guard(interval: TimeInterval) -> AbstractContextManager:
    return nullcontext()


class BookingDecisionEngine:
    """Decides and records the outcome of a single booking request."""

    def __init__(
        self,
        store: RecordStore,
        config: AppConfig,
        clock: Optional[Clock] = None,
        reservation_guard: Optional[ReservationGuard] = None,
    ) -> None:
        self._store = store
        self._config = config
        self._clock = clock or SystemClock()
        self._guard = reservation_guard or _no_guard
        self._classifier = ClientClassifier(store)

    def decide(self, payload: Mapping[str, Any]) -> DecisionResult:
        """
        Evaluate one booking request.

        Args:
            payload: Raw request body with ``name``, ``email``,
                ``bookingReason``, ``requestedStart`` and ``requestedEnd``.

        Returns:
            The decision. Validation problems come back as status ``error``.

        Raises:
            UpstreamError: If any store read or write fails.
        """
        with request_scope():
            return self._decide(payload)

    def _decide(self, payload: Mapping[str, Any]) -> DecisionResult:
        self._enter(DecisionStage.VALIDATE)
        try:
            request = BookingRequest.from_payload(payload)
        except ValidationError as exc:
            logger.info("Request rejected: %s", exc)
            return DecisionResult.error(str(exc))

        interval = request.interval

        self._enter(DecisionStage.CLASSIFY_CLIENT)
        client = self._classifier.classify(request)

        self._enter(DecisionStage.CHECK_AVAILABILITY)
        windows = windows_from_records(self._store.fetch_all(Table.AVAILABILITY))
        availability_matched = any(window.contains(interval) for window in windows)

        with self._guard(interval):
            self._enter(DecisionStage.CHECK_OVERLAP)
            bookings = bookings_from_records(
                self._store.fetch_all(Table.BOOKINGS, StatusNot(BookingStatus.CANCELLED.value))
            )
            overlaps_existing = any(
                booking.blocks_availability and booking.interval.overlaps(interval)
                for booking in bookings
            )

            self._enter(DecisionStage.DECIDE)
            booking_id: Optional[str] = None
            if not availability_matched:
                status, message = DecisionStatus.UNAVAILABLE, MESSAGE_OUTSIDE_HOURS
            elif overlaps_existing:
                status, message = DecisionStatus.UNAVAILABLE, MESSAGE_TAKEN
            elif client.is_trusted:
                status, message = DecisionStatus.ACCEPTED, MESSAGE_ACCEPTED
                booking_id = self._write_booking(request, client, BookingStatus.ACCEPTED)
            else:
                status, message = DecisionStatus.PENDING, MESSAGE_PENDING
                booking_id = self._write_booking(request, client, BookingStatus.PENDING_REVIEW)

        logger.info(
            "Request for %s -> %s (available=%s, overlap=%s, client=%s)",
            to_iso(interval.start), status.value,
            availability_matched, overlaps_existing, client.status_raw,
        )

        result = dict(
            status=status,
            message=message,
            client_status=client.status_raw,
            slot=SlotRef(start=to_iso(interval.start), end=to_iso(interval.end)),
            availability_matched=availability_matched,
            overlaps_existing=overlaps_existing,
            identifiers=Identifiers(client_record_id=client.id, booking_record_id=booking_id),
            client=ClientSummary(name=request.name, email=request.email),
            booking_reason=request.booking_reason,
        )
        provider_email = self._config.notifications.provider_alert_email
        if status == DecisionStatus.ACCEPTED:
            result.update(
                client_email=build_client_confirmation(request),
                provider_email=build_provider_confirmed_alert(request, provider_email),
                calendar=build_calendar_attachment(
                    interval,
                    request.name,
                    request.booking_reason,
                    booking_id,
                    self._clock.now(),
                    self._config.notifications,
                ),
            )
        elif status == DecisionStatus.PENDING:
            result.update(provider_email=build_provider_review_alert(request, provider_email))
        return DecisionResult(**result)

    def _write_booking(self, request, client, status: BookingStatus) -> Optional[str]:
        decided_at = self._clock.now() if status == BookingStatus.ACCEPTED else None
        record = self._store.create_record(
            Table.BOOKINGS, booking_fields(request, client, status, decided_at)
        )
        logger.info("Booking %s written with status %s", record.id, status.value)
        return record.id

    @staticmethod
    def _enter(stage: DecisionStage) -> None:
        logger.debug("Decision stage: %s", stage.value)
