"""Booking request, stored booking and decision result models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from booking_engine.errors import ValidationError
from booking_engine.scheduling.intervals import TimeInterval, parse_instant

# External (wire) names of the required request fields, in reporting order.
REQUIRED_FIELDS = ("name", "email", "bookingReason", "requestedStart", "requestedEnd")


class BookingStatus(str, Enum):
    """Stored booking status. Values are the record store's spelling."""

    ACCEPTED = "Accepted"
    PENDING_REVIEW = "Pending Review"
    CANCELLED = "Cancelled"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> Optional["BookingStatus"]:
        """Normalize a store status string; None when unrecognized."""
        key = "".join((raw or "").lower().split()).replace("_", "")
        return _BOOKING_STATUS_ALIASES.get(key)


_BOOKING_STATUS_ALIASES: dict[str, BookingStatus] = {
    "accepted": BookingStatus.ACCEPTED,
    "pendingreview": BookingStatus.PENDING_REVIEW,
    "pending": BookingStatus.PENDING_REVIEW,
    "cancelled": BookingStatus.CANCELLED,
    "canceled": BookingStatus.CANCELLED,
}


@dataclass(frozen=True)
class Booking:
    """A booking loaded from the record store."""

    interval: TimeInterval
    status: BookingStatus
    client_ref: Optional[str] = None
    created_at: Optional[datetime] = None
    record_id: Optional[str] = None

    @property
    def blocks_availability(self) -> bool:
        return self.status == BookingStatus.ACCEPTED


class BookingRequest(BaseModel):
    """Validated inbound booking request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    email: str
    booking_reason: str = Field(alias="bookingReason")
    requested_start: datetime = Field(alias="requestedStart")
    requested_end: datetime = Field(alias="requestedEnd")

    @classmethod
    def from_payload(cls, body: Mapping[str, Any]) -> "BookingRequest":
        """Validate a raw request body.

        Raises:
            ValidationError: On missing/blank fields, unparsable dates,
                or an end that is not after the start.
        """
        if not isinstance(body, Mapping):
            raise ValidationError("Request body must be a JSON object")
        missing = [
            name for name in REQUIRED_FIELDS
            if body.get(name) is None or str(body.get(name)).strip() == ""
        ]
        if missing:
            raise ValidationError(f"Missing fields: {', '.join(missing)}")

        start = parse_instant(body["requestedStart"])
        end = parse_instant(body["requestedEnd"])
        if end <= start:
            raise ValidationError("requestedEnd must be after requestedStart")

        return cls(
            name=str(body["name"]).strip(),
            email=str(body["email"]).strip(),
            booking_reason=str(body["bookingReason"]).strip(),
            requested_start=start,
            requested_end=end,
        )

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.requested_start, self.requested_end)

    @property
    def email_key(self) -> str:
        """Lower-cased email used for case-insensitive client lookup."""
        return self.email.lower()


class DecisionStatus(str, Enum):
    ERROR = "error"
    UNAVAILABLE = "unavailable"
    PENDING = "pending"
    ACCEPTED = "accepted"


class EmailMessage(BaseModel):
    """Outbound email payload handed to the delivery collaborator."""

    model_config = ConfigDict(frozen=True)

    to: str
    subject: str
    text: str


class CalendarAttachment(BaseModel):
    """Base64-encoded iCalendar attachment."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    data: str
    mime_type: str = Field(default="text/calendar; charset=utf-8", alias="mimeType")
    file_name: str = Field(default="booking.ics", alias="fileName")


class SlotRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class Identifiers(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_record_id: Optional[str] = Field(default=None, alias="clientRecordId")
    booking_record_id: Optional[str] = Field(default=None, alias="bookingRecordId")


class ClientSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class DecisionResult(BaseModel):
    """Outcome of a single booking request. Produced once, never persisted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: DecisionStatus
    message: str
    client_status: Optional[str] = Field(default=None, alias="clientStatus")
    slot: Optional[SlotRef] = None
    availability_matched: Optional[bool] = Field(default=None, alias="availabilityMatched")
    overlaps_existing: Optional[bool] = Field(default=None, alias="overlapsExisting")
    identifiers: Optional[Identifiers] = None
    client: Optional[ClientSummary] = None
    booking_reason: Optional[str] = Field(default=None, alias="bookingReason")
    client_email: Optional[EmailMessage] = Field(default=None, alias="clientEmail")
    provider_email: Optional[EmailMessage] = Field(default=None, alias="providerEmail")
    calendar: Optional[CalendarAttachment] = None

    @classmethod
    def error(cls, message: str) -> "DecisionResult":
        return cls(status=DecisionStatus.ERROR, message=message)

    def to_response(self) -> dict:
        """JSON-ready body; the calendar attachment travels separately."""
        return self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"calendar"}
        )
