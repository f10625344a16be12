"""iCalendar (RFC 5545) invite for confirmed bookings."""

import base64
from datetime import datetime, timezone
from typing import Optional

from booking_engine.config import NotificationConfig
from booking_engine.scheduling.intervals import TimeInterval
from booking_engine.schemas.booking_schema import CalendarAttachment


def format_ics_timestamp(instant: datetime) -> str:
    """Basic UTC form without punctuation or sub-seconds, e.g. ``20250318T100000Z``."""
    return instant.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _escape_text(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\n", "\\n")


def build_event_uid(booking_id: Optional[str], now: datetime, domain: str) -> str:
    """UID from the booking id, falling back to epoch milliseconds."""
    local_part = booking_id or str(int(now.timestamp() * 1000))
    return f"{local_part}@{domain}"


def build_ics(
    interval: TimeInterval,
    client_name: str,
    reason: str,
    uid: str,
    stamp: datetime,
    product_id: str = "-//Booking Assistant//EN",
) -> str:
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{product_id}",
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{format_ics_timestamp(stamp)}",
        f"DTSTART:{format_ics_timestamp(interval.start)}",
        f"DTEND:{format_ics_timestamp(interval.end)}",
        f"SUMMARY:Session with {client_name}",
        f"DESCRIPTION:{_escape_text(f'Reason: {reason}')}",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\n".join(lines)


def build_calendar_attachment(
    interval: TimeInterval,
    client_name: str,
    reason: str,
    booking_id: Optional[str],
    now: datetime,
    config: NotificationConfig,
) -> CalendarAttachment:
    uid = build_event_uid(booking_id, now, config.uid_domain)
    ics = build_ics(interval, client_name, reason, uid, now, config.calendar_product_id)
    return CalendarAttachment(data=base64.b64encode(ics.encode("utf-8")).decode("ascii"))


def decode_attachment(attachment: CalendarAttachment) -> str:
    return base64.b64decode(attachment.data).decode("utf-8")
