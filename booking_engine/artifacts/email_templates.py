"""Plain-text email bodies produced alongside booking decisions."""

from booking_engine.scheduling.intervals import to_iso
from booking_engine.schemas.booking_schema import BookingRequest, EmailMessage


def _provider_body(request: BookingRequest, status_label: str) -> str:
    return "\n".join([
        f"Client: {request.name}",
        f"Email: {request.email}",
        f"Start: {to_iso(request.requested_start)}",
        f"End: {to_iso(request.requested_end)}",
        f"Reason: {request.booking_reason}",
        f"Status: {status_label}",
    ])


def build_client_confirmation(request: BookingRequest) -> EmailMessage:
    start = to_iso(request.requested_start)
    end = to_iso(request.requested_end)
    text = (
        f"Hi {request.name},\n\n"
        f"Your session is confirmed from {start} to {end}.\n\n"
        f"Reason: {request.booking_reason}\n\n"
        "You can add the attached calendar invite to your preferred calendar.\n\n"
        "Regards,\nProvider"
    )
    return EmailMessage(to=request.email, subject="Booking confirmed", text=text)


def build_provider_confirmed_alert(request: BookingRequest, provider_email: str) -> EmailMessage:
    return EmailMessage(
        to=provider_email,
        subject="New confirmed booking",
        text=_provider_body(request, "Accepted"),
    )


def build_provider_review_alert(request: BookingRequest, provider_email: str) -> EmailMessage:
    return EmailMessage(
        to=provider_email,
        subject="Booking request pending review",
        text=_provider_body(request, "Pending Review"),
    )
