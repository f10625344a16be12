"""Request ID logging context for tracing a single booking decision.

Provides a request_id-aware logger that attaches a correlation ID to every
log message, so one booking request can be followed from validation to
the booking write.

Usage:
    from booking_engine.logging_context import get_request_logger, request_scope

    logger = get_request_logger(__name__)
    with request_scope("REQ-abc123"):
        logger.info("Checking availability")  # → [REQ-abc123] Checking availability
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

NO_REQUEST_ID = "NO_REQUEST_ID"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


def _generate_request_id() -> str:
    return f"REQ-{uuid.uuid4().hex[:8]}"


@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation ID for the duration of one request.

    Without an explicit ``request_id`` an ID the caller already set is
    kept, otherwise a fresh one is generated. The previous value is
    restored on exit.
    """
    if request_id is None:
        current = _request_id.get()
        request_id = current if current != NO_REQUEST_ID else _generate_request_id()
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
