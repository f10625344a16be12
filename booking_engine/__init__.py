"""Availability and booking decision engine for a single provider."""

from booking_engine.config import AppConfig, load_config
from booking_engine.errors import (
    BookingEngineError,
    ConfigurationError,
    UpstreamError,
    ValidationError,
)
from booking_engine.scheduling.decision import BookingDecisionEngine
from booking_engine.scheduling.slots import SlotEnumerator

__all__ = [
    "AppConfig", "load_config",
    "BookingEngineError", "ConfigurationError", "UpstreamError", "ValidationError",
    "BookingDecisionEngine", "SlotEnumerator",
]
