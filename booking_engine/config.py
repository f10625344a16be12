"""
Configuration value objects with environment variable overrides.

``load_config()`` is the only place that reads the process environment.
The engine, enumerator and stores receive the resulting ``AppConfig``
explicitly and never look at ambient state themselves.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from booking_engine.errors import ConfigurationError
from booking_engine.logging_context import RequestIdFilter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(request_id)s]: %(message)s"

# Settings required for each kind of store access.
AVAILABILITY_QUERY_SETTINGS = ("token", "base_id", "availability_table", "bookings_table")
BOOKING_REQUEST_SETTINGS = AVAILABILITY_QUERY_SETTINGS + ("clients_table",)

_ENV_NAMES = {
    "token": "AIRTABLE_PAT",
    "base_id": "AIRTABLE_BASE_ID",
    "availability_table": "AIRTABLE_TABLE_AVAILABILITY",
    "bookings_table": "AIRTABLE_TABLE_BOOKINGS",
    "clients_table": "AIRTABLE_TABLE_CLIENTS",
}


def _safe_int(env: Mapping[str, str], env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = env.get(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ConfigurationError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _flag(env: Mapping[str, str], env_var: str) -> bool:
    return str(env.get(env_var, "")).strip().lower() == "true"


@dataclass(frozen=True)
class StoreConfig:
    """Record store connection settings."""

    use_stub: bool = False
    token: Optional[str] = None
    base_id: Optional[str] = None
    availability_table: Optional[str] = None
    bookings_table: Optional[str] = None
    clients_table: Optional[str] = None
    api_url: str = "https://api.airtable.com/v0"
    page_size: int = 100
    timeout_seconds: int = 10


@dataclass(frozen=True)
class SchedulingConfig:
    """Session cadence and slot search horizon."""

    session_minutes: int = 50
    break_minutes: int = 10
    horizon_days: int = 30
    display_timezone: str = "Australia/Sydney"


@dataclass(frozen=True)
class NotificationConfig:
    """Email and calendar artifact settings."""

    provider_alert_email: str = "provider@example.com"
    calendar_product_id: str = "-//Booking Assistant//EN"
    uid_domain: str = "booking-assistant"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    store: StoreConfig = field(default_factory=StoreConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    log_level: str = "INFO"


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    scheduling = config.scheduling
    if scheduling.session_minutes < 1:
        raise ConfigurationError(
            f"SESSION_MINUTES must be >= 1, got {scheduling.session_minutes}"
        )
    if scheduling.break_minutes < 0:
        raise ConfigurationError(
            f"BREAK_MINUTES must be >= 0, got {scheduling.break_minutes}"
        )
    if scheduling.horizon_days < 1:
        raise ConfigurationError(
            f"HORIZON_DAYS must be >= 1, got {scheduling.horizon_days}"
        )
    try:
        ZoneInfo(scheduling.display_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigurationError(
            f"DISPLAY_TIMEZONE is not a known time zone: {scheduling.display_timezone!r}"
        ) from None
    if config.store.page_size < 1 or config.store.page_size > 100:
        raise ConfigurationError(
            f"AIRTABLE_PAGE_SIZE must be between 1 and 100, got {config.store.page_size}"
        )
    if config.store.timeout_seconds < 1:
        raise ConfigurationError(
            f"AIRTABLE_TIMEOUT_SECONDS must be >= 1, got {config.store.timeout_seconds}"
        )


def require_store_config(
    config: AppConfig, settings: Iterable[str] = BOOKING_REQUEST_SETTINGS
) -> None:
    """Fail fast when store settings are missing outside stub mode.

    Raises:
        ConfigurationError: Naming every missing environment variable.
    """
    if config.store.use_stub:
        return
    missing = [
        _ENV_NAMES[name] for name in settings if not getattr(config.store, name)
    ]
    if missing:
        raise ConfigurationError(
            "Incomplete Airtable configuration, missing: "
            f"{', '.join(missing)}. Set AIRTABLE_USE_STUB=true for local testing."
        )


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Load and validate configuration from the environment.

    Pass ``environ`` to build a config from an explicit mapping instead of
    the process environment (``.env`` is only consulted in the latter case).
    """
    if environ is None:
        load_dotenv()
        environ = os.environ
    env = environ

    config = AppConfig(
        store=StoreConfig(
            use_stub=_flag(env, "AIRTABLE_USE_STUB"),
            token=env.get("AIRTABLE_PAT") or None,
            base_id=env.get("AIRTABLE_BASE_ID") or None,
            availability_table=env.get("AIRTABLE_TABLE_AVAILABILITY") or None,
            bookings_table=env.get("AIRTABLE_TABLE_BOOKINGS") or None,
            clients_table=env.get("AIRTABLE_TABLE_CLIENTS") or None,
            api_url=env.get("AIRTABLE_API_URL", "https://api.airtable.com/v0"),
            page_size=_safe_int(env, "AIRTABLE_PAGE_SIZE", "100"),
            timeout_seconds=_safe_int(env, "AIRTABLE_TIMEOUT_SECONDS", "10"),
        ),
        scheduling=SchedulingConfig(
            session_minutes=_safe_int(env, "SESSION_MINUTES", "50"),
            break_minutes=_safe_int(env, "BREAK_MINUTES", "10"),
            horizon_days=_safe_int(env, "HORIZON_DAYS", "30"),
            display_timezone=env.get("DISPLAY_TIMEZONE", "Australia/Sydney"),
        ),
        notifications=NotificationConfig(
            provider_alert_email=env.get("PROVIDER_ALERT_EMAIL") or "provider@example.com",
        ),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )
    _validate_config(config)
    logger.debug("Configuration loaded (stub mode: %s)", config.store.use_stub)
    return config


def configure_logging(config: AppConfig) -> None:
    """Apply the configured log level and the request-id aware format."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
