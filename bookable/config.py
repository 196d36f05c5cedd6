"""
Centralized configuration with environment variable overrides.

Booking-window defaults and the fallback timezone live here. Per-call
values are layered on top of these by ``build_booking_config`` in
``bookable.schemas.booking_schema``.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from bookable.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 1440

LOG_FORMAT = "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BookingDefaults:
    """Defaults applied when a caller leaves a booking setting out."""

    buffer_minutes: int = _safe_int("BOOKING_BUFFER_MINUTES", "15")
    min_advance_hours: int = _safe_int("BOOKING_MIN_ADVANCE_HOURS", "3")
    max_advance_booking_days: int = _safe_int("BOOKING_MAX_ADVANCE_DAYS", "90")
    duration_minutes: int = _safe_int("BOOKING_DURATION_MINUTES", "30")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    booking: BookingDefaults = field(default_factory=BookingDefaults)
    fallback_timezone: str = os.getenv("FALLBACK_TIMEZONE", "UTC")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.booking.buffer_minutes < 0:
        raise ValueError(
            f"BOOKING_BUFFER_MINUTES must be >= 0, got {config.booking.buffer_minutes}"
        )
    if config.booking.min_advance_hours < 0:
        raise ValueError(
            f"BOOKING_MIN_ADVANCE_HOURS must be >= 0, got {config.booking.min_advance_hours}"
        )
    if config.booking.max_advance_booking_days < 0:
        raise ValueError(
            "BOOKING_MAX_ADVANCE_DAYS must be >= 0, "
            f"got {config.booking.max_advance_booking_days}"
        )
    if not MIN_DURATION_MINUTES <= config.booking.duration_minutes <= MAX_DURATION_MINUTES:
        raise ValueError(
            f"BOOKING_DURATION_MINUTES must be between {MIN_DURATION_MINUTES} and "
            f"{MAX_DURATION_MINUTES}, got {config.booking.duration_minutes}"
        )
    try:
        ZoneInfo(config.fallback_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"FALLBACK_TIMEZONE is not a recognised timezone: {config.fallback_timezone!r}"
        ) from None


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )
    logger.debug(
        "Configuration loaded (buffer=%d, min_advance=%dh, max_advance=%dd)",
        config.booking.buffer_minutes,
        config.booking.min_advance_hours,
        config.booking.max_advance_booking_days,
    )
    return config


# Singleton instance
settings = load_config()
