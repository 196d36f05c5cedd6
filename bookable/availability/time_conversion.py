"""
Timezone-safe construction and shifting of instants.

``localize`` never raises: a wall-clock time that occurs twice (DST fall
back) resolves to the earlier occurrence, and one that never occurs (DST
spring forward) is read in UTC instead. The earlier-occurrence rule is a
fixed policy; there is no switch for it.

Arithmetic on instants goes through UTC (``to_utc``/``add_minutes``)
because Python compares and subtracts datetimes sharing a tzinfo by wall
clock, which is wrong across a DST transition.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from bookable.logging_context import get_request_logger

logger = get_request_logger(__name__)

UTC = ZoneInfo("UTC")

_LEGACY_ZONES = {
    "Europe/Kiev": "Europe/Kyiv",
}


class ZoneLookupError(ValueError):
    """Raised when an IANA zone name is not in the zone database."""


def normalize_timezone(name: str) -> str:
    """Map legacy zone spellings to their current names."""
    return _LEGACY_ZONES.get(name, name)


def get_zone(name: str) -> ZoneInfo:
    """Look up an IANA zone, raising ZoneLookupError if it is unknown."""
    if not isinstance(name, str) or not name.strip():
        raise ZoneLookupError(f"Unknown timezone: {name!r}")
    try:
        return ZoneInfo(normalize_timezone(name.strip()))
    except (ZoneInfoNotFoundError, ValueError):
        raise ZoneLookupError(f"Unknown timezone: {name!r}") from None


def is_valid_timezone(name: str) -> bool:
    try:
        get_zone(name)
    except ZoneLookupError:
        return False
    return True


def zone_or_utc(name: str) -> ZoneInfo:
    """Resolve a zone, substituting UTC (with a warning) when it is unknown."""
    try:
        return get_zone(name)
    except ZoneLookupError:
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return UTC


def localize(on_date: date, time_of_day: time, zone: str) -> datetime:
    """Build the instant for a wall-clock (date, time) in ``zone``.

    Ambiguous times pick the earlier occurrence; nonexistent times and
    unknown zones fall back to the same wall clock read in UTC.
    """
    naive = datetime.combine(on_date, time_of_day)
    try:
        tz = get_zone(zone)
    except ZoneLookupError:
        logger.warning("Unknown timezone %r while localizing %s, using UTC", zone, naive)
        return naive.replace(tzinfo=UTC)

    candidate = naive.replace(tzinfo=tz, fold=0)
    round_trip = candidate.astimezone(UTC).astimezone(tz).replace(tzinfo=None, fold=0)
    if round_trip != naive:
        logger.debug("%s does not exist in %s (DST gap), using UTC", naive, tz.key)
        return naive.replace(tzinfo=UTC)

    # fold=0 is the earlier of two occurrences when the time is ambiguous
    return candidate


def shift_zone(instant: datetime, zone: str) -> datetime:
    """Express an aware instant in another zone.

    Raises ZoneLookupError for an unknown zone; the caller decides whether
    to substitute UTC or drop the record.
    """
    return to_utc(instant).astimezone(get_zone(zone))


def to_utc(instant: datetime) -> datetime:
    """Normalize an instant to UTC; naive datetimes are read as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def add_minutes(instant: datetime, minutes: int) -> datetime:
    """Add elapsed minutes to an instant, keeping its zone."""
    shifted = to_utc(instant) + timedelta(minutes=minutes)
    return shifted.astimezone(instant.tzinfo or UTC)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole elapsed minutes from start to end (floored)."""
    return int((to_utc(end) - to_utc(start)) // timedelta(minutes=1))


def start_of_day(on_date: date, zone: str) -> datetime:
    return localize(on_date, time(0, 0, 0), zone)


def end_of_day(on_date: date, zone: str) -> datetime:
    return localize(on_date, time(23, 59, 59), zone)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).astimezone(UTC)


def today_in(zone: str, now: Optional[datetime] = None) -> date:
    """Today's date as seen in ``zone`` (UTC if the zone is unknown)."""
    now = to_utc(now) if now is not None else utc_now()
    return now.astimezone(zone_or_utc(zone)).date()
