"""
Busy-event normalization and overlap tests.

Events arrive as ``BusyEvent`` models or plain mappings. Each becomes a UTC
``EventInterval``; all-day events are anchored at 00:00 of a reference zone
with an exclusive end date, so an all-day event on day X never blocks
day X+1.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Mapping, Sequence, Union

from pydantic import ValidationError

from bookable.availability.time_conversion import localize, start_of_day, to_utc
from bookable.logging_context import get_request_logger
from bookable.schemas.booking_schema import BusyEvent

logger = get_request_logger(__name__)

EventLike = Union[BusyEvent, Mapping[str, Any]]

PREFILTER_DAYS = 2


@dataclass(frozen=True, order=True)
class EventInterval:
    """A busy stretch of time, both bounds in UTC."""

    start: datetime
    end: datetime


def _anchor(bound: Union[datetime, date], reference_zone: str) -> datetime:
    if isinstance(bound, datetime):
        return to_utc(bound)
    return to_utc(localize(bound, time(0, 0), reference_zone))


def to_interval(event: BusyEvent, reference_zone: str) -> EventInterval:
    """Convert one event to a UTC interval, anchoring all-day bounds."""
    start = _anchor(event.start_time, reference_zone)
    end = _anchor(event.end_time, reference_zone)
    return EventInterval(start=start, end=end)


def normalize_events(
    events: Iterable[EventLike], reference_zone: str
) -> list[EventInterval]:
    """Coerce and convert events, dropping records that fail validation."""
    intervals = []
    for raw in events or ():
        try:
            event = raw if isinstance(raw, BusyEvent) else BusyEvent.model_validate(raw)
        except (ValidationError, ValueError, TypeError) as exc:
            logger.warning("Dropping malformed busy event %r: %s", raw, exc)
            continue
        interval = to_interval(event, reference_zone)
        if interval.end < interval.start:
            logger.warning("Dropping busy event ending before it starts: %r", raw)
            continue
        intervals.append(interval)
    intervals.sort()
    return intervals


def events_near_date(
    intervals: Sequence[EventInterval],
    target_date: date,
    zone: str,
    days: int = PREFILTER_DAYS,
) -> list[EventInterval]:
    """Keep only events overlapping ``target_date`` +/- ``days`` in ``zone``."""
    window_start = to_utc(start_of_day(target_date - timedelta(days=days), zone))
    window_end = to_utc(start_of_day(target_date + timedelta(days=days + 1), zone))
    return [e for e in intervals if e.start < window_end and e.end > window_start]


def has_conflict_with_events(
    start: datetime,
    end: datetime,
    intervals: Iterable[EventInterval],
    buffer_minutes: int = 0,
) -> bool:
    """True when ``[start, end)`` padded by the buffer meets any event."""
    buffer = timedelta(minutes=buffer_minutes)
    start = to_utc(start)
    end = to_utc(end)
    return any(e.start < end + buffer and e.end + buffer > start for e in intervals)
