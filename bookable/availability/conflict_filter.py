"""
Conflict detection between candidate bookings and existing busy events.

Two entry points:

1. ``filter_available_slots`` checks explicit slots against the advance
   notice floor, the advance booking ceiling and every busy event padded
   by the buffer on both sides.
2. ``has_bookable_gap`` answers "does any duration-sized, buffer-respecting
   start exist in this window?" by walking the sorted events once, without
   enumerating slots. Overlapping and duplicate events are handled through
   a running "busy until" watermark.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from bookable.availability.events import EventInterval, has_conflict_with_events
from bookable.availability.slot_generator import DAY_END, DAY_START, Slot, wall_clock
from bookable.availability.time_conversion import to_utc, utc_now
from bookable.logging_context import get_request_logger
from bookable.schemas.booking_schema import BookingConfig

logger = get_request_logger(__name__)


def booking_bounds(
    config: BookingConfig, now: Optional[datetime] = None
) -> tuple[datetime, datetime]:
    """Earliest and latest allowed slot start, in UTC."""
    now = to_utc(now) if now is not None else utc_now()
    return now + config.min_advance, now + config.max_advance


def is_slot_bookable(
    slot: Slot,
    intervals: Sequence[EventInterval],
    config: BookingConfig,
    now: Optional[datetime] = None,
) -> bool:
    earliest, latest = booking_bounds(config, now)
    start = to_utc(slot.start)
    if start < earliest or start > latest:
        return False
    end = start + timedelta(minutes=slot.duration_minutes)
    return not has_conflict_with_events(start, end, intervals, config.buffer_minutes)


def filter_available_slots(
    slots: Iterable[Slot],
    intervals: Sequence[EventInterval],
    config: BookingConfig,
    now: Optional[datetime] = None,
) -> list[Slot]:
    """Keep slots inside the booking window that clear every buffered event."""
    now = to_utc(now) if now is not None else utc_now()
    slots = list(slots)
    kept = [slot for slot in slots if is_slot_bookable(slot, intervals, config, now)]
    logger.debug("Conflict filter kept %d of %d slots", len(kept), len(slots))
    return kept


def has_bookable_gap(
    window_start: datetime,
    window_end: datetime,
    target_date: date,
    intervals: Sequence[EventInterval],
    config: BookingConfig,
    now: Optional[datetime] = None,
) -> bool:
    """Whether some start in the window fits ``duration`` between events.

    The window is first clipped to the target date's 00:00:00-23:59:59 in
    ``window_start``'s zone, so a meeting may neither start nor end on a
    neighbouring date. ``intervals`` may be unsorted and may overlap.
    """
    now = to_utc(now) if now is not None else utc_now()
    tz = window_start.tzinfo
    duration = config.duration
    buffer = config.buffer

    day_start = to_utc(wall_clock(target_date, DAY_START, tz))
    day_end = to_utc(wall_clock(target_date, DAY_END, tz))
    w_start = max(to_utc(window_start), day_start)
    w_end = min(to_utc(window_end), day_end)

    start_bound = max(w_start, now + config.min_advance)
    latest_start = w_end - duration
    if start_bound > latest_start:
        return False

    events = sorted(
        (e for e in intervals if e.start < w_end and e.end > start_bound),
        key=lambda e: e.start,
    )
    if not events:
        return True

    if events[0].start - start_bound >= duration + buffer:
        return True

    busy_until = events[0].end
    for event in events[1:]:
        gap_start = busy_until + buffer
        gap_end = min(latest_start, event.start - buffer - duration)
        if gap_start <= gap_end:
            return True
        busy_until = max(busy_until, event.end)

    return busy_until + buffer <= latest_start
