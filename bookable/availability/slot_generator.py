"""
Slice a working window into fixed-length slots and drop those hitting breaks.

The window is first clipped to the target date in the window's own zone
(00:00:00 to 23:59:59). ``floor(total_minutes / duration)`` slots are then
laid end to end from the clipped start, so no slot runs past the clipped
end. A slot is discarded when ``[start, start + duration)`` overlaps any
break ``[break_start, break_end)``.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Iterable, Optional, Sequence, Union
from zoneinfo import ZoneInfo

from bookable.availability.time_conversion import (
    UTC,
    add_minutes,
    localize,
    minutes_between,
    to_utc,
)
from bookable.logging_context import get_request_logger
from bookable.schemas.schedule_schema import Break
from bookable.utils import format_slot_label

logger = get_request_logger(__name__)

BreakLike = Union[Break, tuple[time, time]]

DAY_START = time(0, 0, 0)
DAY_END = time(23, 59, 59)


@dataclass(frozen=True)
class Slot:
    """A bookable start time; ``start`` is expressed in the window's zone."""

    start: datetime
    duration_minutes: int

    @property
    def end(self) -> datetime:
        return add_minutes(self.start, self.duration_minutes)

    @property
    def label(self) -> str:
        return format_slot_label(self.start)


def _zone_key(tz: Optional[tzinfo]) -> Optional[str]:
    return tz.key if isinstance(tz, ZoneInfo) else None


def wall_clock(on_date: date, time_of_day: time, tz: Optional[tzinfo]) -> datetime:
    key = _zone_key(tz)
    if key is not None:
        return localize(on_date, time_of_day, key)
    return datetime.combine(on_date, time_of_day, tzinfo=tz or UTC)


def clip_window(
    window_start: datetime, window_end: datetime, target_date: date
) -> Optional[tuple[datetime, datetime]]:
    """Clip a window to the part that falls on ``target_date``.

    Returns None when the window does not touch the target date at all.
    """
    tz = window_start.tzinfo
    window_end = window_end.astimezone(tz) if tz is not None else window_end
    start_date = window_start.date()
    end_date = window_end.date()

    if start_date == target_date and end_date == target_date:
        return window_start, window_end
    if start_date < target_date and end_date == target_date:
        return wall_clock(target_date, DAY_START, tz), window_end
    if start_date == target_date and end_date > target_date:
        return window_start, wall_clock(target_date, DAY_END, tz)
    if start_date < target_date < end_date:
        return wall_clock(target_date, DAY_START, tz), wall_clock(target_date, DAY_END, tz)
    return None


def slice_window(start: datetime, end: datetime, duration_minutes: int) -> list[Slot]:
    """Lay ``floor(total / duration)`` consecutive slots from ``start``."""
    total_minutes = minutes_between(start, end)
    if duration_minutes <= 0 or total_minutes < duration_minutes:
        return []
    count = total_minutes // duration_minutes
    return [
        Slot(start=add_minutes(start, i * duration_minutes), duration_minutes=duration_minutes)
        for i in range(count)
    ]


def _break_bounds(item: BreakLike) -> tuple[time, time]:
    if isinstance(item, Break):
        return item.start_time, item.end_time
    start_time, end_time = item
    return start_time, end_time


def localize_breaks(
    breaks: Iterable[BreakLike], on_date: date, zone: Union[str, tzinfo, None]
) -> list[tuple[datetime, datetime]]:
    """Turn time-of-day breaks into UTC instant intervals on ``on_date``."""
    intervals = []
    for item in breaks:
        start_time, end_time = _break_bounds(item)
        if isinstance(zone, str):
            start = localize(on_date, start_time, zone)
            end = localize(on_date, end_time, zone)
        else:
            start = wall_clock(on_date, start_time, zone)
            end = wall_clock(on_date, end_time, zone)
        intervals.append((to_utc(start), to_utc(end)))
    return intervals


def overlaps_break(slot: Slot, break_intervals: Sequence[tuple[datetime, datetime]]) -> bool:
    slot_start = to_utc(slot.start)
    slot_end = to_utc(slot.end)
    return any(
        slot_start < break_end and slot_end > break_start
        for break_start, break_end in break_intervals
    )


def generate_slots(
    window_start: datetime,
    window_end: datetime,
    duration_minutes: int,
    target_date: date,
    breaks: Iterable[BreakLike] = (),
    *,
    break_date: Optional[date] = None,
    break_zone: Optional[str] = None,
) -> list[Slot]:
    """Candidate slots for ``target_date`` inside a window, minus breaks.

    Breaks are time-of-day pairs; by default they are placed on the clipped
    window's own date and zone. Pass ``break_date``/``break_zone`` to anchor
    them elsewhere (the owner's date and zone when bridging timezones).
    """
    clipped = clip_window(window_start, window_end, target_date)
    if clipped is None:
        return []

    start, end = clipped
    slots = slice_window(start, end, duration_minutes)
    breaks = list(breaks)
    if not slots or not breaks:
        return slots

    intervals = localize_breaks(
        breaks,
        break_date or start.date(),
        break_zone if break_zone is not None else start.tzinfo,
    )
    kept = [slot for slot in slots if not overlaps_break(slot, intervals)]
    logger.debug(
        "Breaks removed %d of %d slots on %s",
        len(slots) - len(kept),
        len(slots),
        target_date,
    )
    return kept
