"""Break validation helpers for the schedule-management side.

The slot generator never trusts breaks to sit inside the working hours;
these checks exist so the layer that stores breaks can reject bad ones and
so the calculator can flag stale ones after hours were shortened.
"""

from datetime import datetime, time, timedelta
from typing import Iterable, Optional

from bookable.schemas.schedule_schema import AvailableDay, Break

BREAK_DURATION_PRESETS = [
    ("15 minutes", 15),
    ("30 minutes", 30),
    ("45 minutes", 45),
    ("1 hour", 60),
    ("1.5 hours", 90),
    ("2 hours", 120),
]


class BreakValidationError(ValueError):
    """Raised when a break cannot be placed on a working day."""


def times_overlap(start1: time, end1: time, start2: time, end2: time) -> bool:
    return start1 < end2 and end1 > start2


def validate_break_times(
    start_time: time,
    end_time: time,
    work_start: time,
    work_end: time,
    existing_breaks: Iterable[Break] = (),
    exclude: Optional[Break] = None,
) -> None:
    """Raise BreakValidationError unless the break fits the working day."""
    if start_time >= end_time:
        raise BreakValidationError("End time must be after start time")
    if start_time < work_start:
        raise BreakValidationError("Break cannot start before work hours")
    if end_time > work_end:
        raise BreakValidationError("Break cannot end after work hours")
    for other in existing_breaks:
        if exclude is not None and other == exclude:
            continue
        if times_overlap(start_time, end_time, other.start_time, other.end_time):
            raise BreakValidationError("Break overlaps with existing break")


def breaks_outside_hours(rule: AvailableDay) -> list[Break]:
    """Breaks that are not fully inside the rule's working hours."""
    return [
        b for b in rule.breaks
        if b.start_time < rule.start_time or b.end_time > rule.end_time
    ]


def quick_break(start_time: time, duration_minutes: int, label: Optional[str] = None) -> Break:
    """A break of a preset length starting at ``start_time``.

    Breaks cannot wrap past midnight.
    """
    start = datetime.combine(datetime.min.date(), start_time)
    end = start + timedelta(minutes=duration_minutes)
    if end.date() != start.date() or duration_minutes <= 0:
        raise BreakValidationError("Invalid time calculation")
    return Break(start_time=start_time, end_time=end.time(), label=label)
