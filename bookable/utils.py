"""Shared utilities for slot labels and duration parsing."""

import re
from datetime import datetime, time
from typing import Union

DEFAULT_DURATION_MINUTES = 30

_DURATION_RE = re.compile(r"^\s*(\d+)\s*(?:min)?\s*$", re.IGNORECASE)

# (name, first hour inclusive, last hour exclusive)
_PERIODS = [
    ("Morning", 5, 12),
    ("Afternoon", 12, 17),
    ("Evening", 17, 21),
]


class TimeLabelError(ValueError):
    """Raised when a slot label cannot be read back as a time of day."""


def format_slot_label(value: Union[datetime, time]) -> str:
    """Render a time of day as a 12-hour slot label.

    Examples:
        >>> format_slot_label(time(0, 0))
        '12:00 AM'
        >>> format_slot_label(time(13, 5))
        '1:05 PM'
    """
    hour = value.hour
    minute = f"{value.minute:02d}"
    if hour == 0:
        return f"12:{minute} AM"
    if hour < 12:
        return f"{hour}:{minute} AM"
    if hour == 12:
        return f"12:{minute} PM"
    return f"{hour - 12}:{minute} PM"


def parse_slot_label(label: str) -> time:
    """Parse a slot label back into a time of day.

    Accepts the 12-hour form produced by ``format_slot_label`` ("2:30 PM",
    case-insensitive) as well as 24-hour "HH:MM" and "HH:MM:SS".
    """
    if not isinstance(label, str):
        raise TimeLabelError(f"Invalid time slot: {label!r}")

    parts = label.strip().split(None, 1)
    if len(parts) == 2:
        return _parse_12h(parts[0], parts[1], label)
    if len(parts) == 1:
        return _parse_24h(parts[0], label)
    raise TimeLabelError(f"Invalid time slot: {label!r}")


def _parse_12h(clock: str, period: str, label: str) -> time:
    pieces = clock.split(":")
    if len(pieces) != 2 or not all(p.isdigit() for p in pieces):
        raise TimeLabelError(f"Invalid time slot: {label!r}")
    hour, minute = int(pieces[0]), int(pieces[1])

    period = period.strip().upper()
    if period not in ("AM", "PM") or not 1 <= hour <= 12:
        raise TimeLabelError(f"Invalid time slot: {label!r}")

    if period == "AM":
        hour = 0 if hour == 12 else hour
    else:
        hour = 12 if hour == 12 else hour + 12

    try:
        return time(hour, minute)
    except ValueError:
        raise TimeLabelError(f"Invalid time slot: {label!r}") from None


def _parse_24h(clock: str, label: str) -> time:
    pieces = clock.split(":")
    if len(pieces) not in (2, 3) or not all(p.isdigit() for p in pieces):
        raise TimeLabelError(f"Invalid time slot: {label!r}")
    try:
        return time(*(int(p) for p in pieces))
    except ValueError:
        raise TimeLabelError(f"Invalid time slot: {label!r}") from None


def parse_duration(value: Union[int, str, None]) -> int:
    """Parse a meeting duration in minutes, defaulting to 30 on bad input.

    Examples:
        >>> parse_duration("45min")
        45
        >>> parse_duration("an hour")
        30
    """
    if isinstance(value, bool):
        return DEFAULT_DURATION_MINUTES
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _DURATION_RE.match(value)
        if match and int(match.group(1)) > 0:
            return int(match.group(1))
    return DEFAULT_DURATION_MINUTES


def get_time_period(label: str) -> str:
    """Name the part of the day a slot label falls in."""
    try:
        hour = parse_slot_label(label).hour
    except TimeLabelError:
        return "Unknown"
    for name, first, last in _PERIODS:
        if first <= hour < last:
            return name
    return "Night"


def group_slots_by_period(labels: list[str]) -> dict[str, list[str]]:
    """Group slot labels into Morning / Afternoon / Evening / Night."""
    groups: dict[str, list[str]] = {}
    for label in labels:
        groups.setdefault(get_time_period(label), []).append(label)
    return groups
