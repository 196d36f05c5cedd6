"""Shared test fixtures and helpers."""

from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

import pytest

from bookable.availability.calculate import AvailabilityCalculator
from bookable.schemas.booking_schema import BookingConfig
from bookable.schemas.schedule_schema import WeeklySchedule

# Sunday; the following Monday is 2026-03-02
NOW = datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc)
MONDAY = date(2026, 3, 2)


def utc(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


def make_event(start: datetime, end: datetime) -> dict:
    return {"start_time": start, "end_time": end}


def make_schedule(
    start: str = "09:00",
    end: str = "17:00",
    days: Iterable[int] = range(1, 6),
    breaks: Optional[list[dict]] = None,
) -> WeeklySchedule:
    """Helper to create a schedule with the same hours on each listed day."""
    days = set(days)
    rules = []
    for day in range(1, 8):
        if day in days:
            rules.append(
                {
                    "day_of_week": day,
                    "is_available": True,
                    "start_time": start,
                    "end_time": end,
                    "breaks": breaks or [],
                }
            )
        else:
            rules.append({"day_of_week": day, "is_available": False})
    return WeeklySchedule(days=rules)


def make_config(**overrides) -> BookingConfig:
    """BookingConfig with no advance notice and no buffer unless overridden."""
    values = {
        "duration_minutes": 60,
        "buffer_minutes": 0,
        "min_advance_hours": 0,
        "max_advance_booking_days": 90,
    }
    values.update(overrides)
    return BookingConfig(**values)


@pytest.fixture
def weekday_schedule():
    return make_schedule()


@pytest.fixture
def calculator(weekday_schedule):
    return AvailabilityCalculator(weekday_schedule)
