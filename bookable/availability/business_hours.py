"""Resolve an owner's working hours on a calendar date into instants."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from bookable.availability.time_conversion import localize
from bookable.schemas.schedule_schema import AvailableDay, DayRule


@dataclass(frozen=True)
class BusinessWindow:
    """Owner-local working hours on one date, as aware datetimes."""

    start: datetime
    end: datetime
    owner_date: date


def resolve_business_hours(
    on_date: date, rule: DayRule, owner_zone: str
) -> Optional[BusinessWindow]:
    """Working hours for ``on_date`` in the owner's zone, or None."""
    if not isinstance(rule, AvailableDay):
        return None
    return BusinessWindow(
        start=localize(on_date, rule.start_time, owner_zone),
        end=localize(on_date, rule.end_time, owner_zone),
        owner_date=on_date,
    )
