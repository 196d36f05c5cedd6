"""
Collect the owner's working windows that land on a visitor's date.

With owner and visitor up to 24 hours apart, one visitor-local date can be
fed by the owner's hours on the day before, the day itself, or the day
after. All three owner dates are resolved, shifted into the visitor's
zone, and kept only when the shifted window starts or ends on the
visitor's date.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable

from bookable.availability.business_hours import resolve_business_hours
from bookable.availability.time_conversion import UTC, ZoneLookupError, shift_zone
from bookable.logging_context import get_request_logger
from bookable.schemas.schedule_schema import DayRule

logger = get_request_logger(__name__)

BRIDGING_OFFSETS = (-1, 0, 1)

RuleLookup = Callable[[date], DayRule]


@dataclass(frozen=True)
class CandidateWindow:
    """Owner working hours expressed in the visitor's zone."""

    start: datetime
    end: datetime
    owner_date: date

    def touches(self, visitor_date: date) -> bool:
        return self.start.date() == visitor_date or self.end.date() == visitor_date


def bridging_dates(visitor_date: date) -> list[date]:
    return [visitor_date + timedelta(days=offset) for offset in BRIDGING_OFFSETS]


def _in_visitor_zone(instant: datetime, visitor_zone: str) -> datetime:
    try:
        return shift_zone(instant, visitor_zone)
    except ZoneLookupError:
        logger.warning("Unknown visitor timezone %r, using UTC", visitor_zone)
        return instant.astimezone(UTC)


def candidate_windows(
    visitor_date: date,
    owner_zone: str,
    visitor_zone: str,
    rule_lookup: RuleLookup,
) -> list[CandidateWindow]:
    """Owner windows (in the visitor's zone) that touch ``visitor_date``."""
    windows: list[CandidateWindow] = []
    for owner_date in bridging_dates(visitor_date):
        hours = resolve_business_hours(owner_date, rule_lookup(owner_date), owner_zone)
        if hours is None:
            continue

        window = CandidateWindow(
            start=_in_visitor_zone(hours.start, visitor_zone),
            end=_in_visitor_zone(hours.end, visitor_zone),
            owner_date=owner_date,
        )
        if window.touches(visitor_date):
            windows.append(window)
        else:
            logger.debug(
                "Owner hours on %s (%s - %s) miss visitor date %s",
                owner_date,
                window.start.isoformat(),
                window.end.isoformat(),
                visitor_date,
            )
    return windows
