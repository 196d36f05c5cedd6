"""
Availability orchestration: slot lists, per-date checks and month views.

Composes window bridging, slot generation and conflict filtering. All
inputs are in memory and every call is independent; ``now`` can be passed
explicitly so results are reproducible.

Usage:
    calculator = AvailabilityCalculator(schedule)
    slots = calculator.available_slots(
        date(2026, 3, 2), 30, "Europe/London", "America/New_York", events
    )
    overview = calculator.month_overview(2026, 3, "America/New_York", "Europe/London", events)
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Union

from bookable.availability.breaks import breaks_outside_hours
from bookable.availability.conflict_filter import filter_available_slots, has_bookable_gap
from bookable.availability.events import (
    EventInterval,
    EventLike,
    events_near_date,
    normalize_events,
)
from bookable.availability.slot_generator import Slot, clip_window, generate_slots
from bookable.availability.time_conversion import (
    is_valid_timezone,
    normalize_timezone,
    to_utc,
    today_in,
    utc_now,
)
from bookable.availability.window_bridging import candidate_windows
from bookable.config import settings
from bookable.logging_context import get_request_logger, request_scope
from bookable.schemas.booking_schema import BookingConfig, CalendarDay, build_booking_config
from bookable.schemas.schedule_schema import AvailableDay, WeeklySchedule, default_weekly_schedule
from bookable.utils import parse_slot_label

logger = get_request_logger(__name__)

CALENDAR_GRID_DAYS = 42

ConfigLike = Union[BookingConfig, Mapping[str, Any], None]


class TimeSelectionError(ValueError):
    """Raised when a date/time selection cannot be booked."""


class AvailabilityCalculator:
    """Answers availability questions for one owner's weekly schedule."""

    def __init__(self, schedule: Union[WeeklySchedule, Iterable[Any], None] = None) -> None:
        if schedule is None:
            schedule = default_weekly_schedule()
        elif not isinstance(schedule, WeeklySchedule):
            schedule = WeeklySchedule(days=schedule)
        self.schedule = schedule

        for rule in self.schedule.days:
            if isinstance(rule, AvailableDay):
                for stale in breaks_outside_hours(rule):
                    logger.warning(
                        "Break %s-%s on day %d lies outside working hours %s-%s",
                        stale.start_time,
                        stale.end_time,
                        rule.day_of_week,
                        rule.start_time,
                        rule.end_time,
                    )

    def _zone(self, name: str, role: str) -> str:
        if is_valid_timezone(name):
            return normalize_timezone(name.strip())
        logger.warning(
            "Unknown %s timezone %r, using %s", role, name, settings.fallback_timezone
        )
        return settings.fallback_timezone

    # ----- Slot list for one date -----

    def find_slots(
        self,
        on_date: date,
        duration: Union[int, str, None],
        visitor_zone: str,
        owner_zone: str,
        events: Iterable[EventLike] = (),
        config: ConfigLike = None,
        now: Optional[datetime] = None,
    ) -> list[Slot]:
        """Bookable slots on ``on_date`` (visitor-local), ordered by start."""
        with request_scope():
            cfg = build_booking_config(config, duration)
            visitor_zone = self._zone(visitor_zone, "visitor")
            owner_zone = self._zone(owner_zone, "owner")
            now = to_utc(now) if now is not None else utc_now()

            windows = candidate_windows(on_date, owner_zone, visitor_zone, self.schedule.rule_for)
            if not windows:
                logger.debug("No owner hours reach %s in %s", on_date, visitor_zone)
                return []

            intervals = normalize_events(events, visitor_zone)
            found: list[Slot] = []
            for window in windows:
                rule = self.schedule.rule_for(window.owner_date)
                breaks = rule.breaks if isinstance(rule, AvailableDay) else ()
                slots = generate_slots(
                    window.start,
                    window.end,
                    cfg.duration_minutes,
                    on_date,
                    breaks,
                    break_date=window.owner_date,
                    break_zone=owner_zone,
                )
                found.extend(filter_available_slots(slots, intervals, cfg, now))

            return sorted(found, key=lambda s: to_utc(s.start))

    def available_slots(
        self,
        on_date: date,
        duration: Union[int, str, None],
        visitor_zone: str,
        owner_zone: str,
        events: Iterable[EventLike] = (),
        config: ConfigLike = None,
        now: Optional[datetime] = None,
    ) -> list[str]:
        """Slot labels ("9:00 AM", ...) bookable on ``on_date``, in time order."""
        with request_scope():
            slots = self.find_slots(
                on_date, duration, visitor_zone, owner_zone, events, config, now
            )
            labels = {slot.label for slot in slots}
            result = sorted(labels, key=parse_slot_label)
            logger.info("%d slot(s) available on %s", len(result), on_date)
            return result

    # ----- Yes/no checks for calendar rendering -----

    def _date_has_availability(
        self,
        on_date: date,
        owner_zone: str,
        visitor_zone: str,
        intervals: list[EventInterval],
        cfg: BookingConfig,
        now: datetime,
    ) -> bool:
        windows = candidate_windows(on_date, owner_zone, visitor_zone, self.schedule.rule_for)
        if not windows:
            return False
        nearby = events_near_date(intervals, on_date, visitor_zone)
        for window in windows:
            # the gap search must not see the part of the window on a neighbouring date
            clipped = clip_window(window.start, window.end, on_date)
            if clipped is None:
                continue
            start, end = clipped
            if has_bookable_gap(start, end, on_date, nearby, cfg, now):
                return True
        return False

    def date_has_availability(
        self,
        on_date: date,
        owner_zone: str,
        visitor_zone: str,
        events: Iterable[EventLike] = (),
        config: ConfigLike = None,
        now: Optional[datetime] = None,
    ) -> bool:
        """Whether any slot could be booked on ``on_date`` (visitor-local)."""
        with request_scope():
            cfg = build_booking_config(config)
            owner_zone = self._zone(owner_zone, "owner")
            visitor_zone = self._zone(visitor_zone, "visitor")
            now = to_utc(now) if now is not None else utc_now()
            intervals = normalize_events(events, visitor_zone)
            return self._date_has_availability(
                on_date, owner_zone, visitor_zone, intervals, cfg, now
            )

    def month_overview(
        self,
        year: int,
        month: int,
        owner_zone: str,
        visitor_zone: str,
        events: Iterable[EventLike] = (),
        config: ConfigLike = None,
        now: Optional[datetime] = None,
    ) -> dict[str, bool]:
        """Map every date of the month ("YYYY-MM-DD") to whether it has a slot.

        Dates before today or past the advance booking ceiling are False
        without running the gap search. An invalid year/month raises.
        """
        first = date(year, month, 1)
        last = first.replace(day=calendar.monthrange(year, month)[1])

        with request_scope():
            cfg = build_booking_config(config)
            owner_zone = self._zone(owner_zone, "owner")
            visitor_zone = self._zone(visitor_zone, "visitor")
            now = to_utc(now) if now is not None else utc_now()

            today = today_in(visitor_zone, now)
            max_date = today + timedelta(days=cfg.max_advance_booking_days)
            intervals = normalize_events(events, visitor_zone)

            overview: dict[str, bool] = {}
            day = first
            while day <= last:
                if day < today or day > max_date:
                    overview[day.isoformat()] = False
                else:
                    overview[day.isoformat()] = self._date_has_availability(
                        day, owner_zone, visitor_zone, intervals, cfg, now
                    )
                day += timedelta(days=1)

            logger.info(
                "Month %04d-%02d: %d of %d day(s) available",
                year,
                month,
                sum(overview.values()),
                len(overview),
            )
            return overview

    def calendar_days(
        self,
        visitor_zone: str,
        year: int,
        month: int,
        config: ConfigLike = None,
        now: Optional[datetime] = None,
    ) -> list[CalendarDay]:
        """Six-week grid starting on the Sunday on or before the 1st.

        ``available`` here only reflects the weekly schedule and the booking
        window; use ``month_overview`` for event-aware answers.
        """
        cfg = build_booking_config(config)
        visitor_zone = self._zone(visitor_zone, "visitor")
        today = today_in(visitor_zone, now)

        first = date(year, month, 1)
        grid_start = first - timedelta(days=first.isoweekday() % 7)

        days = []
        for offset in range(CALENDAR_GRID_DAYS):
            day = grid_start + timedelta(days=offset)
            past = day < today
            within_limit = (day - today).days <= cfg.max_advance_booking_days
            days.append(
                CalendarDay(
                    date=day.isoformat(),
                    day=day.day,
                    available=self.schedule.is_business_day(day) and not past and within_limit,
                    past=past,
                    today=day == today,
                    current_month=day.month == month,
                )
            )
        return days

    # ----- Booking-form validation -----

    @staticmethod
    def validate_time_selection(
        selected_date: Optional[str],
        selected_time: Optional[str],
        slots: Iterable[str],
    ) -> None:
        """Raise TimeSelectionError unless the selection is among ``slots``."""
        if not selected_date:
            raise TimeSelectionError("Please select a date")
        if not selected_time:
            raise TimeSelectionError("Please select a time")
        if selected_time not in set(slots):
            raise TimeSelectionError("Selected time is no longer available")
