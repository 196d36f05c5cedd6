"""Weekly availability schedule models.

A day rule is either ``AvailableDay`` (working hours plus breaks) or
``UnavailableDay``. Loosely-shaped mappings such as
``{"day_of_week": 1, "is_available": True, "start_time": None}`` are
coerced by ``parse_day_rule``; a day flagged available but missing either
bound reads as unavailable.
"""

from datetime import date, time
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}

# Weekdays 11:00-19:30, weekends off
DEFAULT_START = time(11, 0)
DEFAULT_END = time(19, 30)

PRESETS: dict[str, Optional[tuple[time, time]]] = {
    "9-5": (time(9, 0), time(17, 0)),
    "8-6": (time(8, 0), time(18, 0)),
    "10-6": (time(10, 0), time(18, 0)),
    "unavailable": None,
}


class Break(BaseModel):
    """An unavailable stretch inside a working day, in owner-local time."""

    model_config = ConfigDict(frozen=True)

    start_time: time
    end_time: time
    label: Optional[str] = None
    sort_order: int = 0

    @model_validator(mode="after")
    def _check_order(self) -> "Break":
        if self.start_time >= self.end_time:
            raise ValueError("End time must be after start time")
        return self


class AvailableDay(BaseModel):
    """Working hours for one day of the week."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(ge=1, le=7)
    is_available: Literal[True] = True
    start_time: time
    end_time: time
    breaks: tuple[Break, ...] = ()

    @field_validator("breaks", mode="after")
    @classmethod
    def _sort_breaks(cls, breaks: tuple[Break, ...]) -> tuple[Break, ...]:
        return tuple(sorted(breaks, key=lambda b: (b.sort_order, b.start_time)))


class UnavailableDay(BaseModel):
    """A day of the week with no bookable hours."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(ge=1, le=7)
    is_available: Literal[False] = False


DayRule = Union[AvailableDay, UnavailableDay]


def parse_day_rule(data: Any) -> DayRule:
    """Coerce a day rule model or mapping into a tagged day rule."""
    if isinstance(data, (AvailableDay, UnavailableDay)):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"Day rule must be a mapping, got {type(data).__name__}")

    if (
        not data.get("is_available")
        or data.get("start_time") is None
        or data.get("end_time") is None
    ):
        return UnavailableDay(day_of_week=data.get("day_of_week"))

    return AvailableDay.model_validate(
        {**data, "is_available": True, "breaks": data.get("breaks") or ()}
    )


def preset_day(day_of_week: int, preset: str) -> DayRule:
    """Build a day rule from a named hours preset ("9-5", "8-6", ...)."""
    if preset not in PRESETS:
        raise ValueError(f"Unknown preset: {preset}")
    hours = PRESETS[preset]
    if hours is None:
        return UnavailableDay(day_of_week=day_of_week)
    return AvailableDay(day_of_week=day_of_week, start_time=hours[0], end_time=hours[1])


class WeeklySchedule(BaseModel):
    """One rule per ISO day of week (1=Monday .. 7=Sunday)."""

    model_config = ConfigDict(frozen=True)

    days: tuple[DayRule, ...] = ()

    @field_validator("days", mode="before")
    @classmethod
    def _coerce_days(cls, value: Any) -> tuple[DayRule, ...]:
        if isinstance(value, dict):
            value = value.values()
        rules = [parse_day_rule(item) for item in value]
        seen: set[int] = set()
        for rule in rules:
            if rule.day_of_week in seen:
                raise ValueError(f"Duplicate rule for {DAY_NAMES[rule.day_of_week]}")
            seen.add(rule.day_of_week)
        return tuple(sorted(rules, key=lambda r: r.day_of_week))

    def rule_for_day(self, day_of_week: int) -> DayRule:
        """Rule for an ISO day of week; missing days are unavailable."""
        for rule in self.days:
            if rule.day_of_week == day_of_week:
                return rule
        return UnavailableDay(day_of_week=day_of_week)

    def rule_for(self, on_date: date) -> DayRule:
        return self.rule_for_day(on_date.isoweekday())

    def is_business_day(self, on_date: date) -> bool:
        return isinstance(self.rule_for(on_date), AvailableDay)


def default_weekly_schedule() -> WeeklySchedule:
    """Fallback business hours: weekdays 11:00-19:30, weekends off."""
    days: list[DayRule] = [
        AvailableDay(day_of_week=d, start_time=DEFAULT_START, end_time=DEFAULT_END)
        for d in range(1, 6)
    ]
    days.extend(UnavailableDay(day_of_week=d) for d in (6, 7))
    return WeeklySchedule(days=days)
