"""Booking configuration, busy-event and calendar-grid data models."""

from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bookable.config import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES, settings
from bookable.utils import parse_duration


class BookingConfig(BaseModel):
    """Per-call booking constraints with defaults taken from settings."""

    model_config = ConfigDict(frozen=True)

    duration_minutes: int = settings.booking.duration_minutes
    buffer_minutes: int = Field(default=settings.booking.buffer_minutes, ge=0)
    min_advance_hours: int = Field(default=settings.booking.min_advance_hours, ge=0)
    max_advance_booking_days: int = Field(
        default=settings.booking.max_advance_booking_days, ge=0
    )

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _clamp_duration(cls, value: Any) -> int:
        minutes = parse_duration(value)
        return max(MIN_DURATION_MINUTES, min(MAX_DURATION_MINUTES, minutes))

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)

    @property
    def buffer(self) -> timedelta:
        return timedelta(minutes=self.buffer_minutes)

    @property
    def min_advance(self) -> timedelta:
        return timedelta(hours=self.min_advance_hours)

    @property
    def max_advance(self) -> timedelta:
        return timedelta(days=self.max_advance_booking_days)


def build_booking_config(
    overrides: Union[BookingConfig, Mapping[str, Any], None] = None,
    duration: Union[int, str, None] = None,
) -> BookingConfig:
    """Build the one BookingConfig used for a calculation.

    Keys absent from ``overrides`` (or set to None) fall back to the
    environment defaults. An explicit ``duration`` wins over the one in
    ``overrides``.
    """
    if isinstance(overrides, BookingConfig):
        values = overrides.model_dump()
    else:
        values = {k: v for k, v in (overrides or {}).items() if v is not None}
    if duration is not None:
        values["duration_minutes"] = duration
    return BookingConfig.model_validate(
        {k: v for k, v in values.items() if k in BookingConfig.model_fields}
    )


class BusyEvent(BaseModel):
    """An existing calendar event that blocks time.

    ``start_time``/``end_time`` are zone-aware datetimes, or plain dates for
    all-day events (exclusive end). A single ``date`` key is shorthand for a
    one-day all-day event. Naive datetimes are read as UTC.
    """

    model_config = ConfigDict(frozen=True)

    start_time: Union[datetime, date]
    end_time: Union[datetime, date]
    uid: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _expand_all_day(cls, data: Any) -> Any:
        if isinstance(data, dict) and "date" in data and data.get("start_time") is None:
            day = data["date"]
            if isinstance(day, str):
                day = date.fromisoformat(day)
            data = {**data, "start_time": day, "end_time": day + timedelta(days=1)}
            data.pop("date")
        return data

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _parse_bound(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if len(value) == 10:
                return date.fromisoformat(value)
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return value

    @property
    def is_all_day(self) -> bool:
        return not isinstance(self.start_time, datetime)


class CalendarDay(BaseModel):
    """One cell of the six-week calendar grid."""

    date: str
    day: int
    available: bool
    past: bool
    today: bool
    current_month: bool
