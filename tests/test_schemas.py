"""Tests for schedule and booking data models."""

from datetime import date, datetime, time, timedelta, timezone

import pytest
from pydantic import ValidationError

from bookable.schemas.booking_schema import BookingConfig, BusyEvent, build_booking_config
from bookable.schemas.schedule_schema import (
    AvailableDay,
    Break,
    UnavailableDay,
    WeeklySchedule,
    default_weekly_schedule,
    parse_day_rule,
    preset_day,
)


class TestDayRules:
    def test_available_mapping(self):
        rule = parse_day_rule(
            {"day_of_week": 1, "is_available": True, "start_time": "09:00", "end_time": "17:00"}
        )
        assert isinstance(rule, AvailableDay)
        assert rule.start_time == time(9, 0)
        assert rule.breaks == ()

    def test_missing_bound_reads_as_unavailable(self):
        rule = parse_day_rule({"day_of_week": 2, "is_available": True, "start_time": None})
        assert isinstance(rule, UnavailableDay)
        assert rule.day_of_week == 2

    def test_flagged_unavailable_ignores_hours(self):
        rule = parse_day_rule(
            {"day_of_week": 3, "is_available": False, "start_time": "09:00", "end_time": "17:00"}
        )
        assert isinstance(rule, UnavailableDay)

    def test_breaks_sorted(self):
        rule = parse_day_rule(
            {
                "day_of_week": 1,
                "is_available": True,
                "start_time": "09:00",
                "end_time": "17:00",
                "breaks": [
                    {"start_time": "15:00", "end_time": "15:15"},
                    {"start_time": "12:00", "end_time": "13:00", "label": "Lunch"},
                ],
            }
        )
        assert [b.start_time for b in rule.breaks] == [time(12, 0), time(15, 0)]

    def test_break_must_end_after_start(self):
        with pytest.raises(ValidationError, match="End time must be after start time"):
            Break(start_time=time(13, 0), end_time=time(12, 0))

    def test_day_of_week_range(self):
        with pytest.raises(ValidationError):
            UnavailableDay(day_of_week=8)

    def test_presets(self):
        rule = preset_day(4, "8-6")
        assert rule.start_time == time(8, 0)
        assert rule.end_time == time(18, 0)
        assert isinstance(preset_day(4, "unavailable"), UnavailableDay)

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset: 7-3"):
            preset_day(1, "7-3")


class TestWeeklySchedule:
    def test_default_schedule(self):
        schedule = default_weekly_schedule()
        monday = schedule.rule_for(date(2026, 3, 2))
        assert monday.start_time == time(11, 0)
        assert monday.end_time == time(19, 30)
        assert not schedule.is_business_day(date(2026, 3, 7))

    def test_missing_day_is_unavailable(self):
        schedule = WeeklySchedule(
            days=[
                {
                    "day_of_week": 1,
                    "is_available": True,
                    "start_time": "09:00",
                    "end_time": "17:00",
                }
            ]
        )
        assert isinstance(schedule.rule_for_day(3), UnavailableDay)
        assert schedule.is_business_day(date(2026, 3, 2))

    def test_duplicate_day_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate rule for Monday"):
            WeeklySchedule(
                days=[
                    {"day_of_week": 1, "is_available": False},
                    {"day_of_week": 1, "is_available": False},
                ]
            )

    def test_mapping_input(self):
        schedule = WeeklySchedule(
            days={
                "mon": {
                    "day_of_week": 1,
                    "is_available": True,
                    "start_time": "10:00",
                    "end_time": "12:00",
                }
            }
        )
        assert schedule.rule_for_day(1).start_time == time(10, 0)


class TestBookingConfig:
    def test_explicit_values(self):
        config = BookingConfig(
            duration_minutes=45,
            buffer_minutes=10,
            min_advance_hours=2,
            max_advance_booking_days=30,
        )
        assert config.duration == timedelta(minutes=45)
        assert config.buffer == timedelta(minutes=10)
        assert config.min_advance == timedelta(hours=2)
        assert config.max_advance == timedelta(days=30)

    @pytest.mark.parametrize(
        "raw, expected",
        [("45min", 45), ("soon", 30), (0, 1), (-10, 1), (5000, 1440)],
    )
    def test_duration_parsed_and_clamped(self, raw, expected):
        assert BookingConfig(duration_minutes=raw).duration_minutes == expected

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValidationError):
            BookingConfig(buffer_minutes=-1)

    def test_build_drops_none_values(self):
        config = build_booking_config({"buffer_minutes": None, "min_advance_hours": 0})
        assert config.buffer_minutes == BookingConfig().buffer_minutes
        assert config.min_advance_hours == 0

    def test_build_explicit_duration_wins(self):
        config = build_booking_config({"duration_minutes": 15}, duration="90")
        assert config.duration_minutes == 90

    def test_build_ignores_unknown_keys(self):
        config = build_booking_config({"timezone": "UTC", "buffer_minutes": 5})
        assert config.buffer_minutes == 5

    def test_build_from_model(self):
        base = BookingConfig(buffer_minutes=20)
        assert build_booking_config(base, duration=60).buffer_minutes == 20


class TestBusyEvent:
    def test_iso_strings(self):
        event = BusyEvent(start_time="2026-03-02T10:00:00Z", end_time="2026-03-02T11:00:00+00:00")
        assert event.start_time == datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
        assert not event.is_all_day

    def test_date_strings_are_all_day(self):
        event = BusyEvent(start_time="2026-03-02", end_time="2026-03-03")
        assert event.is_all_day
        assert event.start_time == date(2026, 3, 2)

    def test_single_date_shorthand(self):
        event = BusyEvent.model_validate({"date": "2026-03-02", "uid": "holiday"})
        assert event.start_time == date(2026, 3, 2)
        assert event.end_time == date(2026, 3, 3)
        assert event.uid == "holiday"

    def test_missing_end_rejected(self):
        with pytest.raises(ValidationError):
            BusyEvent.model_validate({"start_time": "2026-03-02T10:00:00Z"})
