"""Tests for busy-event normalization."""

from datetime import datetime, timedelta, timezone

from bookable.availability.events import (
    EventInterval,
    events_near_date,
    has_conflict_with_events,
    normalize_events,
)
from bookable.schemas.booking_schema import BusyEvent

from tests.conftest import MONDAY, make_event, utc


class TestNormalizeEvents:
    def test_sorted_utc_intervals(self):
        events = [
            make_event(utc(MONDAY, 14), utc(MONDAY, 15)),
            {"start_time": "2026-03-02T10:00:00+01:00", "end_time": "2026-03-02T11:00:00+01:00"},
        ]
        intervals = normalize_events(events, "UTC")
        assert intervals == [
            EventInterval(utc(MONDAY, 9), utc(MONDAY, 10)),
            EventInterval(utc(MONDAY, 14), utc(MONDAY, 15)),
        ]

    def test_all_day_event_anchored_in_reference_zone(self):
        intervals = normalize_events([{"date": "2026-03-02"}], "Asia/Tokyo")
        assert intervals[0].start == datetime(2026, 3, 1, 15, 0, tzinfo=timezone.utc)
        assert intervals[0].end == datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc)

    def test_all_day_event_does_not_block_next_day(self):
        tuesday = MONDAY + timedelta(days=1)
        intervals = normalize_events([BusyEvent(start_time=MONDAY, end_time=tuesday)], "UTC")
        assert has_conflict_with_events(utc(MONDAY, 23), utc(MONDAY, 23, 30), intervals)
        assert not has_conflict_with_events(utc(tuesday, 0), utc(tuesday, 1), intervals)

    def test_naive_datetimes_read_as_utc(self):
        intervals = normalize_events(
            [{"start_time": "2026-03-02T10:00:00", "end_time": "2026-03-02T11:00:00"}],
            "Asia/Tokyo",
        )
        assert intervals[0].start == utc(MONDAY, 10)

    def test_malformed_events_dropped(self):
        events = [
            {"start_time": "not a time", "end_time": "2026-03-02T11:00:00Z"},
            {"end_time": "2026-03-02T11:00:00Z"},
            make_event(utc(MONDAY, 12), utc(MONDAY, 11)),
            make_event(utc(MONDAY, 9), utc(MONDAY, 10)),
        ]
        intervals = normalize_events(events, "UTC")
        assert intervals == [EventInterval(utc(MONDAY, 9), utc(MONDAY, 10))]

    def test_none_events(self):
        assert normalize_events(None, "UTC") == []


class TestEventsNearDate:
    def test_window_of_two_days_each_side(self):
        intervals = [
            EventInterval(utc(MONDAY - timedelta(days=3), 9), utc(MONDAY - timedelta(days=3), 10)),
            EventInterval(utc(MONDAY - timedelta(days=2), 9), utc(MONDAY - timedelta(days=2), 10)),
            EventInterval(utc(MONDAY, 9), utc(MONDAY, 10)),
            EventInterval(utc(MONDAY + timedelta(days=2), 9), utc(MONDAY + timedelta(days=2), 10)),
            EventInterval(utc(MONDAY + timedelta(days=3), 9), utc(MONDAY + timedelta(days=3), 10)),
        ]
        near = events_near_date(intervals, MONDAY, "UTC")
        assert near == intervals[1:4]

    def test_long_event_overlapping_window_kept(self):
        long_event = EventInterval(
            utc(MONDAY - timedelta(days=10), 0), utc(MONDAY + timedelta(days=10), 0)
        )
        assert events_near_date([long_event], MONDAY, "UTC") == [long_event]


class TestHasConflict:
    def test_buffer_pads_both_sides(self):
        intervals = [EventInterval(utc(MONDAY, 10), utc(MONDAY, 11))]
        assert has_conflict_with_events(utc(MONDAY, 9), utc(MONDAY, 10), intervals, 15)
        assert has_conflict_with_events(utc(MONDAY, 11), utc(MONDAY, 12), intervals, 15)
        assert not has_conflict_with_events(utc(MONDAY, 11, 15), utc(MONDAY, 12), intervals, 15)

    def test_touching_without_buffer(self):
        intervals = [EventInterval(utc(MONDAY, 10), utc(MONDAY, 11))]
        assert not has_conflict_with_events(utc(MONDAY, 9), utc(MONDAY, 10), intervals, 0)
        assert not has_conflict_with_events(utc(MONDAY, 11), utc(MONDAY, 12), intervals, 0)
