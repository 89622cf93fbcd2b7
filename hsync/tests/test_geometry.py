"""Tests for slot geometry: index encoding, row lookup and slot times."""

from datetime import date, datetime

import pytest

from hsync.errors import ValidationError
from hsync.scheduling import geometry


class TestEncoding:
    """Day-major slot index encoding."""

    def test_round_trip_for_every_cell(self):
        days, per_day = 3, 5
        for day in range(days):
            for row in range(per_day):
                index = geometry.encode(day, row, per_day)
                assert geometry.decode(index, per_day, days) == (day, row)

    def test_encoding_is_day_major(self):
        assert geometry.encode(1, 0, 4) == 4
        assert geometry.decode(5, 4) == (1, 1)

    def test_decode_rejects_negative_index(self):
        with pytest.raises(geometry.SlotIndexError):
            geometry.decode(-1, 4)

    def test_decode_rejects_index_past_last_day(self):
        with pytest.raises(geometry.SlotIndexError):
            geometry.decode(8, 4, days=2)

    def test_slot_index_error_is_value_error(self):
        assert issubclass(geometry.SlotIndexError, ValueError)


class TestEventGeometry:
    """Functions derived from an event's configuration."""

    def test_slots_per_day_truncates_partial_slot(self, event_factory):
        event = event_factory(start="09:00", end="10:45", slot_minutes=30)
        assert geometry.slots_per_day(event) == 3
        assert geometry.total_slots(event) == 6

    def test_row_start_minutes(self, event_factory):
        event = event_factory(start="09:00", end="12:00", slot_minutes=15)
        assert geometry.row_start_minutes(event, 0) == 540
        assert geometry.row_start_minutes(event, 3) == 585

    def test_slot_time_range(self, event_factory):
        event = event_factory(days=2, start="09:00", end="10:00", slot_minutes=30)
        start, end = geometry.slot_time_range(event, 1, 1)
        assert start == datetime(2026, 3, 3, 9, 30)
        assert end == datetime(2026, 3, 3, 10, 0)

    def test_slot_ending_at_midnight_rolls_to_next_day(self, event_factory):
        event = event_factory(days=1, start="23:00", end="24:00", slot_minutes=60)
        start, end = geometry.slot_time_range(event, 0, 0)
        assert start == datetime(2026, 3, 2, 23, 0)
        assert end == datetime(2026, 3, 3, 0, 0)

    def test_row_for_minutes_inside_window(self, event_factory):
        event = event_factory(start="09:00", end="12:00", slot_minutes=30)
        assert geometry.row_for_minutes(event, 9 * 60) == 0
        assert geometry.row_for_minutes(event, 10 * 60 + 29) == 2

    def test_row_for_minutes_clamps_to_window(self, event_factory):
        event = event_factory(start="09:00", end="12:00", slot_minutes=30)
        assert geometry.row_for_minutes(event, 6 * 60) == 0
        assert geometry.row_for_minutes(event, 20 * 60) == 5

    def test_time_labels(self, event_factory):
        event = event_factory(start="11:30", end="13:00", slot_minutes=30)
        assert geometry.time_labels(event) == ["11:30 AM", "12:00 PM", "12:30 PM"]

    def test_calendar_window(self, event_factory):
        event = event_factory(days=3, start="09:00", end="17:00", slot_minutes=60)
        assert geometry.calendar_window(event) == (
            datetime(2026, 3, 2, 9, 0),
            datetime(2026, 3, 4, 17, 0),
        )


class TestRangeSelection:
    """Selecting a clock-time range on one day."""

    def test_range_covers_touched_rows(self, event_factory):
        event = event_factory(days=2, start="09:00", end="12:00", slot_minutes=30)
        # 10:00-11:00 on day 1 -> rows 2 and 3 -> 6 + 2, 6 + 3
        assert geometry.slots_for_range(event, 1, 600, 660) == [8, 9]

    def test_range_partially_outside_window_is_truncated(self, event_factory):
        event = event_factory(days=1, start="09:00", end="11:00", slot_minutes=30)
        assert geometry.slots_for_range(event, 0, 7 * 60, 10 * 60) == [0, 1]
        assert geometry.slots_for_range(event, 0, 10 * 60 + 30, 13 * 60) == [3]

    def test_inverted_range_is_rejected(self, event_factory):
        event = event_factory()
        with pytest.raises(ValidationError):
            geometry.slots_for_range(event, 0, 600, 600)

    def test_unknown_day_is_rejected(self, event_factory):
        event = event_factory(days=2)
        with pytest.raises(ValidationError):
            geometry.slots_for_range(event, 2, 540, 600)


class TestTimeParsing:
    """Clock-time parsing and labels."""

    @pytest.mark.parametrize(
        "text,minutes",
        [("00:00", 0), ("09:05", 545), ("23:59", 1439), ("24:00", 1440)],
    )
    def test_parse_time(self, text, minutes):
        assert geometry.parse_time(text) == minutes

    @pytest.mark.parametrize("text", ["9:00", "24:30", "12:60", "noon", ""])
    def test_parse_time_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            geometry.parse_time(text)

    @pytest.mark.parametrize(
        "minutes,label",
        [(0, "12:00 AM"), (540, "9:00 AM"), (720, "12:00 PM"), (1005, "4:45 PM")],
    )
    def test_format_time(self, minutes, label):
        assert geometry.format_time(minutes) == label

    def test_date_range_is_inclusive(self):
        assert geometry.date_range(date(2026, 2, 27), date(2026, 3, 2)) == [
            date(2026, 2, 27),
            date(2026, 2, 28),
            date(2026, 3, 1),
            date(2026, 3, 2),
        ]
