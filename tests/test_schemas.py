"""
Scheduling value type tests - time parsing and the invariants the models enforce.
"""
import uuid
from datetime import date, time

import pytest
from pydantic import ValidationError

from slotbook.schemas.scheduling import (
    END_OF_DAY,
    DateOverrideRule,
    Interval,
    InvalidSchedulingInput,
    OpeningWindow,
    TimeOffEntry,
    WeeklyHoursRule,
    format_time_of_day,
    from_seconds,
    parse_calendar_date,
    parse_time_of_day,
    to_seconds,
    weekday_name,
)


class TestParseTimeOfDay:
    @pytest.mark.parametrize("value,expected", [
        ("09:00", time(9, 0)),
        ("17:30:00", time(17, 30)),
        ("00:00", time(0, 0)),
        ("23:59:59", time(23, 59, 59)),
        (time(8, 15), time(8, 15)),
    ])
    def test_valid(self, value, expected):
        assert parse_time_of_day(value) == expected

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon", "12", "12:00:00:00", "", None, 900])
    def test_invalid(self, value):
        with pytest.raises(InvalidSchedulingInput):
            parse_time_of_day(value)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            parse_time_of_day("later")


class TestCalendarHelpers:
    def test_parse_date(self):
        assert parse_calendar_date("2026-02-16") == date(2026, 2, 16)
        assert parse_calendar_date(date(2026, 2, 16)) == date(2026, 2, 16)

    def test_parse_date_invalid(self):
        with pytest.raises(InvalidSchedulingInput):
            parse_calendar_date("2026-02-30")

    def test_weekday_name(self):
        assert weekday_name(date(2026, 2, 16)) == "monday"
        assert weekday_name(date(2026, 2, 22)) == "sunday"

    def test_format(self):
        assert format_time_of_day(time(9, 5)) == "09:05"

    def test_seconds(self):
        assert to_seconds(time(9, 30, 15)) == 34215
        assert from_seconds(34215) == time(9, 30, 15)
        assert to_seconds(END_OF_DAY) == 24 * 3600
        assert from_seconds(24 * 3600) == END_OF_DAY


class TestInterval:
    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            Interval(start="10:00", end="10:00")

    def test_overlaps_is_half_open(self):
        a = Interval(start="09:00", end="10:00")
        assert not a.overlaps(Interval(start="10:00", end="11:00"))
        assert a.overlaps(Interval(start="09:59", end="11:00"))


class TestWeeklyHoursRule:
    def test_day_name_normalized(self):
        assert WeeklyHoursRule(day_in_week="Monday", open_from="09:00", open_to="17:00").day_in_week == "monday"

    def test_unknown_day(self):
        with pytest.raises(ValidationError):
            WeeklyHoursRule(day_in_week="someday", open_from="09:00", open_to="17:00")

    def test_break_outside_hours(self):
        with pytest.raises(ValidationError):
            WeeklyHoursRule(day_in_week="monday", open_from="09:00", open_to="17:00",
                            break_from="16:45", break_to="17:15")

    def test_half_break(self):
        with pytest.raises(ValidationError):
            WeeklyHoursRule(day_in_week="monday", open_from="09:00", open_to="17:00", break_from="12:00")

    def test_empty_break_strings_mean_no_break(self):
        rule = WeeklyHoursRule(day_in_week="monday", open_from="09:00", open_to="17:00",
                               break_from="", break_to="")
        assert rule.break_from is None


class TestOpeningWindow:
    def test_contains(self):
        window = OpeningWindow(open_from="09:00", open_to="17:00")
        assert window.contains(Interval(start="16:30", end="17:00"))
        assert not window.contains(Interval(start="16:45", end="17:15"))

    def test_degenerate_break_ignored(self):
        window = OpeningWindow(open_from="09:00", open_to="17:00", break_from="12:00", break_to="12:00")
        assert window.break_interval is None


class TestDateOverrideRule:
    def test_closed_when_no_hours(self):
        assert DateOverrideRule(override_date=date(2025, 12, 25)).is_closed

    def test_partial_is_not_closed(self):
        assert not DateOverrideRule(override_date=date(2025, 12, 24), open_to="13:00").is_closed


class TestTimeOffEntry:
    def test_all_day(self):
        entry = TimeOffEntry(staff_id=uuid.uuid4(), day=date(2026, 2, 16))
        assert entry.as_interval() == Interval(start=time.min, end=END_OF_DAY)

    def test_partial(self):
        entry = TimeOffEntry(staff_id=uuid.uuid4(), day=date(2026, 2, 16), all_day=False,
                             from_time="13:00", to_time="14:00")
        assert entry.as_interval() == Interval(start="13:00", end="14:00")

    def test_partial_without_times_blocks_nothing(self):
        entry = TimeOffEntry(staff_id=uuid.uuid4(), day=date(2026, 2, 16), all_day=False)
        assert entry.as_interval() is None
