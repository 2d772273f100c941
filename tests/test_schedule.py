"""Tests for visiting-hours normalization."""

from heritagedesk.models import OpeningDay, Weekday
from heritagedesk.schedule import (
    format_time,
    normalize_schedule,
    resolve_weekday,
    schedule_to_visiting_hours,
)


class TestFormatTime:
    """Tests for time truncation."""

    def test_strips_seconds(self) -> None:
        """Test HH:MM:SS is truncated to HH:MM."""
        assert format_time("09:30:00", "10:00") == "09:30"

    def test_pads_single_digit_hour(self) -> None:
        """Test single-digit hours are zero-padded."""
        assert format_time("9:05", "10:00") == "09:05"

    def test_missing_value_uses_default(self) -> None:
        """Test None and empty string fall back to the default."""
        assert format_time(None, "18:00") == "18:00"
        assert format_time("", "18:00") == "18:00"

    def test_garbage_uses_default(self) -> None:
        """Test unparseable values fall back to the default."""
        assert format_time("noon", "12:00") == "12:00"


class TestResolveWeekday:
    """Tests for weekday resolution."""

    def test_iso_numbers(self) -> None:
        """Test 1 is Monday and 7 is Sunday."""
        assert resolve_weekday(1) == "Monday"
        assert resolve_weekday(7) == "Sunday"

    def test_numeric_string(self) -> None:
        """Test numeric strings resolve like numbers."""
        assert resolve_weekday("3") == "Wednesday"

    def test_names_case_insensitive(self) -> None:
        """Test weekday names match regardless of case."""
        assert resolve_weekday("friday") == "Friday"
        assert resolve_weekday(" SATURDAY ") == "Saturday"

    def test_unresolvable(self) -> None:
        """Test out-of-range numbers, unknown names and bools return None."""
        assert resolve_weekday(0) is None
        assert resolve_weekday(8) is None
        assert resolve_weekday("Funday") is None
        assert resolve_weekday(True) is None
        assert resolve_weekday(None) is None


class TestNormalizeSchedule:
    """Tests for normalize_schedule."""

    def test_always_seven_days_in_order(self) -> None:
        """Test the result covers every weekday, Monday first."""
        schedule = normalize_schedule([{"day_of_week": 3}])
        assert [day.day for day in schedule] == Weekday.ALL

    def test_empty_input_all_closed(self) -> None:
        """Test no records yields seven closed days with placeholder times."""
        schedule = normalize_schedule(None)
        assert len(schedule) == 7
        assert all(not day.is_open for day in schedule)
        assert all(day.opening_time == "09:00" for day in schedule)
        assert all(day.closing_time == "18:00" for day in schedule)

    def test_legacy_record(self) -> None:
        """Test a legacy numeric record with only an opening time."""
        schedule = normalize_schedule([{"day_of_week": 7, "is_closed": False, "open_time": "09:00:00"}])
        sunday = schedule[6]
        assert sunday == OpeningDay(day="Sunday", is_open=True, opening_time="09:00", closing_time="18:00")
        assert all(not day.is_open for day in schedule[:6])

    def test_is_closed_wins_over_is_open(self) -> None:
        """Test is_closed takes precedence when both flags are present."""
        schedule = normalize_schedule([{"day": "Monday", "is_closed": True, "is_open": True}])
        assert schedule[0].is_open is False

    def test_is_open_flag(self) -> None:
        """Test the canonical is_open flag is honoured."""
        schedule = normalize_schedule([{"day": "Monday", "is_open": False}])
        assert schedule[0].is_open is False

    def test_record_without_flags_is_open(self) -> None:
        """Test a matched record without openness flags counts as open."""
        schedule = normalize_schedule([{"day_of_week": "Tuesday"}])
        assert schedule[1].is_open is True

    def test_legacy_time_fields_take_precedence(self) -> None:
        """Test open_time/close_time win over opening_time/closing_time."""
        schedule = normalize_schedule([{
            "day": "Monday",
            "open_time": "07:00:00",
            "opening_time": "10:00",
            "close_time": "20:00:00",
            "closing_time": "16:00",
        }])
        assert schedule[0].opening_time == "07:00"
        assert schedule[0].closing_time == "20:00"

    def test_last_duplicate_wins(self) -> None:
        """Test a later row for the same weekday replaces an earlier one."""
        schedule = normalize_schedule([
            {"day_of_week": 1, "open_time": "08:00"},
            {"day": "monday", "open_time": "11:00"},
        ])
        assert schedule[0].opening_time == "11:00"

    def test_unknown_weekday_ignored(self) -> None:
        """Test rows with unresolvable weekdays are skipped."""
        schedule = normalize_schedule([{"day_of_week": 9, "is_closed": False}, {"is_open": True}])
        assert all(not day.is_open for day in schedule)

    def test_idempotent(self) -> None:
        """Test normalizing a canonical schedule returns an equal schedule."""
        once = normalize_schedule([
            {"day_of_week": 2, "is_closed": False, "open_time": "10:00:00", "close_time": "17:00:00"},
        ])
        assert normalize_schedule(once) == once

    def test_custom_day_order(self) -> None:
        """Test a custom canonical order is respected."""
        order = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
        schedule = normalize_schedule([{"day_of_week": 1, "is_closed": False}], day_order=order)
        assert schedule[0].day == "Sunday"
        assert schedule[0].is_open is True


class TestScheduleToVisitingHours:
    """Tests for the outgoing visiting-hours rows."""

    def test_times_have_seconds(self) -> None:
        """Test times are sent as HH:MM:SS."""
        rows = schedule_to_visiting_hours([OpeningDay(day="Monday", is_open=True, opening_time="9:00")])
        assert rows == [{
            "day_of_week": "Monday",
            "is_open": True,
            "opening_time": "09:00:00",
            "closing_time": "18:00:00",
            "notes": None,
        }]

    def test_closed_days_keep_times(self) -> None:
        """Test closed days still carry their times."""
        rows = schedule_to_visiting_hours(normalize_schedule([]))
        assert len(rows) == 7
        assert all(row["opening_time"] == "09:00:00" for row in rows)
        assert all(row["is_open"] is False for row in rows)

    def test_round_trip(self) -> None:
        """Test outgoing rows normalize back to the same schedule."""
        schedule = normalize_schedule([{"day_of_week": 5, "is_closed": False, "open_time": "06:15:00"}])
        assert normalize_schedule(schedule_to_visiting_hours(schedule)) == schedule
