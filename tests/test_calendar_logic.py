# tests/test_calendar_logic.py

from datetime import date, datetime
import pytest

from spoonplanner.calendar_logic import (
    TIME_SLOTS, DAYS, get_week_start, get_week_days, get_next_week, get_previous_week,
    format_week_range, format_date_for_db, parse_date_from_db, day_name, slot_range,
)


def test_grid_constants():
    assert len(TIME_SLOTS) == 12
    assert TIME_SLOTS[0] == "06:00"
    # wraps at midnight
    assert TIME_SLOTS[8:] == ("22:00", "00:00", "02:00", "04:00")
    assert DAYS == ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@pytest.mark.parametrize("d", [
    date(2025, 1, 6),   # Monday itself
    date(2025, 1, 8),
    date(2025, 1, 12),  # Sunday
    datetime(2025, 1, 9, 23, 30),
])
def test_week_start_is_monday(d):
    assert get_week_start(d) == date(2025, 1, 6)


def test_week_start_across_year_boundary():
    # 1 Jan 2025 is a Wednesday
    assert get_week_start(date(2025, 1, 1)) == date(2024, 12, 30)


def test_week_days_and_navigation():
    days = get_week_days(date(2025, 1, 6))
    assert days[0] == date(2025, 1, 6)
    assert days[-1] == date(2025, 1, 12)
    assert [day_name(d) for d in days] == list(DAYS)
    assert get_next_week(date(2025, 1, 6)) == date(2025, 1, 13)
    assert get_previous_week(date(2025, 1, 6)) == date(2024, 12, 30)


def test_format_week_range():
    assert format_week_range(date(2025, 1, 6)) == "Jan 6 - Jan 12, 2025"
    assert format_week_range(date(2024, 12, 30)) == "Dec 30 - Jan 5, 2025"


def test_date_keys():
    assert format_date_for_db(date(2025, 1, 6)) == "2025-01-06"
    assert parse_date_from_db("2025-01-06") == date(2025, 1, 6)


@pytest.mark.parametrize("bad", ["2025-13-01", "06.01.2025", "", "2025-1-6", "2025-W02-1", "2025-006-1", None])
def test_invalid_date_key_raises(bad):
    with pytest.raises(ValueError):
        parse_date_from_db(bad)


def test_slot_range_wraps_modulo_12():
    assert slot_range("08:00", 3) == ["08:00", "10:00", "12:00"]
    assert slot_range("02:00", 3) == ["02:00", "04:00", "06:00"]
    assert slot_range("06:00", 20) == list(TIME_SLOTS)
    assert slot_range("06:00", 0) == []


def test_slot_range_unknown_start():
    with pytest.raises(ValueError):
        slot_range("07:00", 2)
