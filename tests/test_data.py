import os
import tempfile
from datetime import date

import pytest

from spoonplanner.data import Database
from spoonplanner.defaults import DEFAULT_ACTIVITIES
from spoonplanner.models import Activity, Profile, TimetableEntry

USER = "user-1"
MON = date(2025, 1, 6)


@pytest.fixture
def temp_db():
    fd, path = tempfile.mkstemp()
    os.close(fd)
    db = Database(db_path=path)
    try:
        yield db
    finally:
        # close the connection first, then remove the file
        db.close()
        os.remove(path)


def entry(d, t, name, spoons, week=MON):
    return TimetableEntry(week, d, ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"][d.weekday()], t, name, spoons)


def test_profile_created_with_defaults(temp_db):
    p = temp_db.load_profile(USER)
    assert (p.daily_limit, p.weekday_limit, p.weekend_limit) == (15, 75, 30)
    assert temp_db.load_profile(USER) == p


def test_profile_limits_raised_to_minimum(temp_db):
    p = temp_db.update_profile(Profile(USER, "Sam", daily_limit=20, weekday_limit=50, weekend_limit=10))
    assert p.weekday_limit == 100
    assert p.weekend_limit == 40
    loaded = temp_db.load_profile(USER)
    assert loaded.display_name == "Sam"
    assert loaded.weekday_limit == 100
    with pytest.raises(ValueError):
        temp_db.update_profile(Profile(USER, daily_limit=0))


def test_seed_default_activities_only_adds_missing(temp_db):
    assert temp_db.seed_default_activities(USER) == len(DEFAULT_ACTIVITIES)
    assert temp_db.seed_default_activities(USER) == 0
    acts = temp_db.load_activities(USER)
    assert len(acts) == len(DEFAULT_ACTIVITIES)
    assert all(a.is_default for a in acts)
    # highest energy first
    assert acts[0].spoons == 5
    assert acts[-1].spoons == 0


def test_zero_spoon_filter(temp_db):
    temp_db.seed_default_activities(USER)
    names = [a.name for a in temp_db.load_activities(USER, spoons=0)]
    assert names == ["Deep Rest", "Meditation", "Rest in Bed", "Sleep"]


def test_save_and_delete_custom_activity(temp_db):
    temp_db.seed_default_activities(USER)
    act = temp_db.save_activity(USER, Activity("Pottery", 2, "Low Energy"))
    assert act.id is not None
    # names are unique per user
    assert temp_db.save_activity(USER, Activity("Pottery", 3)) is None
    assert temp_db.save_activity("someone-else", Activity("Pottery", 3)) is not None

    sleep = next(a for a in temp_db.load_activities(USER) if a.name == "Sleep")
    assert temp_db.delete_activity(USER, sleep.id) is False
    assert temp_db.delete_activity(USER, act.id) is True
    assert "Pottery" not in [a.name for a in temp_db.load_activities(USER)]


@pytest.mark.parametrize("bad", [Activity("", 1), Activity("Too much", 6), Activity("Negative", -1)])
def test_invalid_activity_rejected(temp_db, bad):
    with pytest.raises(ValueError):
        temp_db.save_activity(USER, bad)


def test_save_and_load_week(temp_db):
    e1 = entry(MON, "08:00", "Reading", 1)
    e2 = entry(date(2025, 1, 7), "00:00", "Sleep", 0)
    temp_db.save_timetable_entries(USER, MON, [e2, e1])
    loaded = temp_db.load_timetable_entries(USER, MON)
    assert loaded == [e1, e2]
    assert temp_db.load_timetable_entries("other", MON) == []


def test_save_reconciles_by_key(temp_db):
    temp_db.save_timetable_entries(USER, MON, [
        entry(MON, "08:00", "Reading", 1),
        entry(MON, "10:00", "Shopping", 3),
    ])
    temp_db.save_timetable_entries(USER, MON, [
        entry(MON, "08:00", "Hiking", 4),
        entry(MON, "08:00", "Dancing", 4),   # last one wins
    ])
    loaded = temp_db.load_timetable_entries(USER, MON)
    assert [(e.timeslot, e.activity_name) for e in loaded] == [("08:00", "Dancing")]


def test_save_empty_week_deletes_rows(temp_db):
    temp_db.save_timetable_entries(USER, MON, [entry(MON, "08:00", "Reading", 1)])
    temp_db.save_timetable_entries(USER, MON, [])
    assert temp_db.load_timetable_entries(USER, MON) == []


def test_save_leaves_other_weeks_alone(temp_db):
    nxt = date(2025, 1, 13)
    temp_db.save_timetable_entries(USER, nxt, [entry(nxt, "08:00", "Reading", 1, week=nxt)])
    temp_db.save_timetable_entries(USER, MON, [])
    assert len(temp_db.load_timetable_entries(USER, nxt)) == 1


def test_previous_week_is_shifted(temp_db):
    prev = date(2024, 12, 30)
    temp_db.save_timetable_entries(USER, prev, [entry(date(2025, 1, 1), "12:00", "Hiking", 4, week=prev)])
    shifted = temp_db.load_previous_week_entries(USER, MON)
    assert shifted == [TimetableEntry(MON, date(2025, 1, 8), "Wed", "12:00", "Hiking", 4)]
    assert temp_db.load_previous_week_entries(USER, prev) == []


def test_load_failure_returns_empty_list(temp_db):
    temp_db.conn.execute("DROP TABLE timetable_entries")
    assert temp_db.load_timetable_entries(USER, MON) == []
    assert temp_db.load_previous_week_entries(USER, MON) == []
