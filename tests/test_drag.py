from datetime import date

import pytest

from spoonplanner.drag import DragGesture, parse_activity_payload, activity_payload, drop_payload
from spoonplanner.entries import EntrySet

MON = date(2025, 1, 6)
TUE = date(2025, 1, 7)
WED = date(2025, 1, 8)


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def entries():
    es = EntrySet()
    es.place_or_replace(MON, "08:00", "Reading", 1)
    return es


def test_begin_on_empty_slot_returns_none(entries):
    assert DragGesture.begin(entries, TUE, "08:00") is None
    with pytest.raises(ValueError):
        DragGesture(entries, TUE, "08:00")


def test_quick_drop_moves(entries):
    clock = FakeClock()
    g = DragGesture.begin(entries, MON, "08:00", clock=clock)
    clock.advance(300)
    assert not g.duplicate_mode
    assert g.hover(TUE, "10:00") is False
    assert g.drop(TUE, "10:00") is True
    assert entries.get(MON, "08:00") is None
    assert entries.get(TUE, "10:00").activity_name == "Reading"
    assert len(entries) == 1


def test_quick_drop_on_occupied_swaps(entries):
    entries.place_or_replace(TUE, "10:00", "Hiking", 4)
    clock = FakeClock()
    g = DragGesture.begin(entries, MON, "08:00", clock=clock)
    assert g.drop(TUE, "10:00")
    assert entries.get(MON, "08:00").activity_name == "Hiking"
    assert entries.get(TUE, "10:00").activity_name == "Reading"


def test_duplicate_mode_fans_out_to_empty_slots(entries):
    entries.place_or_replace(WED, "12:00", "Hiking", 4)
    clock = FakeClock()
    g = DragGesture.begin(entries, MON, "08:00", clock=clock)
    clock.advance(1500)
    assert g.duplicate_mode
    targets = [(TUE, "08:00"), (TUE, "10:00"), (WED, "08:00")]
    for d, t in targets:
        assert g.hover(d, t)
    # re-hover and occupied slots write nothing
    assert g.hover(TUE, "08:00") is False
    assert g.hover(WED, "12:00") is False
    assert g.hover(MON, "08:00") is False
    assert len(entries) == 2 + len(targets)
    for d, t in targets:
        e = entries.get(d, t)
        assert (e.activity_name, e.spoons) == ("Reading", 1)
    assert entries.get(WED, "12:00").activity_name == "Hiking"

    # dropping in duplicate mode does not move the source
    assert g.drop(WED, "10:00") is False
    assert entries.get(MON, "08:00").activity_name == "Reading"
    assert g.filled == set()


def test_rehover_after_user_removed_copy_is_not_refilled(entries):
    clock = FakeClock()
    g = DragGesture.begin(entries, MON, "08:00", clock=clock)
    clock.advance(2000)
    assert g.hover(TUE, "08:00")
    entries.remove(TUE, "08:00")
    assert g.hover(TUE, "08:00") is False


def test_gesture_is_single_use(entries):
    g = DragGesture.begin(entries, MON, "08:00", clock=FakeClock())
    g.end()
    assert g.drop(TUE, "08:00") is False
    assert entries.get(MON, "08:00") is not None


def test_payload_roundtrip_and_malformed():
    assert parse_activity_payload(activity_payload("Sleep", 0)) == ("Sleep", 0)
    assert parse_activity_payload(b'{"name": "Reading", "spoons": "1"}') == ("Reading", 1)
    assert parse_activity_payload("") is None
    assert parse_activity_payload("not json") is None
    assert parse_activity_payload('{"name": "Reading"}') is None
    assert parse_activity_payload('{"name": " ", "spoons": 1}') is None


def test_drop_payload(entries):
    assert drop_payload(entries, TUE, "06:00", activity_payload("Sleep", 0))
    assert entries.get(TUE, "06:00").activity_name == "Sleep"
    assert not drop_payload(entries, TUE, "08:00", "{broken")
    assert entries.get(TUE, "08:00") is None
