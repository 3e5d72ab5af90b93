from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from spoonplanner.calendar_logic import (
    day_name, get_week_days, get_week_start, slot_range,
)
from spoonplanner.models import MergeResult, SlotRequest, TimetableEntry


def _make_entry(d: date, timeslot: str, activity_name: str, spoons: int) -> TimetableEntry:
    return TimetableEntry(
        week_start=get_week_start(d),
        date=d,
        day_name=day_name(d),
        timeslot=timeslot,
        activity_name=activity_name,
        spoons=spoons,
    )


def build_bulk_slots(
    week_start: date,
    day_indices: Iterable[int],
    start: str,
    count: int,
    activity_name: str,
    spoons: int,
) -> List[SlotRequest]:
    """Expand selected weekdays (0=Mon … 6=Sun) and a duration in slots into requests."""
    days = get_week_days(week_start)
    times = slot_range(start, count)
    return [
        SlotRequest(days[i], t, activity_name, spoons)
        for i in sorted(set(day_indices))
        for t in times
    ]


class EntrySet:
    """
    The placements of one week, addressed by (date, timeslot).

    Mutations keep at most one entry per key, except `bulk_place`, which
    appends unconditionally. Entries are frozen; the list order is the
    iteration order used for "last write wins" when saving.
    """

    def __init__(self, entries: Iterable[TimetableEntry] = ()):
        self._entries: List[TimetableEntry] = list(entries)

    def __iter__(self) -> Iterator[TimetableEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self):
        return f"EntrySet({self._entries!r})"

    def _index_of(self, d: date, timeslot: str) -> Optional[int]:
        for i, e in enumerate(self._entries):
            if e.date == d and e.timeslot == timeslot:
                return i
        return None

    def get(self, d: date, timeslot: str) -> Optional[TimetableEntry]:
        i = self._index_of(d, timeslot)
        return self._entries[i] if i is not None else None

    def occupied(self) -> set:
        return {e.key for e in self._entries}

    def snapshot(self) -> Tuple[TimetableEntry, ...]:
        return tuple(self._entries)

    def to_list(self) -> List[TimetableEntry]:
        return list(self._entries)

    def replace_all(self, entries: Iterable[TimetableEntry]):
        self._entries = list(entries)

    def clear(self):
        self._entries = []

    # Mutations

    def place_or_replace(self, d: date, timeslot: str, activity_name: str, spoons: int) -> TimetableEntry:
        i = self._index_of(d, timeslot)
        if i is not None:
            entry = replace(self._entries[i], activity_name=activity_name, spoons=spoons)
            self._entries[i] = entry
        else:
            entry = _make_entry(d, timeslot, activity_name, spoons)
            self._entries.append(entry)
        return entry

    def remove(self, d: date, timeslot: str) -> Optional[TimetableEntry]:
        removed = self.get(d, timeslot)
        if removed is None:
            return None
        self._entries = [e for e in self._entries if not (e.date == d and e.timeslot == timeslot)]
        return removed

    def move_or_swap(self, from_date: date, from_time: str, to_date: date, to_time: str) -> bool:
        """
        Move the entry at the source key to the destination. An occupied
        destination swaps addresses with the source, so nothing is lost.
        Returns False when there is no source entry.
        """
        src = self._index_of(from_date, from_time)
        if src is None:
            return False
        if (from_date, from_time) == (to_date, to_time):
            return False
        dst = self._index_of(to_date, to_time)
        moving = self._entries[src]
        self._entries[src] = replace(
            moving, date=to_date, timeslot=to_time,
            day_name=day_name(to_date), week_start=get_week_start(to_date),
        )
        if dst is not None:
            other = self._entries[dst]
            self._entries[dst] = replace(
                other, date=from_date, timeslot=from_time,
                day_name=day_name(from_date), week_start=get_week_start(from_date),
            )
        return True

    def bulk_place(self, slots: Sequence[SlotRequest]) -> List[TimetableEntry]:
        added = [_make_entry(s.date, s.timeslot, s.activity_name, s.spoons) for s in slots]
        self._entries.extend(added)
        return added

    def merge_from_previous_week(self, candidates: Sequence[TimetableEntry]) -> MergeResult:
        """Append candidates whose slot is empty; existing entries are never touched."""
        taken = self.occupied()
        added = []
        for entry in candidates:
            if entry.key in taken:
                continue
            taken.add(entry.key)
            added.append(entry)
        self._entries.extend(added)
        return MergeResult(added=added, source_count=len(candidates))

    # Totals

    def daily_totals(self, week_start: date) -> List[int]:
        totals: Dict[date, int] = {d: 0 for d in get_week_days(week_start)}
        for e in self._entries:
            if e.date in totals:
                totals[e.date] += e.spoons
        return list(totals.values())
