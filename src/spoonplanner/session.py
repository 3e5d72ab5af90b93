import logging
from datetime import date
from typing import Callable, List, Optional, Sequence

from spoonplanner.calendar_logic import format_date_for_db, get_week_start
from spoonplanner.entries import EntrySet
from spoonplanner.history import HistoryManager, MAX_HISTORY_STEPS
from spoonplanner.models import MergeResult, Profile, SlotRequest, TimetableEntry
from spoonplanner.statistics import summarize_week
from spoonplanner.storage import KeyValueStore


class PlannerSession:
    """
    Everything needed to edit one week of one user: the live entry set, the
    week's undo history and the database.

    Each committed change pushes exactly one history state and notifies the
    listeners (the auto-saver, the view). Calls that change nothing push
    nothing.
    """

    def __init__(self, db, user_id: str, week_start: date, history_store: KeyValueStore,
                 history_limit: int = MAX_HISTORY_STEPS):
        self.db = db
        self.user_id = user_id
        self.week_start = get_week_start(week_start)
        self.entries = EntrySet()
        self.history = HistoryManager(self.week_key, history_store, limit=history_limit)
        self._listeners: List[Callable[[], None]] = []

    @property
    def week_key(self) -> str:
        return format_date_for_db(self.week_start)

    def add_listener(self, fn: Callable[[], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in list(self._listeners):
            fn()

    def _commit(self):
        self.history.push_state(self.entries.snapshot())
        self._notify()

    def load(self) -> List[TimetableEntry]:
        """Load the stored week. A history whose current state matches it is kept as is."""
        loaded = self.db.load_timetable_entries(self.user_id, self.week_start)
        self.entries.replace_all(loaded)
        current = self.history.current_state()
        if current is None or set(current) != set(loaded):
            self.history.push_state(self.entries.snapshot())
        return loaded

    def get(self, d: date, timeslot: str) -> Optional[TimetableEntry]:
        return self.entries.get(d, timeslot)

    # Mutations

    def place_or_replace(self, d: date, timeslot: str, activity_name: str, spoons: int) -> TimetableEntry:
        entry = self.entries.place_or_replace(d, timeslot, activity_name, spoons)
        self._commit()
        return entry

    def remove(self, d: date, timeslot: str) -> Optional[TimetableEntry]:
        removed = self.entries.remove(d, timeslot)
        if removed is not None:
            self._commit()
        return removed

    def move_or_swap(self, from_date: date, from_time: str, to_date: date, to_time: str) -> bool:
        moved = self.entries.move_or_swap(from_date, from_time, to_date, to_time)
        if moved:
            self._commit()
        return moved

    def bulk_place(self, slots: Sequence[SlotRequest]) -> List[TimetableEntry]:
        added = self.entries.bulk_place(slots)
        if added:
            self._commit()
        return added

    def load_previous_week(self) -> MergeResult:
        candidates = self.db.load_previous_week_entries(self.user_id, self.week_start)
        result = self.entries.merge_from_previous_week(candidates)
        if result.added:
            self._commit()
        return result

    def clear_week(self) -> int:
        count = len(self.entries)
        if count:
            self.entries.clear()
            self._commit()
        return count

    def undo(self) -> Optional[List[TimetableEntry]]:
        state = self.history.undo()
        if state is not None:
            self.entries.replace_all(state)
            self._notify()
        return state

    def redo(self) -> Optional[List[TimetableEntry]]:
        state = self.history.redo()
        if state is not None:
            self.entries.replace_all(state)
            self._notify()
        return state

    # Saving

    def save(self):
        """Write the current week to the database. Raises on failure."""
        self.db.save_timetable_entries(self.user_id, self.week_start, self.entries.to_list())

    def try_save(self) -> bool:
        try:
            self.save()
        except Exception as e:
            logging.error(f"[SpoonPlanner] Save failed: {e}")
            return False
        return True

    # Totals

    def daily_totals(self) -> List[int]:
        return self.entries.daily_totals(self.week_start)

    def summary(self, profile: Profile) -> dict:
        return summarize_week(self.daily_totals(), profile)
