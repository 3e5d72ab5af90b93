import json
import logging
import time
from typing import Callable, Iterable, List, Optional

from spoonplanner.calendar_logic import format_date_for_db, parse_date_from_db
from spoonplanner.models import HistoryState, TimetableEntry
from spoonplanner.storage import KeyValueStore

MAX_HISTORY_STEPS = 35


def entry_to_dict(e: TimetableEntry) -> dict:
    return {
        'week_start': format_date_for_db(e.week_start),
        'date': format_date_for_db(e.date),
        'day_name': e.day_name,
        'timeslot': e.timeslot,
        'activity_name': e.activity_name,
        'spoons': e.spoons,
    }


def entry_from_dict(d: dict) -> TimetableEntry:
    return TimetableEntry(
        week_start=parse_date_from_db(d['week_start']),
        date=parse_date_from_db(d['date']),
        day_name=d['day_name'],
        timeslot=d['timeslot'],
        activity_name=d['activity_name'],
        spoons=int(d['spoons']),
    )


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryManager:
    """
    Bounded undo/redo stack for one week.

    States are immutable snapshots (tuples of frozen entries), so the live
    entry set can change freely after an undo. After every push the cursor
    points at the state just pushed; once the stack is full the oldest state
    is evicted from the front.

    The whole stack is written to `store` under ``history_<week_key>`` after
    each change and read back on construction. Storage problems are logged
    and otherwise ignored; the in-memory stack stays authoritative.
    """

    def __init__(self, week_key: str, store: KeyValueStore,
                 limit: int = MAX_HISTORY_STEPS, clock: Callable[[], int] = _now_ms):
        self.week_key = week_key
        self.store = store
        self.limit = max(1, limit)
        self.clock = clock
        self.history: List[HistoryState] = []
        self.current_index = -1
        self._load_history()

    @property
    def storage_key(self) -> str:
        return f"history_{self.week_key}"

    def __len__(self):
        return len(self.history)

    def _load_history(self):
        try:
            raw = self.store.get(self.storage_key)
            if not raw:
                return
            data = json.loads(raw)
            history = [
                HistoryState(
                    entries=tuple(entry_from_dict(e) for e in state['entries']),
                    timestamp=int(state.get('timestamp', 0)),
                )
                for state in data.get('history', [])
            ]
            index = int(data.get('currentIndex', -1))
        except Exception as e:
            logging.error(f"[SpoonPlanner] Failed to load history for {self.week_key}: {e}")
            return
        if history and not (0 <= index < len(history)):
            index = len(history) - 1
        overflow = max(0, len(history) - self.limit)
        self.history = history[overflow:]
        self.current_index = max(index - overflow, 0) if self.history else -1

    def _save_history(self):
        try:
            payload = {
                'history': [
                    {'entries': [entry_to_dict(e) for e in s.entries], 'timestamp': s.timestamp}
                    for s in self.history
                ],
                'currentIndex': self.current_index,
            }
            self.store.set(self.storage_key, json.dumps(payload))
        except Exception as e:
            logging.error(f"[SpoonPlanner] Failed to save history for {self.week_key}: {e}")

    def push_state(self, entries: Iterable[TimetableEntry]):
        # drop the redo branch
        self.history = self.history[:self.current_index + 1]
        self.history.append(HistoryState(entries=tuple(entries), timestamp=self.clock()))
        if len(self.history) > self.limit:
            del self.history[0]
        self.current_index = len(self.history) - 1
        self._save_history()

    def can_undo(self) -> bool:
        return self.current_index > 0

    def can_redo(self) -> bool:
        return self.current_index < len(self.history) - 1

    def undo(self) -> Optional[List[TimetableEntry]]:
        if not self.can_undo():
            return None
        self.current_index -= 1
        self._save_history()
        return list(self.history[self.current_index].entries)

    def redo(self) -> Optional[List[TimetableEntry]]:
        if not self.can_redo():
            return None
        self.current_index += 1
        self._save_history()
        return list(self.history[self.current_index].entries)

    def current_state(self) -> Optional[List[TimetableEntry]]:
        if not (0 <= self.current_index < len(self.history)):
            return None
        return list(self.history[self.current_index].entries)

    def clear(self):
        self.history = []
        self.current_index = -1
        try:
            self.store.delete(self.storage_key)
        except Exception as e:
            logging.error(f"[SpoonPlanner] Failed to clear history for {self.week_key}: {e}")
