import json
import logging
import time
from datetime import date
from typing import Callable, Optional, Set, Tuple

DUPLICATE_HOLD_MS = 1500


def parse_activity_payload(data) -> Optional[Tuple[str, int]]:
    """Decode a palette drop payload '{"name": ..., "spoons": ...}'. Malformed data gives None."""
    if not data:
        return None
    try:
        if isinstance(data, (bytes, bytearray)):
            data = data.decode('utf-8')
        obj = json.loads(data)
        name = str(obj['name']).strip()
        spoons = int(obj['spoons'])
    except Exception as e:
        logging.error(f"[SpoonPlanner] Error parsing activity data: {e}")
        return None
    if not name:
        return None
    return name, spoons


def activity_payload(name: str, spoons: int) -> str:
    return json.dumps({'name': name, 'spoons': spoons})


def drop_payload(target, d: date, timeslot: str, data) -> bool:
    """Place a palette activity at (d, timeslot). Returns False if the payload is unusable."""
    parsed = parse_activity_payload(data)
    if parsed is None:
        return False
    target.place_or_replace(d, timeslot, parsed[0], parsed[1])
    return True


class DragGesture:
    """
    One drag of a placed activity across the grid.

    `target` is anything offering ``get``, ``place_or_replace`` and
    ``move_or_swap`` (an EntrySet or a PlannerSession). Once the gesture has
    been held for `hold_ms`, it is in duplicate mode: every empty slot hovered
    receives a copy of the dragged activity, at most once per slot. Dropping
    before that moves or swaps instead.
    """

    def __init__(self, target, source_date: date, source_time: str,
                 hold_ms: int = DUPLICATE_HOLD_MS, clock: Callable[[], float] = time.monotonic):
        entry = target.get(source_date, source_time)
        if entry is None:
            raise ValueError(f"No activity at {source_date} {source_time}")
        self.target = target
        self.source = (source_date, source_time)
        self.activity = (entry.activity_name, entry.spoons)
        self.hold_ms = hold_ms
        self.clock = clock
        self.started = clock()
        self.filled: Set[Tuple[date, str]] = set()
        self.active = True

    @classmethod
    def begin(cls, target, source_date: date, source_time: str, **kwargs) -> Optional['DragGesture']:
        """Start a drag, or None if the source slot is empty."""
        if target.get(source_date, source_time) is None:
            return None
        return cls(target, source_date, source_time, **kwargs)

    @property
    def duplicate_mode(self) -> bool:
        return self.active and (self.clock() - self.started) * 1000 >= self.hold_ms

    def hover(self, d: date, timeslot: str) -> bool:
        """Returns True if a copy was placed at (d, timeslot)."""
        if not self.duplicate_mode:
            return False
        key = (d, timeslot)
        if key in self.filled or self.target.get(d, timeslot) is not None:
            return False
        self.filled.add(key)
        self.target.place_or_replace(d, timeslot, *self.activity)
        return True

    def drop(self, d: date, timeslot: str) -> bool:
        """Finish the gesture on (d, timeslot). Returns True if the drop moved something."""
        if not self.active:
            return False
        duplicating = self.duplicate_mode
        self.end()
        if duplicating:
            return False
        return self.target.move_or_swap(self.source[0], self.source[1], d, timeslot)

    def end(self):
        self.active = False
        self.filled.clear()
