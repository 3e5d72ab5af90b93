# src/spoonplanner/models.py
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

MIN_SPOONS = 0
MAX_SPOONS = 5


@dataclass
class Profile:
    """Energy limits of a user (spoons per day, Mon–Fri and Sat–Sun)."""
    user_id: str
    display_name: str = ""
    daily_limit: int = 15
    weekday_limit: int = 75
    weekend_limit: int = 30


@dataclass
class Activity:
    """An entry of the activity catalog."""
    id: Optional[int] = field(default=None, init=False)    # db primary key
    name: str
    spoons: int
    category: str = ""
    description: Optional[str] = None
    is_default: bool = False


@dataclass(frozen=True)
class TimetableEntry:
    """A placed activity. `spoons` is copied at placement time."""
    week_start: date
    date: date
    day_name: str
    timeslot: str
    activity_name: str
    spoons: int

    @property
    def key(self) -> Tuple[date, str]:
        return (self.date, self.timeslot)


@dataclass(frozen=True)
class SlotRequest:
    """One slot of a bulk placement."""
    date: date
    timeslot: str
    activity_name: str
    spoons: int


@dataclass(frozen=True)
class HistoryState:
    entries: Tuple[TimetableEntry, ...]
    timestamp: int                # epoch milliseconds


SOURCE_EMPTY = "source-empty"
ALL_OCCUPIED = "all-occupied"


@dataclass
class MergeResult:
    """Outcome of merging the previous week into the current one."""
    added: List[TimetableEntry]
    source_count: int

    @property
    def count(self) -> int:
        return len(self.added)

    @property
    def nothing_to_merge(self) -> Optional[str]:
        if self.source_count == 0:
            return SOURCE_EMPTY
        if not self.added:
            return ALL_OCCUPIED
        return None
