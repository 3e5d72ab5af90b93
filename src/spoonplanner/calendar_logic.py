import re
from datetime import date, datetime, timedelta
from typing import List, Union

from dateutil import parser
from dateutil.relativedelta import relativedelta, MO

TIME_SLOTS = (
    "06:00", "08:00", "10:00", "12:00", "14:00", "16:00",
    "18:00", "20:00", "22:00", "00:00", "02:00", "04:00",
)
DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKDAY_COUNT = 5

_DATE_KEY = re.compile(r"\d{4}-\d{2}-\d{2}")


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise ValueError(f"Not a date: {value!r}")


def get_week_start(d: Union[date, datetime]) -> date:
    """Monday of the ISO week containing `d`."""
    return _as_date(d) + relativedelta(weekday=MO(-1))


def get_week_days(week_start: date) -> List[date]:
    return [week_start + timedelta(days=i) for i in range(7)]


def get_next_week(week_start: date) -> date:
    return week_start + relativedelta(weeks=1)


def get_previous_week(week_start: date) -> date:
    return week_start - relativedelta(weeks=1)


def format_week_range(week_start: date) -> str:
    """e.g. 'Jan 6 - Jan 12, 2025'"""
    week_end = week_start + timedelta(days=6)
    return f"{week_start:%b} {week_start.day} - {week_end:%b} {week_end.day}, {week_end.year}"


def day_name(d: date) -> str:
    return DAYS[_as_date(d).weekday()]


def format_date_for_db(d: Union[date, datetime]) -> str:
    return _as_date(d).isoformat()


def parse_date_from_db(value: str) -> date:
    """Parse a 'YYYY-MM-DD' key. Anything else raises ValueError."""
    if not isinstance(value, str) or not _DATE_KEY.fullmatch(value):
        raise ValueError(f"Invalid date key: {value!r}")
    return parser.isoparse(value).date()


def slot_range(start: str, count: int) -> List[str]:
    """`count` consecutive slots beginning at `start`, wrapping after 04:00."""
    if start not in TIME_SLOTS:
        raise ValueError(f"Unknown timeslot: {start!r}")
    first = TIME_SLOTS.index(start)
    return [TIME_SLOTS[(first + i) % len(TIME_SLOTS)] for i in range(min(max(count, 0), len(TIME_SLOTS)))]
