from typing import Dict, List

from spoonplanner.calendar_logic import DAYS, WEEKDAY_COUNT
from spoonplanner.models import Profile

_SPOON_CATEGORIES = {
    5: "Very High Energy",
    4: "High Energy",
    3: "Medium Energy",
    2: "Low Energy",
    1: "Very Low Energy",
    0: "Recharging",
}


def spoon_label(spoons: int) -> str:
    return "1 Spoon" if spoons == 1 else f"{spoons} Spoons"


def spoon_category(spoons: int) -> str:
    return _SPOON_CATEGORIES.get(spoons, "Unknown")


def summarize_week(daily_totals: List[int], profile: Profile) -> Dict:
    """
    Compare the seven daily totals (Mon first) with the profile limits:
      weekday_total : Mon–Fri
      weekend_total : Sat–Sun
      week_total    : both, against week_limit (weekday + weekend limit)
      over_days     : day abbreviations above the daily limit
    """
    if len(daily_totals) != len(DAYS):
        raise ValueError(f"Expected {len(DAYS)} daily totals, got {len(daily_totals)}")
    weekday_total = sum(daily_totals[:WEEKDAY_COUNT])
    weekend_total = sum(daily_totals[WEEKDAY_COUNT:])
    return {
        'weekday_total': weekday_total,
        'weekday_over': weekday_total > profile.weekday_limit,
        'weekend_total': weekend_total,
        'weekend_over': weekend_total > profile.weekend_limit,
        'week_total': weekday_total + weekend_total,
        'week_limit': profile.weekday_limit + profile.weekend_limit,
        'over_days': [DAYS[i] for i, t in enumerate(daily_totals) if t > profile.daily_limit],
    }
