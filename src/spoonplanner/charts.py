# src/spoonplanner/charts.py

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from spoonplanner.calendar_logic import DAYS

COLOR_WITHIN = '#A0C4FF'
COLOR_OVER = '#FFADAD'
COLOR_LIMIT = '#D00000'


def create_energy_chart(daily_totals: list[int], daily_limit: int, filename: str, title: str = None):
    """
    Saves a bar chart of the daily spoons (Mon–Sun) with a line at the daily limit as PNG.
    :param daily_totals: seven daily sums, Monday first.
    :param daily_limit: daily limit from the profile.
    :param filename: output path, e.g. "week.png".
    :param title: (Optional) chart title.
    :return: the bar colors, over-limit days in COLOR_OVER.
    """
    colors = [COLOR_OVER if t > daily_limit else COLOR_WITHIN for t in daily_totals]
    fig, ax = plt.subplots(figsize=(5, 3))
    ax.bar(DAYS[:len(daily_totals)], daily_totals, color=colors)
    ax.axhline(daily_limit, color=COLOR_LIMIT, linestyle='--', linewidth=1)
    ax.set_ylim(0, max([daily_limit, *daily_totals]) + 2)
    ax.set_ylabel("Spoons")
    if title:
        ax.set_title(title)
    fig.savefig(filename, bbox_inches="tight")
    plt.close(fig)
    return colors
