from datetime import date
from typing import Iterable

from forge.analytics.calendar import days_back
from forge.analytics.schedule import completed_days, is_required
from forge.models import Habit, HabitLog

STATS_WINDOW_DAYS = 30
MOMENTUM_WINDOW_DAYS = 7


def consistency(
    habit: Habit,
    logs: Iterable[HabitLog],
    window_days: int,
    today: date,
) -> float:
    """
    Share of required days completed over the last `window_days` days,
    today included. 0.0 when the window holds no required day.
    """
    done = completed_days(habit, logs)
    required = 0
    satisfied = 0
    for day in days_back(today, window_days):
        if not is_required(habit, day):
            continue
        required += 1
        if day in done:
            satisfied += 1

    if required == 0:
        return 0.0
    return satisfied / required
