"""
Streak Calculator

current_streak walks backward from today over required days only, so rest
days of a specific_days habit neither break nor extend a run. best_streak
looks at raw calendar adjacency of completed days.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from forge.analytics.calendar import earliest, to_local_day
from forge.analytics.schedule import completed_days, is_required, logs_for
from forge.config import get_timezone
from forge.models import Habit, HabitLog


def _walk_floor(habit: Habit, logs: Iterable[HabitLog]) -> Optional[date]:
    """
    Oldest day the backward walk may visit: the habit's creation day or its
    earliest log, whichever is older (back-filled history stays countable).
    Creation is a UTC timestamp, read as a day in the configured zone.
    """
    created = to_local_day(habit.created_at, get_timezone()) if habit.created_at else None
    log_days = [log.day for log in logs_for(habit, logs)]
    return earliest(created, min(log_days) if log_days else None)


def current_streak(habit: Habit, logs: Iterable[HabitLog], today: date) -> int:
    logs = list(logs)
    done = completed_days(habit, logs)

    if is_required(habit, today) and today not in done:
        return 0

    floor = _walk_floor(habit, logs)
    if floor is None:
        return 0

    streak = 0
    cursor = today
    while cursor >= floor:
        if is_required(habit, cursor):
            if cursor not in done:
                break
            streak += 1
        cursor -= timedelta(days=1)
    return streak


def best_streak(habit: Habit, logs: Iterable[HabitLog]) -> int:
    days = sorted(completed_days(habit, logs))
    best = 0
    run = 0
    last: Optional[date] = None
    for day in days:
        if last is not None and (day - last).days == 1:
            run += 1
        else:
            run = 1
        best = max(best, run)
        last = day
    return best
