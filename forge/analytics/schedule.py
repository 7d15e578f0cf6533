"""
Schedule evaluation: which calendar days count toward a habit.
"""

from datetime import date
from typing import Iterable, List, Set

from forge.analytics.calendar import weekday_index
from forge.models import FrequencyKind, Habit, HabitLog


def is_required(habit: Habit, day: date) -> bool:
    """
    True when `day` is tracked for `habit`.

    times_per_week habits are offered every day; the weekly count is not a
    per-day requirement, so they behave like daily habits here.
    """
    if habit.frequency == FrequencyKind.specific_days:
        return weekday_index(day) in set(habit.frequency_days or [])
    return True


def should_show_today(habit: Habit, today: date) -> bool:
    return bool(habit.is_active) and is_required(habit, today)


def logs_for(habit: Habit, logs: Iterable[HabitLog]) -> List[HabitLog]:
    return [log for log in logs if log.habit_id == habit.id]


def completed_days(habit: Habit, logs: Iterable[HabitLog]) -> Set[date]:
    return {log.day for log in logs_for(habit, logs) if log.is_completed}
