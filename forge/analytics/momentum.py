"""
Momentum Scorer

Per habit: 70% last-week consistency, 30% streak (saturating at 7 days).
Globally: mean of the per-habit scores over active habits, weighted by
difficulty. Callers recompute after every store mutation.
"""

from datetime import date
from typing import Iterable, List

from forge.analytics.consistency import MOMENTUM_WINDOW_DAYS, consistency
from forge.analytics.streaks import current_streak
from forge.models import Habit, HabitLog

CONSISTENCY_WEIGHT = 0.7
STREAK_WEIGHT = 0.3
STREAK_SATURATION_DAYS = 7


def habit_score(habit: Habit, logs: Iterable[HabitLog], today: date) -> float:
    logs = list(logs)
    week_consistency = consistency(habit, logs, MOMENTUM_WINDOW_DAYS, today)
    streak_factor = min(current_streak(habit, logs, today) / STREAK_SATURATION_DAYS, 1.0)
    return (week_consistency * CONSISTENCY_WEIGHT + streak_factor * STREAK_WEIGHT) * 100


def momentum_score(habits: Iterable[Habit], logs: Iterable[HabitLog], today: date) -> float:
    active: List[Habit] = [h for h in habits if h.is_active]
    if not active:
        return 0.0

    logs = list(logs)
    total_weighted = 0.0
    total_weight = 0.0
    for habit in active:
        weight = habit.difficulty_multiplier
        total_weighted += habit_score(habit, logs, today) * weight
        total_weight += weight

    return total_weighted / total_weight if total_weight > 0 else 0.0
