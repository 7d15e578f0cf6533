"""
Correlation Engine for Forge.
Finds habits that rise and fall together (or against each other) and
weekday effects within a single habit, over the trailing 30 days.
"""

import math
from datetime import date
from typing import Iterable, List, Optional, Sequence

from forge.analytics.calendar import WEEKDAY_NAMES, days_back, weekday_index
from forge.analytics.schedule import completed_days
from forge.models import Habit, HabitLog
from forge.schemas.analytics import CorrelationInsight, CorrelationType

CORRELATION_WINDOW_DAYS = 30
MIN_PAIRED_OBSERVATIONS = 10
MIN_CORRELATION = 0.3
MIN_WEEKDAY_SPREAD = 0.3
MAX_INSIGHTS = 5


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Pearson r of two equal-length series.
    Returns 0.0 when either series is constant.
    """
    n = float(len(xs))
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)
    sum_y2 = sum(y * y for y in ys)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if spread <= 0:
        return 0.0
    return numerator / math.sqrt(spread)


class CorrelationEngine:
    """
    Pairwise and temporal insight detection over one snapshot.

    Methods:
    - Pearson correlation of daily completion vectors for every pair of
      active habits
    - Weekday completion-rate spread for each active habit
    """

    def __init__(self, habits: Iterable[Habit], logs: Iterable[HabitLog], today: date):
        self.habits = [h for h in habits if h.is_active]
        self.logs = list(logs)
        self.today = today
        self.window = list(days_back(today, CORRELATION_WINDOW_DAYS))
        self._done = {h.id: completed_days(h, self.logs) for h in self.habits}

    def insights(self) -> List[CorrelationInsight]:
        found: List[CorrelationInsight] = []

        for i, first in enumerate(self.habits):
            for second in self.habits[i + 1:]:
                insight = self.pair_insight(first, second)
                if insight:
                    found.append(insight)

        for habit in self.habits:
            insight = self.temporal_insight(habit)
            if insight:
                found.append(insight)

        found.sort(key=lambda insight: insight.strength, reverse=True)
        return found[:MAX_INSIGHTS]

    def _completed(self, habit: Habit):
        if habit.id not in self._done:
            self._done[habit.id] = completed_days(habit, self.logs)
        return self._done[habit.id]

    def completion_vector(self, habit: Habit) -> List[float]:
        done = self._completed(habit)
        return [1.0 if day in done else 0.0 for day in self.window]

    def pair_insight(self, first: Habit, second: Habit) -> Optional[CorrelationInsight]:
        xs = self.completion_vector(first)
        ys = self.completion_vector(second)
        if len(xs) < MIN_PAIRED_OBSERVATIONS:
            return None

        r = pearson_correlation(xs, ys)
        strength = abs(r)
        if strength <= MIN_CORRELATION:
            return None

        percentage = int(strength * 100)
        if r > 0:
            title = "Synergy Detected"
            description = (
                f"You are {percentage}% more likely to complete '{second.name}' "
                f"on days you complete '{first.name}'"
            )
            kind = CorrelationType.positive
        else:
            title = "Conflict Pattern"
            description = (
                f"Your '{second.name}' success rate drops by {percentage}% "
                f"on days you complete '{first.name}'"
            )
            kind = CorrelationType.negative

        return CorrelationInsight(
            title=title,
            description=description,
            strength=min(strength, 1.0),
            type=kind,
            habit_ids=[first.id, second.id],
        )

    def weekday_rates(self, habit: Habit) -> List[float]:
        done = self._completed(habit)
        completions = [0] * 7
        totals = [0] * 7
        for day in self.window:
            index = weekday_index(day)
            totals[index] += 1
            if day in done:
                completions[index] += 1
        return [c / t if t > 0 else 0.0 for c, t in zip(completions, totals)]

    def temporal_insight(self, habit: Habit) -> Optional[CorrelationInsight]:
        rates = self.weekday_rates(habit)
        best_rate = max(rates)
        worst_rate = min(rates)
        spread = best_rate - worst_rate
        if spread <= MIN_WEEKDAY_SPREAD:
            return None

        best_day = WEEKDAY_NAMES[rates.index(best_rate)]
        worst_day = WEEKDAY_NAMES[rates.index(worst_rate)]
        percentage = int(spread * 100)

        return CorrelationInsight(
            title="Weekly Pattern",
            description=(
                f"Your '{habit.name}' success rate is {percentage}% higher "
                f"on {best_day}s than {worst_day}s"
            ),
            strength=spread,
            type=CorrelationType.temporal,
            habit_ids=[habit.id],
        )


def correlation_insights(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    today: date,
) -> List[CorrelationInsight]:
    return CorrelationEngine(habits, logs, today).insights()
