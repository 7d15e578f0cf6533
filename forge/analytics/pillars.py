from datetime import date
from typing import Iterable, List

from forge.analytics.consistency import STATS_WINDOW_DAYS, consistency
from forge.analytics.momentum import habit_score
from forge.analytics.streaks import current_streak
from forge.models import Habit, HabitLog, Pillar
from forge.schemas.analytics import PillarPerformance, Trend

IMPROVING_ABOVE = 70.0
DECLINING_BELOW = 40.0


def classify_trend(momentum: float) -> Trend:
    if momentum > IMPROVING_ABOVE:
        return Trend.improving
    if momentum >= DECLINING_BELOW:
        return Trend.stable
    return Trend.declining


def pillar_performances(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    today: date,
) -> List[PillarPerformance]:
    """
    Average consistency, streak and momentum of the active habits in each
    pillar. Pillars without active habits are left out.
    """
    habits = list(habits)
    logs = list(logs)
    performances = []

    for pillar in Pillar:
        members = [h for h in habits if h.pillar == pillar and h.is_active]
        if not members:
            continue

        count = len(members)
        avg_consistency = sum(consistency(h, logs, STATS_WINDOW_DAYS, today) for h in members) / count
        avg_streak = sum(current_streak(h, logs, today) for h in members) / count
        avg_momentum = sum(habit_score(h, logs, today) for h in members) / count

        performances.append(PillarPerformance(
            pillar=pillar,
            completion_rate=avg_consistency,
            average_streak=avg_streak,
            momentum=avg_momentum,
            habit_count=count,
            trend=classify_trend(avg_momentum),
        ))

    performances.sort(key=lambda p: p.momentum, reverse=True)
    return performances
