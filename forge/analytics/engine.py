"""
Habit Analytics & Momentum Engine - entry points.

Every function takes an explicit (habits, logs, now) snapshot and returns
freshly computed values. There is no cache: callers recompute after each
add/update/delete/log/unlog and decide for themselves how long a result
stays fresh.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Tuple

from forge.analytics import correlation, momentum, pillars, records, stats
from forge.models import Habit, HabitLog
from forge.schemas.analytics import (
    AnalyticsReport,
    CorrelationInsight,
    DayActivity,
    HabitStats,
    PersonalRecord,
    PillarPerformance,
)

logger = logging.getLogger("forge")


@dataclass(frozen=True)
class HabitSnapshot:
    """Consistent view of the store at one instant."""
    habits: Tuple[Habit, ...]
    logs: Tuple[HabitLog, ...]
    now: datetime


def habit_stats(habit: Habit, logs: Iterable[HabitLog], now: datetime) -> HabitStats:
    return stats.habit_stats(habit, logs, now.date())


def momentum_score(habits: Iterable[Habit], logs: Iterable[HabitLog], now: datetime) -> float:
    return momentum.momentum_score(habits, logs, now.date())


def correlation_insights(
    habits: Iterable[Habit], logs: Iterable[HabitLog], now: datetime
) -> List[CorrelationInsight]:
    return correlation.correlation_insights(habits, logs, now.date())


def pillar_performances(
    habits: Iterable[Habit], logs: Iterable[HabitLog], now: datetime
) -> List[PillarPerformance]:
    return pillars.pillar_performances(habits, logs, now.date())


def personal_records(
    habits: Iterable[Habit], logs: Iterable[HabitLog], now: datetime
) -> List[PersonalRecord]:
    return records.personal_records(habits, logs, now)


def weekly_activity(
    habits: Iterable[Habit], logs: Iterable[HabitLog], now: datetime
) -> List[DayActivity]:
    return stats.weekly_activity(habits, logs, now.date())


def recompute(habits: Iterable[Habit], logs: Iterable[HabitLog], now: datetime) -> AnalyticsReport:
    """Compute every read-out from one snapshot."""
    habits = list(habits)
    logs = list(logs)

    report = AnalyticsReport(
        generated_at=now,
        momentum_score=momentum_score(habits, logs, now),
        habit_stats=[habit_stats(h, logs, now) for h in habits],
        correlation_insights=correlation_insights(habits, logs, now),
        pillar_performances=pillar_performances(habits, logs, now),
        personal_records=personal_records(habits, logs, now),
        weekly_activity=weekly_activity(habits, logs, now),
    )
    logger.debug(
        "analytics_recomputed",
        extra={"habits": len(habits), "logs": len(logs), "momentum": report.momentum_score},
    )
    return report


def recompute_snapshot(snapshot: HabitSnapshot) -> AnalyticsReport:
    return recompute(snapshot.habits, snapshot.logs, snapshot.now)
