"""
Record Extractor

Records of every kind are ranked together by raw value, so a 30-day streak
outranks a 25-minute session. Units differ; the ordering is kept as-is.
"""

from datetime import date, datetime, time
from typing import Iterable, List, Optional

from forge.analytics.schedule import logs_for
from forge.analytics.stats import habit_stats
from forge.models import Habit, HabitLog, HabitType
from forge.schemas.analytics import PersonalRecord, RecordType


def _at_start_of(day: Optional[date], now: datetime) -> datetime:
    if day is None:
        return now
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def _day_of_best(logs: List[HabitLog], attr: str) -> Optional[date]:
    candidates = [log for log in logs if log.is_completed and getattr(log, attr) is not None]
    if not candidates:
        return None
    return max(candidates, key=lambda log: getattr(log, attr)).day


def personal_records(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    now: datetime,
) -> List[PersonalRecord]:
    logs = list(logs)
    today = now.date()
    records: List[PersonalRecord] = []

    for habit in habits:
        own_logs = logs_for(habit, logs)
        stats = habit_stats(habit, own_logs, today)

        if stats.best_streak > 0:
            records.append(PersonalRecord(
                habit_id=habit.id,
                habit_name=habit.name,
                type=RecordType.longest_streak,
                value=float(stats.best_streak),
                unit="days",
                achieved_at=_at_start_of(stats.last_completed, now),
            ))

        if habit.type == HabitType.quantitative and stats.personal_best is not None:
            records.append(PersonalRecord(
                habit_id=habit.id,
                habit_name=habit.name,
                type=RecordType.personal_best,
                value=stats.personal_best,
                unit=habit.unit or "",
                achieved_at=_at_start_of(_day_of_best(own_logs, "value"), now),
            ))

        if habit.type == HabitType.timer and stats.longest_session is not None:
            records.append(PersonalRecord(
                habit_id=habit.id,
                habit_name=habit.name,
                type=RecordType.longest_session,
                value=stats.longest_session / 60,
                unit="minutes",
                achieved_at=_at_start_of(_day_of_best(own_logs, "duration"), now),
            ))

    records.sort(key=lambda record: record.value, reverse=True)
    return records
