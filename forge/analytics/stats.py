from datetime import date, timedelta
from typing import Iterable, List

from forge.analytics.calendar import SHORT_WEEKDAY_NAMES, trailing_window, weekday_index
from forge.analytics.consistency import STATS_WINDOW_DAYS, consistency
from forge.analytics.schedule import completed_days, is_required, logs_for
from forge.analytics.streaks import best_streak, current_streak
from forge.models import Habit, HabitLog
from forge.schemas.analytics import DayActivity, HabitStats

HEATMAP_DAYS = 7


def habit_stats(habit: Habit, logs: Iterable[HabitLog], today: date) -> HabitStats:
    logs = list(logs)
    completed = [log for log in logs_for(habit, logs) if log.is_completed]

    # Last 30 days, today included
    cutoff = today - timedelta(days=STATS_WINDOW_DAYS)
    recent = [log for log in completed if log.day > cutoff]

    values = [log.value for log in completed if log.value is not None]
    durations = [log.duration for log in completed if log.duration is not None]

    return HabitStats(
        habit_id=habit.id,
        total_completions=len(completed),
        current_streak=current_streak(habit, logs, today),
        best_streak=best_streak(habit, logs),
        average_per_week=len(recent) * 7.0 / STATS_WINDOW_DAYS,
        last_completed=max((log.day for log in completed), default=None),
        personal_best=max(values) if values else None,
        longest_session=max(durations) if durations else None,
        consistency=consistency(habit, logs, STATS_WINDOW_DAYS, today),
    )


def weekly_activity(habits: Iterable[Habit], logs: Iterable[HabitLog], today: date) -> List[DayActivity]:
    """
    Heatmap of the last seven days, oldest first.
    Each score is the share of active habits required that day that were done.
    """
    active = [h for h in habits if h.is_active]
    logs = list(logs)
    done = {h.id: completed_days(h, logs) for h in active}

    cells = []
    for day in trailing_window(today, HEATMAP_DAYS):
        due = [h for h in active if is_required(h, day)]
        score = 0.0
        if due:
            score = sum(1 for h in due if day in done[h.id]) / len(due)
        cells.append(DayActivity(day=day, weekday=SHORT_WEEKDAY_NAMES[weekday_index(day)], score=score))
    return cells
