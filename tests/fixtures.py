from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from forge.models import FrequencyKind, Habit, HabitLog, HabitType, Pillar

# A Wednesday
TODAY = date(2026, 3, 18)
NOW = datetime(2026, 3, 18, 9, 30)


def make_habit(
    name: str = "Habit",
    pillar: Pillar = Pillar.health,
    type: HabitType = HabitType.binary,
    frequency: FrequencyKind = FrequencyKind.daily,
    days: Optional[List[int]] = None,
    times: Optional[int] = None,
    difficulty: int = 1,
    is_active: bool = True,
    unit: Optional[str] = None,
    created: Optional[datetime] = None,
) -> Habit:
    return Habit(
        name=name,
        pillar=pillar,
        type=type,
        frequency=frequency,
        frequency_days=days or [],
        frequency_times=times,
        difficulty=difficulty,
        is_active=is_active,
        unit=unit,
        created_at=created or datetime(2025, 1, 1),
    )


def done(habit: Habit, day: date, value: Optional[float] = None, duration: Optional[float] = None) -> HabitLog:
    return HabitLog(
        habit_id=habit.id,
        day=day,
        is_completed=True,
        value=value,
        duration=duration,
        completed_at=datetime.combine(day, datetime.min.time()),
    )


def missed(habit: Habit, day: date) -> HabitLog:
    return HabitLog(habit_id=habit.id, day=day, is_completed=False)


def ago(days: int, today: date = TODAY) -> date:
    return today - timedelta(days=days)


def done_on(habit: Habit, offsets: Iterable[int], today: date = TODAY, **kwargs) -> List[HabitLog]:
    """Completed logs `offset` days before `today` for each offset."""
    return [done(habit, ago(offset, today), **kwargs) for offset in offsets]
