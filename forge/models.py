from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from forge.analytics.calendar import WEEKDAY_NAMES, local_now

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 3


class Pillar(str, Enum):
    health = "health"
    wealth = "wealth"
    knowledge = "knowledge"
    discipline = "discipline"
    social = "social"


class HabitType(str, Enum):
    binary = "binary"
    quantitative = "quantitative"
    timer = "timer"


class HabitCategory(str, Enum):
    build = "build"
    break_ = "break"


class FrequencyKind(str, Enum):
    daily = "daily"
    specific_days = "specific_days"
    times_per_week = "times_per_week"


def clamp_difficulty(value: int) -> int:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(value)))


def frequency_error(frequency: FrequencyKind, days: Optional[List[int]], times: Optional[int]) -> Optional[str]:
    """Message describing why the frequency fields disagree with the tag, or None."""
    if frequency == FrequencyKind.specific_days and not days:
        return "specific_days frequency needs at least one weekday"
    if frequency == FrequencyKind.times_per_week and times is None:
        return "times_per_week frequency needs frequency_times"
    return None


class Habit(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    pillar: Pillar
    type: HabitType = HabitType.binary
    category: HabitCategory = HabitCategory.build

    # Tagged frequency: `frequency_days` only for specific_days,
    # `frequency_times` only for times_per_week
    frequency: FrequencyKind = FrequencyKind.daily
    frequency_days: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    frequency_times: Optional[int] = None

    difficulty: int = MIN_DIFFICULTY  # momentum weight, 1..3
    is_active: bool = True

    trigger: Optional[str] = None
    recipe: Optional[str] = None

    target_value: Optional[float] = None  # quantitative
    unit: Optional[str] = None  # e.g. "pages", "pushups"
    target_duration: Optional[float] = None  # timer, seconds

    created_at: datetime = Field(default_factory=local_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=local_now, sa_type=DateTime(timezone=True))

    @property
    def difficulty_multiplier(self) -> float:
        return float(self.difficulty)

    @property
    def frequency_description(self) -> str:
        if self.frequency == FrequencyKind.specific_days:
            return ", ".join(WEEKDAY_NAMES[d] for d in sorted(self.frequency_days or []))
        if self.frequency == FrequencyKind.times_per_week:
            return f"{self.frequency_times or 0} times per week"
        return "Daily"

    @property
    def full_description(self) -> str:
        desc = self.name
        if self.target_value is not None and self.unit:
            desc += f" ({int(self.target_value)} {self.unit})"
        elif self.target_duration is not None:
            desc += f" ({int(self.target_duration // 60)} min)"
        return desc


class HabitLog(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("habit_id", "day", name="uq_habitlog_habit_day"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    habit_id: UUID = Field(foreign_key="habit.id", index=True)
    day: date = Field(index=True)  # start of the calendar day
    is_completed: bool = False

    value: Optional[float] = None  # quantitative
    duration: Optional[float] = None  # timer, seconds

    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    notes: Optional[str] = None

    def mark_completed(
        self,
        value: Optional[float] = None,
        duration: Optional[float] = None,
        notes: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> None:
        self.is_completed = True
        self.completed_at = at or local_now()
        self.value = value
        self.duration = duration
        if notes is not None:
            self.notes = notes

    def mark_incomplete(self) -> None:
        self.is_completed = False
        self.completed_at = None
        self.value = None
        self.duration = None

    @property
    def display_value(self) -> str:
        if self.value is not None:
            return f"{self.value:.0f}"
        if self.duration is not None:
            minutes = int(self.duration // 60)
            seconds = int(self.duration % 60)
            if minutes > 0:
                return f"{minutes}m {seconds}s"
            return f"{seconds}s"
        return ""
