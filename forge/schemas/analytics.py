"""
Derived analytics schemas.
Recomputed from habits and logs on every request; never persisted.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, computed_field

from forge.models import Pillar


class HabitStats(BaseModel):
    habit_id: UUID
    total_completions: int
    current_streak: int
    best_streak: int
    average_per_week: float
    last_completed: Optional[date] = None
    personal_best: Optional[float] = None  # highest logged value
    longest_session: Optional[float] = None  # seconds
    consistency: float  # last 30 days

    @computed_field
    @property
    def momentum_score(self) -> float:
        streak_factor = min(self.current_streak / 30.0, 1.0)
        return (streak_factor * 0.4 + self.consistency * 0.6) * 100


class Trend(str, Enum):
    improving = "improving"
    stable = "stable"
    declining = "declining"


class PillarPerformance(BaseModel):
    pillar: Pillar
    completion_rate: float
    average_streak: float
    momentum: float
    habit_count: int
    trend: Trend


class CorrelationType(str, Enum):
    positive = "positive"
    negative = "negative"
    temporal = "temporal"


def strength_bucket(strength: float) -> str:
    if 0.8 <= strength <= 1.0:
        return "Very Strong"
    if 0.6 <= strength < 0.8:
        return "Strong"
    if 0.4 <= strength < 0.6:
        return "Moderate"
    if 0.2 <= strength < 0.4:
        return "Weak"
    return "Very Weak"


class CorrelationInsight(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    description: str
    strength: float = Field(..., ge=0, le=1)
    type: CorrelationType
    habit_ids: List[UUID]

    @computed_field
    @property
    def strength_description(self) -> str:
        return strength_bucket(self.strength)


class RecordType(str, Enum):
    longest_streak = "longest_streak"
    personal_best = "personal_best"
    longest_session = "longest_session"

    @property
    def title(self) -> str:
        return {
            RecordType.longest_streak: "Longest Streak",
            RecordType.personal_best: "Personal Best",
            RecordType.longest_session: "Longest Session",
        }[self]


class PersonalRecord(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    habit_id: UUID
    habit_name: str
    type: RecordType
    value: float
    unit: str
    achieved_at: datetime

    @computed_field
    @property
    def title(self) -> str:
        return self.type.title

    @computed_field
    @property
    def display_value(self) -> str:
        if float(self.value).is_integer():
            formatted = f"{self.value:.0f}"
        else:
            formatted = f"{self.value:.1f}"
        return f"{formatted} {self.unit}".rstrip()


class DayActivity(BaseModel):
    """One cell of the weekly heatmap."""
    day: date
    weekday: str
    score: float = Field(..., ge=0, le=1)


class AnalyticsReport(BaseModel):
    generated_at: datetime
    momentum_score: float
    habit_stats: List[HabitStats]
    correlation_insights: List[CorrelationInsight]
    pillar_performances: List[PillarPerformance]
    personal_records: List[PersonalRecord]
    weekly_activity: List[DayActivity]
