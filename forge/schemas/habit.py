"""
Request and response schemas for habits, logs and focus sessions.
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from forge.models import (
    FrequencyKind,
    HabitCategory,
    HabitType,
    Pillar,
    clamp_difficulty,
    frequency_error,
)


class HabitFields(BaseModel):
    """Validation shared by create and update payloads."""

    @field_validator("difficulty", check_fields=False)
    @classmethod
    def clamp(cls, v):
        return clamp_difficulty(v) if v is not None else v

    @field_validator("frequency_days", check_fields=False)
    @classmethod
    def valid_weekdays(cls, v):
        if v is None:
            return v
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("weekday indices must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))


class HabitCreate(HabitFields):
    name: str = Field(..., min_length=1, max_length=120)
    pillar: Pillar
    type: HabitType = HabitType.binary
    category: HabitCategory = HabitCategory.build
    frequency: FrequencyKind = FrequencyKind.daily
    frequency_days: List[int] = Field(default_factory=list)
    frequency_times: Optional[int] = Field(None, ge=1, le=7)
    difficulty: int = 1
    trigger: Optional[str] = None
    recipe: Optional[str] = None
    target_value: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None
    target_duration: Optional[float] = Field(None, gt=0, description="Seconds")

    @model_validator(mode="after")
    def frequency_matches_tag(self):
        error = frequency_error(self.frequency, self.frequency_days, self.frequency_times)
        if error:
            raise ValueError(error)
        return self


class HabitUpdate(HabitFields):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    pillar: Optional[Pillar] = None
    type: Optional[HabitType] = None
    category: Optional[HabitCategory] = None
    frequency: Optional[FrequencyKind] = None
    frequency_days: Optional[List[int]] = None
    frequency_times: Optional[int] = Field(None, ge=1, le=7)
    difficulty: Optional[int] = None
    is_active: Optional[bool] = None
    trigger: Optional[str] = None
    recipe: Optional[str] = None
    target_value: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None
    target_duration: Optional[float] = Field(None, gt=0)

    # Omit these to leave them unchanged; they cannot be cleared
    @field_validator(
        "name", "pillar", "type", "category", "frequency", "difficulty", "is_active",
        mode="before",
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class HabitRead(BaseModel):
    id: UUID
    name: str
    pillar: Pillar
    type: HabitType
    category: HabitCategory
    frequency: FrequencyKind
    frequency_days: List[int]
    frequency_times: Optional[int]
    frequency_description: str
    full_description: str
    difficulty: int
    is_active: bool
    trigger: Optional[str]
    recipe: Optional[str]
    target_value: Optional[float]
    unit: Optional[str]
    target_duration: Optional[float]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LogRequest(BaseModel):
    value: Optional[float] = Field(None, ge=0)
    duration: Optional[float] = Field(None, ge=0, description="Seconds")
    notes: Optional[str] = Field(None, max_length=500)
    day: Optional[date] = None  # defaults to today


class HabitLogRead(BaseModel):
    id: UUID
    habit_id: UUID
    day: date
    is_completed: bool
    value: Optional[float]
    duration: Optional[float]
    completed_at: Optional[datetime]
    notes: Optional[str]
    display_value: str

    class Config:
        from_attributes = True


class FocusStartRequest(BaseModel):
    habit_id: UUID
    duration: Optional[float] = Field(None, gt=0, description="Planned seconds; defaults to the habit target")


class FocusEndRequest(BaseModel):
    completed: bool = True


class FocusSessionRead(BaseModel):
    id: UUID
    habit_id: UUID
    habit_name: str
    duration: float
    started_at: datetime
    is_paused: bool
    paused_seconds: float
    elapsed_seconds: float
    remaining_seconds: float
    progress: float
    remaining_display: str


class FocusOutcomeRead(BaseModel):
    habit_id: UUID
    planned_seconds: float
    actual_seconds: float
    logged: bool
    log: Optional[HabitLogRead] = None
