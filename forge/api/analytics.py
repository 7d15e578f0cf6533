"""
Analytics API: read-outs of the habit analytics engine.
Every request takes a fresh snapshot from the store and recomputes.
"""

from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from forge.analytics import engine
from forge.api.deps import get_store
from forge.schemas.analytics import (
    AnalyticsReport,
    CorrelationInsight,
    DayActivity,
    HabitStats,
    PersonalRecord,
    PillarPerformance,
)
from forge.services.habit_store import HabitStore

router = APIRouter(prefix="/analytics", tags=["analytics"])


class MomentumRead(BaseModel):
    momentum_score: float
    generated_at: datetime


@router.get("/report", response_model=AnalyticsReport)
async def report(store: HabitStore = Depends(get_store)):
    return engine.recompute_snapshot(await store.snapshot())


@router.get("/momentum", response_model=MomentumRead)
async def momentum(store: HabitStore = Depends(get_store)):
    snap = await store.snapshot()
    return MomentumRead(
        momentum_score=engine.momentum_score(snap.habits, snap.logs, snap.now),
        generated_at=snap.now,
    )


@router.get("/insights", response_model=List[CorrelationInsight])
async def insights(store: HabitStore = Depends(get_store)):
    snap = await store.snapshot()
    return engine.correlation_insights(snap.habits, snap.logs, snap.now)


@router.get("/pillars", response_model=List[PillarPerformance])
async def pillars(store: HabitStore = Depends(get_store)):
    snap = await store.snapshot()
    return engine.pillar_performances(snap.habits, snap.logs, snap.now)


@router.get("/records", response_model=List[PersonalRecord])
async def records(store: HabitStore = Depends(get_store)):
    snap = await store.snapshot()
    return engine.personal_records(snap.habits, snap.logs, snap.now)


@router.get("/activity", response_model=List[DayActivity])
async def activity(store: HabitStore = Depends(get_store)):
    snap = await store.snapshot()
    return engine.weekly_activity(snap.habits, snap.logs, snap.now)


@router.get("/habits/{habit_id}/stats", response_model=HabitStats)
async def habit_stats(habit_id: UUID, store: HabitStore = Depends(get_store)):
    snap = await store.snapshot()
    habit = next((h for h in snap.habits if h.id == habit_id), None)
    if habit is None:
        raise HTTPException(status_code=404, detail=f"Habit {habit_id} not found")
    return engine.habit_stats(habit, snap.logs, snap.now)
