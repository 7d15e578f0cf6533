"""
Habits API: habit lifecycle and daily completion logging.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response

from forge.api.deps import get_store
from forge.schemas.habit import HabitCreate, HabitLogRead, HabitRead, HabitUpdate, LogRequest
from forge.services.habit_store import HabitNotFoundError, HabitStore, InvalidHabitError

router = APIRouter(prefix="/habits", tags=["habits"])


def _not_found(e: HabitNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=List[HabitRead])
async def list_habits(store: HabitStore = Depends(get_store)):
    return await store.list_habits()


@router.post("", response_model=HabitRead, status_code=201)
async def create_habit(payload: HabitCreate, store: HabitStore = Depends(get_store)):
    return await store.add_habit(payload)


@router.get("/today", response_model=List[HabitRead])
async def todays_habits(store: HabitStore = Depends(get_store)):
    """Active habits scheduled for today."""
    return await store.todays_habits()


@router.get("/{habit_id}", response_model=HabitRead)
async def get_habit(habit_id: UUID, store: HabitStore = Depends(get_store)):
    try:
        return await store.get_habit(habit_id)
    except HabitNotFoundError as e:
        raise _not_found(e)


@router.patch("/{habit_id}", response_model=HabitRead)
async def update_habit(habit_id: UUID, payload: HabitUpdate, store: HabitStore = Depends(get_store)):
    try:
        return await store.update_habit(habit_id, payload)
    except HabitNotFoundError as e:
        raise _not_found(e)
    except InvalidHabitError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/{habit_id}", status_code=204)
async def delete_habit(habit_id: UUID, store: HabitStore = Depends(get_store)):
    try:
        await store.delete_habit(habit_id)
    except HabitNotFoundError as e:
        raise _not_found(e)
    return Response(status_code=204)


@router.post("/{habit_id}/toggle", response_model=HabitRead)
async def toggle_habit(habit_id: UUID, store: HabitStore = Depends(get_store)):
    try:
        return await store.toggle_habit_active(habit_id)
    except HabitNotFoundError as e:
        raise _not_found(e)


@router.post("/{habit_id}/log", response_model=HabitLogRead)
async def log_habit(habit_id: UUID, payload: LogRequest, store: HabitStore = Depends(get_store)):
    """Mark the habit done for the day (today unless `day` is given)."""
    try:
        return await store.log_habit(
            habit_id,
            value=payload.value,
            duration=payload.duration,
            notes=payload.notes,
            day=payload.day,
        )
    except HabitNotFoundError as e:
        raise _not_found(e)


@router.delete("/{habit_id}/log", response_model=Optional[HabitLogRead])
async def unlog_habit(habit_id: UUID, day: Optional[date] = None, store: HabitStore = Depends(get_store)):
    try:
        return await store.unlog_habit(habit_id, day=day)
    except HabitNotFoundError as e:
        raise _not_found(e)


@router.get("/{habit_id}/logs", response_model=List[HabitLogRead])
async def habit_logs(
    habit_id: UUID,
    start: Optional[date] = None,
    end: Optional[date] = None,
    store: HabitStore = Depends(get_store),
):
    try:
        await store.get_habit(habit_id)
    except HabitNotFoundError as e:
        raise _not_found(e)
    return await store.list_logs(habit_id=habit_id, start=start, end=end)
