"""
Focus API: timed sessions for timer habits.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from forge.api.deps import get_focus_service
from forge.schemas.habit import (
    FocusEndRequest,
    FocusOutcomeRead,
    FocusSessionRead,
    FocusStartRequest,
    HabitLogRead,
)
from forge.services.focus_session import FocusSession, FocusSessionError, FocusSessionService
from forge.services.habit_store import HabitNotFoundError

router = APIRouter(prefix="/focus", tags=["focus"])


def _read(service: FocusSessionService, session: FocusSession) -> FocusSessionRead:
    now = service.now()
    return FocusSessionRead(
        id=session.id,
        habit_id=session.habit_id,
        habit_name=session.habit_name,
        duration=session.duration,
        started_at=session.started_at,
        is_paused=session.is_paused,
        paused_seconds=session.paused_seconds,
        elapsed_seconds=session.elapsed(now),
        remaining_seconds=session.remaining(now),
        progress=session.progress(now),
        remaining_display=session.remaining_display(now),
    )


@router.get("", response_model=Optional[FocusSessionRead])
async def current_session(service: FocusSessionService = Depends(get_focus_service)):
    if service.current is None:
        return None
    return _read(service, service.current)


@router.post("/start", response_model=FocusSessionRead)
async def start(payload: FocusStartRequest, service: FocusSessionService = Depends(get_focus_service)):
    try:
        session = await service.start(payload.habit_id, duration=payload.duration)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FocusSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _read(service, session)


@router.post("/pause", response_model=FocusSessionRead)
async def pause(service: FocusSessionService = Depends(get_focus_service)):
    try:
        return _read(service, service.pause())
    except FocusSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/resume", response_model=FocusSessionRead)
async def resume(service: FocusSessionService = Depends(get_focus_service)):
    try:
        return _read(service, service.resume())
    except FocusSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/end", response_model=FocusOutcomeRead)
async def end(payload: FocusEndRequest, service: FocusSessionService = Depends(get_focus_service)):
    try:
        outcome = await service.end(completed=payload.completed)
    except FocusSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return FocusOutcomeRead(
        habit_id=outcome.habit_id,
        planned_seconds=outcome.planned_seconds,
        actual_seconds=outcome.actual_seconds,
        logged=outcome.logged,
        log=HabitLogRead.model_validate(outcome.log) if outcome.log else None,
    )
