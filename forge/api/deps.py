from functools import lru_cache

from fastapi import Depends, Request

from forge.services.focus_session import FocusSessionService
from forge.services.habit_store import HabitStore


@lru_cache()
def get_store() -> HabitStore:
    return HabitStore()


def get_focus_service(request: Request, store: HabitStore = Depends(get_store)) -> FocusSessionService:
    """
    One focus service per app, kept on `app.state`.
    The running session lives in process memory, so this holds for a
    single worker process only.
    """
    service = getattr(request.app.state, "focus_service", None)
    if service is None:
        service = FocusSessionService(store)
        request.app.state.focus_service = service
    return service
