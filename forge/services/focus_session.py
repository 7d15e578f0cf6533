"""
Focus Session Service
Runs one timed session for a timer habit and, when it finishes with enough
of the planned time spent, logs the session back into the habit store.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID, uuid4

import pytz

from forge.analytics.calendar import local_now
from forge.config import settings
from forge.models import HabitLog, HabitType
from forge.services.habit_store import HabitNotFoundError, HabitStore

logger = logging.getLogger("forge")


class FocusSessionError(Exception):
    """Raised on an invalid session transition."""
    pass


@dataclass
class FocusSession:
    habit_id: UUID
    habit_name: str
    duration: float  # planned seconds
    started_at: datetime
    id: UUID = field(default_factory=uuid4)
    is_paused: bool = False
    paused_seconds: float = 0.0
    paused_at: Optional[datetime] = None

    def elapsed(self, now: datetime) -> float:
        """Seconds of focused time, pauses excluded."""
        paused = self.paused_seconds
        if self.is_paused and self.paused_at is not None:
            paused += (now - self.paused_at).total_seconds()
        return max(0.0, (now - self.started_at).total_seconds() - paused)

    def progress(self, now: datetime) -> float:
        return min(self.elapsed(now) / self.duration, 1.0)

    def remaining(self, now: datetime) -> float:
        return max(0.0, self.duration - self.elapsed(now))

    def remaining_display(self, now: datetime) -> str:
        remaining = int(self.remaining(now))
        return f"{remaining // 60:02d}:{remaining % 60:02d}"


@dataclass
class FocusOutcome:
    habit_id: UUID
    planned_seconds: float
    actual_seconds: float
    logged: bool
    log: Optional[HabitLog] = None


class FocusSessionService:
    """
    Holds at most one running session.
    Time is read from `clock` on demand; nothing ticks in the background.
    """

    def __init__(
        self,
        store: HabitStore,
        clock: Optional[Callable[[], datetime]] = None,
        completion_ratio: Optional[float] = None,
    ):
        self.store = store
        self._clock = clock or (lambda: local_now(pytz.utc))
        self.completion_ratio = (
            settings.focus_completion_ratio if completion_ratio is None else completion_ratio
        )
        self.current: Optional[FocusSession] = None

    def now(self) -> datetime:
        return self._clock()

    async def start(self, habit_id: UUID, duration: Optional[float] = None) -> FocusSession:
        if self.current is not None:
            raise FocusSessionError("A focus session is already running")

        habit = await self.store.get_habit(habit_id)
        if habit.type != HabitType.timer:
            raise FocusSessionError(f"'{habit.name}' is not a timer habit")

        planned = duration if duration is not None else habit.target_duration
        if not planned or planned <= 0:
            raise FocusSessionError("Focus session needs a positive duration")

        self.current = FocusSession(
            habit_id=habit.id,
            habit_name=habit.name,
            duration=float(planned),
            started_at=self._clock(),
        )
        logger.info("focus_started", extra={"habit_id": str(habit.id), "planned_seconds": planned})
        return self.current

    def pause(self) -> FocusSession:
        session = self._require_session()
        if session.is_paused:
            raise FocusSessionError("Focus session is already paused")

        session.is_paused = True
        session.paused_at = self._clock()
        return session

    def resume(self) -> FocusSession:
        session = self._require_session()
        if not session.is_paused:
            raise FocusSessionError("Focus session is not paused")

        now = self._clock()
        session.paused_seconds += (now - session.paused_at).total_seconds()
        session.is_paused = False
        session.paused_at = None
        return session

    async def end(self, completed: bool = True) -> FocusOutcome:
        """
        Finish the running session. The habit is logged with the focused
        time only when the session was completed and reached the required
        share of the planned duration.
        """
        session = self._require_session()
        actual = session.elapsed(self._clock())
        self.current = None

        outcome = FocusOutcome(
            habit_id=session.habit_id,
            planned_seconds=session.duration,
            actual_seconds=actual,
            logged=False,
        )
        if completed and actual >= session.duration * self.completion_ratio:
            try:
                outcome.log = await self.store.log_habit(session.habit_id, duration=actual)
                outcome.logged = True
            except HabitNotFoundError:
                # Habit was deleted while the session ran
                logger.warning("focus_habit_missing", extra={"habit_id": str(session.habit_id)})

        logger.info(
            "focus_ended",
            extra={
                "habit_id": str(session.habit_id),
                "actual_seconds": actual,
                "logged": outcome.logged,
            },
        )
        return outcome

    def _require_session(self) -> FocusSession:
        if self.current is None:
            raise FocusSessionError("No focus session is running")
        return self.current
