"""
Habit/Log Store
Owns every write to habits and habit logs and hands the analytics engine
consistent snapshots to compute from.
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select

from forge.analytics.calendar import local_now, start_of_day
from forge.analytics.engine import HabitSnapshot
from forge.analytics.schedule import should_show_today
from forge.config import get_timezone
from forge.db import async_session
from forge.models import (
    FrequencyKind,
    Habit,
    HabitCategory,
    HabitLog,
    HabitType,
    Pillar,
    clamp_difficulty,
    frequency_error,
)
from forge.schemas.habit import HabitCreate, HabitUpdate

logger = logging.getLogger("forge")


class HabitNotFoundError(Exception):
    """Raised when a habit id is not in the store."""

    def __init__(self, habit_id: UUID):
        super().__init__(f"Habit {habit_id} not found")
        self.habit_id = habit_id


class InvalidHabitError(ValueError):
    """Raised when an update leaves a habit in an inconsistent state."""
    pass


def sample_habits() -> List[Habit]:
    """Starter set offered to a brand-new user."""
    return [
        Habit(name="Morning Workout", pillar=Pillar.health, type=HabitType.timer,
              difficulty=3, target_duration=3600),
        Habit(name="Read 20 Pages", pillar=Pillar.knowledge, type=HabitType.quantitative,
              difficulty=2, target_value=20, unit="pages"),
        Habit(name="Meditate", pillar=Pillar.discipline, type=HabitType.timer,
              difficulty=2, target_duration=600),
        Habit(name="No Social Media After 10 PM", pillar=Pillar.discipline, type=HabitType.binary,
              category=HabitCategory.break_, difficulty=2),
        Habit(name="Track Expenses", pillar=Pillar.wealth, type=HabitType.binary, difficulty=1),
    ]


class HabitStore:
    """
    Async store over the habit and habitlog tables.

    Each operation runs in its own session; returned objects are detached
    and safe to read after the call.
    """

    def __init__(self, session_factory=None, tz=None, clock: Optional[Callable[[], datetime]] = None):
        self._session_factory = session_factory or async_session
        self.tz = tz or get_timezone()
        self._clock = clock or (lambda: local_now(self.tz))

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return start_of_day(self.now())

    # ==========================================
    # READS
    # ==========================================

    async def list_habits(self) -> List[Habit]:
        async with self._session_factory() as db:
            result = await db.execute(select(Habit).order_by(Habit.created_at))
            return list(result.scalars().all())

    async def list_logs(
        self,
        habit_id: Optional[UUID] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[HabitLog]:
        query = select(HabitLog)
        if habit_id is not None:
            query = query.where(HabitLog.habit_id == habit_id)
        if start is not None:
            query = query.where(HabitLog.day >= start)
        if end is not None:
            query = query.where(HabitLog.day <= end)

        async with self._session_factory() as db:
            result = await db.execute(query.order_by(HabitLog.day))
            return list(result.scalars().all())

    async def get_habit(self, habit_id: UUID) -> Habit:
        async with self._session_factory() as db:
            habit = await db.get(Habit, habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    async def todays_log(self, habit_id: UUID) -> Optional[HabitLog]:
        await self.get_habit(habit_id)
        logs = await self.list_logs(habit_id=habit_id, start=self.today(), end=self.today())
        return logs[0] if logs else None

    async def is_completed_today(self, habit_id: UUID) -> bool:
        log = await self.todays_log(habit_id)
        return bool(log and log.is_completed)

    async def todays_habits(self) -> List[Habit]:
        today = self.today()
        return [h for h in await self.list_habits() if should_show_today(h, today)]

    async def snapshot(self) -> HabitSnapshot:
        """Habits and logs read in one session, stamped with the current time."""
        async with self._session_factory() as db:
            habits = (await db.execute(select(Habit).order_by(Habit.created_at))).scalars().all()
            logs = (await db.execute(select(HabitLog).order_by(HabitLog.day))).scalars().all()
        return HabitSnapshot(habits=tuple(habits), logs=tuple(logs), now=self.now())

    # ==========================================
    # HABIT WRITES
    # ==========================================

    async def add_habit(self, data: HabitCreate) -> Habit:
        habit = Habit(**data.model_dump())
        habit.difficulty = clamp_difficulty(habit.difficulty)
        self._normalize_frequency(habit)

        async with self._session_factory() as db:
            db.add(habit)
            await db.commit()
            await db.refresh(habit)

        logger.info("habit_added", extra={"habit_id": str(habit.id), "pillar": habit.pillar})
        return habit

    async def update_habit(self, habit_id: UUID, data: HabitUpdate) -> Habit:
        changes = data.model_dump(exclude_unset=True)

        async with self._session_factory() as db:
            habit = await db.get(Habit, habit_id)
            if habit is None:
                raise HabitNotFoundError(habit_id)

            for field, value in changes.items():
                setattr(habit, field, value)
            error = frequency_error(habit.frequency, habit.frequency_days, habit.frequency_times)
            if error:
                raise InvalidHabitError(error)
            habit.difficulty = clamp_difficulty(habit.difficulty)
            self._normalize_frequency(habit)
            habit.updated_at = local_now()

            db.add(habit)
            await db.commit()
            await db.refresh(habit)

        logger.info("habit_updated", extra={"habit_id": str(habit_id), "fields": sorted(changes)})
        return habit

    async def delete_habit(self, habit_id: UUID) -> None:
        """Remove a habit together with all of its logs."""
        async with self._session_factory() as db:
            habit = await db.get(Habit, habit_id)
            if habit is None:
                raise HabitNotFoundError(habit_id)

            await db.execute(delete(HabitLog).where(HabitLog.habit_id == habit_id))
            await db.delete(habit)
            await db.commit()

        logger.info("habit_deleted", extra={"habit_id": str(habit_id)})

    async def toggle_habit_active(self, habit_id: UUID) -> Habit:
        async with self._session_factory() as db:
            habit = await db.get(Habit, habit_id)
            if habit is None:
                raise HabitNotFoundError(habit_id)

            habit.is_active = not habit.is_active
            habit.updated_at = local_now()
            db.add(habit)
            await db.commit()
            await db.refresh(habit)

        logger.info("habit_toggled", extra={"habit_id": str(habit_id), "is_active": habit.is_active})
        return habit

    async def seed_sample_habits(self) -> List[Habit]:
        """Insert the starter habits when the store has none."""
        if await self.list_habits():
            return []

        habits = sample_habits()
        async with self._session_factory() as db:
            db.add_all(habits)
            await db.commit()
            for habit in habits:
                await db.refresh(habit)

        logger.info("sample_habits_seeded", extra={"count": len(habits)})
        return habits

    # ==========================================
    # LOGGING
    # ==========================================

    async def log_habit(
        self,
        habit_id: UUID,
        value: Optional[float] = None,
        duration: Optional[float] = None,
        notes: Optional[str] = None,
        day: Optional[date] = None,
    ) -> HabitLog:
        """
        Mark the habit completed for `day` (today by default).
        Updates the existing log for that day rather than adding a second one.
        """
        day = start_of_day(day) if day is not None else self.today()

        async with self._session_factory() as db:
            if await db.get(Habit, habit_id) is None:
                raise HabitNotFoundError(habit_id)

            log = await self._log_on(db, habit_id, day)
            if log is None:
                log = HabitLog(habit_id=habit_id, day=day)
            log.mark_completed(value=value, duration=duration, notes=notes)

            db.add(log)
            await db.commit()
            await db.refresh(log)

        logger.info(
            "habit_logged",
            extra={"habit_id": str(habit_id), "day": day.isoformat(), "value": value, "duration": duration},
        )
        return log

    async def unlog_habit(self, habit_id: UUID, day: Optional[date] = None) -> Optional[HabitLog]:
        """Mark the log for `day` incomplete. No-op when nothing was logged."""
        day = start_of_day(day) if day is not None else self.today()

        async with self._session_factory() as db:
            if await db.get(Habit, habit_id) is None:
                raise HabitNotFoundError(habit_id)

            log = await self._log_on(db, habit_id, day)
            if log is None:
                return None

            log.mark_incomplete()
            db.add(log)
            await db.commit()
            await db.refresh(log)

        logger.info("habit_unlogged", extra={"habit_id": str(habit_id), "day": day.isoformat()})
        return log

    @staticmethod
    async def _log_on(db, habit_id: UUID, day: date) -> Optional[HabitLog]:
        result = await db.execute(
            select(HabitLog).where(HabitLog.habit_id == habit_id, HabitLog.day == day)
        )
        return result.scalars().first()

    @staticmethod
    def _normalize_frequency(habit: Habit) -> None:
        # Only the fields belonging to the active tag are kept
        if habit.frequency != FrequencyKind.specific_days:
            habit.frequency_days = []
        else:
            habit.frequency_days = sorted(set(habit.frequency_days or []))
        if habit.frequency != FrequencyKind.times_per_week:
            habit.frequency_times = None
