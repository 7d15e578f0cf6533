import pytest
from datetime import date
from uuid import uuid4
from pydantic import ValidationError

from forge.models import FrequencyKind, Habit, HabitLog, HabitType, Pillar
from forge.schemas.habit import HabitCreate, HabitUpdate
from forge.services.habit_store import HabitNotFoundError, HabitStore, InvalidHabitError
from tests.fixtures import TODAY

pytestmark = pytest.mark.asyncio


async def test_add_habit_clamps_difficulty(store: HabitStore):
    hard = await store.add_habit(HabitCreate(name="Cold Shower", pillar=Pillar.health, difficulty=7))
    easy = await store.add_habit(HabitCreate(name="Floss", pillar=Pillar.health, difficulty=0))
    assert hard.difficulty == 3
    assert easy.difficulty == 1


async def test_update_habit_clamps_and_keeps_frequency_tag(store: HabitStore):
    habit = await store.add_habit(HabitCreate(
        name="Gym", pillar=Pillar.health,
        frequency=FrequencyKind.specific_days, frequency_days=[5, 1, 3],
    ))
    assert habit.frequency_days == [1, 3, 5]

    updated = await store.update_habit(habit.id, HabitUpdate(difficulty=9, frequency=FrequencyKind.daily))

    assert updated.difficulty == 3
    assert updated.frequency == FrequencyKind.daily
    assert updated.frequency_days == []
    assert updated.updated_at >= habit.updated_at


async def test_unknown_habit_raises(store: HabitStore):
    with pytest.raises(HabitNotFoundError):
        await store.get_habit(uuid4())
    with pytest.raises(HabitNotFoundError):
        await store.log_habit(uuid4())


async def test_log_habit_keeps_one_log_per_day(store: HabitStore):
    habit = await store.add_habit(HabitCreate(name="Read", pillar=Pillar.knowledge,
                                              type=HabitType.quantitative, unit="pages"))
    await store.log_habit(habit.id, value=10)
    log = await store.log_habit(habit.id, value=25, notes="finished chapter")

    logs = await store.list_logs(habit_id=habit.id)
    assert len(logs) == 1
    assert log.day == TODAY
    assert logs[0].value == 25
    assert logs[0].notes == "finished chapter"
    assert await store.is_completed_today(habit.id)


async def test_unlog_marks_incomplete_and_keeps_notes(store: HabitStore):
    habit = await store.add_habit(HabitCreate(name="Meditate", pillar=Pillar.discipline, type=HabitType.timer))
    await store.log_habit(habit.id, duration=600, notes="calm")

    log = await store.unlog_habit(habit.id)

    assert log.is_completed is False
    assert log.duration is None
    assert log.completed_at is None
    assert log.notes == "calm"
    assert not await store.is_completed_today(habit.id)


async def test_unlog_without_log_is_noop(store: HabitStore):
    habit = await store.add_habit(HabitCreate(name="Walk", pillar=Pillar.health))
    assert await store.unlog_habit(habit.id) is None


async def test_list_logs_filters_by_range(store: HabitStore):
    habit = await store.add_habit(HabitCreate(name="Walk", pillar=Pillar.health))
    for day in (date(2026, 3, 1), date(2026, 3, 10), date(2026, 3, 18)):
        await store.log_habit(habit.id, day=day)

    logs = await store.list_logs(habit_id=habit.id, start=date(2026, 3, 5), end=date(2026, 3, 15))
    assert [log.day for log in logs] == [date(2026, 3, 10)]


async def test_delete_habit_removes_its_logs(store: HabitStore):
    keep = await store.add_habit(HabitCreate(name="Keep", pillar=Pillar.social))
    drop = await store.add_habit(HabitCreate(name="Drop", pillar=Pillar.social))
    await store.log_habit(keep.id)
    await store.log_habit(drop.id)

    await store.delete_habit(drop.id)

    assert [h.id for h in await store.list_habits()] == [keep.id]
    assert [log.habit_id for log in await store.list_logs()] == [keep.id]


async def test_toggle_and_todays_habits(store: HabitStore):
    daily = await store.add_habit(HabitCreate(name="Daily", pillar=Pillar.health))
    await store.add_habit(HabitCreate(name="Thursdays", pillar=Pillar.health,
                                      frequency=FrequencyKind.specific_days, frequency_days=[4]))
    wednesdays = await store.add_habit(HabitCreate(name="Wednesdays", pillar=Pillar.health,
                                                   frequency=FrequencyKind.specific_days, frequency_days=[3]))

    toggled = await store.toggle_habit_active(daily.id)
    assert toggled.is_active is False

    assert [h.id for h in await store.todays_habits()] == [wednesdays.id]


async def test_snapshot_holds_habits_logs_and_time(store: HabitStore, clock):
    habit = await store.add_habit(HabitCreate(name="Walk", pillar=Pillar.health))
    await store.log_habit(habit.id)

    snap = await store.snapshot()

    assert [h.id for h in snap.habits] == [habit.id]
    assert len(snap.logs) == 1
    assert snap.now == clock.now
    assert isinstance(snap.habits, tuple)


async def test_seed_only_fills_an_empty_store(store: HabitStore):
    seeded = await store.seed_sample_habits()
    assert len(seeded) == 5
    assert {h.name for h in seeded} >= {"Meditate", "Track Expenses"}
    assert await store.seed_sample_habits() == []
    assert len(await store.list_habits()) == 5


async def test_update_rejects_frequency_without_its_fields(store: HabitStore):
    habit = await store.add_habit(HabitCreate(name="Gym", pillar=Pillar.health))

    with pytest.raises(InvalidHabitError):
        await store.update_habit(habit.id, HabitUpdate(frequency=FrequencyKind.specific_days))
    with pytest.raises(InvalidHabitError):
        await store.update_habit(habit.id, HabitUpdate(frequency=FrequencyKind.times_per_week))

    unchanged = await store.get_habit(habit.id)
    assert unchanged.frequency == FrequencyKind.daily


async def test_update_to_times_per_week_with_count(store: HabitStore):
    habit = await store.add_habit(HabitCreate(name="Gym", pillar=Pillar.health))
    updated = await store.update_habit(
        habit.id, HabitUpdate(frequency=FrequencyKind.times_per_week, frequency_times=3)
    )
    assert updated.frequency_times == 3
    assert updated.frequency_description == "3 times per week"


async def test_update_payload_rejects_nulls():
    with pytest.raises(ValidationError):
        HabitUpdate(difficulty=None)
    with pytest.raises(ValidationError):
        HabitUpdate(name=None)
    assert HabitUpdate(unit=None).model_dump(exclude_unset=True) == {"unit": None}


async def test_new_rows_carry_aware_timestamps():
    habit = Habit(name="Walk", pillar=Pillar.health)
    log = HabitLog(habit_id=habit.id, day=TODAY)
    log.mark_completed()

    assert habit.created_at.tzinfo is not None
    assert habit.updated_at.tzinfo is not None
    assert log.completed_at.tzinfo is not None
