import pytest
import pytz
from datetime import datetime, timedelta
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from forge.main import app
from forge.api.deps import get_focus_service, get_store
from forge.services.focus_session import FocusSessionService
from forge.services.habit_store import HabitStore
from tests.fixtures import NOW

# in-memory test db, one connection shared by every session
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(pytz.utc.localize(NOW))


@pytest.fixture
def store(session_factory, clock) -> HabitStore:
    return HabitStore(session_factory, tz=pytz.utc, clock=clock)


@pytest.fixture
def focus_service(store, clock) -> FocusSessionService:
    return FocusSessionService(store, clock=clock, completion_ratio=0.8)


@pytest.fixture
async def client(store, focus_service) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_focus_service] = lambda: focus_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
