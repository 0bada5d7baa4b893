"""Shared test fixtures: in-memory SQLite DB, async session, pinned clock, test client."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import project_budget.models  # noqa: F401
from project_budget.dependencies import get_clock, get_db
from project_budget.main import app
from project_budget.models.base import Base
from project_budget.services.budget_service import BudgetLedger

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# "Now" for every test that goes through the clock: 2024-03-10 12:00 UTC.
FIXED_NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)


# Enable foreign key enforcement in SQLite (off by default).
@event.listens_for(test_engine.sync_engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


test_session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Yield a test DB session."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def ledger(db_session: AsyncSession) -> BudgetLedger:
    return BudgetLedger(db_session, clock=fixed_clock, base_currency="USD")


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncClient:
    """Yield an httpx AsyncClient wired to the test DB and the pinned clock."""

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
