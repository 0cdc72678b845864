"""
conftest.py: shared fixtures for all tests.

Strategy:
- Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
  with the schema created from the ORM metadata.
- The app's get_db and get_settings dependencies are overridden so the API
  talks to that database and uses a known device key.
- Cards and employees are created through the `make_card` factory fixture.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ATTENDANCE_TIMEZONE", "UTC")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

import uuid
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from punchclock.core.config import Settings, get_settings
from punchclock.db.models import Base, Employee, EmployeeCard
from punchclock.db.session import get_db
from punchclock.main import app

DEVICE_KEY = "qa-device-key"


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def session_factory() -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncSession:
    """Raw DB session for calling services and checking rows directly."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Settings + HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    return Settings(PUNCH_API_KEY=DEVICE_KEY, RUN_MIGRATIONS_ON_STARTUP=False)


@pytest.fixture
def device_headers() -> dict:
    return {"x-api-key": DEVICE_KEY}


@pytest_asyncio.fixture
async def client(session_factory, test_settings: Settings) -> AsyncClient:
    """HTTPX async client bound to the app with DB and settings overridden."""

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Card directory factory
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def make_card(session_factory):
    """
    Create an employee bound to a new card.
    Returns an async callable: await make_card("CARD-1", is_active=..., expires_at=...)
    resolving to the employee id.
    """

    async def _make(
        card_id: str,
        *,
        is_active: bool = True,
        expires_at: datetime | None = None,
        employee_id: uuid.UUID | None = None,
    ) -> uuid.UUID:
        async with session_factory() as session:
            if employee_id is None:
                employee = Employee(full_name=f"QA Employee {card_id}", is_active=True)
                session.add(employee)
                await session.flush()
                employee_id = employee.id
            session.add(
                EmployeeCard(
                    card_id=card_id,
                    employee_id=employee_id,
                    is_active=is_active,
                    expires_at=expires_at,
                )
            )
            await session.commit()
        return employee_id

    return _make
