"""Shared fixtures: in-memory SQLite database, HTTP client, notifier capture.

Every test gets freshly created tables, and services commit for real, so
assertions re-read state through ``db_session`` after API calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hrleave.db import get_session
from hrleave.main import app
from hrleave.models import SQLModel
from hrleave.services.notification import InMemoryNotifier, get_notifier, set_notifier

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

TEST_DATABASE_URL = "sqlite+aiosqlite://"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine.sync_engine, "connect")
def _enable_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionFactory = async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def _setup_db() -> AsyncIterator[None]:
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


@pytest.fixture(autouse=True)
def notifier() -> Iterator[InMemoryNotifier]:
    """Capture notifications instead of logging them."""
    previous = get_notifier()
    captured = InMemoryNotifier()
    set_notifier(captured)
    yield captured
    set_notifier(previous)


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    return TestSessionFactory


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """A session for direct service calls and for reading state back."""
    async with TestSessionFactory() as session:
        yield session


@pytest.fixture
async def async_client() -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with TestSessionFactory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
