"""
Shared test fixtures.

Provides an in-memory SQLite database and an HTTP client wired to it, with
mirror targets replaced by test doubles.
"""

import os

# Keep tests away from any real sheet, bucket or database settings
os.environ.setdefault("PYTHON_ENV", "test")
os.environ.setdefault("GOOGLE_CREDENTIALS_SEARCH_PATHS", "")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from admission_intake.core.database import Base, get_db
from admission_intake.main import app
from admission_intake.modules.admissions.mirror import MirrorSync
from admission_intake.modules.admissions.router import get_mirror


@pytest.fixture
async def session_maker():
    """In-memory SQLite database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_maker):
    """A session on the in-memory database."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def mirror():
    """Mirror with every target disabled; tests swap in doubles as needed."""
    return MirrorSync()


@pytest.fixture
async def client(session_maker, mirror):
    """HTTP client for the app using the in-memory database and test mirror."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mirror] = lambda: mirror

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
