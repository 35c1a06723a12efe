"""
TechNotes Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh for each test):
    ├── repos: In-memory user and note repositories
    ├── note_service / user_service: Services wired to `repos`
    ├── make_user / make_note: Insert records straight into `repos`
    ├── sql_session: AsyncSession on a throwaway in-memory SQLite database
    └── test_client: HTTPX AsyncClient whose app uses `repos`
"""

import os

# Override settings for testing BEFORE any technotes imports
# Why: settings and the engine are created at import time
os.environ["STORE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt's minimum; keeps hashing fast in tests
os.environ["LOG_LEVEL"] = "WARNING"

from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from technotes.database import Base
from technotes.dependencies import build_memory_repositories, get_repositories
from technotes.security import get_password_hash
from technotes.services.note_service import NoteService
from technotes.services.user_service import UserService

import technotes.models  # noqa: F401  (registers tables for create_all)


@pytest.fixture
def repos():
    """Fresh, empty in-memory repositories for each test."""
    return build_memory_repositories()


@pytest.fixture
def note_service(repos):
    return NoteService(notes=repos.notes, users=repos.users)


@pytest.fixture
def user_service(repos):
    return UserService(users=repos.users, notes=repos.notes)


@pytest.fixture
def make_user(repos):
    """
    Factory fixture inserting a user directly into the repository.

    Usage:
        alice = await make_user("alice")
    """
    async def _make_user(username="alice", password="secret1", roles=None, active=True):
        return await repos.users.create(
            {
                "username": username,
                "password": get_password_hash(password),
                "roles": roles or ["Employee"],
                "active": active,
            }
        )
    return _make_user


@pytest.fixture
def make_note(repos):
    """Factory fixture inserting a note directly into the repository."""
    async def _make_note(user_id=None, title="T1", text="body", completed=False):
        return await repos.notes.create(
            {
                "user": user_id or uuid4(),
                "title": title,
                "text": text,
                "completed": completed,
            }
        )
    return _make_note


@pytest_asyncio.fixture
async def sql_session():
    """
    Provides an AsyncSession on an in-memory SQLite database with all tables.

    Why StaticPool: every connection must see the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(repos):
    """
    Provides an async HTTP test client for endpoint testing.

    How: A fresh app from create_app() with get_repositories overridden to
         return the test's in-memory repositories, served over ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from technotes.main import create_app

    app = create_app()
    app.dependency_overrides[get_repositories] = lambda: repos
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
