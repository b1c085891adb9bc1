"""
User API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own in-memory SQLite database (aiosqlite +
       StaticPool), so ids start at 1 and no state leaks between tests.

Fixture Hierarchy (all function-scoped):
    ├── database:        isolated Database with the users table created
    ├── repository:      UserRepository bound to `database`
    ├── failing_session: mock AsyncSession whose statements raise
    ├── failing_database: mock Database handing out `failing_session`
    ├── app:             FastAPI app wired to `database`
    └── test_client:     HTTPX AsyncClient talking to `app` over ASGI
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any userapi import reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from userapi.database import Database  # noqa: E402
from userapi.main import create_app  # noqa: E402
from userapi.repositories.user_repository import UserRepository  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """
    Provides an isolated in-memory database with the schema created.

    StaticPool keeps a single connection alive so the in-memory database
    survives between sessions of the same test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db = Database(engine)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def repository(database):
    return UserRepository(database)


@pytest.fixture
def store_failure():
    """An OperationalError as raised when the database is unreachable."""
    return OperationalError(
        "SELECT users.id FROM users",
        None,
        ConnectionRefusedError("connection refused"),
    )


@pytest.fixture
def failing_session(store_failure):
    """
    Provides a mock AsyncSession whose every statement fails.

    Usage:
        async def test_x(failing_database, failing_session):
            failing_session.commit.side_effect = some_error
    """
    session = AsyncMock()
    session.__aenter__.return_value = session
    session.__aexit__.return_value = False
    session.add = MagicMock()
    session.execute.side_effect = store_failure
    session.scalar.side_effect = store_failure
    session.get.side_effect = store_failure
    session.commit.side_effect = store_failure
    return session


@pytest.fixture
def failing_database(failing_session):
    database = MagicMock(spec=Database)
    database.session.return_value = failing_session
    return database


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
