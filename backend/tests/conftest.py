"""
Chirper Backend: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_account_repository / mock_message_repository: AsyncMock repositories
    ├── test_settings: Settings pointing at a per-test SQLite file
    ├── db_engine: Async engine with tables created
    ├── db_session: AsyncSession on that engine (for repository tests)
    └── test_client: HTTPX AsyncClient bound to a fresh app instance
"""

import os

# Override settings for testing BEFORE any app imports, so the module-level
# app in app.main is built against SQLite rather than PostgreSQL
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    create_tables,
    dispose_engine,
)
from app.repositories.account_repository import AccountRepository  # noqa: E402
from app.repositories.message_repository import MessageRepository  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Mocked Layers (service unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_account_repository():
    """
    AccountRepository stand-in whose async methods are AsyncMocks.

    Usage:
        mock_account_repository.find_by_username.return_value = None
    """
    return AsyncMock(spec=AccountRepository)


@pytest.fixture
def mock_message_repository():
    """MessageRepository stand-in whose async methods are AsyncMocks."""
    return AsyncMock(spec=MessageRepository)


# ══════════════════════════════════════════════════════════════════════════
# Real Database (repository and endpoint tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Settings bound to a SQLite file inside pytest's tmp_path."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'chirper_test.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def db_engine(test_settings):
    engine = build_engine(test_settings)
    await create_tables(engine)
    yield engine
    await dispose_engine(engine)


@pytest_asyncio.fixture
async def db_session(db_engine):
    """
    A session on the scratch database.

    Tests that need data to survive across sessions call commit() themselves.
    """
    session_factory = build_session_factory(db_engine)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(test_settings):
    """
    HTTPX AsyncClient talking to a fresh app built from `test_settings`.

    ASGITransport does not run the lifespan, so tables are created here.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/messages")
            assert response.status_code == 200
    """
    from app.main import create_app

    app = create_app(test_settings)
    await create_tables(app.state.engine)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await dispose_engine(app.state.engine)
