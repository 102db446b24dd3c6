"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.

Settings are read when tutor modules are first imported (at collection
time), so the test environment is forced at module import, before any
test module imports the application.
"""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root, then force test values over it
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

os.environ.update(
    {
        "POSTGRES_HOST": "localhost",
        "POSTGRES_USER": "testuser",
        "POSTGRES_PASSWORD": "testpass",
        "POSTGRES_DB": "testdb",
        "DATABASE_URL": "",
        "GEMINI_API_KEY": "test-api-key",
        "TUTOR_API_KEY": "",
        "RATE_LIMIT_ENABLED": "false",
        "MAX_ATTEMPTS": "3",
        "DEBUG": "false",
    }
)

from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from tutor.db.base import Base  # noqa: E402


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_db_session() -> MagicMock:
    """
    Create a mock database session for unit testing.
    """
    mock = MagicMock()
    mock.execute = AsyncMock()
    mock.add = MagicMock()
    mock.commit = AsyncMock()
    mock.rollback = AsyncMock()
    mock.refresh = AsyncMock()
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """LLMClient whose complete() is an AsyncMock returning (data, usage)."""
    mock = MagicMock()
    mock.complete = AsyncMock()
    return mock


# ============================================================================
# SQLite Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    In-memory SQLite session with the full schema.

    StaticPool keeps the single in-memory connection alive across the
    session's transactions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_maker() as session:
        yield session

    await engine.dispose()
