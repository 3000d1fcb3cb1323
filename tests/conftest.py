"""Pytest configuration and shared fixtures.

Usage Guide:
- For ORM model tests: import factories from tests.factories
- For GitHub API tests: use the dict factories (make_github_*) from tests.factories
- For sync tests: use the sleep_recorder fixture instead of real delays
"""

import logging
from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from team_activity_db.config import SyncConfig
from team_activity_db.db.models import Base

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# All synced activity in tests happens in March 2025 unless a test says
# otherwise. Hardcoded dates should reference these constants.
# -----------------------------------------------------------------------------

TEST_MONTH = "2025-03"
OTHER_MONTH = "2025-04"

# Base dates (datetime objects for Pydantic/ORM)
MAR_03 = datetime(2025, 3, 3, 9, 0, 0, tzinfo=UTC)    # First PR opened
MAR_04 = datetime(2025, 3, 4, 15, 0, 0, tzinfo=UTC)   # First review
MAR_10 = datetime(2025, 3, 10, 11, 0, 0, tzinfo=UTC)  # Second PR opened
MAR_12 = datetime(2025, 3, 12, 16, 0, 0, tzinfo=UTC)  # Merge date
APR_02 = datetime(2025, 4, 2, 10, 0, 0, tzinfo=UTC)   # Next-month activity

# ISO 8601 strings (for GitHub API mocks)
MAR_03_ISO = "2025-03-03T09:00:00Z"
MAR_04_ISO = "2025-03-04T15:00:00Z"
MAR_05_ISO = "2025-03-05T08:30:00Z"
MAR_10_ISO = "2025-03-10T11:00:00Z"
MAR_12_ISO = "2025-03-12T16:00:00Z"


# -----------------------------------------------------------------------------
# Logging Isolation
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _restore_stdlib_root_logger():
    """Undo setup_logging's stdlib routing so it does not leak between tests."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create an async session with auto-rollback.

    Changes are rolled back after each test to ensure isolation. Code
    under test may commit; the engine is discarded afterwards anyway.
    """
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


# -----------------------------------------------------------------------------
# Sync Fixtures
# -----------------------------------------------------------------------------
class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """Injected sleep that returns immediately and records delays."""
    return SleepRecorder()


@pytest.fixture
def sync_config() -> SyncConfig:
    """Default sync configuration (page size 100, 1.0s / 0.5s delays)."""
    return SyncConfig()


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
