"""Tests for database engine and session management."""

from unittest.mock import patch

import pytest
from sqlalchemy import pool, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from team_activity_db.db import engine as engine_module
from team_activity_db.db.models import Base, Contributor


class TestDatabaseEngine:
    """Tests for async SQLAlchemy engine operations."""

    async def test_create_tables(self, test_engine):
        """Test that all tables are created successfully."""
        async with test_engine.connect() as conn:
            # Query SQLite to list tables
            result = await conn.execute(
                text("SELECT name FROM sqlite_master WHERE type='table'")
            )
            tables = {row[0] for row in result.fetchall()}

        # Verify expected tables exist
        assert "team_members" in tables
        assert "pr_activities" in tables
        assert "review_activities" in tables
        assert "comment_details" in tables
        assert "team_performances" in tables

    async def test_session_commits_on_success(self, test_engine):
        """Test that session commits changes on successful operations."""
        session_factory = async_sessionmaker(
            test_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with session_factory() as session:
            contributor = Contributor(
                github_id="alice", name="Alice", track_id="be", track_name="Backend"
            )
            session.add(contributor)
            await session.commit()
            contributor_id = contributor.id

        # Verify in a new session
        async with session_factory() as session:
            result = await session.get(Contributor, contributor_id)
            assert result is not None
            assert result.github_id == "alice"

    async def test_session_rollbacks_on_error(self, test_engine):
        """Test that session rolls back on exception."""
        session_factory = async_sessionmaker(
            test_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        with pytest.raises(ValueError, match="Simulated error"):
            async with session_factory() as session:
                session.add(
                    Contributor(github_id="rollback", name="R", track_id="x", track_name="X")
                )
                await session.flush()  # Write to DB but don't commit
                raise ValueError("Simulated error")

        async with session_factory() as session:
            result = await session.execute(
                text("SELECT COUNT(*) FROM team_members WHERE github_id = 'rollback'")
            )
            assert result.scalar() == 0


class TestModuleEngine:
    """Tests for the lazily created module-level engine and get_session()."""

    @pytest.fixture(autouse=True)
    async def _fresh_engine(self, tmp_path):
        """Point the module engine at a throwaway file database."""
        await engine_module.dispose_engine()
        url = f"sqlite+aiosqlite:///{tmp_path / 'engine.db'}"
        with patch.object(engine_module, "get_settings") as mock_settings:
            mock_settings.return_value.database_url = url
            yield url
        await engine_module.dispose_engine()

    async def test_sqlite_engine_uses_null_pool(self):
        """SQLite engines open a connection per checkout."""
        engine = engine_module.get_engine()
        assert isinstance(engine.pool, pool.NullPool)

    async def test_get_engine_is_cached(self):
        """The engine is created once until disposed."""
        assert engine_module.get_engine() is engine_module.get_engine()

    async def test_get_session_commits_on_exit(self):
        """Pending changes are committed when the block exits normally."""
        await engine_module.create_tables()

        async with engine_module.get_session() as session:
            session.add(Contributor(github_id="bob", name="Bob", track_id="fe", track_name="FE"))

        async with engine_module.get_session() as session:
            result = await session.execute(select(Contributor.github_id))
            assert result.scalars().all() == ["bob"]

    async def test_get_session_rolls_back_on_error(self):
        """Pending changes are discarded when the block raises."""
        await engine_module.create_tables()

        with pytest.raises(RuntimeError):
            async with engine_module.get_session() as session:
                session.add(
                    Contributor(github_id="carol", name="Carol", track_id="fe", track_name="FE")
                )
                raise RuntimeError("boom")

        async with engine_module.get_session() as session:
            result = await session.execute(select(Contributor))
            assert result.scalars().all() == []

    async def test_drop_tables(self):
        """drop_tables removes every table create_tables made."""
        await engine_module.create_tables()
        await engine_module.drop_tables()

        async with engine_module.get_engine().connect() as conn:
            result = await conn.execute(
                text("SELECT name FROM sqlite_master WHERE type='table'")
            )
            assert result.fetchall() == []

    async def test_dispose_engine_resets_module_state(self):
        """dispose_engine forgets the engine so the next call rebuilds it."""
        first = engine_module.get_engine()
        await engine_module.dispose_engine()
        assert engine_module.get_engine() is not first


async def test_dispose_engine():
    """Test that an engine can be disposed cleanly."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await engine.dispose()
