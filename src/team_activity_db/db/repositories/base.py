"""Base repository pattern implementation for async SQLAlchemy.

Provides common session handling, CRUD helpers and the two statement
shapes every fact table needs: dialect-aware upserts and scope deletes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from team_activity_db.db.models import Base

if TYPE_CHECKING:
    from team_activity_db.schemas.scope import SyncScope

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Base repository with common async session handling.

    All repositories inherit from this class to get consistent
    session management and common query patterns.

    Usage:
        class ContributorRepository(BaseRepository[Contributor]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Contributor)

            async def get_by_github_id(self, handle: str) -> Contributor | None:
                return await self._get_by_field("github_id", handle)
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelT]) -> None:
        """Initialize the repository with a session.

        Args:
            session: Async SQLAlchemy session (caller manages lifecycle)
            model_class: The SQLAlchemy model class this repository manages
        """
        self._session = session
        self._model_class = model_class

    @property
    def session(self) -> AsyncSession:
        """Access the underlying session."""
        return self._session

    # -------------------------------------------------------------------------
    # Common Read Operations
    # -------------------------------------------------------------------------

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get an entity by its primary key ID."""
        return await self._session.get(self._model_class, id)

    async def _get_by_field(self, field_name: str, value: object) -> ModelT | None:
        """Get the entity whose ``field_name`` equals ``value`` (or None)."""
        stmt = select(self._model_class).where(
            getattr(self._model_class, field_name) == value
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self, limit: int | None = None) -> list[ModelT]:
        """Get all entities, optionally limited."""
        stmt = select(self._model_class)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_scope(self, scope: SyncScope) -> list[ModelT]:
        """Get every row belonging to a (month, owner, repo) scope.

        Only valid for fact models carrying the scope columns.
        """
        model: Any = self._model_class
        stmt = select(self._model_class).where(
            model.month == scope.month,
            model.repo_owner == scope.repo_owner,
            model.repo_name == scope.repo_name,
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count total entities of this type."""
        stmt = select(func.count()).select_from(self._model_class)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    # -------------------------------------------------------------------------
    # Common Write Operations
    # -------------------------------------------------------------------------

    def add(self, entity: ModelT) -> ModelT:
        """Add an entity to the session (does not flush)."""
        self._session.add(entity)
        return entity

    async def flush(self) -> None:
        """Flush pending changes without committing."""
        await self._session.flush()

    async def refresh(self, entity: ModelT) -> ModelT:
        """Refresh an entity from the database."""
        await self._session.refresh(entity)
        return entity

    async def delete_scope(self, scope: SyncScope) -> int:
        """Delete every row of this fact table inside a sync scope.

        Args:
            scope: (month, repo_owner, repo_name) triple

        Returns:
            Number of deleted rows
        """
        model: Any = self._model_class
        stmt = delete(self._model_class).where(
            model.month == scope.month,
            model.repo_owner == scope.repo_owner,
            model.repo_name == scope.repo_name,
        )
        cursor_result = await self._session.execute(stmt)
        row_count: int = getattr(cursor_result, "rowcount", 0) or 0
        return row_count

    async def _upsert(
        self,
        values: dict[str, Any],
        conflict_columns: list[str],
        update_columns: list[str],
    ) -> ModelT:
        """INSERT ... ON CONFLICT DO UPDATE on a natural unique key.

        Args:
            values: Column values for the new row
            conflict_columns: Columns of the unique constraint
            update_columns: Columns overwritten when the row already exists

        Returns:
            The inserted or updated entity
        """
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            insert_stmt: Any = postgresql.insert(self._model_class)
        elif dialect == "sqlite":
            insert_stmt = sqlite.insert(self._model_class)
        else:
            raise NotImplementedError(f"Upsert not supported for dialect '{dialect}'")

        insert_stmt = insert_stmt.values(**values)
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=conflict_columns,
            set_={column: insert_stmt.excluded[column] for column in update_columns},
        ).returning(self._model_class)

        result = await self._session.execute(
            stmt, execution_options={"populate_existing": True}
        )
        return result.scalar_one()
