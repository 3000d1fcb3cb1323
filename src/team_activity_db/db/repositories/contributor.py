"""Repository for Contributor model CRUD operations."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from team_activity_db.db.models import (
    PLACEHOLDER_TRACK_ID,
    PLACEHOLDER_TRACK_NAME,
    Contributor,
)

from .base import BaseRepository

if TYPE_CHECKING:
    from team_activity_db.schemas.facts import ContributorProfile


class ContributorRepository(BaseRepository[Contributor]):
    """Repository for team member entities keyed by GitHub login.

    Contributors are created lazily the first time a sync sees a login
    and are never deleted here, only deactivated.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, Contributor)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_github_id(self, github_id: str) -> Contributor | None:
        """Get a contributor by GitHub login.

        Args:
            github_id: GitHub login (e.g., "octocat")

        Returns:
            Contributor or None if not found
        """
        return await self._get_by_field("github_id", github_id)

    async def get_active(self) -> list[Contributor]:
        """Get all active contributors, ordered by track then name."""
        stmt = (
            select(Contributor)
            .where(Contributor.is_active.is_(True))
            .order_by(Contributor.track_id, Contributor.name, Contributor.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Create/Update Methods
    # -------------------------------------------------------------------------

    async def create_placeholder(self, github_id: str) -> Contributor:
        """Create a contributor with placeholder name and track.

        Args:
            github_id: GitHub login

        Returns:
            Created contributor (flushed, has ID)
        """
        contributor = Contributor(
            name=github_id,
            github_id=github_id,
            track_id=PLACEHOLDER_TRACK_ID,
            track_name=PLACEHOLDER_TRACK_NAME,
            is_active=True,
        )
        self.add(contributor)
        await self.flush()
        return contributor

    async def get_or_create(self, github_id: str) -> tuple[Contributor, bool]:
        """Get the contributor for a login, creating a placeholder if unseen.

        Safe to call repeatedly for the same login within one session: the
        placeholder is flushed on creation, so the next lookup finds it.

        Args:
            github_id: GitHub login

        Returns:
            Tuple of (contributor, created) where created is True if new
        """
        existing = await self.get_by_github_id(github_id)
        if existing is not None:
            return existing, False

        contributor = await self.create_placeholder(github_id)
        return contributor, True

    async def upsert_profile(self, profile: ContributorProfile) -> Contributor:
        """Create or update a contributor with a real profile.

        Used to reconcile placeholder rows created during sync. The active
        flag is left untouched for existing rows.

        Args:
            profile: Name and track for the login

        Returns:
            The created or updated contributor
        """
        return await self._upsert(
            {
                "github_id": profile.github_id,
                "name": profile.name,
                "track_id": profile.track_id,
                "track_name": profile.track_name,
                "updated_at": datetime.now(UTC),
            },
            conflict_columns=["github_id"],
            update_columns=["name", "track_id", "track_name", "updated_at"],
        )

    async def set_active(self, github_id: str, is_active: bool) -> Contributor | None:
        """Set the active flag for a contributor.

        Args:
            github_id: GitHub login
            is_active: New flag value

        Returns:
            Updated contributor or None if not found
        """
        contributor = await self.get_by_github_id(github_id)
        if contributor is None:
            return None

        contributor.is_active = is_active
        await self.flush()
        return contributor

    async def deactivate(self, github_id: str) -> Contributor | None:
        """Exclude a contributor from future aggregation passes."""
        return await self.set_active(github_id, False)

    async def activate(self, github_id: str) -> Contributor | None:
        """Include a contributor in aggregation passes again."""
        return await self.set_active(github_id, True)
