"""Repository for ReviewFact model operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from team_activity_db.db.models import ReviewFact

from .base import BaseRepository

if TYPE_CHECKING:
    from team_activity_db.schemas.facts import ReviewFactCreate


class ReviewFactRepository(BaseRepository[ReviewFact]):
    """Repository for submitted-review facts.

    Reviews carry no natural key, so every create() adds a row. Re-syncs
    stay idempotent only because the scope is cleared first.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, ReviewFact)

    async def get_for_contributor(self, reviewer_id: int, month: str) -> list[ReviewFact]:
        """Get reviews submitted by a contributor in a month, newest first."""
        stmt = (
            select(ReviewFact)
            .where(
                ReviewFact.reviewer_id == reviewer_id,
                ReviewFact.month == month,
            )
            .order_by(ReviewFact.reviewed_at.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_reviewer(self, reviewer_id: int, month: str) -> int:
        """Count reviews submitted by a contributor in a month (all repos)."""
        stmt = select(func.count(ReviewFact.id)).where(
            ReviewFact.reviewer_id == reviewer_id,
            ReviewFact.month == month,
        )
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def create(self, data: ReviewFactCreate) -> ReviewFact:
        """Insert one review fact with type "review" and weight 1.

        Args:
            data: Review values including the sync scope

        Returns:
            Created review fact (flushed, has ID)
        """
        review = ReviewFact(
            reviewer_id=data.reviewer_id,
            pr_number=data.pr_number,
            pr_author_id=data.pr_author_id,
            review_type="review",
            review_state=data.review_state,
            comment_count=1,
            reviewed_at=data.reviewed_at,
            month=data.scope.month,
            repo_owner=data.scope.repo_owner,
            repo_name=data.scope.repo_name,
        )
        self.add(review)
        await self.flush()
        return review
