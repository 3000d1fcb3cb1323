"""Repository for CommentFact model operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from team_activity_db.db.models import CommentFact

from .base import BaseRepository

if TYPE_CHECKING:
    from team_activity_db.schemas.facts import CommentFactCreate


@dataclass(frozen=True)
class CommentStats:
    """Aggregate of the comments one contributor authored in a month."""

    total_comments: int = 0
    substantive_comments: int = 0
    total_comment_length: int = 0


class CommentFactRepository(BaseRepository[CommentFact]):
    """Repository for review-comment and issue-comment facts.

    Rows are unique per (GitHub comment ID, repo owner, repo name), so
    ingesting the same comment twice updates rather than duplicates.
    """

    _UPDATE_COLUMNS = [
        "commenter_id",
        "pr_number",
        "pr_author_id",
        "comment_type",
        "comment_length",
        "is_substantive",
        "created_at",
        "month",
    ]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, CommentFact)

    async def get_by_github_id(
        self, github_comment_id: int, repo_owner: str, repo_name: str
    ) -> CommentFact | None:
        """Get a comment fact by its GitHub ID within a repository."""
        stmt = select(CommentFact).where(
            CommentFact.github_comment_id == github_comment_id,
            CommentFact.repo_owner == repo_owner,
            CommentFact.repo_name == repo_name,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_stats(self, commenter_id: int, month: str) -> CommentStats:
        """Count and measure the comments a contributor authored in a month.

        Args:
            commenter_id: Contributor ID
            month: Month in YYYY-MM format

        Returns:
            CommentStats (zeros when the contributor wrote nothing)
        """
        stmt = select(
            func.count(CommentFact.id),
            func.count(case((CommentFact.is_substantive.is_(True), 1))),
            func.coalesce(func.sum(CommentFact.comment_length), 0),
        ).where(
            CommentFact.commenter_id == commenter_id,
            CommentFact.month == month,
        )
        result = await self._session.execute(stmt)
        total, substantive, length = result.one()
        return CommentStats(
            total_comments=int(total),
            substantive_comments=int(substantive),
            total_comment_length=int(length),
        )

    async def upsert(self, data: CommentFactCreate) -> CommentFact:
        """Insert a comment fact keyed by GitHub comment ID, updating on conflict.

        Args:
            data: Comment values including the sync scope

        Returns:
            The stored comment fact
        """
        values = data.model_dump(exclude={"scope"})
        values.update(
            month=data.scope.month,
            repo_owner=data.scope.repo_owner,
            repo_name=data.scope.repo_name,
        )
        return await self._upsert(
            values,
            conflict_columns=["github_comment_id", "repo_owner", "repo_name"],
            update_columns=self._UPDATE_COLUMNS,
        )
