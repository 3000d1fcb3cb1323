"""Repository for PullRequestFact model operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from team_activity_db.db.models import PullRequestFact

from .base import BaseRepository

if TYPE_CHECKING:
    from team_activity_db.schemas.facts import PullRequestFactCreate


@dataclass(frozen=True)
class PullRequestStats:
    """Aggregate of one contributor's PR facts for a month."""

    prs_count: int = 0
    commits_count: int = 0
    received_comments_count: int = 0


class PullRequestFactRepository(BaseRepository[PullRequestFact]):
    """Repository for authored-PR facts.

    Rows are unique per (member, PR number, repo owner, repo name);
    writing the same PR again overwrites the existing row.
    """

    _UPDATE_COLUMNS = [
        "pr_title",
        "pr_state",
        "commits_count",
        "received_comments_count",
        "received_reviews_count",
        "updated_at",
        "merged_at",
        "month",
        "pr_url",
    ]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, PullRequestFact)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_for_contributor(self, member_id: int, month: str) -> list[PullRequestFact]:
        """Get a contributor's PR facts for a month, newest first.

        Args:
            member_id: Contributor ID
            month: Month in YYYY-MM format

        Returns:
            List of PR facts across all repos
        """
        stmt = (
            select(PullRequestFact)
            .where(
                PullRequestFact.member_id == member_id,
                PullRequestFact.month == month,
            )
            .order_by(PullRequestFact.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_stats(self, member_id: int, month: str) -> PullRequestStats:
        """Count PRs and sum commits/received comments for a contributor-month.

        Args:
            member_id: Contributor ID
            month: Month in YYYY-MM format

        Returns:
            PullRequestStats (zeros when the contributor has no PRs)
        """
        stmt = select(
            func.count(PullRequestFact.id),
            func.coalesce(func.sum(PullRequestFact.commits_count), 0),
            func.coalesce(func.sum(PullRequestFact.received_comments_count), 0),
        ).where(
            PullRequestFact.member_id == member_id,
            PullRequestFact.month == month,
        )
        result = await self._session.execute(stmt)
        prs_count, commits_count, received = result.one()
        return PullRequestStats(
            prs_count=int(prs_count),
            commits_count=int(commits_count),
            received_comments_count=int(received),
        )

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def upsert(self, data: PullRequestFactCreate) -> PullRequestFact:
        """Insert a PR fact, or overwrite the existing one for the same PR.

        Args:
            data: Fact values including the sync scope

        Returns:
            The stored PR fact
        """
        values = data.model_dump(exclude={"scope"})
        values.update(
            month=data.scope.month,
            repo_owner=data.scope.repo_owner,
            repo_name=data.scope.repo_name,
        )
        return await self._upsert(
            values,
            conflict_columns=["member_id", "pr_number", "repo_owner", "repo_name"],
            update_columns=self._UPDATE_COLUMNS,
        )
