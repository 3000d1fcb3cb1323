"""Repository for MonthlySummary model operations."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from team_activity_db.db.models import Contributor, MonthlySummary

from .base import BaseRepository


class MonthlySummaryRepository(BaseRepository[MonthlySummary]):
    """Repository for per-contributor monthly aggregates.

    Only the aggregator writes here; one row per (member, month).
    """

    _UPDATE_COLUMNS = [
        "commits_count",
        "prs_count",
        "review_comments_count",
        "pr_comments_count",
        "total_comments_count",
        "updated_at",
    ]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, MonthlySummary)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_for_contributor(self, member_id: int, month: str) -> MonthlySummary | None:
        """Get one contributor's summary for a month."""
        stmt = select(MonthlySummary).where(
            MonthlySummary.member_id == member_id,
            MonthlySummary.month == month,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_month(self, month: str) -> list[MonthlySummary]:
        """Get every stored summary for a month, in member ID order."""
        stmt = (
            select(MonthlySummary)
            .where(MonthlySummary.month == month)
            .order_by(MonthlySummary.member_id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_leaderboard_rows(
        self, month: str
    ) -> list[tuple[Contributor, MonthlySummary | None]]:
        """Active contributors paired with their summary for a month.

        Contributors without a summary row are paired with None.
        Rows come back in name order; ranking is done by the caller.
        """
        stmt = (
            select(Contributor, MonthlySummary)
            .outerjoin(
                MonthlySummary,
                (MonthlySummary.member_id == Contributor.id) & (MonthlySummary.month == month),
            )
            .where(Contributor.is_active.is_(True))
            .order_by(Contributor.name, Contributor.id)
        )
        result = await self._session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def upsert(
        self,
        member_id: int,
        month: str,
        *,
        commits_count: int,
        prs_count: int,
        review_comments_count: int,
        pr_comments_count: int,
        total_comments_count: int,
    ) -> MonthlySummary:
        """Insert or overwrite the summary for (member, month).

        Returns:
            The stored summary
        """
        return await self._upsert(
            {
                "member_id": member_id,
                "month": month,
                "commits_count": commits_count,
                "prs_count": prs_count,
                "review_comments_count": review_comments_count,
                "pr_comments_count": pr_comments_count,
                "total_comments_count": total_comments_count,
                "updated_at": datetime.now(UTC),
            },
            conflict_columns=["member_id", "month"],
            update_columns=self._UPDATE_COLUMNS,
        )
