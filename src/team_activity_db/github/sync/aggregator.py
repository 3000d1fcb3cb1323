"""Monthly aggregation of fact tables into per-contributor summaries.

Every pass recomputes from scratch for all active contributors, so the
result depends only on the fact tables for the month. Inactive
contributors keep whatever summary rows they already had.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from team_activity_db.db.models import Contributor
from team_activity_db.db.repositories import (
    CommentFactRepository,
    ContributorRepository,
    MonthlySummaryRepository,
    PullRequestFactRepository,
    ReviewFactRepository,
)
from team_activity_db.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContributorMonthStats:
    """Raw figures gathered for one contributor-month.

    Only some of them reach MonthlySummary; substantive_comments,
    total_comment_length and reviews_count are collected but not stored.
    """

    member_id: int
    month: str
    prs_count: int
    commits_count: int
    received_comments_count: int
    authored_comments_count: int
    substantive_comments: int
    total_comment_length: int
    reviews_count: int


class MonthlyStatsAggregator:
    """Recomputes MonthlySummary rows from PR, review and comment facts.

    Usage:
        async with get_session() as session:
            aggregator = MonthlyStatsAggregator.from_session(session)
            await aggregator.recompute_monthly_stats("2025-03")
    """

    def __init__(
        self,
        contributor_repository: ContributorRepository,
        pr_fact_repository: PullRequestFactRepository,
        review_fact_repository: ReviewFactRepository,
        comment_fact_repository: CommentFactRepository,
        summary_repository: MonthlySummaryRepository,
    ) -> None:
        self._contributors = contributor_repository
        self._pr_facts = pr_fact_repository
        self._review_facts = review_fact_repository
        self._comment_facts = comment_fact_repository
        self._summaries = summary_repository

    @classmethod
    def from_session(cls, session: AsyncSession) -> MonthlyStatsAggregator:
        """Build an aggregator with repositories sharing one session."""
        return cls(
            ContributorRepository(session),
            PullRequestFactRepository(session),
            ReviewFactRepository(session),
            CommentFactRepository(session),
            MonthlySummaryRepository(session),
        )

    async def collect_stats(self, contributor: Contributor, month: str) -> ContributorMonthStats:
        """Gather PR, comment and review figures for one contributor-month.

        Args:
            contributor: Contributor to aggregate
            month: Month in YYYY-MM format

        Returns:
            ContributorMonthStats across every repo synced into the month
        """
        pr_stats = await self._pr_facts.get_stats(contributor.id, month)
        comment_stats = await self._comment_facts.get_stats(contributor.id, month)
        reviews_count = await self._review_facts.count_for_reviewer(contributor.id, month)

        return ContributorMonthStats(
            member_id=contributor.id,
            month=month,
            prs_count=pr_stats.prs_count,
            commits_count=pr_stats.commits_count,
            received_comments_count=pr_stats.received_comments_count,
            authored_comments_count=comment_stats.total_comments,
            substantive_comments=comment_stats.substantive_comments,
            total_comment_length=comment_stats.total_comment_length,
            reviews_count=reviews_count,
        )

    async def recompute_monthly_stats(self, month: str) -> None:
        """Upsert one MonthlySummary per active contributor for a month.

        review_comments_count and total_comments_count both receive the
        authored comment count; pr_comments_count receives comments
        received on the contributor's own PRs.

        Args:
            month: Month in YYYY-MM format
        """
        contributors = await self._contributors.get_active()
        logger.info(
            "Recomputing monthly stats for {count} contributors",
            count=len(contributors),
            month=month,
        )

        for contributor in contributors:
            stats = await self.collect_stats(contributor, month)
            await self._summaries.upsert(
                contributor.id,
                month,
                commits_count=stats.commits_count,
                prs_count=stats.prs_count,
                review_comments_count=stats.authored_comments_count,
                pr_comments_count=stats.received_comments_count,
                total_comments_count=stats.authored_comments_count,
            )
            logger.debug(
                "Summary for {github_id}",
                github_id=contributor.github_id,
                commits=stats.commits_count,
                prs=stats.prs_count,
                comments=stats.authored_comments_count,
                substantive=stats.substantive_comments,
                reviews=stats.reviews_count,
            )
