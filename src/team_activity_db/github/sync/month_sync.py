"""Month Sync Service - Fetch → Clear → Persist → Aggregate pipeline.

Replaces every fact row of one (month, repo) scope with what GitHub
currently reports, then recomputes the monthly summaries for that month.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from team_activity_db.config import get_settings
from team_activity_db.db.models import CommentType, Contributor
from team_activity_db.db.repositories import (
    CommentFactRepository,
    ContributorRepository,
    PullRequestFactRepository,
    ReviewFactRepository,
)
from team_activity_db.github.client import GitHubClient
from team_activity_db.logging import get_logger, scope_context
from team_activity_db.schemas import (
    CommentFactCreate,
    PullRequestActivity,
    PullRequestFactCreate,
    ReviewFactCreate,
    SyncScope,
)

from .aggregator import MonthlyStatsAggregator
from .classifier import is_substantive
from .commit_manager import CommitManager
from .results import MonthSyncResult

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from team_activity_db.schemas import GitHubIssueComment, GitHubReviewComment

logger = get_logger(__name__)

class MonthSyncService:
    """Service for syncing one repository's PR activity for one month.

    The service is idempotent per scope: facts of the scope are deleted
    before the fresh data is written, so running it twice with the same
    upstream data leaves the same rows behind.

    Usage:
        async with GitHubClient("octo-org", "api") as client:
            async with get_session() as session:
                service = MonthSyncService.from_session(client, session)
                result = await service.sync_month_data("2025-03", "octo-org", "api")
                print(result.message)
    """

    def __init__(
        self,
        client: GitHubClient,
        contributor_repository: ContributorRepository,
        pr_fact_repository: PullRequestFactRepository,
        review_fact_repository: ReviewFactRepository,
        comment_fact_repository: CommentFactRepository,
        aggregator: MonthlyStatsAggregator,
        commit_manager: CommitManager,
    ) -> None:
        """Initialize the sync service.

        Args:
            client: GitHub client bound to the repository being synced
            contributor_repository: Repository for Contributor model
            pr_fact_repository: Repository for PullRequestFact model
            review_fact_repository: Repository for ReviewFact model
            comment_fact_repository: Repository for CommentFact model
            aggregator: Monthly summary aggregator
            commit_manager: Commit boundaries for the clear phase and PR batches
        """
        self._client = client
        self._contributors = contributor_repository
        self._pr_facts = pr_fact_repository
        self._review_facts = review_fact_repository
        self._comment_facts = comment_fact_repository
        self._aggregator = aggregator
        self._commit_manager = commit_manager

    @classmethod
    def from_session(
        cls,
        client: GitHubClient,
        session: AsyncSession,
        *,
        commit_batch_size: int | None = None,
    ) -> MonthSyncService:
        """Build a service whose repositories share one session."""
        batch_size = commit_batch_size or get_settings().sync.commit_batch_size
        return cls(
            client=client,
            contributor_repository=ContributorRepository(session),
            pr_fact_repository=PullRequestFactRepository(session),
            review_fact_repository=ReviewFactRepository(session),
            comment_fact_repository=CommentFactRepository(session),
            aggregator=MonthlyStatsAggregator.from_session(session),
            commit_manager=CommitManager(session, batch_size=batch_size),
        )

    async def sync_month_data(self, month: str, repo_owner: str, repo_name: str) -> MonthSyncResult:
        """Sync all PR activity of a repository for one month.

        Flow:
            1. Fetch every PR of the month with its sub-resources
            2. Delete comment, review and PR facts of the scope
            3. Write facts for each PR, creating placeholder contributors
            4. Recompute monthly summaries for the month

        Args:
            month: Month in YYYY-MM format
            repo_owner: Repository owner (must match the client's)
            repo_name: Repository name (must match the client's)

        Returns:
            MonthSyncResult with processed PR and comment counts

        Raises:
            ValueError: If the scope does not match the client's repository
            GitHubAPIError: If the PR search fails
            SQLAlchemyError: If a write fails; earlier phases stay committed
        """
        scope = SyncScope(month=month, repo_owner=repo_owner, repo_name=repo_name)
        if (scope.repo_owner, scope.repo_name) != (self._client.owner, self._client.repo):
            raise ValueError(
                f"Client is bound to {self._client.owner}/{self._client.repo}, "
                f"cannot sync {scope.full_name}"
            )

        result = MonthSyncResult(
            month=scope.month, repo_owner=scope.repo_owner, repo_name=scope.repo_name
        )

        with scope_context(scope) as sync_logger:
            # Step 1: Fetch
            sync_logger.info("Fetching month data from GitHub")
            month_data = await self._client.get_complete_month_data(scope.month)
            result.total_items = len(month_data)

            # Step 2: Clear
            deleted = await self.clear_scope(scope)
            sync_logger.info("Cleared scope", **deleted)

            # Step 3: Persist
            for activity in month_data:
                await self._persist_activity(activity, scope, result)
            await self._commit_manager.finalize()
            sync_logger.info(
                "Persisted {processed} of {total} PRs",
                processed=result.processed_prs,
                total=result.total_items,
                comments=result.total_comments,
                reviews=result.review_facts,
                created_contributors=result.created_contributors,
            )

            # Step 4: Aggregate
            await self._aggregator.recompute_monthly_stats(scope.month)
            await self._commit_manager.commit_phase("aggregate")

            sync_logger.info(result.message)
        return result

    async def clear_scope(self, scope: SyncScope) -> dict[str, int]:
        """Delete every fact row of a scope and commit.

        Returns:
            Rows deleted per fact table
        """
        deleted = {
            "comments": await self._comment_facts.delete_scope(scope),
            "reviews": await self._review_facts.delete_scope(scope),
            "prs": await self._pr_facts.delete_scope(scope),
        }
        await self._commit_manager.commit_phase("clear")
        return deleted

    async def _ensure_contributor(self, github_id: str, result: MonthSyncResult) -> Contributor:
        contributor, created = await self._contributors.get_or_create(github_id)
        if created:
            result.created_contributors += 1
        return contributor

    async def _persist_activity(
        self,
        activity: PullRequestActivity,
        scope: SyncScope,
        result: MonthSyncResult,
    ) -> None:
        """Write the PR, review and comment facts of one PR."""
        pr = activity.pr
        if pr.author_login is None:
            logger.warning("Skipping PR #{number} with no author", number=pr.number)
            return

        author = await self._ensure_contributor(pr.author_login, result)

        await self._pr_facts.upsert(
            PullRequestFactCreate(
                member_id=author.id,
                pr_number=pr.number,
                pr_title=pr.title,
                pr_state=pr.state,
                commits_count=len(activity.commits),
                received_comments_count=activity.received_comments_count,
                received_reviews_count=len(activity.reviews),
                created_at=pr.created_at,
                updated_at=pr.updated_at,
                merged_at=pr.merged_at,
                pr_url=pr.html_url,
                scope=scope,
            )
        )

        for review in activity.reviews:
            if review.user is None:
                continue
            reviewer = await self._ensure_contributor(review.user.login, result)
            await self._review_facts.create(
                ReviewFactCreate(
                    reviewer_id=reviewer.id,
                    pr_number=pr.number,
                    pr_author_id=author.id,
                    review_state=review.state,
                    reviewed_at=review.submitted_at,
                    scope=scope,
                )
            )
            result.review_facts += 1

        comments: list[tuple[CommentType, GitHubReviewComment | GitHubIssueComment]] = [
            (CommentType.REVIEW_COMMENT, comment) for comment in activity.review_comments
        ]
        comments.extend((CommentType.ISSUE_COMMENT, comment) for comment in activity.issue_comments)

        for comment_type, comment in comments:
            if comment.user is None:
                continue
            commenter = await self._ensure_contributor(comment.user.login, result)
            body = comment.body or ""
            await self._comment_facts.upsert(
                CommentFactCreate(
                    commenter_id=commenter.id,
                    pr_number=pr.number,
                    pr_author_id=author.id,
                    comment_type=comment_type,
                    comment_length=len(body),
                    is_substantive=is_substantive(body),
                    created_at=comment.created_at,
                    github_comment_id=comment.id,
                    scope=scope,
                )
            )
            result.total_comments += 1

        result.processed_prs += 1
        await self._commit_manager.record_success()
