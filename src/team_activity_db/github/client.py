"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API for
collecting one repository's monthly pull request activity: the PR search,
and per-PR commits, reviews, review comments and issue comments.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from githubkit import GitHub
from githubkit.exception import RequestFailed
from pydantic import BaseModel, Field, ValidationError

from team_activity_db.config import SyncConfig, get_settings
from team_activity_db.logging import bind_pr, bind_repo
from team_activity_db.schemas.github_api import (
    GitHubCommit,
    GitHubIssueComment,
    GitHubReview,
    GitHubReviewComment,
    GitHubSearchPullRequest,
    PullRequestActivity,
)
from team_activity_db.schemas.scope import month_search_window

from .exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .results import FetchResult

SleepFunc = Callable[[float], Awaitable[None]]
ModelT = TypeVar("ModelT", bound=BaseModel)


def _describe_error(error: BaseException) -> str:
    """Message of the first leaf error, unwrapping task group errors."""
    while isinstance(error, BaseExceptionGroup) and error.exceptions:
        error = error.exceptions[0]
    return str(error)


class PullRequestComments(BaseModel):
    """Reviews and comments fetched for one PR."""

    reviews: list[GitHubReview] = Field(default_factory=list)
    review_comments: list[GitHubReviewComment] = Field(default_factory=list)
    issue_comments: list[GitHubIssueComment] = Field(default_factory=list)


class GitHubClient:
    """Async GitHub API client bound to one repository.

    Usage:
        async with GitHubClient("octo-org", "api") as client:
            activity = await client.get_complete_month_data("2025-03")
            for item in activity:
                print(item.pr.number, len(item.commits))

    Delays between search pages and between PRs are fixed (see SyncConfig)
    and go through the injected ``sleep`` so tests can run without waiting.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: str | None = None,
        config: SyncConfig | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            owner: Repository owner (org or user)
            repo: Repository name
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.
            config: Pagination/delay settings. Uses settings.sync if not provided.
            sleep: Coroutine used for the fixed delays

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        self._token = token or get_settings().github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        self._owner = owner
        self._repo = repo
        self._config = config or get_settings().sync
        self._sleep = sleep
        self._client: GitHub[Any] | None = None
        self._log = bind_repo(owner, repo)

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            self._client = GitHub(self._token)
        return self._client

    @property
    def _rest(self) -> Any:
        """REST namespace pinned to the configured X-GitHub-Api-Version."""
        return self._github.rest(self._config.api_version)

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repo(self) -> str:
        return self._repo

    @property
    def config(self) -> SyncConfig:
        return self._config

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Rate Limit Info
    # -------------------------------------------------------------------------
    async def get_rate_limit(self) -> dict[str, int | datetime]:
        """Get current core rate limit status.

        Returns:
            Dict with 'limit', 'remaining', 'reset' (datetime), 'used' keys.
        """
        try:
            resp = await self._rest.rate_limit.async_get()
        except RequestFailed as e:
            raise self._handle_error(e) from e
        core = resp.parsed_data.resources.core
        return {
            "limit": core.limit,
            "remaining": core.remaining,
            "used": core.used,
            "reset": datetime.fromtimestamp(core.reset, tz=UTC),
        }

    # -------------------------------------------------------------------------
    # PR Search (hard-fail)
    # -------------------------------------------------------------------------
    def build_month_query(self, month: str) -> str:
        """Search query for PRs of this repo created within a month."""
        return f"repo:{self._owner}/{self._repo} type:pr created:{month_search_window(month)}"

    async def search_pull_requests_page(
        self, query: str, page: int
    ) -> FetchResult[GitHubSearchPullRequest]:
        """Fetch one page of PR search results.

        Args:
            query: GitHub search query string
            page: 1-based page number

        Returns:
            FetchResult with the page's PRs, or the error for a failed status
        """
        try:
            resp = await self._rest.search.async_issues_and_pull_requests(
                q=query,
                page=page,
                per_page=self._config.page_size,
            )
        except RequestFailed as e:
            return FetchResult.failure(self._handle_error(e))

        # Strict: the page length decides when pagination stops
        prs = self._parse_items(GitHubSearchPullRequest, resp.parsed_data.items, strict=True)
        return FetchResult.success(prs)

    async def list_pull_requests_for_month(self, month: str) -> list[GitHubSearchPullRequest]:
        """List every PR created in the repository during a month.

        Pages are requested until a short or empty page comes back, with a
        fixed delay between pages.

        Args:
            month: Month in YYYY-MM format

        Returns:
            PRs in search result order

        Raises:
            GitHubAPIError: If any page returns a non-success status
            InvalidMonthError: If month is not YYYY-MM
        """
        query = self.build_month_query(month)
        page_size = self._config.page_size
        prs: list[GitHubSearchPullRequest] = []
        page = 1

        while True:
            self._log.debug("Searching PRs", month=month, page=page)
            items = (await self.search_pull_requests_page(query, page)).unwrap()
            if not items:
                break
            prs.extend(items)
            if len(items) < page_size:
                break
            page += 1
            await self._sleep(self._config.page_delay_seconds)

        self._log.info("Found {count} PRs for {month}", count=len(prs), month=month)
        return prs

    # -------------------------------------------------------------------------
    # Per-PR Sub-resources (soft-fail)
    # -------------------------------------------------------------------------
    async def _list_all(
        self,
        model: type[ModelT],
        method: Any,
        **kwargs: Any,
    ) -> FetchResult[ModelT]:
        """Collect every page of a list endpoint into a FetchResult."""
        try:
            raw: list[Any] = []
            item: Any
            async for item in self._github.paginate(
                method,
                owner=self._owner,
                repo=self._repo,
                per_page=self._config.page_size,
                **kwargs,
            ):
                raw.append(item)
        except RequestFailed as e:
            return FetchResult.failure(self._handle_error(e))

        return FetchResult.success(self._parse_items(model, raw))

    async def list_commits(self, pr_number: int) -> FetchResult[GitHubCommit]:
        """Fetch the commits of a PR."""
        return await self._list_all(
            GitHubCommit, self._rest.pulls.async_list_commits, pull_number=pr_number
        )

    async def list_reviews(self, pr_number: int) -> FetchResult[GitHubReview]:
        """Fetch the submitted reviews of a PR."""
        return await self._list_all(
            GitHubReview, self._rest.pulls.async_list_reviews, pull_number=pr_number
        )

    async def list_review_comments(self, pr_number: int) -> FetchResult[GitHubReviewComment]:
        """Fetch the inline diff comments of a PR."""
        return await self._list_all(
            GitHubReviewComment,
            self._rest.pulls.async_list_review_comments,
            pull_number=pr_number,
        )

    async def list_issue_comments(self, pr_number: int) -> FetchResult[GitHubIssueComment]:
        """Fetch the conversation comments of a PR."""
        return await self._list_all(
            GitHubIssueComment,
            self._rest.issues.async_list_comments,
            issue_number=pr_number,
        )

    def _soft(self, result: FetchResult[ModelT], pr_number: int, resource: str) -> list[ModelT]:
        """Degrade a failed sub-resource fetch to an empty list."""
        if not result.ok:
            bind_pr(self._owner, self._repo, pr_number).warning(
                "Could not fetch {resource}, using empty list",
                resource=resource,
                status=result.status_code,
            )
        return result.or_empty()

    async def fetch_commits(self, pr_number: int) -> list[GitHubCommit]:
        """Commits of a PR; empty if GitHub returns a non-success status."""
        return self._soft(await self.list_commits(pr_number), pr_number, "commits")

    async def fetch_comments_and_reviews(self, pr_number: int) -> PullRequestComments:
        """Reviews, review comments and issue comments of a PR, fetched concurrently.

        Each list independently degrades to empty on a non-success status.
        If one fetch raises, the others are cancelled before the error
        propagates.
        """
        async with asyncio.TaskGroup() as group:
            reviews = group.create_task(self.list_reviews(pr_number))
            review_comments = group.create_task(self.list_review_comments(pr_number))
            issue_comments = group.create_task(self.list_issue_comments(pr_number))
        return PullRequestComments(
            reviews=self._soft(reviews.result(), pr_number, "reviews"),
            review_comments=self._soft(review_comments.result(), pr_number, "review comments"),
            issue_comments=self._soft(issue_comments.result(), pr_number, "issue comments"),
        )

    # -------------------------------------------------------------------------
    # Month Collection
    # -------------------------------------------------------------------------
    async def fetch_pull_request_activity(
        self, pr: GitHubSearchPullRequest
    ) -> PullRequestActivity:
        """Fetch commits and comments/reviews of one PR concurrently.

        Raises:
            ExceptionGroup: If any sub-fetch raises; every sibling fetch has
                finished or been cancelled by then
        """
        async with asyncio.TaskGroup() as group:
            commits_task = group.create_task(self.fetch_commits(pr.number))
            comments_task = group.create_task(self.fetch_comments_and_reviews(pr.number))
        comments = comments_task.result()
        return PullRequestActivity(
            pr=pr,
            commits=commits_task.result(),
            reviews=comments.reviews,
            review_comments=comments.review_comments,
            issue_comments=comments.issue_comments,
        )

    async def get_complete_month_data(self, month: str) -> list[PullRequestActivity]:
        """Collect every PR of a month together with its sub-resources.

        PRs are processed one at a time with a fixed delay after each. A PR
        whose sub-resource fetch raises is still returned, with empty lists.

        Args:
            month: Month in YYYY-MM format

        Returns:
            One PullRequestActivity per PR, in search order

        Raises:
            GitHubAPIError: If the PR search fails
        """
        prs = await self.list_pull_requests_for_month(month)
        results: list[PullRequestActivity] = []

        for pr in prs:
            try:
                activity = await self.fetch_pull_request_activity(pr)
            except Exception as e:
                bind_pr(self._owner, self._repo, pr.number).warning(
                    "Failed to fetch PR activity, keeping PR with no facts",
                    error=_describe_error(e),
                )
                results.append(PullRequestActivity.empty(pr))
                continue

            results.append(activity)
            await self._sleep(self._config.pr_delay_seconds)

        return results

    # -------------------------------------------------------------------------
    # Parsing & Error Handling
    # -------------------------------------------------------------------------
    def _parse_items(
        self, model: type[ModelT], raw_items: list[Any], *, strict: bool = False
    ) -> list[ModelT]:
        """Validate githubkit models (or plain dicts) into our schemas.

        Invalid items are logged and skipped unless ``strict`` is set.
        """
        parsed: list[ModelT] = []
        for raw in raw_items:
            data = raw if isinstance(raw, dict) else raw.model_dump(exclude_unset=True)
            try:
                parsed.append(model.model_validate(data))
            except ValidationError as e:
                if strict:
                    raise
                self._log.warning(
                    "Skipping unparseable {model}", model=model.__name__, error=str(e)
                )
        return parsed

    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token", status_code=401)
        if status in (403, 429):
            headers = error.response.headers
            if headers.get("x-ratelimit-remaining") == "0" or status == 429:
                reset_ts = int(headers.get("x-ratelimit-reset", "0") or 0)
                reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                return GitHubRateLimitError(
                    "GitHub rate limit exceeded", status_code=status, reset_at=reset_at
                )
            return GitHubAPIError(f"Access forbidden: {error}", status_code=status)
        if status == 404:
            return GitHubNotFoundError(str(error))
        return GitHubAPIError(f"GitHub API Error: {status}", status_code=status)
