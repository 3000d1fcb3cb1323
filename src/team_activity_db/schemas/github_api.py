"""Pydantic schemas for parsing GitHub API responses.

These schemas map to the subset of the GitHub REST API response structure
that monthly sync reads. Unknown fields are ignored.
See: https://docs.github.com/en/rest/search/search#search-issues-and-pull-requests
"""

from datetime import datetime

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    """GitHub user object from API responses."""

    login: str = Field(description="GitHub username")
    id: int | None = Field(default=None, description="GitHub user ID")
    type: str = Field(default="User", description="User type")


class GitHubPullRequestRef(BaseModel):
    """The ``pull_request`` object attached to a PR search result."""

    url: str | None = Field(default=None, description="API URL of the PR")
    html_url: str | None = Field(default=None, description="GitHub PR URL")
    merged_at: datetime | None = Field(default=None, description="When PR was merged")


class GitHubSearchPullRequest(BaseModel):
    """A pull request as returned by the issue search endpoint.

    Maps to: GET /search/issues?q=repo:{owner}/{repo}+type:pr
    """

    number: int = Field(description="PR number")
    title: str = Field(description="PR title")
    state: str = Field(description="PR state (open, closed)")
    html_url: str = Field(description="GitHub PR URL")
    user: GitHubUser | None = Field(default=None, description="PR author")
    created_at: datetime = Field(description="When PR was created")
    updated_at: datetime = Field(description="Last update timestamp")
    closed_at: datetime | None = Field(default=None, description="When PR was closed")
    pull_request: GitHubPullRequestRef | None = Field(
        default=None, description="PR-specific fields (merge timestamp)"
    )

    @property
    def merged_at(self) -> datetime | None:
        """Merge timestamp, if the PR was merged."""
        if self.pull_request is None:
            return None
        return self.pull_request.merged_at

    @property
    def author_login(self) -> str | None:
        """Login of the PR author (None for deleted accounts)."""
        return self.user.login if self.user else None


class GitHubCommitAuthor(BaseModel):
    """Commit author info (from git, not GitHub user)."""

    name: str | None = Field(default=None, description="Author name")
    email: str | None = Field(default=None, description="Author email")
    date: datetime | None = Field(default=None, description="Commit date (UTC)")


class GitHubCommitDetail(BaseModel):
    """Nested commit detail object."""

    message: str = Field(default="", description="Commit message")
    author: GitHubCommitAuthor | None = Field(default=None, description="Commit author info")


class GitHubCommit(BaseModel):
    """GitHub commit object from the PR commits endpoint."""

    sha: str = Field(description="Commit SHA")
    commit: GitHubCommitDetail = Field(default_factory=GitHubCommitDetail)
    author: GitHubUser | None = Field(default=None, description="Linked GitHub account")


class GitHubReview(BaseModel):
    """GitHub review object from the reviews endpoint."""

    id: int = Field(description="Review ID")
    user: GitHubUser | None = Field(default=None, description="Reviewer")
    state: str = Field(description="Review state (APPROVED, CHANGES_REQUESTED, COMMENTED, etc.)")
    body: str | None = Field(default=None, description="Review summary body")
    submitted_at: datetime | None = Field(default=None, description="When review was submitted")


class GitHubReviewComment(BaseModel):
    """Inline diff comment from the PR review comments endpoint."""

    id: int = Field(description="Comment ID")
    user: GitHubUser | None = Field(default=None, description="Commenter")
    body: str = Field(default="", description="Comment text")
    created_at: datetime = Field(description="When comment was created")
    updated_at: datetime | None = Field(default=None, description="Last edit timestamp")
    path: str | None = Field(default=None, description="File the comment is attached to")
    line: int | None = Field(default=None, description="Line the comment is attached to")


class GitHubIssueComment(BaseModel):
    """Conversation comment from the issue comments endpoint."""

    id: int = Field(description="Comment ID")
    user: GitHubUser | None = Field(default=None, description="Commenter")
    body: str | None = Field(default="", description="Comment text")
    created_at: datetime = Field(description="When comment was created")
    updated_at: datetime | None = Field(default=None, description="Last edit timestamp")


class PullRequestActivity(BaseModel):
    """Everything fetched for one PR during a monthly sync."""

    pr: GitHubSearchPullRequest
    commits: list[GitHubCommit] = Field(default_factory=list)
    reviews: list[GitHubReview] = Field(default_factory=list)
    review_comments: list[GitHubReviewComment] = Field(default_factory=list)
    issue_comments: list[GitHubIssueComment] = Field(default_factory=list)

    @property
    def received_comments_count(self) -> int:
        """Review comments plus issue comments left on the PR."""
        return len(self.review_comments) + len(self.issue_comments)

    @classmethod
    def empty(cls, pr: GitHubSearchPullRequest) -> "PullRequestActivity":
        """Activity for a PR whose sub-resources could not be fetched."""
        return cls(pr=pr)
