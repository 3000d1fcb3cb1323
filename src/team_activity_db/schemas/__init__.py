"""Pydantic schemas for Team Activity DB.

This module provides GitHub response parsing, input validation and
output serialization models.
"""

from .base import SchemaBase
from .facts import (
    CommentFactCreate,
    ContributorProfile,
    ContributorRead,
    PullRequestFactCreate,
    ReviewFactCreate,
)
from .github_api import (
    GitHubCommit,
    GitHubCommitAuthor,
    GitHubCommitDetail,
    GitHubIssueComment,
    GitHubPullRequestRef,
    GitHubReview,
    GitHubReviewComment,
    GitHubSearchPullRequest,
    GitHubUser,
    PullRequestActivity,
)
from .scope import (
    InvalidMonthError,
    SyncScope,
    month_date_range,
    month_search_window,
    parse_month,
    parse_repo_string,
)

__all__ = [
    # Base
    "SchemaBase",
    # GitHub API
    "GitHubCommit",
    "GitHubCommitAuthor",
    "GitHubCommitDetail",
    "GitHubIssueComment",
    "GitHubPullRequestRef",
    "GitHubReview",
    "GitHubReviewComment",
    "GitHubSearchPullRequest",
    "GitHubUser",
    "PullRequestActivity",
    # Facts
    "CommentFactCreate",
    "ContributorProfile",
    "ContributorRead",
    "PullRequestFactCreate",
    "ReviewFactCreate",
    # Scope
    "InvalidMonthError",
    "SyncScope",
    "month_date_range",
    "month_search_window",
    "parse_month",
    "parse_repo_string",
]
