"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client bound to one repository
- FetchResult: Typed outcome of a fetch (hard-fail vs soft-fail policies)
- Month Sync: MonthSyncService, MonthSyncResult, MonthlyStatsAggregator
"""

from .client import GitHubClient, PullRequestComments
from .exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .results import FetchResult
from .sync import (
    MonthlyStatsAggregator,
    MonthSyncResult,
    MonthSyncService,
    OutputFormat,
    SyncErrorResult,
)

__all__ = [
    # Client
    "FetchResult",
    "GitHubClient",
    "PullRequestComments",
    # Exceptions
    "GitHubAPIError",
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    # Month sync
    "MonthlyStatsAggregator",
    "MonthSyncResult",
    "MonthSyncService",
    "OutputFormat",
    "SyncErrorResult",
]
