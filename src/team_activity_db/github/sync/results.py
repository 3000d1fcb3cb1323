"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from dataclasses import dataclass


@dataclass
class MonthSyncResult:
    """Result of one (month, repo) sync."""

    month: str
    repo_owner: str
    repo_name: str

    processed_prs: int = 0
    """PRs whose facts were written."""

    total_comments: int = 0
    """Review comments and issue comments written (authored by a known user)."""

    total_items: int = 0
    """PRs returned by GitHub for the month."""

    review_facts: int = 0
    """Review facts written."""

    created_contributors: int = 0
    """Placeholder contributors created for unseen logins."""

    @property
    def message(self) -> str:
        """Human-readable one-line summary."""
        return (
            f"Successfully synced {self.processed_prs} PRs "
            f"with {self.total_comments} comments"
        )

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": True,
            "message": self.message,
            "data": {
                "month": self.month,
                "repo": f"{self.repo_owner}/{self.repo_name}",
                "processedPRs": self.processed_prs,
                "totalComments": self.total_comments,
                "totalItems": self.total_items,
                "reviewFacts": self.review_facts,
                "createdContributors": self.created_contributors,
            },
        }


@dataclass
class SyncErrorResult:
    """Structured failure reported by the sync trigger."""

    error: str
    details: str
    status: int = 500

    @classmethod
    def from_exception(
        cls, error: Exception, *, message: str = "Internal server error during sync"
    ) -> "SyncErrorResult":
        """Create an error result from an exception."""
        return cls(error=message, details=str(error), status=500)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": False,
            "error": self.error,
            "details": self.details,
            "status": self.status,
        }
