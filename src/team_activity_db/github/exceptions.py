"""GitHub client exceptions."""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthenticationError(GitHubClientError):
    """Raised when no token is configured or the token is rejected (401)."""

    pass


class GitHubAPIError(GitHubClientError):
    """Raised when GitHub answers with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message, status_code=status_code)


class GitHubRateLimitError(GitHubAPIError):
    """Raised when rate limit is exceeded (403/429 with exhausted quota)."""

    def __init__(
        self, message: str, status_code: int = 403, reset_at: datetime | None = None
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.reset_at = reset_at


class GitHubNotFoundError(GitHubAPIError):
    """Raised when a resource is not found (404)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)
