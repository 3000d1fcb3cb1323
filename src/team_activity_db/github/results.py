"""Typed outcomes for GitHub list fetches.

Two policies share one result type:
- hard-fail (PR search): ``unwrap()`` raises the carried error
- soft-fail (per-PR sub-resources): ``or_empty()`` degrades to ``[]``
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .exceptions import GitHubClientError

T = TypeVar("T")


@dataclass
class FetchResult(Generic[T]):
    """Result of fetching one list resource from GitHub."""

    items: list[T] = field(default_factory=list)
    """Parsed items (empty when the fetch failed)."""

    error: GitHubClientError | None = None
    """Error describing the failed fetch, if any."""

    @property
    def ok(self) -> bool:
        """True if the fetch returned a success status."""
        return self.error is None

    @property
    def status_code(self) -> int | None:
        """HTTP status of the failure (None on success)."""
        return self.error.status_code if self.error else None

    def unwrap(self) -> list[T]:
        """Return the items, raising the carried error if the fetch failed."""
        if self.error is not None:
            raise self.error
        return self.items

    def or_empty(self) -> list[T]:
        """Return the items, or an empty list if the fetch failed."""
        if self.error is not None:
            return []
        return self.items

    @classmethod
    def success(cls, items: list[T]) -> "FetchResult[T]":
        """Create a successful result."""
        return cls(items=items)

    @classmethod
    def failure(cls, error: GitHubClientError) -> "FetchResult[T]":
        """Create a failed result."""
        return cls(error=error)
