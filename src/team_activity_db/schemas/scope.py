"""Month and sync scope schemas.

A sync scope is the (month, repo_owner, repo_name) triple that bounds one
clear/persist cycle. Months are always carried as ``YYYY-MM`` strings.
"""

import calendar
import re
from datetime import UTC, datetime

from pydantic import Field, field_validator

from .base import SchemaBase

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


class InvalidMonthError(ValueError):
    """Raised when a month is not a valid ``YYYY-MM`` string."""


def parse_month(month: str) -> tuple[int, int]:
    """Split a ``YYYY-MM`` string into (year, month).

    Raises:
        InvalidMonthError: If the format or month number is invalid
    """
    match = MONTH_PATTERN.match(month.strip()) if isinstance(month, str) else None
    if match is None:
        raise InvalidMonthError(f"Month must be in YYYY-MM format, got {month!r}")

    year, month_num = int(match.group(1)), int(match.group(2))
    if not 1 <= month_num <= 12:
        raise InvalidMonthError(f"Month number out of range in {month!r}")
    return year, month_num


def month_date_range(month: str) -> tuple[datetime, datetime]:
    """Closed UTC range covering a calendar month.

    Returns:
        (first day 00:00:00, last day 23:59:59)
    """
    year, month_num = parse_month(month)
    last_day = calendar.monthrange(year, month_num)[1]
    start = datetime(year, month_num, 1, 0, 0, 0, tzinfo=UTC)
    end = datetime(year, month_num, last_day, 23, 59, 59, tzinfo=UTC)
    return start, end


def month_search_window(month: str) -> str:
    """GitHub search ``created:`` qualifier value for a month, e.g. ``2024-02-01..2024-02-29``."""
    start, end = month_date_range(month)
    return f"{start.date().isoformat()}..{end.date().isoformat()}"


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Parse an ``owner/name`` repository string.

    Raises:
        ValueError: If the string is not exactly two non-empty parts
    """
    parts = repo.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Repository must be in owner/name format, got {repo!r}")
    return parts[0], parts[1]


class SyncScope(SchemaBase):
    """The (month, repo_owner, repo_name) triple a sync operates on."""

    month: str = Field(description="Month in YYYY-MM format")
    repo_owner: str = Field(min_length=1, max_length=100, description="Repository owner")
    repo_name: str = Field(min_length=1, max_length=100, description="Repository name")

    @field_validator("month")
    @classmethod
    def validate_month(cls, v: str) -> str:
        """Reject months that are not YYYY-MM."""
        parse_month(v)
        return v

    @property
    def full_name(self) -> str:
        """Repository in owner/name form."""
        return f"{self.repo_owner}/{self.repo_name}"
