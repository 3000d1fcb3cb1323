"""Repository pattern implementation for database access.

This module provides repository classes that encapsulate all database
access logic, providing a clean abstraction over SQLAlchemy models.
"""

from .base import BaseRepository
from .comment_fact import CommentFactRepository, CommentStats
from .contributor import ContributorRepository
from .monthly_summary import MonthlySummaryRepository
from .pull_request_fact import PullRequestFactRepository, PullRequestStats
from .review_fact import ReviewFactRepository

__all__ = [
    "BaseRepository",
    "CommentFactRepository",
    "CommentStats",
    "ContributorRepository",
    "MonthlySummaryRepository",
    "PullRequestFactRepository",
    "PullRequestStats",
    "ReviewFactRepository",
]
