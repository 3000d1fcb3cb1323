"""Database module for Team Activity DB."""

from team_activity_db.db.engine import (
    create_tables,
    dispose_engine,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
)
from team_activity_db.db.models import (
    Base,
    CommentFact,
    CommentType,
    Contributor,
    MonthlySummary,
    PullRequestFact,
    ReviewFact,
)
from team_activity_db.db.repositories import (
    BaseRepository,
    CommentFactRepository,
    ContributorRepository,
    MonthlySummaryRepository,
    PullRequestFactRepository,
    ReviewFactRepository,
)

__all__ = [
    # Models
    "Base",
    "CommentFact",
    "CommentType",
    "Contributor",
    "MonthlySummary",
    "PullRequestFact",
    "ReviewFact",
    # Engine
    "create_tables",
    "dispose_engine",
    "drop_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    # Repositories
    "BaseRepository",
    "CommentFactRepository",
    "ContributorRepository",
    "MonthlySummaryRepository",
    "PullRequestFactRepository",
    "ReviewFactRepository",
]
