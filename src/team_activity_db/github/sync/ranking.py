"""Leaderboard ranking over monthly summaries.

The composite score is derived at read time and never stored.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from team_activity_db.db.models import Contributor, MonthlySummary

COMMIT_WEIGHT = 1
PR_WEIGHT = 2
COMMENT_WEIGHT = 1


@dataclass(frozen=True)
class LeaderboardEntry:
    """One ranked contributor for a month."""

    rank: int
    github_id: str
    name: str
    track_name: str
    commits_count: int
    prs_count: int
    total_comments_count: int
    pr_comments_count: int
    score: int

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rank": self.rank,
            "githubId": self.github_id,
            "name": self.name,
            "trackName": self.track_name,
            "commits": self.commits_count,
            "prs": self.prs_count,
            "totalComments": self.total_comments_count,
            "prComments": self.pr_comments_count,
            "score": self.score,
        }


def composite_score(commits_count: int, prs_count: int, total_comments_count: int) -> int:
    """commits + 2 * prs + total comments."""
    return (
        commits_count * COMMIT_WEIGHT
        + prs_count * PR_WEIGHT
        + total_comments_count * COMMENT_WEIGHT
    )


def summary_score(summary: MonthlySummary | None) -> int:
    """Composite score of a summary row; a missing row scores 0."""
    if summary is None:
        return 0
    return composite_score(
        summary.commits_count, summary.prs_count, summary.total_comments_count
    )


def rank_summaries(
    rows: Iterable[tuple[Contributor, MonthlySummary | None]],
) -> list[LeaderboardEntry]:
    """Rank contributors by composite score, highest first.

    Ties keep their input order (sorted() is stable).
    """
    ordered = sorted(rows, key=lambda row: summary_score(row[1]), reverse=True)

    entries: list[LeaderboardEntry] = []
    for position, (contributor, summary) in enumerate(ordered, start=1):
        entries.append(
            LeaderboardEntry(
                rank=position,
                github_id=contributor.github_id,
                name=contributor.name,
                track_name=contributor.track_name,
                commits_count=summary.commits_count if summary else 0,
                prs_count=summary.prs_count if summary else 0,
                total_comments_count=summary.total_comments_count if summary else 0,
                pr_comments_count=summary.pr_comments_count if summary else 0,
                score=summary_score(summary),
            )
        )
    return entries
