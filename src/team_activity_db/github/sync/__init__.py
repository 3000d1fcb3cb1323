"""Month Sync module - GitHub to database synchronization.

This module provides services for syncing one repository's monthly PR
activity into the fact tables and rolling it up into summaries.

Services:
- MonthSyncService: fetch → clear → persist → aggregate for one scope
- MonthlyStatsAggregator: recompute per-contributor monthly summaries
- CommitManager: commit boundaries for sync phases and PR batches
- is_substantive: comment classification heuristic
- rank_summaries: composite-score leaderboard
"""

from .aggregator import ContributorMonthStats, MonthlyStatsAggregator
from .classifier import is_substantive
from .commit_manager import CommitManager
from .enums import OutputFormat
from .month_sync import MonthSyncService
from .ranking import LeaderboardEntry, composite_score, rank_summaries, summary_score
from .results import MonthSyncResult, SyncErrorResult

__all__ = [
    # Month sync
    "MonthSyncResult",
    "MonthSyncService",
    "OutputFormat",
    "SyncErrorResult",
    # Aggregation
    "ContributorMonthStats",
    "MonthlyStatsAggregator",
    # Classification
    "is_substantive",
    # Ranking
    "LeaderboardEntry",
    "composite_score",
    "rank_summaries",
    "summary_score",
    # Commit management
    "CommitManager",
]
