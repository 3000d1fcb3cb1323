"""Commit Manager - commit boundaries for a monthly sync.

A sync is not one transaction: the clear phase, each batch of PR facts and
the aggregation pass are committed separately. A crash mid-sync therefore
leaves the scope cleared and partly refilled, and the next run of the
same scope replaces it again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from team_activity_db.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class CommitManager:
    """Manages commit boundaries for sync phases and PR batches.

    Usage:
        commit_manager = CommitManager(session, batch_size=1)

        await commit_manager.commit_phase("clear")
        for activity in month_data:
            ...  # write facts for one PR
            await commit_manager.record_success()  # Auto-commits at batch_size
        await commit_manager.finalize()  # Commit remaining

    Attributes:
        uncommitted_count: PRs written since the last commit.
        total_committed: PRs committed across all batches.
    """

    def __init__(self, session: AsyncSession, batch_size: int = 1) -> None:
        """Initialize the commit manager.

        Args:
            session: Async SQLAlchemy session to commit on.
            batch_size: PRs written before an automatic commit.
        """
        self._session = session
        self._batch_size = batch_size
        self._uncommitted_count = 0
        self._total_committed = 0

    @property
    def uncommitted_count(self) -> int:
        return self._uncommitted_count

    @property
    def total_committed(self) -> int:
        return self._total_committed

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def commit_phase(self, phase: str) -> None:
        """Commit everything pending at the end of a sync phase."""
        await self._session.commit()
        logger.debug("Committed phase {phase}", phase=phase)

    async def record_success(self) -> int:
        """Record one written PR, committing when the batch is full.

        Returns:
            Number of PRs committed (0 if the batch is not full yet).
        """
        self._uncommitted_count += 1
        if self._uncommitted_count >= self._batch_size:
            return await self.commit()
        return 0

    async def commit(self) -> int:
        """Commit pending PR facts.

        Returns:
            Number of PRs committed (0 if nothing to commit).
        """
        if self._uncommitted_count == 0:
            return 0

        await self._session.commit()

        committed = self._uncommitted_count
        self._total_committed += committed
        self._uncommitted_count = 0

        logger.debug(
            "Committed batch of {committed} PRs (total: {total})",
            committed=committed,
            total=self._total_committed,
        )
        return committed

    async def finalize(self) -> int:
        """Commit any PR facts left from a partial batch."""
        return await self.commit()
