"""SQLAlchemy ORM models for Team Activity DB.

Fact tables hold one row per observed GitHub event and are scoped by
(month, repo_owner, repo_name). The monthly summary table is derived from
them by the aggregator.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class CommentType(str, Enum):
    """Where a comment was left on a PR."""

    REVIEW_COMMENT = "review_comment"  # inline, on the diff
    ISSUE_COMMENT = "issue_comment"  # conversation tab


PLACEHOLDER_TRACK_ID = "unknown"
PLACEHOLDER_TRACK_NAME = "Unknown Track"


# ------------------------------------------------------------------------------
# Contributor model
# ------------------------------------------------------------------------------
class Contributor(Base):
    """Team member identified by GitHub login."""

    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    github_id: Mapped[str] = mapped_column(String(100), unique=True)
    track_id: Mapped[str] = mapped_column(String(50), default=PLACEHOLDER_TRACK_ID)
    track_name: Mapped[str] = mapped_column(String(100), default=PLACEHOLDER_TRACK_NAME)
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    summaries: Mapped[list["MonthlySummary"]] = relationship(
        back_populates="contributor",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Contributor(id={self.id}, github_id='{self.github_id}')>"

    @property
    def is_placeholder(self) -> bool:
        """True until an external profile reconciliation sets a real track."""
        return self.track_id == PLACEHOLDER_TRACK_ID


# ------------------------------------------------------------------------------
# PullRequestFact model
# ------------------------------------------------------------------------------
class PullRequestFact(Base):
    """One authored PR observed during a monthly sync."""

    __tablename__ = "pr_activities"

    id: Mapped[int] = mapped_column(primary_key=True)
    member_id: Mapped[int] = mapped_column(ForeignKey("team_members.id", ondelete="CASCADE"))

    pr_number: Mapped[int] = mapped_column()
    pr_title: Mapped[str] = mapped_column(Text)
    pr_state: Mapped[str] = mapped_column(String(20))
    commits_count: Mapped[int] = mapped_column(default=0)
    received_comments_count: Mapped[int] = mapped_column(default=0)
    received_reviews_count: Mapped[int] = mapped_column(default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime)
    merged_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Scope
    month: Mapped[str] = mapped_column(String(7))
    repo_owner: Mapped[str] = mapped_column(String(100))
    repo_name: Mapped[str] = mapped_column(String(100))

    pr_url: Mapped[str] = mapped_column(Text)

    member: Mapped["Contributor"] = relationship()

    __table_args__ = (
        UniqueConstraint(
            "member_id", "pr_number", "repo_owner", "repo_name", name="uq_member_pr_repo"
        ),
        Index("idx_pr_activities_member_month", "member_id", "month"),
    )

    def __repr__(self) -> str:
        return (
            f"<PullRequestFact(id={self.id}, repo='{self.repo_owner}/{self.repo_name}', "
            f"number={self.pr_number})>"
        )


# ------------------------------------------------------------------------------
# ReviewFact model
# ------------------------------------------------------------------------------
class ReviewFact(Base):
    """One submitted review on a PR.

    There is no natural key: repeated reviews by the same reviewer are
    distinct rows, so re-sync idempotence depends on the scope clear.
    """

    __tablename__ = "review_activities"

    id: Mapped[int] = mapped_column(primary_key=True)
    reviewer_id: Mapped[int] = mapped_column(ForeignKey("team_members.id", ondelete="CASCADE"))
    pr_number: Mapped[int] = mapped_column()
    pr_author_id: Mapped[int] = mapped_column(ForeignKey("team_members.id", ondelete="CASCADE"))
    review_type: Mapped[str] = mapped_column(String(20), default="review")
    review_state: Mapped[str | None] = mapped_column(String(20), nullable=True)
    comment_count: Mapped[int] = mapped_column(default=1)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    month: Mapped[str] = mapped_column(String(7))
    repo_owner: Mapped[str] = mapped_column(String(100))
    repo_name: Mapped[str] = mapped_column(String(100))

    __table_args__ = (Index("idx_review_activities_reviewer_month", "reviewer_id", "month"),)

    def __repr__(self) -> str:
        return (
            f"<ReviewFact(id={self.id}, reviewer_id={self.reviewer_id}, "
            f"pr={self.pr_number}, state='{self.review_state}')>"
        )


# ------------------------------------------------------------------------------
# CommentFact model
# ------------------------------------------------------------------------------
class CommentFact(Base):
    """One review comment or issue comment on a PR."""

    __tablename__ = "comment_details"

    id: Mapped[int] = mapped_column(primary_key=True)
    commenter_id: Mapped[int] = mapped_column(ForeignKey("team_members.id", ondelete="CASCADE"))
    pr_number: Mapped[int] = mapped_column()
    pr_author_id: Mapped[int] = mapped_column(ForeignKey("team_members.id", ondelete="CASCADE"))
    comment_type: Mapped[CommentType] = mapped_column()
    comment_length: Mapped[int] = mapped_column(default=0)
    is_substantive: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime)

    month: Mapped[str] = mapped_column(String(7))
    repo_owner: Mapped[str] = mapped_column(String(100))
    repo_name: Mapped[str] = mapped_column(String(100))

    github_comment_id: Mapped[int] = mapped_column(BigInteger)

    __table_args__ = (
        UniqueConstraint(
            "github_comment_id", "repo_owner", "repo_name", name="uq_comment_repo"
        ),
        Index("idx_comment_details_commenter_month", "commenter_id", "month"),
        Index("idx_comment_details_pr_month", "pr_number", "month"),
    )

    def __repr__(self) -> str:
        return (
            f"<CommentFact(id={self.id}, github_comment_id={self.github_comment_id}, "
            f"type='{self.comment_type.value}')>"
        )


# ------------------------------------------------------------------------------
# MonthlySummary model
# ------------------------------------------------------------------------------
class MonthlySummary(Base):
    """Per-contributor aggregate for one month, across all synced repos.

    review_comments_count holds the authored comment count (it mirrors
    total_comments_count), not a review-specific figure.
    """

    __tablename__ = "team_performances"

    id: Mapped[int] = mapped_column(primary_key=True)
    member_id: Mapped[int] = mapped_column(ForeignKey("team_members.id", ondelete="CASCADE"))
    month: Mapped[str] = mapped_column(String(7))

    commits_count: Mapped[int] = mapped_column(default=0)
    prs_count: Mapped[int] = mapped_column(default=0)
    review_comments_count: Mapped[int] = mapped_column(default=0)
    pr_comments_count: Mapped[int] = mapped_column(default=0)  # received on own PRs
    total_comments_count: Mapped[int] = mapped_column(default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    contributor: Mapped["Contributor"] = relationship(back_populates="summaries")

    __table_args__ = (
        UniqueConstraint("member_id", "month", name="uq_member_month"),
        Index("idx_team_performances_month", "month"),
    )

    def __repr__(self) -> str:
        return f"<MonthlySummary(member_id={self.member_id}, month='{self.month}')>"
