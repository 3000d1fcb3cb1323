"""Pydantic schemas for fact rows, contributors and monthly summaries."""

from datetime import datetime

from pydantic import Field

from team_activity_db.db.models import CommentType

from .base import SchemaBase
from .scope import SyncScope


class ContributorProfile(SchemaBase):
    """Profile fields applied when reconciling a contributor."""

    github_id: str = Field(min_length=1, max_length=100, description="GitHub login")
    name: str = Field(min_length=1, max_length=100, description="Display name")
    track_id: str = Field(min_length=1, max_length=50, description="Track/team identifier")
    track_name: str = Field(min_length=1, max_length=100, description="Track/team label")


class ContributorRead(SchemaBase):
    """Schema for reading contributor data."""

    id: int
    github_id: str
    name: str
    track_id: str
    track_name: str
    is_active: bool


class PullRequestFactCreate(SchemaBase):
    """Values for one PR fact row."""

    member_id: int
    pr_number: int = Field(gt=0)
    pr_title: str
    pr_state: str = Field(max_length=20)
    commits_count: int = Field(default=0, ge=0)
    received_comments_count: int = Field(default=0, ge=0)
    received_reviews_count: int = Field(default=0, ge=0)
    created_at: datetime
    updated_at: datetime
    merged_at: datetime | None = None
    pr_url: str
    scope: SyncScope


class ReviewFactCreate(SchemaBase):
    """Values for one review fact row."""

    reviewer_id: int
    pr_number: int = Field(gt=0)
    pr_author_id: int
    review_state: str | None = None
    reviewed_at: datetime | None = None
    scope: SyncScope


class CommentFactCreate(SchemaBase):
    """Values for one comment fact row."""

    commenter_id: int
    pr_number: int = Field(gt=0)
    pr_author_id: int
    comment_type: CommentType
    comment_length: int = Field(ge=0)
    is_substantive: bool
    created_at: datetime
    github_comment_id: int
    scope: SyncScope

