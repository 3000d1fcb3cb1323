"""Tests for SQLAlchemy ORM models."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from team_activity_db.db.models import (
    PLACEHOLDER_TRACK_ID,
    PLACEHOLDER_TRACK_NAME,
    CommentFact,
    CommentType,
    Contributor,
    MonthlySummary,
)
from tests.factories import (
    make_comment_fact,
    make_contributor,
    make_pr_fact,
    make_review_fact,
)


class TestContributorModel:
    """Tests for the Contributor model."""

    async def test_create_contributor(self, db_session):
        """Test creating a contributor with defaults."""
        contributor = Contributor(github_id="alice", name="alice")
        db_session.add(contributor)
        await db_session.flush()

        assert contributor.id is not None
        assert contributor.is_active is True
        assert contributor.track_id == PLACEHOLDER_TRACK_ID
        assert contributor.track_name == PLACEHOLDER_TRACK_NAME
        assert contributor.is_placeholder

    async def test_github_id_unique(self, db_session):
        """Two contributors cannot share a GitHub login."""
        make_contributor(db_session, github_id="alice")
        await db_session.flush()

        make_contributor(db_session, github_id="alice")
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_real_track_is_not_placeholder(self, db_session):
        """A contributor with a real track is not a placeholder."""
        contributor = make_contributor(db_session, track_id="be")
        await db_session.flush()

        assert not contributor.is_placeholder


class TestPullRequestFactModel:
    """Tests for the PullRequestFact model."""

    async def test_create_pr_fact(self, db_session):
        """Test creating a PR fact linked to its author."""
        alice = make_contributor(db_session)
        await db_session.flush()

        fact = make_pr_fact(db_session, alice, pr_number=7, commits_count=3)
        await db_session.flush()

        assert fact.id is not None
        assert fact.member_id == alice.id
        assert fact.commits_count == 3
        assert fact.merged_at is None

    async def test_unique_per_member_pr_and_repo(self, db_session):
        """The same PR of the same repo cannot be stored twice for one author."""
        alice = make_contributor(db_session)
        await db_session.flush()

        make_pr_fact(db_session, alice, pr_number=7)
        await db_session.flush()

        make_pr_fact(db_session, alice, pr_number=7)
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_same_number_in_other_repo_allowed(self, db_session):
        """PR numbers only collide within one repository."""
        alice = make_contributor(db_session)
        await db_session.flush()

        make_pr_fact(db_session, alice, pr_number=7, repo_name="api")
        make_pr_fact(db_session, alice, pr_number=7, repo_name="web")
        await db_session.flush()


class TestReviewFactModel:
    """Tests for the ReviewFact model."""

    async def test_repeated_reviews_are_distinct_rows(self, db_session):
        """Review facts have no natural key."""
        alice = make_contributor(db_session, github_id="alice")
        bob = make_contributor(db_session, github_id="bob")
        await db_session.flush()

        first = make_review_fact(db_session, bob, alice, review_state="COMMENTED")
        second = make_review_fact(db_session, bob, alice, review_state="APPROVED")
        await db_session.flush()

        assert first.id != second.id
        assert first.review_type == "review"
        assert first.comment_count == 1


class TestCommentFactModel:
    """Tests for the CommentFact model."""

    async def test_comment_type_round_trip(self, db_session):
        """Comment type is stored and loaded as the enum."""
        alice = make_contributor(db_session, github_id="alice")
        bob = make_contributor(db_session, github_id="bob")
        await db_session.flush()

        make_comment_fact(db_session, bob, alice, comment_type=CommentType.REVIEW_COMMENT)
        await db_session.commit()

        result = await db_session.execute(select(CommentFact))
        stored = result.scalar_one()
        assert stored.comment_type is CommentType.REVIEW_COMMENT

    async def test_forge_id_unique_per_repo(self, db_session):
        """A GitHub comment ID appears once per repository."""
        alice = make_contributor(db_session, github_id="alice")
        bob = make_contributor(db_session, github_id="bob")
        await db_session.flush()

        make_comment_fact(db_session, bob, alice, github_comment_id=99)
        await db_session.flush()

        make_comment_fact(db_session, bob, alice, github_comment_id=99)
        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestMonthlySummaryModel:
    """Tests for the MonthlySummary model."""

    async def test_summary_relationship(self, db_session):
        """Summaries are reachable from their contributor."""
        alice = make_contributor(db_session)
        await db_session.flush()

        db_session.add(MonthlySummary(member_id=alice.id, month="2025-03", commits_count=4))
        await db_session.flush()
        await db_session.refresh(alice, ["summaries"])

        assert len(alice.summaries) == 1
        assert alice.summaries[0].commits_count == 4
        assert alice.summaries[0].prs_count == 0

    async def test_one_summary_per_member_month(self, db_session):
        """(member, month) is unique."""
        alice = make_contributor(db_session)
        await db_session.flush()

        db_session.add(MonthlySummary(member_id=alice.id, month="2025-03"))
        await db_session.flush()

        db_session.add(MonthlySummary(member_id=alice.id, month="2025-03"))
        with pytest.raises(IntegrityError):
            await db_session.flush()
