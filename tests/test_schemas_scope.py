"""Tests for month parsing and sync scopes."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from team_activity_db.schemas.scope import (
    InvalidMonthError,
    SyncScope,
    month_date_range,
    month_search_window,
    parse_month,
    parse_repo_string,
)


class TestParseMonth:
    """Tests for parse_month."""

    def test_valid(self):
        assert parse_month("2025-03") == (2025, 3)

    @pytest.mark.parametrize("month", ["2025-3", "2025-13", "2025-00", "March", "2025/03", ""])
    def test_invalid(self, month: str):
        with pytest.raises(InvalidMonthError):
            parse_month(month)

    def test_invalid_month_is_value_error(self):
        with pytest.raises(ValueError):
            parse_month("25-03")


class TestMonthRange:
    """Tests for month_date_range and month_search_window."""

    def test_leap_february(self):
        start, end = month_date_range("2024-02")

        assert start == datetime(2024, 2, 1, 0, 0, 0, tzinfo=UTC)
        assert end == datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC)

    def test_plain_february(self):
        _, end = month_date_range("2025-02")
        assert end.day == 28

    def test_december(self):
        start, end = month_date_range("2024-12")
        assert (start.month, end.month, end.day) == (12, 12, 31)

    def test_search_window(self):
        assert month_search_window("2024-02") == "2024-02-01..2024-02-29"


class TestParseRepoString:
    """Tests for parse_repo_string."""

    def test_valid(self):
        assert parse_repo_string("octo-org/api") == ("octo-org", "api")

    @pytest.mark.parametrize("repo", ["octo-org", "octo-org/", "/api", "a/b/c", ""])
    def test_invalid(self, repo: str):
        with pytest.raises(ValueError):
            parse_repo_string(repo)


class TestSyncScope:
    """Tests for SyncScope."""

    def test_full_name(self):
        scope = SyncScope(month="2025-03", repo_owner="octo-org", repo_name="api")
        assert scope.full_name == "octo-org/api"

    def test_invalid_month(self):
        with pytest.raises(ValidationError):
            SyncScope(month="2025-3", repo_owner="octo-org", repo_name="api")

    def test_empty_repo_name(self):
        with pytest.raises(ValidationError):
            SyncScope(month="2025-03", repo_owner="octo-org", repo_name="")
