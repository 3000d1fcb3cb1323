"""Tests for sync-run logging."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from team_activity_db.logging import (
    bind_pr,
    bind_repo,
    describe_scope,
    get_logger,
    resolve_level,
    scope_context,
    setup_logging,
)
from team_activity_db.schemas import SyncScope

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

ANSI = re.compile(r"\x1b\[[0-9;]*m")
MARCH_SCOPE = SyncScope(month="2025-03", repo_owner="octo-org", repo_name="api")


@pytest.fixture(autouse=True)
def _no_sinks() -> Generator[None, None, None]:
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def records() -> Generator[list, None, None]:
    """Record dicts of everything logged at DEBUG and above."""
    captured: list = []
    sink_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(sink_id)


def console_text(capsys: pytest.CaptureFixture[str]) -> str:
    return ANSI.sub("", capsys.readouterr().err)


class TestResolveLevel:
    def test_base_level_without_flags(self) -> None:
        assert resolve_level("ERROR") == "ERROR"

    def test_quiet_raises_to_warning(self) -> None:
        assert resolve_level("DEBUG", quiet=True) == "WARNING"

    def test_verbose_wins_over_quiet(self) -> None:
        assert resolve_level("ERROR", verbose=True, quiet=True) == "DEBUG"


class TestDescribeScope:
    def test_month_and_repo(self) -> None:
        assert describe_scope({"month": "2025-03", "repo": "octo-org/api"}) == " [2025-03 octo-org/api]"

    def test_pr_number(self) -> None:
        extra = {"month": "2025-03", "repo": "octo-org/api", "pr": 42}
        assert describe_scope(extra) == " [2025-03 octo-org/api #42]"

    def test_repo_only(self) -> None:
        assert describe_scope({"name": "github", "repo": "octo-org/api"}) == " [octo-org/api]"

    def test_no_scope(self) -> None:
        assert describe_scope({"name": "sync"}) == ""


class TestSetupLogging:
    def test_console_line_shows_scope(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        with scope_context(MARCH_SCOPE) as sync_logger:
            sync_logger.info("Cleared scope")

        assert "sync [2025-03 octo-org/api] - Cleared scope" in console_text(capsys)

    def test_quiet_hides_sync_progress(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert setup_logging(level="INFO", quiet=True) == "WARNING"

        with scope_context(MARCH_SCOPE) as sync_logger:
            sync_logger.info("Fetching month data from GitHub")
            get_logger("team_activity_db.github.sync.month_sync").warning("Skipping PR #7 with no author")

        err = console_text(capsys)
        assert "Fetching month data" not in err
        assert "Skipping PR #7 with no author" in err

    def test_verbose_shows_page_fetches(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert setup_logging(level="WARNING", verbose=True) == "DEBUG"

        bind_repo("octo-org", "api").debug("Fetched search page {page}", page=2)

        assert "github [octo-org/api] - Fetched search page 2" in console_text(capsys)

    def test_file_sink_logs_debug_with_scope(self, tmp_path: Path) -> None:
        log_file = tmp_path / "sync.log"
        setup_logging(level="WARNING", log_file=log_file)

        with scope_context(MARCH_SCOPE):
            get_logger("team_activity_db.github.sync.commit_manager").debug("Committed phase clear")

        content = log_file.read_text()
        assert "DEBUG" in content
        assert "team_activity_db.github.sync.commit_manager:" in content
        assert "[2025-03 octo-org/api] | Committed phase clear" in content

    def test_serialized_file_sink_keeps_extra(self, tmp_path: Path) -> None:
        log_file = tmp_path / "sync.jsonl"
        setup_logging(level="INFO", log_file=log_file, serialize=True)

        bind_pr("octo-org", "api", 42).warning("Could not fetch reviews")

        content = log_file.read_text()
        assert '"pr": 42' in content
        assert '"repo": "octo-org/api"' in content


class TestStdlibRouting:
    def test_stdlib_records_reach_loguru(self) -> None:
        records: list = []
        setup_logging(level="INFO")
        sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")

        try:
            logging.getLogger("team_activity_db.tests.stdlib").warning("Pool exhausted")
        finally:
            logger.remove(sink_id)

        routed = [r for r in records if r["message"] == "Pool exhausted"]
        assert routed
        assert routed[0]["extra"]["name"] == "team_activity_db.tests.stdlib"
        assert routed[0]["level"].name == "WARNING"

    @pytest.mark.parametrize("name", ["sqlalchemy.engine", "aiosqlite", "httpx", "httpcore"])
    def test_third_party_loggers_quiet_by_default(self, name: str) -> None:
        setup_logging(level="INFO")

        assert logging.getLogger(name).level == logging.WARNING

    def test_sql_statements_shown_when_verbose(self) -> None:
        setup_logging(level="INFO", verbose=True)

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        assert logging.getLogger("httpx").level == logging.DEBUG


class TestBinders:
    def test_get_logger_binds_module_name(self, records: list) -> None:
        get_logger("team_activity_db.github.sync.aggregator").info("Recomputing monthly stats")

        assert records[0]["extra"] == {"name": "team_activity_db.github.sync.aggregator"}

    def test_bind_pr(self, records: list) -> None:
        bind_pr("octo-org", "api", 42).warning("Could not fetch commits")

        assert records[0]["extra"] == {"name": "github", "repo": "octo-org/api", "pr": 42}


class TestScopeContext:
    def test_yields_sync_logger(self, records: list) -> None:
        with scope_context(MARCH_SCOPE) as sync_logger:
            sync_logger.info("Fetching month data from GitHub")

        assert records[0]["extra"] == {"name": "sync", "month": "2025-03", "repo": "octo-org/api"}

    def test_scope_reaches_other_components(self, records: list) -> None:
        with scope_context(MARCH_SCOPE):
            get_logger("team_activity_db.github.sync.aggregator").info("Recomputing monthly stats")

        assert records[0]["extra"]["month"] == "2025-03"
        assert records[0]["extra"]["repo"] == "octo-org/api"

    def test_scope_cleared_after_block(self, records: list) -> None:
        with scope_context(MARCH_SCOPE):
            pass
        get_logger("team_activity_db.cli").info("Done")

        assert "month" not in records[0]["extra"]

    async def test_scope_reaches_tasks_started_inside(self, records: list) -> None:
        async def fetch_reviews() -> None:
            bind_pr("octo-org", "api", 42).warning("Could not fetch reviews")

        with scope_context(MARCH_SCOPE):
            async with asyncio.TaskGroup() as group:
                group.create_task(fetch_reviews())

        assert records[0]["extra"] == {
            "name": "github",
            "month": "2025-03",
            "repo": "octo-org/api",
            "pr": 42,
        }
