"""Loguru logging for sync runs.

Every record carries a ``name`` (module or component). While a month sync
runs, records also carry the ``month`` and ``repo`` of its scope, whichever
component logs them, and the console line shows that scope:

    14:02:11 | INFO     | sync [2025-03 octo-org/api] - Cleared scope
    14:02:12 | WARNING  | github [2025-03 octo-org/api #42] - Could not fetch reviews
"""

from __future__ import annotations

import inspect
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

    from team_activity_db.schemas.scope import SyncScope

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Stdlib loggers kept at WARNING unless debugging, with their debug level
_THIRD_PARTY_DEBUG_LEVELS = {
    "sqlalchemy.engine": logging.INFO,  # SQL statements, not result rows
    "aiosqlite": logging.INFO,
    "httpx": logging.DEBUG,  # githubkit transport
    "httpcore": logging.INFO,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib records (SQLAlchemy, aiosqlite, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def resolve_level(level: LogLevel, *, verbose: bool = False, quiet: bool = False) -> LogLevel:
    """Console level after the CLI flags; --verbose wins over --quiet."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return level


def describe_scope(extra: dict[str, Any]) -> str:
    """Render month, repo and PR context as `` [2025-03 owner/repo #42]``."""
    parts = [str(extra[key]) for key in ("month", "repo") if key in extra]
    if "pr" in extra:
        parts.append(f"#{extra['pr']}")
    return f" [{' '.join(parts)}]" if parts else ""


def _with_scope(record: Record) -> None:
    record["extra"]["scope"] = describe_scope(record["extra"])
    record["extra"].setdefault("name", record["name"])


def _console_format(record: Record) -> str:
    _with_scope(record)
    return (
        "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan><dim>{extra[scope]}</dim> - <level>{message}</level>\n"
        "{exception}"
    )


def _file_format(record: Record) -> str:
    _with_scope(record)
    return (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
        "{extra[name]}:{function}:{line}{extra[scope]} | {message}\n{exception}"
    )


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> LogLevel:
    """Replace loguru's sinks and route stdlib loggers through them.

    Args:
        level: Base log level from settings
        verbose: Force DEBUG
        quiet: Force WARNING (ignored when verbose)
        log_file: Optional file sink, always at DEBUG
        rotation: When to rotate the log file (e.g. "10 MB", "1 day")
        retention: How long to keep rotated files
        serialize: Write the file sink as JSON lines

    Returns:
        The effective console level
    """
    effective_level = resolve_level(level, verbose=verbose, quiet=quiet)

    logger.remove()
    logger.add(
        sys.stderr,
        level=effective_level,
        format=_console_format,
        colorize=True,
        backtrace=True,
        diagnose=effective_level in ("TRACE", "DEBUG"),
    )

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_file_format,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    _route_stdlib_logging(effective_level)
    return effective_level


def _route_stdlib_logging(level: LogLevel) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    debugging = level in ("TRACE", "DEBUG")
    for name, debug_level in _THIRD_PARTY_DEBUG_LEVELS.items():
        logging.getLogger(name).setLevel(debug_level if debugging else logging.WARNING)


def get_logger(name: str) -> Logger:
    """Logger with a module or component name bound.

    Usage:
        logger = get_logger(__name__)
        logger.info("Recomputing monthly stats", month="2025-03")
    """
    return logger.bind(name=name)


def bind_repo(owner: str, repo: str) -> Logger:
    """GitHub client logger for one repository."""
    return logger.bind(name="github", repo=f"{owner}/{repo}")


def bind_pr(owner: str, repo: str, pr_number: int) -> Logger:
    """GitHub client logger for one PR of a repository."""
    return logger.bind(name="github", repo=f"{owner}/{repo}", pr=pr_number)


@contextmanager
def scope_context(scope: SyncScope) -> Iterator[Logger]:
    """Tag every record logged inside the block with a sync scope.

    The month and repo reach records from the client, repositories and
    aggregator alike, including those logged from tasks started inside the
    block.

    Usage:
        with scope_context(scope) as sync_logger:
            sync_logger.info("Fetching month data from GitHub")
            await client.get_complete_month_data(scope.month)

    Yields:
        Logger named "sync"
    """
    with logger.contextualize(month=scope.month, repo=scope.full_name):
        yield logger.bind(name="sync")
