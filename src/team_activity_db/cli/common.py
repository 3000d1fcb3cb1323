"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- Repository and month argument type aliases for consistent input handling
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console

from team_activity_db.github.sync.enums import OutputFormat

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error

    Example:
        async def _init() -> None:
            await create_tables()

        run_async_command(_init(), error_prefix="Database init failed")
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        # Re-raise deliberate exits (e.g., from validation helpers)
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def print_json(data: dict[str, Any] | list[dict[str, Any]]) -> None:
    """Print a JSON document to the shared console."""
    console.print_json(json.dumps(data, default=str))


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

# -----------------------------------------------------------------------------
# Repository / Month Argument Factories
# -----------------------------------------------------------------------------

RepoArgument = Annotated[
    str,
    typer.Argument(
        help="Repository in owner/name format (e.g., octo-org/api)",
    ),
]
"""Required positional repository argument.

Usage:
    def sync_month(month: MonthArgument, repo: RepoArgument) -> None:
"""

MonthArgument = Annotated[
    str,
    typer.Argument(
        help="Month in YYYY-MM format (e.g., 2025-03)",
    ),
]
"""Required positional month argument."""

HandleArgument = Annotated[
    str,
    typer.Argument(
        help="GitHub login of the contributor",
    ),
]
"""Required positional GitHub login argument."""


# -----------------------------------------------------------------------------
# Validation Helpers
# -----------------------------------------------------------------------------


def validate_repo(repo: str) -> tuple[str, str]:
    """Parse and validate a single repository string.

    Args:
        repo: Repository string in owner/name format

    Returns:
        Tuple of (owner, name)

    Raises:
        typer.Exit(1): If format is invalid
    """
    from team_activity_db.schemas import parse_repo_string

    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print("[red]Error:[/red] Repository must be in owner/name format")
        raise typer.Exit(1) from None


def validate_month(month: str) -> str:
    """Validate a YYYY-MM month string.

    Returns:
        The month, stripped of surrounding whitespace

    Raises:
        typer.Exit(1): If format is invalid
    """
    from team_activity_db.schemas import InvalidMonthError, parse_month

    try:
        parse_month(month)
    except InvalidMonthError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    return month.strip()
