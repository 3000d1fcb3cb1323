"""Sync commands for Team Activity DB."""

import asyncio
from typing import NoReturn

import typer

from team_activity_db.cli.common import (
    MonthArgument,
    OutputFormatOption,
    RepoArgument,
    console,
    print_json,
)
from team_activity_db.config import get_settings
from team_activity_db.db import get_session
from team_activity_db.github import (
    GitHubClient,
    MonthSyncResult,
    MonthSyncService,
    OutputFormat,
    SyncErrorResult,
)
from team_activity_db.schemas import parse_month, parse_repo_string

app = typer.Typer(help="Sync monthly PR activity from GitHub")


def _fail(error: SyncErrorResult, output_format: OutputFormat) -> NoReturn:
    """Report a structured sync error and exit with code 1."""
    if output_format == OutputFormat.JSON:
        print_json(error.to_dict())
    else:
        console.print(f"[red]Error ({error.status}):[/red] {error.error}")
        if error.details:
            console.print(f"  {error.details}")
    raise typer.Exit(1)


@app.command("month")
def sync_month(
    month: MonthArgument,
    repo: RepoArgument,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync one month of PR activity for a repository.

    Replaces every PR, review and comment fact of the (month, repo) scope
    and recomputes the monthly summaries.

    Examples:
        teamactivity sync month 2025-03 octo-org/api
        teamactivity sync month 2025-03 octo-org/api --format json
        teamactivity -v sync month 2025-03 octo-org/api  # Debug logging
    """
    try:
        parse_month(month)
        owner, name = parse_repo_string(repo)
    except ValueError as e:
        _fail(
            SyncErrorResult(
                error="Missing or invalid parameters: month, repo_owner, repo_name",
                details=str(e),
                status=400,
            ),
            output_format,
        )

    settings = get_settings()
    if not settings.github_token:
        _fail(
            SyncErrorResult(
                error="GitHub token not configured",
                details="Please set GITHUB_TOKEN environment variable.",
                status=500,
            ),
            output_format,
        )

    async def _sync() -> MonthSyncResult:
        async with GitHubClient(
            owner, name, token=settings.github_token, config=settings.sync
        ) as client:
            async with get_session() as session:
                service = MonthSyncService.from_session(
                    client, session, commit_batch_size=settings.sync.commit_batch_size
                )
                return await service.sync_month_data(month.strip(), owner, name)

    try:
        result = asyncio.run(_sync())
    except Exception as e:
        _fail(SyncErrorResult.from_exception(e), output_format)

    # JSON output
    if output_format == OutputFormat.JSON:
        print_json(result.to_dict())
        return

    # Text output
    console.print(f"[green]{result.message}[/green]")
    console.print(f"  Month: {result.month}  Repo: {result.repo_owner}/{result.repo_name}")
    console.print(f"  PRs found: {result.total_items}")
    console.print(f"  Review facts: {result.review_facts}")
    if result.created_contributors:
        console.print(
            f"  [yellow]New placeholder contributors: {result.created_contributors}[/yellow]"
        )
