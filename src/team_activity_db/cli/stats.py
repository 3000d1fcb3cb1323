"""Monthly statistics commands."""

import typer
from rich.table import Table

from team_activity_db.cli.common import (
    MonthArgument,
    OutputFormatOption,
    console,
    print_json,
    run_async_command,
    validate_month,
)
from team_activity_db.db import MonthlySummaryRepository, get_session
from team_activity_db.github import MonthlyStatsAggregator, OutputFormat
from team_activity_db.github.sync import LeaderboardEntry, rank_summaries

app = typer.Typer(help="Monthly statistics")


@app.command("leaderboard")
def leaderboard(
    month: MonthArgument,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Rank active members for a month by composite score.

    Score = commits + 2 x PRs + authored comments.

    Examples:
        teamactivity stats leaderboard 2025-03
        teamactivity stats leaderboard 2025-03 --format json
    """
    month = validate_month(month)

    async def _rank() -> list[LeaderboardEntry]:
        async with get_session() as session:
            rows = await MonthlySummaryRepository(session).get_leaderboard_rows(month)
            return rank_summaries(rows)

    entries = run_async_command(_rank())

    if output_format == OutputFormat.JSON:
        print_json({"month": month, "leaderboard": [e.to_dict() for e in entries]})
        return

    if not entries:
        console.print("[yellow]No active members.[/yellow]")
        return

    table = Table(title=f"Leaderboard {month}")
    table.add_column("#", justify="right")
    table.add_column("GitHub", style="cyan")
    table.add_column("Name")
    table.add_column("Track")
    table.add_column("Commits", justify="right")
    table.add_column("PRs", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Received", justify="right")
    table.add_column("Score", justify="right", style="bold")

    for entry in entries:
        table.add_row(
            str(entry.rank),
            entry.github_id,
            entry.name,
            entry.track_name,
            str(entry.commits_count),
            str(entry.prs_count),
            str(entry.total_comments_count),
            str(entry.pr_comments_count),
            str(entry.score),
        )

    console.print(table)


@app.command("recompute")
def recompute(month: MonthArgument) -> None:
    """Recompute monthly summaries from the fact tables without syncing.

    Examples:
        teamactivity stats recompute 2025-03
    """
    month = validate_month(month)

    async def _recompute() -> None:
        async with get_session() as session:
            await MonthlyStatsAggregator.from_session(session).recompute_monthly_stats(month)

    run_async_command(_recompute(), error_prefix="Recompute failed")
    console.print(f"[green]Recomputed summaries for {month}[/green]")
