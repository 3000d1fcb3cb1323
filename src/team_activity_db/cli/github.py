"""GitHub API verification commands."""

from datetime import UTC, datetime

import typer
from rich.table import Table

from team_activity_db.cli.common import (
    RepoArgument,
    console,
    run_async_command,
    validate_month,
    validate_repo,
)
from team_activity_db.config import get_settings
from team_activity_db.github import (
    GitHubAuthenticationError,
    GitHubClient,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

app = typer.Typer(help="GitHub API commands")


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


@app.command("test")
def test_connection(
    repo: RepoArgument,
    month: str | None = typer.Option(
        None,
        "--month",
        "-m",
        help="Month to search in YYYY-MM format (default: current month)",
    ),
) -> None:
    """Test GitHub API connectivity, token validity and the monthly PR search.

    Only the first search page is fetched; no sub-resources are requested.

    Examples:
        teamactivity github test octo-org/api
        teamactivity github test octo-org/api --month 2025-03
    """
    owner, name = validate_repo(repo)
    search_month = validate_month(month) if month else datetime.now(UTC).strftime("%Y-%m")

    async def _test() -> None:
        settings = get_settings()

        # Validate token exists
        if not settings.github_token:
            console.print("[red]Error:[/red] GITHUB_TOKEN not set in environment")
            raise typer.Exit(1)

        try:
            async with GitHubClient(owner, name, config=settings.sync) as client:
                # 1. Check rate limit
                console.print("[bold]Checking rate limit...[/bold]")
                rate = await client.get_rate_limit()
                reset_time = rate["reset"]
                if isinstance(reset_time, datetime):
                    reset_str = reset_time.strftime("%H:%M:%S UTC")
                    seconds_left = int((reset_time - datetime.now(UTC)).total_seconds())
                    reset_str += f" (in {_format_time_remaining(seconds_left)})"
                else:
                    reset_str = str(reset_time)
                console.print(f"  Rate limit: {rate['remaining']}/{rate['limit']} (resets at {reset_str})")

                if isinstance(rate["remaining"], int) and rate["remaining"] < 10:
                    console.print("[yellow]Warning:[/yellow] Low rate limit remaining")

                # 2. Probe the month search
                query = client.build_month_query(search_month)
                console.print(f"\n[bold]Searching:[/bold] {query}")
                prs = (await client.search_pull_requests_page(query, 1)).unwrap()
                console.print(f"  First page: {len(prs)} PR(s)")

                if prs:
                    table = Table(title=f"PRs in {repo} for {search_month}")
                    table.add_column("Number", style="cyan")
                    table.add_column("Title", max_width=50)
                    table.add_column("Author")
                    table.add_column("Created")

                    for pr in prs[:5]:
                        title = pr.title[:47] + "..." if len(pr.title) > 50 else pr.title
                        table.add_row(
                            str(pr.number),
                            title,
                            pr.author_login or "-",
                            pr.created_at.strftime("%Y-%m-%d"),
                        )

                    console.print(table)

                    if len(prs) > 5:
                        console.print(f"  ... and {len(prs) - 5} more on this page")

                console.print("\n[green]GitHub API connection verified![/green]")

        except GitHubAuthenticationError:
            console.print("[red]Error:[/red] Invalid GitHub token")
            raise typer.Exit(1) from None
        except GitHubRateLimitError as e:
            console.print("[red]Error:[/red] Rate limit exceeded")
            if e.reset_at:
                console.print(f"  Resets at: {e.reset_at.strftime('%H:%M:%S UTC')}")
            raise typer.Exit(1) from None
        except GitHubNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    run_async_command(_test())
