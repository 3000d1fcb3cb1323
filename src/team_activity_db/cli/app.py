"""Main CLI application for Team Activity DB."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from team_activity_db import __version__
from team_activity_db.cli import db as db_cmd
from team_activity_db.cli import github as github_cmd
from team_activity_db.cli import members as members_cmd
from team_activity_db.cli import stats as stats_cmd
from team_activity_db.cli import sync as sync_cmd
from team_activity_db.config import get_settings
from team_activity_db.logging import setup_logging

app = typer.Typer(
    name="teamactivity",
    help="Monthly GitHub PR activity store with per-member summaries.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"teamactivity version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """Team Activity DB - Sync and summarize monthly PR activity."""
    settings = get_settings()
    log_config = settings.logging

    # Setup logging with CLI overrides
    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


# Register subcommands
app.add_typer(db_cmd.app, name="db")
app.add_typer(github_cmd.app, name="github")
app.add_typer(members_cmd.app, name="members")
app.add_typer(stats_cmd.app, name="stats")
app.add_typer(sync_cmd.app, name="sync")


if __name__ == "__main__":
    app()
