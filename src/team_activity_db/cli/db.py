"""Database provisioning commands."""

import typer

from team_activity_db.cli.common import console, run_async_command
from team_activity_db.config import get_settings
from team_activity_db.db import create_tables, dispose_engine, drop_tables

app = typer.Typer(help="Database commands")


@app.command("init")
def init_db(
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Drop all tables before creating them (destroys data)",
    ),
) -> None:
    """Create all tables in the configured database.

    Examples:
        teamactivity db init
        teamactivity db init --reset
    """

    async def _init() -> None:
        try:
            if reset:
                await drop_tables()
            await create_tables()
        finally:
            await dispose_engine()

    run_async_command(_init(), error_prefix="Database init failed")

    action = "Recreated" if reset else "Created"
    console.print(f"[green]{action} tables[/green] in {get_settings().database_url}")
