"""Contributor management commands.

Sync creates placeholder contributors for unseen logins; these commands
give them a real name and track, or take them out of aggregation.
"""

import typer
from rich.table import Table

from team_activity_db.cli.common import (
    HandleArgument,
    OutputFormatOption,
    console,
    print_json,
    run_async_command,
)
from team_activity_db.db import ContributorRepository, get_session
from team_activity_db.db.models import PLACEHOLDER_TRACK_ID
from team_activity_db.github import OutputFormat
from team_activity_db.schemas import ContributorProfile, ContributorRead

app = typer.Typer(help="Manage team members")


@app.command("upsert")
def upsert_member(
    handle: HandleArgument,
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    track_id: str = typer.Option(..., "--track-id", help="Track/team identifier"),
    track_name: str = typer.Option(..., "--track-name", help="Track/team label"),
) -> None:
    """Create a member or replace a placeholder's name and track.

    Examples:
        teamactivity members upsert octocat --name "Mona" --track-id be --track-name Backend
    """
    profile = ContributorProfile(
        github_id=handle, name=name, track_id=track_id, track_name=track_name
    )

    async def _upsert() -> ContributorRead:
        async with get_session() as session:
            contributor = await ContributorRepository(session).upsert_profile(profile)
            return ContributorRead.from_model(contributor)

    member = run_async_command(_upsert())
    console.print(
        f"[green]Saved[/green] {member.github_id}: {member.name} ({member.track_name})"
    )


def _set_active(handle: str, is_active: bool) -> None:
    async def _update() -> ContributorRead | None:
        async with get_session() as session:
            contributor = await ContributorRepository(session).set_active(handle, is_active)
            return ContributorRead.from_model(contributor) if contributor else None

    member = run_async_command(_update())
    if member is None:
        console.print(f"[red]Error:[/red] No member with GitHub login {handle!r}")
        raise typer.Exit(1)

    state = "activated" if is_active else "deactivated"
    console.print(f"[green]Member {member.github_id} {state}[/green]")


@app.command("deactivate")
def deactivate_member(handle: HandleArgument) -> None:
    """Exclude a member from future aggregation passes."""
    _set_active(handle, False)


@app.command("activate")
def activate_member(handle: HandleArgument) -> None:
    """Include a member in aggregation passes again."""
    _set_active(handle, True)


@app.command("list")
def list_members(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List active members ordered by track and name."""

    async def _list() -> list[ContributorRead]:
        async with get_session() as session:
            contributors = await ContributorRepository(session).get_active()
            return ContributorRead.from_models(contributors)

    members = run_async_command(_list())

    if output_format == OutputFormat.JSON:
        print_json([m.to_json_dict() for m in members])
        return

    if not members:
        console.print("[yellow]No active members.[/yellow]")
        return

    table = Table(title="Active Members")
    table.add_column("GitHub", style="cyan")
    table.add_column("Name")
    table.add_column("Track")

    for member in members:
        track = member.track_name
        if member.track_id == PLACEHOLDER_TRACK_ID:
            track = f"[dim]{track}[/dim]"
        table.add_row(member.github_id, member.name, track)

    console.print(table)
