"""Team member commands."""

import json

import typer
from rich.table import Table

from github_pr_finder.cli.common import (
    NoValidateOption,
    OutputFormat,
    OutputFormatOption,
    console,
    open_database,
    resolve_token,
    run_async_command,
)
from github_pr_finder.config import get_settings
from github_pr_finder.db import MemberRepository
from github_pr_finder.github import GitHubClient
from github_pr_finder.schemas import MemberRead

app = typer.Typer(help="Manage team members")


@app.command("add")
def add_member(
    username: str = typer.Argument(help="GitHub login"),
    display_name: str | None = typer.Option(
        None,
        "--display-name",
        "-n",
        help="Name shown in listings (defaults to the GitHub profile name)",
    ),
    no_validate: NoValidateOption = False,
) -> None:
    """Register a team member, checking the login against GitHub.

    Examples:
        prfinder member add octocat
        prfinder member add octocat --display-name "The Octocat"
        prfinder member add ghost-user --no-validate
    """
    username = username.strip()
    if not username:
        console.print("[red]Error:[/red] Username must not be empty")
        raise typer.Exit(1)

    async def _add() -> MemberRead:
        settings = get_settings()
        async with open_database(settings) as database, database.session() as session:
            name = display_name
            if not no_validate:
                token = await resolve_token(session, settings)
                async with GitHubClient(token, settings.github) as client:
                    validation = await client.validate_user(username)
                if not validation.valid:
                    console.print(f"[red]Error:[/red] {validation.message}")
                    raise typer.Exit(1)
                if name is None and validation.profile is not None:
                    name = validation.profile.name
            member = await MemberRepository(session).create(username, name)
            return MemberRead.from_orm(member)

    member = run_async_command(_add())
    label = f" ({member.display_name})" if member.display_name else ""
    console.print(f"[green]Added[/green] {member.username}{label} (id {member.id})")


@app.command("list")
def list_members(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List team members."""

    async def _list() -> list[MemberRead]:
        async with open_database() as database, database.session() as session:
            return MemberRead.from_orm_list(await MemberRepository(session).list_all())

    members = run_async_command(_list())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([m.model_dump() for m in members]))
        return

    if not members:
        console.print("[dim]No members yet. Add one or sync a repository.[/dim]")
        return

    table = Table(title="Members")
    table.add_column("ID", justify="right")
    table.add_column("Username")
    table.add_column("Display name", style="dim")
    for m in members:
        table.add_row(str(m.id), m.username, m.display_name or "")
    console.print(table)


@app.command("remove")
def remove_member(
    member_id: int = typer.Argument(help="Member ID (see 'prfinder member list')"),
) -> None:
    """Remove a team member. Their cached PRs are kept."""

    async def _remove() -> bool:
        async with open_database() as database, database.session() as session:
            return await MemberRepository(session).delete_by_id(member_id)

    if not run_async_command(_remove()):
        console.print(f"[red]Error:[/red] Member {member_id} not found")
        raise typer.Exit(1)
    console.print(f"[green]Removed[/green] member {member_id}")
