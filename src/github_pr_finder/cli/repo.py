"""Repository catalog commands."""

import json

import typer
from rich.table import Table

from github_pr_finder.cli.common import (
    OutputFormat,
    OutputFormatOption,
    RepoArgument,
    console,
    open_database,
    run_async_command,
    validate_repo,
)
from github_pr_finder.db import RepositoryRepository
from github_pr_finder.schemas import RepositoryRead

app = typer.Typer(help="Manage registered repositories")


@app.command("add")
def add_repository(
    repo: RepoArgument,
    url: str | None = typer.Option(
        None,
        "--url",
        help="Repository web URL (defaults to https://github.com/OWNER/NAME)",
    ),
) -> None:
    """Register a repository to sync PRs from.

    Examples:
        prfinder repo add octocat/hello-world
    """
    owner, name = validate_repo(repo)

    async def _add() -> RepositoryRead:
        async with open_database() as database, database.session() as session:
            created = await RepositoryRepository(session).create(owner, name, url)
            return RepositoryRead.from_orm(created)

    created = run_async_command(_add())
    console.print(f"[green]Added[/green] {created.owner}/{created.name} (id {created.id})")


@app.command("list")
def list_repositories(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List registered repositories."""

    async def _list() -> list[RepositoryRead]:
        async with open_database() as database, database.session() as session:
            return RepositoryRead.from_orm_list(await RepositoryRepository(session).list_all())

    repos = run_async_command(_list())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([r.model_dump(mode="json") for r in repos]))
        return

    if not repos:
        console.print("[dim]No repositories registered. Add one with 'prfinder repo add'.[/dim]")
        return

    table = Table(title="Repositories")
    table.add_column("ID", justify="right")
    table.add_column("Repository")
    table.add_column("URL", style="dim")
    for r in repos:
        table.add_row(str(r.id), f"{r.owner}/{r.name}", r.url)
    console.print(table)


@app.command("remove")
def remove_repository(
    repo_id: int = typer.Argument(help="Repository ID (see 'prfinder repo list')"),
) -> None:
    """Remove a repository and its cached PRs."""

    async def _remove() -> bool:
        async with open_database() as database, database.session() as session:
            return await RepositoryRepository(session).delete_by_id(repo_id)

    if not run_async_command(_remove()):
        console.print(f"[red]Error:[/red] Repository {repo_id} not found")
        raise typer.Exit(1)
    console.print(f"[green]Removed[/green] repository {repo_id}")
