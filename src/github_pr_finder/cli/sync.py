"""Sync commands for pulling PRs from GitHub into the local cache."""

import json
from datetime import date

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from github_pr_finder.cli.common import (
    OutputFormat,
    OutputFormatOption,
    RepoArgument,
    console,
    open_database,
    parse_date,
    resolve_token,
    run_async_command,
    validate_repo,
)
from github_pr_finder.config import get_settings
from github_pr_finder.db import MemberRepository, PullRequestRepository, RepositoryRepository
from github_pr_finder.github import (
    GitHubClient,
    InvalidDateRangeError,
    PRSyncService,
    ProgressUpdate,
    RepositoryNotRegisteredError,
)
from github_pr_finder.github.sync import ProgressCallback

app = typer.Typer(help="Sync PRs from GitHub into the local cache")


@app.command("run")
def sync_run(
    repo: RepoArgument,
    start: str = typer.Option(
        ...,
        "--start",
        "-s",
        help="First day of the window (YYYY-MM-DD, UTC)",
    ),
    end: str = typer.Option(
        ...,
        "--end",
        "-e",
        help="Last day of the window, inclusive (YYYY-MM-DD, UTC)",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync PRs of a registered repository created between two dates.

    Authors are registered as members, diffs of small PRs are cached, and
    already cached PRs are replaced with fresh data.

    Examples:
        prfinder sync run octocat/hello-world --start 2024-01-01 --end 2024-01-31
        prfinder sync run octocat/hello-world -s 2024-04-01 -e 2024-06-30 --format json
    """
    owner, name = validate_repo(repo)

    try:
        start_date = parse_date(start)
        end_date = parse_date(end)
    except typer.BadParameter as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if start_date > end_date:
        console.print(f"[red]Error:[/red] {InvalidDateRangeError(start_date, end_date)}")
        raise typer.Exit(1)

    show_progress = output_format == OutputFormat.TEXT

    async def _sync(progress: Progress | None) -> dict[str, object]:
        settings = get_settings()
        async with open_database(settings) as database, database.session() as session:
            repo_repository = RepositoryRepository(session)
            # Checked before the token so an unknown repo is reported as such
            if await repo_repository.get_by_owner_and_name(owner, name) is None:
                raise RepositoryNotRegisteredError(owner, name)
            token = await resolve_token(session, settings)

            async with GitHubClient(token, settings.github) as client:
                service = PRSyncService(
                    client=client,
                    repo_repository=repo_repository,
                    member_repository=MemberRepository(session),
                    pr_repository=PullRequestRepository(session),
                    config=settings.sync,
                )
                result = await service.sync_repository(
                    owner,
                    name,
                    start_date,
                    end_date,
                    on_progress=_progress_callback(progress),
                )
                return result.to_dict()

    if show_progress:
        console.print(
            f"[dim]Syncing PRs from {owner}/{name} ({start_date} to {end_date})...[/dim]"
        )
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        ) as progress:
            result = run_async_command(_sync(progress), error_prefix="Sync failed")
    else:
        result = run_async_command(_sync(None), error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    _print_result(result, start_date, end_date)


def _progress_callback(progress: Progress | None) -> ProgressCallback | None:
    """Build an on_progress callback that drives a rich progress bar."""
    if progress is None:
        return None
    task_id = progress.add_task("Saving PRs", total=None)

    def _update(update: ProgressUpdate) -> None:
        description = f"Saving PRs {update.current_item or ''}".rstrip()
        progress.update(
            task_id,
            total=update.total,
            completed=update.processed,
            description=description,
        )

    return _update


def _print_result(result: dict[str, object], start_date: date, end_date: date) -> None:
    console.print("[bold]Sync Complete[/bold]")
    console.print()
    console.print(f"  Repository:        {result['repository']}")
    console.print(f"  Window:            {start_date} .. {end_date}")
    console.print(f"  [green]Saved:[/green]             {result['saved']}/{result['total']}")
    console.print(f"  Diffs fetched:     {result['diffs_fetched']}")
    console.print(f"  [dim]Diffs skipped:[/dim]     {result['diffs_skipped']}")

    diff_failures = result.get("diff_failures", 0)
    if diff_failures:
        console.print(f"  [yellow]Diff failures:[/yellow]     {diff_failures}")

    members_added = result.get("members_added") or []
    if members_added:
        console.print(f"  New members:       {', '.join(members_added)}")  # type: ignore[arg-type]

    failed = result.get("failed", 0)
    if failed:
        console.print(f"  [red]Failed:[/red]            {failed}")
        console.print()
        console.print("[bold]Failed PRs:[/bold]")
        for pr in result.get("prs", []):  # type: ignore[union-attr]
            if pr.get("error"):
                console.print(f"  PR #{pr['pr_number']}: {pr['error']}")
