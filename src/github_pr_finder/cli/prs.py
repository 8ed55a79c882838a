"""Commands for browsing cached PRs by member and period."""

import json
from dataclasses import dataclass

import typer
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from github_pr_finder.browse import Period, PRBrowser, neighbours
from github_pr_finder.cli.common import (
    OutputFormat,
    OutputFormatOption,
    console,
    format_timestamp,
    open_database,
    resolve_token,
    run_async_command,
)
from github_pr_finder.config import get_settings
from github_pr_finder.github import GitHubClient, ImageCache
from github_pr_finder.schemas import PRRead

app = typer.Typer(help="Browse cached PRs")

_STATE_STYLES = {"open": "green", "merged": "magenta", "closed": "red"}


def _resolve_period(month: str | None, year: int | None, quarter: int | None) -> Period:
    """Turn the period options into a Period (current month by default).

    Raises:
        typer.Exit(1): On conflicting or malformed options
    """
    try:
        if month is not None:
            if quarter is not None:
                console.print("[red]Error:[/red] Use either --month or --quarter, not both")
                raise typer.Exit(1)
            return Period.parse(month)
        if quarter is not None:
            return Period.quarter(year or Period.current_month().year, quarter)
        if year is not None:
            console.print("[red]Error:[/red] --year needs --quarter (or use --month YYYY-MM)")
            raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    return Period.current_month()


def _state_label(state: str) -> str:
    style = _STATE_STYLES.get(state, "white")
    return f"[{style}]{state}[/{style}]"


@app.command("list")
def list_prs(
    member: str = typer.Argument(help="GitHub login of the member"),
    month: str | None = typer.Option(
        None,
        "--month",
        "-m",
        help="Month to show (YYYY-MM); defaults to the current month",
    ),
    year: int | None = typer.Option(None, "--year", "-y", help="Year for --quarter"),
    quarter: int | None = typer.Option(
        None,
        "--quarter",
        "-q",
        min=1,
        max=4,
        help="Quarter to show (1-4)",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List a member's cached PRs created in a month or quarter, newest first.

    Examples:
        prfinder prs list alice
        prfinder prs list alice --month 2024-05
        prfinder prs list alice --year 2024 --quarter 2
    """
    period = _resolve_period(month, year, quarter)

    async def _list() -> tuple[list[PRRead], dict[int, str]]:
        async with open_database() as database, database.session() as session:
            browser = PRBrowser(session)
            prs = await browser.pull_requests(member, period)
            repos = await browser.repositories_by_id()
            return PRRead.from_orm_list(prs), {i: r.full_name for i, r in repos.items()}

    prs, repo_names = run_async_command(_list())

    if output_format == OutputFormat.JSON:
        payload = [
            {**pr.model_dump(mode="json", exclude={"diff_content"}), "has_diff": pr.has_diff}
            for pr in prs
        ]
        console.print_json(json.dumps({"member": member, "period": period.label, "prs": payload}))
        return

    if not prs:
        console.print(f"[dim]No PRs by {member} in {period.label}.[/dim]")
        return

    table = Table(title=f"PRs by {member} in {period.label}")
    table.add_column("ID", justify="right")
    table.add_column("Repository")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("State")
    table.add_column("Created")
    table.add_column("Diff", justify="center")
    for pr in prs:
        table.add_row(
            str(pr.id),
            repo_names.get(pr.repository_id, "?"),
            str(pr.pr_number),
            pr.title,
            _state_label(pr.state.value),
            format_timestamp(pr.created_at),
            "yes" if pr.has_diff else "-",
        )
    console.print(table)
    console.print(f"[dim]{len(prs)} PR(s). Show one with 'prfinder prs show ID'.[/dim]")


@dataclass
class _PRDetail:
    pr: PRRead
    repository: str
    body: str
    previous_id: int | None
    next_id: int | None


@app.command("show")
def show_pr(
    pr_id: int = typer.Argument(help="Cached PR ID (see 'prfinder prs list')"),
    period: str | None = typer.Option(
        None,
        "--period",
        "-p",
        help="Listing to navigate within (YYYY-MM or YYYY-Qn); defaults to the PR's month",
    ),
    no_body: bool = typer.Option(False, "--no-body", help="Hide the description"),
    no_diff: bool = typer.Option(False, "--no-diff", help="Hide the diff"),
    embed_images: bool = typer.Option(
        False,
        "--embed-images",
        help=(
            "Inline GitHub-hosted images in the description as data URLs "
            "(terminals cannot display them; use with --format json)"
        ),
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show one cached PR with its description and diff.

    Examples:
        prfinder prs show 42
        prfinder prs show 42 --no-diff
        prfinder prs show 42 --embed-images --format json
    """
    try:
        context = Period.parse(period) if period else None
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    async def _show() -> _PRDetail | None:
        settings = get_settings()
        async with open_database(settings) as database, database.session() as session:
            browser = PRBrowser(session)
            row = await browser.get(pr_id)
            if row is None:
                return None
            pr = PRRead.from_orm(row)
            repos = await browser.repositories_by_id()

            window = context or Period.month(pr.created_at.year, pr.created_at.month)
            previous, following = neighbours(
                await browser.pull_requests(pr.author, window), pr.id
            )

            body = pr.body or ""
            if embed_images and body and not no_body:
                token = await resolve_token(session, settings)
                async with GitHubClient(token, settings.github) as client:
                    body = await ImageCache(client).embed_images(body)

        return _PRDetail(
            pr=pr,
            repository=repos[pr.repository_id].full_name if pr.repository_id in repos else "?",
            body=body,
            previous_id=previous.id if previous else None,
            next_id=following.id if following else None,
        )

    detail = run_async_command(_show())
    if detail is None:
        console.print(f"[red]Error:[/red] PR {pr_id} not found")
        raise typer.Exit(1)

    pr = detail.pr
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(_detail_payload(detail, no_body=no_body, no_diff=no_diff)))
        return

    console.print(f"[bold]{pr.title}[/bold]")
    console.print(
        f"{detail.repository}#{pr.pr_number} by [cyan]{pr.author}[/cyan]  "
        f"{_state_label(pr.state.value)}  opened {format_timestamp(pr.created_at)}"
    )
    if pr.merged_at:
        console.print(f"Merged {format_timestamp(pr.merged_at)}")
    console.print(f"[link={pr.html_url}]{pr.html_url}[/link]")
    console.print()

    if not no_body:
        if detail.body.strip():
            console.print(Panel(Markdown(detail.body), title="Description"))
        else:
            console.print("[dim]No description provided.[/dim]")

    if not no_diff:
        if pr.has_diff:
            console.print(Syntax(pr.diff_content or "", "diff", word_wrap=True))
        else:
            console.print(
                f"[dim]Diff not cached (too large or unavailable). View it at {pr.diff_url}[/dim]"
            )

    nav = []
    if detail.previous_id is not None:
        nav.append(f"previous: prfinder prs show {detail.previous_id}")
    if detail.next_id is not None:
        nav.append(f"next: prfinder prs show {detail.next_id}")
    if nav:
        console.print()
        console.print(f"[dim]{'  |  '.join(nav)}[/dim]")


def _detail_payload(detail: _PRDetail, *, no_body: bool, no_diff: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        **detail.pr.model_dump(mode="json", exclude={"body", "diff_content"}),
        "repository": detail.repository,
        "has_diff": detail.pr.has_diff,
        "previous_id": detail.previous_id,
        "next_id": detail.next_id,
    }
    if not no_body:
        payload["body"] = detail.body
    if not no_diff:
        payload["diff_content"] = detail.pr.diff_content or ""
    return payload
