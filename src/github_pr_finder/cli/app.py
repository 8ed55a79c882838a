"""Main CLI application for GitHub PR Finder."""

from pathlib import Path
from typing import Annotated

import typer

from github_pr_finder import __version__
from github_pr_finder.cli import db as db_cmd
from github_pr_finder.cli import member as member_cmd
from github_pr_finder.cli import prs as prs_cmd
from github_pr_finder.cli import repo as repo_cmd
from github_pr_finder.cli import sync as sync_cmd
from github_pr_finder.cli import token as token_cmd
from github_pr_finder.cli.common import console
from github_pr_finder.config import get_settings
from github_pr_finder.logging import setup_logging

app = typer.Typer(
    name="prfinder",
    help="Find and browse your team's GitHub pull requests from a local cache.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"prfinder version {__version__}")
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
    """GitHub PR Finder - sync PRs by repository, browse them by member."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


app.add_typer(repo_cmd.app, name="repo")
app.add_typer(member_cmd.app, name="member")
app.add_typer(token_cmd.app, name="token")
app.add_typer(sync_cmd.app, name="sync")
app.add_typer(prs_cmd.app, name="prs")
app.add_typer(db_cmd.app, name="db")


if __name__ == "__main__":
    app()
