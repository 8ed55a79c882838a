"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `open_database`: Cache handle lifecycle for a single command
- `resolve_token`: Stored token first, then the GITHUB_TOKEN setting
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Coroutine
from contextlib import asynccontextmanager
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Annotated, TypeVar

import typer
from rich.console import Console

from github_pr_finder.config import get_settings
from github_pr_finder.db import Database, SettingRepository
from github_pr_finder.github import MissingTokenError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from github_pr_finder.config import Settings

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    JSON = "json"


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Catches exceptions, prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error

    Example:
        async def _list() -> list[Repository]:
            async with open_database() as database, database.session() as session:
                return await RepositoryRepository(session).list_all()

        repos = run_async_command(_list(), error_prefix="Listing failed")
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        # Re-raise deliberate exits (e.g., from validation helpers)
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


@asynccontextmanager
async def open_database(settings: Settings | None = None) -> AsyncGenerator[Database, None]:
    """Open the configured cache, ensuring the schema exists.

    The handle is disposed when the block exits.
    """
    settings = settings or get_settings()
    database = Database.from_settings(settings)
    try:
        await database.create_tables()
        yield database
    finally:
        await database.dispose()


async def resolve_token(session: AsyncSession, settings: Settings | None = None) -> str:
    """Return the stored GitHub token, falling back to the GITHUB_TOKEN setting.

    Raises:
        MissingTokenError: If neither is set
    """
    token = await SettingRepository(session).get_github_token()
    if token:
        return token
    settings = settings or get_settings()
    if settings.github_token.strip():
        return settings.github_token.strip()
    raise MissingTokenError()


def mask_token(token: str) -> str:
    """Mask all but the last four characters of a token."""
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD date option.

    Raises:
        typer.BadParameter: If the value is not a calendar date
    """
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

NoValidateOption = Annotated[
    bool,
    typer.Option(
        "--no-validate",
        help="Skip the live GitHub check",
    ),
]
"""Opt out of GitHub validation.

Usage:
    def member_add(username: str, no_validate: NoValidateOption = False):
"""

# -----------------------------------------------------------------------------
# Repository Argument
# -----------------------------------------------------------------------------

RepoArgument = Annotated[
    str,
    typer.Argument(
        help="Repository in owner/name format (e.g., octocat/hello-world)",
    ),
]
"""Required positional repository argument.

Usage:
    def sync_run(repo: RepoArgument) -> None:
"""


def validate_repo(repo: str) -> tuple[str, str]:
    """Parse and validate a single repository string.

    Args:
        repo: Repository string in owner/name format

    Returns:
        Tuple of (owner, name)

    Raises:
        typer.Exit(1): If format is invalid
    """
    from github_pr_finder.schemas import parse_repo_string

    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print("[red]Error:[/red] Repository must be in owner/name format")
        raise typer.Exit(1) from None
