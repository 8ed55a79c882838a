"""GitHub access token commands."""

import typer

from github_pr_finder.cli.common import (
    NoValidateOption,
    console,
    mask_token,
    open_database,
    resolve_token,
    run_async_command,
)
from github_pr_finder.config import get_settings
from github_pr_finder.db import SettingRepository
from github_pr_finder.github import GitHubClient, UserValidation

app = typer.Typer(help="Manage the stored GitHub access token")


async def _validate(token: str) -> UserValidation:
    async with GitHubClient(token, get_settings().github) as client:
        return await client.validate_token()


@app.command("set")
def set_token(
    token: str = typer.Argument(help="GitHub personal access token"),
    no_validate: NoValidateOption = False,
) -> None:
    """Store a GitHub token, replacing any previous one.

    The token is checked against GitHub first unless --no-validate is given.
    """
    token = token.strip()
    if not token:
        console.print("[red]Error:[/red] Token must not be empty")
        raise typer.Exit(1)

    async def _set() -> str | None:
        login = None
        if not no_validate:
            validation = await _validate(token)
            if not validation.valid:
                console.print(f"[red]Error:[/red] Token rejected by GitHub: {validation.message}")
                raise typer.Exit(1)
            login = validation.profile.login if validation.profile else None
        async with open_database() as database, database.session() as session:
            await SettingRepository(session).set_github_token(token)
        return login

    login = run_async_command(_set())
    suffix = f" (authenticated as {login})" if login else ""
    console.print(f"[green]Token saved[/green]{suffix}")


@app.command("show")
def show_token() -> None:
    """Show the token in use, masked."""

    async def _show() -> tuple[str | None, str | None]:
        async with open_database() as database, database.session() as session:
            stored = await SettingRepository(session).get_github_token()
        return stored, get_settings().github_token.strip() or None

    stored, env_token = run_async_command(_show())
    if stored:
        console.print(f"Stored token: {mask_token(stored)}")
    elif env_token:
        console.print(f"Using GITHUB_TOKEN from environment: {mask_token(env_token)}")
    else:
        console.print("[yellow]No token set.[/yellow] Run 'prfinder token set TOKEN'.")


@app.command("clear")
def clear_token() -> None:
    """Delete the stored token."""

    async def _clear() -> bool:
        async with open_database() as database, database.session() as session:
            return await SettingRepository(session).clear_github_token()

    if run_async_command(_clear()):
        console.print("[green]Token cleared[/green]")
    else:
        console.print("[dim]No stored token to clear.[/dim]")


@app.command("verify")
def verify_token() -> None:
    """Check the token in use against GitHub."""

    async def _verify() -> UserValidation:
        settings = get_settings()
        async with open_database(settings) as database, database.session() as session:
            token = await resolve_token(session, settings)
        return await _validate(token)

    validation = run_async_command(_verify())

    if not validation.valid:
        console.print(f"[red]Invalid token:[/red] {validation.message}")
        raise typer.Exit(1)
    login = validation.profile.login if validation.profile else "unknown"
    console.print(f"[green]Token is valid[/green] (authenticated as {login})")
