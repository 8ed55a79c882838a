"""Cache database commands."""

import typer

from github_pr_finder.cli.common import console, run_async_command
from github_pr_finder.config import get_settings
from github_pr_finder.db import Database

app = typer.Typer(help="Manage the local cache database")


@app.command("init")
def init_db(
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Drop all tables first (deletes every cached row)",
    ),
) -> None:
    """Create the cache tables if they do not exist.

    Examples:
        prfinder db init
        prfinder db init --reset
    """
    settings = get_settings()

    async def _init() -> None:
        database = Database.from_settings(settings)
        try:
            if reset:
                await database.drop_tables()
            await database.create_tables()
        finally:
            await database.dispose()

    run_async_command(_init(), error_prefix="Database init failed")
    action = "Reset" if reset else "Initialized"
    console.print(f"[green]{action}[/green] cache at {settings.database_url}")
