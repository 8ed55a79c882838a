"""Fixtures for CLI command tests."""

import asyncio
from collections.abc import Awaitable, Callable
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from github_pr_finder.db import Database
from github_pr_finder.logging import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging_after_command():
    """Drop loguru handlers bound to the runner's captured streams."""
    yield
    reset_logging()


@pytest.fixture
def seed(cli_env):
    """Run an async callback against the CLI's database.

    Usage:
        async def _add(session):
            await RepositoryRepository(session).create("octocat", "hello-world")

        seed(_add)
    """

    def _seed(callback: Callable[[AsyncSession], Awaitable[object]]) -> object:
        async def _run() -> object:
            database = Database(cli_env)
            try:
                await database.create_tables()
                async with database.session() as session:
                    return await callback(session)
            finally:
                await database.dispose()

        return asyncio.run(_run())

    return _seed


def make_client_mock() -> MagicMock:
    """MagicMock usable as `async with GitHubClient(...) as client`."""
    client = MagicMock()
    client.__aenter__.return_value = client
    return client


@pytest.fixture
def github_client():
    """Patch GitHubClient wherever the CLI builds one."""
    client = make_client_mock()
    targets = [
        "github_pr_finder.cli.member.GitHubClient",
        "github_pr_finder.cli.token.GitHubClient",
        "github_pr_finder.cli.sync.GitHubClient",
        "github_pr_finder.cli.prs.GitHubClient",
    ]
    patchers = [patch(target, return_value=client) for target in targets]
    mocks = [p.start() for p in patchers]
    client.constructors = mocks
    yield client
    for p in patchers:
        p.stop()
