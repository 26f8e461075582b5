"""Shared test fixtures for repostate tests."""

import os
from collections.abc import AsyncIterator, Callable

import pytest
from rich.console import Console

from repostate.cli import create_app
from repostate.github import FakeGitHub, GitHubClient
from repostate.state import Commit, RepoState


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop REPOSTATE_* variables inherited from the developer's shell."""
    for key in list(os.environ):
        if key.startswith("REPOSTATE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def console() -> Console:
    """Create a Rich console configured for testing.

    Uses fixed width and disables color/highlighting for predictable output.
    """
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def repo_state() -> RepoState:
    """Two branches diverging from one initial commit.

    Every commit changes the file, so the state can be built with git too.
    """
    return RepoState(
        initial_commit=Commit(("initial",), "Initial commit"),
        refs_commits={
            "master": (
                Commit(("initial", "master 1"), "master 1"),
                Commit(("initial", "master 1", "master 2"), "master 2"),
            ),
            "feature": (
                Commit(("feature 1",), "feature 1"),
                Commit(("feature 1", "feature 2"), "feature 2"),
                Commit(("feature 1", "feature 2", "feature 3"), "feature 3"),
            ),
        },
    )


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
async def client(github: FakeGitHub) -> AsyncIterator[GitHubClient]:
    async with github.client() as client:
        yield client


@pytest.fixture
def github_env(github: FakeGitHub, monkeypatch: pytest.MonkeyPatch) -> FakeGitHub:
    """Point REPOSTATE_GITHUB_* settings at the fake."""
    monkeypatch.setenv("REPOSTATE_GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("REPOSTATE_GITHUB_OWNER", github.owner)
    monkeypatch.setenv("REPOSTATE_GITHUB_REPO", github.repo)
    monkeypatch.setenv("REPOSTATE_GITHUB_API_URL", github.base_url)
    return github


@pytest.fixture
def repostate_cli(console: Console, github: FakeGitHub) -> Callable[..., int]:
    """Create the CLI app for testing and return a runner giving the exit code.

    GitHub requests are answered by the `github` fake.
    """
    app = create_app(
        console=console, error_console=console, transport=github.transport()
    )

    def _run(*args: str) -> int:
        """Run the CLI app and return its exit code (0 if no SystemExit)."""
        try:
            app.meta(args)
        except SystemExit as e:
            if e.code is None:
                return 0
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
