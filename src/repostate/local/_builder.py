"""Realizing a RepoState as a local git repository."""

import tempfile
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from pathlib import Path

from repostate.state import Commit, RepoState
from repostate.utils import get_logger

from ._git import GitWorkingTree

_log = get_logger(__name__)

DEFAULT_BRANCH = "master"


async def create_git_repo_commit(tree: GitWorkingTree, commit: Commit) -> None:
    """Write, stage and commit one abstract commit on the current branch."""
    await tree.write_content(commit.lines)
    await tree.commit(commit.message)


async def create_git_repo(
    state: RepoState,
    directory: Path | None = None,
    *,
    default_branch: str = DEFAULT_BRANCH,
    env: Mapping[str, str] | None = None,
) -> GitWorkingTree:
    """Build `state` as a local repository.

    The initial commit becomes the root of `default_branch`. Every other
    branch is created from it before any branch gets its own commits, then
    branches receive their commits one branch at a time.

    Args:
        state: Repository to realize.
        directory: Empty or missing directory to create the repository in.
            A new temporary directory is used when None; removing it is left
            to the caller.
        default_branch: Name of the branch holding the initial commit.
        env: Extra environment variables for git.

    Returns:
        Handle on the created working tree.
    """
    if directory is None:
        directory = Path(tempfile.mkdtemp(prefix="repostate-"))
    tree = GitWorkingTree(directory, env=env)

    await tree.init(default_branch)
    await create_git_repo_commit(tree, state.initial_commit)

    for ref in state.refs:
        if ref != default_branch:
            await tree.checkout(ref, create=True)

    for ref in state.refs:
        await tree.checkout(ref)
        for commit in state.refs_commits[ref]:
            await create_git_repo_commit(tree, commit)

    _log.info("git_repo_created", directory=str(directory), refs=list(state.refs))
    return tree


@asynccontextmanager
async def local_repository(
    state: RepoState,
    *,
    default_branch: str = DEFAULT_BRANCH,
    env: Mapping[str, str] | None = None,
) -> AsyncIterator[GitWorkingTree]:
    """Build `state` in a temporary directory removed on exit.

    Example:
        >>> async with local_repository(state) as tree:
        ...     commits = await get_reference_commits_from_git_repo(tree, "master")
    """
    with tempfile.TemporaryDirectory(prefix="repostate-") as tmp:
        yield await create_git_repo(
            state,
            Path(tmp) / "repo",
            default_branch=default_branch,
            env=env,
        )
