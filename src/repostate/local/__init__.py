"""Local repository state built with the git executable.

Classes:
    GitWorkingTree: Owned handle on a working directory running git commands.

Functions:
    create_git_repo: Build a RepoState as a local repository.
    local_repository: Same, inside a temporary directory removed on exit.
    get_reference_commits_from_git_repo: Read a local branch back, oldest first.
"""

from repostate.local._builder import (
    DEFAULT_BRANCH,
    create_git_repo,
    create_git_repo_commit,
    local_repository,
)
from repostate.local._git import GIT_IDENTITY_ENV, GitWorkingTree
from repostate.local._reader import (
    get_reference_commits_from_git_repo,
    get_reference_shas_from_git_repo,
)

__all__ = [
    "DEFAULT_BRANCH",
    "GIT_IDENTITY_ENV",
    "GitWorkingTree",
    "create_git_repo",
    "create_git_repo_commit",
    "get_reference_commits_from_git_repo",
    "get_reference_shas_from_git_repo",
    "local_repository",
]
