"""Abstract repository state.

This package describes repositories independently of how they are realized:
a shared initial commit plus linear branches of single-file commits.

Models:
    Commit: Lines of the tracked file and a commit message.
    ReferenceState: Oldest-first tuple of commits of one branch.
    RepoState: Initial commit plus the commits of each branch.
    RefDetails: Ephemeral reference and SHA chain of a realized branch.

Example:
    >>> from repostate.state import Commit, RepoState
    >>> state = RepoState(
    ...     initial_commit=Commit(["initial"], "initial"),
    ...     refs_commits={"master": (Commit(["initial", "m1"], "m1"),)},
    ... )
    >>> state.refs
    ('master',)
"""

from repostate.state._content import FILENAME, LINE_SEPARATOR, get_content, get_lines
from repostate.state._fixtures import (
    CommitModel,
    RepoStateModel,
    dump_repo_state,
    load_repo_state,
    repo_state_from_dict,
)
from repostate.state._models import Commit, ReferenceState, RefDetails, RepoState

__all__ = [
    "FILENAME",
    "LINE_SEPARATOR",
    "Commit",
    "CommitModel",
    "RefDetails",
    "ReferenceState",
    "RepoState",
    "RepoStateModel",
    "dump_repo_state",
    "get_content",
    "get_lines",
    "load_repo_state",
    "repo_state_from_dict",
]
