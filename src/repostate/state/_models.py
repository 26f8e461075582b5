"""Abstract repository state models.

This module defines the in-memory description of a repository that the
builders materialize and the readers reconstruct.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from repostate.exceptions import InvalidCommitError


@dataclass(frozen=True, slots=True)
class Commit:
    """One commit of the tracked file.

    Attributes:
        lines: Paragraph-like blocks making up the file content.
        message: Commit message, never empty.
    """

    lines: tuple[str, ...]
    message: str

    def __post_init__(self) -> None:
        if not self.message:
            msg = "Commit message must not be empty"
            raise InvalidCommitError(msg)
        # Accept any iterable of lines while keeping the instance hashable
        object.__setattr__(self, "lines", tuple(self.lines))


# Oldest commit first
type ReferenceState = tuple[Commit, ...]


@dataclass(frozen=True, slots=True)
class RepoState:
    """A repository made of a shared initial commit and linear branches.

    Attributes:
        initial_commit: Root commit shared by every branch.
        refs_commits: Commits of each branch in order, excluding the
            initial commit. Insertion order is the processing order.
    """

    initial_commit: Commit
    refs_commits: Mapping[str, ReferenceState] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "refs_commits",
            {ref: tuple(commits) for ref, commits in self.refs_commits.items()},
        )

    @property
    def refs(self) -> tuple[str, ...]:
        """Branch names in processing order."""
        return tuple(self.refs_commits)

    def expected_history(self, ref: str) -> ReferenceState:
        """Full history a reader should return for `ref`, initial commit included."""
        return (self.initial_commit, *self.refs_commits[ref])


@dataclass(frozen=True, slots=True)
class RefDetails:
    """Outcome of realizing one branch remotely.

    Attributes:
        ref: Ephemeral branch name created on the remote.
        shas: Commit SHAs from the initial commit to the branch head.
    """

    ref: str
    shas: tuple[str, ...]

    @property
    def head(self) -> str:
        """SHA the ephemeral reference points at."""
        return self.shas[-1]
