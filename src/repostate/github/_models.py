"""GitHub response models."""

from dataclasses import dataclass
from typing import Self, cast


@dataclass(frozen=True, slots=True)
class GitCommit:
    """Git data of a single commit.

    Attributes:
        sha: Commit SHA.
        message: Full commit message.
        tree: SHA of the commit's tree.
        parent_shas: SHAs of the parents, empty for a root commit.
    """

    sha: str
    message: str
    tree: str
    parent_shas: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CommitIdentity:
    """Author or committer of a commit."""

    name: str
    email: str
    date: str


@dataclass(frozen=True, slots=True)
class CommitDetails:
    """A commit as listed on a pull request.

    Attributes:
        sha: Commit SHA.
        message: Full commit message.
        tree: SHA of the commit's tree.
        author: Git author, if reported.
        committer: Git committer, if reported.
    """

    sha: str
    message: str
    tree: str
    author: CommitIdentity | None
    committer: CommitIdentity | None

    @classmethod
    def from_api(cls, data: dict[str, object]) -> Self:
        """Build from one entry of the pull request commits endpoint."""
        commit = _as_dict(data["commit"])
        return cls(
            sha=str(data["sha"]),
            message=str(commit["message"]),
            tree=str(_as_dict(commit["tree"])["sha"]),
            author=_identity(commit.get("author")),
            committer=_identity(commit.get("committer")),
        )


def _as_dict(value: object) -> dict[str, object]:
    if not isinstance(value, dict):
        msg = f"Expected a JSON object, got {type(value).__name__}"
        raise TypeError(msg)
    return value  # pyright: ignore[reportUnknownVariableType]


def _identity(value: object) -> CommitIdentity | None:
    if not isinstance(value, dict):
        return None
    identity = cast("dict[str, object]", value)
    return CommitIdentity(
        name=str(identity.get("name", "")),
        email=str(identity.get("email", "")),
        date=str(identity.get("date", "")),
    )
