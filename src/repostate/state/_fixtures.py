"""Loading repository states from fixture files.

Fixtures are JSON or TOML documents of the form::

    {
        "initial_commit": {"lines": ["initial"], "message": "initial"},
        "refs_commits": {
            "master": [{"lines": ["initial", "master 1"], "message": "m1"}]
        }
    }
"""

import tomllib
from pathlib import Path
from typing import ClassVar, Self

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from repostate.exceptions import FixtureError

from ._models import Commit, RepoState


class CommitModel(BaseModel):
    """Validated commit entry of a fixture file."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    lines: list[str]
    message: str = Field(min_length=1)

    def to_commit(self) -> Commit:
        return Commit(self.lines, self.message)


class RepoStateModel(BaseModel):
    """Validated fixture file."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    initial_commit: CommitModel
    refs_commits: dict[str, list[CommitModel]] = Field(default_factory=dict)

    def to_repo_state(self) -> RepoState:
        return RepoState(
            initial_commit=self.initial_commit.to_commit(),
            refs_commits={
                ref: tuple(commit.to_commit() for commit in commits)
                for ref, commits in self.refs_commits.items()
            },
        )

    @classmethod
    def from_repo_state(cls, state: RepoState) -> Self:
        def _commit(commit: Commit) -> CommitModel:
            return CommitModel(lines=list(commit.lines), message=commit.message)

        return cls(
            initial_commit=_commit(state.initial_commit),
            refs_commits={
                ref: [_commit(commit) for commit in commits]
                for ref, commits in state.refs_commits.items()
            },
        )


def repo_state_from_dict(data: object) -> RepoState:
    """Validate a decoded fixture document.

    Args:
        data: Decoded JSON or TOML document.

    Returns:
        The described RepoState.

    Raises:
        FixtureError: If the document does not describe a repository.
    """
    try:
        return RepoStateModel.model_validate(data).to_repo_state()
    except ValidationError as e:
        msg = f"Invalid repository fixture: {e}"
        raise FixtureError(msg) from e


def load_repo_state(path: Path) -> RepoState:
    """Load a RepoState from a `.json` or `.toml` fixture file.

    Args:
        path: Fixture file path.

    Returns:
        The described RepoState.

    Raises:
        FixtureError: If the file cannot be read, parsed or validated.
    """
    suffix = path.suffix.lower()
    try:
        raw = path.read_bytes()
    except OSError as e:
        msg = f"Cannot read fixture {path}: {e}"
        raise FixtureError(msg, path=path) from e

    try:
        if suffix == ".json":
            data: object = orjson.loads(raw)
        elif suffix == ".toml":
            data = tomllib.loads(raw.decode("utf-8"))
        else:
            msg = f"Unsupported fixture format '{suffix}' (expected .json or .toml)"
            raise FixtureError(msg, path=path)
    except (orjson.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        msg = f"Cannot parse fixture {path}: {e}"
        raise FixtureError(msg, path=path) from e

    try:
        return RepoStateModel.model_validate(data).to_repo_state()
    except ValidationError as e:
        msg = f"Invalid repository fixture {path}: {e}"
        raise FixtureError(msg, path=path) from e


def dump_repo_state(state: RepoState) -> bytes:
    """Serialize a RepoState to fixture JSON."""
    model = RepoStateModel.from_repo_state(state)
    return orjson.dumps(model.model_dump(), option=orjson.OPT_INDENT_2)
