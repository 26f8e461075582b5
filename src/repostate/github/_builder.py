"""Realizing a RepoState on GitHub through the git data API."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from functools import partial

from repostate.state import Commit, RefDetails, RepoState, get_content
from repostate.utils import gather_settled, get_logger

from ._client import GitHubClient
from ._temporary import TemporaryReference, create_temporary_reference

_log = get_logger(__name__)

type DeleteReferences = Callable[[], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class CreatedReferences:
    """Branches created by `create_references`.

    Attributes:
        refs_details: Ephemeral name and SHA chain of each branch, keyed by the
            branch names of the RepoState.
        temporary_references: Handles of the created ephemeral references.
    """

    refs_details: Mapping[str, RefDetails]
    temporary_references: tuple[TemporaryReference, ...]

    async def delete_references(self) -> None:
        """Delete every ephemeral reference, concurrently."""
        _ = await gather_settled([ref.delete for ref in self.temporary_references])
        _log.info(
            "references_deleted",
            refs=[ref.ref for ref in self.temporary_references],
        )


async def create_commit_from_lines_and_message(
    client: GitHubClient, commit: Commit, parent: str | None = None
) -> str:
    """Create blob, tree and commit for one abstract commit.

    Args:
        client: GitHub client for the target repository.
        commit: Lines and message of the commit.
        parent: Parent SHA, None for a root commit.

    Returns:
        SHA of the created commit.
    """
    blob = await client.create_blob(get_content(commit.lines))
    tree = await client.create_tree(blob)
    return await client.create_commit(commit.message, tree, parent)


async def _create_reference(
    client: GitHubClient,
    ref: str,
    commits: tuple[Commit, ...],
    initial_commit_sha: str,
) -> tuple[TemporaryReference, tuple[str, ...]]:
    shas = [initial_commit_sha]
    # Each commit needs its predecessor's SHA
    for commit in commits:
        sha = await create_commit_from_lines_and_message(client, commit, shas[-1])
        shas.append(sha)
    temporary = await create_temporary_reference(client, ref, shas[-1])
    return temporary, tuple(shas)


async def create_references(
    client: GitHubClient, state: RepoState
) -> CreatedReferences:
    """Realize every branch of `state` as an ephemeral remote branch.

    The initial commit is created once as a root commit. Branches are then
    built concurrently, each as a sequential chain on top of it, and get an
    ephemeral reference at their last commit.

    Nothing is rolled back on failure: the first failing branch's error is
    raised once all branches have finished, and references created for the
    other branches are left on the remote.

    Args:
        client: GitHub client for the target repository.
        state: Repository to realize.

    Returns:
        Branch details and the capability to delete the created references.
    """
    initial_commit_sha = await create_commit_from_lines_and_message(
        client, state.initial_commit
    )

    refs = state.refs
    results = await gather_settled(
        [
            partial(
                _create_reference,
                client,
                ref,
                state.refs_commits[ref],
                initial_commit_sha,
            )
            for ref in refs
        ]
    )

    refs_details = {
        ref: RefDetails(ref=temporary.ref, shas=shas)
        for ref, (temporary, shas) in zip(refs, results, strict=True)
    }
    _log.info(
        "references_created",
        initial_commit=initial_commit_sha,
        refs={ref: details.ref for ref, details in refs_details.items()},
    )
    return CreatedReferences(
        refs_details=refs_details,
        temporary_references=tuple(temporary for temporary, _ in results),
    )
