"""Ephemeral branch references.

Tests sharing one remote repository each work on uniquely named branches
that are deleted once the test is done. Two forms are provided:

- `create_temporary_reference` returns a handle whose `delete()` the caller
  invokes when it sees fit (used when several references must outlive one
  scope and be released together).
- `with_temporary_reference` / `run_with_temporary_reference` scope the
  reference to a block and always delete it on exit.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

import anyio

from repostate.exceptions import TemporaryReferenceCleanupError
from repostate.utils import get_logger

from ._client import GitHubClient
from ._refs import generate_unique_ref

_log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TemporaryReference:
    """A uniquely named branch created for the duration of a test.

    Attributes:
        client: Client the reference was created with.
        ref: Generated branch name, ``<base>-<uuid>``.
        sha: Commit the reference was created at.
    """

    client: GitHubClient
    ref: str
    sha: str

    async def delete(self) -> None:
        """Delete the reference from the remote."""
        await self.client.delete_reference(self.ref)


async def create_temporary_reference(
    client: GitHubClient, ref: str, sha: str
) -> TemporaryReference:
    """Create a uniquely named branch derived from `ref` pointing at `sha`.

    Args:
        client: GitHub client for the target repository.
        ref: Base branch name.
        sha: Commit to point at.

    Returns:
        Handle carrying the generated name and its release capability.
    """
    temporary_ref = generate_unique_ref(ref)
    await client.create_reference(temporary_ref, sha)
    _log.debug("temporary_reference_created", base=ref, ref=temporary_ref, sha=sha)
    return TemporaryReference(client=client, ref=temporary_ref, sha=sha)


@asynccontextmanager
async def with_temporary_reference(
    client: GitHubClient, ref: str, sha: str
) -> AsyncIterator[str]:
    """Scope a temporary reference to an ``async with`` block.

    The reference is deleted on every exit path. When the block raised, its
    exception propagates and a cleanup failure is only attached to it as a
    note. When the block succeeded, a cleanup failure is raised as
    `TemporaryReferenceCleanupError`.

    Args:
        client: GitHub client for the target repository.
        ref: Base branch name.
        sha: Commit to point at.

    Yields:
        The generated branch name.

    Example:
        >>> async with with_temporary_reference(client, "feature", sha) as ref:
        ...     await client.create_pull_request("master", ref)
    """
    temporary = await create_temporary_reference(client, ref, sha)
    try:
        yield temporary.ref
    except BaseException as e:
        # Cleanup must still run when the block was cancelled
        with anyio.CancelScope(shield=True):
            try:
                await temporary.delete()
            except Exception as cleanup_error:  # noqa: BLE001
                _log.warning(
                    "temporary_reference_cleanup_failed",
                    ref=temporary.ref,
                    error=str(cleanup_error),
                )
                e.add_note(
                    f"Deleting temporary reference {temporary.ref} "
                    f"also failed: {cleanup_error}"
                )
        raise
    else:
        try:
            await temporary.delete()
        except Exception as e:
            msg = f"Failed to delete temporary reference {temporary.ref}: {e}"
            raise TemporaryReferenceCleanupError(msg, ref=temporary.ref) from e


async def run_with_temporary_reference[T](
    client: GitHubClient,
    ref: str,
    sha: str,
    action: Callable[[str], Awaitable[T]],
) -> T:
    """Call `action` with a temporary reference deleted afterwards.

    Callback form of `with_temporary_reference`, with the same cleanup rules.

    Args:
        client: GitHub client for the target repository.
        ref: Base branch name.
        sha: Commit to point at.
        action: Receives the generated branch name.

    Returns:
        What `action` returned.
    """
    async with with_temporary_reference(client, ref, sha) as temporary_ref:
        return await action(temporary_ref)
