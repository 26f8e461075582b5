"""Reading abstract state back from GitHub."""

from repostate.exceptions import CommitChainError
from repostate.state import Commit, ReferenceState, get_lines

from ._client import GitHubClient
from ._models import CommitDetails

#: Upper bound on the number of commits walked from a branch head.
DEFAULT_MAX_DEPTH = 1000


async def fetch_reference_commits_from_sha(
    client: GitHubClient, sha: str, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> ReferenceState:
    """Walk first parents from `sha` back to the root commit.

    Args:
        client: GitHub client for the target repository.
        sha: Commit to start from.
        max_depth: Maximum number of commits to read.

    Returns:
        The commits from the root commit to `sha`, oldest first.

    Raises:
        CommitChainError: If a commit is seen twice or `max_depth` commits were
            read without reaching a root commit.
    """
    commits: list[Commit] = []
    seen: set[str] = set()
    current: str | None = sha
    while current is not None:
        if current in seen:
            msg = f"Commit {current} is its own ancestor"
            raise CommitChainError(msg, sha=current, depth=len(commits))
        if len(commits) >= max_depth:
            msg = f"No root commit within {max_depth} commits of {sha}"
            raise CommitChainError(msg, sha=current, depth=len(commits))
        seen.add(current)

        content = await client.fetch_content(current)
        git_commit = await client.fetch_commit(current)
        commits.append(Commit(get_lines(content), git_commit.message))

        # Merge commits are never created, only the first parent matters
        current = git_commit.parent_shas[0] if git_commit.parent_shas else None

    commits.reverse()
    return tuple(commits)


async def fetch_reference_commits(
    client: GitHubClient, ref: str, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> ReferenceState:
    """Return the full history of a remote branch, oldest first."""
    sha = await client.fetch_reference_sha(ref)
    return await fetch_reference_commits_from_sha(client, sha, max_depth=max_depth)


async def fetch_commits_details(
    client: GitHubClient, pull_request_number: int, *, per_page: int | None = None
) -> list[CommitDetails]:
    """List every commit of a pull request across all result pages.

    Args:
        client: GitHub client for the target repository.
        pull_request_number: Number of the pull request.
        per_page: Page size, GitHub's default when None.

    Returns:
        Commit details in the order GitHub lists them (oldest first).
    """
    details: list[CommitDetails] = []
    async for page in client.iter_pull_request_commit_pages(
        pull_request_number, per_page=per_page
    ):
        details.extend(CommitDetails.from_api(entry) for entry in page)
    return details


async def fetch_commits(
    client: GitHubClient, pull_request_number: int, *, per_page: int | None = None
) -> list[str]:
    """List the SHAs of a pull request's commits, oldest first."""
    details = await fetch_commits_details(
        client, pull_request_number, per_page=per_page
    )
    return [detail.sha for detail in details]
