"""Remote repository state on GitHub.

This package realizes abstract repository states through the GitHub git
data API and reads them back.

Classes:
    GitHubClient: Single-purpose async calls against one repository.
    TemporaryReference: Ephemeral branch with its release capability.
    CreatedReferences: Result of `create_references`.
    FakeGitHub: In-memory GitHub served through httpx.MockTransport.

Functions:
    create_references: Build every branch of a RepoState remotely.
    fetch_reference_commits: Read a remote branch back, oldest first.
    fetch_commits_details: List all commits of a pull request.
    with_temporary_reference: Scope an ephemeral branch to a block.

Example:
    >>> async with GitHubClient.from_settings(load_github_settings()) as client:
    ...     created = await create_references(client, state)
    ...     try:
    ...         ref = created.refs_details["feature"].ref
    ...         commits = await fetch_reference_commits(client, ref)
    ...     finally:
    ...         await created.delete_references()
"""

from repostate.github._builder import (
    CreatedReferences,
    DeleteReferences,
    create_commit_from_lines_and_message,
    create_references,
)
from repostate.github._client import API_VERSION, FILE_MODE, GitHubClient, build_headers
from repostate.github._fake import FailureRule, FakeGitHub
from repostate.github._models import CommitDetails, CommitIdentity, GitCommit
from repostate.github._reader import (
    DEFAULT_MAX_DEPTH,
    fetch_commits,
    fetch_commits_details,
    fetch_reference_commits,
    fetch_reference_commits_from_sha,
)
from repostate.github._refs import (
    generate_unique_ref,
    get_fully_qualified_ref,
    get_head_ref,
)
from repostate.github._temporary import (
    TemporaryReference,
    create_temporary_reference,
    run_with_temporary_reference,
    with_temporary_reference,
)

__all__ = [
    "API_VERSION",
    "DEFAULT_MAX_DEPTH",
    "FILE_MODE",
    "CommitDetails",
    "CommitIdentity",
    "CreatedReferences",
    "DeleteReferences",
    "FailureRule",
    "FakeGitHub",
    "GitCommit",
    "GitHubClient",
    "TemporaryReference",
    "build_headers",
    "create_commit_from_lines_and_message",
    "create_references",
    "create_temporary_reference",
    "fetch_commits",
    "fetch_commits_details",
    "fetch_reference_commits",
    "fetch_reference_commits_from_sha",
    "generate_unique_ref",
    "get_fully_qualified_ref",
    "get_head_ref",
    "run_with_temporary_reference",
    "with_temporary_reference",
]
