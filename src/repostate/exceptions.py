"""repostate exceptions."""

from collections.abc import Sequence
from pathlib import Path


class RepoStateError(Exception):
    """Base exception for repostate errors."""


class ConfigError(RepoStateError):
    """Raised when settings are missing or invalid.

    Attributes:
        keys: Environment variable names that failed validation.
    """

    def __init__(self, message: str, *, keys: Sequence[str] = ()) -> None:
        """Initialize with error message and the offending keys."""
        super().__init__(message)
        self.keys: tuple[str, ...] = tuple(keys)


class FixtureError(RepoStateError):
    """Raised when a repository fixture file cannot be loaded.

    Attributes:
        path: The fixture file, if the error came from a file.
    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and optional path context."""
        super().__init__(message)
        self.path: Path | None = path


class InvalidCommitError(RepoStateError, ValueError):
    """Raised when a commit description is unusable (e.g. empty message)."""


# =============================================================================
# GitHub Exceptions
# =============================================================================


class GitHubAPIError(RepoStateError):
    """Raised when the GitHub API answers with a non-success status.

    Attributes:
        status_code: HTTP status code of the response.
        method: HTTP method of the failed request.
        url: URL of the failed request.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        method: str = "",
        url: str = "",
    ) -> None:
        """Initialize with error message and request context.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code of the response.
            method: HTTP method of the failed request.
            url: URL of the failed request.
        """
        super().__init__(message)
        self.status_code: int = status_code
        self.method: str = method
        self.url: str = url


class ReferenceNotFoundError(GitHubAPIError):
    """Raised when a branch reference does not exist on GitHub.

    Attributes:
        ref: The short branch name that was looked up.
    """

    def __init__(self, message: str, *, ref: str, url: str = "") -> None:
        """Initialize with error message and the missing reference."""
        super().__init__(message, status_code=404, method="GET", url=url)
        self.ref: str = ref


class ContentEncodingError(RepoStateError):
    """Raised when GitHub returns file content in an encoding that cannot be read.

    Attributes:
        ref: Branch or commit the content was fetched at.
        encoding: The encoding GitHub reported.
    """

    def __init__(self, message: str, *, ref: str, encoding: str) -> None:
        """Initialize with error message and the reported encoding."""
        super().__init__(message)
        self.ref: str = ref
        self.encoding: str = encoding


class CommitChainError(RepoStateError):
    """Raised when walking a commit's parents does not reach a root commit.

    Attributes:
        sha: The SHA where the walk stopped.
        depth: Number of commits read before stopping.
    """

    def __init__(self, message: str, *, sha: str, depth: int) -> None:
        """Initialize with error message and walk context."""
        super().__init__(message)
        self.sha: str = sha
        self.depth: int = depth


class TemporaryReferenceCleanupError(RepoStateError):
    """Raised when deleting an ephemeral reference fails after a successful body.

    Attributes:
        ref: The ephemeral reference that could not be deleted.
    """

    def __init__(self, message: str, *, ref: str) -> None:
        """Initialize with error message and the leaked reference."""
        super().__init__(message)
        self.ref: str = ref


# =============================================================================
# Local Git Exceptions
# =============================================================================


class GitCommandError(RepoStateError):
    """Raised when the git executable exits with a non-zero status.

    Attributes:
        git_args: Arguments passed to git (without the executable).
        returncode: Process exit status.
        stderr: Decoded standard error output.
        cwd: Working directory the command ran in.
    """

    def __init__(
        self,
        message: str,
        *,
        args: Sequence[str],
        returncode: int,
        stderr: str = "",
        cwd: Path | None = None,
    ) -> None:
        """Initialize with error message and process context.

        Args:
            message: Human-readable error message.
            args: Arguments passed to git.
            returncode: Process exit status.
            stderr: Decoded standard error output.
            cwd: Working directory the command ran in.
        """
        super().__init__(message)
        self.git_args: tuple[str, ...] = tuple(args)
        self.returncode: int = returncode
        self.stderr: str = stderr
        self.cwd: Path | None = cwd
