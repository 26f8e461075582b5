"""The git executable, driven against one working directory."""

import os
from collections.abc import Mapping
from pathlib import Path
from subprocess import PIPE
from typing import final

import anyio

from repostate.exceptions import GitCommandError
from repostate.state import FILENAME, get_content
from repostate.utils import get_logger

_log = get_logger(__name__)

#: Identity of every local fixture commit.
GIT_IDENTITY_ENV: dict[str, str] = {
    "GIT_AUTHOR_NAME": "repostate",
    "GIT_AUTHOR_EMAIL": "repostate@example.com",
    "GIT_COMMITTER_NAME": "repostate",
    "GIT_COMMITTER_EMAIL": "repostate@example.com",
}

# Keep user configuration from changing what gets committed
_CONFIG_OVERRIDES = ("-c", "commit.gpgsign=false", "-c", "core.autocrlf=false")


@final
class GitWorkingTree:
    """Owned handle on a local repository's working directory.

    The working directory is shared mutable state: checkouts change what
    every later command sees. Callers must await each operation before
    starting the next one and never use one handle from concurrent tasks.

    Attributes:
        directory: Root of the working tree.
    """

    __slots__ = ("_env", "directory")

    def __init__(
        self, directory: Path, *, env: Mapping[str, str] | None = None
    ) -> None:
        """Initialize the handle.

        Args:
            directory: Root of the working tree (created by `init` if needed).
            env: Extra environment variables for git, on top of os.environ
                and the fixture identity.
        """
        self.directory = directory
        self._env = {**os.environ, **GIT_IDENTITY_ENV, **(env or {})}

    @property
    def file_path(self) -> Path:
        """Path of the tracked file."""
        return self.directory / FILENAME

    async def run(self, *args: str) -> str:
        """Run a git command in the working directory.

        Args:
            *args: Arguments after ``git``.

        Returns:
            Standard output without its trailing newline.

        Raises:
            GitCommandError: If git exits with a non-zero status.
        """
        command = ["git", *_CONFIG_OVERRIDES, *args]
        result = await anyio.run_process(
            command,
            cwd=self.directory,
            env=self._env,
            stdout=PIPE,
            stderr=PIPE,
            check=False,
        )
        stderr = result.stderr.decode("utf-8", errors="replace")
        if result.returncode != 0:
            msg = f"git {' '.join(args)} failed with exit code {result.returncode}"
            if stderr.strip():
                msg = f"{msg}: {stderr.strip()}"
            raise GitCommandError(
                msg,
                args=args,
                returncode=result.returncode,
                stderr=stderr,
                cwd=self.directory,
            )
        _log.debug("git_command", args=list(args), cwd=str(self.directory))
        return result.stdout.decode("utf-8").removesuffix("\n")

    async def init(self, default_branch: str) -> None:
        """Create an empty repository whose unborn HEAD is `default_branch`."""
        await anyio.Path(self.directory).mkdir(parents=True, exist_ok=True)
        _ = await self.run("init")
        # Independent of the host's init.defaultBranch
        _ = await self.run("symbolic-ref", "HEAD", f"refs/heads/{default_branch}")

    async def checkout(self, ref: str, *, create: bool = False) -> None:
        """Switch to a branch or commit, creating the branch if asked."""
        if create:
            _ = await self.run("checkout", "-b", ref)
        else:
            _ = await self.run("checkout", ref)

    async def write_content(self, lines: tuple[str, ...]) -> None:
        """Overwrite the tracked file with the encoded lines."""
        _ = await anyio.Path(self.file_path).write_text(
            get_content(lines), encoding="utf-8", newline=""
        )

    async def read_content(self) -> str:
        """Read the tracked file as checked out, line endings untouched."""
        content = await anyio.Path(self.file_path).read_bytes()
        return content.decode("utf-8")

    async def commit(self, message: str) -> None:
        """Stage the tracked file and commit it with `message` stored verbatim."""
        _ = await self.run("add", FILENAME)
        _ = await self.run("commit", "--cleanup=verbatim", "--message", message)

    async def head_message(self) -> str:
        """Full message of the checked out commit.

        git ends the stored message with a newline, so trailing newlines of
        the original message cannot be told apart and are all removed.
        """
        message = await self.run("log", "--format=%B", "--max-count", "1")
        return message.rstrip("\n")

    async def short_log(self) -> list[str]:
        """Abbreviated SHAs of the checked out history, newest first."""
        log = await self.run("log", "--pretty=format:%h")
        return log.split("\n")
