"""CLI context for global state management.

The CLIContext is set once at CLI startup and made available to all
commands via contextvars.
"""

import contextvars
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self

import httpx
from rich.console import Console

from repostate.config import load_github_settings
from repostate.github import GitHubClient

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_current_cli_context: "contextvars.ContextVar[CLIContext | None]" = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context.

    Attributes:
        console: Console for regular output.
        error_console: Console for errors.
        transport: HTTP transport override for GitHub requests (tests use a
            mock transport here).
        logger: Structured logger for CLI commands.
    """

    console: Console = field(default_factory=Console, repr=False)
    error_console: Console = field(
        default_factory=lambda: Console(stderr=True), repr=False
    )
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    logger: "FilteringBoundLogger | None" = field(default=None, repr=False)

    @classmethod
    def get_current(cls) -> Self:
        """Get the active CLIContext, or a default one if none is set."""
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx
        return cls()

    @classmethod
    def set_current(cls, ctx: Self) -> None:
        """Set the active CLIContext."""
        _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to the default context."""
        _current_cli_context.set(None)

    def github_client(self) -> GitHubClient:
        """Create a GitHub client from REPOSTATE_GITHUB_* settings.

        Raises:
            ConfigError: If the settings are missing or invalid.
        """
        return GitHubClient.from_settings(
            load_github_settings(), transport=self.transport
        )
