"""The command-line interface for repostate."""

from typing import Annotated

import httpx
from cyclopts import App, Parameter
from rich.console import Console

from repostate.config import LoggingSettings, load_logging_settings
from repostate.exceptions import ConfigError
from repostate.utils import create_logger

from ._commands import register_commands
from ._commands._context import CLIContext

_HELP = "Build git repository fixtures on GitHub and locally, and read them back."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> App:
    """Create the repostate application.

    Invoke it through ``app.meta`` so global options are parsed and the
    CLIContext is set for the duration of the command.

    Args:
        console: Console for regular output.
        error_console: Console for errors.
        exit_on_error: Whether parse errors exit the process.
        transport: HTTP transport used for every GitHub request.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="repostate",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Enable debug logging")] = False,
    ) -> None:
        """Launch repostate with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Log at debug level regardless of REPOSTATE_LOG_LEVEL.
        """
        config_error: str | None = None
        try:
            settings = load_logging_settings()
        except ConfigError as e:
            settings = LoggingSettings()
            config_error = str(e)

        cli_logger = create_logger(
            "repostate.cli",
            level="debug" if verbose else settings.level.value,
            log_format=settings.format.value,  # type: ignore[arg-type]
            log_file=settings.file,
        )
        if config_error is not None:
            cli_logger.warning("invalid_logging_settings", error=config_error)

        ctx = CLIContext(
            console=console,
            error_console=error_console,
            transport=transport,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)
        cli_logger.debug("command_started", tokens=list(tokens))

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `repostate` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
