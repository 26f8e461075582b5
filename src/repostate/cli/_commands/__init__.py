"""repostate CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._context import CLIContext
from ._local import app as local_app
from ._remote import app as remote_app
from ._shared import (
    ExitCode,
    FormattableData,
    OutputFormat,
    exit_with_error,
    format_json,
    get_error_console,
)

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "FormattableData",
    "OutputFormat",
    "exit_with_error",
    "format_json",
    "get_error_console",
    "local_app",
    "register_commands",
    "remote_app",
]


def register_commands(app: "App") -> None:  # noqa: UP037
    app.command(local_app)
    app.command(remote_app)
