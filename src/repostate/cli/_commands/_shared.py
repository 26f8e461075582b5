# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- Output formatters for commit histories and built references
- Console utilities for error handling
"""

from collections.abc import Mapping
from enum import IntEnum, StrEnum
from typing import Any, Never

import orjson
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from repostate.state import ReferenceState, RefDetails

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any] | list[Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "OutputFormat",
    "commits_table",
    "commits_to_data",
    "exit_with_error",
    "format_json",
    "get_error_console",
    "references_table",
    "references_to_data",
]


class ExitCode(IntEnum):
    """Standard exit codes for repostate CLI commands."""

    SUCCESS = 0
    ERROR = 1


class OutputFormat(StrEnum):
    """Output formats for commands printing data."""

    TABLE = "table"
    JSON = "json"


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Data to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def commits_to_data(commits: ReferenceState) -> list[dict[str, Any]]:
    """Convert a branch history into fixture-shaped dictionaries."""
    return [{"lines": list(c.lines), "message": c.message} for c in commits]


def commits_table(branch: str, commits: ReferenceState) -> Table:
    """Render a branch history, oldest first."""
    table = Table(title=escape(branch))
    table.add_column("#", justify="right")
    table.add_column("Message")
    table.add_column("Lines")
    for index, commit in enumerate(commits):
        table.add_row(
            str(index), escape(commit.message), escape(", ".join(commit.lines))
        )
    return table


def references_to_data(refs_details: Mapping[str, RefDetails]) -> dict[str, Any]:
    return {
        branch: {"ref": details.ref, "shas": list(details.shas)}
        for branch, details in refs_details.items()
    }


def references_table(refs_details: Mapping[str, RefDetails]) -> Table:
    """Render built references as branch, ephemeral ref and head SHA."""
    table = Table()
    table.add_column("Branch")
    table.add_column("Reference")
    table.add_column("Head")
    for branch, details in refs_details.items():
        table.add_row(escape(branch), escape(details.ref), details.head)
    return table


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(
        f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True
    )
    raise SystemExit(code)
