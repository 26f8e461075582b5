"""Serialization of commit lines to the tracked file's content."""

from collections.abc import Iterable

#: The single file tracked in every fixture repository.
FILENAME = "file.txt"

#: Lines are stored as paragraphs separated by a blank line.
LINE_SEPARATOR = "\n\n"


def get_content(lines: Iterable[str]) -> str:
    """Join commit lines into file content."""
    return LINE_SEPARATOR.join(lines)


def get_lines(content: str) -> tuple[str, ...]:
    """Split file content back into commit lines.

    Inverse of `get_content` for lines that are non-empty and do not
    contain the separator themselves.
    """
    return tuple(content.split(LINE_SEPARATOR))
