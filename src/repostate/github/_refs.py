"""Branch reference naming for the GitHub git data API."""

from uuid import uuid4


def get_head_ref(ref: str) -> str:
    """Return the API path of a branch, e.g. ``heads/master``."""
    return f"heads/{ref}"


def get_fully_qualified_ref(ref: str) -> str:
    """Return the fully-qualified name of a branch, e.g. ``refs/heads/master``."""
    return f"refs/{get_head_ref(ref)}"


def generate_unique_ref(ref: str) -> str:
    """Return ``<ref>-<uuid4>``.

    Used to give concurrent test runs sharing one remote repository their own
    branches. Collisions are not checked for.
    """
    return f"{ref}-{uuid4()}"
