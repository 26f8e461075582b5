# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, TC003
"""GitHub repository commands.

Every command reads its target repository and token from the
REPOSTATE_GITHUB_* environment variables.
"""

from collections.abc import Mapping
from functools import partial
from pathlib import Path
from typing import Annotated

import anyio
import httpx
from cyclopts import App, Parameter

from repostate.exceptions import RepoStateError
from repostate.github import create_references, fetch_reference_commits
from repostate.state import ReferenceState, RefDetails, RepoState, load_repo_state
from repostate.utils import gather_settled

from ._context import CLIContext
from ._shared import (
    OutputFormat,
    commits_table,
    commits_to_data,
    exit_with_error,
    format_json,
    references_table,
    references_to_data,
)

app = App(
    name="remote",
    help="Build and read repositories through the GitHub API",
    help_on_error=True,
)

_ERRORS = (RepoStateError, httpx.HTTPError)


async def _build_remote(ctx: CLIContext, state: RepoState) -> Mapping[str, RefDetails]:
    async with ctx.github_client() as client:
        created = await create_references(client, state)
    return created.refs_details


async def _read_remote(ctx: CLIContext, branch: str) -> ReferenceState:
    async with ctx.github_client() as client:
        return await fetch_reference_commits(client, branch)


async def _delete_remote(ctx: CLIContext, refs: tuple[str, ...]) -> None:
    async with ctx.github_client() as client:
        await gather_settled([partial(client.delete_reference, ref) for ref in refs])


@app.command(name="build")
def _build(
    fixture: Annotated[Path, Parameter(help="JSON or TOML fixture file")],
    *,
    output_format: Annotated[
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TABLE,
) -> None:
    """Build a fixture on GitHub and print the created references

    References are left in place; remove them with `repostate remote delete`.
    """
    ctx = CLIContext.get_current()
    try:
        state = load_repo_state(fixture)
        refs_details = anyio.run(_build_remote, ctx, state)
    except _ERRORS as e:
        exit_with_error(str(e), console=ctx.error_console)

    if output_format == OutputFormat.JSON:
        output = format_json(references_to_data(refs_details))
        ctx.console.print(output, markup=False, highlight=False, soft_wrap=True)
    else:
        ctx.console.print(references_table(refs_details))


@app.command(name="read")
def _read(
    branch: Annotated[str, Parameter(help="Branch to read")],
    *,
    output_format: Annotated[
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TABLE,
) -> None:
    """Print a GitHub branch's history, oldest first"""
    ctx = CLIContext.get_current()
    try:
        commits = anyio.run(_read_remote, ctx, branch)
    except _ERRORS as e:
        exit_with_error(str(e), console=ctx.error_console)

    if output_format == OutputFormat.JSON:
        output = format_json(commits_to_data(commits))
        ctx.console.print(output, markup=False, highlight=False, soft_wrap=True)
    else:
        ctx.console.print(commits_table(branch, commits))


@app.command(name="delete")
def _delete(
    refs: Annotated[tuple[str, ...], Parameter(help="Branches to delete")],
) -> None:
    """Delete branches from GitHub"""
    ctx = CLIContext.get_current()
    try:
        anyio.run(_delete_remote, ctx, refs)
    except _ERRORS as e:
        exit_with_error(str(e), console=ctx.error_console)

    for ref in refs:
        ctx.console.print(f"Deleted {ref}", markup=False, highlight=False)
