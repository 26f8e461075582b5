# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, TC003
"""Local repository commands."""

from functools import partial
from pathlib import Path
from typing import Annotated

import anyio
from cyclopts import App, Parameter

from repostate.exceptions import RepoStateError
from repostate.local import (
    DEFAULT_BRANCH,
    GitWorkingTree,
    create_git_repo,
    get_reference_commits_from_git_repo,
)
from repostate.state import load_repo_state

from ._context import CLIContext
from ._shared import (
    OutputFormat,
    commits_table,
    commits_to_data,
    exit_with_error,
    format_json,
)

app = App(
    name="local",
    help="Build and read repositories with the git executable",
    help_on_error=True,
)


@app.command(name="build")
def _build(
    fixture: Annotated[Path, Parameter(help="JSON or TOML fixture file")],
    *,
    directory: Annotated[
        Path | None,
        Parameter(help="Directory to create the repository in (default: temporary)"),
    ] = None,
    default_branch: Annotated[
        str, Parameter(help="Branch holding the initial commit")
    ] = DEFAULT_BRANCH,
) -> None:
    """Build a fixture as a local git repository and print its path"""
    ctx = CLIContext.get_current()
    try:
        state = load_repo_state(fixture)
        tree = anyio.run(
            partial(create_git_repo, state, directory, default_branch=default_branch)
        )
    except RepoStateError as e:
        exit_with_error(str(e), console=ctx.error_console)

    ctx.console.print(
        str(tree.directory), markup=False, highlight=False, soft_wrap=True
    )


@app.command(name="read")
def _read(
    directory: Annotated[Path, Parameter(help="Working tree of the repository")],
    branch: Annotated[str, Parameter(help="Branch to read")],
    *,
    output_format: Annotated[
        OutputFormat, Parameter(name=["--format", "-f"], help="Output format")
    ] = OutputFormat.TABLE,
) -> None:
    """Print a local branch's history, oldest first"""
    ctx = CLIContext.get_current()
    tree = GitWorkingTree(directory)
    try:
        commits = anyio.run(get_reference_commits_from_git_repo, tree, branch)
    except RepoStateError as e:
        exit_with_error(str(e), console=ctx.error_console)

    if output_format == OutputFormat.JSON:
        output = format_json(commits_to_data(commits))
        ctx.console.print(output, markup=False, highlight=False, soft_wrap=True)
    else:
        ctx.console.print(commits_table(branch, commits))
