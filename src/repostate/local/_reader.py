"""Reading abstract state back from a local git repository."""

from repostate.state import Commit, ReferenceState, get_lines

from ._git import GitWorkingTree


async def get_reference_shas_from_git_repo(tree: GitWorkingTree, ref: str) -> list[str]:
    """Return the abbreviated SHAs of a branch's history, oldest first.

    Leaves `ref` checked out.
    """
    await tree.checkout(ref)
    shas = await tree.short_log()
    shas.reverse()
    return shas


async def get_reference_commits_from_git_repo(
    tree: GitWorkingTree, ref: str
) -> ReferenceState:
    """Return the full history of a local branch, oldest first.

    Each commit is checked out in turn to read the tracked file, so the
    working tree is left detached at the branch head.
    """
    commits: list[Commit] = []
    for sha in await get_reference_shas_from_git_repo(tree, ref):
        await tree.checkout(sha)
        content = await tree.read_content()
        message = await tree.head_message()
        commits.append(Commit(get_lines(content), message))
    return tuple(commits)
