"""Building and reading repositories with the real git executable."""

import shutil
from pathlib import Path

import pytest
from dulwich.objects import Commit as GitCommitObject
from dulwich.repo import Repo

from repostate.exceptions import GitCommandError
from repostate.local import (
    GitWorkingTree,
    create_git_repo,
    get_reference_commits_from_git_repo,
    get_reference_shas_from_git_repo,
    local_repository,
)
from repostate.state import Commit, RepoState

pytestmark = pytest.mark.anyio


def _first_parent_chain(repo: Repo, branch: str) -> list[bytes]:
    """Return the first-parent chain of a branch, oldest first."""
    chain: list[bytes] = []
    sha: bytes | None = repo.refs[f"refs/heads/{branch}".encode()]
    while sha is not None:
        chain.append(sha)
        commit = repo[sha]
        assert isinstance(commit, GitCommitObject)
        sha = commit.parents[0] if commit.parents else None
    chain.reverse()
    return chain


class TestCreateGitRepo:
    async def test_every_branch_reads_back(
        self, tmp_path: Path, repo_state: RepoState
    ) -> None:
        tree = await create_git_repo(repo_state, tmp_path / "repo")

        for branch in repo_state.refs:
            commits = await get_reference_commits_from_git_repo(tree, branch)
            assert commits == repo_state.expected_history(branch)

    async def test_parent_chains(self, tmp_path: Path, repo_state: RepoState) -> None:
        directory = tmp_path / "repo"
        _ = await create_git_repo(repo_state, directory)

        with Repo(str(directory)) as repo:
            master = _first_parent_chain(repo, "master")
            feature = _first_parent_chain(repo, "feature")

        assert len(master) == 1 + len(repo_state.refs_commits["master"])
        assert len(feature) == 1 + len(repo_state.refs_commits["feature"])
        assert master[0] == feature[0]
        assert set(master[1:]).isdisjoint(feature[1:])

    async def test_commit_identity(
        self, tmp_path: Path, repo_state: RepoState
    ) -> None:
        directory = tmp_path / "repo"
        _ = await create_git_repo(repo_state, directory)

        with Repo(str(directory)) as repo:
            head = repo[repo.refs[b"refs/heads/master"]]
            assert isinstance(head, GitCommitObject)
            assert head.author == b"repostate <repostate@example.com>"
            assert head.committer == b"repostate <repostate@example.com>"

    async def test_default_branch_ignores_host_configuration(
        self, tmp_path: Path, repo_state: RepoState, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = tmp_path / "gitconfig"
        _ = config.write_text("[init]\n\tdefaultBranch = trunk\n")
        monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(config))
        directory = tmp_path / "repo"

        _ = await create_git_repo(repo_state, directory)

        with Repo(str(directory)) as repo:
            branches = {
                ref.removeprefix(b"refs/heads/")
                for ref in repo.refs.keys()
                if ref.startswith(b"refs/heads/")
            }
        assert branches == {b"master", b"feature"}

    async def test_custom_default_branch(
        self, tmp_path: Path, repo_state: RepoState
    ) -> None:
        state = RepoState(
            initial_commit=repo_state.initial_commit,
            refs_commits={"main": repo_state.refs_commits["master"]},
        )

        tree = await create_git_repo(state, tmp_path / "repo", default_branch="main")

        commits = await get_reference_commits_from_git_repo(tree, "main")
        assert commits == state.expected_history("main")

    async def test_default_branch_keeps_initial_commit_when_absent_from_state(
        self, tmp_path: Path
    ) -> None:
        state = RepoState(
            initial_commit=Commit(("initial",), "initial"),
            refs_commits={"feature": (Commit(("f",), "f"),)},
        )

        tree = await create_git_repo(state, tmp_path / "repo")

        assert await get_reference_commits_from_git_repo(tree, "master") == (
            state.initial_commit,
        )

    async def test_multiline_message(self, tmp_path: Path) -> None:
        state = RepoState(
            initial_commit=Commit(("initial",), "Subject\n\nBody paragraph"),
        )

        tree = await create_git_repo(state, tmp_path / "repo")

        commits = await get_reference_commits_from_git_repo(tree, "master")
        assert commits[0].message == "Subject\n\nBody paragraph"

    async def test_temporary_directory_by_default(self, repo_state: RepoState) -> None:
        tree = await create_git_repo(repo_state)

        try:
            assert tree.directory.name.startswith("repostate-")
            assert (tree.directory / ".git").is_dir()
        finally:
            shutil.rmtree(tree.directory)


class TestReaders:
    async def test_shas_oldest_first(
        self, tmp_path: Path, repo_state: RepoState
    ) -> None:
        directory = tmp_path / "repo"
        tree = await create_git_repo(repo_state, directory)

        shas = await get_reference_shas_from_git_repo(tree, "feature")

        with Repo(str(directory)) as repo:
            chain = [sha.decode() for sha in _first_parent_chain(repo, "feature")]
        assert len(shas) == len(chain)
        for short, full in zip(shas, chain, strict=True):
            assert full.startswith(short)

    async def test_missing_branch(self, tmp_path: Path, repo_state: RepoState) -> None:
        tree = await create_git_repo(repo_state, tmp_path / "repo")

        with pytest.raises(GitCommandError) as exc_info:
            _ = await get_reference_commits_from_git_repo(tree, "missing")

        assert exc_info.value.git_args[0] == "checkout"
        assert exc_info.value.returncode != 0

    async def test_reads_existing_repository(
        self, tmp_path: Path, repo_state: RepoState
    ) -> None:
        directory = tmp_path / "repo"
        _ = await create_git_repo(repo_state, directory)

        commits = await get_reference_commits_from_git_repo(
            GitWorkingTree(directory), "master"
        )

        assert commits == repo_state.expected_history("master")


class TestLocalRepository:
    async def test_directory_is_removed_on_exit(self, repo_state: RepoState) -> None:
        async with local_repository(repo_state) as tree:
            directory = tree.directory
            commits = await get_reference_commits_from_git_repo(tree, "master")
            assert directory.exists()

        assert commits == repo_state.expected_history("master")
        assert not directory.exists()

    async def test_directory_is_removed_on_error(self, repo_state: RepoState) -> None:
        with pytest.raises(RuntimeError):
            async with local_repository(repo_state) as tree:
                directory = tree.directory
                raise RuntimeError

        assert not directory.exists()
