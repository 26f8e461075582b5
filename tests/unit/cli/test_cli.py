"""Tests for the repostate CLI against the in-memory GitHub."""

from collections.abc import Callable
from pathlib import Path

import anyio
import orjson
import pytest

from repostate.cli import CLIContext
from repostate.github import FakeGitHub, create_references
from repostate.state import RepoState, dump_repo_state


@pytest.fixture
def fixture_file(tmp_path: Path, repo_state: RepoState) -> Path:
    path = tmp_path / "state.json"
    _ = path.write_bytes(dump_repo_state(repo_state))
    return path


def _build(github: FakeGitHub, state: RepoState) -> dict[str, str]:
    async def _run() -> dict[str, str]:
        async with github.client() as client:
            created = await create_references(client, state)
        return {branch: d.ref for branch, d in created.refs_details.items()}

    return anyio.run(_run)


class TestRemoteBuild:
    def test_builds_every_branch(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
        fixture_file: Path,
    ) -> None:
        exit_code = repostate_cli(
            "remote", "build", str(fixture_file), "--format", "json"
        )

        assert exit_code == 0
        output = orjson.loads(capsys.readouterr().out)
        assert list(output) == ["master", "feature"]
        assert github_env.refs == {
            details["ref"]: details["shas"][-1] for details in output.values()
        }

    def test_table_output(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
        fixture_file: Path,
    ) -> None:
        exit_code = repostate_cli("remote", "build", str(fixture_file))

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Branch" in out
        assert "master" in out
        assert "feature" in out

    def test_missing_settings(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        fixture_file: Path,
    ) -> None:
        exit_code = repostate_cli("remote", "build", str(fixture_file))

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "Error:" in out
        assert "REPOSTATE_GITHUB_TOKEN" in out

    def test_invalid_fixture(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
        tmp_path: Path,
    ) -> None:
        path = tmp_path / "broken.json"
        _ = path.write_text("{}")

        exit_code = repostate_cli("remote", "build", str(path))

        assert exit_code == 1
        assert "Invalid repository fixture" in capsys.readouterr().out
        assert github_env.requests == []

    def test_api_error(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
        fixture_file: Path,
    ) -> None:
        _ = github_env.fail("POST", r"git/blobs", status_code=403, message="Nope")

        exit_code = repostate_cli("remote", "build", str(fixture_file))

        assert exit_code == 1
        assert "Nope" in capsys.readouterr().out


class TestRemoteRead:
    def test_prints_history_as_json(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
        repo_state: RepoState,
    ) -> None:
        refs = _build(github_env, repo_state)

        exit_code = repostate_cli("remote", "read", refs["feature"], "-f", "json")

        assert exit_code == 0
        output = orjson.loads(capsys.readouterr().out)
        assert output == [
            {"lines": list(commit.lines), "message": commit.message}
            for commit in repo_state.expected_history("feature")
        ]

    def test_prints_history_as_table(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
        repo_state: RepoState,
    ) -> None:
        refs = _build(github_env, repo_state)

        exit_code = repostate_cli("remote", "read", refs["master"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Initial commit" in out
        assert "master 2" in out

    def test_missing_branch(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
    ) -> None:
        exit_code = repostate_cli("remote", "read", "missing")

        assert exit_code == 1
        assert "Reference not found: missing" in capsys.readouterr().out


class TestRemoteDelete:
    def test_deletes_references(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
        repo_state: RepoState,
    ) -> None:
        refs = _build(github_env, repo_state)

        exit_code = repostate_cli("remote", "delete", *refs.values())

        assert exit_code == 0
        assert github_env.refs == {}
        out = capsys.readouterr().out
        for ref in refs.values():
            assert f"Deleted {ref}" in out

    def test_missing_reference(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
    ) -> None:
        exit_code = repostate_cli("remote", "delete", "missing")

        assert exit_code == 1
        assert "Reference does not exist" in capsys.readouterr().out


class TestContext:
    def test_context_is_reset_after_command(
        self, repostate_cli: Callable[..., int], github_env: FakeGitHub
    ) -> None:
        _ = repostate_cli("remote", "read", "missing")

        assert CLIContext.get_current().transport is None

    def test_verbose_logs_to_stderr(
        self,
        capsys: pytest.CaptureFixture[str],
        repostate_cli: Callable[..., int],
        github_env: FakeGitHub,
    ) -> None:
        _ = repostate_cli("--verbose", "remote", "read", "missing")

        assert "command_started" in capsys.readouterr().err
