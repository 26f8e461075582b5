import pytest
from rich.console import Console

from repostate.cli._commands import ExitCode, exit_with_error, format_json
from repostate.cli._commands._shared import (
    commits_table,
    commits_to_data,
    references_table,
    references_to_data,
)
from repostate.state import Commit, RefDetails


class TestExitWithError:
    def test_prints_and_exits(
        self, console: Console, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            exit_with_error("went wrong", console=console)

        assert exc_info.value.code == ExitCode.ERROR
        assert "Error: went wrong" in capsys.readouterr().out

    def test_message_is_not_markup(
        self, console: Console, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit):
            exit_with_error("bad [bold]ref[/bold]", console=console)

        assert "bad [bold]ref[/bold]" in capsys.readouterr().out


class TestFormatters:
    def test_format_json(self) -> None:
        assert format_json({"a": [1]}, indent=False) == '{"a":[1]}'

    def test_commits_to_data(self) -> None:
        data = commits_to_data((Commit(("a", "b"), "m"),))

        assert data == [{"lines": ["a", "b"], "message": "m"}]

    def test_references(self, console: Console) -> None:
        refs = {"master": RefDetails(ref="master-x", shas=("1", "2"))}

        assert references_to_data(refs) == {
            "master": {"ref": "master-x", "shas": ["1", "2"]}
        }
        with console.capture() as capture:
            console.print(references_table(refs))
        assert "master-x" in capture.get()


class TestTables:
    def test_commit_text_is_not_markup(self, console: Console) -> None:
        commits = (
            Commit(("[red]line[/red]",), "close [/b] tag"),
            Commit(("x",), "[bold]loud[/bold]"),
        )

        with console.capture() as capture:
            console.print(commits_table("[b]master", commits))

        out = capture.get()
        assert "[b]master" in out
        assert "close [/b] tag" in out
        assert "[bold]loud[/bold]" in out
        assert "[red]line[/red]" in out

    def test_branch_names_are_not_markup(self, console: Console) -> None:
        refs = {"[/i]": RefDetails(ref="[/i]-x", shas=("1",))}

        with console.capture() as capture:
            console.print(references_table(refs))

        out = capture.get()
        assert "[/i]" in out
        assert "[/i]-x" in out
