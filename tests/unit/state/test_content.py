from repostate.state import FILENAME, LINE_SEPARATOR, get_content, get_lines


class TestGetContent:
    def test_joins_lines_with_blank_line(self) -> None:
        assert get_content(("a", "b", "c")) == "a\n\nb\n\nc"

    def test_single_line_is_unchanged(self) -> None:
        assert get_content(("only",)) == "only"

    def test_accepts_any_iterable(self) -> None:
        assert get_content(iter(["a", "b"])) == "a\n\nb"


class TestGetLines:
    def test_splits_on_separator(self) -> None:
        assert get_lines("a\n\nb") == ("a", "b")

    def test_single_newlines_stay_inside_a_line(self) -> None:
        assert get_lines("a\nb\n\nc") == ("a\nb", "c")

    def test_round_trip(self) -> None:
        lines = ("first paragraph", "second", "third one")

        assert get_lines(get_content(lines)) == lines


def test_constants() -> None:
    assert FILENAME == "file.txt"
    assert LINE_SEPARATOR == "\n\n"
