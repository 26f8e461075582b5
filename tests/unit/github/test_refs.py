import re

from repostate.github import generate_unique_ref, get_fully_qualified_ref, get_head_ref

UUID4 = r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"


def test_head_ref() -> None:
    assert get_head_ref("master") == "heads/master"


def test_fully_qualified_ref() -> None:
    assert get_fully_qualified_ref("feature/x") == "refs/heads/feature/x"


class TestGenerateUniqueRef:
    def test_appends_uuid4(self) -> None:
        assert re.fullmatch(rf"feature-{UUID4}", generate_unique_ref("feature"))

    def test_names_differ_between_calls(self) -> None:
        names = {generate_unique_ref("master") for _ in range(100)}

        assert len(names) == 100
