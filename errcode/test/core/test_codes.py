"""Tests for errcode.core.codes module."""

import pytest

from errcode.core.codes import (
    CodeFormatViolation,
    CodeParts,
    ViolationKind,
    check_code,
    hunks,
    is_conventional,
    normalize_code,
    split_code,
    validate_code,
)
from errcode.core.result import Err, Ok


class TestCheckCode:
    @pytest.mark.parametrize(
        "code",
        ["x", "myapp", "myapp-error-config-missing", "http-404", "ABC-def9"],
    )
    def test_conventional_codes_pass(self, code: str) -> None:
        assert check_code(code) is None
        assert is_conventional(code) is True

    def test_empty(self) -> None:
        violation = check_code("")
        assert violation == CodeFormatViolation("", ViolationKind.EMPTY)

    @pytest.mark.parametrize(
        ("code", "position", "character"),
        [
            ("my app", 2, " "),
            ("my_app", 2, "_"),
            ("app.error", 3, "."),
            ("app:error", 3, ":"),
            ("café", 3, "é"),
            ("tab\there", 3, "\t"),
        ],
    )
    def test_disallowed_character(self, code: str, position: int, character: str) -> None:
        violation = check_code(code)
        assert violation is not None
        assert violation.kind == ViolationKind.DISALLOWED_CHARACTER
        assert violation.position == position
        assert violation.character == character

    def test_leading_hyphen(self) -> None:
        violation = check_code("-app")
        assert violation is not None
        assert violation.kind == ViolationKind.LEADING_HYPHEN

    def test_trailing_hyphen(self) -> None:
        violation = check_code("app-")
        assert violation is not None
        assert violation.kind == ViolationKind.TRAILING_HYPHEN
        assert violation.position == 3

    def test_lone_hyphen_is_leading(self) -> None:
        violation = check_code("-")
        assert violation is not None
        assert violation.kind == ViolationKind.LEADING_HYPHEN

    def test_empty_hunk(self) -> None:
        violation = check_code("app--error")
        assert violation is not None
        assert violation.kind == ViolationKind.EMPTY_HUNK
        assert violation.position == 4

    def test_disallowed_character_reported_before_hyphen_problems(self) -> None:
        violation = check_code("-a b")
        assert violation is not None
        assert violation.kind == ViolationKind.DISALLOWED_CHARACTER


class TestValidateCode:
    def test_ok(self) -> None:
        assert validate_code("app-error-x") == Ok("app-error-x")

    def test_err(self) -> None:
        result = validate_code("app error")
        assert isinstance(result, Err)
        assert result.error.kind == ViolationKind.DISALLOWED_CHARACTER


class TestPretty:
    def test_messages_name_the_problem(self) -> None:
        assert check_code("") is not None
        assert "empty" in check_code("").pretty()  # type: ignore[union-attr]
        assert "' '" in check_code("a b").pretty()  # type: ignore[union-attr]
        assert "starts with" in check_code("-a").pretty()  # type: ignore[union-attr]
        assert "ends with" in check_code("a-").pretty()  # type: ignore[union-attr]
        assert "empty hunk" in check_code("a--b").pretty()  # type: ignore[union-attr]


class TestHunks:
    def test_split(self) -> None:
        assert hunks("myapp-error-config-missing") == ("myapp", "error", "config", "missing")

    def test_single(self) -> None:
        assert hunks("x") == ("x",)

    def test_empty(self) -> None:
        assert hunks("") == ()


class TestSplitCode:
    def test_marked(self) -> None:
        assert split_code("myapp-error-config-missing") == CodeParts(
            package="myapp", marked=True, condition=("config", "missing")
        )

    def test_unmarked(self) -> None:
        assert split_code("myapp-timeout") == CodeParts(
            package="myapp", marked=False, condition=("timeout",)
        )

    def test_error_as_only_condition_is_not_a_marker(self) -> None:
        assert split_code("myapp-error") == CodeParts(
            package="myapp", marked=False, condition=("error",)
        )

    def test_single_hunk(self) -> None:
        assert split_code("timeout") is None


class TestNormalizeCode:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("myapp-error-x", "myapp-error-x"),
            ("MyApp_Error Config", "myapp-error-config"),
            ("  padded  ", "padded"),
            ("app.error.io", "app-error-io"),
            ("app---error", "app-error"),
            ("-app-", "app"),
            ("app:error!", "apperror"),
            ("café-x", "caf-x"),
            ("___", ""),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_code(raw) == expected

    def test_normalized_output_is_conventional_or_empty(self) -> None:
        for raw in ["A b_C", "--x--", "a..b", "éé-z", "x y z"]:
            normalized = normalize_code(raw)
            assert normalized == "" or is_conventional(normalized)
