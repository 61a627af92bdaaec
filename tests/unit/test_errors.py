from __future__ import annotations

import pytest

from unipatch.errors import (
    AbruptInputError,
    ConfigError,
    GrammarError,
    HunkSizeError,
    IntegerParseError,
    MalformedPatchError,
    NotFoundError,
    PatchError,
    PatchInputMismatchError,
)


@pytest.mark.parametrize(
    "error",
    [
        GrammarError(3, 1, ["hunk_header"], text="oops"),
        NotFoundError("path (input)"),
        MalformedPatchError("Hunk header is not at the start of a hunk"),
        HunkSizeError(0, "old_length", 3, 2),
        IntegerParseError("old_start", "x"),
        AbruptInputError(7),
        PatchInputMismatchError(2, expected="b", actual="c"),
        ConfigError("bad config"),
    ],
)
def test_every_error_is_a_patch_error(error: PatchError) -> None:
    assert isinstance(error, PatchError)
    assert isinstance(error, RuntimeError)
    assert str(error)


def test_positional_errors_expose_index_for_reporting() -> None:
    abrupt = AbruptInputError(7)
    mismatch = PatchInputMismatchError(2)

    assert abrupt.index == 7 and abrupt.details == {"index": 7}
    assert mismatch.index == 2
    assert "line index 2" in str(mismatch)


def test_grammar_error_message_lists_expected_rules() -> None:
    error = GrammarError(4, 1, ["hunk_header", "line_context"], text="*bad")

    assert str(error) == "Invalid patch at line 4, column 1: expected hunk_header, line_context"
    assert error.details == {"line": 4, "column": 1, "expected": ["hunk_header", "line_context"], "text": "*bad"}


def test_hunk_size_error_message_is_one_based() -> None:
    error = HunkSizeError(1, "new_length", 4, 2)

    assert str(error) == "Hunk 2 declares new_length=4 but carries 2 line(s)"
    assert error.reason == str(error)
    assert error.details["hunk"] == 1
