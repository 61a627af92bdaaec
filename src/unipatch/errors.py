"""Error taxonomy raised while parsing, building, and applying patches."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

__all__ = [
    "AbruptInputError",
    "ConfigError",
    "GrammarError",
    "HunkSizeError",
    "IntegerParseError",
    "MalformedPatchError",
    "NotFoundError",
    "PatchError",
    "PatchInputMismatchError",
]


class PatchError(RuntimeError):
    """Base class for every failure surfaced by the patch pipeline."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})


class GrammarError(PatchError):
    """Raised when patch text does not conform to the patch grammar."""

    def __init__(
        self,
        line: int,
        column: int,
        expected: Iterable[str],
        *,
        text: str = "",
    ) -> None:
        self.line = line
        self.column = column
        self.expected: tuple[str, ...] = tuple(expected)
        self.text = text
        wanted = ", ".join(self.expected) or "end of input"
        super().__init__(
            f"Invalid patch at line {line}, column {column}: expected {wanted}",
            details={"line": line, "column": column, "expected": list(self.expected), "text": text},
        )


class NotFoundError(PatchError):
    """Raised when a structurally required element is missing from the parse tree."""

    def __init__(self, element: str) -> None:
        self.element = element
        super().__init__(f"Required patch element not found: {element}", details={"element": element})


class MalformedPatchError(PatchError):
    """Raised when an element is present but placed where the patch model forbids it."""

    def __init__(self, reason: str, *, details: Mapping[str, Any] | None = None) -> None:
        self.reason = reason
        payload = {"reason": reason}
        payload.update(details or {})
        super().__init__(reason, details=payload)


class HunkSizeError(MalformedPatchError):
    """Raised in strict mode when a hunk header disagrees with its line counts."""

    def __init__(self, hunk_index: int, field: str, declared: int, actual: int) -> None:
        self.hunk_index = hunk_index
        self.field = field
        self.declared = declared
        self.actual = actual
        super().__init__(
            f"Hunk {hunk_index + 1} declares {field}={declared} but carries {actual} line(s)",
            details={"hunk": hunk_index, "field": field, "declared": declared, "actual": actual},
        )


class IntegerParseError(PatchError, ValueError):
    """Raised when a hunk header field is not a non-negative decimal integer."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(
            f"Hunk header field {field} is not a non-negative integer: {value!r}",
            details={"field": field, "value": value},
        )


class AbruptInputError(PatchError):
    """Raised when the original text ends before the patch expects it to."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Original input ended abruptly at line index {index}", details={"index": index})


class PatchInputMismatchError(PatchError):
    """Raised when a context or deletion line differs from the original text."""

    def __init__(self, index: int, *, expected: str | None = None, actual: str | None = None) -> None:
        self.index = index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Patch does not match original input at line index {index}",
            details={"index": index, "expected": expected, "actual": actual},
        )


class ConfigError(PatchError):
    """Raised when patch settings cannot be loaded or validated."""
