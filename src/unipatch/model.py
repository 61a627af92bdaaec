"""Domain model produced by the patch builder and consumed by the applier."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Tuple

__all__ = [
    "Hunk",
    "HunkHeader",
    "LineKind",
    "Patch",
    "PatchLine",
]


class LineKind(str, Enum):
    """Role of a single line inside a hunk."""

    CONTEXT = "context"
    DELETE = "delete"
    INSERT = "insert"


@dataclass(frozen=True, slots=True)
class PatchLine:
    """Typed hunk line carrying the unprefixed line text."""

    kind: LineKind
    text: str

    @classmethod
    def context(cls, text: str) -> "PatchLine":
        return cls(LineKind.CONTEXT, text)

    @classmethod
    def delete(cls, text: str) -> "PatchLine":
        return cls(LineKind.DELETE, text)

    @classmethod
    def insert(cls, text: str) -> "PatchLine":
        return cls(LineKind.INSERT, text)

    @property
    def consumes_original(self) -> bool:
        return self.kind is not LineKind.INSERT

    @property
    def emits_result(self) -> bool:
        return self.kind is not LineKind.DELETE


@dataclass(frozen=True, slots=True)
class HunkHeader:
    """Range marker of a hunk; start positions are zero-based."""

    old_start: int = 0
    old_length: int = 0
    new_start: int = 0
    new_length: int = 0


@dataclass(frozen=True, slots=True)
class Hunk:
    """Contiguous change region: a header plus its lines in document order."""

    header: HunkHeader
    lines: Tuple[PatchLine, ...] = ()

    def old_count(self) -> int:
        """Number of lines this hunk consumes from the original text."""
        return sum(1 for line in self.lines if line.consumes_original)

    def new_count(self) -> int:
        """Number of lines this hunk contributes to the result text."""
        return sum(1 for line in self.lines if line.emits_result)


@dataclass(frozen=True, slots=True)
class Patch:
    """Parsed patch: informational paths and the ordered hunks to replay."""

    input: str
    output: str
    hunks: Tuple[Hunk, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": self.input,
            "output": self.output,
            "hunks": [
                {
                    "old_start": hunk.header.old_start,
                    "old_length": hunk.header.old_length,
                    "new_start": hunk.header.new_start,
                    "new_length": hunk.header.new_length,
                    "lines": len(hunk.lines),
                }
                for hunk in self.hunks
            ],
        }
