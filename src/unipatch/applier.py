"""Replay of a parsed patch against an in-memory sequence of lines."""

from __future__ import annotations

import logging
from typing import Sequence

from .errors import AbruptInputError, PatchError, PatchInputMismatchError
from .model import LineKind, Patch
from .telemetry import emit_event

__all__ = ["apply", "process"]

LOGGER = logging.getLogger(__name__)


def _original_at(original: Sequence[str], index: int) -> str:
    """Return ``original[index]`` or raise :class:`AbruptInputError` past its end."""
    if index >= len(original):
        raise AbruptInputError(index)
    return original[index]


def _splice(patch: Patch, original: Sequence[str]) -> list[str]:
    """Walk the hunks with one forward cursor and build the result lines."""
    result: list[str] = []
    cursor = 0

    for hunk in patch.hunks:
        start = hunk.header.old_start
        for index in range(cursor, start):
            result.append(_original_at(original, index))
        # Hunks are trusted to be ordered; an earlier start rewinds the cursor.
        cursor = start

        for line in hunk.lines:
            if line.kind is LineKind.INSERT:
                result.append(line.text)
                continue
            actual = _original_at(original, cursor)
            if actual != line.text:
                raise PatchInputMismatchError(cursor, expected=line.text, actual=actual)
            if line.kind is LineKind.CONTEXT:
                result.append(line.text)
            cursor += 1

    result.extend(original[cursor:])
    return result


def apply(patch: Patch, original_lines: Sequence[str], *, telemetry: bool = True) -> list[str]:
    """
    Apply ``patch`` to ``original_lines`` and return the patched lines.

    Every context and deletion line must equal the original line at the
    cursor; the first divergence raises and no partial result is returned.
    """
    try:
        result = _splice(patch, original_lines)
    except PatchError as error:
        LOGGER.debug("Patch %s failed to apply: %s", patch.input, error)
        if telemetry:
            emit_event("patch.failed", input=patch.input, error=type(error).__name__, details=error.details)
        raise

    LOGGER.debug("Applied %d hunk(s): %d -> %d line(s)", len(patch.hunks), len(original_lines), len(result))
    if telemetry:
        emit_event(
            "patch.applied",
            input=patch.input,
            output=patch.output,
            hunks=len(patch.hunks),
            original_lines=len(original_lines),
            result_lines=len(result),
        )
    return result


def process(original_lines: Sequence[str], patch: Patch, *, telemetry: bool = True) -> list[str]:
    """Apply ``patch`` to ``original_lines``."""
    return apply(patch, original_lines, telemetry=telemetry)
