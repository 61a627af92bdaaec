"""Conversion of grammar parse trees into the patch domain model."""

from __future__ import annotations

import logging
from typing import Mapping

from .errors import HunkSizeError, IntegerParseError, MalformedPatchError, NotFoundError
from .grammar import ParseNode, Rule, parse
from .model import Hunk, HunkHeader, LineKind, Patch, PatchLine
from .telemetry import emit_event

__all__ = ["build", "build_hunk", "check_header_counts", "convert"]

LOGGER = logging.getLogger(__name__)

_LINE_KINDS: Mapping[Rule, LineKind] = {
    Rule.LINE_CONTEXT: LineKind.CONTEXT,
    Rule.LINE_DELETED: LineKind.DELETE,
    Rule.LINE_INSERTED: LineKind.INSERT,
}

_HEADER_FIELDS = (Rule.OLD_START, Rule.OLD_LENGTH, Rule.NEW_START, Rule.NEW_LENGTH)


def _path_of(header: ParseNode) -> str | None:
    """Return the path carried by a file header node, if any."""
    path: str | None = None
    for element in header.children:
        if element.rule is Rule.PATH:
            path = element.text
    return path


def _parse_count(field: Rule, value: str) -> int:
    """Parse a header field token as a non-negative decimal integer."""
    if not value.isascii() or not value.isdigit():
        raise IntegerParseError(field.value, value)
    return int(value)


def _build_header(node: ParseNode) -> HunkHeader:
    """Convert a ``hunk_header`` node into a zero-based :class:`HunkHeader`."""
    values: dict[Rule, int] = {}
    for element in node.children:
        if element.rule in _HEADER_FIELDS:
            values[element.rule] = _parse_count(element.rule, element.text)

    for required in (Rule.OLD_START, Rule.NEW_START):
        if required not in values:
            raise NotFoundError(f"hunk header ({required.value})")

    # Starts are 1-based in the patch text; 0 marks "before the first line".
    return HunkHeader(
        old_start=max(values[Rule.OLD_START] - 1, 0),
        old_length=values.get(Rule.OLD_LENGTH, 1),
        new_start=max(values[Rule.NEW_START] - 1, 0),
        new_length=values.get(Rule.NEW_LENGTH, 1),
    )


def build_hunk(node: ParseNode) -> Hunk:
    """Convert a ``hunk`` node whose first child must be its header."""
    if not node.children:
        raise NotFoundError("hunk header")
    first, *rest = node.children
    if first.rule is not Rule.HUNK_HEADER:
        raise MalformedPatchError(
            "Hunk header is not at the start of a hunk",
            details={"line": first.line, "rule": first.rule.value},
        )

    header = _build_header(first)
    lines = []
    for element in rest:
        kind = _LINE_KINDS.get(element.rule)
        if kind is not None:
            lines.append(PatchLine(kind, element.text))
    return Hunk(header=header, lines=tuple(lines))


def build(tree: ParseNode) -> Patch:
    """Walk ``tree`` once and extract the input path, output path, and hunks."""
    root = tree.find(Rule.PATCH)
    if root is None:
        raise NotFoundError("patch")

    input_path: str | None = None
    output_path: str | None = None
    hunks: list[Hunk] = []
    for element in root.children:
        if element.rule is Rule.FILE1_HEADER:
            input_path = _path_of(element)
        elif element.rule is Rule.FILE2_HEADER:
            output_path = _path_of(element)
        elif element.rule is Rule.HUNK:
            hunks.append(build_hunk(element))

    if input_path is None:
        raise NotFoundError("path (input)")
    if output_path is None:
        raise NotFoundError("path (output)")

    return Patch(input=input_path, output=output_path, hunks=tuple(hunks))


def check_header_counts(patch: Patch) -> None:
    """Raise :class:`HunkSizeError` when a header's lengths disagree with its lines."""
    for index, hunk in enumerate(patch.hunks):
        old_count = hunk.old_count()
        if hunk.header.old_length != old_count:
            raise HunkSizeError(index, Rule.OLD_LENGTH.value, hunk.header.old_length, old_count)
        new_count = hunk.new_count()
        if hunk.header.new_length != new_count:
            raise HunkSizeError(index, Rule.NEW_LENGTH.value, hunk.header.new_length, new_count)


def convert(patch_text: str, *, strict: bool = False, telemetry: bool = True) -> Patch:
    """
    Parse ``patch_text`` and build its domain model.

    Header lengths are only cross-checked against the hunk bodies when
    ``strict`` is set; by default only the old-range start is trusted.
    """
    patch = build(parse(patch_text))
    if strict:
        check_header_counts(patch)
    LOGGER.debug("Converted patch %s -> %s with %d hunk(s)", patch.input, patch.output, len(patch.hunks))
    if telemetry:
        emit_event(
            "patch.converted",
            input=patch.input,
            output=patch.output,
            hunks=len(patch.hunks),
            strict=strict,
        )
    return patch
