"""
Grammar-driven parser that turns unified-diff text into a labelled parse tree.

The grammar is declared once at import time and shared read-only by every
call to :func:`parse`::

    patch         = preamble* file1_header file2_header hunk* EOI
    preamble      = !"--- " any-line
    file1_header  = "--- " path ("\\t" timestamp)? NEWLINE
    file2_header  = "+++ " path ("\\t" timestamp)? NEWLINE
    hunk          = hunk_header (line_context | line_deleted | line_inserted | no_newline)*
    hunk_header   = "@@ -" old_start ("," old_length)? " +" new_start ("," new_length)? " @@" (" " section)? NEWLINE
    line_context  = " " text NEWLINE | NEWLINE
    line_deleted  = "-" text NEWLINE
    line_inserted = "+" text NEWLINE
    no_newline    = "\\" text NEWLINE

Every :class:`ParseNode` keeps the span of source text it matched. Line nodes
span the text after their one-character prefix. A trailing carriage return
is left out of file and hunk headers but kept in line text, and blank lines
at the very end of the input are not hunk lines.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence, Tuple

from .errors import GrammarError

__all__ = [
    "GRAMMAR",
    "ParseNode",
    "PatchGrammar",
    "Rule",
    "parse",
]

LOGGER = logging.getLogger(__name__)


class Rule(str, Enum):
    """Labels attached to parse tree nodes."""

    PATCH = "patch"
    PREAMBLE = "preamble"
    FILE1_HEADER = "file1_header"
    FILE2_HEADER = "file2_header"
    PATH = "path"
    TIMESTAMP = "timestamp"
    HUNK = "hunk"
    HUNK_HEADER = "hunk_header"
    OLD_START = "old_start"
    OLD_LENGTH = "old_length"
    NEW_START = "new_start"
    NEW_LENGTH = "new_length"
    SECTION = "section"
    LINE_CONTEXT = "line_context"
    LINE_DELETED = "line_deleted"
    LINE_INSERTED = "line_inserted"
    NO_NEWLINE = "no_newline"


@dataclass(frozen=True, slots=True)
class ParseNode:
    """Labelled span of the source text with its nested sub-matches."""

    rule: Rule
    source: str = field(repr=False)
    start: int
    end: int
    children: Tuple["ParseNode", ...] = ()

    @property
    def text(self) -> str:
        return self.source[self.start : self.end]

    @property
    def line(self) -> int:
        """1-based line number of the first matched character."""
        return self.source.count("\n", 0, self.start) + 1

    @property
    def column(self) -> int:
        """1-based column of the first matched character."""
        return self.start - (self.source.rfind("\n", 0, self.start) + 1) + 1

    def iter_descendants(self) -> Iterator["ParseNode"]:
        """Yield this node and all of its descendants depth-first, in document order."""
        yield self
        for child in self.children:
            yield from child.iter_descendants()

    def find(self, rule: Rule) -> "ParseNode | None":
        """Return the first node labelled ``rule`` in depth-first order."""
        for node in self.iter_descendants():
            if node.rule is rule:
                return node
        return None


_FIELD = r"[^\s,@]+"


@dataclass(frozen=True, slots=True)
class PatchGrammar:
    """Compiled productions of the patch grammar."""

    file1_header: re.Pattern[str] = re.compile(r"--- (?P<path>[^\t]+)(?:\t(?P<timestamp>.*))?")
    file2_header: re.Pattern[str] = re.compile(r"\+\+\+ (?P<path>[^\t]+)(?:\t(?P<timestamp>.*))?")
    hunk_header: re.Pattern[str] = re.compile(
        rf"@@ -(?P<old_start>{_FIELD})(?:,(?P<old_length>{_FIELD}))?"
        rf" \+(?P<new_start>{_FIELD})(?:,(?P<new_length>{_FIELD}))? @@(?: (?P<section>.*))?"
    )
    line_prefixes: Mapping[str, Rule] = field(
        default_factory=lambda: MappingProxyType(
            {
                " ": Rule.LINE_CONTEXT,
                "-": Rule.LINE_DELETED,
                "+": Rule.LINE_INSERTED,
                "\\": Rule.NO_NEWLINE,
            }
        )
    )

    def body_rules(self) -> tuple[str, ...]:
        return tuple(rule.value for rule in self.line_prefixes.values())


GRAMMAR = PatchGrammar()


def _split_lines(text: str) -> list[tuple[int, int]]:
    """Return ``(start, end)`` spans for each line, excluding the newline."""
    spans: list[tuple[int, int]] = []
    position = 0
    length = len(text)
    while position < length:
        newline = text.find("\n", position)
        if newline == -1:
            spans.append((position, length))
            break
        spans.append((position, newline))
        position = newline + 1
    return spans


class _PatchParser:
    """Single-use recursive descent parser over the lines of one patch."""

    def __init__(self, text: str, grammar: PatchGrammar) -> None:
        self._text = text
        self._grammar = grammar
        self._spans: Sequence[tuple[int, int]] = _split_lines(text)
        self._index = 0

    def _at_end(self) -> bool:
        return self._index >= len(self._spans)

    def _current(self) -> str:
        start, end = self._spans[self._index]
        return self._text[start:end]

    def _only_blank_lines_remain(self) -> bool:
        """Whether every unconsumed line is empty or a lone carriage return."""
        return all(self._text[start:end] in ("", "\r") for start, end in self._spans[self._index :])

    def _structural_span(self) -> tuple[int, int]:
        """Current line span with a trailing carriage return left out."""
        start, end = self._spans[self._index]
        if end > start and self._text[end - 1] == "\r":
            end -= 1
        return start, end

    def _fail(self, *expected: str | Rule) -> GrammarError:
        labels = [item.value if isinstance(item, Rule) else item for item in expected]
        if self._at_end():
            return GrammarError(len(self._spans) + 1, 1, labels)
        return GrammarError(self._index + 1, 1, labels, text=self._current())

    def _node(self, rule: Rule, start: int, end: int, children: Sequence[ParseNode] = ()) -> ParseNode:
        return ParseNode(rule, self._text, start, end, tuple(children))

    def _group_children(self, match: re.Match[str]) -> list[ParseNode]:
        children: list[ParseNode] = []
        for name, value in match.groupdict().items():
            if value is None:
                continue
            children.append(self._node(Rule(name), match.start(name), match.end(name)))
        children.sort(key=lambda node: node.start)
        return children

    def parse_patch(self) -> ParseNode:
        children: list[ParseNode] = []
        while not self._at_end() and not self._current().startswith("--- "):
            start, end = self._spans[self._index]
            children.append(self._node(Rule.PREAMBLE, start, end))
            self._index += 1

        children.append(self._file_header(Rule.FILE1_HEADER, self._grammar.file1_header))
        children.append(self._file_header(Rule.FILE2_HEADER, self._grammar.file2_header))

        while not self._at_end():
            if self._only_blank_lines_remain():
                self._index = len(self._spans)
                break
            if not self._current().startswith("@@"):
                raise self._fail(Rule.HUNK_HEADER)
            children.append(self.parse_hunk())

        return self._node(Rule.PATCH, 0, len(self._text), children)

    def _file_header(self, rule: Rule, pattern: re.Pattern[str]) -> ParseNode:
        if self._at_end():
            raise self._fail(rule)
        start, end = self._structural_span()
        match = pattern.fullmatch(self._text, start, end)
        if match is None:
            raise self._fail(rule)
        self._index += 1
        return self._node(rule, start, end, self._group_children(match))

    def parse_hunk(self) -> ParseNode:
        if self._at_end():
            raise self._fail(Rule.HUNK_HEADER)
        header_start, header_end = self._structural_span()
        match = self._grammar.hunk_header.fullmatch(self._text, header_start, header_end)
        if match is None:
            raise self._fail(Rule.HUNK_HEADER)
        self._index += 1

        children = [self._node(Rule.HUNK_HEADER, header_start, header_end, self._group_children(match))]
        hunk_end = header_end
        while not self._at_end():
            # Blank lines trailing the whole patch are not part of the hunk.
            if self._only_blank_lines_remain():
                self._index = len(self._spans)
                break
            start, end = self._spans[self._index]
            if start == end:
                children.append(self._node(Rule.LINE_CONTEXT, start, end))
            else:
                prefix = self._text[start]
                rule = self._grammar.line_prefixes.get(prefix)
                if rule is None:
                    if self._text.startswith("@@", start):
                        break
                    raise self._fail(Rule.HUNK_HEADER, *self._grammar.body_rules())
                children.append(self._node(rule, start + 1, end))
            hunk_end = end
            self._index += 1
        return self._node(Rule.HUNK, header_start, hunk_end, children)


def parse(text: str, rule: Rule = Rule.PATCH, *, grammar: PatchGrammar = GRAMMAR) -> ParseNode:
    """
    Parse ``text`` starting from ``rule`` and return the root of the parse tree.

    Only :attr:`Rule.PATCH` and :attr:`Rule.HUNK` are valid entry rules. Raises
    :class:`GrammarError` when the text does not conform to the grammar.
    """
    rule = Rule(rule)
    parser = _PatchParser(text, grammar)
    if rule is Rule.PATCH:
        tree = parser.parse_patch()
    elif rule is Rule.HUNK:
        tree = parser.parse_hunk()
        if not parser._at_end():
            raise parser._fail("end of input")
    else:
        raise ValueError(f"Unsupported entry rule: {rule!r}")
    LOGGER.debug("Parsed %s with %d top-level node(s)", rule.value, len(tree.children))
    return tree
