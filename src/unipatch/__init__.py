"""Parse unified-diff patches and replay them against in-memory text."""

from .applier import apply, process
from .builder import build, check_header_counts, convert
from .config import PatchSettings, load_settings
from .errors import (
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
from .grammar import GRAMMAR, ParseNode, Rule, parse
from .model import Hunk, HunkHeader, LineKind, Patch, PatchLine
from .processor import PatchProcessor, apply_patch_text

__all__ = [
    "AbruptInputError",
    "ConfigError",
    "GRAMMAR",
    "GrammarError",
    "Hunk",
    "HunkHeader",
    "HunkSizeError",
    "IntegerParseError",
    "LineKind",
    "MalformedPatchError",
    "NotFoundError",
    "ParseNode",
    "Patch",
    "PatchError",
    "PatchInputMismatchError",
    "PatchLine",
    "PatchProcessor",
    "PatchSettings",
    "Rule",
    "apply",
    "apply_patch_text",
    "build",
    "check_header_counts",
    "convert",
    "load_settings",
    "parse",
    "process",
]
