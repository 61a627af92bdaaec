"""One-shot helpers composing conversion and application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

from .applier import apply
from .builder import convert
from .config import PatchSettings
from .model import Patch

__all__ = ["PatchProcessor", "apply_patch_text"]


@dataclass(frozen=True, slots=True)
class PatchProcessor:
    """Original lines paired with the patch that should be replayed over them."""

    text: Tuple[str, ...]
    patch: Patch
    settings: PatchSettings = field(default_factory=PatchSettings)

    @classmethod
    def converted(
        cls,
        text: Sequence[str],
        patch: str,
        *,
        settings: PatchSettings | None = None,
    ) -> "PatchProcessor":
        """Convert ``patch`` and bind it to a snapshot of ``text``."""
        resolved = settings or PatchSettings()
        model = convert(patch, strict=resolved.strict, telemetry=resolved.telemetry)
        return cls(text=tuple(text), patch=model, settings=resolved)

    def process(self) -> list[str]:
        return apply(self.patch, self.text, telemetry=self.settings.telemetry)


def apply_patch_text(original_lines: Sequence[str], patch_text: str, *, strict: bool = False) -> list[str]:
    """Convert ``patch_text`` and apply it to ``original_lines`` in one call."""
    return PatchProcessor.converted(original_lines, patch_text, settings=PatchSettings(strict=strict)).process()
