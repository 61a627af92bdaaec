from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture()
def original_lines() -> list[str]:
    """Four-line source text used by most replay scenarios."""

    return ["a", "b", "c", "d"]


@pytest.fixture()
def sample_patch() -> str:
    """Single-hunk patch keeping ``b``, inserting ``X``, and dropping ``c``."""

    return textwrap.dedent(
        """\
        --- a.txt\t2024-01-01 00:00:00
        +++ b.txt
        @@ -2,2 +2,2 @@
         b
        +X
        -c
        """
    )
