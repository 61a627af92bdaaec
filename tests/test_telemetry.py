from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from unipatch import LineKind, PatchInputMismatchError, apply, convert
from unipatch.telemetry import TELEMETRY_LOGGER, serialise_event_value


def _events(caplog: pytest.LogCaptureFixture) -> list[dict]:
    return [json.loads(record.getMessage()) for record in caplog.records if record.name == TELEMETRY_LOGGER.name]


def test_convert_and_apply_emit_events(
    caplog: pytest.LogCaptureFixture, sample_patch: str, original_lines: list[str]
) -> None:
    caplog.set_level(logging.INFO, logger=TELEMETRY_LOGGER.name)

    apply(convert(sample_patch), original_lines)

    converted, applied = _events(caplog)
    assert converted["event"] == "patch.converted"
    assert (converted["input"], converted["output"], converted["hunks"]) == ("a.txt", "b.txt", 1)
    assert applied["event"] == "patch.applied"
    assert (applied["original_lines"], applied["result_lines"]) == (4, 4)
    assert "timestamp" in applied


def test_failed_apply_emits_error_details(
    caplog: pytest.LogCaptureFixture, sample_patch: str
) -> None:
    caplog.set_level(logging.INFO, logger=TELEMETRY_LOGGER.name)
    patch = convert(sample_patch, telemetry=False)

    with pytest.raises(PatchInputMismatchError):
        apply(patch, ["a", "z", "c", "d"])

    (failed,) = _events(caplog)
    assert failed["event"] == "patch.failed"
    assert failed["error"] == "PatchInputMismatchError"
    assert failed["details"] == {"index": 1, "expected": "b", "actual": "z"}


def test_telemetry_can_be_disabled(
    caplog: pytest.LogCaptureFixture, sample_patch: str, original_lines: list[str]
) -> None:
    caplog.set_level(logging.INFO, logger=TELEMETRY_LOGGER.name)

    apply(convert(sample_patch, telemetry=False), original_lines, telemetry=False)

    assert _events(caplog) == []


def test_serialise_event_value_handles_nested_payloads() -> None:
    payload = {"path": Path("src/a.txt"), "kinds": (LineKind.INSERT,), 3: {"nested": [None, 1.5]}}

    assert serialise_event_value(payload) == {
        "path": "src/a.txt",
        "kinds": ["insert"],
        "3": {"nested": [None, 1.5]},
    }
    assert serialise_event_value(object).startswith("<class")
