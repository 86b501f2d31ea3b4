"""Unit tests for :mod:`mailhdr.utils.logging`."""
from __future__ import annotations

import io
import json

from mailhdr.utils.logging import REDACTED, JsonLogger, get_logger, redact


def _entries(stream: io.StringIO) -> list:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_entries_have_the_canonical_fields() -> None:
    stream = io.StringIO()
    JsonLogger(stream=stream, component="unit").info("config_loaded", source="defaults")
    (entry,) = _entries(stream)
    assert set(entry) == {"ts", "lvl", "msg", "component", "source"}
    assert entry["lvl"] == "INFO"
    assert entry["component"] == "unit"
    assert entry["source"] == "defaults"


def test_header_content_is_redacted() -> None:
    """Keys that may carry header text never reach the log stream."""

    stream = io.StringIO()
    logger = JsonLogger(stream=stream)
    logger.warning("parse", value="John <j@x>", offset=3, context={"raw": "secret", "field": "To"})
    (entry,) = _entries(stream)
    assert entry["lvl"] == "WARN"
    assert entry["value"] == REDACTED
    assert entry["context"] == {"raw": REDACTED, "field": "To"}
    assert entry["offset"] == 3


def test_one_line_per_entry() -> None:
    stream = io.StringIO()
    logger = JsonLogger(stream=stream)
    logger.info("a")
    logger.error("b", error=ValueError("boom"))
    entries = _entries(stream)
    assert [entry["msg"] for entry in entries] == ["a", "b"]
    assert entries[1]["error"] == "boom"


def test_get_logger_binds_component() -> None:
    assert get_logger("mailhdr.fields").component == "mailhdr.fields"


def test_context_cannot_overwrite_canonical_fields() -> None:
    stream = io.StringIO()
    JsonLogger(stream=stream, component="unit").info("real", msg="fake", component="other")
    (entry,) = _entries(stream)
    assert entry["msg"] == "real"
    assert entry["component"] == "unit"


def test_redact_descends_into_lists() -> None:
    assert redact({"items": [{"name": "Joe", "offset": 1}], "field": "To"}) == {
        "items": [{"name": REDACTED, "offset": 1}],
        "field": "To",
    }
