"""Unit tests for :mod:`mailhdr.fields`.

What:
  Check whole-field rendering (field name counted against the width budget,
  wire bytes) and the all-or-nothing contract of ``parse_field``.

Why:
  These two functions are what header assembly code calls; partial parses or
  a forgotten field-name prefix would corrupt real messages.

How:
  Render and parse small fields, and swap the module logger for one writing
  to an in-memory stream to inspect what a failure logs.
"""
from __future__ import annotations

import io
import json

import pytest

from mailhdr import fields, formatters, parse
from mailhdr.config.schema import RenderOptions
from mailhdr.errors import MalformedHeaderError
from mailhdr.utils.logging import JsonLogger
from mailhdr.values import Address, Mailbox


def test_render_field_prefixes_the_name() -> None:
    value = formatters.mime_version(1, 0)
    assert fields.render_field("MIME-Version", value) == b"MIME-Version: 1.0"


def test_render_field_counts_the_name_against_the_width() -> None:
    """``From: `` takes six columns of the first line's budget."""

    value = formatters.mailbox(Mailbox("Joe Q. Public", Address("john.q.public@example.com")))
    options = RenderOptions(max_width=47, indent=1)
    assert fields.render_field("From", value, options) == b"From: Joe Q. Public <john.q.public@example.com>"
    options = RenderOptions(max_width=46, indent=1)
    assert fields.render_field("From", value, options) == b"From: Joe Q. Public\r\n <john.q.public@example.com>"


def test_render_field_uses_configured_options_by_default() -> None:
    value = formatters.unstructured("word " * 20 + "end")
    rendered = fields.render_field("Subject", value)
    assert all(len(line) <= 78 for line in rendered.split(b"\r\n"))
    assert rendered.count(b"\r\n") == 20


def test_render_field_encodes_non_ascii_as_utf8_bytes() -> None:
    rendered = fields.render_field("Subject", formatters.unstructured("café"))
    assert rendered == b"Subject: =?utf-8?B?Y2Fmw6k=?="


def test_parse_field_accepts_bytes_and_text() -> None:
    assert fields.parse_field(parse.mime_version, b"1.0") == fields.parse_field(parse.mime_version, "1.0")


def test_parse_field_rejects_trailing_garbage() -> None:
    """A rule that matches only a prefix is a failure, not a partial value."""

    with pytest.raises(MalformedHeaderError) as excinfo:
        fields.parse_field(parse.mailbox, "a@example.com b@example.com")
    assert excinfo.value.offset == len("a@example.com ")


def test_parse_failure_is_logged_without_the_value(monkeypatch: pytest.MonkeyPatch) -> None:
    stream = io.StringIO()
    monkeypatch.setattr(fields, "LOGGER", JsonLogger(stream=stream, component="test"))
    with pytest.raises(MalformedHeaderError):
        fields.parse_field(parse.mailbox, "secret@", field="From")
    entry = json.loads(stream.getvalue())
    assert entry["lvl"] == "WARN"
    assert entry["msg"] == "malformed_header_field"
    assert entry["field"] == "From"
    assert entry["offset"] == 7
    assert "secret" not in stream.getvalue()


def test_non_utf8_bytes_survive_parsing() -> None:
    assert fields.parse_field(parse.unstructured, b"caf\xe9") == "caf\udce9"
