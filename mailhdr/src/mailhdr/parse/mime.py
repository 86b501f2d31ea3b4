"""Parsers for the MIME header fields.

What:
  Read ``MIME-Version``, ``Content-Type`` and ``Content-Transfer-Encoding``
  field values into typed results.

Why:
  Content types drive how a body is decoded; their parameters are
  case-insensitive and their values may be tokens, quoted strings or RFC 2231
  extended values. Duplicate parameter names occur in the wild, so their
  precedence is an explicit policy rather than an accident of dict insertion.

How:
  Rules compose the lexical primitives from
  :mod:`mailhdr.parse.primitives`. Parameters are collected as
  ``(name, value, offset)`` triples and then merged according to the
  ``duplicates`` policy: ``"last"`` (default) keeps the later value,
  ``"first"`` the earlier one, ``"reject"`` fails at the duplicate's offset.

Interfaces:
  :func:`mime_version`, :func:`content_type`, :func:`parameter`,
  :func:`content_transfer_encoding`.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote_to_bytes

from ..config.loader import get_config
from ..values import MimeType, Parameters
from .primitives import Cursor, cfws, char, digits, padded, quoted_string, token

DUPLICATE_POLICIES = ("last", "first", "reject")


def mime_version(cur: Cursor) -> Tuple[int, int]:
    """``1*DIGIT "." 1*DIGIT`` with optional CFWS around each part."""

    cfws(cur)
    major = digits(cur)
    padded(char("."))(cur)
    minor = digits(cur)
    cfws(cur)
    return major, minor


def _extended_value(cur: Cursor, offset: int, value: str) -> str:
    """Decode an RFC 2231 ``charset'language'percent-encoded`` value."""

    parts = value.split("'", 2)
    if len(parts) != 3:
        cur.pos = offset
        cur.fail("extended parameter value")
    charset, _language, encoded = parts
    try:
        return unquote_to_bytes(encoded).decode(charset or "us-ascii", "replace")
    except LookupError:
        cur.pos = offset
        cur.fail("known charset")


def parameter(cur: Cursor) -> Tuple[str, str]:
    """``token "=" (token / quoted-string)``; the name is lower-cased."""

    start = cur.pos
    name = token(cur).lower()
    padded(char("="))(cur)
    value = cur.choice(token, quoted_string)
    if name.endswith("*"):
        name = name[:-1]
        if not name:
            cur.pos = start
            cur.fail("parameter name")
        value = _extended_value(cur, start, value)
    return name, value


def _merge(cur: Cursor, found: List[Tuple[str, str, int]], duplicates: str) -> Parameters:
    merged: Dict[str, str] = {}
    for name, value, offset in found:
        if name in merged:
            if duplicates == "first":
                continue
            if duplicates == "reject":
                cur.pos = offset
                cur.fail(f"unique parameter name {name!r}")
        merged[name] = value
    return Parameters(merged)


def content_type(cur: Cursor, duplicates: Optional[str] = None) -> Tuple[MimeType, Parameters]:
    """``type "/" subtype *(";" parameter)``, tolerating one trailing ``;``.

    Args:
      cur: Cursor positioned at the start of the field value.
      duplicates: ``"last"``, ``"first"`` or ``"reject"``; defaults to the
        configured ``parser.duplicate_parameters``.

    Returns:
      The :class:`MimeType` and the merged :class:`Parameters`.
    """

    if duplicates is None:
        duplicates = get_config().parser.duplicate_parameters
    if duplicates not in DUPLICATE_POLICIES:
        raise ValueError(f"unknown duplicate parameter policy {duplicates!r}")
    cfws(cur)
    kind = token(cur)
    padded(char("/"))(cur)
    subtype = token(cur)
    cfws(cur)
    found: List[Tuple[str, str, int]] = []
    while cur.peek() == ";":
        cur.advance()
        cfws(cur)
        if cur.at_end():
            break
        offset = cur.pos
        name, value = cur.attempt(parameter)
        found.append((name, value, offset))
        cfws(cur)
    return MimeType(kind, subtype), _merge(cur, found, duplicates)


def content_transfer_encoding(cur: Cursor) -> str:
    cfws(cur)
    value = token(cur)
    cfws(cur)
    return value.lower()


__all__ = [
    "DUPLICATE_POLICIES",
    "content_transfer_encoding",
    "content_type",
    "mime_version",
    "parameter",
]
