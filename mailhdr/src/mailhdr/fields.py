"""Whole-field rendering and parsing.

What:
  Turn a builder into a complete ``Name: value`` header field, and run a
  grammar rule over a complete raw field value with all-or-nothing failure.

Why:
  Builders and grammar rules work on fragments. Header assembly code needs
  the field name on the first line counted against the width budget, and it
  needs parsing to either produce a value for the entire field or report where
  it stopped.

How:
  :func:`render_field` renders the builder starting at the column after
  ``Name: ``. :func:`parse_field` decodes bytes with ``surrogateescape`` (so
  offsets in ASCII input are byte offsets), runs the rule, requires the input
  to be exhausted apart from trailing CFWS, and converts any
  :class:`~mailhdr.parse.ParseFailure` into
  :class:`~mailhdr.errors.MalformedHeaderError`.

Interfaces:
  :func:`render_field`, :func:`parse_field`.

Invariants & Safety:
  - A failed parse never returns a partial value.
  - Failures are logged with the field name and offset only; the value is
    never logged.
"""
from __future__ import annotations

from typing import Callable, Optional, TypeVar, Union

from .builder import Builder
from .config.loader import get_config
from .config.schema import RenderOptions
from .errors import MalformedHeaderError
from .parse.primitives import Cursor, ParseFailure, end_of_input
from .utils.logging import get_logger

T = TypeVar("T")

LOGGER = get_logger("mailhdr.fields")


def render_field(name: str, value: Builder, options: Optional[RenderOptions] = None) -> bytes:
    """Render ``name: value`` as wire bytes, without a trailing CRLF.

    Args:
      name: Field name, e.g. ``"To"``.
      value: Builder produced by one of the formatters.
      options: Render options; defaults to the configured ``render`` section.

    Returns:
      The folded field as bytes.
    """

    options = options or get_config().render
    prefix = f"{name}: "
    body = value.render(options, column=len(prefix))
    return (prefix + body).encode("utf-8", "surrogateescape")


def parse_field(
    rule: Callable[[Cursor], T],
    raw: Union[bytes, str],
    *,
    field: str = "",
) -> T:
    """Parse an entire post-colon field value with ``rule``.

    What:
      Runs one grammar rule over the complete value.

    Why:
      A rule matching only a prefix of the field is a malformed field, not a
      success.

    How:
      Builds a :class:`Cursor`, applies ``rule`` then :func:`end_of_input`,
      and maps :class:`ParseFailure` to :class:`MalformedHeaderError`. For
      bytes input the offset is converted back to a byte offset into ``raw``.

    Args:
      rule: Grammar rule such as :func:`mailhdr.parse.content_type`.
      raw: Field value after the colon, as bytes or text.
      field: Field name used in log entries.

    Returns:
      The value produced by ``rule``.

    Raises:
      MalformedHeaderError: If the value does not match the grammar.
    """

    text = raw.decode("utf-8", "surrogateescape") if isinstance(raw, bytes) else raw
    cursor = Cursor(text)
    try:
        value = rule(cursor)
        end_of_input(cursor)
    except ParseFailure as exc:
        offset = exc.offset
        if isinstance(raw, bytes):
            offset = len(text[:offset].encode("utf-8", "surrogateescape"))
        LOGGER.warning("malformed_header_field", field=field, offset=offset, expected=exc.expected)
        raise MalformedHeaderError("malformed header field", offset) from exc
    return value
