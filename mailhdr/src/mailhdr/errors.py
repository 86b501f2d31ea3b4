"""Exception taxonomy shared by the mailhdr formatters and parsers.

What:
  Declare the public error types raised when header values are constructed
  from invalid input or when a header field cannot be parsed.

Why:
  Formatting never fails once values exist, so every failure surfaces at one of
  two seams: building a value object, or parsing a raw field. Giving both a
  common base lets callers fall back to treating a header as opaque bytes with
  a single ``except`` clause.

How:
  :class:`HeaderError` is the root. :class:`InvalidValueError` also derives from
  :class:`ValueError` so value construction behaves like any other bad
  argument. :class:`MalformedHeaderError` carries the offset at which parsing
  stopped making progress.

Interfaces:
  :class:`HeaderError`, :class:`InvalidValueError`,
  :class:`MalformedHeaderError`.
"""
from __future__ import annotations


class HeaderError(Exception):
    """Base error for every mailhdr failure."""


class InvalidValueError(HeaderError, ValueError):
    """Raised when a header value object is built from invalid data."""


class MalformedHeaderError(HeaderError):
    """Raised when a raw header field does not match its grammar.

    What:
      Reports an all-or-nothing parse failure for one header field.

    Why:
      Callers decide how to treat broken fields (drop them, keep them raw); the
      offset tells them where the input stopped matching.

    How:
      Stores ``offset`` as an attribute and folds it into the message.

    Attributes:
      offset: Position in the field value reached before failing.
    """

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset
