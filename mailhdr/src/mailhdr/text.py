"""Decide whether free text can be written into a header as it is.

What:
  Classify phrases and unstructured text as verbatim-safe or encoding-required
  and build the matching :class:`~mailhdr.builder.Builder`.

Why:
  A header reader splits text on whitespace, treats ``=?`` words as encoded
  words, and gives specials a grammatical meaning inside phrases. Text that
  would be misread under any of those rules must be encoded instead, or the
  value does not survive a round trip.

How:
  Split on whitespace; the text is verbatim-safe when the words joined by
  single spaces give back the original, no word starts with ``=?``, and every
  character of every word passes the caller's legality predicate. Safe text
  becomes ``sep`` over one span per word so folds only land between words;
  other text is handed to :func:`mailhdr.encoded_word.encode_as_words`.

Interfaces:
  :func:`is_phrase_char`, :func:`is_unstructured_char`,
  :func:`is_renderable_verbatim`, :func:`render_text`.
"""
from __future__ import annotations

from typing import Callable

from . import builder
from .builder import Builder
from .encoded_word import encode_as_words

PHRASE_SPECIALS = frozenset('()<>[]:;@\\",')

CharPredicate = Callable[[str], bool]


def is_unstructured_char(char: str) -> bool:
    """Printable US-ASCII other than space."""

    return "!" <= char <= "~"


def is_phrase_char(char: str) -> bool:
    """Printable US-ASCII other than space and the RFC 5322 specials (``.`` allowed)."""

    return is_unstructured_char(char) and char not in PHRASE_SPECIALS


def is_renderable_verbatim(text: str, is_legal: CharPredicate) -> bool:
    words = text.split()
    if " ".join(words) != text:
        return False
    for word in words:
        if word.startswith("=?"):
            return False
        if not all(is_legal(char) for char in word):
            return False
    return True


def render_text(text: str, is_legal: CharPredicate) -> Builder:
    """Render ``text`` verbatim when safe, otherwise as encoded words."""

    if is_renderable_verbatim(text, is_legal):
        return builder.sep(builder.text(word) for word in text.split())
    return encode_as_words(text)
