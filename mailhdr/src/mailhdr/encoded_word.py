"""RFC 2047 encoded words for text that cannot appear verbatim in a header.

What:
  Encode arbitrary text as a run of ``=?charset?X?payload?=`` words and decode
  such runs back to text.

Why:
  Phrases and unstructured fields only admit printable ASCII with single
  spaces between words. Anything else (non-ASCII names, doubled spaces, text
  that already looks like an encoded word) must travel encoded so that a
  reader recovers the original string exactly.

How:
  The charset is ``us-ascii`` when possible, otherwise the configured charset
  (``utf-8`` if that one cannot represent the text). Q or B is chosen by
  comparing the encoded size of the whole text. The text is cut into chunks on
  character boundaries so each word stays within the 75 character limit, and
  the words are joined with :func:`mailhdr.builder.sep` seams. Whitespace
  between adjacent encoded words is insignificant to decoders, so spaces of the
  original text are carried inside the payloads.

Interfaces:
  :func:`encode_as_words`, :func:`decode_word`, :func:`decode_words`.

Invariants & Safety:
  - No encoded word exceeds ``max_length`` characters unless a single
    character cannot fit in the configured budget.
  - The Q alphabet is restricted to the characters RFC 2047 allows inside a
    ``phrase``, so the same words are safe in every header context.
"""
from __future__ import annotations

import base64
import binascii
import re
from typing import Iterator, List, Optional

from . import builder
from .builder import Builder
from .config.loader import get_config

_Q_SAFE = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789!*+-/")
_ENCODED_WORD = re.compile(r"=\?([^?\s*]+)(?:\*[^?\s]*)?\?([QqBb])\?([^?\s]*)\?=")
_WHITESPACE = re.compile(r"(\s+)")


def _select_charset(text: str, preferred: str) -> str:
    for charset in ("us-ascii", preferred):
        try:
            text.encode(charset)
        except UnicodeEncodeError:
            continue
        return charset
    return "utf-8"


def _encode_bytes(text: str, charset: str) -> bytes:
    return text.encode(charset, "replace" if charset == "utf-8" else "strict")


def _q_length(data: bytes) -> int:
    return sum(1 if byte in _Q_SAFE or byte == 0x20 else 3 for byte in data)


def _b_length(data: bytes) -> int:
    return 4 * ((len(data) + 2) // 3)


def _q_encode(data: bytes) -> str:
    out: List[str] = []
    for byte in data:
        if byte in _Q_SAFE:
            out.append(chr(byte))
        elif byte == 0x20:
            out.append("_")
        else:
            out.append(f"={byte:02X}")
    return "".join(out)


def _chunks(text: str, charset: str, encoding: str, budget: int) -> Iterator[bytes]:
    """Split ``text`` into encoded-size-bounded byte chunks on character boundaries."""

    measure = _q_length if encoding == "Q" else _b_length
    chunk = b""
    for char in text:
        data = _encode_bytes(char, charset)
        if chunk and measure(chunk + data) > budget:
            yield chunk
            chunk = b""
        chunk += data
    if chunk:
        yield chunk


def encode_as_words(
    text: str,
    charset: Optional[str] = None,
    max_length: Optional[int] = None,
) -> Builder:
    """Encode ``text`` as a foldable run of RFC 2047 encoded words.

    What:
      Returns a builder whose spans are complete encoded words.

    Why:
      Used by the text-safety classifier whenever verbatim rendering would
      lose or change meaning.

    How:
      Picks the charset and the shorter transfer encoding, cuts the text with
      :func:`_chunks`, wraps every chunk and joins the words with ``sep``.

    Args:
      text: Text to encode; empty text yields an empty builder.
      charset: Preferred charset for non-ASCII text; defaults to the configured
        ``encoding.charset``.
      max_length: Maximum length of each encoded word; defaults to the
        configured ``encoding.max_word_length``.

    Returns:
      A :class:`Builder` of encoded words separated by ``line`` seams.
    """

    if not text:
        return Builder.empty()
    settings = get_config().encoding
    charset = _select_charset(text, charset or settings.charset)
    max_length = max_length or settings.max_word_length
    data = _encode_bytes(text, charset)
    encoding = "Q" if _q_length(data) <= _b_length(data) else "B"
    budget = max_length - len(f"=?{charset}?{encoding}??=")
    words: List[Builder] = []
    for chunk in _chunks(text, charset, encoding, budget):
        if encoding == "Q":
            payload = _q_encode(chunk)
        else:
            payload = base64.b64encode(chunk).decode("ascii")
        words.append(builder.text(f"=?{charset}?{encoding}?{payload}?="))
    return builder.sep(words)


def decode_word(word: str) -> Optional[str]:
    """Decode a single encoded word, or return ``None`` if ``word`` is not one.

    Unknown charsets and undecodable payloads also return ``None`` so callers
    keep the word verbatim.
    """

    match = _ENCODED_WORD.fullmatch(word)
    if match is None:
        return None
    charset, encoding, payload = match.groups()
    try:
        if encoding in "Qq":
            raw = binascii.a2b_qp(payload.encode("ascii"), header=True)
        else:
            raw = base64.b64decode(payload + "=" * (-len(payload) % 4))
        return raw.decode(charset, "replace")
    except (LookupError, binascii.Error, UnicodeEncodeError, ValueError):
        return None


def decode_words(text: str) -> str:
    """Decode every encoded word in ``text``.

    Whitespace between two adjacent encoded words is dropped; all other
    whitespace is kept as written.
    """

    pieces = _WHITESPACE.split(text)
    out: List[str] = []
    previous_encoded = False
    pending_space = ""
    for index, piece in enumerate(pieces):
        if index % 2:
            pending_space = piece
            continue
        if not piece:
            out.append(pending_space)
            pending_space = ""
            previous_encoded = False
            continue
        decoded = decode_word(piece)
        if decoded is not None and previous_encoded:
            pending_space = ""
        out.append(pending_space)
        out.append(decoded if decoded is not None else piece)
        pending_space = ""
        previous_encoded = decoded is not None
    out.append(pending_space)
    return "".join(out)
