"""Backtracking cursor and RFC 5322 / RFC 2045 lexical rules.

What:
  Provide :class:`Cursor`, the shared input position every grammar rule
  consumes from, and the lexical building blocks of structured header fields:
  folding whitespace, comments, tokens, atoms, quoted strings, words, phrases
  and unstructured text.

Why:
  Header grammars need ordered alternation: try one rule, and if it does not
  match, rewind and try the next. A rule that fails must leave the cursor where
  it started so the next alternative sees the same input.

How:
  Rules are plain functions taking a :class:`Cursor`. They either return a
  value with the cursor advanced or raise :class:`ParseFailure`.
  :meth:`Cursor.attempt` restores the position on failure, and
  :meth:`Cursor.choice`, :meth:`Cursor.optional` and :meth:`Cursor.many` build
  alternation and repetition on top of it. When every alternative fails, the
  failure that got furthest into the input is the one reported.

Interfaces:
  :class:`Cursor`, :class:`ParseFailure`, :func:`cfws`, :func:`comment`,
  :func:`skip_fws`, :func:`char`, :func:`padded`, :func:`digits`,
  :func:`token`, :func:`atom`, :func:`dot_atom_text`,
  :func:`bare_quoted_string`, :func:`quoted_string`, :func:`word`,
  :func:`phrase`, :func:`unstructured`, :func:`end_of_input`.

Invariants:
  - Folding (CRLF followed by whitespace) is accepted anywhere FWS is.
  - Quoted strings are returned unescaped and unfolded.
"""
from __future__ import annotations

from typing import Callable, List, NoReturn, Optional, Tuple, TypeVar

from ..encoded_word import decode_word, decode_words
from ..values import is_atext, is_token_char

T = TypeVar("T")
Rule = Callable[["Cursor"], T]

WSP = " \t"


class ParseFailure(Exception):
    """Local grammar mismatch; caught by alternation, never by callers."""

    def __init__(self, offset: int, expected: str) -> None:
        super().__init__(f"expected {expected} at offset {offset}")
        self.offset = offset
        self.expected = expected


class Cursor:
    """Mutable position over one header field value."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self, length: int = 1) -> str:
        return self.text[self.pos:self.pos + length]

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def advance(self, count: int = 1) -> str:
        value = self.text[self.pos:self.pos + count]
        self.pos += len(value)
        return value

    def take_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        while self.pos < len(self.text) and predicate(self.text[self.pos]):
            self.pos += 1
        return self.text[start:self.pos]

    def fail(self, expected: str) -> NoReturn:
        raise ParseFailure(self.pos, expected)

    def attempt(self, rule: Rule[T]) -> T:
        """Run ``rule``; on failure rewind to the starting position and re-raise."""

        start = self.pos
        try:
            return rule(self)
        except ParseFailure:
            self.pos = start
            raise

    def optional(self, rule: Rule[T]) -> Optional[T]:
        try:
            return self.attempt(rule)
        except ParseFailure:
            return None

    def choice(self, *rules: Rule[T]) -> T:
        """Return the result of the first rule that matches."""

        failures: List[ParseFailure] = []
        for rule in rules:
            try:
                return self.attempt(rule)
            except ParseFailure as exc:
                failures.append(exc)
        raise max(failures, key=lambda exc: exc.offset)

    def many(self, rule: Rule[T]) -> List[T]:
        results: List[T] = []
        while True:
            start = self.pos
            try:
                value = self.attempt(rule)
            except ParseFailure:
                return results
            if self.pos == start:
                return results
            results.append(value)


def _is_wsp(c: str) -> bool:
    return c != "" and c in WSP


def skip_fws(cur: Cursor) -> None:
    """Consume folding whitespace, including CRLF folds."""

    while True:
        if _is_wsp(cur.peek()):
            cur.take_while(_is_wsp)
        elif cur.peek(2) == "\r\n" and _is_wsp(cur.peek(3)[2:]):
            cur.advance(2)
        elif cur.peek() == "\n" and _is_wsp(cur.peek(2)[1:]):
            cur.advance()
        else:
            return


def comment(cur: Cursor) -> str:
    """Consume a possibly nested ``( ... )`` comment and return its text."""

    if cur.peek() != "(":
        cur.fail("'('")
    cur.advance()
    parts: List[str] = []
    depth = 1
    while depth:
        if cur.at_end():
            cur.fail("')'")
        c = cur.advance()
        if c == "\\" and not cur.at_end():
            parts.append(cur.advance())
            continue
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if not depth:
                break
        parts.append(c)
    return "".join(parts)


def cfws(cur: Cursor) -> None:
    """Skip any mix of folding whitespace and comments."""

    while True:
        skip_fws(cur)
        if cur.peek() != "(":
            return
        comment(cur)


def char(expected: str) -> Rule[str]:
    def rule(cur: Cursor) -> str:
        if cur.peek() != expected:
            cur.fail(repr(expected))
        return cur.advance()

    return rule


def padded(rule: Rule[T]) -> Rule[T]:
    """Surround ``rule`` with optional CFWS."""

    def wrapped(cur: Cursor) -> T:
        cfws(cur)
        value = rule(cur)
        cfws(cur)
        return value

    return wrapped


def digits(cur: Cursor) -> int:
    value = cur.take_while(lambda c: "0" <= c <= "9")
    if not value:
        cur.fail("digits")
    return int(value)


def token(cur: Cursor) -> str:
    """RFC 2045 token."""

    value = cur.take_while(is_token_char)
    if not value:
        cur.fail("token")
    return value


def atom(cur: Cursor) -> str:
    cfws(cur)
    value = cur.take_while(is_atext)
    if not value:
        cur.fail("atom")
    cfws(cur)
    return value


def dot_atom_text(cur: Cursor) -> str:
    start = cur.pos
    while True:
        if not cur.take_while(is_atext):
            cur.pos = start
            cur.fail("atext")
        if cur.peek() != "." or not is_atext(cur.peek(2)[1:] or " "):
            return cur.text[start:cur.pos]
        cur.advance()


def bare_quoted_string(cur: Cursor) -> str:
    """``DQUOTE *([FWS] qcontent) [FWS] DQUOTE`` without surrounding CFWS."""

    if cur.peek() != '"':
        cur.fail("'\"'")
    cur.advance()
    parts: List[str] = []
    while True:
        if cur.at_end():
            cur.fail("'\"'")
        if cur.peek(2) == "\r\n":
            cur.advance(2)
            continue
        c = cur.advance()
        if c == '"':
            return "".join(parts)
        if c == "\\":
            if cur.at_end():
                cur.fail("quoted-pair")
            c = cur.advance()
        parts.append(c)


def quoted_string(cur: Cursor) -> str:
    cfws(cur)
    value = bare_quoted_string(cur)
    cfws(cur)
    return value


def word(cur: Cursor) -> str:
    return cur.choice(atom, quoted_string)


def _phrase_word(cur: Cursor) -> Tuple[str, bool]:
    """One phrase word and whether it was an encoded word.

    Words may contain ``.`` (obs-phrase) so ``Joe Q. Public`` reads back as
    written.
    """

    cfws(cur)
    if cur.peek() == '"':
        value = bare_quoted_string(cur)
        cfws(cur)
        return value, False
    value = cur.take_while(lambda c: is_atext(c) or c == ".")
    if not value:
        cur.fail("word")
    cfws(cur)
    decoded = decode_word(value)
    if decoded is None:
        return value, False
    return decoded, True


def phrase(cur: Cursor) -> str:
    """One or more words joined by single spaces; encoded words are decoded.

    Adjacent encoded words are joined without a space.
    """

    words = [cur.attempt(_phrase_word)] + cur.many(_phrase_word)
    out: List[str] = []
    previous_encoded = False
    for index, (value, encoded) in enumerate(words):
        if index and not (encoded and previous_encoded):
            out.append(" ")
        out.append(value)
        previous_encoded = encoded
    return "".join(out)


def unstructured(cur: Cursor) -> str:
    """The rest of the field, unfolded, trimmed and with encoded words decoded."""

    raw = cur.advance(len(cur.text) - cur.pos)
    unfolded = raw.replace("\r\n", "").replace("\n", "")
    return decode_words(unfolded.strip(WSP))


def end_of_input(cur: Cursor) -> None:
    cfws(cur)
    if not cur.at_end():
        cur.fail("end of input")
