"""Parsers for address, mailbox, group and message-id fields.

What:
  Read ``From``/``To``/``Cc``-style address lists, single mailboxes, groups,
  ``Message-ID``/``References``-style identifier lists and keyword phrase
  lists into the value types of :mod:`mailhdr.values`.

Why:
  These are the inverse of :mod:`mailhdr.formatters`: whatever the formatters
  render, including folded lines and encoded display names, must read back as
  the same values.

How:
  Ordered alternation on the shared cursor. A mailbox is tried as
  ``name-addr`` first and, if no ``<`` follows the phrase, rewound and tried as
  a bare ``addr-spec``. An address that is not a mailbox is tried as a group.
  Addresses and message ids keep their source text (minus CFWS) as their
  opaque value.

Interfaces:
  :func:`addr_spec`, :func:`angle_addr`, :func:`mailbox`,
  :func:`mailbox_list`, :func:`group`, :func:`address`, :func:`address_list`,
  :func:`msg_id`, :func:`msg_id_list`, :func:`phrase_list`.
"""
from __future__ import annotations

from typing import Callable, List, TypeVar

from ..errors import InvalidValueError
from ..values import Address, Group, Individual, Mailbox, MessageID, Recipient
from .primitives import (
    Cursor,
    bare_quoted_string,
    cfws,
    char,
    dot_atom_text,
    phrase,
)

T = TypeVar("T")


def _domain_literal(cur: Cursor) -> str:
    start = cur.pos
    char("[")(cur)
    cur.take_while(lambda c: c not in "[]\\" and not c.isspace())
    char("]")(cur)
    return cur.text[start:cur.pos]


def _quoted_local_part(cur: Cursor) -> str:
    start = cur.pos
    bare_quoted_string(cur)
    return cur.text[start:cur.pos]


def addr_spec(cur: Cursor) -> Address:
    """``local-part "@" domain``; the value is the source text."""

    cfws(cur)
    start = cur.pos
    cur.choice(dot_atom_text, _quoted_local_part)
    char("@")(cur)
    cur.choice(dot_atom_text, _domain_literal)
    raw = cur.text[start:cur.pos]
    try:
        value = Address(raw)
    except InvalidValueError:
        cur.pos = start
        cur.fail("address")
    cfws(cur)
    return value


def angle_addr(cur: Cursor) -> Address:
    cfws(cur)
    char("<")(cur)
    value = addr_spec(cur)
    char(">")(cur)
    cfws(cur)
    return value


def _name_addr(cur: Cursor) -> Mailbox:
    name = cur.optional(phrase)
    return Mailbox(name, angle_addr(cur))


def _bare_mailbox(cur: Cursor) -> Mailbox:
    return Mailbox(None, addr_spec(cur))


def mailbox(cur: Cursor) -> Mailbox:
    return cur.choice(_name_addr, _bare_mailbox)


def _separated(cur: Cursor, rule: Callable[[Cursor], T]) -> List[T]:
    """``rule *("," rule)``."""

    items = [rule(cur)]
    while cur.peek() == ",":
        cur.advance()
        items.append(rule(cur))
    return items


def mailbox_list(cur: Cursor) -> List[Mailbox]:
    return _separated(cur, mailbox)


def group(cur: Cursor) -> Group:
    """``display-name ":" [mailbox-list / CFWS] ";" [CFWS]``."""

    start = cur.pos
    name = phrase(cur)
    if not name:
        cur.pos = start
        cur.fail("display-name")
    char(":")(cur)
    cfws(cur)
    members = cur.optional(mailbox_list) or []
    cfws(cur)
    char(";")(cur)
    cfws(cur)
    return Group(name, tuple(members))


def _individual(cur: Cursor) -> Individual:
    return Individual(mailbox(cur))


def address(cur: Cursor) -> Recipient:
    return cur.choice(_individual, group)


def address_list(cur: Cursor) -> List[Recipient]:
    return _separated(cur, address)


def _id_right(cur: Cursor) -> str:
    return cur.choice(dot_atom_text, _domain_literal)


def msg_id(cur: Cursor) -> MessageID:
    """``"<" id-left "@" id-right ">"``; the value excludes the brackets."""

    cfws(cur)
    char("<")(cur)
    start = cur.pos
    dot_atom_text(cur)
    char("@")(cur)
    _id_right(cur)
    try:
        value = MessageID(cur.text[start:cur.pos])
    except InvalidValueError:
        cur.pos = start
        cur.fail("msg-id")
    char(">")(cur)
    cfws(cur)
    return value


def _next_msg_id(cur: Cursor) -> MessageID:
    cfws(cur)
    if cur.peek() == ",":
        cur.advance()
    return msg_id(cur)


def msg_id_list(cur: Cursor) -> List[MessageID]:
    """Message ids separated by CFWS or commas."""

    return [msg_id(cur)] + cur.many(_next_msg_id)


def phrase_list(cur: Cursor) -> List[str]:
    return _separated(cur, phrase)
