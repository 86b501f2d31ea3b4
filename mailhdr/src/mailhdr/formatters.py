"""Builders for structured header field values.

What:
  Compose :mod:`mailhdr.builder` combinators and the text-safety classifier
  into the grammars of address, mailbox, group, message-id, MIME version,
  content type and free-text fields.

Why:
  Each formatter only states where a field may fold: between list items, and
  between a display name and its bracketed address. Addresses, message ids and
  ``key=value`` parameter pairs are single spans, so they are never split.

How:
  Every function is total over already-validated values and returns a
  :class:`~mailhdr.builder.Builder`. Multi-valued fields all go through
  :func:`~mailhdr.builder.comma_sep`.

Interfaces:
  :func:`address`, :func:`angle_addr`, :func:`mailbox`, :func:`mailbox_list`,
  :func:`recipient`, :func:`recipient_list`, :func:`message_id`,
  :func:`message_id_list`, :func:`phrase`, :func:`phrase_list`,
  :func:`unstructured`, :func:`mime_version`, :func:`content_type`,
  :func:`content_transfer_encoding`, :func:`parameter_value`.
"""
from __future__ import annotations

from typing import Iterable, Mapping
from urllib.parse import quote

from . import builder
from .builder import Builder, comma_sep, soft_join
from .text import is_phrase_char, is_unstructured_char, render_text
from .values import Address, Individual, Mailbox, MessageID, MimeType, Recipient, is_token


def address(value: Address) -> Builder:
    return builder.text(value.value)


def angle_addr(value: Address) -> Builder:
    return "<" + address(value) + ">"


def mailbox(value: Mailbox) -> Builder:
    """``address`` alone, or ``name <address>`` with a fold point before ``<``."""

    if not value.name:
        return address(value.address)
    return soft_join(phrase(value.name), angle_addr(value.address))


def mailbox_list(values: Iterable[Mailbox]) -> Builder:
    return comma_sep(mailbox, values)


def recipient(value: Recipient) -> Builder:
    """Render an individual mailbox or a ``name: members;`` group."""

    if isinstance(value, Individual):
        return mailbox(value.mailbox)
    if not value.members:
        return phrase(value.name) + ":;"
    return soft_join(phrase(value.name) + ":", mailbox_list(value.members)) + ";"


def recipient_list(values: Iterable[Recipient]) -> Builder:
    return comma_sep(recipient, values)


def message_id(value: MessageID) -> Builder:
    return builder.text(f"<{value.value}>")


def message_id_list(values: Iterable[MessageID]) -> Builder:
    return comma_sep(message_id, values)


def phrase(value: str) -> Builder:
    """Render a display name or keyword; specials force encoding."""

    return render_text(value, is_phrase_char)


def phrase_list(values: Iterable[str]) -> Builder:
    return comma_sep(phrase, values)


def unstructured(value: str) -> Builder:
    """Render free text such as a ``Subject``."""

    return render_text(value, is_unstructured_char)


def mime_version(major: int, minor: int) -> Builder:
    return builder.integer(major) + "." + builder.integer(minor)


def content_transfer_encoding(value: str) -> Builder:
    return builder.text(value)


def quote_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def parameter_value(key: str, value: str) -> str:
    """Render one ``key=value`` pair.

    Tokens stay bare, other printable ASCII becomes a quoted string, and text
    outside printable ASCII uses the RFC 2231 ``key*=utf-8''...`` form.
    """

    if is_token(value):
        return f"{key}={value}"
    if all(" " <= char <= "~" or char == "\t" for char in value):
        return f"{key}={quote_string(value)}"
    encoded = quote(value.encode("utf-8", "surrogateescape"), safe="!#$&+-.^_`|~")
    return f"{key}*=utf-8''{encoded}"


def content_type(mime_type: MimeType, parameters: Mapping[str, str]) -> Builder:
    """Render ``type/subtype`` followed by ``; key=value`` parameters.

    Each parameter may fold at the seam after the preceding ``;``.
    """

    result = builder.text(str(mime_type))
    for key, value in parameters.items():
        result = soft_join(result + ";", builder.text(parameter_value(key.lower(), value)))
    return result
