"""Recursive-descent parsers for structured header field values.

What:
  Group the lexical primitives, the MIME field parsers and the address field
  parsers behind one import surface.

Why:
  Field-level callers (:mod:`mailhdr.fields`, the CLI) pick a rule by name and
  run it over a whole field value; they should not depend on which module
  defines it.

How:
  Re-export the rules listed in ``__all__``. Every rule takes a
  :class:`Cursor` and returns a value or raises :class:`ParseFailure`.
"""

from .address import (
    addr_spec,
    address,
    address_list,
    angle_addr,
    group,
    mailbox,
    mailbox_list,
    msg_id,
    msg_id_list,
    phrase_list,
)
from .mime import content_transfer_encoding, content_type, mime_version, parameter
from .primitives import Cursor, ParseFailure, phrase, unstructured

__all__ = [
    "Cursor",
    "ParseFailure",
    "addr_spec",
    "address",
    "address_list",
    "angle_addr",
    "content_transfer_encoding",
    "content_type",
    "group",
    "mailbox",
    "mailbox_list",
    "mime_version",
    "msg_id",
    "msg_id_list",
    "parameter",
    "phrase",
    "phrase_list",
    "unstructured",
]
