"""Immutable header value objects.

What:
  Define the typed values the formatters consume and the parsers produce:
  :class:`Address`, :class:`Mailbox`, :class:`Individual`, :class:`Group`,
  :class:`MessageID`, :class:`MimeType` and :class:`Parameters`.

Why:
  Formatting is total only because its inputs are validated once, at
  construction. Keeping validation in the value types means builders never
  need an error path.

How:
  Frozen dataclasses check their fields in ``__post_init__`` and raise
  :class:`~mailhdr.errors.InvalidValueError`. :class:`Parameters` is a
  read-only mapping whose keys are lower-cased on the way in.

Invariants:
  - Values never change after construction.
  - Addresses match ``local-part "@" domain`` and message ids match
    ``id-left "@" id-right``, so every value the formatters accept reads back
    through the parsers. Neither contains whitespace, control characters
    or characters that would end the token early.
  - MIME type, subtype and parameter names are lower case.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from .errors import InvalidValueError

TSPECIALS = frozenset('()<>@,;:\\"/[]?=')


def is_token_char(char: str) -> bool:
    """RFC 2045 token character: printable US-ASCII excluding tspecials."""

    return "!" <= char <= "~" and char not in TSPECIALS


def is_token(value: str) -> bool:
    return bool(value) and all(is_token_char(char) for char in value)


ATEXT_SPECIALS = "!#$%&'*+-/=?^_`{|}~"


def is_atext(char: str) -> bool:
    return char.isalnum() or char in ATEXT_SPECIALS or char > "\x7f"


def is_dot_atom(value: str) -> bool:
    """``1*atext *("." 1*atext)``."""

    return all(part and all(is_atext(char) for char in part) for part in value.split("."))


def _is_quoted_local_part(value: str) -> bool:
    if len(value) < 2 or value[0] != '"' or value[-1] != '"':
        return False
    inner = iter(value[1:-1])
    for char in inner:
        if char == '"':
            return False
        if char == "\\" and next(inner, None) is None:
            return False
    return True


def _is_domain_literal(value: str) -> bool:
    return (
        len(value) >= 2
        and value[0] == "["
        and value[-1] == "]"
        and not any(char in "[]\\" for char in value[1:-1])
    )


def _check_opaque(kind: str, value: str, forbidden: str) -> None:
    if not value:
        raise InvalidValueError(f"{kind} must not be empty")
    for char in value:
        if char.isspace() or char < " " or char == "\x7f" or char in forbidden:
            raise InvalidValueError(f"invalid character {char!r} in {kind}")


def _split_at(value: str, left: Callable[[str], bool], right: Callable[[str], bool]) -> bool:
    """True when some ``@`` splits ``value`` into a valid left and right side."""

    index = value.find("@")
    while index != -1:
        if left(value[:index]) and right(value[index + 1:]):
            return True
        index = value.find("@", index + 1)
    return False


def _is_local_part(value: str) -> bool:
    return is_dot_atom(value) or _is_quoted_local_part(value)


def _is_domain(value: str) -> bool:
    return is_dot_atom(value) or _is_domain_literal(value)


@dataclass(frozen=True)
class Address:
    """An addr-spec such as ``john.q.public@example.com``, kept as written.

    The text must be ``local-part "@" domain`` with a dot-atom or quoted local
    part and a dot-atom or domain-literal domain, without whitespace.
    """

    value: str

    def __post_init__(self) -> None:
        _check_opaque("address", self.value, "<>,")
        if not _split_at(self.value, _is_local_part, _is_domain):
            raise InvalidValueError(f"address {self.value!r} is not an addr-spec")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Mailbox:
    name: Optional[str]
    address: Address


@dataclass(frozen=True)
class Individual:
    mailbox: Mailbox


@dataclass(frozen=True)
class Group:
    """A named, possibly empty, list of mailboxes (``name: a, b;``)."""

    name: str
    members: Tuple[Mailbox, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidValueError("group name must not be empty")
        object.__setattr__(self, "members", tuple(self.members))


Recipient = Union[Individual, Group]


@dataclass(frozen=True)
class MessageID:
    """A message identifier without its angle brackets (``id-left@id-right``)."""

    value: str

    def __post_init__(self) -> None:
        _check_opaque("message id", self.value, "<>,")
        if not _split_at(self.value, is_dot_atom, _is_domain):
            raise InvalidValueError(f"message id {self.value!r} is not id-left@id-right")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MimeType:
    type: str
    subtype: str

    def __post_init__(self) -> None:
        for part in (self.type, self.subtype):
            if not is_token(part):
                raise InvalidValueError(f"invalid MIME token {part!r}")
        object.__setattr__(self, "type", self.type.lower())
        object.__setattr__(self, "subtype", self.subtype.lower())

    def __str__(self) -> str:
        return f"{self.type}/{self.subtype}"


class Parameters(Mapping[str, str]):
    """Read-only MIME parameter mapping with case-insensitive keys.

    Keys are stored lower-cased; a later duplicate (by case-insensitive name)
    replaces an earlier one. Equality ignores order, iteration keeps it.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None) -> None:
        pairs = items.items() if isinstance(items, Mapping) else (items or ())
        normalised: Dict[str, str] = {}
        for key, value in pairs:
            if not is_token(key):
                raise InvalidValueError(f"invalid parameter name {key!r}")
            normalised[key.lower()] = value
        self._items = normalised

    def __getitem__(self, key: str) -> str:
        return self._items[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Parameters):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self._items == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._items.items()))

    def __repr__(self) -> str:
        return f"Parameters({self._items!r})"
