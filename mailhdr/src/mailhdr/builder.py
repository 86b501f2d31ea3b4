"""Header builders: width-tracked text joined by fold-aware seams.

What:
  Provide :class:`Builder`, the value every header formatter returns, together
  with the smart constructors and combinators that describe where a header may
  fold (``line``, ``linebreak``, ``softline``, ``softbreak``, ``sep``,
  ``comma_sep``).

Why:
  Header grammar code should only state which seams are legal fold points.
  Width accounting, indentation and the flatten-or-fold decision belong to the
  layout engine, and the same builder must be renderable under different
  widths and indents.

How:
  Rendering happens in two stages. A builder holds an options-independent tree
  of text spans, line seams and groups. :meth:`Builder.layout` folds that tree
  into :mod:`mailhdr.layout` documents for one :class:`RenderOptions`, turning
  each seam into a ``prim`` that yields a space (or nothing) when flattened
  and CRLF plus ``indent`` spaces when broken. :meth:`Builder.render` hands the
  document to :func:`mailhdr.layout.render`.

Interfaces:
  :class:`Builder`, :func:`literal`, :func:`text`, :func:`from_bytes`,
  :func:`integer`, :func:`group`, :func:`line`, :func:`linebreak`,
  :func:`softline`, :func:`softbreak`, :func:`soft_join`, :func:`sep`,
  :func:`punctuate`, :func:`comma_sep`.

Invariants & Safety:
  - Concatenation is associative and keeps every span in textual order.
  - Each span's width is the number of code points it renders, so fitting is
    exact.
  - A broken seam always emits ``\\r\\n`` followed by ``indent`` spaces,
    whatever the nesting depth.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Tuple, TypeVar, Union

from . import layout
from .config.schema import RenderOptions

CRLF = "\r\n"

T = TypeVar("T")


@dataclass(frozen=True)
class _Text:
    value: str


@dataclass(frozen=True)
class _Line:
    flat: str


@dataclass(frozen=True)
class _Group:
    inner: "_Node"


@dataclass(frozen=True)
class _Cat:
    parts: Tuple["_Node", ...]


_Node = Union[_Text, _Line, _Group, _Cat]


@dataclass(frozen=True)
class Builder:
    """An immutable, options-independent description of a header value."""

    node: _Node = _Cat(())

    @classmethod
    def empty(cls) -> "Builder":
        return _EMPTY

    @classmethod
    def concat(cls, builders: Iterable["Builder"]) -> "Builder":
        parts: List[_Node] = []
        for item in builders:
            if isinstance(item.node, _Cat):
                parts.extend(item.node.parts)
            else:
                parts.append(item.node)
        if not parts:
            return _EMPTY
        if len(parts) == 1:
            return cls(parts[0])
        return cls(_Cat(tuple(parts)))

    def __add__(self, other: object) -> "Builder":
        if isinstance(other, str):
            other = literal(other)
        if not isinstance(other, Builder):
            return NotImplemented
        return Builder.concat((self, other))

    def __radd__(self, other: object) -> "Builder":
        if isinstance(other, str):
            return Builder.concat((literal(other), self))
        return NotImplemented

    def layout(self, options: RenderOptions) -> layout.Doc:
        """Lower this builder to a layout document for ``options``."""

        newline = layout.concat(
            layout.span(0, CRLF),
            layout.break_(0),
            layout.span(options.indent, " " * options.indent),
        )
        return _lower(self.node, newline)

    def render(self, options: RenderOptions, column: int = 0) -> str:
        """Render to folded text, starting at ``column`` on the first line."""

        return layout.render(self.layout(options), options.max_width, column)

    def to_bytes(self, options: RenderOptions, column: int = 0) -> bytes:
        """Render to the wire representation."""

        return self.render(options, column).encode("utf-8", "surrogateescape")


_EMPTY = Builder(_Cat(()))


def _lower(node: _Node, newline: layout.Doc) -> layout.Doc:
    if isinstance(node, _Text):
        return layout.span(len(node.value), node.value)
    if isinstance(node, _Line):
        flat = layout.span(len(node.flat), node.flat) if node.flat else layout.empty()
        return layout.prim(lambda mode: flat if mode is layout.Mode.FLATTENED else newline)
    if isinstance(node, _Group):
        return layout.group(_lower(node.inner, newline))
    return layout.concat(*(_lower(part, newline) for part in node.parts))


def literal(value: str) -> Builder:
    """Lift a piece of header syntax (``","``, ``"<"``, a token) into a span."""

    if not value:
        return _EMPTY
    return Builder(_Text(value))


def text(value: str) -> Builder:
    """Lift text content into a single atomic span."""

    return literal(value)


def from_bytes(value: bytes) -> Builder:
    """Lift raw header bytes into a span; non-UTF-8 bytes survive rendering."""

    return literal(value.decode("utf-8", "surrogateescape"))


def integer(value: int) -> Builder:
    return literal(str(value))


def group(builder: Builder) -> Builder:
    """Mark ``builder`` as one flatten-or-fold decision."""

    return Builder(_Group(builder.node))


_LINE = Builder(_Line(" "))
_LINEBREAK = Builder(_Line(""))


def line() -> Builder:
    """A seam rendered as one space when flattened, else as a fold."""

    return _LINE


def linebreak() -> Builder:
    """A seam rendered as nothing when flattened, else as a fold."""

    return _LINEBREAK


def softline() -> Builder:
    return group(_LINE)


def softbreak() -> Builder:
    return group(_LINEBREAK)


def soft_join(left: Builder, right: Builder) -> Builder:
    """Join two builders with a seam that folds only if ``right`` does not fit."""

    return Builder.concat((left, softline(), right))


def sep(builders: Iterable[Builder]) -> Builder:
    """Join with ``line`` seams that all flatten or all fold together."""

    parts: List[Builder] = []
    for item in builders:
        if parts:
            parts.append(_LINE)
        parts.append(item)
    return group(Builder.concat(parts))


def punctuate(punctuation: Union[str, Builder], items: Sequence[Builder]) -> List[Builder]:
    """Append ``punctuation`` to every element of ``items`` but the last."""

    if isinstance(punctuation, str):
        punctuation = literal(punctuation)
    return [item + punctuation for item in items[:-1]] + list(items[-1:])


def comma_sep(render: Callable[[T], Builder], items: Iterable[T]) -> Builder:
    """Render ``items`` as a comma-separated list that folds after commas."""

    return sep(punctuate(",", [render(item) for item in items]))


__all__ = [
    "Builder",
    "CRLF",
    "comma_sep",
    "from_bytes",
    "group",
    "integer",
    "line",
    "linebreak",
    "literal",
    "punctuate",
    "sep",
    "soft_join",
    "softbreak",
    "softline",
    "text",
]
