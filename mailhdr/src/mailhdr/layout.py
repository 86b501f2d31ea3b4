"""Document tree and width-driven renderer for folded header text.

What:
  Provide the layout primitives every header builder lowers to: fixed-width
  spans, breaks, fit-or-break groups, and mode-dependent ``prim`` nodes, plus
  :func:`render`, which decides for each group whether it is flattened or
  broken.

Why:
  Folding must keep physical lines within a width budget while never cutting
  an atomic token. Separating the tree from the decision procedure keeps the
  header grammar code declarative: it only says where breaks may happen.

How:
  Nodes are frozen dataclasses. :func:`render` walks the tree with an explicit
  stack of ``(mode, doc)`` frames. When it meets a group in broken context it
  probes ahead with :func:`_fits`: the group's flattened text, then the text
  that follows it up to the next break, must stay within the width left on the
  line. A group nested inside a flattened group is flattened without probing.

Interfaces:
  :class:`Mode`, :func:`empty`, :func:`span`, :func:`break_`, :func:`group`,
  :func:`prim`, :func:`concat`, :func:`render`.

Invariants & Safety:
  - Spans are emitted whole; the renderer never looks inside them.
  - Rendering is a pure function of the tree, the width and the start column.
  - Ties flatten: a group whose flattened text ends exactly at ``max_width``
    stays on one line.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union


class Mode(enum.Enum):
    """Resolved state of the innermost group around a node."""

    FLATTENED = "flattened"
    BROKEN = "broken"


@dataclass(frozen=True)
class Span:
    width: int
    content: str


@dataclass(frozen=True)
class Concat:
    parts: Tuple["Doc", ...]


@dataclass(frozen=True)
class Break:
    """Unconditional line boundary; occupies ``width`` columns when flattened."""

    width: int


@dataclass(frozen=True)
class Group:
    child: "Doc"


@dataclass(frozen=True)
class Prim:
    """Node whose content is chosen from the mode of its enclosing group."""

    choose: Callable[[Mode], "Doc"]


Doc = Union[Span, Concat, Break, Group, Prim]

_EMPTY = Concat(())


def empty() -> Doc:
    return _EMPTY


def span(width: int, content: str) -> Doc:
    return Span(width, content)


def break_(width: int = 0) -> Doc:
    return Break(width)


def group(doc: Doc) -> Doc:
    return Group(doc)


def prim(choose: Callable[[Mode], Doc]) -> Doc:
    return Prim(choose)


def concat(*parts: Doc) -> Doc:
    """Concatenate documents, splicing nested concatenations in place."""

    flat: List[Doc] = []
    for part in parts:
        if isinstance(part, Concat):
            flat.extend(part.parts)
        else:
            flat.append(part)
    if not flat:
        return _EMPTY
    if len(flat) == 1:
        return flat[0]
    return Concat(tuple(flat))


@dataclass(frozen=True)
class _Frame:
    # ``None`` marks a group the probe has not decided yet.
    mode: Optional[Mode]
    doc: Doc


def render(doc: Doc, max_width: int, column: int = 0) -> str:
    """Render ``doc`` into text, folding groups that do not fit.

    What:
      Produces the final header text for ``doc`` given a width budget.

    Why:
      This is the only place fold decisions are made, so every builder gets the
      same fitting policy.

    How:
      Pops frames off a stack. Spans append their content and advance the
      column; broken breaks reset the column; prims are expanded with their
      frame's mode; groups in broken context are flattened when
      :func:`_fits` approves.

    Args:
      doc: Document to render.
      max_width: Maximum column a line should reach.
      column: Column the first line starts at (e.g. after ``Subject: ``).

    Returns:
      The rendered text. Lines may exceed ``max_width`` only where a single span
      is wider than the room available.
    """

    out: List[str] = []
    col = column
    stack: List[_Frame] = [_Frame(Mode.BROKEN, doc)]
    while stack:
        frame = stack.pop()
        mode, node = frame.mode, frame.doc
        if isinstance(node, Span):
            out.append(node.content)
            col += node.width
        elif isinstance(node, Concat):
            for part in reversed(node.parts):
                stack.append(_Frame(mode, part))
        elif isinstance(node, Break):
            if mode is Mode.FLATTENED:
                out.append(" " * node.width)
                col += node.width
            else:
                col = 0
        elif isinstance(node, Prim):
            stack.append(_Frame(mode, node.choose(mode)))
        elif mode is Mode.FLATTENED:
            stack.append(_Frame(Mode.FLATTENED, node.child))
        elif _fits(max_width - col, _Frame(Mode.FLATTENED, node.child), stack):
            stack.append(_Frame(Mode.FLATTENED, node.child))
        else:
            stack.append(_Frame(Mode.BROKEN, node.child))
    return "".join(out)


def _fits(remaining: int, first: _Frame, rest: List[_Frame]) -> bool:
    """Return whether ``first`` and its trailing text fit in ``remaining``.

    The probe walks ``first`` and then the pending frames in render order. It
    stops with success at the first place a line could end: a break in broken
    context, or a prim inside a later group that has not been decided yet.
    """

    if remaining < 0:
        return False
    used = 0
    pending: List[_Frame] = [first]
    index = len(rest)
    while True:
        if not pending:
            index -= 1
            if index < 0:
                return True
            pending.append(rest[index])
        frame = pending.pop()
        mode, node = frame.mode, frame.doc
        if isinstance(node, Span):
            used += node.width
            if used > remaining:
                return False
        elif isinstance(node, Concat):
            for part in reversed(node.parts):
                pending.append(_Frame(mode, part))
        elif isinstance(node, Break):
            if mode is Mode.BROKEN:
                return True
            used += node.width
            if used > remaining:
                return False
        elif isinstance(node, Prim):
            if mode is None:
                return True
            pending.append(_Frame(mode, node.choose(mode)))
        else:
            child_mode = Mode.FLATTENED if mode is Mode.FLATTENED else None
            pending.append(_Frame(child_mode, node.child))


__all__ = [
    "Break",
    "Concat",
    "Doc",
    "Group",
    "Mode",
    "Prim",
    "Span",
    "break_",
    "concat",
    "empty",
    "group",
    "prim",
    "render",
    "span",
]
