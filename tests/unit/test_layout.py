"""Unit tests for :mod:`mailhdr.layout`.

What:
  Exercise the layout primitives and the renderer directly: flattening,
  folding, break widths, the starting column and the lookahead that stops at
  undecided groups.

Why:
  Every header formatter relies on this engine for its fold decisions; a
  regression here silently changes the output of every field.

How:
  Build small documents by hand, with a helper that mirrors the seams the
  builder produces, and compare rendered strings exactly.
"""
from __future__ import annotations

from mailhdr import layout
from mailhdr.layout import Mode, break_, concat, group, prim, render, span


def _line(indent: int = 1) -> layout.Doc:
    """A seam: one space when flattened, CRLF plus indent when broken."""

    newline = concat(span(0, "\r\n"), break_(0), span(indent, " " * indent))
    return prim(lambda mode: span(1, " ") if mode is Mode.FLATTENED else newline)


def _words(*words: str) -> layout.Doc:
    parts = []
    for word in words:
        if parts:
            parts.append(_line())
        parts.append(span(len(word), word))
    return group(concat(*parts))


def test_spans_render_in_order() -> None:
    assert render(concat(span(3, "abc"), span(2, "de")), 10) == "abcde"


def test_empty_renders_nothing() -> None:
    assert render(layout.empty(), 10) == ""
    assert render(concat(layout.empty(), span(1, "a"), layout.empty()), 10) == "a"


def test_concat_splices_nested_concatenations() -> None:
    nested = concat(span(1, "a"), concat(span(1, "b"), span(1, "c")))
    assert nested == layout.Concat((span(1, "a"), span(1, "b"), span(1, "c")))


def test_group_flattens_when_it_fits_exactly() -> None:
    """A group whose flattened width equals the budget stays on one line."""

    assert render(_words("abc", "def"), 7) == "abc def"


def test_group_breaks_when_one_column_over() -> None:
    assert render(_words("abc", "def"), 6) == "abc\r\n def"


def test_group_fold_decision_is_shared_by_all_seams() -> None:
    assert render(_words("a", "b", "c"), 4) == "a\r\n b\r\n c"


def test_oversized_span_is_emitted_whole() -> None:
    """A span wider than the budget overflows rather than being cut."""

    doc = _words("short", "x" * 20)
    assert render(doc, 10) == "short\r\n " + "x" * 20


def test_flattened_break_occupies_its_width() -> None:
    assert render(group(concat(span(1, "a"), break_(2), span(1, "b"))), 10) == "a  b"


def test_broken_break_resets_the_column() -> None:
    """After a break in broken context the next group sees a fresh line."""

    doc = concat(span(5, "aaaaa"), break_(0), _words("b", "c"))
    assert render(doc, 5) == "aaaaab c"


def test_start_column_counts_against_the_budget() -> None:
    assert render(_words("abc", "def"), 10, column=3) == "abc def"
    assert render(_words("abc", "def"), 10, column=4) == "abc\r\n def"


def test_probe_includes_text_up_to_the_next_seam() -> None:
    """A group only flattens if the text glued to its end also fits.

    What:
      Renders a group followed directly by a trailing span.

    Why:
      Flattening ``a b`` is pointless if the ``;`` that follows it pushes the
      line over the budget.

    How:
      Two renders at widths either side of the combined length.
    """

    doc = concat(_words("a", "b"), span(5, ";;;;;"))
    assert render(doc, 8) == "a b;;;;;"
    assert render(doc, 7) == "a\r\n b;;;;;"


def test_probe_stops_at_an_undecided_later_group() -> None:
    """Later groups get their own decision instead of forcing this one to fold."""

    doc = concat(_words("one", "two"), group(_line()), span(10, "x" * 10))
    assert render(doc, 12) == "one two\r\n " + "x" * 10


def test_prim_sees_the_mode_of_its_group() -> None:
    seen = []

    def choose(mode: Mode) -> layout.Doc:
        seen.append(mode)
        return span(1, "f" if mode is Mode.FLATTENED else "b")

    render(group(prim(choose)), 10)
    render(group(concat(prim(choose), span(20, "y" * 20))), 10)
    assert Mode.FLATTENED in seen and Mode.BROKEN in seen
