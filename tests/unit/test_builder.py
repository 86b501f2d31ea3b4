"""Unit tests for :mod:`mailhdr.builder`.

What:
  Cover the builder monoid, the seam constructors, the list combinators and
  rendering under different :class:`RenderOptions`.

Why:
  Formatters describe fields purely in terms of these combinators, so their
  flatten-or-fold behaviour and their handling of indentation define what
  every rendered header looks like.

How:
  Compose small builders from literal text and compare ``render`` output for
  chosen widths and indents.
"""
from __future__ import annotations

import pytest

from mailhdr import builder
from mailhdr.builder import Builder, comma_sep, punctuate, sep, soft_join, text
from mailhdr.config.schema import RenderOptions

WIDE = RenderOptions(max_width=78, indent=1)


def _opts(width: int, indent: int = 1) -> RenderOptions:
    return RenderOptions(max_width=width, indent=indent)


def test_empty_is_the_identity() -> None:
    value = text("abc")
    assert Builder.empty() + value == value
    assert value + Builder.empty() == value
    assert Builder.empty().render(WIDE) == ""


def test_concatenation_is_associative() -> None:
    a, b, c = text("a"), text("b"), text("c")
    assert (a + b) + c == a + (b + c)
    assert ((a + b) + c).render(WIDE) == "abc"


def test_strings_concatenate_as_literals() -> None:
    assert ("<" + text("x") + ">").render(WIDE) == "<x>"


def test_adding_unsupported_types_raises() -> None:
    with pytest.raises(TypeError):
        text("a") + 1  # type: ignore[operator]


def test_literal_of_empty_string_is_empty() -> None:
    assert builder.literal("") == Builder.empty()


def test_integer_renders_decimal() -> None:
    assert builder.integer(42).render(WIDE) == "42"


def test_sep_flattens_when_it_fits() -> None:
    assert sep([text("a"), text("b"), text("c")]).render(WIDE) == "a b c"


def test_sep_folds_every_seam_together() -> None:
    assert sep([text("a"), text("b"), text("c")]).render(_opts(3)) == "a\r\n b\r\n c"


def test_indent_is_applied_verbatim_at_every_fold() -> None:
    """Continuation lines start with exactly ``indent`` spaces, never tabs."""

    rendered = sep([text("a"), text("b")]).render(_opts(1, indent=3))
    assert rendered == "a\r\n   b"
    assert "\t" not in rendered


def test_zero_indent_is_allowed() -> None:
    assert sep([text("aa"), text("bb")]).render(_opts(3, indent=0)) == "aa\r\nbb"


def test_softlines_decide_independently() -> None:
    """Each softline folds only when the text after it would overflow.

    What:
      Three words joined by two independent softlines.

    Why:
      Greedy filling keeps as much as possible on the first line instead of
      folding every seam once one of them has to fold.

    How:
      At width 8 the second word still fits after the first, the third does
      not.
    """

    value = text("aaa") + builder.softline() + text("bbb") + builder.softline() + text("ccc")
    assert value.render(_opts(8)) == "aaa bbb\r\n ccc"
    assert value.render(_opts(11)) == "aaa bbb ccc"


def test_linebreak_is_empty_when_flattened() -> None:
    value = builder.group(text("ab") + builder.linebreak() + text("cd"))
    assert value.render(_opts(10)) == "abcd"
    assert value.render(_opts(3)) == "ab\r\n cd"


def test_softbreak_folds_without_a_space() -> None:
    value = text("abc") + builder.softbreak() + text("def")
    assert value.render(_opts(6)) == "abcdef"
    assert value.render(_opts(5)) == "abc\r\n def"


def test_soft_join_inserts_a_foldable_space() -> None:
    value = soft_join(text("left"), text("right"))
    assert value.render(WIDE) == "left right"
    assert value.render(_opts(8)) == "left\r\n right"


def test_start_column_is_respected() -> None:
    value = sep([text("abc"), text("def")])
    assert value.render(_opts(10), column=3) == "abc def"
    assert value.render(_opts(10), column=4) == "abc\r\n def"


def test_punctuate_skips_the_last_item() -> None:
    items = punctuate(",", [text("a"), text("b"), text("c")])
    assert [item.render(WIDE) for item in items] == ["a,", "b,", "c"]


def test_punctuate_handles_short_lists() -> None:
    assert punctuate(",", []) == []
    assert [item.render(WIDE) for item in punctuate(text(";"), [text("a")])] == ["a"]


@pytest.mark.parametrize(
    "items, expected",
    [
        ([], ""),
        (["x"], "x"),
        (["x", "y", "z"], "x, y, z"),
    ],
)
def test_comma_sep_renders_lists(items, expected) -> None:
    assert comma_sep(text, items).render(WIDE) == expected


def test_comma_sep_folds_after_commas() -> None:
    assert comma_sep(text, ["x", "y", "z"]).render(_opts(4)) == "x,\r\n y,\r\n z"


def test_layout_depends_on_options_only_at_render_time() -> None:
    """One builder renders differently under different options."""

    value = sep([text("alpha"), text("beta")])
    assert value.render(_opts(78)) == "alpha beta"
    assert value.render(_opts(6, indent=2)) == "alpha\r\n  beta"


def test_from_bytes_preserves_undecodable_bytes() -> None:
    value = builder.from_bytes(b"caf\xe9")
    assert value.to_bytes(WIDE) == b"caf\xe9"


def test_to_bytes_encodes_utf8() -> None:
    assert text("café").to_bytes(WIDE) == "café".encode("utf-8")
