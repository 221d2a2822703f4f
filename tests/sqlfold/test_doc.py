"""Tests for the document algebra."""

from __future__ import annotations

import pytest

from sqlfold.doc import (
    Concat,
    Group,
    HardLine,
    Line,
    Nest,
    Nil,
    Text,
    Verbatim,
    ZeroLine,
    concat,
    group,
    hard_line,
    interleave,
    line,
    nest,
    nil,
    parenthesize,
    text,
    verbatim,
    zero_line,
)


class TestConstructors:
    def test_text(self):
        assert text("select") == Text("select")

    def test_empty_text_is_nil(self):
        assert text("") == nil()

    def test_text_rejects_newline(self):
        with pytest.raises(ValueError, match="newline"):
            text("a\nb")

    def test_verbatim_accepts_newline(self):
        assert verbatim("'a\nb'") == Verbatim("'a\nb'")

    def test_breaks_are_singletons(self):
        assert line() is line()
        assert zero_line() is zero_line()
        assert hard_line() is hard_line()
        assert nil() is nil()

    def test_break_types(self):
        assert isinstance(line(), Line)
        assert isinstance(zero_line(), ZeroLine)
        assert isinstance(hard_line(), HardLine)
        assert isinstance(nil(), Nil)

    def test_nest(self):
        assert nest(2, text("a")) == Nest(2, Text("a"))

    def test_group(self):
        assert group(text("a")) == Group(Text("a"))

    def test_group_is_idempotent(self):
        g = group(text("a"))
        assert group(g) is g

    def test_group_of_nil(self):
        assert group(nil()) == nil()


class TestConcat:
    def test_flattens_nested_concats(self):
        doc = concat(concat(text("a"), text("b")), text("c"))
        assert doc == Concat((Text("a"), Text("b"), Text("c")))

    def test_drops_nil(self):
        assert concat(nil(), text("a"), nil(), text("b")) == Concat((Text("a"), Text("b")))

    def test_single_child_unwrapped(self):
        assert concat(nil(), text("a")) == Text("a")

    def test_empty_is_nil(self):
        assert concat() == nil()

    def test_plus_operator(self):
        assert text("a") + line() + text("b") == Concat((Text("a"), Line(), Text("b")))

    def test_children_are_shared_not_copied(self):
        shared = group(text("x") + line() + text("y"))
        doc = concat(shared, hard_line(), shared)
        assert isinstance(doc, Concat)
        assert doc.parts[0] is doc.parts[2]


class TestCombinators:
    def test_interleave(self):
        doc = interleave([text("a"), text("b"), text("c")], text(","))
        assert doc == Concat((Text("a"), Text(","), Text("b"), Text(","), Text("c")))

    def test_interleave_single(self):
        assert interleave([text("a")], text(",")) == Text("a")

    def test_interleave_empty(self):
        assert interleave([], text(",")) == nil()

    def test_interleave_accepts_generator(self):
        doc = interleave((text(s) for s in "ab"), line())
        assert doc == Concat((Text("a"), Line(), Text("b")))

    def test_parenthesize_shape(self):
        doc = parenthesize(text("x"))
        assert doc == Group(Concat((Text("("), Nest(2, Concat((ZeroLine(), Text("x")))), ZeroLine(), Text(")"))))

    def test_parenthesize_custom_indent(self):
        doc = parenthesize(text("x"), indent=4)
        assert isinstance(doc, Group)
        assert isinstance(doc.doc, Concat)
        assert doc.doc.parts[1] == Nest(4, Concat((ZeroLine(), Text("x"))))


class TestImmutability:
    def test_frozen(self):
        doc = Text("a")
        with pytest.raises(AttributeError):
            doc.text = "b"  # type: ignore[misc]

    def test_hashable(self):
        assert len({text("a"), text("a"), text("b")}) == 2
