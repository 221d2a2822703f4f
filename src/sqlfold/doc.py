"""Document algebra for width-aware layout.

A document describes the *possible* layouts of a piece of text without committing to a line width: literal text,
line breaks that collapse to a space (``line``) or to nothing (``zero_line``) when their group fits, breaks that never
collapse (``hard_line``), indentation (``nest``) and the unit of the fit decision (``group``). The
:func:`sqlfold.layout.render` function turns a document into a string for a given width.

Documents are immutable. Any sub-document may be shared between several parents, and building a document never
mutates its children.

Example:
    >>> from sqlfold.doc import group, line, nest, text
    >>> from sqlfold.layout import render
    >>> doc = group(text("select") + nest(2, line() + text("a,") + line() + text("b")))
    >>> render(doc, 80)
    'select a, b'
    >>> print(render(doc, 8))
    select
      a,
      b
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable


class Doc:
    """Base class for all document variants.

    ``a + b`` is shorthand for ``concat(a, b)``.
    """

    __slots__ = ()

    def __add__(self, other: Doc) -> Doc:
        return concat(self, other)


@dataclass(frozen=True, slots=True)
class Nil(Doc):
    """The empty document."""


@dataclass(frozen=True, slots=True)
class Text(Doc):
    """A literal with no newlines; its width is its character count."""

    text: str


@dataclass(frozen=True, slots=True)
class Verbatim(Doc):
    """A literal that may span several lines.

    Embedded newlines are written as-is, without indentation, so the literal's content survives layout unchanged.
    """

    text: str


@dataclass(frozen=True, slots=True)
class Line(Doc):
    """A space when flat, a newline plus indentation when broken."""


@dataclass(frozen=True, slots=True)
class ZeroLine(Doc):
    """Nothing when flat, a newline plus indentation when broken."""


@dataclass(frozen=True, slots=True)
class HardLine(Doc):
    """A newline plus indentation in every mode."""


@dataclass(frozen=True, slots=True)
class Concat(Doc):
    """Children laid out one after another."""

    parts: tuple[Doc, ...]


@dataclass(frozen=True, slots=True)
class Nest(Doc):
    """Adds ``indent`` columns to the indentation of every line break inside ``doc``."""

    indent: int
    doc: Doc


@dataclass(frozen=True, slots=True)
class Group(Doc):
    """Rendered flat when it fits the remaining width, broken otherwise."""

    doc: Doc


_NIL: Final = Nil()
_LINE: Final = Line()
_ZERO_LINE: Final = ZeroLine()
_HARD_LINE: Final = HardLine()


def nil() -> Doc:
    """Return the empty document."""
    return _NIL


def line() -> Doc:
    """Return a break that renders as a single space when its group is flat."""
    return _LINE


def zero_line() -> Doc:
    """Return a break that renders as nothing when its group is flat."""
    return _ZERO_LINE


def hard_line() -> Doc:
    """Return a break that is always rendered, and that keeps every enclosing group from flattening."""
    return _HARD_LINE


def text(s: str) -> Doc:
    """Return a literal document.

    Args:
        s: The literal. It must not contain a newline; use :func:`verbatim` for multi-line literals.

    Raises:
        ValueError: If *s* contains a newline.
    """
    if "\n" in s:
        msg = f"text() does not accept newlines: {s!r}"
        raise ValueError(msg)
    if not s:
        return _NIL
    return Text(s)


def verbatim(s: str) -> Doc:
    """Return a literal that may contain newlines, which are emitted as-is."""
    if "\n" not in s:
        return text(s)
    return Verbatim(s)


def concat(*docs: Doc) -> Doc:
    """Return the documents laid out one after another.

    Nested concatenations are flattened and empty documents dropped, so building long chains stays shallow.
    """
    parts: list[Doc] = []
    for doc in docs:
        if isinstance(doc, Concat):
            parts.extend(doc.parts)
        elif not isinstance(doc, Nil):
            parts.append(doc)
    if not parts:
        return _NIL
    if len(parts) == 1:
        return parts[0]
    return Concat(tuple(parts))


def nest(indent: int, doc: Doc) -> Doc:
    """Return *doc* with every line break inside it indented by *indent* more columns."""
    if isinstance(doc, Nil):
        return doc
    return Nest(indent, doc)


def group(doc: Doc) -> Doc:
    """Return *doc* as a unit that is rendered flat if it fits, else broken."""
    if isinstance(doc, (Nil, Group)):
        return doc
    return Group(doc)


def interleave(docs: Iterable[Doc], separator: Doc) -> Doc:
    """Return *docs* concatenated with *separator* between each adjacent pair."""
    parts: list[Doc] = []
    for i, doc in enumerate(docs):
        if i > 0:
            parts.append(separator)
        parts.append(doc)
    return concat(*parts)


def parenthesize(doc: Doc, indent: int = 2) -> Doc:
    """Return *doc* in parentheses, either inline or with the content on its own indented lines.

    Example:
        >>> from sqlfold.layout import render
        >>> items = interleave([text("1"), text("2")], text(",") + line())
        >>> render(parenthesize(items), 80)
        '(1, 2)'
        >>> print(render(parenthesize(items), 4))
        (
          1,
          2
        )
    """
    return group(text("(") + nest(indent, zero_line() + doc) + zero_line() + text(")"))
