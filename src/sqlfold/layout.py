"""Width-aware rendering of :mod:`sqlfold.doc` documents.

The renderer walks the document with an explicit work list of ``(indent, mode, doc)`` commands. Each group it meets
in break mode gets a fits-check: its content is measured flat, followed by whatever comes after it up to the next
line break that is certain to happen. The check stops as soon as the answer is known, so it never looks further than
the remaining width.

A group that is broken does not force its descendants to break: each nested group runs its own check from the
column where it starts.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, TypeAlias

from sqlfold.doc import Concat, Group, HardLine, Line, Nest, Nil, Text, Verbatim, ZeroLine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlfold.doc import Doc


class Mode(enum.Enum):
    """How the line breaks of the document being processed are rendered."""

    FLAT = "flat"
    BREAK = "break"


_Command: TypeAlias = tuple[int, Mode, "Doc"]


def render(doc: Doc, max_width: int) -> str:
    """Lay out *doc* so that lines stay within *max_width* columns where possible.

    Width is a target, not a guarantee: a single literal longer than the width is still emitted whole.

    Args:
        doc: The document to render.
        max_width: The preferred maximum line width, in characters.

    Returns:
        The rendered text.

    Raises:
        ValueError: If *max_width* is smaller than 1.

    Example:
        >>> from sqlfold.doc import group, line, text
        >>> render(group(text("a") + line() + text("b")), 3)
        'a b'
        >>> render(group(text("a") + line() + text("b")), 2)
        'a\\nb'
    """
    if max_width < 1:
        msg = f"max_width must be at least 1, got {max_width}"
        raise ValueError(msg)
    return _Printer(max_width).run(doc)


class _Printer:
    """Layout state for a single :func:`render` call."""

    __slots__ = ("_column", "_parts", "_pending_indent", "_width")

    def __init__(self, width: int) -> None:
        self._width = width
        self._column = 0
        self._parts: list[str] = []
        # Indentation is written lazily so that blank lines carry no trailing spaces.
        self._pending_indent = 0

    def run(self, doc: Doc) -> str:
        stack: list[_Command] = [(0, Mode.BREAK, doc)]
        while stack:
            indent, mode, node = stack.pop()
            if isinstance(node, Text):
                self._write(node.text)
            elif isinstance(node, Line):
                if mode is Mode.FLAT:
                    self._write(" ")
                else:
                    self._newline(indent)
            elif isinstance(node, ZeroLine):
                if mode is Mode.BREAK:
                    self._newline(indent)
            elif isinstance(node, HardLine):
                self._newline(indent)
            elif isinstance(node, Concat):
                stack.extend((indent, mode, part) for part in reversed(node.parts))
            elif isinstance(node, Nest):
                stack.append((indent + node.indent, mode, node.doc))
            elif isinstance(node, Group):
                if mode is Mode.BREAK and not _fits(self._width - self._column, node.doc, stack):
                    stack.append((indent, Mode.BREAK, node.doc))
                else:
                    stack.append((indent, Mode.FLAT, node.doc))
            elif isinstance(node, Verbatim):
                self._write_verbatim(node.text)
            elif not isinstance(node, Nil):
                msg = f"unknown document node: {type(node).__name__}"
                raise TypeError(msg)
        return "".join(self._parts)

    def _write(self, s: str) -> None:
        if self._pending_indent:
            self._parts.append(" " * self._pending_indent)
            self._pending_indent = 0
        self._parts.append(s)
        self._column += len(s)

    def _write_verbatim(self, s: str) -> None:
        first, *rest = s.split("\n")
        self._write(first)
        for segment in rest:
            self._parts.append("\n")
            self._parts.append(segment)
            self._column = len(segment)

    def _newline(self, indent: int) -> None:
        self._parts.append("\n")
        self._pending_indent = indent
        self._column = indent


def _fits(remaining: int, content: Doc, rest: Sequence[_Command]) -> bool:
    """Return whether *content*, laid out flat, fits in *remaining* columns.

    The measurement continues into *rest* (the pending work list, innermost command last) until a line break that
    will certainly be rendered: a broken ``line``/``zero_line`` or a ``hard_line``. A ``hard_line`` inside *content*
    itself means the content cannot be flat, so the answer is no.
    """
    if remaining < 0:
        return False
    pending: list[tuple[Mode, Doc]] = [(Mode.FLAT, content)]
    rest_index = len(rest)
    in_rest = False
    while True:
        if not pending:
            if rest_index == 0:
                return True
            rest_index -= 1
            _indent, rest_mode, rest_doc = rest[rest_index]
            pending.append((rest_mode, rest_doc))
            in_rest = True
        mode, node = pending.pop()
        if isinstance(node, Text):
            remaining -= len(node.text)
            if remaining < 0:
                return False
        elif isinstance(node, Line):
            if mode is Mode.BREAK:
                return True
            remaining -= 1
            if remaining < 0:
                return False
        elif isinstance(node, ZeroLine):
            if mode is Mode.BREAK:
                return True
        elif isinstance(node, HardLine):
            return in_rest
        elif isinstance(node, Concat):
            pending.extend((mode, part) for part in reversed(node.parts))
        elif isinstance(node, (Nest, Group)):
            pending.append((mode, node.doc))
        elif isinstance(node, Verbatim):
            first, newline, _ = node.text.partition("\n")
            remaining -= len(first)
            if remaining < 0:
                return False
            if newline:
                return in_rest
