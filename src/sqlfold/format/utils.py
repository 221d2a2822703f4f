"""Helpers for spelling identifiers, names, types and string literals."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from sqlfold.doc import Doc, verbatim

if TYPE_CHECKING:
    from sqlfold.nodes import DataType, Ident, ObjectName

_CLOSING_QUOTES: Final = {'"': '"', "`": "`", "[": "]"}


def _quote_ident(ident: Ident) -> str:
    """Spell *ident* the way it was written: bare, or re-quoted in its original style.

    An embedded closing quote is doubled.

    Example:
        >>> from sqlfold.nodes import Ident
        >>> _quote_ident(Ident("a]b", quote_style="["))
        '[a]]b]'
        >>> _quote_ident(Ident("Mixed Case", quote_style="`"))
        '`Mixed Case`'
    """
    if ident.quote_style is None:
        return ident.value
    close = _CLOSING_QUOTES[ident.quote_style]
    return f"{ident.quote_style}{ident.value.replace(close, close * 2)}{close}"


def _object_name(name: ObjectName, *, lower: bool = False) -> str:
    """Join the parts of *name* with dots; *lower* lower-cases the bare, non-templated parts."""
    parts: list[str] = []
    for ident in name.parts:
        text = _quote_ident(ident)
        if lower and ident.quote_style is None and "{{" not in text:
            text = text.lower()
        parts.append(text)
    return ".".join(parts)


def _data_type(data_type: DataType) -> str:
    """Lower-cased type name with its modifiers placed before any ``with[out] time zone`` suffix."""
    name = data_type.name.lower()
    if not data_type.args:
        return name
    head, sep, tail = name.partition(" with")
    return f"{head}({', '.join(data_type.args)}){sep}{tail}"


def _string_literal(value: str) -> Doc:
    # Multi-line literals must keep their content byte-for-byte.
    return verbatim("'" + value.replace("'", "''") + "'")
