"""Base classes shared by every syntax tree node.

Nodes are frozen, slotted dataclasses: they compare by value, hash, and cannot be modified after construction. Each
grammar category (statements, set expressions, scalar expressions, FROM items, ...) has an empty marker base class,
so ``isinstance`` checks and type annotations can name the category while the concrete node types stay a closed set.
"""

# ruff: noqa: D101

from __future__ import annotations

from dataclasses import dataclass


class AstNode:
    """Base class for all syntax tree nodes."""

    __slots__ = ()


class Statement(AstNode):
    __slots__ = ()


class SetExpr(AstNode):
    """The body of a query: a SELECT, a set operation, a VALUES list or a parenthesized query."""

    __slots__ = ()


class Expr(AstNode):
    """A scalar expression."""

    __slots__ = ()


class SelectItem(AstNode):
    __slots__ = ()


class TableFactor(AstNode):
    """A single item of a FROM clause, before any joins."""

    __slots__ = ()


class JoinConstraint(AstNode):
    __slots__ = ()


@dataclass(frozen=True, slots=True)
class Ident(AstNode):
    """An identifier, optionally quoted.

    Attributes:
        value: The identifier as written, without quotes.
        quote_style: The opening quote character (``"``, ``\\``` or ``[``), or ``None`` for a bare identifier.
    """

    value: str
    quote_style: str | None = None


@dataclass(frozen=True, slots=True)
class ObjectName(AstNode):
    """A possibly qualified name such as ``schema.table``."""

    parts: tuple[Ident, ...]


@dataclass(frozen=True, slots=True)
class DataType(AstNode):
    """A type name with optional modifiers, e.g. ``varchar(255)`` or ``numeric(10, 2)``."""

    name: str
    args: tuple[str, ...] = ()
