"""Scalar expression nodes."""

# ruff: noqa: D101

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlfold.nodes.base import AstNode, Expr, SelectItem

if TYPE_CHECKING:
    from sqlfold.nodes.base import DataType, Ident, ObjectName
    from sqlfold.nodes.query import OrderByExpr, Query


class BinaryOperator(enum.Enum):
    """Binary operators; each value is the operator's rendered spelling."""

    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    STRING_CONCAT = "||"
    BITWISE_AND = "&"
    BITWISE_OR = "|"
    BITWISE_XOR = "^"
    EQ = "="
    NOT_EQ = "<>"
    LT = "<"
    GT = ">"
    LT_EQ = "<="
    GT_EQ = ">="
    AND = "and"
    OR = "or"
    LIKE = "like"
    NOT_LIKE = "not like"
    ILIKE = "ilike"
    NOT_ILIKE = "not ilike"


class UnaryOperator(enum.Enum):
    PLUS = "+"
    MINUS = "-"
    NOT = "not"


class WindowFrameUnits(enum.Enum):
    ROWS = "rows"
    RANGE = "range"
    GROUPS = "groups"


# -- Names -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Identifier(Expr):
    ident: Ident


@dataclass(frozen=True, slots=True)
class CompoundIdentifier(Expr):
    """A dotted column reference such as ``t.id``."""

    parts: tuple[Ident, ...]


@dataclass(frozen=True, slots=True)
class Wildcard(Expr, SelectItem):
    """A bare ``*``, in a projection or as the argument of ``count(*)``."""


@dataclass(frozen=True, slots=True)
class QualifiedWildcard(Expr, SelectItem):
    """``t.*``."""

    name: ObjectName


# -- Literals ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Number(Expr):
    """A numeric literal kept as written (``42``, ``-1.5``, ``1e10``)."""

    value: str


@dataclass(frozen=True, slots=True)
class StringLiteral(Expr):
    """A single-quoted string; ``value`` is unescaped."""

    value: str


@dataclass(frozen=True, slots=True)
class Boolean(Expr):
    value: bool


@dataclass(frozen=True, slots=True)
class Null(Expr):
    pass


@dataclass(frozen=True, slots=True)
class Placeholder(Expr):
    """A bind parameter such as ``?``, ``$1`` or ``:name``."""

    value: str


@dataclass(frozen=True, slots=True)
class TypedString(Expr):
    """A literal prefixed by its type, e.g. ``DATE '2020-01-01'``."""

    data_type: DataType
    value: str


# -- Operators ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    op: UnaryOperator
    expr: Expr


@dataclass(frozen=True, slots=True)
class BinaryOp(Expr):
    left: Expr
    op: BinaryOperator
    right: Expr


@dataclass(frozen=True, slots=True)
class Cast(Expr):
    expr: Expr
    data_type: DataType


@dataclass(frozen=True, slots=True)
class Extract(Expr):
    field: str
    expr: Expr


@dataclass(frozen=True, slots=True)
class Collate(Expr):
    expr: Expr
    collation: ObjectName


@dataclass(frozen=True, slots=True)
class Nested(Expr):
    """An expression written in parentheses."""

    expr: Expr


@dataclass(frozen=True, slots=True)
class Between(Expr):
    expr: Expr
    negated: bool
    low: Expr
    high: Expr


@dataclass(frozen=True, slots=True)
class Case(Expr):
    """``CASE [operand] WHEN c THEN r ... [ELSE e] END``; ``conditions`` and ``results`` pair up by index."""

    operand: Expr | None
    conditions: tuple[Expr, ...]
    results: tuple[Expr, ...]
    else_result: Expr | None = None


@dataclass(frozen=True, slots=True)
class IsNull(Expr):
    expr: Expr


@dataclass(frozen=True, slots=True)
class IsNotNull(Expr):
    expr: Expr


# -- Subqueries and lists ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class InList(Expr):
    expr: Expr
    items: tuple[Expr, ...]
    negated: bool = False


@dataclass(frozen=True, slots=True)
class InSubquery(Expr):
    expr: Expr
    subquery: Query
    negated: bool = False


@dataclass(frozen=True, slots=True)
class Exists(Expr):
    subquery: Query


@dataclass(frozen=True, slots=True)
class Subquery(Expr):
    """A parenthesized query used as a scalar value."""

    query: Query


# -- Function calls ----------------------------------------------------------


class WindowFrameBound(AstNode):
    __slots__ = ()


@dataclass(frozen=True, slots=True)
class CurrentRow(WindowFrameBound):
    pass


@dataclass(frozen=True, slots=True)
class Preceding(WindowFrameBound):
    """``<offset> PRECEDING``; no offset means ``UNBOUNDED PRECEDING``."""

    offset: Expr | None = None


@dataclass(frozen=True, slots=True)
class Following(WindowFrameBound):
    """``<offset> FOLLOWING``; no offset means ``UNBOUNDED FOLLOWING``."""

    offset: Expr | None = None


@dataclass(frozen=True, slots=True)
class WindowFrame(AstNode):
    units: WindowFrameUnits
    start_bound: WindowFrameBound
    end_bound: WindowFrameBound | None = None


@dataclass(frozen=True, slots=True)
class WindowSpec(AstNode):
    """The parenthesized part of ``OVER (...)``."""

    partition_by: tuple[Expr, ...] = ()
    order_by: tuple[OrderByExpr, ...] = ()
    window_frame: WindowFrame | None = None


@dataclass(frozen=True, slots=True)
class Function(Expr):
    name: ObjectName
    args: tuple[Expr, ...] = ()
    over: WindowSpec | None = None
    distinct: bool = False


class ListAggOnOverflow(AstNode):
    __slots__ = ()


@dataclass(frozen=True, slots=True)
class OnOverflowError(ListAggOnOverflow):
    """``ON OVERFLOW ERROR``."""


@dataclass(frozen=True, slots=True)
class OnOverflowTruncate(ListAggOnOverflow):
    """``ON OVERFLOW TRUNCATE [filler] WITH|WITHOUT COUNT``."""

    filler: Expr | None = None
    with_count: bool = False


@dataclass(frozen=True, slots=True)
class ListAgg(Expr):
    """``LISTAGG([DISTINCT] expr [, separator] [ON OVERFLOW ...]) [WITHIN GROUP (ORDER BY ...)]``."""

    expr: Expr
    distinct: bool = False
    separator: Expr | None = None
    on_overflow: ListAggOnOverflow | None = None
    within_group: tuple[OrderByExpr, ...] = ()
