"""Statement, query and FROM-clause nodes."""

# ruff: noqa: D101

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlfold.nodes.base import AstNode, JoinConstraint, SelectItem, SetExpr, Statement, TableFactor

if TYPE_CHECKING:
    from sqlfold.nodes.base import Expr, Ident, ObjectName


class SetOperator(enum.Enum):
    UNION = "union"
    INTERSECT = "intersect"
    EXCEPT = "except"


class JoinOperator(enum.Enum):
    """Join kinds; each value is the rendered keyword sequence."""

    INNER = "join"
    LEFT_OUTER = "left join"
    RIGHT_OUTER = "right join"
    FULL_OUTER = "full join"
    CROSS = "cross join"
    CROSS_APPLY = "cross apply"
    OUTER_APPLY = "outer apply"


class OffsetRows(enum.Enum):
    """The optional noise word after ``OFFSET n``."""

    NONE = ""
    ROW = "row"
    ROWS = "rows"


# -- Statements --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawStatement(Statement):
    """A statement outside the query grammar, kept only so that it can be reported.

    Attributes:
        kind: The leading keyword, lower-cased (``"insert"``, ``"create"``, ...).
        sql: The statement's source text.
    """

    kind: str
    sql: str


@dataclass(frozen=True, slots=True)
class TableAlias(AstNode):
    name: Ident
    columns: tuple[Ident, ...] = ()


@dataclass(frozen=True, slots=True)
class Cte(AstNode):
    """One ``alias AS (query)`` entry of a WITH clause."""

    alias: TableAlias
    query: Query


@dataclass(frozen=True, slots=True)
class OrderByExpr(AstNode):
    """An ORDER BY item; ``None`` for ``asc``/``nulls_first`` means the keyword was not written."""

    expr: Expr
    asc: bool | None = None
    nulls_first: bool | None = None


@dataclass(frozen=True, slots=True)
class Offset(AstNode):
    value: Expr
    rows: OffsetRows = OffsetRows.NONE


@dataclass(frozen=True, slots=True)
class Fetch(AstNode):
    """``FETCH FIRST [quantity [PERCENT]] ROWS ONLY|WITH TIES``."""

    quantity: Expr | None = None
    percent: bool = False
    with_ties: bool = False


@dataclass(frozen=True, slots=True)
class Top(AstNode):
    """``TOP (quantity) [PERCENT] [WITH TIES]``."""

    quantity: Expr | None = None
    percent: bool = False
    with_ties: bool = False


@dataclass(frozen=True, slots=True)
class Query(Statement, SetExpr):
    """A complete query: optional CTEs, a body, then ORDER BY / LIMIT / OFFSET / FETCH.

    A ``Query`` is also a :class:`SetExpr`; in that position it stands for a parenthesized query.
    """

    body: SetExpr
    ctes: tuple[Cte, ...] = ()
    recursive: bool = False
    order_by: tuple[OrderByExpr, ...] = ()
    limit: Expr | None = None
    offset: Offset | None = None
    fetch: Fetch | None = None


# -- Query bodies ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UnnamedExpr(SelectItem):
    expr: Expr


@dataclass(frozen=True, slots=True)
class ExprWithAlias(SelectItem):
    expr: Expr
    alias: Ident


@dataclass(frozen=True, slots=True)
class Select(SetExpr):
    projection: tuple[SelectItem, ...]
    from_: tuple[TableWithJoins, ...] = ()
    selection: Expr | None = None
    group_by: tuple[Expr, ...] = ()
    having: Expr | None = None
    distinct: bool = False
    top: Top | None = None


@dataclass(frozen=True, slots=True)
class SetOperation(SetExpr):
    left: SetExpr
    op: SetOperator
    right: SetExpr
    all: bool = False


@dataclass(frozen=True, slots=True)
class Values(SetExpr):
    rows: tuple[tuple[Expr, ...], ...]


# -- FROM items --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Table(TableFactor):
    """A named table, optionally a table-valued function call (``args``) or with table hints."""

    name: ObjectName
    alias: TableAlias | None = None
    args: tuple[Expr, ...] = ()
    with_hints: tuple[Expr, ...] = ()


@dataclass(frozen=True, slots=True)
class Derived(TableFactor):
    """A subquery in FROM."""

    subquery: Query
    lateral: bool = False
    alias: TableAlias | None = None


@dataclass(frozen=True, slots=True)
class NestedJoin(TableFactor):
    """A parenthesized join, e.g. ``(a JOIN b ON ...)``."""

    table: TableWithJoins


@dataclass(frozen=True, slots=True)
class OnConstraint(JoinConstraint):
    expr: Expr


@dataclass(frozen=True, slots=True)
class UsingConstraint(JoinConstraint):
    columns: tuple[Ident, ...]


@dataclass(frozen=True, slots=True)
class NaturalConstraint(JoinConstraint):
    pass


@dataclass(frozen=True, slots=True)
class NoConstraint(JoinConstraint):
    pass


@dataclass(frozen=True, slots=True)
class Join(AstNode):
    relation: TableFactor
    operator: JoinOperator = JoinOperator.INNER
    constraint: JoinConstraint = NoConstraint()


@dataclass(frozen=True, slots=True)
class TableWithJoins(AstNode):
    relation: TableFactor
    joins: tuple[Join, ...] = ()
