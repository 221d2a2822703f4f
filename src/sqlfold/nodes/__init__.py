"""Syntax tree produced by :func:`sqlfold.parse` and consumed by :func:`sqlfold.render`."""

from sqlfold.nodes.base import (
    AstNode,
    DataType,
    Expr,
    Ident,
    JoinConstraint,
    ObjectName,
    SelectItem,
    SetExpr,
    Statement,
    TableFactor,
)
from sqlfold.nodes.expressions import (
    Between,
    BinaryOp,
    BinaryOperator,
    Boolean,
    Case,
    Cast,
    Collate,
    CompoundIdentifier,
    CurrentRow,
    Exists,
    Extract,
    Following,
    Function,
    Identifier,
    InList,
    InSubquery,
    IsNotNull,
    IsNull,
    ListAgg,
    ListAggOnOverflow,
    Nested,
    Null,
    Number,
    OnOverflowError,
    OnOverflowTruncate,
    Placeholder,
    Preceding,
    QualifiedWildcard,
    StringLiteral,
    Subquery,
    TypedString,
    UnaryOp,
    UnaryOperator,
    Wildcard,
    WindowFrame,
    WindowFrameBound,
    WindowFrameUnits,
    WindowSpec,
)
from sqlfold.nodes.query import (
    Cte,
    Derived,
    ExprWithAlias,
    Fetch,
    Join,
    JoinOperator,
    NaturalConstraint,
    NestedJoin,
    NoConstraint,
    Offset,
    OffsetRows,
    OnConstraint,
    OrderByExpr,
    Query,
    RawStatement,
    Select,
    SetOperation,
    SetOperator,
    Table,
    TableAlias,
    TableWithJoins,
    Top,
    UnnamedExpr,
    UsingConstraint,
    Values,
)

__all__ = [
    "AstNode",
    "Between",
    "BinaryOp",
    "BinaryOperator",
    "Boolean",
    "Case",
    "Cast",
    "Collate",
    "CompoundIdentifier",
    "Cte",
    "CurrentRow",
    "DataType",
    "Derived",
    "Exists",
    "Expr",
    "ExprWithAlias",
    "Extract",
    "Fetch",
    "Following",
    "Function",
    "Ident",
    "Identifier",
    "InList",
    "InSubquery",
    "IsNotNull",
    "IsNull",
    "Join",
    "JoinConstraint",
    "JoinOperator",
    "ListAgg",
    "ListAggOnOverflow",
    "NaturalConstraint",
    "Nested",
    "NestedJoin",
    "NoConstraint",
    "Null",
    "Number",
    "ObjectName",
    "Offset",
    "OffsetRows",
    "OnConstraint",
    "OnOverflowError",
    "OnOverflowTruncate",
    "OrderByExpr",
    "Placeholder",
    "Preceding",
    "QualifiedWildcard",
    "Query",
    "RawStatement",
    "Select",
    "SelectItem",
    "SetExpr",
    "SetOperation",
    "SetOperator",
    "Statement",
    "StringLiteral",
    "Subquery",
    "Table",
    "TableAlias",
    "TableFactor",
    "TableWithJoins",
    "Top",
    "TypedString",
    "UnaryOp",
    "UnaryOperator",
    "UnnamedExpr",
    "UsingConstraint",
    "Values",
    "Wildcard",
    "WindowFrame",
    "WindowFrameBound",
    "WindowFrameUnits",
    "WindowSpec",
]
