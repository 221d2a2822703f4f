from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sqlfold import UnsupportedConstructError, Visitor, parse
from sqlfold.nodes import AstNode, BinaryOp, Ident, Identifier, Query, Select, UnnamedExpr

if TYPE_CHECKING:
    from sqlfold.nodes import Expr


class _ColumnCounter(Visitor):
    def visit_Query(self, node: Query) -> int:
        return self.visit(node.body)

    def visit_Select(self, node: Select) -> int:
        return len(node.projection)


class _IdentifierCollector(Visitor):
    """Collects bare identifier names from a projection, left to right."""

    def __init__(self) -> None:
        self.names: list[str] = []

    def visit_Select(self, node: Select) -> None:
        for item in node.projection:
            self.visit(item)

    def visit_UnnamedExpr(self, node: UnnamedExpr) -> None:
        self.visit(node.expr)

    def visit_BinaryOp(self, node: BinaryOp) -> None:
        self.visit(node.left)
        self.visit(node.right)

    def visit_Identifier(self, node: Identifier) -> None:
        self.names.append(node.ident.value)

    def generic_visit(self, node: AstNode) -> None:
        pass


class TestVisitor:
    def test_dispatch_by_class_name(self, users_tree: Query):
        assert _ColumnCounter().visit(users_tree) == 1

    def test_return_value(self):
        (statement,) = parse("SELECT a, b, c FROM t")
        assert _ColumnCounter().visit(statement) == 3

    def test_unhandled_node_raises(self, select1_tree: Query):
        body = select1_tree.body
        assert isinstance(body, Select)
        with pytest.raises(UnsupportedConstructError) as exc_info:
            _ColumnCounter().visit(body.projection[0])
        assert exc_info.value.construct == "UnnamedExpr"

    def test_generic_visit_override(self):
        (statement,) = parse("SELECT a + b, 1, c * 2 FROM t")
        assert isinstance(statement, Query)
        collector = _IdentifierCollector()
        collector.visit(statement.body)
        assert collector.names == ["a", "b", "c"]

    def test_subclass_dispatch_uses_exact_type(self):
        class ExprOnly(Visitor):
            def visit_Expr(self, node: Expr) -> str:
                return "expr"

        with pytest.raises(UnsupportedConstructError):
            ExprOnly().visit(Identifier(Ident("x")))
