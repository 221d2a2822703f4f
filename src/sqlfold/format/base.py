"""Document builder base class with layout helpers shared by the expression and query mixins."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlfold.doc import Doc, group, interleave, line, nest, parenthesize, text
from sqlfold.format.constants import INDENT
from sqlfold.precedence import Side, needs_parens
from sqlfold.walk import Visitor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlfold.nodes import AstNode, Expr, Query


class _DocBuilderBase(Visitor):
    """Syntax tree visitor whose ``visit_*`` methods return documents.

    The builder holds no state: every method is a pure function of the node it is given, so one instance can render
    any number of statements.
    """

    # ── Entry points ──────────────────────────────────────────────

    def expr_doc(self, expr: Expr) -> Doc:
        """Return the document for a scalar expression."""
        doc: Doc = self.visit(expr)
        return doc

    def query_doc(self, query: Query) -> Doc:
        """Return the document for a complete query, CTEs and trailing clauses included."""
        doc: Doc = self.visit(query)
        return doc

    # ── Layout helpers ────────────────────────────────────────────

    def _comma_list(self, nodes: Iterable[AstNode]) -> Doc:
        """Visit *nodes* and separate them with ``,`` and a soft line."""
        return interleave((self.visit(node) for node in nodes), text(",") + line())

    def _clause(self, keyword: str, body: Doc) -> Doc:
        """Return ``keyword`` on a new line with *body* nested below it.

        The line before the keyword and the line after it belong to the enclosing group; *body* forms its own group.
        """
        return line() + text(keyword) + nest(INDENT, line() + group(body))

    def _operand(self, parent: AstNode, child: Expr, side: Side | None = None) -> Doc:
        """Return the document for *child* as an operand of *parent*, parenthesized if it binds too loosely."""
        doc = self.expr_doc(child)
        if needs_parens(parent, child, side=side):
            return parenthesize(doc, INDENT)
        return doc

    def _parenthesized_query(self, query: Query) -> Doc:
        return parenthesize(self.query_doc(query), INDENT)
