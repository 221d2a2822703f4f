"""Query, SELECT and FROM-clause visitor methods for the document builder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlfold.doc import Doc, concat, group, hard_line, interleave, line, nest, nil, parenthesize, text, verbatim
from sqlfold.errors import UnsupportedStatementError
from sqlfold.format.base import _DocBuilderBase  # pyright: ignore[reportPrivateUsage]
from sqlfold.format.constants import INDENT
from sqlfold.format.utils import _object_name, _quote_ident  # pyright: ignore[reportPrivateUsage]
from sqlfold.nodes import Identifier, NaturalConstraint, OffsetRows, Query
from sqlfold.precedence import Side, needs_parens

if TYPE_CHECKING:
    from sqlfold.nodes import (
        Cte,
        Derived,
        Expr,
        ExprWithAlias,
        Fetch,
        Join,
        NestedJoin,
        NoConstraint,
        Offset,
        OnConstraint,
        RawStatement,
        Select,
        SetExpr,
        SetOperation,
        Table,
        TableAlias,
        TableFactor,
        TableWithJoins,
        Top,
        UnnamedExpr,
        UsingConstraint,
        Values,
    )


class _QueryMixin(_DocBuilderBase):
    """Mixin providing query, SELECT and FROM-clause visitor methods."""

    # ── Statements ────────────────────────────────────────────────

    def visit_RawStatement(self, node: RawStatement) -> Doc:
        raise UnsupportedStatementError(node.kind)

    def visit_Query(self, node: Query) -> Doc:
        """Render a query: the CTE block, a blank line, then the body and its trailing clauses.

        The body and the ORDER BY / LIMIT / OFFSET / FETCH clauses share one group, so the trailing clauses stay on
        the body's line when everything fits. Each clause's content is grouped on its own.
        """
        parts = [self.body_doc(node.body)]
        if node.order_by:
            parts.append(self._clause("order by", self._comma_list(node.order_by)))
        if node.limit is not None:
            parts.append(self._clause("limit", self.expr_doc(node.limit)))
        if node.offset is not None:
            parts.append(line() + self.visit(node.offset))
        if node.fetch is not None:
            parts.append(line() + self.visit(node.fetch))
        doc = group(concat(*parts))
        if not node.ctes:
            return doc
        return self._with_doc(node) + hard_line() + hard_line() + doc

    def _with_doc(self, node: Query) -> Doc:
        keyword = "with recursive " if node.recursive else "with "
        return group(text(keyword) + interleave((self.visit(cte) for cte in node.ctes), text(",") + line()))

    def visit_Cte(self, node: Cte) -> Doc:
        return verbatim(_alias_text(node.alias) + " as ") + self._parenthesized_query(node.query)

    def visit_Offset(self, node: Offset) -> Doc:
        doc = text("offset ") + self.expr_doc(node.value)
        if node.rows is not OffsetRows.NONE:
            doc += text(f" {node.rows.value}")
        return doc

    def visit_Fetch(self, node: Fetch) -> Doc:
        doc = text("fetch first ")
        if node.quantity is not None:
            doc += self.expr_doc(node.quantity) + text(" percent " if node.percent else " ")
        return doc + text("rows with ties" if node.with_ties else "rows only")

    # ── Query bodies ──────────────────────────────────────────────

    def body_doc(self, body: SetExpr) -> Doc:
        """Return the document for a query body; a nested :class:`Query` is parenthesized."""
        if isinstance(body, Query):
            return self._parenthesized_query(body)
        doc: Doc = self.visit(body)
        return doc

    def visit_Select(self, node: Select) -> Doc:
        """Render a SELECT body.

        The whole body is one group: it renders on a single line when it fits, and otherwise every clause keyword
        starts a line with its content nested below it::

            select
              a,
              b
            from
              t
            where
              a > 1
        """
        head = text("select distinct") if node.distinct else text("select")
        if node.top is not None:
            head += self.visit(node.top)
        parts = [head + nest(INDENT, line() + self._comma_list(node.projection))]
        if node.from_:
            parts.append(self._clause("from", self._comma_list(node.from_)))
        if node.selection is not None:
            parts.append(self._clause("where", self.expr_doc(node.selection)))
        if node.group_by:
            parts.append(self._clause("group by", self._comma_list(node.group_by)))
        if node.having is not None:
            parts.append(self._clause("having", self.expr_doc(node.having)))
        return group(concat(*parts))

    def visit_Top(self, node: Top) -> Doc:
        doc = text(" top")
        if node.quantity is not None:
            doc += text(" (") + self.expr_doc(node.quantity) + text(")")
        if node.percent:
            doc += text(" percent")
        if node.with_ties:
            doc += text(" with ties")
        return doc

    def visit_UnnamedExpr(self, node: UnnamedExpr) -> Doc:
        return self.expr_doc(node.expr)

    def visit_ExprWithAlias(self, node: ExprWithAlias) -> Doc:
        return self.expr_doc(node.expr) + verbatim(f" as {_quote_ident(node.alias)}")

    def visit_SetOperation(self, node: SetOperation) -> Doc:
        """Render a set operation with the operator keyword on a line of its own."""
        keyword = f"{node.op.value} all" if node.all else node.op.value
        return (
            self._set_operand(node, node.left, Side.LEFT)
            + hard_line()
            + text(keyword)
            + hard_line()
            + self._set_operand(node, node.right, Side.RIGHT)
        )

    def _set_operand(self, parent: SetOperation, child: SetExpr, side: Side) -> Doc:
        doc = self.body_doc(child)
        if needs_parens(parent, child, side=side):
            return parenthesize(doc, INDENT)
        return doc

    def visit_Values(self, node: Values) -> Doc:
        rows = (parenthesize(self._comma_list(row), INDENT) for row in node.rows)
        return group(text("values") + nest(INDENT, line() + interleave(rows, text(",") + line())))

    # ── FROM items ────────────────────────────────────────────────

    def relation_doc(self, relation: TableFactor) -> Doc:
        """Return the document for one FROM item (table, derived table or parenthesized join)."""
        doc: Doc = self.visit(relation)
        return doc

    def join_doc(self, join: Join) -> Doc:
        """Return ``[natural ]<join keyword> <relation>`` followed by the join constraint, if any."""
        prefix = "natural " if isinstance(join.constraint, NaturalConstraint) else ""
        return text(f"{prefix}{join.operator.value} ") + self.relation_doc(join.relation) + self.visit(join.constraint)

    def visit_TableWithJoins(self, node: TableWithJoins) -> Doc:
        return self.relation_doc(node.relation) + concat(*(line() + self.join_doc(join) for join in node.joins))

    def visit_Table(self, node: Table) -> Doc:
        doc = verbatim(_object_name(node.name))
        if node.args:
            doc += parenthesize(self._comma_list(node.args), INDENT)
        if node.alias is not None:
            doc += verbatim(f" as {_alias_text(node.alias)}")
        if node.with_hints:
            hints = interleave((self._hint_doc(hint) for hint in node.with_hints), text(",") + line())
            doc += text(" with ") + parenthesize(hints, INDENT)
        return doc

    def _hint_doc(self, hint: Expr) -> Doc:
        # Bare hint words are keywords (NOLOCK, INDEX); they follow keyword case.
        if isinstance(hint, Identifier) and hint.ident.quote_style is None:
            return text(hint.ident.value.lower())
        doc: Doc = self.visit(hint)
        return doc

    def visit_Derived(self, node: Derived) -> Doc:
        doc = self._parenthesized_query(node.subquery)
        if node.lateral:
            doc = text("lateral ") + doc
        if node.alias is not None:
            doc += verbatim(f" as {_alias_text(node.alias)}")
        return doc

    def visit_NestedJoin(self, node: NestedJoin) -> Doc:
        return parenthesize(self.visit(node.table), INDENT)

    # ── Join constraints ──────────────────────────────────────────

    def visit_OnConstraint(self, node: OnConstraint) -> Doc:
        return self._constraint(text("on ") + self.expr_doc(node.expr))

    def visit_UsingConstraint(self, node: UsingConstraint) -> Doc:
        columns = ", ".join(_quote_ident(column) for column in node.columns)
        return self._constraint(verbatim(f"using ({columns})"))

    def visit_NaturalConstraint(self, node: NaturalConstraint) -> Doc:
        return nil()

    def visit_NoConstraint(self, node: NoConstraint) -> Doc:
        return nil()

    def _constraint(self, doc: Doc) -> Doc:
        return group(nest(INDENT, line() + doc))


def _alias_text(alias: TableAlias) -> str:
    name = _quote_ident(alias.name)
    if not alias.columns:
        return name
    return f"{name} ({', '.join(_quote_ident(column) for column in alias.columns)})"
