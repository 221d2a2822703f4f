"""Expression visitor methods for the document builder."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeGuard

from sqlfold.doc import Doc, concat, group, hard_line, interleave, line, nest, parenthesize, text, verbatim
from sqlfold.format.base import _DocBuilderBase  # pyright: ignore[reportPrivateUsage]
from sqlfold.format.constants import INDENT
from sqlfold.format.utils import (
    _data_type,  # pyright: ignore[reportPrivateUsage]
    _object_name,  # pyright: ignore[reportPrivateUsage]
    _quote_ident,  # pyright: ignore[reportPrivateUsage]
    _string_literal,  # pyright: ignore[reportPrivateUsage]
)
from sqlfold.nodes import BinaryOp, BinaryOperator, Number, UnaryOp, UnaryOperator
from sqlfold.precedence import Side, precedence_of

if TYPE_CHECKING:
    from sqlfold.nodes import (
        Between,
        Boolean,
        Case,
        Cast,
        Collate,
        CompoundIdentifier,
        CurrentRow,
        Exists,
        Expr,
        Extract,
        Following,
        Function,
        Identifier,
        InList,
        InSubquery,
        IsNotNull,
        IsNull,
        ListAgg,
        Nested,
        Null,
        OnOverflowError,
        OnOverflowTruncate,
        OrderByExpr,
        Placeholder,
        Preceding,
        QualifiedWildcard,
        StringLiteral,
        Subquery,
        TypedString,
        Wildcard,
        WindowFrame,
        WindowSpec,
    )

_BOOLEAN_CONNECTIVES = (BinaryOperator.AND, BinaryOperator.OR)


class _ExpressionMixin(_DocBuilderBase):
    """Mixin providing expression visitor methods."""

    # ── Names and literals ────────────────────────────────────────

    def visit_Identifier(self, node: Identifier) -> Doc:
        return verbatim(_quote_ident(node.ident))

    def visit_CompoundIdentifier(self, node: CompoundIdentifier) -> Doc:
        return verbatim(".".join(_quote_ident(part) for part in node.parts))

    def visit_Wildcard(self, node: Wildcard) -> Doc:
        return text("*")

    def visit_QualifiedWildcard(self, node: QualifiedWildcard) -> Doc:
        return verbatim(_object_name(node.name) + ".*")

    def visit_Number(self, node: Number) -> Doc:
        return text(node.value)

    def visit_StringLiteral(self, node: StringLiteral) -> Doc:
        return _string_literal(node.value)

    def visit_Boolean(self, node: Boolean) -> Doc:
        return text("true" if node.value else "false")

    def visit_Null(self, node: Null) -> Doc:
        return text("null")

    def visit_Placeholder(self, node: Placeholder) -> Doc:
        return text(node.value)

    def visit_TypedString(self, node: TypedString) -> Doc:
        return text(_data_type(node.data_type) + " ") + _string_literal(node.value)

    # ── Operators ─────────────────────────────────────────────────

    def visit_UnaryOp(self, node: UnaryOp) -> Doc:
        operand = self._operand(node, node.expr, Side.RIGHT)
        if node.op is UnaryOperator.NOT:
            return text("not ") + operand
        sign = node.op.value
        # "--" would start a comment
        if _starts_with_sign(node.expr):
            sign += " "
        return text(sign) + operand

    def visit_BinaryOp(self, node: BinaryOp) -> Doc:
        """Render a binary operation.

        ``and`` / ``or`` always start a new line at the current indentation, whatever the width::

            a > 1
            and b < 2

        A run of other operators at one precedence level (``a + b - c``, ``x || y || z``) is a single group. It stays
        on one line when it fits; otherwise every operator ends its line and the next operand starts an indented
        one::

            aaaa +
              bbbb +
              cccc
        """
        if node.op in _BOOLEAN_CONNECTIVES:
            left = self._operand(node, node.left, Side.LEFT)
            right = self._operand(node, node.right, Side.RIGHT)
            return left + hard_line() + text(f"{node.op.value} ") + right

        level = precedence_of(node).level
        links: list[Doc] = []
        head: Expr = node
        parent = node
        while _continues_chain(head, level):
            links.append(text(f" {head.op.value}") + line() + self._operand(head, head.right, Side.RIGHT))
            parent = head
            head = head.left
        first = self._operand(parent, head, Side.LEFT)
        return group(first + nest(INDENT, concat(*reversed(links))))

    def visit_Cast(self, node: Cast) -> Doc:
        return text("cast(") + self.expr_doc(node.expr) + text(f" as {_data_type(node.data_type)})")

    def visit_Extract(self, node: Extract) -> Doc:
        return text(f"extract({node.field.lower()} from ") + self.expr_doc(node.expr) + text(")")

    def visit_Collate(self, node: Collate) -> Doc:
        return self._operand(node, node.expr, Side.LEFT) + verbatim(f" collate {_object_name(node.collation)}")

    def visit_Nested(self, node: Nested) -> Doc:
        return parenthesize(self.expr_doc(node.expr), INDENT)

    def visit_Between(self, node: Between) -> Doc:
        keyword = " not between " if node.negated else " between "
        return (
            self._operand(node, node.expr, Side.LEFT)
            + text(keyword)
            + self._operand(node, node.low, Side.RIGHT)
            + text(" and ")
            + self._operand(node, node.high, Side.RIGHT)
        )

    def visit_IsNull(self, node: IsNull) -> Doc:
        return self._operand(node, node.expr, Side.LEFT) + text(" is null")

    def visit_IsNotNull(self, node: IsNotNull) -> Doc:
        return self._operand(node, node.expr, Side.LEFT) + text(" is not null")

    # ── CASE ──────────────────────────────────────────────────────

    def visit_Case(self, node: Case) -> Doc:
        """Render a CASE expression with one ``when ... then ...`` arm per line, at any width."""
        head = text("case")
        if node.operand is not None:
            head += text(" ") + self.expr_doc(node.operand)
        arms = [
            text("when ") + self.expr_doc(condition) + text(" then ") + self.expr_doc(result)
            for condition, result in zip(node.conditions, node.results, strict=True)
        ]
        body = interleave(arms, hard_line())
        if node.else_result is not None:
            body += hard_line() + text("else ") + self.expr_doc(node.else_result)
        return head + nest(INDENT, hard_line() + body) + hard_line() + text("end")

    # ── Lists and subqueries ──────────────────────────────────────

    def visit_InList(self, node: InList) -> Doc:
        keyword = " not in " if node.negated else " in "
        items = parenthesize(self._comma_list(node.items), INDENT)
        return self._operand(node, node.expr, Side.LEFT) + text(keyword) + items

    def visit_InSubquery(self, node: InSubquery) -> Doc:
        keyword = " not in " if node.negated else " in "
        return self._operand(node, node.expr, Side.LEFT) + text(keyword) + self._parenthesized_query(node.subquery)

    def visit_Exists(self, node: Exists) -> Doc:
        return text("exists ") + self._parenthesized_query(node.subquery)

    def visit_Subquery(self, node: Subquery) -> Doc:
        return self._parenthesized_query(node.query)

    # ── Functions and windows ─────────────────────────────────────

    def visit_Function(self, node: Function) -> Doc:
        args = self._comma_list(node.args)
        if node.distinct:
            args = text("distinct ") + args
        doc = verbatim(_object_name(node.name, lower=True)) + parenthesize(args, INDENT)
        if node.over is not None:
            doc += text(" over ") + self.visit(node.over)
        return doc

    def visit_WindowSpec(self, node: WindowSpec) -> Doc:
        parts: list[Doc] = []
        if node.partition_by:
            parts.append(text("partition by ") + group(self._comma_list(node.partition_by)))
        if node.order_by:
            parts.append(text("order by ") + group(self._comma_list(node.order_by)))
        if node.window_frame is not None:
            parts.append(self.visit(node.window_frame))
        return parenthesize(interleave(parts, line()), INDENT)

    def visit_WindowFrame(self, node: WindowFrame) -> Doc:
        start = self.visit(node.start_bound)
        if node.end_bound is None:
            return text(f"{node.units.value} ") + start
        return text(f"{node.units.value} between ") + start + text(" and ") + self.visit(node.end_bound)

    def visit_CurrentRow(self, node: CurrentRow) -> Doc:
        return text("current row")

    def visit_Preceding(self, node: Preceding) -> Doc:
        return self._frame_offset(node.offset) + text(" preceding")

    def visit_Following(self, node: Following) -> Doc:
        return self._frame_offset(node.offset) + text(" following")

    def _frame_offset(self, offset: Expr | None) -> Doc:
        return text("unbounded") if offset is None else self.expr_doc(offset)

    def visit_OrderByExpr(self, node: OrderByExpr) -> Doc:
        words: list[str] = []
        if node.asc is not None:
            words.append("asc" if node.asc else "desc")
        if node.nulls_first is not None:
            words.append("nulls first" if node.nulls_first else "nulls last")
        doc = self.expr_doc(node.expr)
        return doc + text(" " + " ".join(words)) if words else doc

    # ── LISTAGG ───────────────────────────────────────────────────

    def visit_ListAgg(self, node: ListAgg) -> Doc:
        inner = self.expr_doc(node.expr)
        if node.distinct:
            inner = text("distinct ") + inner
        if node.separator is not None:
            inner += text(",") + line() + self.expr_doc(node.separator)
        if node.on_overflow is not None:
            inner += self.visit(node.on_overflow)
        doc = text("listagg") + parenthesize(inner, INDENT)
        if node.within_group:
            order_by = text("order by ") + group(self._comma_list(node.within_group))
            doc += text(" within group ") + parenthesize(order_by, INDENT)
        return doc

    def visit_OnOverflowError(self, node: OnOverflowError) -> Doc:
        return text(" on overflow error")

    def visit_OnOverflowTruncate(self, node: OnOverflowTruncate) -> Doc:
        doc = text(" on overflow truncate")
        if node.filler is not None:
            doc += text(" ") + self.expr_doc(node.filler)
        return doc + text(" with count" if node.with_count else " without count")


def _continues_chain(expr: Expr, level: int) -> TypeGuard[BinaryOp]:
    return isinstance(expr, BinaryOp) and expr.op not in _BOOLEAN_CONNECTIVES and precedence_of(expr).level == level


def _starts_with_sign(expr: Expr) -> bool:
    if isinstance(expr, Number):
        return expr.value.startswith(("-", "+"))
    return isinstance(expr, UnaryOp) and expr.op is not UnaryOperator.NOT
