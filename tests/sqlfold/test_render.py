"""Tests for rendering hand-built and parsed trees."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from sqlfold import (
    EncodingFailureError,
    UnsupportedConstructError,
    UnsupportedStatementError,
    WouldFormatError,
    format_sql,
    parse,
    render,
    to_doc,
    would_format,
)
from sqlfold.doc import Doc
from sqlfold.nodes import (
    BinaryOp,
    BinaryOperator,
    Expr,
    Fetch,
    Ident,
    Identifier,
    ListAgg,
    ObjectName,
    OnOverflowError,
    Query,
    RawStatement,
    Select,
    SetOperation,
    SetOperator,
    StringLiteral,
    Table,
    TableWithJoins,
    UnaryOp,
    UnaryOperator,
    UnnamedExpr,
    Wildcard,
)

from .conftest import assert_idempotent, col, num, select_expr


def _select(n: int) -> Select:
    return Select(projection=(UnnamedExpr(num(n)),))


class TestRender:
    def test_parsed_statement(self, users_tree: Query):
        assert render(users_tree) == "select * from users"

    def test_no_trailing_semicolon_or_newline(self, select1_tree: Query):
        assert render(select1_tree) == "select 1"

    def test_to_doc_returns_document(self, select1_tree: Query):
        assert isinstance(to_doc(select1_tree), Doc)

    def test_width_must_be_positive(self, select1_tree: Query):
        with pytest.raises(ValueError, match="at least 1"):
            render(select1_tree, 0)

    def test_narrow_width(self, users_tree: Query):
        assert render(users_tree, 10) == "select\n  *\nfrom\n  users"


def _render_sql(sql: str, max_width: int = 100) -> str:
    (statement,) = parse(sql)
    return render(statement, max_width)


class TestScenarios:
    def test_short_query_stays_flat(self):
        assert _render_sql("SELECT * FROM t1") == "select * from t1"

    def test_and_breaks_every_clause(self):
        assert _render_sql("SELECT a, b FROM t WHERE a > 1 AND b < 2", 20) == (
            "select\n  a,\n  b\nfrom\n  t\nwhere\n  a > 1\n  and b < 2"
        )

    def test_in_list_inline(self):
        assert _render_sql("SELECT id FROM users WHERE id IN (1, 2, 3)") == (
            "select id from users where id in (1, 2, 3)"
        )

    def test_cte_followed_by_blank_line(self):
        assert _render_sql("WITH c AS (SELECT 1) SELECT * FROM c") == "with c as (select 1)\n\nselect * from c"

    def test_case_arms_on_separate_lines_at_wide_width(self):
        sql = "SELECT CASE WHEN a = 1 THEN 'x' WHEN a = 2 THEN 'y' END"
        assert _render_sql(sql, 200) == "select\n  case\n    when a = 1 then 'x'\n    when a = 2 then 'y'\n  end"

    def test_boolean_connectives_break_at_any_width(self):
        assert _render_sql("SELECT * FROM t WHERE a AND b OR c", 10000) == (
            "select\n  *\nfrom\n  t\nwhere\n  a\n  and b\n  or c"
        )

    def test_arithmetic_chain_wraps(self):
        output = _render_sql("SELECT aaaa + bbbb + cccc + dddd + eeee + ffff FROM t", 20)
        assert output == "select\n  aaaa +\n    bbbb +\n    cccc +\n    dddd +\n    eeee +\n    ffff\nfrom\n  t"
        assert max(len(line) for line in output.splitlines()) <= 20

    def test_parenthesized_concat_chain_wraps(self):
        output = _render_sql("SELECT (aaaa || bbbb || cccc || dddd) FROM t", 24)
        assert output == "select\n  (\n    aaaa ||\n      bbbb ||\n      cccc ||\n      dddd\n  )\nfrom\n  t"

    def test_chain_on_one_line_when_it_fits(self):
        assert _render_sql("SELECT a + b - c FROM t") == "select a + b - c from t"

    def test_tighter_operator_breaks_as_one_operand(self):
        output = _render_sql("SELECT aaaa * bbbb + cccc * dddd FROM t", 16)
        assert output == "select\n  aaaa * bbbb +\n    cccc * dddd\nfrom\n  t"

    @pytest.mark.parametrize("max_width", [1, 15, 40, 10000])
    def test_formatted_output_is_a_fixed_point(self, max_width: int):
        assert_idempotent("SELECT a, count(*) FROM t JOIN u ON t.id = u.id WHERE a > 1 GROUP BY a", max_width)


class TestHandBuiltTrees:
    """Trees built without the parser carry no Nested nodes, so parentheses come from precedence alone."""

    def test_or_inside_and(self):
        tree = select_expr(
            BinaryOp(BinaryOp(col("a"), BinaryOperator.OR, col("b")), BinaryOperator.AND, col("c"))
        )
        assert render(tree) == "select\n  (\n    a\n    or b\n  )\n  and c"

    def test_addition_inside_multiplication(self):
        tree = select_expr(
            BinaryOp(BinaryOp(col("a"), BinaryOperator.PLUS, col("b")), BinaryOperator.MULTIPLY, col("c"))
        )
        assert render(tree) == "select (a + b) * c"

    def test_right_nested_subtraction(self):
        tree = select_expr(
            BinaryOp(col("a"), BinaryOperator.MINUS, BinaryOp(col("b"), BinaryOperator.MINUS, col("c")))
        )
        assert render(tree) == "select a - (b - c)"

    def test_left_nested_subtraction(self):
        tree = select_expr(
            BinaryOp(BinaryOp(col("a"), BinaryOperator.MINUS, col("b")), BinaryOperator.MINUS, col("c"))
        )
        assert render(tree) == "select a - b - c"

    def test_not_over_comparison(self):
        tree = select_expr(UnaryOp(UnaryOperator.NOT, BinaryOp(col("a"), BinaryOperator.EQ, col("b"))))
        assert render(tree) == "select not a = b"

    def test_minus_before_negative_number(self):
        assert render(select_expr(UnaryOp(UnaryOperator.MINUS, num(-1)))) == "select - -1"

    def test_double_unary_minus(self):
        tree = select_expr(UnaryOp(UnaryOperator.MINUS, UnaryOp(UnaryOperator.MINUS, col("a"))))
        assert render(tree) == "select - -a"

    def test_set_operation_on_right(self):
        inner = SetOperation(_select(2), SetOperator.EXCEPT, _select(3))
        tree = Query(body=SetOperation(_select(1), SetOperator.UNION, inner))
        assert render(tree) == "select 1\nunion\n(\n  select 2\n  except\n  select 3\n)"

    def test_union_all(self):
        tree = Query(body=SetOperation(_select(1), SetOperator.UNION, _select(2), all=True))
        assert render(tree) == "select 1\nunion all\nselect 2"

    def test_fetch_with_ties(self):
        tree = Query(
            body=Select(projection=(UnnamedExpr(col("a")),)),
            fetch=Fetch(num(10), percent=True, with_ties=True),
        )
        assert render(tree) == "select a fetch first 10 percent rows with ties"

    def test_listagg_on_overflow_error(self):
        tree = select_expr(ListAgg(col("a"), separator=StringLiteral(","), on_overflow=OnOverflowError()))
        assert render(tree) == "select listagg(a, ',' on overflow error)"

    def test_quoted_identifier_escaping(self):
        assert render(select_expr(Identifier(Ident('say "hi"', quote_style='"')))) == 'select "say ""hi"""'

    def test_bracket_identifier_escaping(self):
        assert render(select_expr(Identifier(Ident("a]b", quote_style="[")))) == "select [a]]b]"

    def test_bare_table_hints_lower_cased(self):
        hints = (Identifier(Ident("NOLOCK")), Identifier(Ident("Idx", quote_style='"')))
        table = Table(ObjectName((Ident("t"),)), with_hints=hints)
        tree = Query(body=Select(projection=(Wildcard(),), from_=(TableWithJoins(table),)))
        assert render(tree) == 'select * from t with (nolock, "Idx")'


class TestRenderErrors:
    def test_unknown_node(self):
        @dataclass(frozen=True)
        class Widget(Expr):
            pass

        with pytest.raises(UnsupportedConstructError) as exc_info:
            render(select_expr(Widget()))
        assert exc_info.value.construct == "Widget"

    def test_raw_statement(self):
        with pytest.raises(UnsupportedStatementError) as exc_info:
            render(RawStatement(kind="insert", sql="INSERT INTO t VALUES (1)"))
        assert exc_info.value.kind == "insert"

    def test_format_sql_rejects_non_query(self):
        with pytest.raises(UnsupportedStatementError, match="unsupported statement: update"):
            format_sql("SELECT 1; UPDATE t SET a = 1")

    def test_lone_surrogate(self):
        with pytest.raises(EncodingFailureError, match="not valid UTF-8"):
            render(select_expr(Identifier(Ident("\ud800", quote_style='"'))))


class TestFormatSql:
    def test_one_string_per_statement(self):
        assert format_sql("SELECT 1; SELECT 2") == ["select 1;\n", "select 2;\n"]

    def test_empty_input(self):
        assert format_sql("") == []

    def test_max_width(self):
        assert format_sql("SELECT a, b FROM t", max_width=10) == ["select\n  a,\n  b\nfrom\n  t;\n"]

    def test_parsed_and_rendered_agree(self):
        sql = "SELECT a FROM t WHERE b = 1"
        (statement,) = parse(sql)
        assert format_sql(sql) == [render(statement) + ";\n"]


class TestCheckMode:
    def test_formatted_input_passes(self):
        assert format_sql("select 1;\nselect 2;\n", check=True) == ["select 1;\n", "select 2;\n"]

    def test_unformatted_input_raises(self):
        with pytest.raises(WouldFormatError) as exc_info:
            format_sql("SELECT 1", check=True)
        assert exc_info.value.formatted == "select 1;\n"

    def test_check_respects_width(self):
        narrow = "select\n  a,\n  b\nfrom\n  t;\n"
        assert format_sql(narrow, max_width=10, check=True) == [narrow]
        with pytest.raises(WouldFormatError):
            format_sql(narrow, check=True)

    def test_would_format(self):
        assert would_format("select 1;\n") is False
        assert would_format("SELECT 1;") is True
        assert would_format("select 1;") is True
