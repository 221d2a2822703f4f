"""Property-based tests for the formatter.

All tests in this module are marked ``@pytest.mark.fuzz`` so they can be selected or excluded with ``-m``.
"""

from __future__ import annotations

import os
import re

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, settings
from hypothesis import strategies as st

from sqlfold import SqlFoldError, format_sql, parse, render

pytestmark = pytest.mark.fuzz

MAX_EXAMPLES = int(os.environ.get("HYPOTHESIS_MAX_EXAMPLES", "200"))

# ---------------------------------------------------------------------------
# Input strategies
# ---------------------------------------------------------------------------

_SQL_KEYWORDS = [
    "SELECT",
    "DISTINCT",
    "FROM",
    "WHERE",
    "JOIN",
    "LEFT",
    "INNER",
    "ON",
    "USING",
    "AND",
    "OR",
    "NOT",
    "NULL",
    "IS",
    "IN",
    "AS",
    "ORDER",
    "BY",
    "GROUP",
    "HAVING",
    "LIMIT",
    "OFFSET",
    "FETCH",
    "UNION",
    "ALL",
    "EXISTS",
    "BETWEEN",
    "LIKE",
    "CASE",
    "WHEN",
    "THEN",
    "ELSE",
    "END",
    "WITH",
    "VALUES",
    "OVER",
    "PARTITION",
    "CAST",
    "INSERT",
]

_SQL_OPERATORS = ["=", "<>", "!=", "<", ">", "<=", ">=", "||", "+", "-", "*", "/", "%", "::"]

_SQL_PUNCTUATION = [";", "(", ")", ",", ".", "'", '"', "[", "]"]

_sql_identifier = st.from_regex(r"[a-z_][a-z0-9_]{0,15}", fullmatch=True)
_sql_literal = st.one_of(
    st.integers(-999999, 999999).map(str),
    st.from_regex(r"'[^']{0,20}'", fullmatch=True),
)

_sql_fragment = st.lists(
    st.one_of(
        st.sampled_from(_SQL_KEYWORDS),
        st.sampled_from(_SQL_OPERATORS),
        st.sampled_from(_SQL_PUNCTUATION),
        _sql_identifier,
        _sql_literal,
    ),
    min_size=1,
    max_size=30,
).map(" ".join)

sql_input = st.one_of(st.text(), _sql_fragment)

# ---------------------------------------------------------------------------
# Pool of valid queries
# ---------------------------------------------------------------------------

_VALID_SQL_POOL = [
    "SELECT 1",
    "SELECT * FROM t",
    "SELECT a, b FROM t WHERE x = 1",
    "SELECT a FROM t ORDER BY a DESC LIMIT 10 OFFSET 5",
    "SELECT * FROM t1 JOIN t2 ON t1.id = t2.id",
    "SELECT count(*) FROM t GROUP BY a HAVING count(*) > 1",
    "WITH cte AS (SELECT 1 AS n) SELECT * FROM cte",
    "SELECT CASE WHEN x = 1 THEN 'a' ELSE 'b' END FROM t",
    "SELECT * FROM t WHERE x IN (1, 2, 3)",
    "SELECT * FROM t WHERE x BETWEEN 1 AND 10 OR y IS NULL",
    "SELECT a, b, c FROM t1 LEFT JOIN t2 USING (id)",
    "SELECT a FROM t UNION ALL SELECT b FROM u",
    "VALUES (1, 'one'), (2, 'two')",
    "SELECT sum(x) OVER (PARTITION BY a ORDER BY b) FROM t",
    "SELECT * FROM (SELECT a FROM t) AS s WHERE EXISTS (SELECT 1 FROM u)",
    "SELECT cast(a AS varchar(10)), -b, NOT c FROM t",
    "SELECT 'multi\nline' AS s FROM t",
]

# Queries built only from pieces the formatter can put on separate lines: at any width, a line that is still too
# long holds a single token.
_CHAIN_POOL = [
    "SELECT aaaa + bbbb + cccc + dddd + eeee + ffff FROM t",
    "SELECT a * b - c / d + e % f FROM t",
    "SELECT first_name || '-' || middle_name || '-' || last_name FROM people",
    "SELECT (aaaa || bbbb || cccc || dddd) FROM t",
    "SELECT * FROM t WHERE aaaa = bbbb AND cccc < dddd OR eeee >= ffff",
    "SELECT * FROM t WHERE (a + b) * (c - d) > e",
    "SELECT * FROM t WHERE (alpha <> beta OR gamma <= delta) AND epsilon = zeta",
]

_OPERATOR_SUFFIX = re.compile(r" (?:\|\||[-+*/%<>=!]+)$")


def _single_token(line: str) -> bool:
    """Whether *line* holds one token, give or take a leading and/or and a trailing operator or comma."""
    body = _OPERATOR_SUFFIX.sub("", line.strip().rstrip(";,"))
    body = body.removeprefix("and ").removeprefix("or ")
    return " " not in body


_widths = st.integers(min_value=1, max_value=200)


class TestFuzz:
    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=sql_input)
    def test_format_does_not_crash(self, sql: str) -> None:
        try:
            result = format_sql(sql)
            assert isinstance(result, list)
        except SqlFoldError:
            pass

    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=sql_input, width=_widths)
    def test_formatted_output_is_stable(self, sql: str, width: int) -> None:
        try:
            once = "".join(format_sql(sql, max_width=width))
        except SqlFoldError:
            return
        assert "".join(format_sql(once, max_width=width)) == once


class TestProperties:
    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=st.sampled_from(_VALID_SQL_POOL), width=_widths)
    def test_idempotent(self, sql: str, width: int) -> None:
        once = "".join(format_sql(sql, max_width=width))
        assert "".join(format_sql(once, max_width=width)) == once

    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=st.sampled_from(_VALID_SQL_POOL), width=st.integers(min_value=40, max_value=200))
    def test_lines_fit_width(self, sql: str, width: int) -> None:
        for line in "".join(format_sql(sql, max_width=width)).splitlines():
            assert len(line.rstrip(";")) <= width, line

    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=st.sampled_from(_CHAIN_POOL), width=st.integers(min_value=1, max_value=30))
    def test_operator_chains_fit_narrow_widths(self, sql: str, width: int) -> None:
        for line in "".join(format_sql(sql, max_width=width)).splitlines():
            assert len(line.rstrip(";")) <= width or _single_token(line), line

    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=st.sampled_from(_CHAIN_POOL), width=st.integers(min_value=1, max_value=30))
    def test_operator_chains_idempotent(self, sql: str, width: int) -> None:
        once = "".join(format_sql(sql, max_width=width))
        assert "".join(format_sql(once, max_width=width)) == once

    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=st.sampled_from(_VALID_SQL_POOL), width=_widths)
    def test_deterministic(self, sql: str, width: int) -> None:
        (statement,) = parse(sql)
        assert render(statement, width) == render(statement, width)

    @settings(max_examples=MAX_EXAMPLES)
    @given(sql=st.sampled_from(_VALID_SQL_POOL), width=_widths)
    def test_no_trailing_whitespace(self, sql: str, width: int) -> None:
        for line in "".join(format_sql(sql, max_width=width)).splitlines():
            assert line == line.rstrip(" ")
