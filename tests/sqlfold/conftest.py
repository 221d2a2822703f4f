from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from sqlfold import ParseError, format_sql, parse
from sqlfold.nodes import Ident, Identifier, Number, Query, Select, UnnamedExpr

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlfold.nodes import Expr

# -- Tree fixtures ---------------------------------------------------------------


@pytest.fixture
def select1_tree() -> Query:
    (statement,) = parse("SELECT 1")
    assert isinstance(statement, Query)
    return statement


@pytest.fixture
def users_tree() -> Query:
    (statement,) = parse("SELECT * FROM users")
    assert isinstance(statement, Query)
    return statement


# -- Builders --------------------------------------------------------------------


def col(name: str) -> Identifier:
    """Shorthand for a bare column reference."""
    return Identifier(Ident(name))


def num(value: int | str) -> Number:
    return Number(str(value))


def select_expr(expr: Expr) -> Query:
    """Wrap *expr* in ``SELECT <expr>``."""
    return Query(body=Select(projection=(UnnamedExpr(expr),)))


# -- Assertion helpers -----------------------------------------------------------


def assert_idempotent(sql: str, max_width: int = 100) -> str:
    """Assert that formatted output is a fixed point of the formatter, and return it.

    The first pass canonicalizes keyword case, spacing and layout. Formatting that output again must reproduce it
    byte for byte.
    """
    once = "".join(format_sql(sql, max_width=max_width))
    twice = "".join(format_sql(once, max_width=max_width))
    assert once == twice, f"Formatting not stable:\n  original: {sql}\n  once:     {once!r}\n  twice:    {twice!r}"
    return once


def assert_parse_error(fn: Callable[..., Any], sql: str, *, check_cursorpos: bool = False) -> ParseError:
    """Assert that calling fn(sql) raises ParseError with a truthy message."""
    with pytest.raises(ParseError) as exc_info:
        fn(sql)
    assert exc_info.value.message
    if check_cursorpos:
        assert exc_info.value.cursorpos > 0
    return exc_info.value
