"""SQL pretty-printer: turns parsed statements into documents and lays them out for a target width."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlfold import layout
from sqlfold.errors import EncodingFailureError, WouldFormatError
from sqlfold.format.base import _DocBuilderBase  # pyright: ignore[reportPrivateUsage]
from sqlfold.format.constants import DEFAULT_MAX_WIDTH
from sqlfold.format.expressions import _ExpressionMixin  # pyright: ignore[reportPrivateUsage]
from sqlfold.format.query import _QueryMixin  # pyright: ignore[reportPrivateUsage]
from sqlfold.parse import parse

if TYPE_CHECKING:
    from sqlfold.doc import Doc
    from sqlfold.nodes import Statement

logger = logging.getLogger(__name__)


class _DocBuilder(_ExpressionMixin, _QueryMixin, _DocBuilderBase):
    """AST visitor that builds the layout document for a statement."""


def to_doc(statement: Statement) -> Doc:
    """Build the layout document for *statement* without rendering it.

    Raises:
        UnsupportedStatementError: If *statement* is not a query.
        UnsupportedConstructError: If the tree contains a node the formatter has no layout for.
    """
    doc: Doc = _DocBuilder().visit(statement)
    return doc


def render(statement: Statement, max_width: int = DEFAULT_MAX_WIDTH) -> str:
    """Render one parsed statement as canonical SQL text, without a trailing semicolon.

    Args:
        statement: A statement produced by :func:`sqlfold.parse` or built by hand.
        max_width: The target line width. Content that cannot be broken (a long identifier, say) may still exceed it.

    Returns:
        The formatted statement.

    Raises:
        UnsupportedStatementError: If *statement* is not a query.
        UnsupportedConstructError: If the tree contains a node the formatter has no layout for.
        EncodingFailureError: If the rendered text is not valid UTF-8.
        ValueError: If *max_width* is less than 1.

    Example:
        >>> from sqlfold import parse
        >>> render(parse("SELECT * FROM t1")[0])
        'select * from t1'
    """
    output = layout.render(to_doc(statement), max_width)
    try:
        output.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingFailureError(f"rendered statement is not valid UTF-8: {exc.reason}") from exc
    return output


def format_sql(sql: str, *, max_width: int = DEFAULT_MAX_WIDTH, check: bool = False) -> list[str]:
    """Parse and format every statement in *sql*.

    Args:
        sql: SQL text holding one or more ``;``-separated statements.
        max_width: The target line width.
        check: When ``True``, raise instead of returning if the output differs from *sql*.

    Returns:
        One string per statement, each ending with ``;`` and a newline. Joined, they form the formatted file.

    Raises:
        ParseError: If *sql* cannot be parsed.
        RenderError: If a statement cannot be rendered (see :func:`render`).
        WouldFormatError: In check mode, if formatting would change *sql*.

    Example:
        >>> format_sql("SELECT a FROM t; select b from u")
        ['select a from t;\\n', 'select b from u;\\n']
    """
    statements = parse(sql)
    logger.debug("parsed %d statement(s)", len(statements))
    formatted: list[str] = []
    for index, statement in enumerate(statements):
        output = render(statement, max_width)
        logger.debug("statement %d rendered to %d line(s) at width %d", index, output.count("\n") + 1, max_width)
        formatted.append(output + ";\n")
    if check:
        joined = "".join(formatted)
        if joined != sql:
            raise WouldFormatError(joined)
    return formatted


def would_format(sql: str, *, max_width: int = DEFAULT_MAX_WIDTH) -> bool:
    """Return ``True`` if formatting *sql* would change it.

    Example:
        >>> would_format("select 1;\\n")
        False
        >>> would_format("SELECT 1")
        True
    """
    return "".join(format_sql(sql, max_width=max_width)) != sql
