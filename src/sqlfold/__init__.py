"""Deterministic, width-aware SQL pretty-printer."""

import logging

from sqlfold.doc import Doc
from sqlfold.errors import (
    EncodingFailureError,
    ParseError,
    RenderError,
    SqlFoldError,
    UnsupportedConstructError,
    UnsupportedStatementError,
    WouldFormatError,
)
from sqlfold.format import format_sql, render, to_doc, would_format
from sqlfold.format.constants import DEFAULT_MAX_WIDTH
from sqlfold.nodes import AstNode, Query, RawStatement, Statement
from sqlfold.parse import parse
from sqlfold.precedence import Assoc, Precedence, Side, needs_parens, precedence_of
from sqlfold.walk import Visitor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Assoc",
    "AstNode",
    "DEFAULT_MAX_WIDTH",
    "Doc",
    "EncodingFailureError",
    "format_sql",
    "needs_parens",
    "parse",
    "ParseError",
    "precedence_of",
    "Precedence",
    "Query",
    "RawStatement",
    "render",
    "RenderError",
    "Side",
    "SqlFoldError",
    "Statement",
    "to_doc",
    "UnsupportedConstructError",
    "UnsupportedStatementError",
    "Visitor",
    "would_format",
    "WouldFormatError",
]
