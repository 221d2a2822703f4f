"""Error types raised by sqlfold.

Parsing problems surface as :class:`ParseError`; problems turning a parsed statement into text surface as subclasses
of :class:`RenderError`. Every exception derives from :class:`SqlFoldError` so callers can catch the whole family at
once.
"""

from __future__ import annotations


class SqlFoldError(Exception):
    """Base class for every error raised by sqlfold."""


class ParseError(SqlFoldError):
    """Structured error raised when SQL text cannot be tokenized or parsed.

    ``cursorpos`` is a **1-based character offset** into the original SQL string pointing to the token where the error
    was detected. When it is ``0`` the position is unknown (for example, input ended early). Convert it to a 0-based
    Python index with ``e.cursorpos - 1`` when slicing.

    Attributes:
        message: Human-readable error description.
        cursorpos: 1-based character offset in the SQL string where the error was detected (``0`` when unavailable).

    Examples:
        Use ``cursorpos`` to highlight the error location:

        >>> from sqlfold import parse, ParseError
        >>> sql = "SELECT 1 2"
        >>> try:
        ...     parse(sql)
        ... except ParseError as e:
        ...     idx = max(e.cursorpos - 1, 0)
        ...     print(sql)
        ...     print(" " * idx + "^")
        ...     print(e.message)
        SELECT 1 2
                 ^
        Invalid expression / Unexpected token at or near "2"
    """

    def __init__(self, message: str, *, cursorpos: int = 0) -> None:
        """Create a ParseError.

        Args:
            message: Human-readable error description.
            cursorpos: 1-based position in the SQL string where the error was detected.
        """
        super().__init__(message)
        self.message = message
        self.cursorpos = cursorpos


class RenderError(SqlFoldError):
    """Base class for failures while rendering a statement to text."""


class UnsupportedConstructError(RenderError):
    """Raised when a syntax tree contains a node the formatter has no layout for.

    Attributes:
        construct: Name of the node type that could not be rendered.
    """

    def __init__(self, construct: str, message: str | None = None) -> None:  # noqa: D107
        super().__init__(message or f"unsupported construct: {construct}")
        self.construct = construct


class UnsupportedStatementError(UnsupportedConstructError):
    """Raised for statements outside the query grammar (DDL, DML other than queries, ...).

    Attributes:
        kind: The statement's leading keyword, lower-cased (e.g. ``"insert"``).
    """

    def __init__(self, kind: str) -> None:  # noqa: D107
        super().__init__("RawStatement", f"unsupported statement: {kind}")
        self.kind = kind


class EncodingFailureError(RenderError):
    """Raised when rendered text cannot be encoded as UTF-8 (e.g. it carries lone surrogates)."""


class WouldFormatError(SqlFoldError):
    """Raised in check mode when formatting would change the input.

    Attributes:
        formatted: The text the input would have been rewritten to.
    """

    def __init__(self, formatted: str) -> None:  # noqa: D107
        super().__init__("input would be reformatted")
        self.formatted = formatted
