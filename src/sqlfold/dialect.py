"""The sqlglot dialect sqlfold parses with.

sqlglot's default dialect already covers the query grammar sqlfold lays out. The subclasses below narrow it in three
ways:

* function calls stay anonymous (``exp.Anonymous``), so a name is kept as written instead of being mapped onto one of
  sqlglot's typed function nodes;
* ``VALUES`` bodies and ``INTERVAL`` literals are left alone instead of being rewritten;
* spellings sqlglot normalizes away are recorded in ``meta``: the words of a type name, the ``ROW``/``ROWS`` noise
  word after ``OFFSET``, an explicit ``NULLS FIRST``/``NULLS LAST``, a comma join, and a typed string literal.
"""

from __future__ import annotations

from typing import Any

from sqlglot import exp, parser, tokens
from sqlglot.dialects.dialect import Dialect
from sqlglot.tokens import TokenType

#: ``meta`` keys written by :class:`SqlFoldDialect.Parser`.
TYPE_SPELLING = "sqlfold_type"
TYPED_STRING = "sqlfold_typed_string"
OFFSET_ROWS = "sqlfold_offset_rows"
NULLS = "sqlfold_nulls"
COMMA_JOIN = "sqlfold_comma"


class SqlFoldDialect(Dialect):
    """ANSI-flavoured dialect that also accepts T-SQL ``TOP``, ``[bracketed]`` names, ``@variables`` and ``#temp``."""

    SUPPORTS_LIMIT_ALL = True
    NORMALIZE_NOT_NULL = False

    class Tokenizer(tokens.Tokenizer):
        IDENTIFIERS = ['"', "`", ("[", "]")]
        # @ and # start a name instead of being operators.
        SINGLE_TOKENS = {char: kind for char, kind in tokens.Tokenizer.SINGLE_TOKENS.items() if char not in "@#"}
        VAR_SINGLE_TOKENS = {"@", "#", "$"}
        KEYWORDS = {**tokens.Tokenizer.KEYWORDS, "TOP": TokenType.TOP}

    class Parser(parser.Parser):
        FUNCTIONS: dict[str, Any] = {}
        NO_PAREN_FUNCTIONS: dict[TokenType, Any] = {}
        NO_PAREN_FUNCTION_PARSERS = {"CASE": lambda self: self._parse_case()}
        FUNCTION_PARSERS = {
            "CAST": lambda self: self._parse_cast(self.STRICT_CAST),
            "EXTRACT": lambda self: self._parse_extract(),
            "LISTAGG": lambda self: self._parse_listagg(),
        }

        def _values_to_select(self, values: exp.Values) -> exp.Values:  # type: ignore[override]
            return values

        def _parse_interval(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
            # INTERVAL '1 day' is read as a type followed by a string, like DATE '2020-01-01'.
            return None

        def _parse_type(self, parse_interval: bool = True, fallback_to_identifier: bool = False) -> exp.Expr | None:
            start = self._curr
            result = super()._parse_type(parse_interval, fallback_to_identifier)
            if (
                start is not None
                and start.token_type in self.TYPE_TOKENS
                and isinstance(result, exp.Cast)
                and isinstance(result.this, exp.Literal)
                and result.this.is_string
            ):
                result.meta[TYPED_STRING] = True
            return result

        def _parse_types(self, *args: Any, **kwargs: Any) -> exp.Expr | None:
            start = self._index
            result = super()._parse_types(*args, **kwargs)
            if isinstance(result, exp.DataType):
                result.meta[TYPE_SPELLING] = self._type_spelling(start)
            return result

        def _type_spelling(self, start: int) -> tuple[str, tuple[str, ...]]:
            """Return the type name words and the parenthesized modifiers of the tokens consumed since *start*."""
            words: list[str] = []
            args: list[str] = []
            current: list[str] = []
            depth = 0
            for token in self._tokens[start : self._index]:
                if token.token_type == TokenType.L_PAREN:
                    depth += 1
                    if depth == 1:
                        continue
                elif token.token_type == TokenType.R_PAREN:
                    depth -= 1
                    if depth == 0:
                        args.append(" ".join(current))
                        current = []
                        continue
                elif token.token_type == TokenType.COMMA and depth == 1:
                    args.append(" ".join(current))
                    current = []
                    continue
                source = " ".join(self.sql[token.start : token.end + 1].split())
                (current if depth else words).append(source)
            return " ".join(words), tuple(args)

        def _parse_join(self, *args: Any, **kwargs: Any) -> exp.Join | None:
            comma = self._match(TokenType.COMMA, advance=False)
            join = super()._parse_join(*args, **kwargs)
            if join is not None and comma:
                join.meta[COMMA_JOIN] = True
            return join

        def _parse_offset(self, this: exp.Expr | None = None) -> exp.Expr | None:
            offset = super()._parse_offset(this)
            if (
                isinstance(offset, exp.Offset)
                and offset is not this
                and self._prev.text.upper() in ("ROW", "ROWS")
                and self._tokens[self._index - 2].token_type != TokenType.OFFSET
            ):
                offset.meta[OFFSET_ROWS] = self._prev.text.upper()
            return offset

        def _parse_ordered(self, parse_method: Any = None) -> exp.Ordered | None:
            ordered = super()._parse_ordered(parse_method)
            if (
                ordered is not None
                and self._index >= 2
                and self._prev.text.upper() in ("FIRST", "LAST")
                and self._tokens[self._index - 2].text.upper() == "NULLS"
            ):
                ordered.meta[NULLS] = self._prev.text.upper()
            return ordered

        def _parse_listagg(self) -> exp.Expr:
            """``LISTAGG([DISTINCT] expr [, separator] [ON OVERFLOW ...])``; WITHIN GROUP is left to the caller."""
            distinct = self._match(TokenType.DISTINCT)
            this = self._parse_disjunction()
            if distinct:
                this = self.expression(exp.Distinct(expressions=[this]))
            separator = self._parse_disjunction() if self._match(TokenType.COMMA) else None

            on_overflow: exp.Expr | None = None
            if self._match_text_seq("ON", "OVERFLOW"):
                if self._match_text_seq("ERROR"):
                    on_overflow = exp.var("ERROR")
                else:
                    if not self._match_text_seq("TRUNCATE"):
                        self.raise_error("Expected ERROR or TRUNCATE")
                    at_count = self._curr is not None and self._curr.text.upper() in ("WITH", "WITHOUT")
                    filler = None if at_count else self._parse_bitwise()
                    if self._match_text_seq("WITH", "COUNT"):
                        with_count = True
                    elif self._match_text_seq("WITHOUT", "COUNT"):
                        with_count = False
                    else:
                        self.raise_error("Expected WITH COUNT or WITHOUT COUNT")
                        with_count = False
                    # Built directly: sqlglot rejects a falsy with_count.
                    on_overflow = exp.OverflowTruncateBehavior(this=filler, with_count=with_count)

            return self.expression(exp.GroupConcat(this=this, separator=separator, on_overflow=on_overflow))


#: The dialect instance every parse goes through.
DIALECT = SqlFoldDialect()
