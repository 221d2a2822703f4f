"""Parse SQL text into sqlfold syntax trees.

Parsing is delegated to sqlglot (see :mod:`sqlfold.dialect`); this module converts sqlglot's expression trees into
:mod:`sqlfold.nodes`. The converter accepts the query grammar the formatter lays out: ``WITH`` clauses, SELECT
bodies, set operations, ``VALUES`` lists, joins, subqueries, window functions, and ORDER BY / LIMIT / OFFSET / FETCH.
Anything sqlglot understands beyond that is rejected with a :class:`~sqlfold.errors.ParseError` rather than
approximated. A statement that does not start a query is returned as a :class:`~sqlfold.nodes.RawStatement` carrying
its leading keyword, so that callers can report it instead of guessing at a layout.

Identifiers may contain ``{{ ... }}`` template placeholders (as written for dbt or Jinja-templated SQL), so
``{{ schema }}.orders`` and ``events_{{ ds }}`` are single names. sqlglot has no notion of these, so each templated
name is swapped for a plain marker before tokenizing and swapped back while converting.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import TYPE_CHECKING, Final

from sqlglot import exp
from sqlglot.errors import ParseError as SqlglotParseError
from sqlglot.errors import TokenError
from sqlglot.tokens import TokenType

from sqlfold.dialect import COMMA_JOIN, DIALECT, NULLS, OFFSET_ROWS, TYPE_SPELLING, TYPED_STRING
from sqlfold.errors import ParseError
from sqlfold.nodes import (
    Between,
    BinaryOp,
    BinaryOperator,
    Boolean,
    Case,
    Cast,
    Collate,
    CompoundIdentifier,
    Cte,
    CurrentRow,
    DataType,
    Derived,
    Exists,
    ExprWithAlias,
    Extract,
    Fetch,
    Following,
    Function,
    Ident,
    Identifier,
    InList,
    InSubquery,
    IsNotNull,
    IsNull,
    Join,
    JoinOperator,
    ListAgg,
    NaturalConstraint,
    Nested,
    NestedJoin,
    NoConstraint,
    Null,
    Number,
    ObjectName,
    Offset,
    OffsetRows,
    OnConstraint,
    OnOverflowError,
    OnOverflowTruncate,
    OrderByExpr,
    Placeholder,
    Preceding,
    QualifiedWildcard,
    Query,
    RawStatement,
    Select,
    SetOperation,
    SetOperator,
    StringLiteral,
    Subquery,
    Table,
    TableAlias,
    TableWithJoins,
    Top,
    TypedString,
    UnaryOp,
    UnaryOperator,
    UnnamedExpr,
    UsingConstraint,
    Values,
    Wildcard,
    WindowFrame,
    WindowFrameUnits,
    WindowSpec,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlglot.tokens import Token

    from sqlfold.nodes import (
        Expr,
        JoinConstraint,
        ListAggOnOverflow,
        SelectItem,
        SetExpr,
        Statement,
        TableFactor,
        WindowFrameBound,
    )

logger = logging.getLogger(__name__)

#: Names with embedded ``{{ ... }}`` template placeholders.
TEMPLATE_NAME_PATTERN: Final = r"[\w$#@]*(?:\{\{[^{}]*\}\}[\w$#@]*)+"

_TEMPLATE_RE: Final = re.compile(TEMPLATE_NAME_PATTERN)
_MARKER_RE: Final = re.compile(r"__sqlfold_template_(\d+)__")
_KIND_RE: Final = re.compile(r"[A-Za-z]\w*")
_POSITIONAL_PARAMETER_RE: Final = re.compile(r"\$\d+")

_QUERY_START: Final = frozenset({TokenType.SELECT, TokenType.WITH, TokenType.VALUES, TokenType.L_PAREN})
_QUERY_NODES: Final = (exp.Select, exp.SetOperation, exp.Values, exp.Subquery)
_QUOTES: Final = frozenset({'"', "`", "["})

_BINARY_OPERATORS: Final[dict[type[exp.Expr], BinaryOperator]] = {
    exp.Add: BinaryOperator.PLUS,
    exp.Sub: BinaryOperator.MINUS,
    exp.Mul: BinaryOperator.MULTIPLY,
    exp.Div: BinaryOperator.DIVIDE,
    exp.Mod: BinaryOperator.MODULO,
    exp.DPipe: BinaryOperator.STRING_CONCAT,
    exp.BitwiseAnd: BinaryOperator.BITWISE_AND,
    exp.BitwiseOr: BinaryOperator.BITWISE_OR,
    exp.BitwiseXor: BinaryOperator.BITWISE_XOR,
    exp.EQ: BinaryOperator.EQ,
    exp.NEQ: BinaryOperator.NOT_EQ,
    exp.LT: BinaryOperator.LT,
    exp.GT: BinaryOperator.GT,
    exp.LTE: BinaryOperator.LT_EQ,
    exp.GTE: BinaryOperator.GT_EQ,
    exp.And: BinaryOperator.AND,
    exp.Or: BinaryOperator.OR,
}

_PATTERN_OPERATORS: Final[dict[tuple[type[exp.Expr], bool], BinaryOperator]] = {
    (exp.Like, False): BinaryOperator.LIKE,
    (exp.Like, True): BinaryOperator.NOT_LIKE,
    (exp.ILike, False): BinaryOperator.ILIKE,
    (exp.ILike, True): BinaryOperator.NOT_ILIKE,
}

_SET_OPERATORS: Final[dict[type[exp.Expr], SetOperator]] = {
    exp.Union: SetOperator.UNION,
    exp.Intersect: SetOperator.INTERSECT,
    exp.Except: SetOperator.EXCEPT,
}

_JOIN_SIDES: Final = {
    "LEFT": JoinOperator.LEFT_OUTER,
    "RIGHT": JoinOperator.RIGHT_OUTER,
    "FULL": JoinOperator.FULL_OUTER,
}

_SELECT_ARGS: Final = frozenset({
    "expressions",
    "distinct",
    "limit",
    "from_",
    "joins",
    "where",
    "group",
    "having",
    "order",
    "offset",
    "with_",
})
_QUERY_MODIFIER_ARGS: Final = frozenset({"with_", "order", "limit", "offset"})


def parse(sql: str) -> list[Statement]:
    """Parse a string of ``;``-separated SQL statements.

    Args:
        sql: SQL text. Empty statements (stray semicolons) are skipped.

    Returns:
        One node per statement: a :class:`~sqlfold.nodes.Query` for queries, a
        :class:`~sqlfold.nodes.RawStatement` for anything else.

    Raises:
        ParseError: If the text is not valid in the supported grammar.

    Example:
        >>> [type(s).__name__ for s in parse("SELECT 1; INSERT INTO t VALUES (1)")]
        ['Query', 'RawStatement']
    """
    source = _Source(sql)
    try:
        tokens = DIALECT.tokenize(source.text)
    except TokenError as exc:
        cause = exc.__cause__ if isinstance(exc.__cause__, TokenError) else exc
        raise ParseError(str(cause)) from exc

    converter = _Converter(source)
    statements: list[Statement] = []
    for chunk in _split_statements(tokens):
        statements.append(converter.statement(chunk))
    return statements


def _split_statements(tokens: Iterable[Token]) -> list[list[Token]]:
    chunks: list[list[Token]] = [[]]
    for token in tokens:
        if token.token_type == TokenType.SEMICOLON:
            chunks.append([])
        else:
            chunks[-1].append(token)
    return [chunk for chunk in chunks if chunk]


class _Source:
    """SQL text with its templated names replaced by markers sqlglot can tokenize.

    Attributes:
        sql: The text as the caller wrote it.
        text: The text handed to sqlglot.
    """

    def __init__(self, sql: str) -> None:
        self.sql = sql
        self._templates: list[str] = []
        # (marker start, marker end, template start, template end) for every replaced name
        self._spans: list[tuple[int, int, int, int]] = []
        pieces: list[str] = []
        last = 0
        length = 0
        for match in _TEMPLATE_RE.finditer(sql):
            pieces.append(sql[last : match.start()])
            length += match.start() - last
            marker = f"__sqlfold_template_{len(self._templates)}__"
            self._spans.append((length, length + len(marker), match.start(), match.end()))
            self._templates.append(match.group())
            pieces.append(marker)
            length += len(marker)
            last = match.end()
        pieces.append(sql[last:])
        self.text = "".join(pieces)

    def restore(self, value: str) -> str:
        """Put the original templated names back into *value*."""
        if not self._templates:
            return value
        return _MARKER_RE.sub(lambda m: self._templates[int(m.group(1))], value)

    def original_offset(self, pos: int) -> int:
        """Map a 0-based offset into :attr:`text` back to the same place in :attr:`sql`."""
        shift = 0
        for new_start, new_end, old_start, old_end in self._spans:
            if pos < new_start:
                break
            if pos < new_end:
                return old_start
            shift = old_end - new_end
        return pos + shift

    def slice(self, start: int, end: int) -> str:
        """The restored source between two inclusive token offsets."""
        return self.restore(self.text[start : end + 1])


class _Converter:
    """Turns sqlglot trees for one SQL string into sqlfold nodes."""

    def __init__(self, source: _Source) -> None:
        self._source = source
        self._parser = DIALECT.parser(error_message_context=len(source.text) + 1)

    # ── Statements ────────────────────────────────────────────────

    def statement(self, tokens: list[Token]) -> Statement:
        first = tokens[0]
        if first.token_type in _QUERY_START:
            node = self._parse_tokens(tokens)
            if isinstance(node, _QUERY_NODES):
                return self._query(node)
            if first.token_type != TokenType.WITH or node is None:
                raise self._unsupported(node if node is not None else first)

        word = self._source.slice(first.start, first.end)
        if first.token_type in (TokenType.STRING, TokenType.IDENTIFIER) or not _KIND_RE.fullmatch(word):
            raise ParseError(
                f'syntax error at or near "{word}"', cursorpos=self._source.original_offset(first.start) + 1
            )
        logger.debug("%s statement kept as raw text", word.lower())
        return RawStatement(kind=word.lower(), sql=self._source.slice(first.start, tokens[-1].end))

    def _parse_tokens(self, tokens: list[Token]) -> exp.Expr | None:
        try:
            nodes = self._parser.parse(tokens, self._source.text)
        except SqlglotParseError as exc:
            raise self._syntax_error(exc) from exc
        return nodes[0] if nodes else None

    def _syntax_error(self, exc: SqlglotParseError) -> ParseError:
        if not exc.errors:
            return ParseError(str(exc))
        error = exc.errors[0]
        description = error.get("description") or str(exc)
        highlight = self._source.restore(error.get("highlight") or "")
        start = len(error.get("start_context") or "")
        cursorpos = self._source.original_offset(start) + 1
        if highlight:
            return ParseError(f'{description} at or near "{highlight}"', cursorpos=cursorpos)
        return ParseError(f"{description} at end of input", cursorpos=cursorpos)

    def _unsupported(self, node: exp.Expr | Token, what: str | None = None) -> ParseError:
        if isinstance(node, exp.Expr):
            starts = [n.meta_get("start") for n in node.walk() if n.meta_get("start") is not None]
            cursorpos = self._source.original_offset(min(starts)) + 1 if starts else 0
            return ParseError(f"unsupported syntax: {what or node.key}", cursorpos=cursorpos)
        return ParseError(
            f'unsupported syntax at or near "{self._source.slice(node.start, node.end)}"',
            cursorpos=self._source.original_offset(node.start) + 1,
        )

    def _check_args(self, node: exp.Expr, allowed: Iterable[str]) -> None:
        """Reject *node* if it sets any argument outside *allowed*."""
        allowed = set(allowed)
        for key, value in node.args.items():
            if key not in allowed and value not in (None, False, []):
                located = value if isinstance(value, exp.Expr) else node
                if isinstance(value, list) and isinstance(value[0], exp.Expr):
                    located = value[0]
                raise self._unsupported(located, f"{node.key} {key.rstrip('_').replace('_', ' ')}")

    # ── Queries ───────────────────────────────────────────────────

    def _query(self, node: exp.Expr) -> Query:
        ctes: tuple[Cte, ...] = ()
        recursive = False
        with_ = node.args.get("with_")
        if with_ is not None:
            self._check_args(with_, {"expressions", "recursive"})
            ctes = tuple(self._cte(cte) for cte in with_.expressions)
            recursive = bool(with_.args.get("recursive"))

        order = node.args.get("order")
        limit: Expr | None = None
        fetch: Fetch | None = None
        limit_node = node.args.get("limit")
        if isinstance(limit_node, exp.Fetch):
            fetch = self._fetch(limit_node)
        elif isinstance(limit_node, exp.Limit) and not limit_node.meta.get("top"):
            self._check_args(limit_node, {"expression"})
            if not limit_node.is_limit_all:
                limit = self._expr(limit_node.expression)

        offset_node = node.args.get("offset")
        offset: Offset | None = None
        if offset_node is not None:
            self._check_args(offset_node, {"expression"})
            rows = OffsetRows[offset_node.meta.get(OFFSET_ROWS, "NONE")]
            offset = Offset(self._expr(offset_node.expression), rows)

        return Query(
            body=self._body(node),
            ctes=ctes,
            recursive=recursive,
            order_by=self._order_by(order) if order is not None else (),
            limit=limit,
            offset=offset,
            fetch=fetch,
        )

    def _body(self, node: exp.Expr) -> SetExpr:
        if isinstance(node, exp.Select):
            return self._select(node)
        if isinstance(node, exp.SetOperation):
            return self._set_operation(node)
        if isinstance(node, exp.Values):
            self._check_args(node, {"expressions", "order", "limit", "offset"})
            return self._values(node)
        if isinstance(node, exp.Subquery):
            self._check_args(node, _QUERY_MODIFIER_ARGS | {"this"})
            return self._query(node.this)
        raise self._unsupported(node)

    def _has_modifiers(self, node: exp.Expr) -> bool:
        limit = node.args.get("limit")
        return any(node.args.get(key) for key in ("with_", "order", "offset")) or (
            limit is not None and not limit.meta.get("top")
        )

    def _subquery_query(self, node: exp.Subquery) -> Query:
        """The query inside parentheses, with any modifiers written after the inner query."""
        if node.args.get("alias") is not None:
            raise self._unsupported(node.args["alias"])
        if self._has_modifiers(node):
            return self._query(node)
        return self._query(node.this)

    def _cte(self, node: exp.CTE) -> Cte:
        self._check_args(node, {"this", "alias"})
        return Cte(alias=self._table_alias(node.args["alias"]), query=self._query(node.this))

    def _set_operand(self, node: exp.Expr) -> SetExpr:
        if isinstance(node, exp.Subquery):
            return self._subquery_query(node)
        if self._has_modifiers(node):
            return self._query(node)
        return self._body(node)

    def _set_operation(self, node: exp.SetOperation) -> SetExpr:
        self._check_args(node, {"this", "expression", "distinct"} | _QUERY_MODIFIER_ARGS)
        op = _SET_OPERATORS.get(type(node))
        if op is None:
            raise self._unsupported(node)
        left = self._set_operand(node.this)
        right = self._set_operand(node.expression)
        all_ = not node.args.get("distinct")
        if op is SetOperator.INTERSECT:
            return _bind_intersect(left, right, all_)
        return SetOperation(left=left, op=op, right=right, all=all_)

    def _values(self, node: exp.Values) -> Values:
        rows: list[tuple[Expr, ...]] = []
        for row in node.expressions:
            if not isinstance(row, exp.Tuple):
                raise self._unsupported(row)
            rows.append(tuple(self._expr(item) for item in row.expressions))
        return Values(tuple(rows))

    def _fetch(self, node: exp.Fetch) -> Fetch:
        options = node.args.get("limit_options")
        count = node.args.get("count")
        return Fetch(
            self._expr(count) if count is not None else None,
            percent=bool(options and options.args.get("percent")),
            with_ties=bool(options and options.args.get("with_ties")),
        )

    def _order_by(self, node: exp.Order) -> tuple[OrderByExpr, ...]:
        self._check_args(node, {"expressions"})
        return tuple(self._order_by_expr(item) for item in node.expressions)

    def _order_by_expr(self, node: exp.Ordered) -> OrderByExpr:
        self._check_args(node, {"this", "desc", "nulls_first"})
        desc = node.args.get("desc")
        nulls = node.meta.get(NULLS)
        return OrderByExpr(
            self._expr(node.this),
            asc=None if desc is None else not desc,
            nulls_first=None if nulls is None else nulls == "FIRST",
        )

    def _select(self, node: exp.Select) -> Select:
        self._check_args(node, _SELECT_ARGS)
        distinct = node.args.get("distinct")
        if distinct is not None:
            self._check_args(distinct, set())

        top: Top | None = None
        limit = node.args.get("limit")
        if limit is not None and limit.meta.get("top"):
            top = self._top(limit)

        group_by: tuple[Expr, ...] = ()
        group = node.args.get("group")
        if group is not None:
            self._check_args(group, {"expressions"})
            group_by = tuple(self._expr(item) for item in group.expressions)

        where = node.args.get("where")
        having = node.args.get("having")
        return Select(
            projection=tuple(self._select_item(item) for item in node.expressions),
            from_=self._from(node),
            selection=self._expr(where.this) if where is not None else None,
            group_by=group_by,
            having=self._expr(having.this) if having is not None else None,
            distinct=distinct is not None,
            top=top,
        )

    def _top(self, node: exp.Limit) -> Top:
        self._check_args(node, {"expression", "limit_options"})
        options = node.args.get("limit_options")
        if options is not None:
            self._check_args(options, {"percent", "with_ties"})
        return Top(
            self._expr(node.expression),
            percent=bool(options and options.args.get("percent")),
            with_ties=bool(options and options.args.get("with_ties")),
        )

    def _select_item(self, node: exp.Expr) -> SelectItem:
        if isinstance(node, exp.Alias):
            self._check_args(node, {"this", "alias"})
            return ExprWithAlias(self._expr(node.this), self._ident(node.args["alias"]))
        expr = self._expr(node)
        if isinstance(expr, (Wildcard, QualifiedWildcard)):
            return expr
        return UnnamedExpr(expr)

    # ── FROM items ────────────────────────────────────────────────

    def _from(self, node: exp.Select) -> tuple[TableWithJoins, ...]:
        from_ = node.args.get("from_")
        if from_ is None:
            if node.args.get("joins"):
                raise self._unsupported(node.args["joins"][0])
            return ()
        self._check_args(from_, {"this"})

        groups: list[tuple[TableFactor, list[Join]]] = [(self._table_factor(from_.this), [])]
        for join in node.args.get("joins") or []:
            if join.meta.get(COMMA_JOIN):
                self._check_args(join, {"this"})
                groups.append((self._table_factor(join.this), []))
            else:
                groups[-1][1].append(self._join(join))
        return tuple(TableWithJoins(relation, tuple(joins)) for relation, joins in groups)

    def _table_with_joins(self, node: exp.Expr) -> TableWithJoins:
        joins: list[Join] = []
        for join in node.args.get("joins") or []:
            if join.meta.get(COMMA_JOIN):
                raise self._unsupported(join)
            joins.append(self._join(join))
        return TableWithJoins(self._relation(node), tuple(joins))

    def _join(self, node: exp.Join) -> Join:
        self._check_args(node, {"this", "on", "using", "method", "side", "kind"})
        relation = node.this
        if isinstance(relation, exp.Lateral) and relation.args.get("cross_apply") is not None:
            operator = JoinOperator.CROSS_APPLY if relation.args["cross_apply"] else JoinOperator.OUTER_APPLY
            return Join(self._applied(relation), operator)

        side = (node.args.get("side") or "").upper()
        kind = (node.args.get("kind") or "").upper()
        if side in _JOIN_SIDES and kind in ("", "OUTER"):
            operator = _JOIN_SIDES[side]
        elif not side and kind == "CROSS":
            operator = JoinOperator.CROSS
        elif not side and kind in ("", "INNER"):
            operator = JoinOperator.INNER
        else:
            raise self._unsupported(node)

        constraint: JoinConstraint
        method = (node.args.get("method") or "").upper()
        if method:
            if method != "NATURAL":
                raise self._unsupported(node)
            constraint = NaturalConstraint()
        elif node.args.get("on") is not None:
            constraint = OnConstraint(self._expr(node.args["on"]))
        elif node.args.get("using"):
            constraint = UsingConstraint(tuple(self._ident(column) for column in node.args["using"]))
        else:
            constraint = NoConstraint()
        return Join(self._table_factor(relation), operator, constraint)

    def _table_factor(self, node: exp.Expr) -> TableFactor:
        if node.args.get("joins"):
            return NestedJoin(self._table_with_joins(node))
        return self._relation(node)

    def _relation(self, node: exp.Expr) -> TableFactor:
        alias = node.args.get("alias")
        if isinstance(node, exp.Table):
            self._check_args(node, {"this", "db", "catalog", "alias", "hints", "joins"})
            parts = [self._ident(node.args[key]) for key in ("catalog", "db") if node.args.get(key) is not None]
            args: tuple[Expr, ...] = ()
            this = node.this
            if isinstance(this, exp.Anonymous):
                parts.append(self._function_name(this))
                args = tuple(self._expr(arg) for arg in this.expressions)
            else:
                parts.extend(self._name_parts(this))
            return Table(
                ObjectName(tuple(parts)),
                alias=self._table_alias(alias),
                args=args,
                with_hints=self._hints(node.args.get("hints") or []),
            )
        if isinstance(node, exp.Subquery):
            self._check_args(node, _QUERY_MODIFIER_ARGS | {"this", "alias", "joins"})
            inner = node.this
            if isinstance(inner, exp.Table) or (isinstance(inner, exp.Subquery) and inner.args.get("joins")):
                if alias is not None or self._has_modifiers(node):
                    raise self._unsupported(node)
                return NestedJoin(self._table_with_joins(inner))
            query = self._query(node) if self._has_modifiers(node) else self._query(inner)
            return Derived(query, alias=self._table_alias(alias))
        if isinstance(node, exp.Lateral):
            self._check_args(node, {"this", "alias"})
            if not isinstance(node.this, exp.Subquery):
                raise self._unsupported(node)
            subquery = self._query(node.this) if self._has_modifiers(node.this) else self._query(node.this.this)
            return Derived(subquery, lateral=True, alias=self._table_alias(alias))
        if isinstance(node, exp.Values):
            self._check_args(node, {"expressions", "alias"})
            return Derived(Query(body=self._values(node)), alias=self._table_alias(alias))
        raise self._unsupported(node)

    def _applied(self, node: exp.Lateral) -> TableFactor:
        """The right-hand side of ``CROSS APPLY`` / ``OUTER APPLY``."""
        self._check_args(node, {"this", "alias", "cross_apply"})
        this = node.this
        alias = self._table_alias(node.args.get("alias"))
        if isinstance(this, exp.Subquery):
            query = self._query(this) if self._has_modifiers(this) else self._query(this.this)
            return Derived(query, alias=alias)
        if isinstance(this, exp.Anonymous):
            name = ObjectName((self._function_name(this),))
            return Table(name, alias=alias, args=tuple(self._expr(arg) for arg in this.expressions))
        return Table(ObjectName(tuple(self._name_parts(this))), alias=alias)

    def _hints(self, hints: list[exp.Expr]) -> tuple[Expr, ...]:
        result: list[Expr] = []
        for hint in hints:
            if not isinstance(hint, exp.WithTableHint):
                raise self._unsupported(hint)
            for item in hint.expressions:
                if isinstance(item, exp.Var):
                    result.append(Identifier(Ident(self._source.restore(item.name))))
                else:
                    result.append(self._expr(item))
        return tuple(result)

    def _table_alias(self, node: exp.TableAlias | None) -> TableAlias | None:
        if node is None:
            return None
        if node.this is None:
            raise self._unsupported(node)
        return TableAlias(self._ident(node.this), tuple(self._ident(column) for column in node.columns))

    # ── Names ─────────────────────────────────────────────────────

    def _ident(self, node: exp.Expr) -> Ident:
        if not isinstance(node, exp.Identifier):
            raise self._unsupported(node)
        start = node.meta.get("start")
        if node.quoted:
            quote = self._source.text[start] if start is not None else '"'
            return Ident(self._source.restore(node.this), quote_style=quote if quote in _QUOTES else '"')
        if start is not None:
            return Ident(self._source.slice(start, node.meta["end"]))
        return Ident(self._source.restore(node.this))

    def _name_parts(self, node: exp.Expr) -> list[Ident]:
        if isinstance(node, exp.Identifier):
            return [self._ident(node)]
        if isinstance(node, (exp.Column, exp.Dot)):
            return [self._ident(part) for part in node.parts]
        raise self._unsupported(node)

    def _function_name(self, node: exp.Anonymous) -> Ident:
        if isinstance(node.this, exp.Identifier):
            return self._ident(node.this)
        start = node.meta.get("start")
        if start is not None:
            return Ident(self._source.slice(start, node.meta["end"]))
        return Ident(self._source.restore(node.name))

    def _data_type(self, node: exp.Expr) -> DataType:
        spelling = node.meta.get(TYPE_SPELLING)
        if spelling is None:
            return DataType(node.sql(dialect=DIALECT))
        name, args = spelling
        return DataType(self._source.restore(name), tuple(self._source.restore(arg) for arg in args))

    # ── Expressions ───────────────────────────────────────────────

    def _expr(self, node: exp.Expr) -> Expr:  # noqa: C901, PLR0911, PLR0912
        op = _BINARY_OPERATORS.get(type(node))
        if op is not None:
            return BinaryOp(self._expr(node.this), op, self._expr(node.expression))
        if isinstance(node, (exp.Like, exp.ILike)):
            self._check_args(node, {"this", "expression", "negate"})
            op = _PATTERN_OPERATORS[type(node), bool(node.args.get("negate"))]
            return BinaryOp(self._expr(node.this), op, self._expr(node.expression))

        if isinstance(node, exp.Column):
            return self._column(node)
        if isinstance(node, exp.Dot):
            return self._dot(node)
        if isinstance(node, exp.Literal):
            if node.is_string:
                return StringLiteral(self._source.restore(node.this))
            return Number(node.this)
        if isinstance(node, exp.Boolean):
            return Boolean(bool(node.this))
        if isinstance(node, exp.Null):
            return Null()
        if isinstance(node, exp.Star):
            self._check_args(node, set())
            return Wildcard()
        if isinstance(node, exp.Placeholder):
            self._check_args(node, {"this"})
            return Placeholder(f":{node.this}" if node.this else "?")
        if isinstance(node, exp.Paren):
            return Nested(self._expr(node.this))
        if isinstance(node, exp.Subquery):
            return Subquery(self._subquery_query(node))
        if isinstance(node, exp.Exists):
            self._check_args(node, {"this"})
            return Exists(self._query(node.this))

        if isinstance(node, exp.Neg):
            operand = self._expr(node.this)
            if isinstance(operand, Number) and not operand.value.startswith("-"):
                return Number(f"-{operand.value}")
            return UnaryOp(UnaryOperator.MINUS, operand)
        if isinstance(node, exp.Not):
            return self._not(node)
        if isinstance(node, exp.In):
            return self._in(node, negated=False)
        if isinstance(node, exp.Between):
            return self._between(node, negated=False)
        if isinstance(node, exp.Is):
            self._check_args(node, {"this", "expression", "negate"})
            if not isinstance(node.expression, exp.Null):
                raise self._unsupported(node)
            return IsNotNull(self._expr(node.this)) if node.args.get("negate") else IsNull(self._expr(node.this))
        if isinstance(node, exp.Collate):
            return Collate(self._expr(node.this), self._collation(node.expression))

        if isinstance(node, exp.Case):
            return self._case(node)
        if isinstance(node, exp.Cast):
            return self._cast(node)
        if isinstance(node, exp.Extract):
            if not isinstance(node.this, exp.Var):
                raise self._unsupported(node)
            return Extract(node.this.name, self._expr(node.expression))
        if isinstance(node, exp.Anonymous):
            return self._function(node)
        if isinstance(node, exp.Window):
            return self._window(node)
        if isinstance(node, exp.GroupConcat):
            return self._listagg(node)
        if isinstance(node, exp.WithinGroup):
            listagg = self._expr(node.this)
            if not isinstance(listagg, ListAgg) or not isinstance(node.expression, exp.Order):
                raise self._unsupported(node)
            return dataclasses.replace(listagg, within_group=self._order_by(node.expression))
        raise self._unsupported(node)

    def _column(self, node: exp.Column) -> Expr:
        self._check_args(node, {"this", "table", "db", "catalog"})
        if isinstance(node.this, exp.Star):
            self._check_args(node.this, set())
            return QualifiedWildcard(ObjectName(tuple(self._ident(part) for part in node.parts[:-1])))
        parts = tuple(self._ident(part) for part in node.parts)
        if len(parts) > 1:
            return CompoundIdentifier(parts)
        ident = parts[0]
        if ident.quote_style is None and _POSITIONAL_PARAMETER_RE.fullmatch(ident.value):
            return Placeholder(ident.value)
        return Identifier(ident)

    def _dot(self, node: exp.Dot) -> Expr:
        if isinstance(node.expression, exp.Anonymous):
            function = self._function(node.expression)
            name = ObjectName((*self._name_parts(node.this), *function.name.parts))
            return dataclasses.replace(function, name=name)
        parts = node.parts
        if isinstance(parts[-1], exp.Star):
            return QualifiedWildcard(ObjectName(tuple(self._ident(part) for part in parts[:-1])))
        return CompoundIdentifier(tuple(self._ident(part) for part in parts))

    def _not(self, node: exp.Not) -> Expr:
        inner = node.this
        if isinstance(inner, exp.In):
            return self._in(inner, negated=True)
        if isinstance(inner, exp.Between):
            return self._between(inner, negated=True)
        return UnaryOp(UnaryOperator.NOT, self._expr(inner))

    def _in(self, node: exp.In, *, negated: bool) -> Expr:
        self._check_args(node, {"this", "expressions", "query"})
        query = node.args.get("query")
        if query is not None:
            return InSubquery(self._expr(node.this), self._subquery_query(query), negated=negated)
        return InList(self._expr(node.this), tuple(self._expr(item) for item in node.expressions), negated=negated)

    def _between(self, node: exp.Between, *, negated: bool) -> Between:
        self._check_args(node, {"this", "low", "high"})
        return Between(self._expr(node.this), negated, self._expr(node.args["low"]), self._expr(node.args["high"]))

    def _collation(self, node: exp.Expr) -> ObjectName:
        if isinstance(node, exp.Var):
            return ObjectName((Ident(self._source.restore(node.name)),))
        return ObjectName(tuple(self._name_parts(node)))

    def _case(self, node: exp.Case) -> Case:
        self._check_args(node, {"this", "ifs", "default"})
        conditions: list[Expr] = []
        results: list[Expr] = []
        for branch in node.args["ifs"]:
            self._check_args(branch, {"this", "true"})
            conditions.append(self._expr(branch.this))
            results.append(self._expr(branch.args["true"]))
        operand = node.this
        default = node.args.get("default")
        return Case(
            self._expr(operand) if operand is not None else None,
            tuple(conditions),
            tuple(results),
            self._expr(default) if default is not None else None,
        )

    def _cast(self, node: exp.Cast) -> Expr:
        self._check_args(node, {"this", "to", "safe"})
        data_type = self._data_type(node.args["to"])
        if node.meta.get(TYPED_STRING):
            return TypedString(data_type, self._source.restore(node.this.this))
        return Cast(self._expr(node.this), data_type)

    def _function(self, node: exp.Anonymous) -> Function:
        args = list(node.expressions)
        distinct = bool(args) and isinstance(args[0], exp.Distinct)
        if distinct:
            self._check_args(args[0], {"expressions"})
            args = [*args[0].expressions, *args[1:]]
        return Function(
            ObjectName((self._function_name(node),)),
            args=tuple(self._expr(arg) for arg in args),
            distinct=distinct,
        )

    def _window(self, node: exp.Window) -> Expr:
        self._check_args(node, {"this", "partition_by", "order", "spec", "over"})
        function = self._expr(node.this)
        if not isinstance(function, Function) or (node.args.get("over") or "").upper() != "OVER":
            raise self._unsupported(node)

        frame: WindowFrame | None = None
        spec = node.args.get("spec")
        if spec is not None:
            self._check_args(spec, {"kind", "start", "start_side", "end", "end_side"})
            end = spec.args.get("end")
            units = (spec.args.get("kind") or "").upper()
            if units not in WindowFrameUnits.__members__:
                raise self._unsupported(spec)
            frame = WindowFrame(
                WindowFrameUnits[units],
                self._frame_bound(spec, spec.args.get("start"), spec.args.get("start_side")),
                self._frame_bound(spec, end, spec.args.get("end_side")) if end is not None else None,
            )
        order = node.args.get("order")
        over = WindowSpec(
            partition_by=tuple(self._expr(item) for item in node.args.get("partition_by") or []),
            order_by=self._order_by(order) if order is not None else (),
            window_frame=frame,
        )
        return dataclasses.replace(function, over=over)

    def _frame_bound(self, spec: exp.WindowSpec, value: exp.Expr | str | None, side: str | None) -> WindowFrameBound:
        if value == "CURRENT ROW":
            return CurrentRow()
        offset: Expr | None = None
        if isinstance(value, exp.Expr):
            offset = self._expr(value)
        elif value != "UNBOUNDED":
            raise self._unsupported(spec)
        side = (side or "").upper()
        if side == "PRECEDING":
            return Preceding(offset)
        if side == "FOLLOWING":
            return Following(offset)
        raise self._unsupported(spec)

    def _listagg(self, node: exp.GroupConcat) -> ListAgg:
        self._check_args(node, {"this", "separator", "on_overflow"})
        this = node.this
        distinct = isinstance(this, exp.Distinct)
        if distinct:
            if len(this.expressions) != 1:
                raise self._unsupported(this)
            this = this.expressions[0]
        separator = node.args.get("separator")
        return ListAgg(
            self._expr(this),
            distinct=distinct,
            separator=self._expr(separator) if separator is not None else None,
            on_overflow=self._on_overflow(node.args.get("on_overflow")),
        )

    def _on_overflow(self, node: exp.Expr | None) -> ListAggOnOverflow | None:
        if node is None:
            return None
        if isinstance(node, exp.Var) and node.name.upper() == "ERROR":
            return OnOverflowError()
        if isinstance(node, exp.OverflowTruncateBehavior):
            filler = node.this
            return OnOverflowTruncate(
                self._expr(filler) if filler is not None else None,
                with_count=bool(node.args.get("with_count")),
            )
        raise self._unsupported(node)


def _bind_intersect(left: SetExpr, right: SetExpr, all_: bool) -> SetExpr:
    """Build ``left INTERSECT right`` with INTERSECT binding tighter than a UNION or EXCEPT on its left."""
    if isinstance(left, SetOperation) and left.op is not SetOperator.INTERSECT:
        return SetOperation(left.left, left.op, _bind_intersect(left.right, right, all_), left.all)
    return SetOperation(left=left, op=SetOperator.INTERSECT, right=right, all=all_)
