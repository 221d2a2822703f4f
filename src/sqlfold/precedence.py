"""Operator precedence levels for SQL expressions and set operations.

The ladder follows the binding order of the sqlglot parser behind :func:`sqlfold.parse`, from ``OR`` down to the
``::`` cast, so that whatever the formatter emits parses back into the tree it was rendered from. Two places differ
from the PostgreSQL grammar: ``^`` is a bitwise operator on the ``||`` level rather than exponentiation, and
``COLLATE`` binds like ``+`` and ``-``.

The formatter uses :func:`needs_parens` when *emitting* SQL. Parsed trees already carry explicit
:class:`~sqlfold.nodes.Nested` nodes for every parenthesis the author wrote, so this only matters for trees built by
hand, where a child may bind more loosely than its position requires.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Final

from sqlfold.nodes.expressions import (
    Between,
    BinaryOp,
    BinaryOperator,
    Collate,
    InList,
    InSubquery,
    IsNotNull,
    IsNull,
    UnaryOp,
    UnaryOperator,
)
from sqlfold.nodes.query import SetOperation, SetOperator

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlfold.nodes.base import AstNode


class Assoc(enum.Enum):
    """Operator associativity (mirrors Bison ``%left`` / ``%right`` / ``%nonassoc``)."""

    LEFT = "left"
    RIGHT = "right"
    NONE = "nonassoc"


class Side(enum.Enum):
    """Which side of an operator a child expression appears on."""

    LEFT = "left"
    RIGHT = "right"


# ---------------------------------------------------------------------------
# Precedence levels
# ---------------------------------------------------------------------------
#
# Higher numeric value == tighter binding. Only the relative order matters.
#
#   %left       UNION EXCEPT
#   %left       INTERSECT
#   %left       OR
#   %left       AND
#   %right      NOT
#   %left       '=' NOT_EQUALS
#   %left       '<' '>' LESS_EQUALS GREATER_EQUALS
#   %left       BETWEEN IN_P LIKE ILIKE IS
#   %left       '||' '&' '|' '^'
#   %left       '+' '-' COLLATE
#   %left       '*' '/' '%'
#   %right      UMINUS
#   %left       TYPECAST

UNION: Final = 1
INTERSECT: Final = 2
OR: Final = 3
AND: Final = 4
NOT: Final = 5
EQUALITY: Final = 6
COMPARISON: Final = 7
PATTERN: Final = 8  # BETWEEN, IN, LIKE, ILIKE, IS [NOT] NULL
OP: Final = 9  # || and the bitwise operators
ADD_SUB: Final = 10  # also COLLATE
MUL_DIV: Final = 11
UMINUS: Final = 12
TYPECAST: Final = 13

# Maps each binary operator to (precedence, associativity).
_OP_TABLE: Final[Mapping[BinaryOperator, tuple[int, Assoc]]] = {
    BinaryOperator.OR: (OR, Assoc.LEFT),
    BinaryOperator.AND: (AND, Assoc.LEFT),
    BinaryOperator.EQ: (EQUALITY, Assoc.LEFT),
    BinaryOperator.NOT_EQ: (EQUALITY, Assoc.LEFT),
    BinaryOperator.LT: (COMPARISON, Assoc.LEFT),
    BinaryOperator.GT: (COMPARISON, Assoc.LEFT),
    BinaryOperator.LT_EQ: (COMPARISON, Assoc.LEFT),
    BinaryOperator.GT_EQ: (COMPARISON, Assoc.LEFT),
    BinaryOperator.LIKE: (PATTERN, Assoc.LEFT),
    BinaryOperator.NOT_LIKE: (PATTERN, Assoc.LEFT),
    BinaryOperator.ILIKE: (PATTERN, Assoc.LEFT),
    BinaryOperator.NOT_ILIKE: (PATTERN, Assoc.LEFT),
    BinaryOperator.STRING_CONCAT: (OP, Assoc.LEFT),
    BinaryOperator.BITWISE_AND: (OP, Assoc.LEFT),
    BinaryOperator.BITWISE_OR: (OP, Assoc.LEFT),
    BinaryOperator.BITWISE_XOR: (OP, Assoc.LEFT),
    BinaryOperator.PLUS: (ADD_SUB, Assoc.LEFT),
    BinaryOperator.MINUS: (ADD_SUB, Assoc.LEFT),
    BinaryOperator.MULTIPLY: (MUL_DIV, Assoc.LEFT),
    BinaryOperator.DIVIDE: (MUL_DIV, Assoc.LEFT),
    BinaryOperator.MODULO: (MUL_DIV, Assoc.LEFT),
}

_SET_OP_TABLE: Final[Mapping[SetOperator, int]] = {
    SetOperator.UNION: UNION,
    SetOperator.EXCEPT: UNION,
    SetOperator.INTERSECT: INTERSECT,
}


class Precedence:
    """Precedence and associativity for a syntax tree node.

    Attributes:
        level: Numeric precedence level (higher = tighter binding).
        assoc: Associativity of the operator.
    """

    __slots__ = ("assoc", "level")

    def __init__(self, level: int, assoc: Assoc) -> None:  # noqa: D107
        self.level = level
        self.assoc = assoc

    def __repr__(self) -> str:  # noqa: D105
        return f"Precedence(level={self.level}, assoc={self.assoc!r})"

    def __eq__(self, other: object) -> bool:  # noqa: D105
        if not isinstance(other, Precedence):
            return NotImplemented
        return self.level == other.level and self.assoc == other.assoc

    def __hash__(self) -> int:  # noqa: D105
        return hash((self.level, self.assoc))


#: Sentinel for nodes whose precedence is irrelevant (identifiers, literals, function calls, parenthesized
#: expressions, ...). The level is higher than any real operator so atomic nodes never get wrapped.
ATOMIC: Final = Precedence(level=999, assoc=Assoc.NONE)


def binary_precedence(op: BinaryOperator) -> Precedence:
    """Return the precedence of a binary operator."""
    level, assoc = _OP_TABLE[op]
    return Precedence(level, assoc)


def precedence_of(node: AstNode) -> Precedence:
    """Return how tightly *node* binds when it appears as an operand.

    Example:
        >>> from sqlfold.nodes import BinaryOp, BinaryOperator, Identifier, Ident
        >>> a, b = Identifier(Ident("a")), Identifier(Ident("b"))
        >>> precedence_of(BinaryOp(a, BinaryOperator.AND, b)).level > precedence_of(
        ...     BinaryOp(a, BinaryOperator.OR, b)
        ... ).level
        True
    """
    if isinstance(node, BinaryOp):
        return binary_precedence(node.op)
    if isinstance(node, UnaryOp):
        if node.op is UnaryOperator.NOT:
            return Precedence(NOT, Assoc.RIGHT)
        return Precedence(UMINUS, Assoc.RIGHT)
    if isinstance(node, (Between, InList, InSubquery, IsNull, IsNotNull)):
        return Precedence(PATTERN, Assoc.LEFT)
    if isinstance(node, Collate):
        return Precedence(ADD_SUB, Assoc.LEFT)
    if isinstance(node, SetOperation):
        return Precedence(_SET_OP_TABLE[node.op], Assoc.LEFT)
    return ATOMIC


def needs_parens(parent: AstNode, child: AstNode, *, side: Side | None = None) -> bool:
    """Decide whether *child* needs parentheses when nested inside *parent*.

    * If the child binds **less tightly** than the parent, it needs parens.
    * If they bind **equally** and the parent is ``nonassoc``, the child always needs parens.
    * If they bind **equally** and *side* is provided, a child on the non-associative side of a left- or
      right-associative parent needs parens (e.g. the right operand of ``a - (b + c)``).
    * Otherwise no parens are added.

    Args:
        parent: The outer expression or set operation.
        child: The inner node to test.
        side: Which side of *parent* the *child* appears on.

    Returns:
        ``True`` if the child should be wrapped in ``(``, ``)``.

    Example:
        >>> from sqlfold.nodes import BinaryOp, BinaryOperator, Identifier, Ident
        >>> a, b = Identifier(Ident("a")), Identifier(Ident("b"))
        >>> or_expr = BinaryOp(a, BinaryOperator.OR, b)
        >>> and_expr = BinaryOp(a, BinaryOperator.AND, b)
        >>> needs_parens(and_expr, or_expr)
        True
        >>> needs_parens(or_expr, and_expr)
        False
    """
    p = precedence_of(parent)
    c = precedence_of(child)

    if c.level < p.level:
        return True
    if c.level != p.level:
        return False

    if p.assoc is Assoc.NONE:
        return True
    if side is None:
        return False
    if p.assoc is Assoc.LEFT:
        return side is Side.RIGHT
    return side is Side.LEFT
