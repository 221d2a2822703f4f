"""Visitor pattern for sqlfold syntax trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlfold.errors import UnsupportedConstructError

if TYPE_CHECKING:
    from sqlfold.nodes.base import AstNode


class Visitor:
    """Base class for syntax tree visitors that compute a value per node.

    Subclass and define ``visit_<TypeName>`` methods (e.g. ``visit_Select``, ``visit_BinaryOp``) for the node types you
    handle. :meth:`visit` dispatches on the node's class name and returns whatever the handler returns. A node with no
    handler goes to :meth:`generic_visit`, which raises, so a visitor never silently skips a construct it does not
    know::

        class ColumnCounter(Visitor):
            def visit_Select(self, node):
                return len(node.projection)


        ColumnCounter().visit(parse("SELECT a, b FROM t")[0].body)  # 2
    """

    def visit(self, node: AstNode) -> Any:
        """Dispatch *node* to ``visit_<TypeName>`` or :meth:`generic_visit`.

        Args:
            node: Any syntax tree node.

        Returns:
            The handler's result.
        """
        handler = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return handler(node)

    def generic_visit(self, node: AstNode) -> Any:
        """Handle a node type that has no ``visit_<TypeName>`` method.

        Raises:
            UnsupportedConstructError: Always; override to provide a fallback.
        """
        raise UnsupportedConstructError(type(node).__name__)
