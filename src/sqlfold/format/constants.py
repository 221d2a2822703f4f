"""Module-level constants used by the SQL formatter."""

from __future__ import annotations

from typing import Final

#: Target line width when the caller does not pass one.
DEFAULT_MAX_WIDTH: Final = 100

#: Columns added for each level of nested content (clause bodies, parenthesized lists, CASE arms, ...).
INDENT: Final = 2
