"""Mapping protocols.

The Column Mapper consumes SELECT expressions through ``SelectEnumerator``,
so the SQL-splitting strategy can be replaced without touching the binding
key precedence rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from row_cursor.mapping.enumerator import SelectExpression


@runtime_checkable
class SelectEnumerator(Protocol):
    """Lists the top-level output expressions of a SELECT statement."""

    def enumerate(self, sql: str) -> list[SelectExpression]:
        """Return the expressions in projection order."""
        ...
