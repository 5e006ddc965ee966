"""Column mapper: SELECT expressions to positional binding keys.

Binding key precedence, first match wins:

1. function call with an ``AS`` alias, or a bare alias that is not
   single-quoted -> the alias
2. function call with a single-quoted alias (``SUM(x) 'total'``) -> the
   quoted literal, unquoted
3. column reference with an alias -> the alias
4. qualified column reference -> its last segment
5. bare column reference -> the column name

Other expressions (``CASE``, arithmetic, literals) follow rules 1-2.
Every expression consumes a position, keyed or not, so positions always
follow the statement's physical column order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from row_cursor.core.enums import ExpressionKind
from row_cursor.core.exceptions import NoBindableColumnsError
from row_cursor.mapping.enumerator import SelectClauseEnumerator, SelectExpression
from row_cursor.mapping.protocol import SelectEnumerator


@dataclass(frozen=True)
class ColumnBinding:
    """A 1-based output position and the key used to find its field."""

    position: int
    key: str


def binding_key(expression: SelectExpression) -> str | None:
    """Derive the binding key of one expression, or ``None`` if it has none."""
    if expression.kind is ExpressionKind.COLUMN:
        if expression.alias is not None:
            return expression.alias
        return expression.parts[-1]

    # rules 1 and 2: the enumerator has already stripped alias quoting
    return expression.alias


class ColumnMapper:
    """Resolves SQL text into an ordered binding table.

    Args:
        enumerator: Source of SELECT expressions. Defaults to the built-in
            top-level-comma-aware scanner.
    """

    def __init__(self, enumerator: SelectEnumerator | None = None) -> None:
        self._enumerator = enumerator or SelectClauseEnumerator()

    def resolve(self, sql: str) -> tuple[ColumnBinding, ...]:
        """Return ``(position, key)`` pairs for every keyed expression."""
        bindings: list[ColumnBinding] = []
        for position, expression in enumerate(self._enumerator.enumerate(sql), start=1):
            key = binding_key(expression)
            if key is not None:
                bindings.append(ColumnBinding(position, key))
        return tuple(bindings)

    def match(
        self,
        bindings: Iterable[ColumnBinding],
        field_names: Iterable[str],
        record_type: str = "record",
    ) -> tuple[ColumnBinding, ...]:
        """Keep the bindings whose key is one of *field_names*.

        Keys are compared with exact, case-sensitive equality.

        Raises:
            NoBindableColumnsError: If no binding matches a field.
        """
        bindings = tuple(bindings)
        names = frozenset(field_names)
        matched = tuple(b for b in bindings if b.key in names)
        if not matched:
            raise NoBindableColumnsError(record_type, [b.key for b in bindings])
        return matched
