"""Row binder.

Wires result column positions to record fields once per execution, then
copies each fetched row into the same record in place.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from row_cursor.core.exceptions import BindingError
from row_cursor.core.logging import get_logger
from row_cursor.mapping.columns import ColumnBinding, ColumnMapper
from row_cursor.mapping.fields import field_table

log = get_logger(__name__)


class BoundRow:
    """The established bindings between one statement and one record."""

    __slots__ = ("_record", "_bindings", "_slots")

    def __init__(self, record: Any, bindings: tuple[ColumnBinding, ...]) -> None:
        self._record = record
        self._bindings = bindings
        self._slots = tuple((b.position - 1, b.key) for b in bindings)

    @property
    def record(self) -> Any:
        return self._record

    @property
    def bindings(self) -> tuple[ColumnBinding, ...]:
        return self._bindings

    def transfer(self, row: Sequence[Any] | Mapping[str, Any]) -> None:
        """Assign the bound columns of *row* to the record's fields."""
        if isinstance(row, Mapping):
            row = tuple(row.values())
        record = self._record
        for index, name in self._slots:
            setattr(record, name, row[index])


class RowBinder:
    """Matches a binding table against a record type's field table.

    Args:
        mapper: Used for key matching; a default ``ColumnMapper`` otherwise.
    """

    def __init__(self, mapper: ColumnMapper | None = None) -> None:
        self._mapper = mapper or ColumnMapper()

    def bind(
        self,
        bindings: Iterable[ColumnBinding],
        record: Any,
        statement: Any = None,
    ) -> BoundRow:
        """Establish the bindings for *record* on *statement*.

        When *statement* exposes a DB-API ``description``, every bound
        position must exist in it.

        Raises:
            RecordTypeError: If the record's type cannot receive values.
            NoBindableColumnsError: If no binding key names a field.
            BindingError: If a bound position is outside the projection.
        """
        table = field_table(type(record))
        matched = self._mapper.match(bindings, table.names, table.type_name)

        description = getattr(statement, "description", None)
        if description is not None:
            width = len(description)
            beyond = [b for b in matched if b.position > width]
            if beyond:
                raise BindingError(
                    f"Statement returned {width} columns but {table.type_name} "
                    f"binds {[(b.position, b.key) for b in beyond]}; the projection "
                    "does not match the SELECT list"
                )
            for b in matched:
                label = description[b.position - 1][0]
                if isinstance(label, str) and label.lower() != b.key.lower():
                    log.warning(
                        "Column %d is labeled %r by the driver but bound as %r",
                        b.position,
                        label,
                        b.key,
                    )

        log.debug(
            "Bound %d columns to %s",
            len(matched),
            table.type_name,
            extra={"bindings": [(b.position, b.key) for b in matched]},
        )
        return BoundRow(record, matched)
