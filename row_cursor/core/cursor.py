"""Result cursor.

A ``ResultCursor`` runs one SELECT statement and copies each row, one at a
time, into the fields of a single caller-owned record. No row list is ever
built: the record is the only storage, and it is overwritten on every
``advance()``.

    record = User()
    cursor = ResultCursor(record, "SELECT id, name FROM users WHERE active = :active",
                          {"active": 1})
    if cursor.execute(connection):
        while cursor.advance():
            handle(record.id, record.name)
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Generic, TypeVar

from row_cursor.core.connection import adapter_for_connection
from row_cursor.core.enums import CursorState
from row_cursor.core.exceptions import ExecutionError
from row_cursor.core.logging import get_logger
from row_cursor.core.params import normalize_params
from row_cursor.core.query import QueryDefinition
from row_cursor.core.sanitizer import SQLSanitizer
from row_cursor.mapping.binder import BoundRow, RowBinder
from row_cursor.mapping.columns import ColumnBinding, ColumnMapper

log = get_logger(__name__)

T = TypeVar("T")


class ResultCursor(Generic[T]):
    """Executes one statement and binds its rows into *record*.

    Args:
        record: Caller-owned target; its declared fields receive the values
            of the result columns whose binding keys match their names.
        sql: The SELECT statement, with ``:name`` (or driver-native
            positional) placeholders.
        params: Named or positional parameters.
        adapter: Driver adapter. Inferred from the connection when omitted.
        mapper: Column mapper used to resolve binding keys.
        binder: Row binder used to wire columns to fields.
        sanitizer: Optional checks applied to the SQL before execution.
    """

    def __init__(
        self,
        record: T,
        sql: str | QueryDefinition,
        params: Mapping[str, Any] | Sequence[Any] | None = None,
        *,
        adapter: Any | None = None,
        mapper: ColumnMapper | None = None,
        binder: RowBinder | None = None,
        sanitizer: SQLSanitizer | None = None,
    ) -> None:
        if isinstance(sql, QueryDefinition):
            self._query = sql
        else:
            self._query = QueryDefinition(sql=sql, params=params)  # type: ignore[arg-type]
        self._record = record
        self._adapter = adapter
        self._mapper = mapper or ColumnMapper()
        self._binder = binder or RowBinder(self._mapper)
        self._sanitizer = sanitizer

        self._state = CursorState.IDLE
        self._statement: Any = None
        self._statement_adapter: Any = None
        self._bound: BoundRow | None = None
        self._rows_fetched = 0
        self._last_error: ExecutionError | None = None

    # -- properties ---------------------------------------------------------

    @property
    def query(self) -> QueryDefinition:
        return self._query

    @property
    def record(self) -> T:
        return self._record

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def bindings(self) -> tuple[ColumnBinding, ...]:
        """Bindings established by the last successful ``execute()``."""
        return self._bound.bindings if self._bound is not None else ()

    @property
    def rows_fetched(self) -> int:
        """Rows loaded since the last ``execute()``."""
        return self._rows_fetched

    @property
    def last_error(self) -> ExecutionError | None:
        """Why the last ``execute()`` returned ``False``, if it did."""
        return self._last_error

    # -- lifecycle ----------------------------------------------------------

    def execute(self, connection: Any) -> bool:
        """Run the query on *connection* and bind result columns to the record.

        Returns:
            ``True`` if the statement ran and bindings were established;
            ``False`` if the driver rejected it (see ``last_error``). On
            ``False`` no statement is left open.

        Raises:
            SQLSanitizationError: If a configured sanitizer rejects the SQL.
            BindingError: If no result column can be bound to the record.
        """
        self.close()
        self._state = CursorState.IDLE
        self._bound = None
        self._rows_fetched = 0
        self._last_error = None

        adapter = self._adapter or adapter_for_connection(connection)
        sql = self._query.sql
        if self._sanitizer is not None:
            sql = self._sanitizer.sanitize(sql)
        bindings = self._mapper.resolve(sql)
        driver_sql = normalize_params(sql, adapter.paramstyle)

        try:
            statement = adapter.open_statement(connection, driver_sql, self._query.params)
        except Exception as e:
            self._last_error = ExecutionError(driver_sql, str(e))
            self._last_error.__cause__ = e
            log.warning("Statement execution failed: %s", e, exc_info=True)
            return False

        try:
            self._bound = self._binder.bind(bindings, self._record, statement)
        except Exception:
            adapter.close_statement(statement)
            raise

        self._statement = statement
        self._statement_adapter = adapter
        self._state = CursorState.EXECUTING
        log.debug("Statement opened", extra={"sql": driver_sql})
        return True

    def advance(self) -> bool:
        """Load the next row into the record.

        Returns:
            ``True`` if a row was loaded. ``False`` once the result set is
            exhausted (the statement is released on the first ``False``) and
            on every later call, or if the cursor was never executed.
        """
        if self._state is not CursorState.EXECUTING:
            return False
        row = self._statement.fetchone()
        if row is None:
            self._release()
            self._state = CursorState.EXHAUSTED
            return False
        self._bound.transfer(row)  # type: ignore[union-attr]
        self._rows_fetched += 1
        return True

    def close(self) -> None:
        """Release the statement early. Safe to call any number of times."""
        if self._statement is not None:
            self._release()
            self._state = CursorState.EXHAUSTED

    def _release(self) -> None:
        statement, self._statement = self._statement, None
        adapter, self._statement_adapter = self._statement_adapter, None
        if statement is not None:
            adapter.close_statement(statement)
            log.debug("Statement closed after %d rows", self._rows_fetched)

    # -- Python protocols -----------------------------------------------------

    def __enter__(self) -> ResultCursor[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __iter__(self) -> Iterator[T]:
        """Yield the record once per row; execute() must have succeeded."""
        while self.advance():
            yield self._record
