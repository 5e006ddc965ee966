"""Keyset-paginated cursor.

Reads a result set one page at a time without ``OFFSET``: instead of

    SELECT id, name FROM users LIMIT 250 OFFSET 10000

each page is

    SELECT id, name FROM users WHERE id > :id ORDER BY id LIMIT 250

with ``:id`` bound to the last identifier seen on the previous page, so the
server never has to skip rows. When a full page runs out the next page is
requested transparently; the caller only ever calls ``advance()``.

The base query must not have a ``LIMIT`` clause, must compare the
identifier column against the identifier parameter, and must ``ORDER BY``
the identifier column. The identifier column must be one of the record's
bound fields.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from typing import Any, Generic, TypeVar

from row_cursor.core.connection import adapter_for_connection
from row_cursor.core.cursor import ResultCursor
from row_cursor.core.enums import CursorState
from row_cursor.core.exceptions import BindingError, ConfigurationError, ExecutionError
from row_cursor.core.logging import get_logger
from row_cursor.core.query import QueryDefinition
from row_cursor.core.sanitizer import SQLSanitizer
from row_cursor.mapping.binder import RowBinder
from row_cursor.mapping.columns import ColumnMapper

log = get_logger(__name__)

T = TypeVar("T")


class PaginatedCursor(Generic[T]):
    """Iterates a keyset-paginated query through an inner ``ResultCursor``.

    Args:
        record: Caller-owned target record.
        sql: Base SELECT statement (see module docstring).
        params: Named parameters, excluding the identifier parameter.
        page_size: Rows per page, > 0.
        identifier_column: Field holding each row's monotonic identifier.
        identifier_param: Bound parameter compared against the identifier;
            defaults to ``identifier_column``.
        initial_identifier: Value bound for the first page, lower than every
            real identifier.
        adapter: Driver adapter. Inferred from the connection when omitted.
        mapper: Column mapper shared by every page.
        binder: Row binder shared by every page.
        sanitizer: Optional checks applied to the base SQL.

    Raises:
        ConfigurationError: On empty SQL, a non-positive page size, an empty
            identifier column, or positional params.
    """

    def __init__(
        self,
        record: T,
        sql: str,
        params: Mapping[str, Any] | None = None,
        *,
        page_size: int,
        identifier_column: str,
        identifier_param: str | None = None,
        initial_identifier: Any = 0,
        adapter: Any | None = None,
        mapper: ColumnMapper | None = None,
        binder: RowBinder | None = None,
        sanitizer: SQLSanitizer | None = None,
    ) -> None:
        self._query = QueryDefinition(
            sql=sql,
            params=params,  # type: ignore[arg-type]
            page_size=page_size,
            identifier_column=identifier_column,
            identifier_param=identifier_param,
            initial_identifier=initial_identifier,
        )
        self._record = record
        self._adapter = adapter
        self._mapper = mapper or ColumnMapper()
        self._binder = binder or RowBinder(self._mapper)
        self._sanitizer = sanitizer

        self._inner: ResultCursor[T] | None = None
        self._connection: Any = None
        self._last_identifier: Any = initial_identifier
        self._page_start: Any = initial_identifier
        self._current_page_rows = 0
        self._pages_executed = 0
        self._rows_fetched = 0
        self._last_error: ExecutionError | None = None
        self._closed = False

    # -- properties ---------------------------------------------------------

    @property
    def query(self) -> QueryDefinition:
        return self._query

    @property
    def record(self) -> T:
        return self._record

    @property
    def state(self) -> CursorState:
        return self._inner.state if self._inner is not None else CursorState.IDLE

    @property
    def last_identifier(self) -> Any:
        """Identifier of the last row loaded; the next page starts after it."""
        return self._last_identifier

    @property
    def current_page_rows(self) -> int:
        return self._current_page_rows

    @property
    def pages_executed(self) -> int:
        """Number of page queries sent to the driver."""
        return self._pages_executed

    @property
    def rows_fetched(self) -> int:
        """Rows loaded across all pages."""
        return self._rows_fetched

    @property
    def last_error(self) -> ExecutionError | None:
        return self._last_error

    # -- lifecycle ----------------------------------------------------------

    def execute(self, connection: Any) -> bool:
        """Run the page query that starts after ``last_identifier``.

        Returns:
            ``True`` if the page query ran and bindings were established.

        Raises:
            SQLSanitizationError: If a configured sanitizer rejects the SQL.
            BindingError: If no column binds, or the identifier column is not
                among the bound fields.
        """
        self.close()
        self._connection = connection
        self._closed = False
        self._current_page_rows = 0
        self._page_start = self._last_identifier
        self._last_error = None

        adapter = self._adapter or adapter_for_connection(connection)
        query = self._query
        if self._sanitizer is not None:
            query = dataclasses.replace(
                query, sql=self._sanitizer.sanitize(query.sql, paginated=True)
            )
        page = query.page(adapter.limit_clause(query.page_size), self._last_identifier)

        inner: ResultCursor[T] = ResultCursor(
            self._record,
            page,
            adapter=adapter,
            mapper=self._mapper,
            binder=self._binder,
        )
        self._inner = inner
        self._pages_executed += 1
        if not inner.execute(connection):
            self._last_error = inner.last_error
            return False

        if query.identifier_column not in {b.key for b in inner.bindings}:
            inner.close()
            raise BindingError(
                f"Identifier column '{query.identifier_column}' is not bound to a "
                f"field of {type(self._record).__name__}"
            )

        log.debug(
            "Page %d opened after identifier %r",
            self._pages_executed,
            self._last_identifier,
            extra={"page_size": query.page_size},
        )
        return True

    def advance(self, connection: Any = None) -> bool:
        """Load the next row, requesting the next page when one runs out.

        Args:
            connection: Connection for the next page query; defaults to the
                one given to ``execute()``.

        Returns:
            ``True`` if a row was loaded, ``False`` once every page is read
            or if the cursor was never executed.

        Raises:
            ConfigurationError: If a full page ends without the identifier
                advancing past the page's starting point, which means the
                query does not filter or order by the identifier.
        """
        if self._inner is None or self._closed:
            return False
        if self._inner.advance():
            self._track_row()
            return True

        # a short page is the last one
        if self._current_page_rows < self._query.page_size:  # type: ignore[operator]
            return False

        if self._last_identifier == self._page_start:
            raise ConfigurationError(
                f"Identifier '{self._query.identifier_column}' did not advance past "
                f"{self._page_start!r} over a full page; the query must filter on "
                f":{self._query.identifier_param} and ORDER BY the identifier"
            )

        log.debug(
            "Page of %d rows exhausted; requesting rows after %r",
            self._current_page_rows,
            self._last_identifier,
        )
        if not self.execute(connection if connection is not None else self._connection):
            return False
        if self._inner.advance():
            self._track_row()
            return True
        return False

    def close(self) -> None:
        """Release the current page's statement and stop paging. Idempotent."""
        self._closed = True
        if self._inner is not None:
            self._inner.close()

    def _track_row(self) -> None:
        self._current_page_rows += 1
        self._rows_fetched += 1
        self._last_identifier = getattr(self._record, self._query.identifier_column)  # type: ignore[arg-type]

    # -- Python protocols -----------------------------------------------------

    def __enter__(self) -> PaginatedCursor[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __iter__(self) -> Iterator[T]:
        """Yield the record once per row across all pages."""
        while self.advance():
            yield self._record
