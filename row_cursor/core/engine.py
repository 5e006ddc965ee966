"""Cursor engine.

The Engine pairs a pooled ConnectionManager with cursor construction, and
offers ``iterate()``: a generator that owns the connection and the cursor
for exactly as long as the caller's loop runs.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, TypeVar

from row_cursor.core.connection import ConnectionConfig, ConnectionManager
from row_cursor.core.cursor import ResultCursor
from row_cursor.core.exceptions import ExecutionError
from row_cursor.core.logging import get_logger
from row_cursor.core.paginated import PaginatedCursor
from row_cursor.core.sanitizer import SQLSanitizer
from row_cursor.mapping.columns import ColumnMapper

log = get_logger(__name__)

T = TypeVar("T")


class Engine:
    """Builds cursors bound to one ConnectionManager's adapter.

    Args:
        connection_manager: Source of pooled connections and the adapter.
        sanitizer: Applied to every cursor's SQL; ``None`` disables checks.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        sanitizer: SQLSanitizer | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        self._sanitizer = sanitizer
        self._mapper = ColumnMapper()

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        sanitizer: SQLSanitizer | None = None,
    ) -> Engine:
        """Create an Engine from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance
            sanitizer: Optional SQLSanitizer for every cursor

        Returns:
            Engine instance
        """
        return cls(ConnectionManager(config), sanitizer)

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def cursor(
        self,
        record: T,
        sql: str,
        params: Mapping[str, Any] | Sequence[Any] | None = None,
    ) -> ResultCursor[T]:
        """Create a non-paginated cursor; the caller supplies the connection."""
        return ResultCursor(
            record,
            sql,
            params,
            adapter=self._connection_manager.adapter,
            mapper=self._mapper,
            sanitizer=self._sanitizer,
        )

    def paginate(
        self,
        record: T,
        sql: str,
        params: Mapping[str, Any] | None = None,
        *,
        page_size: int,
        identifier_column: str,
        identifier_param: str | None = None,
        initial_identifier: Any = 0,
    ) -> PaginatedCursor[T]:
        """Create a keyset-paginated cursor; the caller supplies the connection."""
        return PaginatedCursor(
            record,
            sql,
            params,
            page_size=page_size,
            identifier_column=identifier_column,
            identifier_param=identifier_param,
            initial_identifier=initial_identifier,
            adapter=self._connection_manager.adapter,
            mapper=self._mapper,
            sanitizer=self._sanitizer,
        )

    def iterate(
        self,
        record: T,
        sql: str,
        params: Mapping[str, Any] | Sequence[Any] | None = None,
        *,
        page_size: int | None = None,
        identifier_column: str | None = None,
        identifier_param: str | None = None,
        initial_identifier: Any = 0,
    ) -> Iterator[T]:
        """Yield *record* once per row, refreshed in place.

        Paginates when *page_size* or *identifier_column* is given. The
        pooled connection and the statement are released when the loop
        finishes, breaks, or raises.

        Raises:
            ExecutionError: If the driver rejects the statement.
        """
        cursor: ResultCursor[T] | PaginatedCursor[T]
        if page_size is not None or identifier_column is not None:
            cursor = self.paginate(
                record,
                sql,
                params,  # type: ignore[arg-type]
                page_size=page_size,  # type: ignore[arg-type]
                identifier_column=identifier_column,  # type: ignore[arg-type]
                identifier_param=identifier_param,
                initial_identifier=initial_identifier,
            )
        else:
            cursor = self.cursor(record, sql, params)

        with self._connection_manager.get_connection() as conn, cursor:
            if not cursor.execute(conn):
                error = cursor.last_error or ExecutionError(sql, "unknown failure")
                raise error
            yield from cursor
        log.debug("Iteration finished after %d rows", cursor.rows_fetched)

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._connection_manager.close_pool()
