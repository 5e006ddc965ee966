"""Database driver adapter protocol.

Every adapter module MUST implement this protocol. Cursors only talk to
drivers through it: opening and closing a statement, the parameter style,
and the dialect's row-limit clause.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_cursor.core.connection import ConnectionConfig


@runtime_checkable
class DriverAdapter(Protocol):
    """Synchronous database driver adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Create a connection pool."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Acquire a connection from the pool."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close the pool and release all connections."""
        ...

    def open_statement(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | tuple[Any, ...] | None = None,
    ) -> Any:
        """Execute SQL and return the open DB-API cursor.

        If the driver rejects the statement, the cursor is closed before the
        driver exception propagates.
        """
        ...

    def close_statement(self, statement: Any) -> None:
        """Release an open statement, whether or not all rows were read."""
        ...

    def limit_clause(self, page_size: int) -> str:
        """Return the clause that caps a query at *page_size* rows."""
        ...
