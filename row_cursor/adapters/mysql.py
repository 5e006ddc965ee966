"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from row_cursor.core.connection import ConnectionConfig
from row_cursor.core.exceptions import PoolError


class MysqlAdapter:
    """MySQL adapter using mysql-connector-python.

    By default results are buffered client-side. With ``server_side=True``
    cursors are unbuffered: memory stays constant on large result sets, but
    the connection cannot run anything else until the result is read or the
    statement is closed. Connections are opened with ``consume_results`` so
    closing an abandoned unbuffered statement discards the unread rows.
    """

    def __init__(self, server_side: bool = False, fetch_size: int | None = None) -> None:
        self.server_side = server_side
        self.fetch_size = fetch_size

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        """Create a pool (list of connections) for MySQL."""
        import mysql.connector

        options = {"consume_results": True, **config.extra}
        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = mysql.connector.connect(
                host=config.host,
                port=config.port,
                user=config.user,
                password=config.password,
                database=config.database,
                **options,
            )
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        """Acquire a connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        """Release a connection back to the pool."""
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        """Close all connections in the pool."""
        for conn in pool:
            conn.close()
        pool.clear()

    def open_statement(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | tuple[Any, ...] | None = None,
    ) -> Any:
        """Execute SQL and return a tuple-row cursor."""
        cursor = connection.cursor(buffered=not self.server_side)
        try:
            cursor.execute(sql, params)
        except Exception:
            cursor.close()
            raise
        return cursor

    def close_statement(self, statement: Any) -> None:
        statement.close()

    def limit_clause(self, page_size: int) -> str:
        return f"LIMIT {int(page_size)}"
