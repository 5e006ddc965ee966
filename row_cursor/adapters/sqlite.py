"""SQLite adapter (sqlite3 stdlib)."""

from __future__ import annotations

import sqlite3
from typing import Any

from row_cursor.core.connection import ConnectionConfig
from row_cursor.core.exceptions import PoolError


class SqliteAdapter:
    """SQLite adapter using stdlib sqlite3.

    sqlite3 steps the statement lazily on every ``fetchone``, so rows are
    never buffered client-side and ``server_side`` has no effect.
    """

    def __init__(self, server_side: bool = False, fetch_size: int | None = None) -> None:
        self.server_side = server_side
        self.fetch_size = fetch_size

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> list[sqlite3.Connection]:
        """Create a 'pool' (list of connections) for SQLite."""
        pool: list[sqlite3.Connection] = []
        for _ in range(config.pool_size):
            conn = sqlite3.connect(config.database, **config.extra)
            conn.execute("PRAGMA journal_mode=WAL")
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[sqlite3.Connection]) -> sqlite3.Connection:
        """Acquire a connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(
        self, connection: sqlite3.Connection, pool: list[sqlite3.Connection]
    ) -> None:
        """Release a connection back to the pool."""
        pool.append(connection)

    def close_pool(self, pool: list[sqlite3.Connection]) -> None:
        """Close all connections in the pool."""
        for conn in pool:
            conn.close()
        pool.clear()

    def open_statement(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | tuple[Any, ...] | None = None,
    ) -> sqlite3.Cursor:
        """Execute SQL and return the cursor."""
        cursor = connection.cursor()
        try:
            cursor.execute(sql, params if params is not None else ())
        except Exception:
            cursor.close()
            raise
        return cursor

    def close_statement(self, statement: sqlite3.Cursor) -> None:
        statement.close()

    def limit_clause(self, page_size: int) -> str:
        return f"LIMIT {int(page_size)}"
