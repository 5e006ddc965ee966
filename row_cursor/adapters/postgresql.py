"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

import itertools
from typing import Any

from row_cursor.core.connection import ConnectionConfig
from row_cursor.core.exceptions import PoolError

_cursor_names = itertools.count(1)


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlAdapter:
    """PostgreSQL adapter using psycopg (v3+).

    With ``server_side=True`` statements run through named cursors, so the
    server keeps the result set and rows stream ``fetch_size`` at a time.
    Named cursors need a transaction, so the connection must not be in
    autocommit mode.
    """

    def __init__(self, server_side: bool = False, fetch_size: int | None = None) -> None:
        self.server_side = server_side
        self.fetch_size = fetch_size

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        import psycopg

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = psycopg.connect(conninfo, **config.extra)
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def open_statement(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | tuple[Any, ...] | None = None,
    ) -> Any:
        if self.server_side:
            cursor = connection.cursor(name=f"row_cursor_{next(_cursor_names)}")
            if self.fetch_size:
                cursor.itersize = self.fetch_size
        else:
            cursor = connection.cursor()
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
