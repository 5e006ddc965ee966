"""Oracle adapter using oracledb."""

from __future__ import annotations

from typing import Any

from row_cursor.core.connection import ConnectionConfig
from row_cursor.core.exceptions import PoolError


def _build_dsn(config: ConnectionConfig) -> str:
    """Build an Oracle DSN string from config fields (host:port/database)."""
    return f"{config.host}:{config.port}/{config.database}"


class OracleAdapter:
    """Oracle adapter using oracledb.

    Oracle has no ``LIMIT``; pages are capped with the SQL:2008
    ``FETCH FIRST n ROWS ONLY`` clause (Oracle 12c and later). ``fetch_size``
    sets the cursor's ``arraysize``, the number of rows per network round
    trip.
    """

    def __init__(self, server_side: bool = False, fetch_size: int | None = None) -> None:
        self.server_side = server_side
        self.fetch_size = fetch_size

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        """Create a 'pool' (list of connections) for Oracle."""
        import oracledb

        dsn = _build_dsn(config)
        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = oracledb.connect(
                user=config.user, password=config.password, dsn=dsn, **config.extra
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
        """Execute SQL and return the cursor."""
        cursor = connection.cursor()
        if self.fetch_size:
            cursor.arraysize = self.fetch_size
            cursor.prefetchrows = self.fetch_size
        try:
            cursor.execute(sql, params or {})
        except Exception:
            cursor.close()
            raise
        return cursor

    def close_statement(self, statement: Any) -> None:
        statement.close()

    def limit_clause(self, page_size: int) -> str:
        return f"FETCH FIRST {int(page_size)} ROWS ONLY"
