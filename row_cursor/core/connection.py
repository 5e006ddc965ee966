"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager uses the DriverAdapter protocol for pool-based connection
lifecycle. Cursors handed a bare DB-API connection find their adapter with
``adapter_for_connection``.
"""

from __future__ import annotations

import importlib
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel, Field

from row_cursor.core.enums import DatabaseBackend
from row_cursor.core.exceptions import AdapterError, ConnectionError, RowCursorError  # noqa: A004
from row_cursor.core.logging import get_logger

log = get_logger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections.

    ``server_side_cursors`` asks adapters that support it to stream rows from
    the server instead of buffering the whole result client-side;
    ``fetch_size`` tunes how many rows travel per round trip. ``extra`` is
    passed to the driver's connect call.
    """

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = Field(5, gt=0)
    server_side_cursors: bool = False
    fetch_size: int | None = Field(None, gt=0)
    extra: dict[str, Any] = {}


# Adapter module mapping: backend -> (module_path, class_name)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_cursor.adapters.sqlite", "SqliteAdapter"),
    DatabaseBackend.POSTGRESQL: ("row_cursor.adapters.postgresql", "PostgresqlAdapter"),
    DatabaseBackend.MYSQL: ("row_cursor.adapters.mysql", "MysqlAdapter"),
    DatabaseBackend.ORACLE: ("row_cursor.adapters.oracle", "OracleAdapter"),
}

# Top-level module of a DB-API connection class -> backend
_DRIVER_MODULES: dict[str, DatabaseBackend] = {
    "sqlite3": DatabaseBackend.SQLITE,
    "_sqlite3": DatabaseBackend.SQLITE,
    "psycopg": DatabaseBackend.POSTGRESQL,
    "mysql": DatabaseBackend.MYSQL,
    "oracledb": DatabaseBackend.ORACLE,
}


def load_adapter(
    driver: str | DatabaseBackend,
    *,
    server_side: bool = False,
    fetch_size: int | None = None,
) -> Any:
    """Load an adapter by driver name."""
    try:
        backend = DatabaseBackend(driver.lower() if isinstance(driver, str) else driver)
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, cls_name = _ADAPTER_MAP[backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)(server_side=server_side, fetch_size=fetch_size)
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


def adapter_for_connection(connection: Any) -> Any:
    """Pick the adapter matching a DB-API connection's driver module."""
    root = type(connection).__module__.split(".")[0]
    driver = _DRIVER_MODULES.get(root)
    if driver is None:
        raise AdapterError(
            f"Cannot infer a driver adapter for {type(connection).__qualname__} "
            f"from module '{root}'; pass adapter= explicitly"
        )
    return load_adapter(driver)


class ConnectionManager:
    """Connection manager using the DriverAdapter protocol."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = load_adapter(
            config.driver,
            server_side=config.server_side_cursors,
            fetch_size=config.fetch_size,
        )
        self._pool: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    def initialize_pool(self) -> Any:
        """Initialize the connection pool.

        Raises:
            ConnectionError: If the driver cannot open a connection.
        """
        if self._pool is None:
            log.debug(
                "Opening %s pool of %d connections",
                self.config.driver,
                self.config.pool_size,
            )
            try:
                self._pool = self._adapter.create_pool(self.config)
            except RowCursorError:
                raise
            except Exception as e:
                raise ConnectionError(
                    f"Cannot open {self.config.driver} connection pool: {e}"
                ) from e
        return self._pool

    @contextmanager
    def get_connection(self):  # type: ignore[no-untyped-def]
        """Get a connection from the pool as a context manager."""
        if self._pool is None:
            self.initialize_pool()
        connection = self._adapter.acquire_connection(self._pool)
        try:
            yield connection
        finally:
            self._adapter.release_connection(connection, self._pool)

    def close_pool(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            self._adapter.close_pool(self._pool)
            self._pool = None
