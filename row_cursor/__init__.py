"""row-cursor - constant-memory result binding and keyset pagination."""

from __future__ import annotations

from row_cursor.core.connection import (
    ConnectionConfig,
    ConnectionManager,
    adapter_for_connection,
)
from row_cursor.core.cursor import ResultCursor
from row_cursor.core.engine import Engine
from row_cursor.core.enums import CursorState, DatabaseBackend, ExpressionKind
from row_cursor.core.exceptions import (
    AdapterError,
    BindingError,
    ConfigurationError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    MappingError,
    NoBindableColumnsError,
    PoolError,
    RecordTypeError,
    RowCursorError,
    SQLParseError,
    SQLSanitizationError,
)
from row_cursor.core.logging import configure_logging
from row_cursor.core.paginated import PaginatedCursor
from row_cursor.core.query import QueryDefinition
from row_cursor.core.sanitizer import SQLSanitizer
from row_cursor.mapping import (
    ColumnBinding,
    ColumnMapper,
    RowBinder,
    SelectExpression,
    enumerate_select,
)

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    "adapter_for_connection",
    # Cursors
    "ResultCursor",
    "PaginatedCursor",
    "QueryDefinition",
    # Engine
    "Engine",
    # Sanitizer
    "SQLSanitizer",
    # Mapping
    "ColumnMapper",
    "ColumnBinding",
    "RowBinder",
    "SelectExpression",
    "enumerate_select",
    # Logging
    "configure_logging",
    # Enums
    "CursorState",
    "DatabaseBackend",
    "ExpressionKind",
    # Exceptions
    "RowCursorError",
    "ConfigurationError",
    "SQLParseError",
    "SQLSanitizationError",
    "MappingError",
    "RecordTypeError",
    "BindingError",
    "NoBindableColumnsError",
    "ExecutionError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
