"""row-cursor exception hierarchy.

Driver exceptions never escape a cursor unwrapped: they are chained as the
``__cause__`` of an ``ExecutionError``.
"""

from __future__ import annotations


class RowCursorError(Exception):
    """Base exception for all row-cursor errors."""


# --- Configuration ---


class ConfigurationError(RowCursorError):
    """Raised when a query definition is rejected before any I/O."""


# --- SQL text ---


class SQLParseError(RowCursorError):
    """Raised when SELECT-clause text cannot be split into expressions."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Cannot parse SELECT clause: {detail}")


class SQLSanitizationError(RowCursorError):
    """Raised when query text fails a sanitization check."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"SQL sanitization failed: {detail}")


# --- Mapping ---


class MappingError(RowCursorError):
    """Base for result-column mapping errors."""


class RecordTypeError(MappingError):
    """Raised when a target record type cannot receive bound values."""

    def __init__(self, record_type: str, detail: str) -> None:
        self.record_type = record_type
        super().__init__(f"Cannot bind into {record_type}: {detail}")


class BindingError(MappingError):
    """Raised when result columns cannot be bound to a record."""


class NoBindableColumnsError(BindingError):
    """Raised when no SELECT expression matches a field of the record."""

    def __init__(self, record_type: str, keys: list[str]) -> None:
        self.record_type = record_type
        self.keys = keys
        super().__init__(
            f"No bindable columns for {record_type}: none of {keys} is a field"
        )


# --- Execution ---


class ExecutionError(RowCursorError):
    """Raised (or recorded) when the driver rejects a statement."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Statement execution failed: {detail}")


# --- Adapter ---


class AdapterError(RowCursorError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
