"""Enumerations shared across the engine."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"


class CursorState(Enum):
    """Lifecycle of a result cursor."""

    IDLE = "idle"
    EXECUTING = "executing"
    EXHAUSTED = "exhausted"


class ExpressionKind(Enum):
    """Classification of a top-level SELECT expression."""

    FUNCTION = "function"
    COLUMN = "column"
    EXPRESSION = "expression"
