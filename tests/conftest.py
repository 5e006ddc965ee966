"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import pytest

from row_cursor.core.connection import ConnectionConfig

USERS = [
    ("johndoe", "John", "Doe", "john@example.com"),
    ("janesmith", "Jane", "Smith", "jane@example.com"),
    ("sallyjames", "Sally", "James", "sally@example.com"),
]


@dataclass
class User:
    id: int = 0
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""


def create_users(conn: sqlite3.Connection, rows: list[tuple[str, str, str, str]] = USERS) -> None:
    """Create and fill the ``users`` table on *conn*."""
    conn.execute(
        "CREATE TABLE users ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "username TEXT, first_name TEXT, last_name TEXT, email TEXT)"
    )
    conn.executemany(
        "INSERT INTO users (username, first_name, last_name, email) VALUES (?, ?, ?, ?)",
        rows,
    )
    conn.commit()


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config with a single pooled connection."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def users_db() -> Iterator[sqlite3.Connection]:
    """In-memory SQLite connection holding three users (ids 1..3)."""
    conn = sqlite3.connect(":memory:")
    create_users(conn)
    yield conn
    conn.close()


@pytest.fixture
def many_users_db() -> Iterator[sqlite3.Connection]:
    """In-memory SQLite connection holding ten users (ids 1..10)."""
    conn = sqlite3.connect(":memory:")
    rows = [(f"user{n}", f"First{n}", f"Last{n}", f"user{n}@example.com") for n in range(1, 11)]
    create_users(conn, rows)
    yield conn
    conn.close()


class FakeStatement:
    """DB-API cursor stand-in that serves fixed rows and records ``close()``."""

    def __init__(self, rows: list[tuple[Any, ...]], description: Any = None) -> None:
        self._rows = list(rows)
        self.description = description
        self.closed = False
        self.fetches = 0

    def fetchone(self) -> tuple[Any, ...] | None:
        self.fetches += 1
        if self.closed:
            raise AssertionError("fetchone() on a closed statement")
        return self._rows.pop(0) if self._rows else None

    def close(self) -> None:
        self.closed = True


class RecordingAdapter:
    """Adapter stand-in that hands out ``FakeStatement`` objects.

    Each call to ``open_statement`` records ``(sql, params)`` and serves the
    next batch from *pages*; a batch that is an exception instance is raised.
    """

    paramstyle = "named"

    def __init__(self, *pages: Any, description: Any = None) -> None:
        self._pages = list(pages)
        self._description = description
        self.executed: list[tuple[str, Any]] = []
        self.statements: list[FakeStatement] = []

    def open_statement(self, connection: Any, sql: str, params: Any = None) -> FakeStatement:
        self.executed.append((sql, params))
        batch = self._pages.pop(0) if self._pages else []
        if isinstance(batch, BaseException):
            raise batch
        statement = FakeStatement(batch, self._description)
        self.statements.append(statement)
        return statement

    def close_statement(self, statement: FakeStatement) -> None:
        statement.close()

    def limit_clause(self, page_size: int) -> str:
        return f"LIMIT {int(page_size)}"


@pytest.fixture
def user() -> User:
    """An empty, caller-owned target record."""
    return User()


@pytest.fixture
def make_adapter():
    """Factory for ``RecordingAdapter`` instances.

    Usage:
        adapter = make_adapter([(1, "a")], [(2, "b")])
    """
    return RecordingAdapter
