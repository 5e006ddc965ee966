"""Unit tests for ResultCursor."""

from __future__ import annotations

import sqlite3

import pytest

from row_cursor.core.cursor import ResultCursor
from row_cursor.core.enums import CursorState
from row_cursor.core.exceptions import (
    ExecutionError,
    NoBindableColumnsError,
    SQLSanitizationError,
)
from row_cursor.core.query import QueryDefinition
from row_cursor.core.sanitizer import SQLSanitizer
from row_cursor.mapping.columns import ColumnBinding


class TestExecute:
    def test_binds_and_iterates_rows_in_order(self, users_db, user) -> None:
        cursor = ResultCursor(user, "SELECT id, username, email FROM users ORDER BY id")
        assert cursor.execute(users_db)
        assert cursor.state is CursorState.EXECUTING

        seen = []
        while cursor.advance():
            seen.append((user.id, user.username, user.email))

        assert seen == [
            (1, "johndoe", "john@example.com"),
            (2, "janesmith", "jane@example.com"),
            (3, "sallyjames", "sally@example.com"),
        ]
        assert cursor.rows_fetched == 3

    def test_named_params(self, users_db, user) -> None:
        cursor = ResultCursor(
            user,
            "SELECT id, username FROM users WHERE username = :username",
            {"username": "janesmith"},
        )
        assert cursor.execute(users_db)
        assert cursor.advance()
        assert user.id == 2
        assert not cursor.advance()

    def test_colon_prefixed_param_names(self, users_db, user) -> None:
        cursor = ResultCursor(
            user, "SELECT id FROM users WHERE username = :username", {":username": "johndoe"}
        )
        assert cursor.execute(users_db)
        assert cursor.advance()
        assert user.id == 1

    def test_positional_params(self, users_db, user) -> None:
        cursor = ResultCursor(user, "SELECT id, username FROM users WHERE id = ?", (3,))
        assert cursor.execute(users_db)
        assert cursor.advance()
        assert user.username == "sallyjames"

    def test_query_definition_accepted(self, users_db, user) -> None:
        query = QueryDefinition(sql="SELECT id FROM users WHERE id = :id", params={"id": 2})
        cursor = ResultCursor(user, query)
        assert cursor.query is query
        assert cursor.execute(users_db)
        assert cursor.advance()
        assert user.id == 2

    def test_bindings_follow_aliases(self, users_db, user) -> None:
        cursor = ResultCursor(
            user,
            "SELECT u.id, u.first_name || ' ' || u.last_name AS username, "
            "COUNT(*) FROM users u WHERE u.id = 1 GROUP BY u.id",
        )
        assert cursor.execute(users_db)
        assert cursor.bindings == (ColumnBinding(1, "id"), ColumnBinding(2, "username"))
        assert cursor.advance()
        assert user.username == "John Doe"

    def test_unbound_fields_untouched(self, users_db, user) -> None:
        user.email = "keep@example.com"
        cursor = ResultCursor(user, "SELECT id FROM users WHERE id = 1")
        assert cursor.execute(users_db)
        assert cursor.advance()
        assert user.email == "keep@example.com"

    def test_null_values_are_assigned(self, users_db, user) -> None:
        users_db.execute("UPDATE users SET email = NULL WHERE id = 2")
        cursor = ResultCursor(user, "SELECT id, email FROM users ORDER BY id")
        assert cursor.execute(users_db)
        cursor.advance()
        assert user.email == "john@example.com"
        cursor.advance()
        assert user.email is None

    def test_empty_result(self, users_db, user) -> None:
        cursor = ResultCursor(user, "SELECT id FROM users WHERE id > 100")
        assert cursor.execute(users_db)
        assert not cursor.advance()
        assert cursor.state is CursorState.EXHAUSTED
        assert user.id == 0

    def test_driver_error_returns_false(self, users_db, user) -> None:
        cursor = ResultCursor(user, "SELECT id FROM missing_table")
        assert cursor.execute(users_db) is False
        assert isinstance(cursor.last_error, ExecutionError)
        assert isinstance(cursor.last_error.__cause__, sqlite3.OperationalError)
        assert "missing_table" in cursor.last_error.sql
        assert cursor.state is CursorState.IDLE
        assert not cursor.advance()

    def test_successful_execute_clears_last_error(self, users_db, user) -> None:
        cursor = ResultCursor(user, "SELECT id FROM users")
        users_db.execute("ALTER TABLE users RENAME TO people")
        assert not cursor.execute(users_db)
        users_db.execute("ALTER TABLE people RENAME TO users")
        assert cursor.execute(users_db)
        assert cursor.last_error is None

    def test_no_bindable_columns_closes_statement(self, user, make_adapter) -> None:
        adapter = make_adapter([("x",)])
        cursor = ResultCursor(user, "SELECT nickname FROM users", adapter=adapter)
        with pytest.raises(NoBindableColumnsError):
            cursor.execute(object())
        assert adapter.statements[0].closed
        assert cursor.state is CursorState.IDLE

    def test_sanitizer_rejects_before_io(self, user, make_adapter) -> None:
        adapter = make_adapter()
        cursor = ResultCursor(
            user, "DELETE FROM users", adapter=adapter, sanitizer=SQLSanitizer()
        )
        with pytest.raises(SQLSanitizationError):
            cursor.execute(object())
        assert adapter.executed == []

    def test_pyformat_adapter_receives_converted_sql(self, user, make_adapter) -> None:
        adapter = make_adapter([(1,)])
        adapter.paramstyle = "pyformat"
        cursor = ResultCursor(
            user, "SELECT id FROM users WHERE id = :id", {"id": 1}, adapter=adapter
        )
        assert cursor.execute(object())
        assert adapter.executed == [("SELECT id FROM users WHERE id = %(id)s", {"id": 1})]


class TestAdvanceAndClose:
    def test_advance_before_execute(self, user) -> None:
        cursor = ResultCursor(user, "SELECT id FROM users")
        assert cursor.state is CursorState.IDLE
        assert not cursor.advance()

    def test_exhaustion_releases_statement_once(self, user, make_adapter) -> None:
        adapter = make_adapter([(1,), (2,)])
        cursor = ResultCursor(user, "SELECT id FROM users", adapter=adapter)
        assert cursor.execute(object())
        assert cursor.advance()
        assert cursor.advance()
        statement = adapter.statements[0]
        assert not statement.closed

        assert not cursor.advance()
        assert statement.closed
        fetches = statement.fetches
        assert not cursor.advance()
        assert not cursor.advance()
        assert statement.fetches == fetches

    def test_close_early(self, user, make_adapter) -> None:
        adapter = make_adapter([(1,), (2,)])
        cursor = ResultCursor(user, "SELECT id FROM users", adapter=adapter)
        assert cursor.execute(object())
        assert cursor.advance()
        cursor.close()
        assert adapter.statements[0].closed
        assert cursor.state is CursorState.EXHAUSTED
        assert not cursor.advance()
        cursor.close()

    def test_close_without_execute(self, user) -> None:
        ResultCursor(user, "SELECT id FROM users").close()

    def test_reexecute_restarts(self, users_db, user) -> None:
        cursor = ResultCursor(user, "SELECT id FROM users ORDER BY id")
        assert cursor.execute(users_db)
        cursor.advance()
        cursor.advance()
        assert cursor.execute(users_db)
        assert cursor.rows_fetched == 0
        assert cursor.advance()
        assert user.id == 1

    def test_reexecute_closes_previous_statement(self, user, make_adapter) -> None:
        adapter = make_adapter([(1,), (2,)], [(3,)])
        cursor = ResultCursor(user, "SELECT id FROM users", adapter=adapter)
        assert cursor.execute(object())
        assert cursor.execute(object())
        assert adapter.statements[0].closed
        assert not adapter.statements[1].closed


class TestProtocols:
    def test_iter_yields_the_same_record(self, users_db, user) -> None:
        cursor = ResultCursor(user, "SELECT id FROM users ORDER BY id")
        assert cursor.execute(users_db)
        ids = []
        for record in cursor:
            assert record is user
            ids.append(record.id)
        assert ids == [1, 2, 3]

    def test_context_manager_closes(self, user, make_adapter) -> None:
        adapter = make_adapter([(1,), (2,)])
        with ResultCursor(user, "SELECT id FROM users", adapter=adapter) as cursor:
            assert cursor.execute(object())
            assert cursor.advance()
        assert adapter.statements[0].closed
