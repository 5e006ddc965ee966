"""
Example 01: Result Cursor

This example binds the rows of one SELECT into a single dataclass record,
one row at a time, with a ResultCursor.
"""

import sqlite3
from dataclasses import dataclass

from row_cursor import ResultCursor


@dataclass
class User:
    id: int = 0
    username: str = ""
    full_name: str = ""


def main():
    conn = sqlite3.connect(":memory:")
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            username TEXT NOT NULL,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL
        )
    """)
    conn.executemany(
        "INSERT INTO users (username, first_name, last_name) VALUES (?, ?, ?)",
        [
            ("johndoe", "John", "Doe"),
            ("janesmith", "Jane", "Smith"),
            ("sallyjames", "Sally", "James"),
        ],
    )
    conn.commit()

    print("=== Result Cursor ===\n")

    user = User()
    cursor = ResultCursor(
        user,
        """
        SELECT u.id,
               u.username,
               u.first_name || ' ' || u.last_name AS full_name
        FROM users u
        WHERE u.id >= :min_id
        ORDER BY u.id
        """,
        {"min_id": 1},
    )

    # execute() returns False (and sets last_error) if the driver rejects the SQL
    if not cursor.execute(conn):
        raise cursor.last_error

    print(f"Bindings: {[(b.position, b.key) for b in cursor.bindings]}\n")

    # The same User instance is refreshed on every advance()
    while cursor.advance():
        print(f"  {user.id}: {user.username} ({user.full_name})")

    print(f"\nRows fetched: {cursor.rows_fetched}")
    print(f"Cursor state: {cursor.state.value}")

    conn.close()
    print("\n=== Example Complete ===")


if __name__ == "__main__":
    main()
