"""
Example 02: Keyset Pagination

This example walks a table page by page with a PaginatedCursor. Each page
filters on the last identifier seen instead of using OFFSET.
"""

import sqlite3
from dataclasses import dataclass

from row_cursor import PaginatedCursor, SQLSanitizer


@dataclass
class Event:
    id: int = 0
    kind: str = ""


def main():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE events (id INTEGER PRIMARY KEY, kind TEXT NOT NULL)")
    conn.executemany(
        "INSERT INTO events (kind) VALUES (?)",
        [("click" if n % 3 else "view",) for n in range(1, 26)],
    )
    conn.commit()

    print("=== Keyset Pagination ===\n")

    event = Event()
    cursor = PaginatedCursor(
        event,
        "SELECT id, kind FROM events WHERE id > :id AND kind = :kind ORDER BY id",
        {"kind": "click"},
        page_size=5,
        identifier_column="id",
        sanitizer=SQLSanitizer(),
    )

    with cursor:
        if not cursor.execute(conn):
            raise cursor.last_error
        for row in cursor:
            print(f"  page {cursor.pages_executed}, row {cursor.current_page_rows}: "
                  f"event {row.id} ({row.kind})")

    print(f"\nRows fetched: {cursor.rows_fetched}")
    print(f"Page queries: {cursor.pages_executed}")
    print(f"Last identifier: {cursor.last_identifier}")

    conn.close()
    print("\n=== Example Complete ===")


if __name__ == "__main__":
    main()
