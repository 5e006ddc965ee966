"""
Example 03: Engine

This example uses an Engine to take pooled connections from a
ConnectionConfig and iterate query results with structured logging.
"""

import tempfile
from pathlib import Path

from pydantic import BaseModel

from row_cursor import ConnectionConfig, Engine, SQLSanitizer, configure_logging


class OrderSummary(BaseModel):
    customer: str = ""
    orders: int = 0
    total: float = 0.0


def main():
    configure_logging(level="INFO")

    db_path = Path(tempfile.mkdtemp()) / "shop.db"
    config = ConnectionConfig(driver="sqlite", database=str(db_path), pool_size=2)
    engine = Engine.from_config(config, sanitizer=SQLSanitizer())

    with engine.connection_manager.get_connection() as conn:
        conn.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY, customer TEXT, amount REAL)")
        conn.executemany(
            "INSERT INTO orders (customer, amount) VALUES (?, ?)",
            [("alice", 12.5), ("bob", 3.0), ("alice", 7.5), ("carol", 20.0), ("bob", 1.0)],
        )
        conn.commit()

    print("=== Engine ===\n")

    summary = OrderSummary()
    sql = """
        SELECT customer,
               COUNT(*) AS orders,
               SUM(amount) 'total'   -- single-quoted aliases bind too
        FROM orders
        GROUP BY customer
        ORDER BY customer
    """
    for row in engine.iterate(summary, sql):
        print(f"  {row.customer}: {row.orders} orders, {row.total:.2f} total")

    print("\nPaginated over the same pool:")
    for row in engine.iterate(
        summary,
        "SELECT id AS orders, customer FROM orders WHERE id > :id ORDER BY id",
        page_size=2,
        identifier_column="orders",
        identifier_param="id",
    ):
        print(f"  order {row.orders} by {row.customer}")

    engine.close()
    print("\n=== Example Complete ===")


if __name__ == "__main__":
    main()
