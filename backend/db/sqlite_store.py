"""Embedded SQLite access point for the transactions table."""

from __future__ import annotations

import sqlite3


TRANSACTION_COLUMNS: tuple[str, ...] = (
    "transaction_id",
    "date",
    "customer_id",
    "customer_name",
    "phone_number",
    "gender",
    "age",
    "customer_region",
    "product_id",
    "product_name",
    "product_category",
    "tags",
    "quantity",
    "price_per_unit",
    "discount_percentage",
    "total_amount",
    "final_amount",
    "payment_method",
    "order_status",
    "delivery_type",
    "store_id",
    "store_location",
    "salesperson_id",
    "employee_name",
)

CREATE_TRANSACTIONS_TABLE = """
CREATE TABLE IF NOT EXISTS {table} (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  transaction_id TEXT,
  date TEXT,
  customer_id TEXT,
  customer_name TEXT,
  phone_number TEXT,
  gender TEXT,
  age INTEGER,
  customer_region TEXT,
  product_id TEXT,
  product_name TEXT,
  product_category TEXT,
  tags TEXT,
  quantity INTEGER,
  price_per_unit REAL,
  discount_percentage REAL,
  total_amount REAL,
  final_amount REAL,
  payment_method TEXT,
  order_status TEXT,
  delivery_type TEXT,
  store_id TEXT,
  store_location TEXT,
  salesperson_id TEXT,
  employee_name TEXT
)
"""


def connect(path: str, *, table: str = "transactions") -> sqlite3.Connection:
    """Open a connection returning mapping rows, creating the table when missing."""

    connection = sqlite3.connect(path, check_same_thread=False)
    connection.row_factory = sqlite3.Row
    connection.execute(CREATE_TRANSACTIONS_TABLE.format(table=table))
    return connection


def insert_transactions(
    connection: sqlite3.Connection,
    rows: list[dict[str, object]],
    *,
    table: str = "transactions",
) -> int:
    """Insert rows keyed by column name; missing columns are stored as NULL."""

    placeholders = ", ".join("?" for _ in TRANSACTION_COLUMNS)
    statement = f"INSERT INTO {table} ({', '.join(TRANSACTION_COLUMNS)}) VALUES ({placeholders})"
    with connection:
        connection.executemany(
            statement,
            [tuple(row.get(column) for column in TRANSACTION_COLUMNS) for row in rows],
        )
    return len(rows)
