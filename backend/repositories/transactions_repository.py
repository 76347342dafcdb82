"""Transactions repository adapters.

Each adapter executes a `TransactionQuery` against one kind of store and
returns the page rows as raw dicts together with the total number of rows
matching the same predicate set (`None` when the store cannot count).
"""

from __future__ import annotations

import re
import sqlite3
from datetime import date, datetime, timedelta
from typing import Any, Protocol

from backend.db.supabase_client import SupabaseClient
from backend.repositories.transaction_query import (
    AnyTag,
    DateBounds,
    InSet,
    NumberRange,
    Predicate,
    TextSearch,
    TransactionQuery,
)


class TransactionsRepository(Protocol):
    def list_transactions(self, query: TransactionQuery) -> tuple[list[dict[str, Any]], int | None]:
        """Return one page of raw rows plus the total count for the predicate set."""

    def probe(self) -> None:
        """Raise when the underlying store is unreachable or the table is missing."""


def _date_part(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    return text[:10] or None


def _tag_tokens(value: object) -> set[str]:
    return {token.strip().lower() for token in str(value or "").split(",") if token.strip()}


def _matches(predicate: Predicate, row: dict[str, Any]) -> bool:
    if isinstance(predicate, TextSearch):
        name = str(row.get("customer_name") or "")
        phone = str(row.get("phone_number") or "")
        return predicate.text.lower() in name.lower() or predicate.text in phone

    if isinstance(predicate, InSet):
        return row.get(predicate.column) in predicate.values

    if isinstance(predicate, AnyTag):
        tokens = _tag_tokens(row.get(predicate.column))
        return any(tag.lower() in tokens for tag in predicate.tags)

    if isinstance(predicate, NumberRange):
        raw_value = row.get(predicate.column)
        if raw_value is None:
            return False
        try:
            value = float(raw_value)
        except (TypeError, ValueError):
            return False
        if predicate.minimum is not None and value < predicate.minimum:
            return False
        if predicate.maximum is not None and value > predicate.maximum:
            return False
        return True

    if isinstance(predicate, DateBounds):
        day = _date_part(row.get(predicate.column))
        if day is None:
            return False
        start = _date_part(predicate.start)
        end = _date_part(predicate.end)
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True

    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


class InMemoryTransactionsRepository:
    """In-memory store used for local dev/tests when no database is configured."""

    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        source = rows if rows is not None else _DEMO_ROWS
        self._seed: list[dict[str, Any]] = []
        for index, row in enumerate(source, start=1):
            stored = dict(row)
            stored.setdefault("id", index)
            self._seed.append(stored)

    def _sorted(self, rows: list[dict[str, Any]], query: TransactionQuery) -> list[dict[str, Any]]:
        column = query.sort_column
        descending = not query.ascending
        present = [row for row in rows if row.get(column) is not None]
        missing = [row for row in rows if row.get(column) is None]
        present.sort(key=lambda row: (row[column], row["id"]), reverse=descending)
        missing.sort(key=lambda row: row["id"], reverse=descending)
        return present + missing

    def list_transactions(self, query: TransactionQuery) -> tuple[list[dict[str, Any]], int | None]:
        rows = [
            row
            for row in self._seed
            if all(_matches(predicate, row) for predicate in query.predicates)
        ]
        ordered = self._sorted(rows, query)
        page = ordered[query.offset : query.offset + query.limit]
        return [dict(row) for row in page], len(rows)

    def probe(self) -> None:
        return None


def _quote(value: str) -> str:
    """Quote a PostgREST filter value so reserved characters stay literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _tag_pattern(column: str, tag: str) -> str:
    """Case-insensitive whole-token regex tolerating any whitespace around commas."""
    pattern = r"(^|,)\s*" + re.escape(tag) + r"\s*(,|$)"
    return f"{column}.imatch.{_quote(pattern)}"


class SupabaseTransactionsRepository:
    """Supabase repository rendering predicates as PostgREST query parameters."""

    def __init__(self, client: SupabaseClient, *, table: str = "transactions") -> None:
        self._client = client
        self._table = table

    def _build_query(self, query: TransactionQuery) -> list[tuple[str, str | int]]:
        params: list[tuple[str, str | int]] = []
        or_groups: list[str] = []

        for predicate in query.predicates:
            if isinstance(predicate, TextSearch):
                pattern = _quote(f"*{predicate.text}*")
                or_groups.append(f"customer_name.ilike.{pattern},phone_number.like.{pattern}")
            elif isinstance(predicate, InSet):
                values = ",".join(_quote(value) for value in predicate.values)
                params.append((predicate.column, f"in.({values})"))
            elif isinstance(predicate, AnyTag):
                patterns = [_tag_pattern(predicate.column, tag) for tag in predicate.tags]
                or_groups.append(",".join(patterns))
            elif isinstance(predicate, NumberRange):
                if predicate.minimum is not None:
                    params.append((predicate.column, f"gte.{_format_number(predicate.minimum)}"))
                if predicate.maximum is not None:
                    params.append((predicate.column, f"lte.{_format_number(predicate.maximum)}"))
            elif isinstance(predicate, DateBounds):
                params.extend(self._date_params(predicate))
            else:
                raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")

        # PostgREST accepts a single `or` key, so several OR groups nest under `and`.
        if len(or_groups) == 1:
            params.append(("or", f"({or_groups[0]})"))
        elif or_groups:
            params.append(("and", "(" + ",".join(f"or({group})" for group in or_groups) + ")"))

        return params

    @staticmethod
    def _date_params(predicate: DateBounds) -> list[tuple[str, str | int]]:
        params: list[tuple[str, str | int]] = []
        if predicate.start:
            start = _parse_day(predicate.start)
            params.append((predicate.column, f"gte.{start.isoformat() if start else predicate.start}"))
        if predicate.end:
            end = _parse_day(predicate.end)
            if end is not None:
                # Timestamps later on the last day still belong to the range.
                params.append((predicate.column, f"lt.{(end + timedelta(days=1)).isoformat()}"))
            else:
                params.append((predicate.column, f"lte.{predicate.end}"))
        return params

    @staticmethod
    def _order(query: TransactionQuery) -> str:
        direction = "asc" if query.ascending else "desc"
        return f"{query.sort_column}.{direction}.nullslast,id.{direction}"

    def list_transactions(self, query: TransactionQuery) -> tuple[list[dict[str, Any]], int | None]:
        params = [
            ("select", "*"),
            *self._build_query(query),
            ("order", self._order(query)),
            ("limit", query.limit),
            ("offset", query.offset),
        ]
        return self._client.get_rows(table=self._table, query=params, with_count=True)

    def probe(self) -> None:
        self._client.get_rows(table=self._table, query=[("select", "id"), ("limit", 1)], with_count=True)


def _parse_day(value: str) -> date | None:
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _padded_tags(value: object) -> str:
    """`,a,b,` with tokens trimmed and lowered, so `,tag,` matches whole tokens only."""
    tokens = [token.strip().lower() for token in str(value or "").split(",") if token.strip()]
    return f",{','.join(tokens)}," if tokens else ""


def _unicode_lower(value: object) -> str | None:
    if value is None:
        return None
    return str(value).lower()


class SqliteTransactionsRepository:
    """Embedded SQLite repository rendering predicates as a parameterized WHERE clause.

    SQLite's built-in LOWER() folds ASCII only, so Unicode-aware helpers are
    registered on the connection.
    """

    def __init__(self, connection: sqlite3.Connection, *, table: str = "transactions") -> None:
        self._connection = connection
        self._table = table
        connection.create_function("padded_tags", 1, _padded_tags, deterministic=True)
        connection.create_function("unicode_lower", 1, _unicode_lower, deterministic=True)

    @staticmethod
    def _build_where(query: TransactionQuery) -> tuple[str, list[object]]:
        conditions: list[str] = []
        values: list[object] = []

        for predicate in query.predicates:
            if isinstance(predicate, TextSearch):
                conditions.append(
                    "(instr(unicode_lower(COALESCE(customer_name, '')), ?) > 0"
                    " OR instr(COALESCE(phone_number, ''), ?) > 0)"
                )
                values.extend([predicate.text.lower(), predicate.text])
            elif isinstance(predicate, InSet):
                placeholders = ",".join("?" for _ in predicate.values)
                conditions.append(f"{predicate.column} IN ({placeholders})")
                values.extend(predicate.values)
            elif isinstance(predicate, AnyTag):
                tag_conditions = " OR ".join(
                    f"instr(padded_tags({predicate.column}), ?) > 0" for _ in predicate.tags
                )
                conditions.append(f"({tag_conditions})")
                values.extend(f",{tag.lower()}," for tag in predicate.tags)
            elif isinstance(predicate, NumberRange):
                if predicate.minimum is not None:
                    conditions.append(f"{predicate.column} >= ?")
                    values.append(predicate.minimum)
                if predicate.maximum is not None:
                    conditions.append(f"{predicate.column} <= ?")
                    values.append(predicate.maximum)
            elif isinstance(predicate, DateBounds):
                if predicate.start:
                    conditions.append(f"DATE({predicate.column}) >= DATE(?)")
                    values.append(predicate.start)
                if predicate.end:
                    conditions.append(f"DATE({predicate.column}) <= DATE(?)")
                    values.append(predicate.end)
            else:
                raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, values

    def list_transactions(self, query: TransactionQuery) -> tuple[list[dict[str, Any]], int | None]:
        where, values = self._build_where(query)
        column = query.sort_column
        direction = "ASC" if query.ascending else "DESC"
        rows = self._connection.execute(
            f"SELECT * FROM {self._table}{where}"
            f" ORDER BY {column} IS NULL, {column} {direction}, id {direction}"
            " LIMIT ? OFFSET ?",
            [*values, query.limit, query.offset],
        ).fetchall()
        (total,) = self._connection.execute(
            f"SELECT COUNT(*) FROM {self._table}{where}", values
        ).fetchone()
        return [dict(row) for row in rows], int(total)

    def probe(self) -> None:
        self._connection.execute(f"SELECT 1 FROM {self._table} LIMIT 1").fetchall()


_DEMO_ROWS: list[dict[str, Any]] = [
    {
        "transaction_id": "T-1001",
        "date": "2023-03-14T10:15:00",
        "customer_id": "C-001",
        "customer_name": "Neha Sharma",
        "phone_number": "+919812345670",
        "gender": "Female",
        "age": 29,
        "customer_region": "North",
        "product_id": "P-010",
        "product_name": "Running Shoes",
        "product_category": "Footwear",
        "tags": "sale,new",
        "quantity": 2,
        "price_per_unit": 2499.0,
        "discount_percentage": 10.0,
        "total_amount": 4998.0,
        "final_amount": 4498.2,
        "payment_method": "UPI",
        "order_status": "Completed",
        "delivery_type": "Standard",
        "store_id": "S-01",
        "store_location": "Delhi",
        "salesperson_id": "E-11",
        "employee_name": "Arjun Mehta",
    },
    {
        "transaction_id": "T-1002",
        "date": "2023-03-15T18:40:00",
        "customer_id": "C-002",
        "customer_name": "Rahul Verma",
        "phone_number": "+919876501234",
        "gender": "Male",
        "age": 41,
        "customer_region": "South",
        "product_id": "P-022",
        "product_name": "Cotton Shirt",
        "product_category": "Clothing",
        "tags": "popular",
        "quantity": 1,
        "price_per_unit": 1299.0,
        "discount_percentage": 0.0,
        "total_amount": 1299.0,
        "final_amount": 1299.0,
        "payment_method": "Card",
        "order_status": "Completed",
        "delivery_type": "Express",
        "store_id": "S-02",
        "store_location": "Chennai",
        "salesperson_id": "E-07",
        "employee_name": "Kavya Rao",
    },
    {
        "transaction_id": "T-1003",
        "date": "2023-03-16T09:05:00",
        "customer_id": "C-003",
        "customer_name": "Sana Iqbal",
        "phone_number": "+919900112233",
        "gender": "Female",
        "age": None,
        "customer_region": "East",
        "product_id": "P-031",
        "product_name": "Wireless Earbuds",
        "product_category": "Electronics",
        "tags": "sale, popular",
        "quantity": 3,
        "price_per_unit": 1999.0,
        "discount_percentage": 15.0,
        "total_amount": 5997.0,
        "final_amount": 5097.45,
        "payment_method": "Cash",
        "order_status": "Pending",
        "delivery_type": "Store Pickup",
        "store_id": "S-03",
        "store_location": "Kolkata",
        "salesperson_id": "E-03",
        "employee_name": "Vikram Das",
    },
]
