"""Deterministic transaction rows and store stubs for repository/service tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from backend.db import sqlite_store
from backend.repositories.transactions_repository import (
    InMemoryTransactionsRepository,
    SqliteTransactionsRepository,
)


RECORD_A: dict[str, Any] = {
    "transaction_id": "T-A",
    "date": "2023-05-02T12:00:00",
    "customer_id": "C-A",
    "customer_name": "Alice Fernandes",
    "phone_number": "+919811100001",
    "gender": "Male",
    "age": 30,
    "customer_region": "North",
    "product_category": "Clothing",
    "tags": "sale,new",
    "quantity": 2,
    "total_amount": 200.0,
    "final_amount": 180.0,
    "payment_method": "Card",
}

RECORD_B: dict[str, Any] = {
    "transaction_id": "T-B",
    "date": "2023-05-01T09:00:00",
    "customer_id": "C-B",
    "customer_name": "Bina Kapoor",
    "phone_number": "+919822200002",
    "gender": "Female",
    "age": 22,
    "customer_region": "South",
    "product_category": "Footwear",
    "tags": "sale",
    "quantity": 1,
    "total_amount": 100.0,
    "final_amount": 100.0,
    "payment_method": "UPI",
}

RECORD_C: dict[str, Any] = {
    "transaction_id": "T-C",
    "date": "2023-04-30T23:30:00",
    "customer_id": "C-C",
    "customer_name": "Chetan Malhotra",
    "phone_number": "+919833300003",
    "gender": "Male",
    "age": None,
    "customer_region": "South",
    "product_category": "Electronics",
    "tags": "category",
    "quantity": 5,
    "total_amount": 50.0,
    "final_amount": 0.0,
    "payment_method": "Cash",
}

FIXED_ROWS: list[dict[str, Any]] = [RECORD_A, RECORD_B, RECORD_C]


def build_memory_repository(rows: list[dict[str, Any]] | None = None) -> InMemoryTransactionsRepository:
    return InMemoryTransactionsRepository(rows=list(FIXED_ROWS if rows is None else rows))


def build_sqlite_repository(rows: list[dict[str, Any]] | None = None) -> SqliteTransactionsRepository:
    connection = sqlite_store.connect(":memory:")
    sqlite_store.insert_transactions(connection, list(FIXED_ROWS if rows is None else rows))
    return SqliteTransactionsRepository(connection)


@dataclass(slots=True)
class SupabaseClientStub:
    """Records PostgREST queries and returns canned rows plus a total."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    total: int | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    def get_rows(self, *, table, query, with_count):
        self.calls.append({"table": table, "query": query, "with_count": with_count})
        return list(self.rows), self.total


class FailingRepository:
    """Repository whose store is unreachable."""

    def list_transactions(self, query):
        raise RuntimeError("Supabase request failed with status 503: unavailable")

    def probe(self) -> None:
        raise RuntimeError("Supabase request failed with status 503: unavailable")
