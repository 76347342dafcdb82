"""Tests for predicate building and query assembly."""

from backend.repositories.transaction_query import (
    AnyTag,
    DateBounds,
    InSet,
    NumberRange,
    TextSearch,
    assemble_query,
    build_predicates,
    resolve_sort_column,
)
from shared.models import SortOrder, TransactionFilters, TransactionSortField


def test_no_filters_emit_no_predicates() -> None:
    assert build_predicates(TransactionFilters()) == []


def test_each_applied_field_emits_one_predicate() -> None:
    filters = TransactionFilters(
        q="neha",
        regions=["North", "South"],
        genders=["Female"],
        categories=["Clothing"],
        tags=["sale", "new"],
        payment_methods=["UPI"],
        age_min=18,
        date_to="2023-12-31",
    )

    assert build_predicates(filters) == [
        TextSearch(text="neha"),
        InSet(column="customer_region", values=("North", "South")),
        InSet(column="gender", values=("Female",)),
        InSet(column="product_category", values=("Clothing",)),
        InSet(column="payment_method", values=("UPI",)),
        AnyTag(column="tags", tags=("sale", "new")),
        NumberRange(column="age", minimum=18, maximum=None),
        DateBounds(column="date", start=None, end="2023-12-31"),
    ]


def test_resolve_sort_column_uses_whitelist() -> None:
    assert resolve_sort_column(TransactionSortField.CUSTOMER_NAME) == "customer_name"
    assert resolve_sort_column("quantity") == "quantity"
    assert resolve_sort_column("customer_name; DROP TABLE transactions") == "date"
    assert resolve_sort_column(None) == "date"


def test_assemble_query_computes_offset_and_inclusive_window() -> None:
    query = assemble_query(
        TransactionFilters(page=3, page_size=20, sort_by=TransactionSortField.QUANTITY, sort_order=SortOrder.ASC)
    )

    assert query.offset == 40
    assert query.limit == 20
    assert query.range_end == 59
    assert query.sort_column == "quantity"
    assert query.ascending is True


def test_assemble_query_defaults_to_date_descending() -> None:
    query = assemble_query(TransactionFilters())

    assert query.sort_column == "date"
    assert query.ascending is False
    assert query.offset == 0
    assert query.range_end == 9
