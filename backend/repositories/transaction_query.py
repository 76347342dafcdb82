"""Store-agnostic translation of transaction filters into a bounded query.

Predicates are plain values; each repository adapter renders them for its own
store (PostgREST parameters, parameterized SQL, or in-process evaluation).
Every predicate in a query combines with AND; values inside one predicate
combine with OR.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from shared.models import SortOrder, TransactionFilters, TransactionSortField


@dataclass(frozen=True, slots=True)
class TextSearch:
    """Customer name contains `text` case-insensitively, or phone number contains it verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class InSet:
    column: str
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AnyTag:
    """Comma-joined tag column holds at least one of `tags` as a whole token."""

    column: str
    tags: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class NumberRange:
    column: str
    minimum: float | None = None
    maximum: float | None = None


@dataclass(frozen=True, slots=True)
class DateBounds:
    """Inclusive bounds compared on the date portion of `column` only."""

    column: str
    start: str | None = None
    end: str | None = None


Predicate = Union[TextSearch, InSet, AnyTag, NumberRange, DateBounds]


MULTI_SELECT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("regions", "customer_region"),
    ("genders", "gender"),
    ("categories", "product_category"),
    ("payment_methods", "payment_method"),
)

SORT_COLUMNS: dict[TransactionSortField, str] = {
    TransactionSortField.DATE: "date",
    TransactionSortField.QUANTITY: "quantity",
    TransactionSortField.CUSTOMER_NAME: "customer_name",
}

DEFAULT_SORT_COLUMN = SORT_COLUMNS[TransactionSortField.DATE]


def build_predicates(filters: TransactionFilters) -> list[Predicate]:
    """Emit one predicate per applied filter field, in a stable order."""

    predicates: list[Predicate] = []

    if filters.q:
        predicates.append(TextSearch(text=filters.q))

    for field_name, column in MULTI_SELECT_COLUMNS:
        values = getattr(filters, field_name)
        if values:
            predicates.append(InSet(column=column, values=tuple(values)))

    if filters.tags:
        predicates.append(AnyTag(column="tags", tags=tuple(filters.tags)))

    if filters.age_min is not None or filters.age_max is not None:
        predicates.append(NumberRange(column="age", minimum=filters.age_min, maximum=filters.age_max))

    if filters.date_from or filters.date_to:
        predicates.append(DateBounds(column="date", start=filters.date_from, end=filters.date_to))

    return predicates


def resolve_sort_column(sort_by: TransactionSortField | str | None) -> str:
    """Map a caller sort key to a column, falling back to the date column."""

    if isinstance(sort_by, TransactionSortField):
        return SORT_COLUMNS[sort_by]
    try:
        return SORT_COLUMNS[TransactionSortField(sort_by)]
    except ValueError:
        return DEFAULT_SORT_COLUMN


@dataclass(frozen=True, slots=True)
class TransactionQuery:
    predicates: tuple[Predicate, ...]
    sort_column: str = DEFAULT_SORT_COLUMN
    ascending: bool = False
    offset: int = 0
    limit: int = 10

    @property
    def range_end(self) -> int:
        """Inclusive index of the last row in the page window."""
        return self.offset + self.limit - 1


def assemble_query(filters: TransactionFilters) -> TransactionQuery:
    """Combine the predicate set with sort and pagination for one request."""

    return TransactionQuery(
        predicates=tuple(build_predicates(filters)),
        sort_column=resolve_sort_column(filters.sort_by),
        ascending=filters.sort_order == SortOrder.ASC,
        offset=filters.offset,
        limit=filters.page_size,
    )
