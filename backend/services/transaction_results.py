"""Result normalization and response envelope helpers for transaction listings."""

from __future__ import annotations

import math
from typing import Any, Iterable

from shared.models import PageMeta, TransactionPage, TransactionsSummary


def _finite_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _amount(value: Any) -> float:
    number = _finite_number(value)
    return number if number is not None else 0.0


def _quantity(value: Any) -> int:
    number = _finite_number(value)
    return int(number) if number is not None else 0


def _age(value: Any) -> int | None:
    number = _finite_number(value)
    if number is None or number < 0:
        return None
    return int(number)


def normalize_tags(value: Any) -> str:
    """Canonical comma-joined tag string: tokens trimmed, blanks dropped."""

    if not isinstance(value, str):
        return ""
    return ",".join(token.strip() for token in value.split(",") if token.strip())


def normalize_row(row: dict[str, Any]) -> dict[str, Any]:
    """Coerce a stored row to the client-facing shape; other fields pass through."""

    return {
        **row,
        "quantity": _quantity(row.get("quantity")),
        "age": _age(row.get("age")),
        "total_amount": _amount(row.get("total_amount")),
        "final_amount": _amount(row.get("final_amount")),
        "tags": normalize_tags(row.get("tags")),
    }


def build_page(
    rows: list[dict[str, Any]],
    *,
    total: int | None,
    page: int,
    page_size: int,
) -> TransactionPage:
    """Wrap normalized rows with pagination metadata.

    When the store could not count, `total` falls back to the number of
    returned rows and `totalPages` is derived from it.
    """

    effective_total = total if total is not None else len(rows)
    return TransactionPage(
        data=rows,
        meta=PageMeta(
            total=effective_total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(effective_total / page_size),
        ),
    )


def summarize_rows(rows: Iterable[dict[str, Any]]) -> TransactionsSummary:
    units = 0
    total_amount = 0.0
    total_discount = 0.0
    count = 0
    for row in rows:
        count += 1
        units += _quantity(row.get("quantity"))
        gross = _amount(row.get("total_amount"))
        net = _amount(row.get("final_amount"))
        total_amount += net or gross
        total_discount += gross - net
    return TransactionsSummary(
        total_units=units,
        total_amount=round(total_amount, 2),
        total_discount=round(total_discount, 2),
        count=count,
    )
