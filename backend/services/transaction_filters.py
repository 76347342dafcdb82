"""Permissive normalization of raw listing parameters into `TransactionFilters`.

Every field may arrive absent, as a scalar, as a comma-joined string or as a
sequence. Nothing here raises: malformed values mean "filter not applied".
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from shared.models import SortOrder, TransactionFilters, TransactionSortField


MAX_PAGE_SIZE = 100
# Keeps (page - 1) * page_size + page_size inside a signed 64-bit store integer.
MAX_PAGE = (2**63 - 1) // MAX_PAGE_SIZE - 1

_MULTI_SELECT_PARAMS: tuple[tuple[str, str], ...] = (
    ("regions", "regions"),
    ("genders", "genders"),
    ("categories", "categories"),
    ("tags", "tags"),
    ("paymentMethods", "payment_methods"),
)


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return next((item for item in value if item is not None), None)
    return value


def _text(value: Any) -> str | None:
    raw_value = _first(value)
    if raw_value is None:
        return None
    text = str(raw_value).strip()
    return text or None


def split_multi_value(value: Any) -> list[str]:
    """Return trimmed, non-empty, de-duplicated values in first-seen order."""

    if value is None:
        return []
    items = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
    result: list[str] = []
    for item in items:
        if item is None:
            continue
        for token in str(item).split(","):
            cleaned = token.strip()
            if cleaned and cleaned not in result:
                result.append(cleaned)
    return result


def parse_number(value: Any) -> float | None:
    """Parse a finite number, or return None for blank and non-numeric input."""

    text = _text(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_int(value: Any) -> int | None:
    number = parse_number(value)
    if number is None:
        return None
    return int(number)


def parse_page(value: Any) -> int:
    page = _parse_int(value)
    if page is None:
        return 1
    return min(MAX_PAGE, max(1, page))


def parse_page_size(value: Any, default: int = 10) -> int:
    page_size = _parse_int(value)
    if not page_size:
        return default
    return min(MAX_PAGE_SIZE, max(1, page_size))


def parse_sort_field(value: Any) -> TransactionSortField:
    text = _text(value)
    try:
        return TransactionSortField(text)
    except ValueError:
        return TransactionSortField.DATE


def parse_sort_order(value: Any) -> SortOrder:
    text = _text(value)
    if text is not None and text.lower() == SortOrder.ASC.value:
        return SortOrder.ASC
    return SortOrder.DESC


def normalize_filters(params: Mapping[str, Any], *, default_page_size: int = 10) -> TransactionFilters:
    """Build canonical filters from a raw parameter bag keyed by request names."""

    multi_select = {
        field_name: split_multi_value(params.get(param_name))
        for param_name, field_name in _MULTI_SELECT_PARAMS
    }

    return TransactionFilters(
        q=_text(params.get("q")),
        **multi_select,
        age_min=parse_number(params.get("ageMin")),
        age_max=parse_number(params.get("ageMax")),
        date_from=_text(params.get("dateFrom")),
        date_to=_text(params.get("dateTo")),
        sort_by=parse_sort_field(params.get("sortBy")),
        sort_order=parse_sort_order(params.get("sortOrder")),
        page=parse_page(params.get("page")),
        page_size=parse_page_size(params.get("pageSize"), default=default_page_size),
    )
