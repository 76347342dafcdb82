"""Transaction listing service.

Raw request parameters flow one way: filter normalization, query assembly,
repository execution, row normalization, envelope.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from backend.repositories.transaction_query import assemble_query
from backend.repositories.transactions_repository import TransactionsRepository
from backend.services.transaction_filters import normalize_filters
from backend.services.transaction_results import build_page, normalize_row, summarize_rows
from shared.models import TransactionPage, TransactionsSummary


logger = logging.getLogger(__name__)


class TransactionService:
    """Read-only listing over the transactions table."""

    def __init__(self, repository: TransactionsRepository, *, default_page_size: int = 10) -> None:
        self._repository = repository
        self._default_page_size = default_page_size

    @property
    def repository(self) -> TransactionsRepository:
        return self._repository

    def list_transactions(self, params: Mapping[str, Any]) -> TransactionPage:
        filters = normalize_filters(params, default_page_size=self._default_page_size)
        query = assemble_query(filters)

        try:
            rows, total = self._repository.list_transactions(query)
        except Exception:
            logger.exception(
                "transactions_list_failed filters=%s offset=%s limit=%s",
                filters.model_dump(mode="json"),
                query.offset,
                query.limit,
            )
            raise

        if total is None:
            logger.warning("transactions_count_unavailable page=%s page_size=%s", filters.page, filters.page_size)

        return build_page(
            [normalize_row(row) for row in rows],
            total=total,
            page=filters.page,
            page_size=filters.page_size,
        )

    def summarize_transactions(self, params: Mapping[str, Any]) -> tuple[TransactionsSummary, TransactionPage]:
        """Return summary-card figures for the requested page along with the page itself."""

        page = self.list_transactions(params)
        return summarize_rows(page.data), page
