"""Composition root for backend services."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from backend.db import sqlite_store
from backend.db.supabase_client import SupabaseClient, SupabaseSettings
from backend.repositories.transactions_repository import (
    InMemoryTransactionsRepository,
    SqliteTransactionsRepository,
    SupabaseTransactionsRepository,
    TransactionsRepository,
)
from backend.services.transaction_service import TransactionService
from shared import config
from shared.models import ConfigurationError


logger = logging.getLogger(__name__)


_SUPABASE_URL_PATTERN = re.compile(r"^https://[A-Za-z0-9.-]+(:\d+)?$")


@dataclass(frozen=True, slots=True)
class StoreSettings:
    """Store selection read once at startup and passed to the query layer."""

    supabase: SupabaseSettings | None = None
    sqlite_path: str | None = None
    table: str = "transactions"
    default_page_size: int = 10

    @property
    def backend(self) -> str:
        if self.supabase is not None:
            return "supabase"
        if self.sqlite_path is not None:
            return "sqlite"
        return "memory"


def mask_key(key: str) -> str:
    if len(key) <= 10:
        return "*****"
    return f"{key[:4]}...{key[-4:]}"


def load_store_settings() -> StoreSettings:
    """Read store configuration from the environment, failing fast on bad values."""

    supabase_url = config.supabase_url()
    supabase_key = config.supabase_key()
    supabase_settings: SupabaseSettings | None = None

    if supabase_url:
        normalized_url = supabase_url.rstrip("/")
        if not _SUPABASE_URL_PATTERN.match(normalized_url):
            raise ConfigurationError(
                f"Invalid SUPABASE_URL {supabase_url!r}; expected https://<project-ref>.supabase.co"
            )
        if not supabase_key:
            raise ConfigurationError("SUPABASE_URL is set but SUPABASE_KEY is missing")
        supabase_settings = SupabaseSettings(url=normalized_url, api_key=supabase_key)
        logger.info("supabase_configured url=%s key=%s", normalized_url, mask_key(supabase_key))

    return StoreSettings(
        supabase=supabase_settings,
        sqlite_path=config.sqlite_path(),
        table=config.transactions_table(),
        default_page_size=config.default_page_size(),
    )


def build_transactions_repository(settings: StoreSettings) -> TransactionsRepository:
    if settings.supabase is not None:
        return SupabaseTransactionsRepository(SupabaseClient(settings.supabase), table=settings.table)
    if settings.sqlite_path is not None:
        connection = sqlite_store.connect(settings.sqlite_path, table=settings.table)
        return SqliteTransactionsRepository(connection, table=settings.table)
    logger.warning("transactions_store_not_configured using in-memory demo rows")
    return InMemoryTransactionsRepository()


def build_transaction_service(settings: StoreSettings | None = None) -> TransactionService:
    """Build the transaction service over the configured store adapter."""

    resolved = settings if settings is not None else load_store_settings()
    return TransactionService(
        build_transactions_repository(resolved),
        default_page_size=resolved.default_page_size,
    )
