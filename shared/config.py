"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


_DEFAULT_PAGE_SIZE = 10
_DEFAULT_TABLE = "transactions"


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if app_env().strip().lower() in {"dev", "local"}:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS",
        app_env(),
    )

    return []


def supabase_url() -> str | None:
    """Return Supabase URL when configured."""
    value = (get_env("SUPABASE_URL", "") or "").strip()
    return value or None


def supabase_key() -> str | None:
    """Return the Supabase API key, preferring `SUPABASE_KEY` over the service role name."""
    for name in ("SUPABASE_KEY", "SUPABASE_SERVICE_ROLE_KEY"):
        value = (get_env(name, "") or "").strip()
        if value:
            return value
    return None


def sqlite_path() -> str | None:
    """Return the embedded SQLite database path when configured."""
    value = (get_env("TRANSACTIONS_SQLITE_PATH", "") or "").strip()
    return value or None


def transactions_table() -> str:
    """Return the table holding transaction records."""
    return (get_env("TRANSACTIONS_TABLE", _DEFAULT_TABLE) or _DEFAULT_TABLE).strip() or _DEFAULT_TABLE


def default_page_size() -> int:
    """Return the page size used when a request does not provide a usable one."""
    raw_value = (get_env("DEFAULT_PAGE_SIZE", "") or "").strip()
    try:
        value = int(raw_value)
    except ValueError:
        return _DEFAULT_PAGE_SIZE
    if 1 <= value <= 100:
        return value
    return _DEFAULT_PAGE_SIZE
