"""Tests for shared configuration helpers."""

from shared import config


def test_cors_allow_origins_defaults_in_dev(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    assert config.cors_allow_origins() == ["http://localhost:5173", "http://127.0.0.1:5173"]


def test_cors_allow_origins_parses_comma_separated_list(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.com, https://b.com")

    assert config.cors_allow_origins() == ["https://a.com", "https://b.com"]


def test_cors_allow_origins_warns_and_defaults_to_empty_in_prod(monkeypatch, caplog) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    assert config.cors_allow_origins() == []
    assert "cors_allow_origins_empty_in_prod" in caplog.text


def test_app_env_defaults_to_dev(monkeypatch) -> None:
    monkeypatch.delenv("APP_ENV", raising=False)

    assert config.app_env() == "dev"


def test_supabase_key_prefers_supabase_key(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_KEY", "primary")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "fallback")

    assert config.supabase_key() == "primary"


def test_supabase_key_falls_back_to_service_role(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_KEY", "  ")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "fallback")

    assert config.supabase_key() == "fallback"


def test_supabase_url_blank_is_unset(monkeypatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "   ")

    assert config.supabase_url() is None


def test_transactions_table_defaults(monkeypatch) -> None:
    monkeypatch.delenv("TRANSACTIONS_TABLE", raising=False)

    assert config.transactions_table() == "transactions"


def test_default_page_size_uses_default_on_invalid(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "invalid")
    assert config.default_page_size() == 10

    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "500")
    assert config.default_page_size() == 10

    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "20")
    assert config.default_page_size() == 20
