from backend.main import create_backend_services
from shared.models import TransactionFilters


def test_imports_succeed(monkeypatch) -> None:
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "SUPABASE_SERVICE_ROLE_KEY", "TRANSACTIONS_SQLITE_PATH"):
        monkeypatch.delenv(name, raising=False)

    services = create_backend_services()

    assert "transaction_service" in services
    assert TransactionFilters(page=1, page_size=10).page_size == 10
