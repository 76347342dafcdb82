"""Backend entrypoint."""

from backend.factory import build_transaction_service


def create_backend_services() -> dict[str, object]:
    """Factory for backend service objects used by the API or local integrations."""
    return {"transaction_service": build_transaction_service()}
