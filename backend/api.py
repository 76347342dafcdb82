"""FastAPI entrypoint for the transactions dashboard backend."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from backend.factory import build_transaction_service, load_store_settings
from backend.services.transaction_service import TransactionService
from shared import config as _config
from shared.models import TransactionFilterOptions


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_transaction_service() -> TransactionService:
    """Create and cache the transaction service for the configured store."""

    return build_transaction_service(load_store_settings())


def _query_params(request: Request) -> dict[str, list[str]]:
    """Collect the query string as a multi-valued bag; repeated keys keep every value."""

    params: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, []).append(value)
    return params


@asynccontextmanager
async def lifespan(_app: FastAPI):
    service = get_transaction_service()
    try:
        service.repository.probe()
    except Exception as exc:
        # The server still starts so the store problem can be fixed while it runs.
        logger.warning("transactions_store_probe_failed error=%s", exc)
    yield


app = FastAPI(title="Sales Transactions API", lifespan=lifespan)

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
def health() -> dict[str, object]:
    """Healthcheck endpoint."""

    return {"ok": True, "env": _config.app_env()}


@app.get("/api/transactions")
def list_transactions(request: Request) -> dict[str, Any]:
    """Return one filtered, sorted page of transactions with pagination metadata."""

    params = _query_params(request)
    try:
        page = get_transaction_service().list_transactions(params)
    except Exception as exc:
        logger.exception("list_transactions_failed params=%s", params)
        raise HTTPException(status_code=500, detail="Internal server error") from exc
    return page.to_payload()


@app.get("/api/transactions/summary")
def summarize_transactions(request: Request) -> dict[str, Any]:
    """Return summary-card figures computed over the requested page."""

    params = _query_params(request)
    try:
        summary, page = get_transaction_service().summarize_transactions(params)
    except Exception as exc:
        logger.exception("summarize_transactions_failed params=%s", params)
        raise HTTPException(status_code=500, detail="Internal server error") from exc
    return {
        "summary": summary.model_dump(by_alias=True),
        "meta": page.meta.model_dump(by_alias=True),
    }


@app.get("/api/transactions/filter-options")
def filter_options() -> dict[str, list[str]]:
    """Return the option lists offered by the multi-select filters."""

    return TransactionFilterOptions().model_dump(by_alias=True)
