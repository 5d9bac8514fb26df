# src/tradebook_api/main.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and all
    routers. Provides an application factory (`create_app`) and a module-level
    eager app (`app`) for tooling.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan initializes the DB engine (when DATABASE_URL is set) and a
      shared httpx client for quote sources, and tears them down safely.
    • Root JSON logging configured at import time.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.responses import Response as StarletteResponse

from tradebook_api.adapters.routers.portfolio_router import router as portfolio_router
from tradebook_api.adapters.routers.quotes_router import router as quotes_router
from tradebook_api.adapters.routers.trades_router import router as trades_router
from tradebook_api.config.settings import Settings, get_settings
from tradebook_api.dependencies.ledger import build_trade_ledger
from tradebook_api.dependencies.quotes import build_acquire_quote
from tradebook_api.domain.exceptions.base import DomainError
from tradebook_api.infrastructure.database.session import dispose_engine
from tradebook_api.infrastructure.external_apis.settings import get_quote_source_settings
from tradebook_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from tradebook_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from tradebook_api.infrastructure.middleware.request_id import RequestIdMiddleware

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``get__v1_trades_symbol_history``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------
@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create shared infrastructure on startup and release it on shutdown.

    Exposes ``settings``, ``http_client``, ``trade_ledger`` and
    ``acquire_quote`` on ``app.state`` for the dependency providers.
    """
    settings = get_settings()
    quote_settings = get_quote_source_settings()

    http_client = httpx.AsyncClient(timeout=quote_settings.timeout_s, follow_redirects=True)
    app.state.settings = settings
    app.state.http_client = http_client
    app.state.trade_ledger = build_trade_ledger()
    app.state.acquire_quote = build_acquire_quote(quote_settings, http_client)
    logger.info(
        "runtime_started",
        extra={
            "ledger_backend": "memory" if settings.uses_in_memory_ledger else "sqlalchemy",
            "quote_sources": app.state.acquire_quote.source_ids,
        },
    )
    try:
        yield
    finally:
        await http_client.aclose()
        await dispose_engine()
        logger.info("runtime_stopped")


# -----------------------------------------------------------------------------
# Middleware & CORS
# -----------------------------------------------------------------------------
def _attach_cors(app: FastAPI, settings: Settings) -> None:
    """Attach CORS middleware based on settings (no origins means none allowed)."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _patch_exception_handlers(app: FastAPI) -> None:
    """Install structured ``ErrorEnvelope`` handlers."""

    async def _domain_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, DomainError):
            raise exc
        return await handle_domain_error(request, exc)

    async def _http_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, HTTPException):
            raise exc
        return await handle_http_exception(request, exc)

    async def _validation_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, RequestValidationError):
            raise exc
        return await handle_validation_error(request, exc)

    async def _unhandled_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        return await handle_unhandled_exception(request, exc)

    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------
def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings: Settings = get_settings()
    service_version = settings.service_version or "0.0.0"

    app = FastAPI(
        title="Tradebook API",
        version=service_version,
        description="Portfolio tracker: multi-source quotes, trade ledger and P&L.",
        lifespan=runtime_lifespan,
        generate_unique_id_function=_stable_operation_id,
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
    )

    _patch_exception_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    _attach_cors(app, settings)

    app.include_router(quotes_router)
    app.include_router(trades_router)
    app.include_router(portfolio_router)

    @app.get("/healthz", include_in_schema=False)
    async def healthz() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    logger.info(
        "service_startup",
        extra={
            "service": settings.service_name,
            "env": settings.environment.value,
            "version": service_version,
        },
    )
    return app


# Eager app for tools (uvicorn tradebook_api.main:app).
app: FastAPI = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "tradebook_api.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8080")),
    )
