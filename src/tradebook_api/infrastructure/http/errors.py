# src/tradebook_api/infrastructure/http/errors.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Exception handlers that render every failure as an ``ErrorEnvelope``."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from tradebook_api.domain.exceptions.base import DomainError
from tradebook_api.domain.exceptions.ledger import InvalidTradeInput, LedgerUnavailable
from tradebook_api.domain.exceptions.market_data import InvalidSymbol
from tradebook_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

LEDGER_RETRY_AFTER_S = 5

# Most specific first; anything unmapped is a 500.
_DOMAIN_STATUS: tuple[tuple[type[DomainError], int], ...] = (
    (InvalidSymbol, 400),
    (InvalidTradeInput, 422),
    (LedgerUnavailable, 503),
)


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def domain_status(exc: DomainError) -> int:
    """Return the HTTP status for a domain error."""
    for error_type, status in _DOMAIN_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


async def handle_domain_error(request: Request, exc: DomainError) -> Response:
    status = domain_status(exc)
    if status >= 500:
        logger.warning("domain_error", extra={"code": exc.code, "http_status": status})
    payload = error_envelope(
        code=exc.code,
        http_status=status,
        message=exc.message or exc.code,
        details=jsonable_encoder(exc.details),
        trace_id=_trace_id(request),
    )
    headers = None
    if isinstance(exc, LedgerUnavailable):
        headers = {"Retry-After": str(LEDGER_RETRY_AFTER_S)}
    return JSONResponse(status_code=status, content=payload, headers=headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception("unhandled_exception", extra={"error_type": type(exc).__name__})
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        details=None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)
