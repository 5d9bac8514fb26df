# src/tradebook_api/adapters/schemas/http/envelopes.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Purpose:
    Canonical transport-facing HTTP envelopes:
      - ErrorEnvelope
      - SuccessEnvelope[T]
      - PaginatedEnvelope[T]
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tradebook_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = [
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "PaginatedEnvelope",
]


class ErrorObject(BaseModel):
    """Structured error object inside ErrorEnvelope.

    Error codes are UPPER_SNAKE_CASE and stable across releases.
    """

    model_config = ConfigDict(
        title="ErrorObject",
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "code": "LEDGER_UNAVAILABLE",
                    "http_status": 503,
                    "message": "trade ledger is temporarily unavailable",
                    "details": {"operation": "append"},
                    "trace_id": "req-123",
                }
            ]
        },
    )

    code: str = Field(
        ...,
        description=(
            "Stable machine-readable error code, e.g. `INVALID_SYMBOL`, "
            "`INVALID_TRADE_INPUT`, `LEDGER_UNAVAILABLE`, `VALIDATION_ERROR`."
        ),
    )
    http_status: int = Field(..., description="Associated HTTP status.")
    message: str = Field(..., description="Human-readable error description.")
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional structured details safe for clients.",
    )
    trace_id: str | None = Field(
        default=None,
        description="Request correlation identifier.",
    )


class ErrorEnvelope(BaseHTTPSchema):
    r"""Canonical error envelope: {"error": ErrorObject}."""

    model_config = ConfigDict(title="ErrorEnvelope", extra="forbid")

    error: ErrorObject = Field(..., description="Structured error details.")


class SuccessEnvelope[T](BaseHTTPSchema):
    r"""Success envelope for non-paginated responses: {"data": T}."""

    model_config = ConfigDict(title="SuccessEnvelope", extra="forbid")

    data: T = Field(..., description="Returned resource or value.")


class PaginatedEnvelope[T](BaseHTTPSchema):
    """Paginated success envelope."""

    model_config = ConfigDict(title="PaginatedEnvelope", extra="forbid")

    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=200)
    total: int = Field(..., ge=0)
    items: Sequence[T] = Field(...)
