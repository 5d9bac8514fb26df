# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Provide a canonical APIRouter wrapper and shared utilities for Tradebook HTTP endpoints:
      - Versioned routing with stable prefixes (e.g., "/v1/trades").
      - Standard error response mapping using ErrorEnvelope.
      - Pagination query dependency with hard caps.
      - A helper to emit presenter results with headers (ETag, X-Request-ID).

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Query, Request, Response

from tradebook_api.adapters.presenters.base_presenter import PresentResult
from tradebook_api.adapters.schemas.http.envelopes import ErrorEnvelope
from tradebook_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


@dataclass(frozen=True)
class PageParams:
    """Validated pagination parameters.

    Attributes:
        page: 1-indexed page number.
        page_size: Items per page.
    """

    page: int
    page_size: int

    @property
    def offset(self) -> int:
        """Return zero-based row offset."""
        return (self.page - 1) * self.page_size


class BaseRouter(APIRouter):
    """Canonical router wrapper for Tradebook HTTP endpoints.

    Args:
        version: API version segment (e.g., "v1").
        resource: Plural resource segment (e.g., "trades").
        prefix: Optional explicit prefix (overrides version/resource).
        tags: Default tags applied to all routes mounted on this router.
        dependencies: Optional global dependencies for all routes.
        **kwargs: Additional APIRouter kwargs.
    """

    MIN_PAGE: int = 1
    MIN_PAGE_SIZE: int = 1
    MAX_PAGE_SIZE: int = 200
    DEFAULT_PAGE_SIZE: int = 50

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        dependencies: Sequence[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        computed_prefix = prefix or f"/{version}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            dependencies=list(dependencies) if dependencies is not None else None,
            **kwargs,
        )
        _LOGGER.debug(
            "router_initialized",
            extra={"prefix": computed_prefix, "tags": [str(t) for t in tags or []]},
        )

    @staticmethod
    def trace_id(request: Request) -> str | None:
        """Return the correlation id assigned by ``RequestIdMiddleware``."""
        return getattr(request.state, "request_id", None)

    @staticmethod
    def send(response: Response, result: PresentResult[Any]) -> Any:
        """Apply presenter headers and status to ``response`` and return the body."""
        response.headers.update(dict(result.headers))
        if result.status_code is not None:
            response.status_code = result.status_code
        return result.body

    @classmethod
    def page_params(
        cls,
        page: int | None = Query(
            default=None,
            description="1-indexed page number.",
            examples=[1],
            ge=1,
        ),
        page_size: int | None = Query(
            default=None,
            description="Items per page (bounded by MAX_PAGE_SIZE).",
            examples=[50],
            ge=1,
        ),
    ) -> PageParams:
        """Return validated pagination parameters.

        Defaults to page 1 and ``DEFAULT_PAGE_SIZE``; ``page_size`` is clamped
        to ``MAX_PAGE_SIZE``.
        """
        p = page if page is not None else cls.MIN_PAGE
        ps = page_size if page_size is not None else cls.DEFAULT_PAGE_SIZE
        ps = max(cls.MIN_PAGE_SIZE, min(ps, cls.MAX_PAGE_SIZE))
        return PageParams(page=max(p, cls.MIN_PAGE), page_size=ps)

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error response mapping for endpoints."""
        return {
            400: {"model": ErrorEnvelope, "description": "Bad request (validation or parameter)."},
            401: {"model": ErrorEnvelope, "description": "Unauthorized (missing/invalid auth)."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
            503: {"model": ErrorEnvelope, "description": "Service unavailable."},
        }
