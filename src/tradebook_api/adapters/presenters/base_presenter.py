# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Presenter utilities and canonical envelope helpers.

Purpose:
    Thin, framework-aware helpers used by routers to consistently shape HTTP
    responses and headers.

Responsibilities:
    * Build SuccessEnvelope and PaginatedEnvelope instances.
    * Compute strong, quoted ETags from canonical JSON material.
    * Echo X-Request-ID.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fastapi import Response

from tradebook_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope


def _compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return f'"{hashlib.sha256(material).hexdigest()}"'


@dataclass(slots=True)
class PresentResult[T]:
    """Presentation result envelope.

    Attributes:
        body: A Pydantic envelope instance.
        headers: Extra HTTP headers to apply.
        status_code: Optional HTTP status override.
    """

    body: T
    headers: Mapping[str, str]
    status_code: int | None = None


class BasePresenter:
    """Base presenter for HTTP response shaping in adapter layers.

    Assembles standard envelopes and headers and leaves all business decisions
    to the use cases.
    """

    def present_success(
        self,
        *,
        data: Any,
        trace_id: str | None = None,
        status_code: int | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Build a SuccessEnvelope with ``X-Request-ID`` and a strong ``ETag``."""
        body = SuccessEnvelope[Any](data=data)
        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        headers["ETag"] = _compute_quoted_etag(body.model_dump_http())
        return PresentResult(body=body, headers=headers, status_code=status_code)

    def present_paginated(
        self,
        *,
        items: list[Any],
        page: int,
        page_size: int,
        total: int,
        trace_id: str | None = None,
    ) -> PresentResult[PaginatedEnvelope[Any]]:
        """Build a PaginatedEnvelope (no ETag; listings change on every append)."""
        body = PaginatedEnvelope[Any](page=page, page_size=page_size, total=total, items=items)
        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        return PresentResult(body=body, headers=headers)

    @staticmethod
    def apply_headers(result: PresentResult[Any], response: Response) -> None:
        """Apply headers and optional status code to the outgoing response."""
        response.headers.update(dict(result.headers))
        if result.status_code is not None:
            response.status_code = result.status_code
