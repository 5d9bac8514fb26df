# src/tradebook_api/infrastructure/external_apis/base_client.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""HTTP quote source base: transport, error mapping and payload parsing.

Concrete sources supply a ``source_id``, the URL and query parameters for a
symbol, extra request headers and the pydantic model of the provider
payload. This base turns every outcome into either a ``RawProviderResponse``
or one of the three source errors:

* transport errors and timeouts, and non-2xx statuses → ``SourceUnavailable``
* HTTP 429 → ``SourceRateLimited``
* non-JSON bodies and payloads failing the model → ``SourceParseError``

Retrying is not done here; the acquisition pipeline wraps each call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, ClassVar, Final, cast

import httpx
from pydantic import BaseModel, ValidationError

from tradebook_api.application.interfaces.quote_source import RawProviderResponse
from tradebook_api.application.schemas.raw.quote_payloads import ProviderResponseModel
from tradebook_api.domain.exceptions.market_data import (
    SourceParseError,
    SourceRateLimited,
    SourceUnavailable,
)
from tradebook_api.infrastructure.external_apis.settings import (
    BROWSER_USER_AGENT,
    QuoteSourceSettings,
)
from tradebook_api.infrastructure.logging.logger import get_json_logger, get_request_id

_LOGGER = get_json_logger(__name__)

_DEFAULT_TIMEOUT: Final[float] = 15.0


class HttpQuoteSource:
    """Shared transport for HTTP/JSON quote providers."""

    source_id: ClassVar[str]
    payload_model: ClassVar[type[BaseModel]]
    extra_headers: ClassVar[Mapping[str, str]] = {}

    def __init__(
        self,
        settings: QuoteSourceSettings,
        *,
        http: httpx.AsyncClient | None = None,
        timeout_s: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            settings: Quote source settings (base URLs, user agent, timeout).
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            timeout_s: Optional per-request timeout override in seconds.
            clock: Optional UTC clock for ``received_at`` stamps.
        """
        self._settings = settings
        self._timeout = float(timeout_s if timeout_s is not None else settings.timeout_s)
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=self._timeout)
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ---------------------------- Hooks ---------------------------------- #

    def build_url(self, symbol: str) -> str:
        """Return the provider URL for ``symbol`` (canonical, no suffix)."""
        raise NotImplementedError

    def build_params(self, symbol: str) -> dict[str, str] | None:
        """Return query parameters for ``symbol``; ``None`` when the URL carries them."""
        return None

    def check_payload(self, payload: Any) -> None:
        """Inspect a validated payload for provider-specific failure markers."""
        return None

    # ---------------------------- Public API ----------------------------- #

    def request_headers(self) -> dict[str, str]:
        """Return the headers sent with every request."""
        headers = {
            "User-Agent": self._settings.user_agent or BROWSER_USER_AGENT,
            "Accept": "application/json",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
        }
        headers.update(self.extra_headers)
        request_id = get_request_id()
        if request_id:
            headers.setdefault("X-Request-ID", request_id)
        return headers

    async def fetch_quote(self, symbol: str) -> RawProviderResponse:
        """Fetch and parse the provider payload for ``symbol``.

        Args:
            symbol: Canonical upper-case symbol.

        Returns:
            RawProviderResponse: Parsed provider payload.

        Raises:
            SourceUnavailable: Transport error, timeout or non-2xx status.
            SourceRateLimited: HTTP 429.
            SourceParseError: Non-JSON body or unexpected payload shape.
        """
        url = self.build_url(symbol)
        details = {"source": self.source_id, "symbol": symbol}
        try:
            response = await self._client.get(
                url,
                params=self.build_params(symbol),
                headers=self.request_headers(),
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise SourceUnavailable("timeout", details=details) from exc
        except httpx.RequestError as exc:
            raise SourceUnavailable(
                "transport_error", details={**details, "error": str(exc)}
            ) from exc

        status = response.status_code
        if status == 429:
            raise SourceRateLimited(
                "rate_limited",
                details={**details, "retry_after": response.headers.get("Retry-After")},
            )
        if not 200 <= status < 300:
            raise SourceUnavailable("http_error", details={**details, "status": status})

        try:
            body = response.json()
        except ValueError as exc:
            raise SourceParseError("non_json", details=details) from exc

        try:
            payload = self.payload_model.model_validate(body)
        except ValidationError as exc:
            raise SourceParseError(
                "bad_shape", details={**details, "errors": exc.error_count()}
            ) from exc

        self.check_payload(payload)

        _LOGGER.debug("quote_source_response", extra={**details, "status": status})
        return RawProviderResponse(
            source_id=self.source_id,
            symbol=symbol,
            payload=cast(ProviderResponseModel, payload),
            source_url=url,
            received_at=self._clock(),
        )

