# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Alpha Vantage GLOBAL_QUOTE source.

Requests the BSE listing (``{SYMBOL}.BSE``). Alpha Vantage signals throttling
with an HTTP 200 body carrying ``Note`` or ``Information`` instead of data;
that case is reported as ``SourceRateLimited``.
"""

from __future__ import annotations

from typing import Any

from tradebook_api.application.schemas.raw.quote_payloads import (
    ALPHA_VANTAGE_SOURCE_ID,
    AlphaVantageQuoteResponse,
)
from tradebook_api.domain.exceptions.market_data import SourceParseError, SourceRateLimited
from tradebook_api.infrastructure.external_apis.base_client import HttpQuoteSource

EXCHANGE_SUFFIX = ".BSE"


class AlphaVantageSource(HttpQuoteSource):
    """Quote source backed by the Alpha Vantage query API."""

    source_id = ALPHA_VANTAGE_SOURCE_ID
    payload_model = AlphaVantageQuoteResponse

    def build_url(self, symbol: str) -> str:
        return f"{self._settings.alpha_vantage_base_url.rstrip('/')}/query"

    def build_params(self, symbol: str) -> dict[str, str]:
        key = self._settings.alpha_vantage_api_key
        return {
            "function": "GLOBAL_QUOTE",
            "symbol": f"{symbol.upper()}{EXCHANGE_SUFFIX}",
            "apikey": key.get_secret_value() if key is not None else "",
        }

    def check_payload(self, payload: Any) -> None:
        message = payload.note or payload.information
        if message:
            raise SourceRateLimited(
                "rate_limited", details={"source": self.source_id, "message": message}
            )
        if payload.global_quote is None:
            raise SourceParseError("missing_global_quote", details={"source": self.source_id})
