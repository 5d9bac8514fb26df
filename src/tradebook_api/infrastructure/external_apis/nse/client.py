# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""NSE India quote-equity source.

NSE serves its JSON API only to browser-like clients, so requests carry a
``Referer`` and ``X-Requested-With`` alongside the shared browser identity.
"""

from __future__ import annotations

from typing import Final

from tradebook_api.application.schemas.raw.quote_payloads import (
    NSE_SOURCE_ID,
    NseQuoteResponse,
)
from tradebook_api.infrastructure.external_apis.base_client import HttpQuoteSource

_NSE_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json, text/plain, */*",
    "Referer": "https://www.nseindia.com/",
    "X-Requested-With": "XMLHttpRequest",
}


class NseIndiaSource(HttpQuoteSource):
    """Quote source backed by ``/api/quote-equity``."""

    source_id = NSE_SOURCE_ID
    payload_model = NseQuoteResponse
    extra_headers = _NSE_HEADERS

    def build_url(self, symbol: str) -> str:
        return f"{self._settings.nse_base_url.rstrip('/')}/api/quote-equity"

    def build_params(self, symbol: str) -> dict[str, str]:
        return {"symbol": symbol.upper()}
