# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Yahoo Finance chart source.

Requests ``/v8/finance/chart/{SYMBOL}.NS`` (NSE listing suffix) and parses
the chart envelope. Quote fields are read from ``chart.result[0].meta`` by
the normalizer.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from tradebook_api.application.schemas.raw.quote_payloads import (
    YAHOO_SOURCE_ID,
    YahooChartResponse,
)
from tradebook_api.domain.exceptions.market_data import SourceParseError
from tradebook_api.infrastructure.external_apis.base_client import HttpQuoteSource

EXCHANGE_SUFFIX = ".NS"


class YahooFinanceSource(HttpQuoteSource):
    """Quote source backed by the Yahoo Finance chart API."""

    source_id = YAHOO_SOURCE_ID
    payload_model = YahooChartResponse

    def provider_symbol(self, symbol: str) -> str:
        """Return ``symbol`` with the NSE suffix Yahoo expects."""
        return f"{symbol.upper()}{EXCHANGE_SUFFIX}"

    def build_url(self, symbol: str) -> str:
        base = self._settings.yahoo_base_url.rstrip("/")
        return f"{base}/v8/finance/chart/{quote(self.provider_symbol(symbol))}"

    def check_payload(self, payload: Any) -> None:
        if not payload.chart.result:
            raise SourceParseError(
                "empty_result", details={"source": self.source_id}
            )
