# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Raw provider payload models (Application Layer).

Synopsis:
    Typed, validated views of each quote provider's JSON response. Source
    adapters parse HTTP bodies into these models; the quote normalizer maps
    them into the canonical ``Quote`` entity. Only the fields the normalizer
    reads are declared; everything else a provider sends is ignored.

    Numeric fields are ``Decimal`` so provider-reported precision survives
    until normalization.

Layer:
    application/schemas/raw
"""

from __future__ import annotations

from decimal import Decimal
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

YAHOO_SOURCE_ID: Final[str] = "yahoo_finance"
NSE_SOURCE_ID: Final[str] = "nse_india"
ALPHA_VANTAGE_SOURCE_ID: Final[str] = "alpha_vantage"


class ProviderPayload(BaseModel):
    """Base for provider payload models: lenient on extras, frozen once parsed."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


# --------------------------------------------------------------------------- #
# Yahoo Finance: /v8/finance/chart/{symbol}
# --------------------------------------------------------------------------- #


class YahooChartMeta(ProviderPayload):
    """``chart.result[0].meta`` block."""

    regular_market_price: Decimal | None = Field(default=None, alias="regularMarketPrice")
    previous_close: Decimal | None = Field(default=None, alias="previousClose")
    chart_previous_close: Decimal | None = Field(default=None, alias="chartPreviousClose")
    regular_market_volume: int | None = Field(default=None, alias="regularMarketVolume")
    regular_market_day_high: Decimal | None = Field(default=None, alias="regularMarketDayHigh")
    regular_market_day_low: Decimal | None = Field(default=None, alias="regularMarketDayLow")
    regular_market_open: Decimal | None = Field(default=None, alias="regularMarketOpen")
    market_cap: Decimal | None = Field(default=None, alias="marketCap")
    currency: str | None = None


class YahooChartResult(ProviderPayload):
    """One entry of ``chart.result``."""

    meta: YahooChartMeta


class YahooChart(ProviderPayload):
    """``chart`` envelope."""

    result: list[YahooChartResult] | None = None


class YahooChartResponse(ProviderPayload):
    """Top-level chart response."""

    chart: YahooChart


# --------------------------------------------------------------------------- #
# NSE India: /api/quote-equity?symbol={symbol}
# --------------------------------------------------------------------------- #


class NseIntraDayHighLow(ProviderPayload):
    """``priceInfo.intraDayHighLow`` block."""

    max: Decimal | None = None
    min: Decimal | None = None


class NsePriceInfo(ProviderPayload):
    """``priceInfo`` block."""

    last_price: Decimal | None = Field(default=None, alias="lastPrice")
    change: Decimal | None = None
    p_change: Decimal | None = Field(default=None, alias="pChange")
    total_traded_volume: int | None = Field(default=None, alias="totalTradedVolume")
    intra_day_high_low: NseIntraDayHighLow | None = Field(default=None, alias="intraDayHighLow")
    open: Decimal | None = None
    previous_close: Decimal | None = Field(default=None, alias="previousClose")


class NseQuoteResponse(ProviderPayload):
    """Top-level quote-equity response."""

    price_info: NsePriceInfo = Field(alias="priceInfo")


# --------------------------------------------------------------------------- #
# Alpha Vantage: function=GLOBAL_QUOTE
# --------------------------------------------------------------------------- #


class AlphaVantageGlobalQuote(ProviderPayload):
    """``"Global Quote"`` block; every value arrives as a string."""

    symbol: str | None = Field(default=None, alias="01. symbol")
    open: Decimal | None = Field(default=None, alias="02. open")
    high: Decimal | None = Field(default=None, alias="03. high")
    low: Decimal | None = Field(default=None, alias="04. low")
    price: Decimal | None = Field(default=None, alias="05. price")
    volume: int | None = Field(default=None, alias="06. volume")
    previous_close: Decimal | None = Field(default=None, alias="08. previous close")
    change: Decimal | None = Field(default=None, alias="09. change")
    change_percent: str | None = Field(default=None, alias="10. change percent")


class AlphaVantageQuoteResponse(ProviderPayload):
    """Top-level GLOBAL_QUOTE response.

    Alpha Vantage answers throttled requests with HTTP 200 and a ``Note`` or
    ``Information`` message instead of data.
    """

    global_quote: AlphaVantageGlobalQuote | None = Field(default=None, alias="Global Quote")
    note: str | None = Field(default=None, alias="Note")
    information: str | None = Field(default=None, alias="Information")


ProviderResponseModel = YahooChartResponse | NseQuoteResponse | AlphaVantageQuoteResponse
