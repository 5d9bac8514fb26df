# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""HTTP Schemas: Quotes.

Synopsis:
    Wire contract for quotes. Field names on the wire are camelCase
    (``changePercent``, ``prevClose``, ``isRealData`` ...) to match the
    portfolio UI; ``isRealData`` is false for synthetic quotes.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import AwareDatetime, Field

from tradebook_api.adapters.schemas.http.base import BaseHTTPSchema


class QuoteItem(BaseHTTPSchema):
    """HTTP schema for a single quote."""

    symbol: str = Field(description="Upper-case ticker symbol", examples=["RELIANCE"])
    price: Decimal = Field(description="Last traded price", examples=["2456.75"])
    change: Decimal = Field(description="Absolute change versus previous close")
    change_percent: Decimal = Field(alias="changePercent", description="Percent change")
    volume: int = Field(ge=0)
    high: Decimal = Field(description="Intraday high")
    low: Decimal = Field(description="Intraday low")
    open: Decimal = Field(description="Opening price")
    prev_close: Decimal = Field(alias="prevClose", description="Previous close")
    currency: str = Field(examples=["INR"])
    market_cap: Decimal | None = Field(default=None, alias="marketCap")
    source: str = Field(description="Source identifier, SYNTHETIC for generated quotes")
    is_real_data: bool = Field(alias="isRealData")
    timestamp: AwareDatetime = Field(description="UTC acquisition time")


class QuoteBatchEntry(BaseHTTPSchema):
    """One symbol of a batch request; ``quote`` or ``error`` is set."""

    symbol: str
    quote: QuoteItem | None = None
    error: str | None = None
    failed: bool = False


class QuotesBatch(BaseHTTPSchema):
    """HTTP schema for a batch of quotes (wrapped by SuccessEnvelope)."""

    items: list[QuoteBatchEntry] = Field(description="Entries in request order (<=20)")
