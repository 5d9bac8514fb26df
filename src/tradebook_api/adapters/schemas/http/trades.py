# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""HTTP Schemas: Trades and positions.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import ConfigDict, Field

from tradebook_api.adapters.schemas.http.base import BaseHTTPSchema
from tradebook_api.domain.entities.trade_event import (
    MAX_SYMBOL_LENGTH,
    PRICE_PRECISION,
    PRICE_SCALE,
)

MAX_IMPORT_TRADES = 1000


class TradeCreateRequest(BaseHTTPSchema):
    """Body of ``POST /v1/trades``.

    Business rules (positive quantity and price, BUY/SELL) are enforced by
    the use case and reported as ``INVALID_TRADE_INPUT``. Storage limits
    (symbol length, price precision) fail request validation.
    """

    symbol: str = Field(max_length=MAX_SYMBOL_LENGTH, examples=["TCS"])
    action: str = Field(examples=["BUY"])
    quantity: int = Field(examples=[10])
    price: Decimal = Field(
        max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE, examples=["3500.50"]
    )
    occurred_on: date | None = Field(
        default=None, description="Trade date; defaults to today (UTC)"
    )
    note: str | None = Field(default=None, max_length=500)


class TradeItem(BaseHTTPSchema):
    """A stored trade event."""

    id: str
    symbol: str
    action: str
    quantity: int
    price: Decimal
    occurred_on: date
    recorded_at: datetime
    note: str | None = None


class PositionItem(BaseHTTPSchema):
    """Aggregated holding for one symbol."""

    symbol: str
    total_quantity: int
    weighted_average_price: Decimal
    total_invested: Decimal
    source_trade_count: int
    realized_pnl: Decimal


class AppendTradeResponse(BaseHTTPSchema):
    """The appended trade and the position recomputed after it."""

    trade: TradeItem
    position: PositionItem


class TradeImportItem(TradeCreateRequest):
    """One trade of an import; ``id`` and ``recorded_at`` from an export are ignored."""

    model_config = ConfigDict(extra="ignore")


class TradeImportRequest(BaseHTTPSchema):
    """Body of ``POST /v1/trades/import``; an export's ``data`` is accepted as-is."""

    model_config = ConfigDict(extra="ignore")

    trades: list[TradeImportItem] = Field(max_length=MAX_IMPORT_TRADES)


class ImportRejectionItem(BaseHTTPSchema):
    index: int
    message: str


class TradeImportResponse(BaseHTTPSchema):
    """Trades appended by an import and the items that were rejected."""

    imported: list[TradeItem]
    rejected: list[ImportRejectionItem]


class PortfolioExportResponse(BaseHTTPSchema):
    """Ledger snapshot; ``trades`` are in replay order."""

    exported_at: datetime
    trades: list[TradeItem]
    positions: list[PositionItem]
