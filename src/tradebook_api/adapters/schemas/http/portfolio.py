# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""HTTP Schemas: Portfolio read models.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import Field

from tradebook_api.adapters.schemas.http.base import BaseHTTPSchema
from tradebook_api.adapters.schemas.http.trades import PositionItem


class PositionValuationItem(BaseHTTPSchema):
    """One open position marked to market."""

    symbol: str
    quantity: int
    average_price: Decimal
    current_price: Decimal
    current_value: Decimal
    invested: Decimal
    profit_and_loss: Decimal
    profit_and_loss_percent: Decimal
    is_authentic_price: bool = Field(description="False when marked to a synthetic quote")
    price_source: str | None = None


class PortfolioValuationHTTP(BaseHTTPSchema):
    """Open positions plus totals."""

    positions: list[PositionValuationItem]
    total_invested: Decimal
    total_current_value: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal


class PortfolioSummaryHTTP(BaseHTTPSchema):
    """Ledger-wide counts."""

    total_symbols: int
    total_trades: int
    active_positions: int
    total_quantity: int


class SymbolAnalysisHTTP(BaseHTTPSchema):
    """Trading activity and current holding for one symbol."""

    symbol: str
    buy_count: int
    sell_count: int
    total_bought_quantity: int
    total_sold_quantity: int
    average_buy_price: Decimal
    average_sell_price: Decimal
    first_trade_on: date | None
    last_trade_on: date | None
    position: PositionItem
