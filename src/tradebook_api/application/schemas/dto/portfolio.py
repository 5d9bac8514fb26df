# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Application DTOs for portfolio read models.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from tradebook_api.application.schemas.dto.base import BaseDTO


class PortfolioSummaryDTO(BaseDTO):
    """Counts across an owner's ledger.

    Attributes:
        total_symbols: Distinct symbols ever traded.
        total_trades: Trade events in the ledger.
        active_positions: Symbols with shares currently held.
        total_quantity: Shares held across all open positions.
    """

    total_symbols: int
    total_trades: int
    active_positions: int
    total_quantity: int


class SymbolAnalysisDTO(BaseDTO):
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
    current_quantity: int
    average_price: Decimal
    invested: Decimal
    realized_pnl: Decimal
