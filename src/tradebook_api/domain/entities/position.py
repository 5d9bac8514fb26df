# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Position Entities

Purpose:
    Derived holdings for one (owner, symbol) and their valuation against a
    current price. Both are recomputed from the trade ledger; neither is ever
    edited by hand.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .base import BaseEntity

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class Position(BaseEntity):
    """Aggregated holding for one symbol.

    Args:
        symbol: Canonical upper-case ticker.
        total_quantity: Net shares held (never negative).
        weighted_average_price: Cost basis per held share.
        total_invested: ``total_quantity * weighted_average_price``.
        source_trade_count: Number of trade events folded into this position.
        realized_pnl: Gain or loss locked in by sells, at the average cost
            prevailing at each sell.
    """

    symbol: str
    total_quantity: int = 0
    weighted_average_price: Decimal = ZERO
    total_invested: Decimal = ZERO
    source_trade_count: int = 0
    realized_pnl: Decimal = ZERO

    def __post_init__(self) -> None:
        if self.total_quantity < 0:
            raise ValueError("total_quantity must be >= 0")
        if self.total_quantity == 0 and (self.weighted_average_price or self.total_invested):
            raise ValueError("a closed position carries no cost basis")

    @property
    def is_open(self) -> bool:
        """Return True while shares are held."""
        return self.total_quantity > 0

    @classmethod
    def empty(cls, symbol: str) -> Position:
        """Return a flat position with no trades."""
        return cls(symbol=symbol)


@dataclass(frozen=True, slots=True)
class PositionValuation(BaseEntity):
    """Position marked to a current price.

    Args:
        symbol: Canonical upper-case ticker.
        quantity: Shares held.
        average_price: Cost basis per share.
        current_price: Price used for the mark.
        current_value: ``quantity * current_price``.
        invested: Capital at cost.
        profit_and_loss: ``current_value - invested``.
        profit_and_loss_percent: P&L over invested, in percent (0 if nothing invested).
        is_authentic_price: False when the mark came from a synthetic quote.
        price_source: Source identifier of the quote, when one was supplied.
    """

    symbol: str
    quantity: int
    average_price: Decimal
    current_price: Decimal
    current_value: Decimal
    invested: Decimal
    profit_and_loss: Decimal
    profit_and_loss_percent: Decimal
    is_authentic_price: bool = True
    price_source: str | None = None

    def __post_init__(self) -> None:
        if self.profit_and_loss != self.current_value - self.invested:
            raise ValueError("profit_and_loss must equal current_value - invested")
        if self.invested == 0 and self.profit_and_loss_percent != 0:
            raise ValueError("profit_and_loss_percent must be 0 when nothing is invested")


@dataclass(frozen=True, slots=True)
class PortfolioValuation(BaseEntity):
    """Every open position for an owner, valued, with portfolio totals."""

    positions: tuple[PositionValuation, ...]
    total_invested: Decimal
    total_current_value: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
