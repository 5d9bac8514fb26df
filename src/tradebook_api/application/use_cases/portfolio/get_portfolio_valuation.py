# src/tradebook_api/application/use_cases/portfolio/get_portfolio_valuation.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: Get Portfolio Valuation

Purpose:
    Value every open position of an owner against current quotes and total
    the result.

Layer: application/use_cases

Notes:
    * Quotes may be supplied by the caller (``quotes_by_symbol``). When they
      are not and an :class:`AcquireQuotes` is wired in, quotes for the held
      symbols are acquired through the quote pipeline.
    * A held symbol with no quote is valued at price 0 and flagged as not
      authentic with no price source.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.application.services.positions import load_positions
from tradebook_api.application.use_cases.quotes.acquire_quotes import AcquireQuotes
from tradebook_api.domain.entities.position import (
    ZERO,
    PortfolioValuation,
    Position,
    PositionValuation,
)
from tradebook_api.domain.entities.quote import Quote
from tradebook_api.domain.services.pnl_calculator import evaluate, summarize
from tradebook_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class GetPortfolioValuation:
    """Mark all open positions to market.

    Args:
        ledger: Trade ledger port.
        acquire_quotes: Optional batch quote acquisition used when the caller
            supplies no quotes.
    """

    def __init__(self, ledger: TradeLedger, acquire_quotes: AcquireQuotes | None = None) -> None:
        self._ledger = ledger
        self._acquire_quotes = acquire_quotes

    async def execute(
        self,
        owner_id: str,
        quotes_by_symbol: Mapping[str, Quote | Decimal] | None = None,
    ) -> PortfolioValuation:
        """Return the valuation of ``owner_id``'s open positions.

        Args:
            owner_id: Ledger owner.
            quotes_by_symbol: Quote or bare price per canonical symbol.

        Returns:
            PortfolioValuation: Open positions in symbol order plus totals.
        """
        positions = await load_positions(self._ledger, owner_id)
        open_positions = [p for p in positions.values() if p.is_open]

        if quotes_by_symbol is None:
            quotes_by_symbol = await self._acquire([p.symbol for p in open_positions])

        valuations = [self._value(p, quotes_by_symbol.get(p.symbol)) for p in open_positions]
        return summarize(valuations)

    async def _acquire(self, symbols: list[str]) -> dict[str, Quote]:
        if self._acquire_quotes is None or not symbols:
            return {}
        results = await self._acquire_quotes.execute(symbols)
        return {r.symbol: r.quote for r in results if r.quote is not None}

    @staticmethod
    def _value(position: Position, mark: Quote | Decimal | None) -> PositionValuation:
        if mark is not None:
            return evaluate(position, mark)
        logger.warning("valuation_price_missing", extra={"symbol": position.symbol})
        return replace(evaluate(position, ZERO), is_authentic_price=False, price_source=None)
