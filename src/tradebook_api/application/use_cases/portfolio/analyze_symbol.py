# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: Analyze Symbol

Purpose:
    Summarize trading activity for one symbol: buy/sell counts and volumes,
    quantity-weighted average buy and sell prices, first and last trade
    dates, and the current position.

Layer: application/use_cases
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.application.schemas.dto.portfolio import SymbolAnalysisDTO
from tradebook_api.domain.entities.position import ZERO
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.enums.trade_action import TradeAction
from tradebook_api.domain.services.position_aggregator import order_events, recompute
from tradebook_api.domain.services.symbols import canonical_symbol


def _weighted_average(events: Sequence[TradeEvent]) -> Decimal:
    quantity = sum(e.quantity for e in events)
    if not quantity:
        return ZERO
    return sum((e.notional for e in events), ZERO) / quantity


class AnalyzeSymbol:
    """Per-symbol trading analysis."""

    def __init__(self, ledger: TradeLedger) -> None:
        self._ledger = ledger

    async def execute(self, owner_id: str, symbol: str) -> SymbolAnalysisDTO:
        """Analyze ``owner_id``'s trades in ``symbol``.

        Raises:
            InvalidSymbol: If the symbol is blank.
            LedgerUnavailable: If the ledger cannot be read.
        """
        canonical = canonical_symbol(symbol)
        events = order_events(await self._ledger.list_for_symbol(owner_id, canonical))
        buys = [e for e in events if e.action is TradeAction.BUY]
        sells = [e for e in events if e.action is TradeAction.SELL]
        position = recompute(events, symbol=canonical)

        return SymbolAnalysisDTO(
            symbol=canonical,
            buy_count=len(buys),
            sell_count=len(sells),
            total_bought_quantity=sum(e.quantity for e in buys),
            total_sold_quantity=sum(e.quantity for e in sells),
            average_buy_price=_weighted_average(buys),
            average_sell_price=_weighted_average(sells),
            first_trade_on=events[0].occurred_on if events else None,
            last_trade_on=events[-1].occurred_on if events else None,
            current_quantity=position.total_quantity,
            average_price=position.weighted_average_price,
            invested=position.total_invested,
            realized_pnl=position.realized_pnl,
        )
