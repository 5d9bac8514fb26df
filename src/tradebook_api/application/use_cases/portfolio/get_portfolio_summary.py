# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Use Case: ledger-wide counts for one owner."""

from __future__ import annotations

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.application.schemas.dto.portfolio import PortfolioSummaryDTO
from tradebook_api.application.services.positions import group_by_symbol
from tradebook_api.domain.services.position_aggregator import recompute


class GetPortfolioSummary:
    def __init__(self, ledger: TradeLedger) -> None:
        self._ledger = ledger

    async def execute(self, owner_id: str) -> PortfolioSummaryDTO:
        """Count symbols, trades, open positions and shares held."""
        events = await self._ledger.list_for_owner(owner_id)
        grouped = group_by_symbol(events)
        positions = [recompute(history, symbol=s) for s, history in grouped.items()]
        open_positions = [p for p in positions if p.is_open]
        return PortfolioSummaryDTO(
            total_symbols=len(grouped),
            total_trades=len(events),
            active_positions=len(open_positions),
            total_quantity=sum(p.total_quantity for p in open_positions),
        )
