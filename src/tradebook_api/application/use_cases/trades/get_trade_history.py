# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Use Case: chronological trade history for one symbol."""

from __future__ import annotations

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.services.position_aggregator import order_events
from tradebook_api.domain.services.symbols import canonical_symbol


class GetTradeHistory:
    def __init__(self, ledger: TradeLedger) -> None:
        self._ledger = ledger

    async def execute(self, owner_id: str, symbol: str) -> list[TradeEvent]:
        """Return ``symbol``'s trades oldest first (trade date, then insertion)."""
        events = await self._ledger.list_for_symbol(owner_id, canonical_symbol(symbol))
        return order_events(events)
