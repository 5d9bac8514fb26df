# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: Get Position

Purpose:
    Recompute one (owner, symbol) position from its full trade history.

Layer: application/use_cases
"""

from __future__ import annotations

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.domain.entities.position import Position
from tradebook_api.domain.services.position_aggregator import order_events, recompute
from tradebook_api.domain.services.symbols import canonical_symbol


class GetPosition:
    """Read-side position lookup.

    Args:
        ledger: Trade ledger port.

    Raises:
        InvalidSymbol: If the symbol is blank.
        LedgerUnavailable: If the ledger cannot be read.
    """

    def __init__(self, ledger: TradeLedger) -> None:
        self._ledger = ledger

    async def execute(self, owner_id: str, symbol: str) -> Position:
        """Return the position; a symbol never traded yields a flat position."""
        canonical = canonical_symbol(symbol)
        events = await self._ledger.list_for_symbol(owner_id, canonical)
        return recompute(order_events(events), symbol=canonical)
