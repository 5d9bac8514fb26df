# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: List Trades

Purpose:
    Return an owner's trades, optionally filtered, newest first.

Layer: application/use_cases
"""

from __future__ import annotations

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.application.schemas.dto.trades import TradeFilter
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.services.position_aggregator import order_events


def matches(event: TradeEvent, filters: TradeFilter) -> bool:
    """Return True when ``event`` passes every filter that is set."""
    if filters.symbol and filters.symbol not in event.symbol:
        return False
    if filters.action and event.action.value != filters.action:
        return False
    if filters.start_date and event.occurred_on < filters.start_date:
        return False
    if filters.end_date and event.occurred_on > filters.end_date:
        return False
    return True


class ListTrades:
    """Filtered, newest-first trade listing."""

    def __init__(self, ledger: TradeLedger) -> None:
        self._ledger = ledger

    async def execute(self, owner_id: str, filters: TradeFilter | None = None) -> list[TradeEvent]:
        """List ``owner_id``'s trades.

        Args:
            owner_id: Ledger owner.
            filters: Symbol substring (case-insensitive), action and inclusive
                date range; all optional.

        Returns:
            Matching events, most recent trade date first.
        """
        filters = filters or TradeFilter()
        events = await self._ledger.list_for_owner(owner_id)
        selected = [e for e in events if matches(e, filters)]
        return list(reversed(order_events(selected)))
