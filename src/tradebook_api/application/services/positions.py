# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Position loading helpers shared by the portfolio use cases.

Layer: application/services
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.domain.entities.position import Position
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.services.position_aggregator import order_events, recompute


def group_by_symbol(events: Iterable[TradeEvent]) -> dict[str, list[TradeEvent]]:
    """Group events by symbol, each group in replay order, symbols sorted."""
    grouped: dict[str, list[TradeEvent]] = defaultdict(list)
    for event in events:
        grouped[event.symbol].append(event)
    return {symbol: order_events(grouped[symbol]) for symbol in sorted(grouped)}


async def load_positions(ledger: TradeLedger, owner_id: str) -> dict[str, Position]:
    """Recompute every position (open or closed) held by ``owner_id``.

    Returns:
        Mapping of symbol to position, keyed in symbol order.
    """
    events = await ledger.list_for_owner(owner_id)
    return {
        symbol: recompute(history, symbol=symbol)
        for symbol, history in group_by_symbol(events).items()
    }
