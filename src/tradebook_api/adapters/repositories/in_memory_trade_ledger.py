# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""In-process trade ledger.

Used in tests and when no ``DATABASE_URL`` is configured. Events live in
per-(owner, symbol) lists for the lifetime of the process.
"""

from __future__ import annotations

from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.services.position_aggregator import order_events


class InMemoryTradeLedger:
    """Trade ledger backed by a dict of lists."""

    def __init__(self) -> None:
        self._events: dict[tuple[str, str], list[TradeEvent]] = {}

    async def append(self, event: TradeEvent) -> TradeEvent:
        self._events.setdefault((event.owner_id, event.symbol), []).append(event)
        return event

    async def list_for_symbol(self, owner_id: str, symbol: str) -> list[TradeEvent]:
        return order_events(self._events.get((owner_id, symbol), ()))

    async def list_for_owner(self, owner_id: str) -> list[TradeEvent]:
        keys = sorted(k for k in self._events if k[0] == owner_id)
        return [e for key in keys for e in order_events(self._events[key])]

    async def count(self, owner_id: str, symbol: str) -> int:
        return len(self._events.get((owner_id, symbol), ()))
