# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""SQLAlchemy-backed trade ledger (``trade_events``).

Implements the ``TradeLedger`` port. Each append runs in its own
transaction; reads return events in replay order
(``occurred_on``, ``recorded_at``, ``id``).

Layer
-----
Adapters / repositories.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.infrastructure.database.models.trades import TradeEventRow

from .base_repository import BaseRepository

_REPLAY_ORDER = (TradeEventRow.occurred_on, TradeEventRow.recorded_at, TradeEventRow.id)


class SqlAlchemyTradeLedger(BaseRepository[TradeEventRow]):
    """Trade ledger persisted through SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        super().__init__(session_factory)

    async def append(self, event: TradeEvent) -> TradeEvent:
        """Insert ``event``; the row is committed before this returns.

        Raises:
            LedgerUnavailable: If the insert or commit fails.
        """
        async with self.transaction("append") as session:
            session.add(TradeEventRow.from_entity(event))
        return event

    async def list_for_symbol(self, owner_id: str, symbol: str) -> list[TradeEvent]:
        stmt = (
            select(TradeEventRow)
            .where(TradeEventRow.owner_id == owner_id, TradeEventRow.symbol == symbol)
            .order_by(*_REPLAY_ORDER)
        )
        rows = await self.fetch_all(stmt, "list_for_symbol")
        return [r.to_entity() for r in rows]

    async def list_for_owner(self, owner_id: str) -> list[TradeEvent]:
        stmt = (
            select(TradeEventRow)
            .where(TradeEventRow.owner_id == owner_id)
            .order_by(TradeEventRow.symbol, *_REPLAY_ORDER)
        )
        rows = await self.fetch_all(stmt, "list_for_owner")
        return [r.to_entity() for r in rows]

    async def count(self, owner_id: str, symbol: str) -> int:
        stmt = select(func.count()).select_from(TradeEventRow).where(
            TradeEventRow.owner_id == owner_id, TradeEventRow.symbol == symbol
        )
        return int(await self.fetch_scalar(stmt, "count") or 0)
