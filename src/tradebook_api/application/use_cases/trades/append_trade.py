# src/tradebook_api/application/use_cases/trades/append_trade.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: Append Trade

Purpose:
    Validate a caller-supplied trade, append it to the owner's ledger and
    return the position recomputed from the full history.

Layer: application/use_cases

Notes:
    * Validation happens before the ledger is touched; a rejected trade
      leaves the ledger unchanged.
    * Appends for the same (owner, symbol) are serialized with a keyed lock
      so the returned position always reflects this trade and every earlier
      one.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.application.schemas.dto.trades import AppendTradeResult, TradeEventInput
from tradebook_api.domain.entities.trade_event import TradeEvent, new_trade_id
from tradebook_api.domain.enums.trade_action import TradeAction
from tradebook_api.domain.exceptions.ledger import InvalidTradeInput
from tradebook_api.domain.services.position_aggregator import order_events, recompute
from tradebook_api.infrastructure.concurrency.keyed_lock import KeyedLock
from tradebook_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class AppendTrade:
    """Append one trade and refold the affected position.

    Args:
        ledger: Trade ledger port.
        locks: Keyed lock shared by every ``AppendTrade`` bound to the same
            ledger; a private one is created when omitted.
        clock: Returns the current UTC time (injectable for tests).
        id_factory: Produces new trade ids.
    """

    def __init__(
        self,
        ledger: TradeLedger,
        *,
        locks: KeyedLock | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] = new_trade_id,
    ) -> None:
        self._ledger = ledger
        self._locks = locks if locks is not None else KeyedLock()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._id_factory = id_factory

    async def execute(self, owner_id: str, data: TradeEventInput) -> AppendTradeResult:
        """Append ``data`` to ``owner_id``'s ledger.

        Returns:
            AppendTradeResult: The stored event and the recomputed position.

        Raises:
            InvalidTradeInput: If the trade violates any business rule.
            LedgerUnavailable: If the ledger cannot be written or read.
        """
        event = self._build_event(owner_id, data)

        async with self._locks.hold((owner_id, event.symbol)):
            stored = await self._ledger.append(event)
            history = await self._ledger.list_for_symbol(owner_id, stored.symbol)
            position = recompute(order_events(history), symbol=stored.symbol)

        logger.info(
            "trade_appended",
            extra={
                "trade_id": stored.id,
                "symbol": stored.symbol,
                "action": stored.action.value,
                "quantity": stored.quantity,
                "position_quantity": position.total_quantity,
            },
        )
        return AppendTradeResult(trade=stored, position=position)

    def _build_event(self, owner_id: str, data: TradeEventInput) -> TradeEvent:
        now = self._clock()
        try:
            return TradeEvent(
                id=self._id_factory(),
                owner_id=owner_id,
                symbol=data.symbol.strip().upper(),
                action=TradeAction.parse(data.action),
                quantity=data.quantity,
                price=data.price,
                occurred_on=data.occurred_on or now.date(),
                recorded_at=now,
                note=data.note or None,
            )
        except ValueError as exc:
            logger.info(
                "trade_rejected",
                extra={"symbol": data.symbol, "action": data.action, "reason": str(exc)},
            )
            raise InvalidTradeInput(str(exc), details={"symbol": data.symbol}) from exc
