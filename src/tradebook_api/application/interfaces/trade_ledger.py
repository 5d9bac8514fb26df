# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Application Port: Trade ledger.

Append-only store of trade events. Implementations exist for an in-process
map (tests, offline mode) and for SQLAlchemy (production); both sit behind
this one protocol.

Contract:
    * ``append`` is atomic: the event is stored whole or not at all.
    * ``list_for_symbol`` returns events in replay order (trade date, then
      insertion order).
    * Persistence failures raise ``LedgerUnavailable``; callers never receive
      a partial history.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from tradebook_api.domain.entities.trade_event import TradeEvent


class TradeLedger(Protocol):
    """Protocol for append-only trade storage."""

    async def append(self, event: TradeEvent) -> TradeEvent:
        """Persist ``event`` and return it.

        Raises:
            LedgerUnavailable: If the backing store fails.
        """
        ...

    async def list_for_symbol(self, owner_id: str, symbol: str) -> Sequence[TradeEvent]:
        """Return every event for (owner, symbol) in replay order."""
        ...

    async def list_for_owner(self, owner_id: str) -> Sequence[TradeEvent]:
        """Return every event for ``owner_id`` in replay order."""
        ...

    async def count(self, owner_id: str, symbol: str) -> int:
        """Return the number of events stored for (owner, symbol)."""
        ...
