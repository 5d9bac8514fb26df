# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Cases: Export Trades

Purpose:
    * CSV: render the owner's (optionally filtered) trades with the columns
      ``Date,Symbol,Type,Quantity,Price,Notes``, in the same order as
      :class:`ListTrades`.
    * JSON: snapshot the whole ledger with every position recomputed, in a
      shape ``ImportTrades`` accepts back.

Layer: application/use_cases
"""

from __future__ import annotations

import csv
import io
from collections.abc import Callable
from datetime import UTC, datetime

from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.application.schemas.dto.trades import PortfolioExport, TradeFilter
from tradebook_api.application.services.positions import group_by_symbol
from tradebook_api.application.use_cases.trades.list_trades import ListTrades
from tradebook_api.domain.services.position_aggregator import order_events, recompute

CSV_HEADER = ("Date", "Symbol", "Type", "Quantity", "Price", "Notes")


class ExportTradesCsv:
    """CSV rendering over :class:`ListTrades`."""

    def __init__(self, list_trades: ListTrades) -> None:
        self._list_trades = list_trades

    async def execute(self, owner_id: str, filters: TradeFilter | None = None) -> str:
        """Return the CSV document (header row included, ``\\n`` line endings)."""
        events = await self._list_trades.execute(owner_id, filters)
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for e in events:
            writer.writerow(
                [
                    e.occurred_on.isoformat(),
                    e.symbol,
                    e.action.value,
                    e.quantity,
                    format(e.price, "f"),
                    e.note or "",
                ]
            )
        return buffer.getvalue()


class ExportPortfolio:
    """Full-ledger snapshot: trades in replay order plus every position."""

    def __init__(
        self, ledger: TradeLedger, *, clock: Callable[[], datetime] | None = None
    ) -> None:
        self._ledger = ledger
        self._clock = clock or (lambda: datetime.now(UTC))

    async def execute(self, owner_id: str) -> PortfolioExport:
        events = await self._ledger.list_for_owner(owner_id)
        return PortfolioExport(
            exported_at=self._clock(),
            trades=order_events(events),
            positions=[
                recompute(history, symbol=symbol)
                for symbol, history in group_by_symbol(events).items()
            ],
        )
