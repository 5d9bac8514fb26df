# src/tradebook_api/application/use_cases/trades/import_trades.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: Import Trades

Purpose:
    Append a batch of trades (typically a previous JSON export) to the
    owner's ledger, one event at a time through :class:`AppendTrade`.

Layer: application/use_cases

Notes:
    * Items are appended in request order, each under the same validation
      and locking as a single append.
    * An item that breaks a business rule is recorded as a rejection and the
      rest of the batch continues.
    * ``LedgerUnavailable`` stops the batch. Items appended before the
      failure stay in the ledger; the caller can re-send the remainder.
"""

from __future__ import annotations

from collections.abc import Sequence

from tradebook_api.application.schemas.dto.trades import (
    ImportRejection,
    ImportTradesResult,
    TradeEventInput,
)
from tradebook_api.application.use_cases.trades.append_trade import AppendTrade
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.exceptions.ledger import InvalidTradeInput
from tradebook_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class ImportTrades:
    """Bulk append over :class:`AppendTrade`."""

    def __init__(self, append_trade: AppendTrade) -> None:
        self._append_trade = append_trade

    async def execute(
        self, owner_id: str, items: Sequence[TradeEventInput]
    ) -> ImportTradesResult:
        """Append every valid item of ``items`` to ``owner_id``'s ledger.

        Returns:
            ImportTradesResult: Stored events and per-item rejections.

        Raises:
            LedgerUnavailable: If the ledger cannot be written or read.
        """
        imported: list[TradeEvent] = []
        rejected: list[ImportRejection] = []
        for index, item in enumerate(items):
            try:
                result = await self._append_trade.execute(owner_id, item)
            except InvalidTradeInput as exc:
                rejected.append(ImportRejection(index=index, message=exc.message))
                continue
            imported.append(result.trade)

        logger.info(
            "trades_imported",
            extra={"imported": len(imported), "rejected": len(rejected)},
        )
        return ImportTradesResult(imported=imported, rejected=rejected)
