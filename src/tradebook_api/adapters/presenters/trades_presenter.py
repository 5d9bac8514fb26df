# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Trades presenter: maps ledger entities to HTTP schemas."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from tradebook_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from tradebook_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from tradebook_api.adapters.schemas.http.trades import (
    AppendTradeResponse,
    ImportRejectionItem,
    PortfolioExportResponse,
    PositionItem,
    TradeImportResponse,
    TradeItem,
)
from tradebook_api.application.schemas.dto.trades import (
    AppendTradeResult,
    ImportTradesResult,
    PortfolioExport,
)
from tradebook_api.domain.entities.position import Position
from tradebook_api.domain.entities.trade_event import TradeEvent


def to_trade_item(event: TradeEvent) -> TradeItem:
    return TradeItem(
        id=event.id,
        symbol=event.symbol,
        action=event.action.value,
        quantity=event.quantity,
        price=event.price,
        occurred_on=event.occurred_on,
        recorded_at=event.recorded_at,
        note=event.note,
    )


def to_position_item(position: Position) -> PositionItem:
    return PositionItem(
        symbol=position.symbol,
        total_quantity=position.total_quantity,
        weighted_average_price=position.weighted_average_price,
        total_invested=position.total_invested,
        source_trade_count=position.source_trade_count,
        realized_pnl=position.realized_pnl,
    )


class TradesPresenter(BasePresenter):
    """Presenter for trade ledger responses."""

    def present_appended(
        self, result: AppendTradeResult, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        body = AppendTradeResponse(
            trade=to_trade_item(result.trade),
            position=to_position_item(result.position),
        )
        return self.present_success(data=body, trace_id=trace_id, status_code=201)

    def present_page(
        self,
        events: Sequence[TradeEvent],
        *,
        page: int,
        page_size: int,
        trace_id: str | None = None,
    ) -> PresentResult[PaginatedEnvelope[Any]]:
        """Slice ``events`` to one page and wrap it."""
        start = (page - 1) * page_size
        window = events[start : start + page_size]
        return self.present_paginated(
            items=[to_trade_item(e) for e in window],
            page=page,
            page_size=page_size,
            total=len(events),
            trace_id=trace_id,
        )

    def present_history(
        self, events: Sequence[TradeEvent], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        return self.present_success(data=[to_trade_item(e) for e in events], trace_id=trace_id)

    def present_position(
        self, position: Position, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        return self.present_success(data=to_position_item(position), trace_id=trace_id)

    def present_import(
        self, result: ImportTradesResult, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        body = TradeImportResponse(
            imported=[to_trade_item(e) for e in result.imported],
            rejected=[
                ImportRejectionItem(index=r.index, message=r.message) for r in result.rejected
            ],
        )
        return self.present_success(data=body, trace_id=trace_id)

    def present_export(
        self, export: PortfolioExport, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        body = PortfolioExportResponse(
            exported_at=export.exported_at,
            trades=[to_trade_item(e) for e in export.trades],
            positions=[to_position_item(p) for p in export.positions],
        )
        return self.present_success(data=body, trace_id=trace_id)
