# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Portfolio presenter: valuation, summary and analysis responses."""

from __future__ import annotations

from typing import Any

from tradebook_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from tradebook_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tradebook_api.adapters.schemas.http.portfolio import (
    PortfolioSummaryHTTP,
    PortfolioValuationHTTP,
    PositionValuationItem,
    SymbolAnalysisHTTP,
)
from tradebook_api.adapters.schemas.http.trades import PositionItem
from tradebook_api.application.schemas.dto.portfolio import PortfolioSummaryDTO, SymbolAnalysisDTO
from tradebook_api.domain.entities.position import PortfolioValuation, PositionValuation


def to_valuation_item(v: PositionValuation) -> PositionValuationItem:
    return PositionValuationItem(
        symbol=v.symbol,
        quantity=v.quantity,
        average_price=v.average_price,
        current_price=v.current_price,
        current_value=v.current_value,
        invested=v.invested,
        profit_and_loss=v.profit_and_loss,
        profit_and_loss_percent=v.profit_and_loss_percent,
        is_authentic_price=v.is_authentic_price,
        price_source=v.price_source,
    )


class PortfolioPresenter(BasePresenter):
    """Presenter for portfolio read models."""

    def present_valuation(
        self, valuation: PortfolioValuation, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        body = PortfolioValuationHTTP(
            positions=[to_valuation_item(v) for v in valuation.positions],
            total_invested=valuation.total_invested,
            total_current_value=valuation.total_current_value,
            total_pnl=valuation.total_pnl,
            total_pnl_percent=valuation.total_pnl_percent,
        )
        return self.present_success(data=body, trace_id=trace_id)

    def present_summary(
        self, summary: PortfolioSummaryDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        return self.present_success(
            data=PortfolioSummaryHTTP(**summary.model_dump()), trace_id=trace_id
        )

    def present_analysis(
        self, analysis: SymbolAnalysisDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        position = PositionItem(
            symbol=analysis.symbol,
            total_quantity=analysis.current_quantity,
            weighted_average_price=analysis.average_price,
            total_invested=analysis.invested,
            source_trade_count=analysis.buy_count + analysis.sell_count,
            realized_pnl=analysis.realized_pnl,
        )
        body = SymbolAnalysisHTTP(
            symbol=analysis.symbol,
            buy_count=analysis.buy_count,
            sell_count=analysis.sell_count,
            total_bought_quantity=analysis.total_bought_quantity,
            total_sold_quantity=analysis.total_sold_quantity,
            average_buy_price=analysis.average_buy_price,
            average_sell_price=analysis.average_sell_price,
            first_trade_on=analysis.first_trade_on,
            last_trade_on=analysis.last_trade_on,
            position=position,
        )
        return self.present_success(data=body, trace_id=trace_id)
