# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Quotes presenter: maps ``Quote`` and ``QuoteResult`` to HTTP schemas."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from tradebook_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from tradebook_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tradebook_api.adapters.schemas.http.quotes import QuoteBatchEntry, QuoteItem, QuotesBatch
from tradebook_api.application.schemas.dto.quotes import QuoteResult
from tradebook_api.domain.entities.quote import Quote


def to_quote_item(quote: Quote) -> QuoteItem:
    """Map a domain quote to its wire shape."""
    return QuoteItem(
        symbol=quote.symbol,
        price=quote.price,
        change=quote.change,
        change_percent=quote.change_percent,
        volume=quote.volume,
        high=quote.day_high,
        low=quote.day_low,
        open=quote.open,
        prev_close=quote.previous_close,
        currency=quote.currency,
        market_cap=quote.market_cap,
        source=quote.source_id,
        is_real_data=quote.is_authentic,
        timestamp=quote.retrieved_at,
    )


class QuotesPresenter(BasePresenter):
    """Presenter for single and batch quote responses."""

    def present_quote(
        self, quote: Quote, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        return self.present_success(data=to_quote_item(quote), trace_id=trace_id)

    def present_batch(
        self, results: Sequence[QuoteResult], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        items = [
            QuoteBatchEntry(
                symbol=r.symbol,
                quote=to_quote_item(r.quote) if r.quote is not None else None,
                error=r.error,
                failed=r.failed,
            )
            for r in results
        ]
        return self.present_success(data=QuotesBatch(items=items), trace_id=trace_id)
