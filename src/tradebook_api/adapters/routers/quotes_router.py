# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Quotes Router.

Summary:
    Public endpoints returning quotes acquired through the multi-source
    pipeline. Quotes are always returned; ``isRealData`` is false when every
    source failed and a synthetic quote was generated.

Layer:
    adapters/routers
"""
from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Path, Query, Request, Response, status

from tradebook_api.adapters.presenters.quotes_presenter import QuotesPresenter
from tradebook_api.adapters.routers.base_router import BaseRouter
from tradebook_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tradebook_api.adapters.schemas.http.quotes import QuoteItem, QuotesBatch
from tradebook_api.application.use_cases.quotes.acquire_quote import AcquireQuote
from tradebook_api.application.use_cases.quotes.acquire_quotes import AcquireQuotes
from tradebook_api.dependencies.quotes import get_acquire_quote, get_acquire_quotes

MAX_BATCH_SYMBOLS = 20

router = BaseRouter(version="v1", resource="quotes", tags=["Quotes"])
presenter = QuotesPresenter()


def _parse_symbols(symbols_csv: str) -> list[str]:
    vals = [s.strip().upper() for s in symbols_csv.split(",") if s.strip()]
    if not 1 <= len(vals) <= MAX_BATCH_SYMBOLS:
        raise HTTPException(
            status_code=400, detail=f"1..{MAX_BATCH_SYMBOLS} symbols required"
        )
    return vals


@router.get(
    "",
    response_model=SuccessEnvelope[QuotesBatch],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Get quotes for several symbols",
)
async def get_quotes(
    request: Request,
    response: Response,
    symbols: Annotated[str, Query(examples=["RELIANCE,TCS"])],
    uc: Annotated[AcquireQuotes, Depends(get_acquire_quotes)],
) -> Any:
    """Return one entry per requested symbol, in request order."""
    results = await uc.execute(_parse_symbols(symbols))
    return BaseRouter.send(
        response, presenter.present_batch(results, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/{symbol}",
    response_model=SuccessEnvelope[QuoteItem],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Get a quote for one symbol",
)
async def get_quote(
    request: Request,
    response: Response,
    symbol: Annotated[str, Path(max_length=20, examples=["INFY"])],
    uc: Annotated[AcquireQuote, Depends(get_acquire_quote)],
) -> Any:
    quote = await uc.execute(symbol)
    return BaseRouter.send(
        response, presenter.present_quote(quote, trace_id=BaseRouter.trace_id(request))
    )
