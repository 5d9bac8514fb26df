# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Trades Router.

Summary:
    Authenticated endpoints over the owner's append-only trade ledger:
    append, bulk import, filtered listing, CSV and JSON export and
    per-symbol history. The owner is the JWT subject of the request principal.

Layer:
    adapters/routers
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, Any

from fastapi import Depends, Path, Query, Request, Response, status

from tradebook_api.adapters.presenters.trades_presenter import TradesPresenter
from tradebook_api.adapters.routers.base_router import BaseRouter, PageParams
from tradebook_api.adapters.schemas.http.envelopes import PaginatedEnvelope, SuccessEnvelope
from tradebook_api.adapters.schemas.http.trades import (
    AppendTradeResponse,
    PortfolioExportResponse,
    TradeCreateRequest,
    TradeImportRequest,
    TradeImportResponse,
    TradeItem,
)
from tradebook_api.application.schemas.dto.trades import TradeEventInput, TradeFilter
from tradebook_api.application.use_cases.trades.append_trade import AppendTrade
from tradebook_api.application.use_cases.trades.export_trades import (
    ExportPortfolio,
    ExportTradesCsv,
)
from tradebook_api.application.use_cases.trades.get_trade_history import GetTradeHistory
from tradebook_api.application.use_cases.trades.import_trades import ImportTrades
from tradebook_api.application.use_cases.trades.list_trades import ListTrades
from tradebook_api.dependencies.ledger import (
    get_append_trade,
    get_export_portfolio,
    get_export_trades,
    get_import_trades,
    get_list_trades,
    get_trade_history,
)
from tradebook_api.infrastructure.auth.jwt_dependency import Principal, auth_required

router = BaseRouter(version="v1", resource="trades", tags=["Trades"])
presenter = TradesPresenter()

PrincipalDep = Annotated[Principal, Depends(auth_required())]


def trade_filter(
    symbol: Annotated[str | None, Query(description="Case-insensitive substring")] = None,
    action: Annotated[str | None, Query(description="BUY or SELL")] = None,
    start_date: Annotated[date | None, Query(description="Inclusive lower bound")] = None,
    end_date: Annotated[date | None, Query(description="Inclusive upper bound")] = None,
) -> TradeFilter:
    return TradeFilter(symbol=symbol, action=action, start_date=start_date, end_date=end_date)


@router.post(
    "",
    response_model=SuccessEnvelope[AppendTradeResponse],
    status_code=status.HTTP_201_CREATED,
    responses=BaseRouter.std_error_responses(),
    summary="Append a trade",
)
async def append_trade(
    request: Request,
    response: Response,
    body: TradeCreateRequest,
    principal: PrincipalDep,
    uc: Annotated[AppendTrade, Depends(get_append_trade)],
) -> Any:
    result = await uc.execute(principal.sub, TradeEventInput(**body.model_dump()))
    return BaseRouter.send(
        response, presenter.present_appended(result, trace_id=BaseRouter.trace_id(request))
    )


@router.post(
    "/import",
    response_model=SuccessEnvelope[TradeImportResponse],
    responses=BaseRouter.std_error_responses(),
    summary="Import trades in bulk",
)
async def import_trades(
    request: Request,
    response: Response,
    body: TradeImportRequest,
    principal: PrincipalDep,
    uc: Annotated[ImportTrades, Depends(get_import_trades)],
) -> Any:
    items = [TradeEventInput(**t.model_dump()) for t in body.trades]
    result = await uc.execute(principal.sub, items)
    return BaseRouter.send(
        response, presenter.present_import(result, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "",
    response_model=PaginatedEnvelope[TradeItem],
    responses=BaseRouter.std_error_responses(),
    summary="List trades, newest first",
)
async def list_trades(
    request: Request,
    response: Response,
    principal: PrincipalDep,
    filters: Annotated[TradeFilter, Depends(trade_filter)],
    page: Annotated[PageParams, Depends(BaseRouter.page_params)],
    uc: Annotated[ListTrades, Depends(get_list_trades)],
) -> Any:
    events = await uc.execute(principal.sub, filters)
    result = presenter.present_page(
        events,
        page=page.page,
        page_size=page.page_size,
        trace_id=BaseRouter.trace_id(request),
    )
    return BaseRouter.send(response, result)


@router.get(
    "/export",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}, **BaseRouter.std_error_responses()},
    summary="Export trades as CSV",
)
async def export_trades(
    principal: PrincipalDep,
    filters: Annotated[TradeFilter, Depends(trade_filter)],
    uc: Annotated[ExportTradesCsv, Depends(get_export_trades)],
) -> Response:
    document = await uc.execute(principal.sub, filters)
    return Response(
        content=document,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="trades.csv"'},
    )


@router.get(
    "/export/json",
    response_model=SuccessEnvelope[PortfolioExportResponse],
    responses=BaseRouter.std_error_responses(),
    summary="Export the ledger and positions as JSON",
)
async def export_portfolio(
    request: Request,
    response: Response,
    principal: PrincipalDep,
    uc: Annotated[ExportPortfolio, Depends(get_export_portfolio)],
) -> Any:
    export = await uc.execute(principal.sub)
    return BaseRouter.send(
        response, presenter.present_export(export, trace_id=BaseRouter.trace_id(request))
    )


@router.get(
    "/{symbol}/history",
    response_model=SuccessEnvelope[list[TradeItem]],
    responses=BaseRouter.std_error_responses(),
    summary="Chronological trade history for one symbol",
)
async def trade_history(
    request: Request,
    response: Response,
    principal: PrincipalDep,
    symbol: Annotated[str, Path(max_length=20)],
    uc: Annotated[GetTradeHistory, Depends(get_trade_history)],
) -> Any:
    events = await uc.execute(principal.sub, symbol)
    return BaseRouter.send(
        response, presenter.present_history(events, trace_id=BaseRouter.trace_id(request))
    )
